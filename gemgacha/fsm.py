from __future__ import annotations

from statemachine import State, StateMachine

from gemgacha.api.models import Account


EQUIP_SLOT_CAPACITY = 1


class EquipSlotFSM(StateMachine):
    """FSM wrapper around an account's single equip slot.

    - states: empty <-> occupied
    - the ledger mutates `equipped_gems`; the FSM only guards transitions.
    """

    empty = State("empty", value="empty", initial=True)
    occupied = State("occupied", value="occupied")

    equip = empty.to(occupied)
    unequip = occupied.to(empty)

    def __init__(self, account: Account):
        start = "occupied" if len(account.equipped_gems) >= EQUIP_SLOT_CAPACITY else "empty"
        super().__init__(start_value=start)

    @property
    def is_full(self) -> bool:
        return self.current_state == self.occupied
