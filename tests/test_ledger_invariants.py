from __future__ import annotations

import random

import pytest

from gemgacha import ledger
from gemgacha.account_store import AccountStore, InMemoryAccountStore
from gemgacha.api.models import Account, DrawType, EquipAction, VolumeType
from gemgacha.errors import LedgerError


def _assert_invariants(account: Account) -> None:
    assert account.points >= 0
    assert account.prisms >= 0
    assert all(count > 0 for count in account.inventory.values())
    assert len(account.equipped_gems) <= 1
    for gem_id in account.equipped_gems:
        assert account.inventory.get(gem_id, 0) >= 1


def _random_op(*, store: AccountStore, uid: str, rng: random.Random, ops_rng: random.Random) -> None:
    account = store.require(uid)
    owned = sorted(account.inventory) or [ops_rng.randint(1, 15)]
    op = ops_rng.choice(["earn", "draw", "draw", "buy", "equip", "unequip", "extract", "extract"])

    if op == "earn":
        ledger.earn_points(store=store, user_id=uid, rng=rng)
    elif op == "draw":
        ledger.draw_gacha(
            store=store,
            user_id=uid,
            draw_type=ops_rng.choice(list(DrawType)),
            count=ops_rng.randint(1, 12),
            rng=rng,
        )
    elif op == "buy":
        ledger.buy_volume(store=store, user_id=uid, volume_type=ops_rng.choice(list(VolumeType)))
    elif op in ("equip", "unequip"):
        ledger.equip_gem(store=store, user_id=uid, gem_id=ops_rng.choice(owned), action=EquipAction(op))
    else:
        ledger.extract_gem(store=store, user_id=uid, gem_id=ops_rng.choice(owned + [ops_rng.randint(1, 15)]))


@pytest.mark.parametrize("seed", range(20))
def test_random_operation_sequences_keep_invariants(seed: int) -> None:
    store = InMemoryAccountStore()
    uid = ledger.login(store=store)
    rng = random.Random(seed)
    ops_rng = random.Random(seed + 10_000)

    failures = 0
    for _ in range(300):
        before = store.require(uid)
        try:
            _random_op(store=store, uid=uid, rng=rng, ops_rng=ops_rng)
        except LedgerError:
            failures += 1
            # Rejected operations never leave partial changes behind.
            assert store.require(uid) == before
        _assert_invariants(store.require(uid))

    # The sequence should exercise both paths.
    assert failures > 0
