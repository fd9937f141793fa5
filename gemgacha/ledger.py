from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from uuid import uuid4

from gemgacha.account_store import AccountStore
from gemgacha.api.models import Account, EquipAction, VolumeType
from gemgacha.core.draw import DrawResult, draw_many
from gemgacha.core.pricing import (
    EARN_POINTS_MAX,
    EARN_POINTS_MIN,
    EARN_PRISM_CHANCE,
    STARTING_POINTS,
    STARTING_PRISMS,
    Price,
    draw_cost,
    extraction_reward,
    volume_price,
)
from gemgacha.errors import (
    AlreadyOwnedError,
    InsufficientFundsError,
    InvalidArgumentError,
    NotEquippedError,
    NotOwnedError,
    SlotFullError,
)
from gemgacha.fsm import EquipSlotFSM


logger = logging.getLogger(__name__)

DEFAULT_MAX_DRAW_COUNT = 100


@dataclass(frozen=True, slots=True)
class EarnResult:
    earned_points: int
    prisms_earned: int
    new_points: int
    new_prisms: int


@dataclass(frozen=True, slots=True)
class DrawOutcome:
    results: list[DrawResult]
    account: Account


@dataclass(frozen=True, slots=True)
class ExtractOutcome:
    prism_reward: int
    account: Account


def new_account() -> Account:
    return Account(points=STARTING_POINTS, prisms=STARTING_PRISMS)


def _mint_user_id() -> str:
    return f"user_{uuid4().hex[:12]}"


def _debit(account: Account, price: Price) -> None:
    """Check both balances before touching either."""

    if not price.affordable(points=account.points, prisms=account.prisms):
        raise InsufficientFundsError(
            f"Insufficient funds: need {price.points} points and {price.prisms} prisms, "
            f"have {account.points} points and {account.prisms} prisms"
        )
    account.points -= price.points
    account.prisms -= price.prisms


def _require_owned(account: Account, gem_id: int) -> None:
    if account.inventory.get(gem_id, 0) < 1:
        raise NotOwnedError("You do not own this gem")


def login(*, store: AccountStore, user_id: str | None = None) -> str:
    if user_id and store.exists(user_id):
        return user_id

    new_id = _mint_user_id()
    while store.exists(new_id):
        new_id = _mint_user_id()
    store.create(new_id, new_account())
    logger.info("created account %s", new_id)
    return new_id


def get_game_data(*, store: AccountStore, user_id: str) -> Account:
    return store.require(user_id)


def earn_points(*, store: AccountStore, user_id: str, rng: random.Random) -> EarnResult:
    with store.transaction(user_id) as account:
        earned = rng.randint(EARN_POINTS_MIN, EARN_POINTS_MAX)
        prisms_earned = 1 if rng.random() < EARN_PRISM_CHANCE else 0
        account.points += earned
        account.prisms += prisms_earned
        return EarnResult(
            earned_points=earned,
            prisms_earned=prisms_earned,
            new_points=account.points,
            new_prisms=account.prisms,
        )


def draw_gacha(
    *,
    store: AccountStore,
    user_id: str,
    draw_type: str,
    count: int = 1,
    rng: random.Random,
    max_count: int = DEFAULT_MAX_DRAW_COUNT,
) -> DrawOutcome:
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidArgumentError("count must be an integer")
    if count < 1 or count > max_count:
        raise InvalidArgumentError(f"count must be between 1 and {max_count}")

    cost = draw_cost(draw_type, count)

    with store.transaction(user_id) as account:
        try:
            _debit(account, cost)
        except InsufficientFundsError:
            logger.debug("draw rejected for %s: %s x%d unaffordable", user_id, draw_type, count)
            raise

        results = draw_many(draw_type, count, rng=rng)
        for result in results:
            account.inventory[result.gem_id] = account.inventory.get(result.gem_id, 0) + 1

        logger.info(
            "%s drew %s x%d: %s",
            user_id,
            draw_type,
            count,
            ",".join(f"{r.gem_id}:{r.grade.value}" for r in results),
        )
        return DrawOutcome(results=results, account=account.model_copy(deep=True))


def buy_volume(*, store: AccountStore, user_id: str, volume_type: str) -> Account:
    price = volume_price(volume_type)

    with store.transaction(user_id) as account:
        key = VolumeType(volume_type)
        if account.volumes.get(key, False):
            raise AlreadyOwnedError("Volume already owned")
        _debit(account, price)
        account.volumes[key] = True

        logger.info("%s bought volume %s", user_id, volume_type)
        return account.model_copy(deep=True)


def equip_gem(*, store: AccountStore, user_id: str, gem_id: int, action: str) -> list[int]:
    try:
        act = EquipAction(action)
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown equip action: {action}") from e

    with store.transaction(user_id) as account:
        _require_owned(account, gem_id)
        slot = EquipSlotFSM(account)

        if act == EquipAction.equip:
            if slot.is_full:
                raise SlotFullError("Equip slot is full")
            slot.equip()
            account.equipped_gems.append(gem_id)
        else:
            if gem_id not in account.equipped_gems:
                raise NotEquippedError("Gem is not equipped")
            slot.unequip()
            account.equipped_gems.remove(gem_id)

        return list(account.equipped_gems)


def extract_gem(*, store: AccountStore, user_id: str, gem_id: int) -> ExtractOutcome:
    with store.transaction(user_id) as account:
        _require_owned(account, gem_id)

        reward = extraction_reward(gem_id)
        remaining = account.inventory[gem_id] - 1
        if remaining > 0:
            account.inventory[gem_id] = remaining
        else:
            del account.inventory[gem_id]
            # Equipped gems must stay in the inventory.
            if gem_id in account.equipped_gems:
                account.equipped_gems.remove(gem_id)
        account.prisms += reward

        logger.info("%s extracted gem %d for %d prisms", user_id, gem_id, reward)
        return ExtractOutcome(prism_reward=reward, account=account.model_copy(deep=True))
