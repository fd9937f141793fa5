from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from gemgacha.api.models import DrawType, VolumeType
from gemgacha.errors import InvalidArgumentError


STARTING_POINTS = 1000
STARTING_PRISMS = 10

EARN_POINTS_MIN = 10
EARN_POINTS_MAX = 59
EARN_PRISM_CHANCE = 0.10


@dataclass(frozen=True, slots=True)
class Price:
    points: int = 0
    prisms: int = 0

    def __mul__(self, count: int) -> Price:
        return Price(points=self.points * count, prisms=self.prisms * count)

    def affordable(self, *, points: int, prisms: int) -> bool:
        return points >= self.points and prisms >= self.prisms


DRAW_COSTS: Mapping[DrawType, Price] = MappingProxyType(
    {
        DrawType.beginner: Price(points=10),
        DrawType.normal: Price(prisms=5),
        DrawType.premium: Price(prisms=30),
        DrawType.luxury: Price(prisms=40),
    }
)

VOLUME_PRICES: Mapping[VolumeType, Price] = MappingProxyType(
    {
        VolumeType.multi: Price(points=100_000),
        VolumeType.chorus: Price(points=55_000),
        VolumeType.lux: Price(prisms=100),
    }
)

# (minimum gem id, prisms), checked top-down.
EXTRACTION_TIERS: tuple[tuple[int, int], ...] = (
    (13, 10),
    (10, 5),
    (7, 3),
    (4, 2),
)


def draw_cost(draw_type: str, count: int = 1) -> Price:
    try:
        unit = DRAW_COSTS[DrawType(draw_type)]
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown draw type: {draw_type}") from e
    return unit * count


def volume_price(volume_type: str) -> Price:
    try:
        return VOLUME_PRICES[VolumeType(volume_type)]
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown volume type: {volume_type}") from e


def extraction_reward(gem_id: int) -> int:
    for min_id, reward in EXTRACTION_TIERS:
        if gem_id >= min_id:
            return reward
    return 1
