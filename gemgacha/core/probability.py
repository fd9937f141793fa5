from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from gemgacha.api.models import DrawType, Grade
from gemgacha.core.catalog import gem_ids_for_grade
from gemgacha.errors import InvalidArgumentError


# Rarest first. The draw engine accumulates weights in exactly this order.
GRADE_SCAN_ORDER: tuple[Grade, ...] = (
    Grade.unique,
    Grade.legendary,
    Grade.epic,
    Grade.rare,
    Grade.common,
)


def _weights(unique: float, legendary: float, epic: float, rare: float, common: float) -> Mapping[Grade, float]:
    return MappingProxyType(
        {
            Grade.unique: unique,
            Grade.legendary: legendary,
            Grade.epic: epic,
            Grade.rare: rare,
            Grade.common: common,
        }
    )


# Percent weights per draw type; each row sums to 100.
DRAW_PROBABILITIES: Mapping[DrawType, Mapping[Grade, float]] = MappingProxyType(
    {
        DrawType.beginner: _weights(0, 1, 4, 25, 70),
        DrawType.normal: _weights(0.2, 2.8, 12, 35, 50),
        DrawType.premium: _weights(2, 8, 20, 40, 30),
        DrawType.luxury: _weights(5, 20, 25, 30, 20),
    }
)

GEMS_BY_GRADE: Mapping[Grade, tuple[int, ...]] = MappingProxyType({g: gem_ids_for_grade(g) for g in Grade})


def weights_for(draw_type: str) -> Mapping[Grade, float]:
    try:
        return DRAW_PROBABILITIES[DrawType(draw_type)]
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown draw type: {draw_type}") from e
