from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Mapping

from gemgacha.api.models import Grade
from gemgacha.core.probability import GEMS_BY_GRADE, GRADE_SCAN_ORDER, weights_for
from gemgacha.errors import InvalidArgumentError


@dataclass(frozen=True, slots=True)
class DrawResult:
    gem_id: int
    grade: Grade


def total_weight(weights: Mapping[Grade, float]) -> float:
    if any(w < 0 for w in weights.values()):
        raise InvalidArgumentError("Grade weights must be non-negative")
    total = float(sum(weights.get(g, 0) for g in GRADE_SCAN_ORDER))
    if total <= 0:
        raise InvalidArgumentError("Grade weights must have a positive total")
    return total


def pick_grade(weights: Mapping[Grade, float], roll: float) -> Grade:
    """Return the first grade, rarest first, whose cumulative weight exceeds `roll`.

    `roll` is on the same scale as the weights (0 <= roll < total). A roll that
    clears every threshold, which only float drift can cause, lands on common.
    """

    cumulative = 0.0
    for grade in GRADE_SCAN_ORDER:
        cumulative += weights.get(grade, 0)
        if roll < cumulative:
            return grade
    return Grade.common


def draw(draw_type: str, *, rng: random.Random) -> DrawResult:
    weights = weights_for(draw_type)
    roll = rng.random() * total_weight(weights)
    grade = pick_grade(weights, roll)
    gem_id = rng.choice(GEMS_BY_GRADE[grade])
    return DrawResult(gem_id=gem_id, grade=grade)


def draw_many(draw_type: str, count: int, *, rng: random.Random) -> list[DrawResult]:
    return [draw(draw_type, rng=rng) for _ in range(count)]
