from __future__ import annotations

import random
from collections import Counter

import pytest

from gemgacha.api.models import DrawType, Grade
from gemgacha.core.draw import draw, draw_many, pick_grade, total_weight
from gemgacha.core.probability import DRAW_PROBABILITIES, GEMS_BY_GRADE, GRADE_SCAN_ORDER
from gemgacha.errors import InvalidArgumentError


def test_scan_order_is_rarest_first() -> None:
    assert GRADE_SCAN_ORDER == (Grade.unique, Grade.legendary, Grade.epic, Grade.rare, Grade.common)


@pytest.mark.parametrize("draw_type", list(DrawType))
def test_every_table_sums_to_100(draw_type: DrawType) -> None:
    assert total_weight(DRAW_PROBABILITIES[draw_type]) == pytest.approx(100)


def test_beginner_zero_roll_hits_first_non_empty_bucket() -> None:
    # unique has weight 0 for beginner, so the smallest roll lands in legendary.
    weights = DRAW_PROBABILITIES[DrawType.beginner]
    assert pick_grade(weights, 0.0) == Grade.legendary


def test_beginner_top_roll_is_common_and_unique_unreachable() -> None:
    weights = DRAW_PROBABILITIES[DrawType.beginner]
    assert pick_grade(weights, 99.9999) == Grade.common
    for roll in (0.0, 0.5, 0.999, 1.0, 4.99, 29.99, 99.0):
        assert pick_grade(weights, roll) != Grade.unique


@pytest.mark.parametrize(
    ("draw_type", "roll", "expected"),
    [
        (DrawType.normal, 0.19, Grade.unique),
        (DrawType.normal, 0.2, Grade.legendary),
        (DrawType.normal, 2.99, Grade.legendary),
        (DrawType.normal, 3.01, Grade.epic),
        (DrawType.normal, 49.99, Grade.rare),
        (DrawType.normal, 50.01, Grade.common),
        (DrawType.premium, 1.99, Grade.unique),
        (DrawType.premium, 9.99, Grade.legendary),
        (DrawType.premium, 29.99, Grade.epic),
        (DrawType.premium, 69.99, Grade.rare),
        (DrawType.premium, 70.01, Grade.common),
        (DrawType.luxury, 4.99, Grade.unique),
        (DrawType.luxury, 24.99, Grade.legendary),
        (DrawType.luxury, 49.99, Grade.epic),
        (DrawType.luxury, 79.99, Grade.rare),
        (DrawType.luxury, 80.01, Grade.common),
    ],
)
def test_cumulative_thresholds(draw_type: DrawType, roll: float, expected: Grade) -> None:
    assert pick_grade(DRAW_PROBABILITIES[draw_type], roll) == expected


def test_roll_past_every_threshold_falls_back_to_common() -> None:
    weights = {Grade.unique: 10.0, Grade.legendary: 10.0, Grade.epic: 0.0, Grade.rare: 0.0, Grade.common: 0.0}
    assert pick_grade(weights, 20.0000001) == Grade.common


def test_draw_scales_roll_by_total_weight(scripted_random) -> None:
    # 0.0199 * 100 = 1.99 < 2 (premium unique weight)
    result = draw(DrawType.premium, rng=scripted_random([0.0199]))
    assert result.grade == Grade.unique
    assert result.gem_id in (13, 14, 15)


def test_grade_maps_to_three_consecutive_ids() -> None:
    assert GEMS_BY_GRADE[Grade.common] == (1, 2, 3)
    assert GEMS_BY_GRADE[Grade.rare] == (4, 5, 6)
    assert GEMS_BY_GRADE[Grade.epic] == (7, 8, 9)
    assert GEMS_BY_GRADE[Grade.legendary] == (10, 11, 12)
    assert GEMS_BY_GRADE[Grade.unique] == (13, 14, 15)


def test_drawn_gem_belongs_to_drawn_grade() -> None:
    rng = random.Random(7)
    for result in draw_many(DrawType.luxury, 500, rng=rng):
        assert result.gem_id in GEMS_BY_GRADE[result.grade]


def test_same_seed_same_results() -> None:
    a = draw_many(DrawType.normal, 50, rng=random.Random(99))
    b = draw_many(DrawType.normal, 50, rng=random.Random(99))
    assert a == b


def test_beginner_distribution_is_roughly_right() -> None:
    rng = random.Random(2024)
    counts = Counter(r.grade for r in draw_many(DrawType.beginner, 20_000, rng=rng))

    assert counts[Grade.unique] == 0
    assert 0.66 < counts[Grade.common] / 20_000 < 0.74
    assert 0.22 < counts[Grade.rare] / 20_000 < 0.28


def test_unknown_draw_type_is_invalid_argument() -> None:
    with pytest.raises(InvalidArgumentError):
        draw("mythic", rng=random.Random(0))


def test_bad_weight_tables_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        total_weight({g: 0.0 for g in Grade})
    with pytest.raises(InvalidArgumentError):
        total_weight({Grade.common: 110.0, Grade.rare: -10.0})
