from __future__ import annotations

from dataclasses import dataclass

from gemgacha.api.models import Grade
from gemgacha.errors import InvalidArgumentError


@dataclass(frozen=True, slots=True)
class GemEntry:
    id: int
    name: str
    glyph: str
    grade: Grade
    chorus_value: int
    multiplier: float
    lux_value: int


# Per-grade yields shown next to each gem in the client.
# (chorus_value, multiplier, lux_value)
_GRADE_YIELDS: dict[Grade, tuple[int, float, int]] = {
    Grade.common: (1, 1.0, 1),
    Grade.rare: (3, 1.2, 2),
    Grade.epic: (8, 1.5, 4),
    Grade.legendary: (20, 2.0, 10),
    Grade.unique: (50, 3.0, 25),
}

_GEM_NAMES: tuple[tuple[str, str], ...] = (
    ("Quartz", "🤍"),
    ("Agate", "🟤"),
    ("Jasper", "🟠"),
    ("Amethyst", "🟣"),
    ("Topaz", "🟡"),
    ("Garnet", "🔴"),
    ("Sapphire", "🔷"),
    ("Emerald", "🟢"),
    ("Ruby", "❤️"),
    ("Diamond", "💎"),
    ("Opal", "🌈"),
    ("Alexandrite", "🔮"),
    ("Painite", "🌋"),
    ("Red Beryl", "🌹"),
    ("Taaffeite", "🌌"),
)


def gem_ids_for_grade(grade: Grade) -> tuple[int, int, int]:
    """Grade rank g owns ids 3g-2, 3g-1 and 3g."""

    top = 3 * grade.rank
    return (top - 2, top - 1, top)


def grade_for_gem_id(gem_id: int) -> Grade:
    if gem_id < 1 or gem_id > len(_GEM_NAMES):
        raise InvalidArgumentError(f"Unknown gem id: {gem_id}")
    return list(Grade)[(gem_id - 1) // 3]


def _build_catalog() -> dict[int, GemEntry]:
    catalog: dict[int, GemEntry] = {}
    for idx, (name, glyph) in enumerate(_GEM_NAMES, start=1):
        grade = grade_for_gem_id(idx)
        chorus_value, multiplier, lux_value = _GRADE_YIELDS[grade]
        catalog[idx] = GemEntry(
            id=idx,
            name=name,
            glyph=glyph,
            grade=grade,
            chorus_value=chorus_value,
            multiplier=multiplier,
            lux_value=lux_value,
        )
    return catalog


GEM_CATALOG: dict[int, GemEntry] = _build_catalog()


def get_gem(gem_id: int) -> GemEntry:
    gem = GEM_CATALOG.get(gem_id)
    if gem is None:
        raise InvalidArgumentError(f"Unknown gem id: {gem_id}")
    return gem


def list_gems() -> list[GemEntry]:
    return [GEM_CATALOG[i] for i in sorted(GEM_CATALOG)]
