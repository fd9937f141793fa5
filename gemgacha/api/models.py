from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DrawType(StrEnum):
    beginner = "beginner"
    normal = "normal"
    premium = "premium"
    luxury = "luxury"


class Grade(StrEnum):
    common = "common"
    rare = "rare"
    epic = "epic"
    legendary = "legendary"
    unique = "unique"

    @property
    def rank(self) -> int:
        """1 for common up to 5 for unique."""

        return list(Grade).index(self) + 1


class VolumeType(StrEnum):
    multi = "multi"
    chorus = "chorus"
    lux = "lux"


class EquipAction(StrEnum):
    equip = "equip"
    unequip = "unequip"


class CamelModel(BaseModel):
    # Wire format is camelCase (userId, gemId, equippedGems, ...).
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _default_volumes() -> dict[VolumeType, bool]:
    return {v: False for v in VolumeType}


class Account(CamelModel):
    points: int = Field(0, ge=0)
    prisms: int = Field(0, ge=0)

    # gem id -> owned count. Zero counts are deleted, never stored.
    inventory: dict[int, int] = Field(default_factory=dict)

    volumes: dict[VolumeType, bool] = Field(default_factory=_default_volumes)

    # Single equip slot; every id here is also in inventory.
    equipped_gems: list[int] = Field(default_factory=list, max_length=1)


# Requests


class LoginRequest(CamelModel):
    user_id: str | None = None

    @field_validator("user_id", mode="before")
    @classmethod
    def _scalar_to_str(cls, v: Any) -> str | None:
        # Login never fails: numbers become strings, anything else is "no id".
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, str):
            return v
        return None


class UserRequest(CamelModel):
    user_id: str = Field(..., min_length=1)


class EarnPointsRequest(UserRequest):
    pass


class DrawRequest(UserRequest):
    type: DrawType
    count: int = Field(1, ge=1)


class BuyVolumeRequest(UserRequest):
    type: VolumeType


class ExtractGemRequest(UserRequest):
    gem_id: int


class EquipGemRequest(ExtractGemRequest):
    action: EquipAction


# Responses


class SuccessResponse(CamelModel):
    success: bool = True


class LoginResponse(SuccessResponse):
    user_id: str


class GameDataResponse(SuccessResponse, Account):
    pass


class EarnPointsResponse(SuccessResponse):
    earned_points: int
    prisms_earned: int
    new_points: int
    new_prisms: int


class DrawResultModel(CamelModel):
    gem_id: int
    grade: Grade


class DrawResponse(SuccessResponse):
    results: list[DrawResultModel]
    new_points: int
    new_prisms: int
    new_inventory: dict[int, int]


class BuyVolumeResponse(SuccessResponse):
    volumes: dict[VolumeType, bool]
    points: int
    prisms: int


class EquipGemResponse(SuccessResponse):
    equipped_gems: list[int]


class ExtractGemResponse(SuccessResponse):
    prism_reward: int
    new_prisms: int
    new_inventory: dict[int, int]


class GemModel(CamelModel):
    id: int
    name: str
    glyph: str
    grade: Grade
    chorus_value: int
    multiplier: float
    lux_value: int


class GemCatalogResponse(SuccessResponse):
    gems: list[GemModel]


class PriceModel(CamelModel):
    points: int = 0
    prisms: int = 0


class RatesResponse(SuccessResponse):
    rates: dict[DrawType, dict[Grade, float]]
    costs: dict[DrawType, PriceModel]
