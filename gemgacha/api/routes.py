from __future__ import annotations

import random

from fastapi import APIRouter, Depends, HTTPException

from gemgacha.account_store import AccountStore
from gemgacha.api.deps import get_rng, get_settings, get_store
from gemgacha.api.models import (
    BuyVolumeRequest,
    BuyVolumeResponse,
    DrawRequest,
    DrawResponse,
    DrawResultModel,
    EarnPointsRequest,
    EarnPointsResponse,
    EquipGemRequest,
    EquipGemResponse,
    ExtractGemRequest,
    ExtractGemResponse,
    GameDataResponse,
    GemCatalogResponse,
    GemModel,
    LoginRequest,
    LoginResponse,
    PriceModel,
    RatesResponse,
)
from gemgacha.core.catalog import list_gems
from gemgacha.core.pricing import DRAW_COSTS
from gemgacha.core.probability import DRAW_PROBABILITIES
from gemgacha.errors import LedgerError
from gemgacha import ledger
from gemgacha.settings import Settings

router = APIRouter()
api = APIRouter(prefix="/api")

# Routes that reach the ledger are sync so store lock waits run in the threadpool.


def _http_error(e: LedgerError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@api.post("/login", response_model=LoginResponse)
def login_route(payload: LoginRequest | None = None, store: AccountStore = Depends(get_store)) -> LoginResponse:
    user_id = ledger.login(store=store, user_id=payload.user_id if payload else None)
    return LoginResponse(user_id=user_id)


@api.get("/user/gamedata/{user_id}", response_model=GameDataResponse)
def game_data_route(user_id: str, store: AccountStore = Depends(get_store)) -> GameDataResponse:
    try:
        account = ledger.get_game_data(store=store, user_id=user_id)
    except LedgerError as e:
        raise _http_error(e) from e
    return GameDataResponse.model_validate(account.model_dump())


@api.post("/user/earn-points", response_model=EarnPointsResponse)
def earn_points_route(
    payload: EarnPointsRequest,
    store: AccountStore = Depends(get_store),
    rng: random.Random = Depends(get_rng),
) -> EarnPointsResponse:
    try:
        result = ledger.earn_points(store=store, user_id=payload.user_id, rng=rng)
    except LedgerError as e:
        raise _http_error(e) from e
    return EarnPointsResponse(
        earned_points=result.earned_points,
        prisms_earned=result.prisms_earned,
        new_points=result.new_points,
        new_prisms=result.new_prisms,
    )


@api.post("/gacha/draw", response_model=DrawResponse)
def draw_route(
    payload: DrawRequest,
    store: AccountStore = Depends(get_store),
    rng: random.Random = Depends(get_rng),
    settings: Settings = Depends(get_settings),
) -> DrawResponse:
    try:
        outcome = ledger.draw_gacha(
            store=store,
            user_id=payload.user_id,
            draw_type=payload.type,
            count=payload.count,
            rng=rng,
            max_count=settings.max_draw_count,
        )
    except LedgerError as e:
        raise _http_error(e) from e

    return DrawResponse(
        results=[DrawResultModel(gem_id=r.gem_id, grade=r.grade) for r in outcome.results],
        new_points=outcome.account.points,
        new_prisms=outcome.account.prisms,
        new_inventory=outcome.account.inventory,
    )


@api.post("/user/buy-volume", response_model=BuyVolumeResponse)
def buy_volume_route(payload: BuyVolumeRequest, store: AccountStore = Depends(get_store)) -> BuyVolumeResponse:
    try:
        account = ledger.buy_volume(store=store, user_id=payload.user_id, volume_type=payload.type)
    except LedgerError as e:
        raise _http_error(e) from e
    return BuyVolumeResponse(volumes=account.volumes, points=account.points, prisms=account.prisms)


@api.post("/user/equip-gem", response_model=EquipGemResponse)
def equip_gem_route(payload: EquipGemRequest, store: AccountStore = Depends(get_store)) -> EquipGemResponse:
    try:
        equipped = ledger.equip_gem(store=store, user_id=payload.user_id, gem_id=payload.gem_id, action=payload.action)
    except LedgerError as e:
        raise _http_error(e) from e
    return EquipGemResponse(equipped_gems=equipped)


@api.post("/user/extract-gem", response_model=ExtractGemResponse)
def extract_gem_route(payload: ExtractGemRequest, store: AccountStore = Depends(get_store)) -> ExtractGemResponse:
    try:
        outcome = ledger.extract_gem(store=store, user_id=payload.user_id, gem_id=payload.gem_id)
    except LedgerError as e:
        raise _http_error(e) from e
    return ExtractGemResponse(
        prism_reward=outcome.prism_reward,
        new_prisms=outcome.account.prisms,
        new_inventory=outcome.account.inventory,
    )


@api.get("/gems", response_model=GemCatalogResponse)
async def gems_route() -> GemCatalogResponse:
    return GemCatalogResponse(
        gems=[
            GemModel(
                id=g.id,
                name=g.name,
                glyph=g.glyph,
                grade=g.grade,
                chorus_value=g.chorus_value,
                multiplier=g.multiplier,
                lux_value=g.lux_value,
            )
            for g in list_gems()
        ]
    )


@api.get("/gacha/rates", response_model=RatesResponse)
async def rates_route() -> RatesResponse:
    """Published drop rates and per-draw costs, for the client's rate table."""

    return RatesResponse(
        rates={t: dict(w) for t, w in DRAW_PROBABILITIES.items()},
        costs={t: PriceModel(points=p.points, prisms=p.prisms) for t, p in DRAW_COSTS.items()},
    )


router.include_router(api)
