from __future__ import annotations

import logging
import random

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gemgacha.account_store import AccountStore, InMemoryAccountStore, RedisAccountStore
from gemgacha.api.routes import router
from gemgacha.settings import Settings, load_settings

APP_NAME = "gemgacha"
APP_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> AccountStore:
    if settings.store == "redis":
        from gemgacha.infra.redis_client import create_redis

        logger.info("using redis account store at %s", settings.redis_url)
        return RedisAccountStore(r=create_redis(settings.redis_url), ttl_seconds=settings.account_ttl_seconds)
    return InMemoryAccountStore()


def _error_body(message: str) -> dict[str, object]:
    return {"success": False, "error": message}


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc.detail)))


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Unknown draw/volume types and malformed numbers are client errors, not 422s.
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body("; ".join(parts) or "Invalid request"))


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_body(str(exc)))


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()

    # Configure logging
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    app = FastAPI(title=APP_NAME, version=APP_VERSION)
    app.state.settings = settings
    app.state.store = build_store(settings)
    app.state.rng = random.Random(settings.seed)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
    app.include_router(router)

    @app.get("/info")
    async def info() -> dict[str, str]:
        return {"name": APP_NAME, "version": APP_VERSION}

    return app


app = create_app()
