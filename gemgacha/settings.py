from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Settings:
    store: str = "memory"
    redis_url: str = "redis://localhost:6379/0"
    account_ttl_seconds: int = 0
    max_draw_count: int = 100
    cors_origins: tuple[str, ...] = field(default=("*",))
    log_level: str = "INFO"
    seed: int | None = None


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def load_settings(*, env_file: Path | None = None) -> Settings:
    """Read settings from the environment, after loading `.env` if present.

    Values already in the environment win over the file.
    """

    from dotenv import load_dotenv

    path = env_file if env_file is not None else Path.cwd() / ".env"
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)

    store = os.environ.get("GEMGACHA_STORE", "memory").strip().lower()
    if store not in {"memory", "redis"}:
        raise ValueError(f"GEMGACHA_STORE must be 'memory' or 'redis', got {store!r}")

    max_draw_count = _int_env("GEMGACHA_MAX_DRAW_COUNT", 100)
    if max_draw_count < 1:
        raise ValueError("GEMGACHA_MAX_DRAW_COUNT must be at least 1")

    origins = tuple(o.strip() for o in os.environ.get("GEMGACHA_CORS_ORIGINS", "*").split(",") if o.strip())

    raw_seed = os.environ.get("GEMGACHA_SEED")
    seed = _int_env("GEMGACHA_SEED", 0) if raw_seed else None

    return Settings(
        store=store,
        redis_url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
        account_ttl_seconds=max(0, _int_env("GEMGACHA_ACCOUNT_TTL_SECONDS", 0)),
        max_draw_count=max_draw_count,
        cors_origins=origins or ("*",),
        log_level=os.environ.get("GEMGACHA_LOG_LEVEL", "INFO").upper(),
        seed=seed,
    )
