"""
Application settings, read once from the environment and passed explicitly.
The schedule generator takes no settings; only the API, auth and storage do.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Mapping

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def _default_db_path() -> Path:
    # project root / data / squashplan.db
    return Path(__file__).resolve().parent.parent / "data" / "squashplan.db"


@dataclass(frozen=True)
class Settings:
    db_path: Path
    jwt_secret_key: str = "dev-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days
    max_courts: int = 8
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from SQUASHPLAN_* / JWT_SECRET_KEY variables; unset keys keep defaults."""
    env = os.environ if environ is None else environ
    kwargs: dict = {"db_path": Path(env.get("SQUASHPLAN_DB_PATH") or _default_db_path())}
    if env.get("JWT_SECRET_KEY"):
        kwargs["jwt_secret_key"] = env["JWT_SECRET_KEY"]
    if env.get("SQUASHPLAN_TOKEN_EXPIRE_MINUTES"):
        kwargs["access_token_expire_minutes"] = int(env["SQUASHPLAN_TOKEN_EXPIRE_MINUTES"])
    if env.get("SQUASHPLAN_MAX_COURTS"):
        max_courts = int(env["SQUASHPLAN_MAX_COURTS"])
        if max_courts < 1:
            raise ValueError(f"SQUASHPLAN_MAX_COURTS must be >= 1, got {max_courts}")
        kwargs["max_courts"] = max_courts
    if env.get("SQUASHPLAN_LOG_LEVEL"):
        kwargs["log_level"] = env["SQUASHPLAN_LOG_LEVEL"].upper()
    if env.get("SQUASHPLAN_CORS_ORIGINS"):
        kwargs["cors_origins"] = tuple(
            o.strip() for o in env["SQUASHPLAN_CORS_ORIGINS"].split(",") if o.strip()
        )
    return Settings(**kwargs)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return load_settings()
