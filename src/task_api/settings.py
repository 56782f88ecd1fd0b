from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/tasks.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins, or '*'.
      Defaults to the local front-end dev server origins.
    - SEED_ON_STARTUP: 'true' (default) to insert sample tasks into an empty store
    - LOG_LEVEL: logging level name. Default 'INFO'
    - LOG_JSON: 'true' to emit JSON log lines instead of console output
    """

    persistence_backend: str = "memory"
    sqlite_db_path: str = "./data/tasks.db"
    cors_allow_origins: List[str] = field(default_factory=lambda: _parse_origins(DEFAULT_CORS_ORIGINS))
    seed_on_startup: bool = True
    log_level: str = "INFO"
    log_json: bool = False


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/tasks.db").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS)),
        seed_on_startup=_parse_bool(_get_env("SEED_ON_STARTUP", "true"), True),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        log_json=_parse_bool(_get_env("LOG_JSON", "false"), False),
    )
