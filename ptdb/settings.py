from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_SYNC_INTERVAL_MS = 60000


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    # Storage
    db_path: str
    sync_interval_ms: int

    # Debug
    debug_log_requests: bool


def get_settings() -> Settings:
    db_path = os.getenv("PTDB_PATH", "data/ptdb").strip() or "data/ptdb"
    sync_interval_ms = _env_positive_int("PTDB_SYNC_INTERVAL", DEFAULT_SYNC_INTERVAL_MS)
    debug_log_requests = _env_bool("PTDB_DEBUG_LOG_REQUESTS", False)

    return Settings(
        db_path=db_path,
        sync_interval_ms=sync_interval_ms,
        debug_log_requests=debug_log_requests,
    )
