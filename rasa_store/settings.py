from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from . import paths


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Remote API
    api_base_url: str
    api_timeout_s: float

    # Persistence (default: in-memory; opt in to disk)
    persist_to_disk: bool
    data_dir: Path
    store_key: str
    backup_key: str

    # Debug
    debug_log_otps: bool


def get_settings() -> Settings:
    api_base_url = os.getenv("RASA_API_BASE_URL", "http://localhost:5000/api").rstrip("/")
    # Non-positive timeouts would mean "wait forever"; clamp to the default.
    api_timeout_s = _env_float("RASA_API_TIMEOUT_S", 5.0)
    if api_timeout_s <= 0:
        api_timeout_s = 5.0

    persist_to_disk = _env_bool("PERSIST_TO_DISK", False)
    raw_dir = os.getenv("RASA_DATA_DIR", "").strip()
    base_dir = Path(raw_dir).expanduser() if raw_dir else paths.data_dir()

    store_key = os.getenv("RASA_STORE_KEY", "rasa_db").strip() or "rasa_db"
    backup_key = os.getenv("RASA_BACKUP_KEY", "rasa_db_backups").strip() or "rasa_db_backups"

    # NOTE: never enable outside local development; codes end up in logs.
    debug_log_otps = _env_bool("DEBUG_LOG_OTPS", False)

    return Settings(
        api_base_url=api_base_url,
        api_timeout_s=api_timeout_s,
        persist_to_disk=persist_to_disk,
        data_dir=base_dir,
        store_key=store_key,
        backup_key=backup_key,
        debug_log_otps=debug_log_otps,
    )
