# src/memoboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time (the access token is entered at runtime).
- Retry delay keeps "not configured" apart from an explicit zero.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "MEMO"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_optional_float(name: str) -> float | None:
    """
    Unset / blank / unparsable -> None.
    "0" stays 0.0, which is a real value (constant zero delay).
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Backend API ----
    base_api_url: str
    origin_url: str
    request_timeout_seconds: float

    # ---- Retry policy defaults ----
    retry_times: int
    retry_delay_seconds: float | None

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "memoboard").strip() or "memoboard"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/memoboard"))

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        base_api_url = _env(_k("BASE_API_URL"), "http://localhost:8000").strip()
        origin_url = _env(_k("ORIGIN_URL"), f"{app_name}://console").strip()
        request_timeout_seconds = max(0.1, _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 10.0))

        retry_times = max(0, _env_int(_k("RETRY_TIMES"), 0))
        retry_delay_seconds = _env_optional_float(_k("RETRY_DELAY_SECONDS"))
        if retry_delay_seconds is not None:
            retry_delay_seconds = max(0.0, retry_delay_seconds)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            console_enabled=console_enabled,
            base_api_url=base_api_url,
            origin_url=origin_url,
            request_timeout_seconds=request_timeout_seconds,
            retry_times=retry_times,
            retry_delay_seconds=retry_delay_seconds,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
