from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_UPLOAD_BYTES = 1024 * 1024
DEFAULT_LOG_LEVEL = "INFO"

ENV_MAX_UPLOAD_BYTES = "SYSMON_EVENTS_MAX_UPLOAD_BYTES"
ENV_LOG_LEVEL = "SYSMON_EVENTS_LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_level: str = DEFAULT_LOG_LEVEL


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {value}.")
    return value


def load_settings() -> Settings:
    return Settings(
        max_upload_bytes=_env_int(ENV_MAX_UPLOAD_BYTES, DEFAULT_MAX_UPLOAD_BYTES),
        log_level=(os.environ.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
    )
