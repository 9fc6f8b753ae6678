from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


_DEFAULT_REFERENCE_DIR = str(Path(__file__).resolve().parent / "reference" / "data")


def _bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    reference_data_dir: str = os.getenv("REFERENCE_DATA_DIR", _DEFAULT_REFERENCE_DIR)

    default_distance_km: int = _int("DEFAULT_DISTANCE_KM", 1500)
    claim_window_years: int = _int("CLAIM_WINDOW_YEARS", 6)
    max_delay_hours: int = _int("MAX_DELAY_HOURS", 72)

    reference_cache_ttl_seconds: int = _int("REFERENCE_CACHE_TTL_SECONDS", 300)
    reference_cache_max_entries: int = _int("REFERENCE_CACHE_MAX_ENTRIES", 1000)
    reference_cache_sweep_seconds: int = _int("REFERENCE_CACHE_SWEEP_SECONDS", 60)

    aviation_api_url: str = os.getenv("AVIATION_API_URL", "")
    aviation_api_key: str = os.getenv("AVIATION_API_KEY", "")
    http_timeout_seconds: int = _int("HTTP_TIMEOUT_SECONDS", 10)

    retry_max_attempts: int = _int("RETRY_MAX_ATTEMPTS", 3)
    retry_initial_delay_seconds: float = _float("RETRY_INITIAL_DELAY_SECONDS", 1.0)
    retry_max_delay_seconds: float = _float("RETRY_MAX_DELAY_SECONDS", 10.0)
    retry_backoff_factor: float = _float("RETRY_BACKOFF_FACTOR", 2.0)

    audit_log_path: str = os.getenv("AUDIT_LOG_PATH", "./data/eligibility_audit.log.jsonl")
    rate_limit_per_minute: int = _int("RATE_LIMIT_PER_MINUTE", 60)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    debug: bool = _bool("DEBUG", False)


SETTINGS = Settings()
