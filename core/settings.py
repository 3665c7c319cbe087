from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

SUPPORTED_ENVIRONMENTS = {"development", "staging", "production", "test"}
SUPPORTED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
IN_MEMORY_RATE_LIMIT_STORAGE = "memory://"
DEFAULT_PRICE_RATE_LIMITS = "price:30/minute,distance:20/minute"
DEFAULT_MAX_SERVICE_DISTANCE_KM = 50.0


def _split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return tuple()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env(name: str) -> str | None:
    raw_value = os.getenv(name)
    if raw_value is None:
        return None
    normalized = raw_value.strip()
    return normalized or None


def _env_flag(name: str, default: str = "false") -> bool:
    return (_env(name) or default).lower() in {"1", "true", "yes"}


def _is_production() -> bool:
    return (_env("ENV") or "development").lower() == "production"


def collect_missing_required_env_vars() -> list[str]:
    missing: list[str] = []

    if _is_production():
        # Counters must be shared between workers.
        if _env("RATE_LIMIT_STORAGE_URI") is None:
            missing.append("RATE_LIMIT_STORAGE_URI")
        if _env("CORS_ORIGINS") is None:
            missing.append("CORS_ORIGINS")

    return sorted(set(missing))


def collect_invalid_env_values() -> list[str]:
    invalid_values: list[str] = []

    env = (_env("ENV") or "development").lower()
    if env not in SUPPORTED_ENVIRONMENTS:
        invalid_values.append("ENV must be one of: development, staging, production, test")

    storage_uri = _env("RATE_LIMIT_STORAGE_URI")
    if env == "production" and storage_uri == IN_MEMORY_RATE_LIMIT_STORAGE:
        invalid_values.append("RATE_LIMIT_STORAGE_URI must not be memory:// when ENV=production")

    log_level = (_env("LOG_LEVEL") or "INFO").upper()
    if log_level not in SUPPORTED_LOG_LEVELS:
        invalid_values.append("LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")

    max_distance = _env("MAX_SERVICE_DISTANCE_KM")
    if max_distance is not None:
        try:
            parsed_distance = float(max_distance)
            if parsed_distance <= 0:
                raise ValueError("must be positive")
        except ValueError:
            invalid_values.append("MAX_SERVICE_DISTANCE_KM must be a positive number")

    for entry in _split_csv(_env("PRICE_RATE_LIMITS")):
        if ":" not in entry:
            invalid_values.append(f"PRICE_RATE_LIMITS entry '{entry}' must look like group:rule")

    return invalid_values


def validate_required_environment() -> None:
    missing_vars = collect_missing_required_env_vars()
    invalid_values = collect_invalid_env_values()
    if not missing_vars and not invalid_values:
        return

    message_lines = ["Application startup blocked by invalid environment configuration."]
    if missing_vars:
        message_lines.append("")
        message_lines.append("Missing required environment variables:")
        message_lines.extend(f"- {name}" for name in missing_vars)
    if invalid_values:
        message_lines.append("")
        message_lines.append("Invalid environment values:")
        message_lines.extend(f"- {message}" for message in invalid_values)
    raise RuntimeError("\n".join(message_lines))


@dataclass(frozen=True)
class Settings:
    env: str
    cors_origins: tuple[str, ...]
    debug_include_error_details: bool
    rate_limit_storage_uri: str
    price_rate_limits: str
    redis_url: str | None
    google_maps_api_key: str | None
    log_level: str
    max_service_distance_km: float

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    validate_required_environment()

    max_distance = _env("MAX_SERVICE_DISTANCE_KM")
    return Settings(
        env=(_env("ENV") or "development").lower(),
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS")),
        debug_include_error_details=_env_flag("DEBUG_INCLUDE_ERROR_DETAILS"),
        rate_limit_storage_uri=_env("RATE_LIMIT_STORAGE_URI") or IN_MEMORY_RATE_LIMIT_STORAGE,
        price_rate_limits=_env("PRICE_RATE_LIMITS") or DEFAULT_PRICE_RATE_LIMITS,
        redis_url=_env("REDIS_URL"),
        google_maps_api_key=_env("GOOGLE_MAPS_API_KEY"),
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
        max_service_distance_km=float(max_distance) if max_distance else DEFAULT_MAX_SERVICE_DISTANCE_KM,
    )
