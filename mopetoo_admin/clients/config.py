from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    api_base_url: str
    timeout_seconds: float = 10.0
    retries: int = 2
    retry_backoff_ms: int = 150
    verify_ssl: bool = True
    page_size: int = 20


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    api_base_url = (os.getenv("MOPETOO_API_BASE_URL") or "").strip()
    _validate(bool(api_base_url), "Missing required config values: MOPETOO_API_BASE_URL")

    timeout_seconds = _read_float("MOPETOO_TIMEOUT_SECONDS", "10")
    _validate(timeout_seconds > 0, f"Invalid MOPETOO_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}")

    retries = _read_int("MOPETOO_RETRIES", "2")
    _validate(retries >= 0, f"Invalid MOPETOO_RETRIES: expected >= 0, got {retries}")

    retry_backoff_ms = _read_int("MOPETOO_RETRY_BACKOFF_MS", "150")
    _validate(retry_backoff_ms >= 0, f"Invalid MOPETOO_RETRY_BACKOFF_MS: expected >= 0, got {retry_backoff_ms}")

    page_size = _read_int("MOPETOO_PAGE_SIZE", "20")
    _validate(1 <= page_size <= 100, f"Invalid MOPETOO_PAGE_SIZE: expected 1..100, got {page_size}")

    return ClientConfig(
        api_base_url=api_base_url.rstrip("/"),
        timeout_seconds=timeout_seconds,
        retries=retries,
        retry_backoff_ms=retry_backoff_ms,
        verify_ssl=_coerce_bool(os.getenv("MOPETOO_VERIFY_SSL"), True),
        page_size=page_size,
    )
