from __future__ import annotations

import os
from datetime import time

from octopoz.application.transactions import RetryPolicy
from octopoz.domain.table.allocation import SlotPolicy, parse_slot


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc


def _time_env(name: str, default: time) -> time:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return parse_slot(raw.strip())
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a time of day as HH:MM, got {raw!r}") from exc


def load_slot_policy() -> SlotPolicy:
    defaults = SlotPolicy()
    try:
        return SlotPolicy(
            step_minutes=_int_env("SLOT_STEP_MINUTES", defaults.step_minutes),
            opening_time=_time_env("SLOT_OPENING_TIME", defaults.opening_time),
            closing_time=_time_env("SLOT_CLOSING_TIME", defaults.closing_time),
            buffer_minutes=_int_env("RESERVATION_BUFFER_MINUTES", defaults.buffer_minutes),
        )
    except ValueError as exc:
        raise RuntimeError(f"invalid slot policy: {exc}") from exc


def load_retry_policy() -> RetryPolicy:
    defaults = RetryPolicy()
    backoff_seconds = _float_env("TX_BACKOFF_SECONDS", defaults.backoff_seconds)
    try:
        return RetryPolicy(
            max_attempts=_int_env("TX_MAX_ATTEMPTS", defaults.max_attempts),
            backoff_seconds=backoff_seconds,
            max_backoff_seconds=max(defaults.max_backoff_seconds, backoff_seconds),
            jitter_factor=defaults.jitter_factor,
        )
    except ValueError as exc:
        raise RuntimeError(f"invalid retry policy: {exc}") from exc


def cors_allow_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def app_env() -> str:
    return os.getenv("APP_ENV", "dev").strip().lower()


def redis_url() -> str | None:
    return os.getenv("REDIS_URL") or None


def otel_service_name() -> str:
    return os.getenv("OTEL_SERVICE_NAME", "octopoz-engine")


def otel_exporter_endpoint() -> str | None:
    return os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or None


def otel_sample_ratio() -> float:
    ratio = _float_env("OTEL_TRACES_SAMPLE_RATIO", 1.0)
    if not 0.0 <= ratio <= 1.0:
        raise RuntimeError(f"OTEL_TRACES_SAMPLE_RATIO must be within [0, 1], got {ratio}")
    return ratio
