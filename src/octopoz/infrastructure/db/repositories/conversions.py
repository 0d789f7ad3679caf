from __future__ import annotations

from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back naive even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
