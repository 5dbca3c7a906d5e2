"""Timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current UTC time for persisted timestamps."""

    return datetime.now(timezone.utc)
