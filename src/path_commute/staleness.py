"""Classify how old a feed timestamp is."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class StalenessStatus:
    status: str  # fresh, recent, stale, very-stale, error or unknown
    text: str


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values and 'Z' as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def get_staleness_status(
    last_updated: Optional[str], error: Optional[str], now: Optional[datetime] = None
) -> StalenessStatus:
    if error:
        return StalenessStatus(status="error", text="Error fetching data")
    if not last_updated:
        return StalenessStatus(status="unknown", text="No data")

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    try:
        updated = parse_timestamp(last_updated)
    except ValueError:
        return StalenessStatus(status="unknown", text="No data")
    diff_minutes = math.floor((now - updated).total_seconds() / 60)

    if diff_minutes <= 1:
        return StalenessStatus(status="fresh", text="Live")
    if diff_minutes <= 5:
        return StalenessStatus(status="recent", text="Recent")
    if diff_minutes <= 15:
        return StalenessStatus(status="stale", text="Stale")
    return StalenessStatus(status="very-stale", text="Very stale")
