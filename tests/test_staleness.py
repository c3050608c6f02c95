"""Tests for feed staleness classification."""

from datetime import datetime, timedelta, timezone

import pytest
from path_commute.staleness import get_staleness_status

NOW = datetime(2024, 5, 6, 12, 0, tzinfo=timezone.utc)


def _ago(**kwargs) -> str:
    return (NOW - timedelta(**kwargs)).isoformat()


def test_error_wins():
    status = get_staleness_status(_ago(seconds=5), "HTTP 500", now=NOW)
    assert status.status == "error"
    assert status.text == "Error fetching data"


def test_missing_timestamp():
    assert get_staleness_status(None, None, now=NOW).status == "unknown"


def test_unparseable_timestamp():
    assert get_staleness_status("yesterday-ish", None, now=NOW).status == "unknown"


@pytest.mark.parametrize("age,expected", [
    (timedelta(seconds=10), "fresh"),
    (timedelta(minutes=1, seconds=59), "fresh"),
    (timedelta(minutes=2), "recent"),
    (timedelta(minutes=5, seconds=30), "recent"),
    (timedelta(minutes=6), "stale"),
    (timedelta(minutes=15), "stale"),
    (timedelta(minutes=16), "very-stale"),
    (timedelta(hours=3), "very-stale"),
])
def test_age_buckets(age, expected):
    status = get_staleness_status((NOW - age).isoformat(), None, now=NOW)
    assert status.status == expected


def test_zulu_and_naive_timestamps():
    assert get_staleness_status("2024-05-06T11:59:30Z", None, now=NOW).status == "fresh"
    assert get_staleness_status("2024-05-06T11:50:00", None, now=NOW).status == "stale"


def test_offset_timestamp():
    # 07:58 in New York (EDT) is 11:58 UTC
    assert get_staleness_status("2024-05-06T07:58:00-04:00", None, now=NOW).status == "recent"
