"""Tests for database functionality."""

import pytest
import tempfile
from pathlib import Path
from path_commute.commute import CommutePair
from path_commute.database import Database


@pytest.fixture
def test_db():
    """Create a temporary test database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        db = Database(db_path)
        yield db
        db.engine.dispose()


def test_set_and_get_preference(test_db):
    """Test saving and retrieving preferences."""
    test_db.set_preference("theme", "dark")
    assert test_db.get_preference("theme") == "dark"


def test_get_missing_preference(test_db):
    """Test getting a preference that doesn't exist."""
    assert test_db.get_preference("nonexistent") is None


def test_update_preference(test_db):
    """Test updating an existing preference."""
    test_db.set_preference("theme", "light")
    test_db.set_preference("theme", "dark")
    assert test_db.get_preference("theme") == "dark"
    assert test_db.get_all_preferences() == {"theme": "dark"}


def test_preferences_are_per_user(test_db):
    test_db.set_preference("theme", "dark", user_id="alice")
    assert test_db.get_preference("theme", user_id="bob") is None


def test_commute_pair_round_trip(test_db):
    """Test saving and loading a commute pair."""
    test_db.set_commute_pair(CommutePair(home="JSQ", work="WTC"))
    assert test_db.get_commute_pair() == CommutePair(home="JSQ", work="WTC")


def test_commute_pair_overwrite(test_db):
    test_db.set_commute_pair(CommutePair(home="JSQ", work="WTC"))
    test_db.set_commute_pair(CommutePair(home="HOB", work="33S"))
    assert test_db.get_commute_pair() == CommutePair(home="HOB", work="33S")


def test_clear_commute_pair(test_db):
    test_db.set_commute_pair(CommutePair(home="JSQ", work="WTC"))
    assert test_db.clear_commute_pair() is True
    assert test_db.get_commute_pair() is None
    assert test_db.clear_commute_pair() is False


def test_corrupt_commute_pair_ignored(test_db):
    """Test an unreadable stored commute is treated as unset."""
    test_db.set_preference("commute", "not json")
    assert test_db.get_commute_pair() is None
    test_db.set_preference("commute", '{"home": "HOB", "work": "HOB"}')
    assert test_db.get_commute_pair() is None


def test_cache_response(test_db):
    test_db.cache_response("https://example.com/feed", {"results": []})
    payload, fetched_at = test_db.get_cached_response("https://example.com/feed")
    assert payload == {"results": []}
    assert fetched_at is not None


def test_cache_response_replaced(test_db):
    test_db.cache_response("https://example.com/feed", {"v": 1})
    test_db.cache_response("https://example.com/feed", {"v": 2})
    payload, _ = test_db.get_cached_response("https://example.com/feed")
    assert payload == {"v": 2}


def test_clear_cached_responses(test_db):
    test_db.cache_response("https://example.com/feed", {"v": 1})
    test_db.clear_cached_responses()
    assert test_db.get_cached_response("https://example.com/feed") is None
