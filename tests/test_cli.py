"""Tests for the command-line interface."""

import tempfile
from pathlib import Path

import pytest
from path_commute import cli
from path_commute.database import Database


@pytest.fixture
def test_db(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        db = Database(Path(tmpdir) / "test.db")
        monkeypatch.setattr(cli, "db", db)
        yield db
        db.engine.dispose()


def test_route_command():
    output = cli.handle("route NWK HOB")
    assert "Newark" in output
    assert "Hoboken" in output
    assert "1 transfer" in output


def test_route_command_usage():
    assert cli.handle("route NWK").startswith("Usage")


def test_route_command_unknown_station():
    assert "Unknown station" in cli.handle("route NWK Narnia")


def test_unknown_command():
    assert cli.handle("teleport NWK").startswith("Unknown command")


def test_commute_commands(test_db):
    assert "No commute configured" in cli.handle("commute")
    assert "Commute saved" in cli.handle("set-commute JSQ 33S")
    assert "commute" in cli.handle("commute")
    assert cli.handle("clear-commute") == "Commute cleared."
    assert cli.handle("clear-commute") == "No commute configured."


def test_set_commute_same_station(test_db):
    assert "must be different" in cli.handle("set-commute HOB hob")


def test_route_command_quoted_names():
    """Test multi-word station names can be quoted."""
    output = cli.handle('route "journal square" wtc')
    assert "Journal Square" in output
    assert "World Trade Center" in output
    assert "no transfers" in output


def test_route_command_quoted_alias():
    output = cli.handle("route 'exchange pl' 'herald sq'")
    assert "Exchange Place" in output
    assert "33rd Street" in output


def test_unbalanced_quotes():
    assert cli.handle('route "journal square wtc').startswith("[Error:")
