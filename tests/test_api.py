"""Tests for the HTTP API."""

import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from path_commute import api
from path_commute.database import Database
from path_commute.path_feed import AlertsData, Alert, FeedError, parse_ridepath


class StubFeed:
    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error

    def fetch_ridepath(self):
        if self.error:
            raise FeedError(self.error)
        return parse_ridepath(self.payload)

    def fetch_alerts(self):
        return AlertsData(
            alerts=[Alert(subject="Delays", message="Expect delays")],
            last_updated="2024-05-06T12:00:00+00:00",
        )


@pytest.fixture
def client(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        test_db = Database(Path(tmpdir) / "test.db")
        monkeypatch.setattr(api, "db", test_db)
        yield TestClient(api.app)
        test_db.engine.dispose()


def test_root(client):
    assert client.get("/").json()["status"] == "ok"


def test_status(client):
    body = client.get("/status").json()
    assert body["total_stations"] == 13
    assert body["total_lines"] == 4


def test_route(client):
    response = client.post("/route", json={"from_station": "NWK", "to_station": "HOB"})
    assert response.status_code == 200
    body = response.json()
    assert body["requires_transfer"] is True
    assert body["segments"][1]["is_transfer"] is True
    assert body["stations"][0] == "NWK"
    assert body["stations"][-1] == "HOB"


def test_route_by_name(client):
    body = client.post("/route", json={"from_station": "Journal Square", "to_station": "wtc"}).json()
    assert body["requires_transfer"] is False
    assert body["from"] == "Journal Square"


def test_route_unknown_station(client):
    response = client.post("/route", json={"from_station": "Nowhere", "to_station": "HOB"})
    assert response.status_code == 404


def test_route_same_station(client):
    response = client.post("/route", json={"from_station": "HOB", "to_station": "HOB"})
    assert response.status_code == 404


def test_stations_filtered_by_line(client):
    body = client.get("/stations", params={"line": "hob-wtc"}).json()
    assert {s["code"] for s in body["stations"]} == {"HOB", "NEW", "EXP", "WTC"}


def test_stations_unknown_line(client):
    assert client.get("/stations", params={"line": "XYZ"}).status_code == 404


def test_nearest_station(client):
    body = client.get("/stations/nearest", params={"lat": 40.7126, "lon": -74.0113}).json()
    assert body["code"] == "WTC"


def test_commute_lifecycle(client):
    """Test saving, reading, routing and clearing a commute."""
    assert client.get("/commute/alice").status_code == 404

    response = client.put("/commute/alice", json={"home": "HOB", "work": "WTC"})
    assert response.status_code == 200
    assert client.get("/commute/alice").json()["home"] == "HOB"

    morning = client.get("/commute/alice/route", params={"hour": 8}).json()
    assert morning["direction"] == "morning"
    assert morning["time_range"] == "2:00 AM - 2:00 PM"
    assert morning["route"]["stations"][0] == "HOB"

    evening = client.get("/commute/alice/route", params={"hour": 20}).json()
    assert evening["direction"] == "evening"
    assert evening["route"]["stations"][0] == "WTC"

    assert client.delete("/commute/alice").json()["status"] == "cleared"
    assert client.get("/commute/alice").status_code == 404


def test_commute_same_stations_rejected(client):
    response = client.put("/commute/bob", json={"home": "HOB", "work": "hoboken"})
    assert response.status_code == 400


def test_arrivals(client, monkeypatch):
    payload = {
        "results": [{
            "consideredStation": "JSQ",
            "destinations": [{
                "label": "ToNJ",
                "messages": [{
                    "target": "NWK",
                    "secondsToArrival": "60",
                    "arrivalTimeMessage": "1 min",
                    "lineColor": "D93A30",
                    "headSign": "Newark",
                    "lastUpdated": "2024-05-06T12:00:00-04:00",
                }],
            }],
        }],
        "lastUpdated": "2024-05-06T12:00:00-04:00",
    }
    monkeypatch.setattr(api, "path_feed", StubFeed(payload=payload))
    body = client.get("/arrivals/JSQ").json()
    assert body["station"] == "Journal Square"
    message = body["destinations"][0]["messages"][0]
    assert message["head_sign"] == "Newark"
    assert message["line_color"] == "#D93A30"


def test_arrivals_feed_down(client, monkeypatch):
    monkeypatch.setattr(api, "path_feed", StubFeed(error="down"))
    assert client.get("/arrivals/JSQ").status_code == 502


def test_alerts(client, monkeypatch):
    monkeypatch.setattr(api, "path_feed", StubFeed())
    body = client.get("/alerts").json()
    assert body["alerts"][0]["subject"] == "Delays"
    assert body["error"] is None
