"""RidePATH real-time arrivals and service alerts client."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

import requests
import structlog

from .config import (
    ALERTS_API_URL,
    ALERTS_CACHE_SECONDS,
    ALERTS_PROXY_URL,
    POLLING_INTERVAL,
    PROXY_API_URL,
    RAW_API_URL,
    REQUEST_TIMEOUT,
    USE_PROXY_FIRST,
)
from .database import Database, db

logger = structlog.get_logger(__name__)


class FeedError(Exception):
    """Raised when neither the direct nor the proxy URL returns usable data."""


@dataclass
class Message:
    """One upcoming train as shown on the station sign."""
    head_sign: str
    last_updated: str
    arrival_time_message: str
    seconds_to_arrival: Optional[int]
    target: str
    line_color: str

    @property
    def is_delayed(self) -> bool:
        return "delay" in self.arrival_time_message.lower()

    def __str__(self):
        return f"{self.head_sign} - {self.arrival_time_message}"


@dataclass
class Destination:
    label: str  # "ToNJ" or "ToNY"
    messages: list[Message]


@dataclass
class StationResult:
    considered_station: str
    destinations: list[Destination]


@dataclass
class RidePathResponse:
    results: list[StationResult]
    last_updated: str
    from_cache: bool = False

    def get_station(self, code: str) -> Optional[StationResult]:
        for result in self.results:
            if result.considered_station == code:
                return result
        return None


@dataclass
class Alert:
    subject: str
    message: str
    created_date: Optional[str] = None
    modified_date: Optional[str] = None


@dataclass
class AlertsData:
    alerts: list[Alert] = field(default_factory=list)
    last_updated: str = ""
    error: Optional[str] = None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_line_color(raw: str) -> str:
    """First colour of a comma-separated list, '#'-prefixed; '#666' if blank."""
    first = raw.split(",")[0].strip() if raw else ""
    if not first:
        return "#666"
    return first if first.startswith("#") else f"#{first}"


def _parse_seconds(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_ridepath(payload: dict) -> RidePathResponse:
    """Convert the RidePATH JSON document into dataclasses."""
    results = []
    for station in payload.get("results", []):
        destinations = []
        for dest in station.get("destinations", []):
            messages = [
                Message(
                    head_sign=msg.get("headSign", ""),
                    last_updated=msg.get("lastUpdated", ""),
                    arrival_time_message=msg.get("arrivalTimeMessage", ""),
                    seconds_to_arrival=_parse_seconds(msg.get("secondsToArrival")),
                    target=msg.get("target", ""),
                    line_color=get_line_color(msg.get("lineColor", "")),
                )
                for msg in dest.get("messages", [])
            ]
            destinations.append(Destination(label=dest.get("label", ""), messages=messages))
        results.append(StationResult(
            considered_station=station.get("consideredStation", ""),
            destinations=destinations,
        ))
    return RidePathResponse(
        results=results,
        last_updated=payload.get("lastUpdated") or _now_iso(),
    )


def parse_alerts(payload: dict) -> list[Alert]:
    alerts = []
    for item in payload.get("data") or []:
        incident = item.get("incidentMessage") or {}
        alerts.append(Alert(
            subject=incident.get("subject", ""),
            message=incident.get("preMessage", ""),
            created_date=item.get("CreatedDate"),
            modified_date=item.get("ModifiedDate"),
        ))
    return alerts


class PathFeedClient:
    """Client for the RidePATH arrivals feed and the PATH alerts feed."""

    def __init__(self, database: Optional[Database] = None, use_proxy_first: bool = USE_PROXY_FIRST):
        self.database = database
        self.use_proxy_first = use_proxy_first
        self._cache: dict[str, tuple[float, RidePathResponse]] = {}
        self._cache_ttl = POLLING_INTERVAL  # seconds
        self._alerts: Optional[AlertsData] = None
        self._alerts_time = 0.0

    def _urls(self, raw: str, proxy: str) -> list[str]:
        return [proxy, raw] if self.use_proxy_first else [raw, proxy]

    def _get_json(self, url: str) -> dict:
        response = requests.get(url, timeout=REQUEST_TIMEOUT, headers={"Cache-Control": "no-store"})
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
        return payload

    def _fetch_with_fallback(self, urls: list[str]) -> dict:
        """Try each URL in turn, returning the first JSON payload."""
        last_error: Optional[Exception] = None
        for url in urls:
            try:
                return self._get_json(url)
            except (requests.RequestException, ValueError) as e:
                logger.warning("feed request failed", url=url, error=str(e))
                last_error = e
        raise FeedError(f"All feed URLs failed: {last_error}") from last_error

    def fetch_ridepath(self) -> RidePathResponse:
        """Fetch live arrivals for every station.

        Falls back to the proxy URL, then to the last payload stored in the
        database. Raises FeedError if none of those are available.
        """
        if RAW_API_URL in self._cache:
            cached_time, cached_data = self._cache[RAW_API_URL]
            if time.time() - cached_time < self._cache_ttl:
                return cached_data

        try:
            payload = self._fetch_with_fallback(self._urls(RAW_API_URL, PROXY_API_URL))
        except FeedError:
            stored = self.database.get_cached_response(RAW_API_URL) if self.database else None
            if not stored:
                raise
            payload, fetched_at = stored
            logger.warning("serving cached arrivals", fetched_at=fetched_at.isoformat())
            response = parse_ridepath(payload)
            response.last_updated = payload.get("lastUpdated") or fetched_at.replace(tzinfo=timezone.utc).isoformat()
            response.from_cache = True
            return response

        response = parse_ridepath(payload)
        self._cache[RAW_API_URL] = (time.time(), response)
        if self.database:
            self.database.cache_response(RAW_API_URL, payload)
        return response

    def get_arrivals_for_stations(self, codes: Iterable[str]) -> dict[str, Optional[StationResult]]:
        """Arrivals for several stations from a single feed request."""
        response = self.fetch_ridepath()
        return {code: response.get_station(code) for code in codes}

    def fetch_alerts(self) -> AlertsData:
        """Current service alerts, cached in memory for a few minutes.

        A failed refresh keeps serving the previous alerts with the new error
        attached.
        """
        now = time.time()
        if self._alerts and now - self._alerts_time < ALERTS_CACHE_SECONDS:
            return self._alerts

        try:
            payload = self._fetch_with_fallback(self._urls(ALERTS_API_URL, ALERTS_PROXY_URL))
            if payload.get("status") == "Success" and payload.get("data") is not None:
                data = AlertsData(alerts=parse_alerts(payload), last_updated=_now_iso())
            else:
                data = AlertsData(last_updated=_now_iso(), error="No alerts data available")
        except FeedError as e:
            logger.error("failed to fetch alerts", error=str(e))
            data = AlertsData(last_updated=_now_iso(), error=str(e))

        if not data.error or data.alerts:
            self._alerts = data
            self._alerts_time = now
        elif self._alerts:
            return AlertsData(
                alerts=self._alerts.alerts,
                last_updated=self._alerts.last_updated,
                error=data.error,
            )
        return data

    def clear_cache(self):
        self._cache.clear()
        self._alerts = None
        self._alerts_time = 0.0


# Singleton instance
path_feed = PathFeedClient(database=db)

