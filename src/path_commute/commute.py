"""Commute direction and the active route for a home/work pair."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, NamedTuple, Optional

from .routing import Route, calculate_route

Direction = Literal["morning", "evening"]

MORNING_START_HOUR = 2
EVENING_START_HOUR = 14


@dataclass(frozen=True)
class CommutePair:
    """A rider's home and work stations."""
    home: str
    work: str

    def __post_init__(self):
        if self.home == self.work:
            raise ValueError("Home and work stations must be different")

    def to_dict(self) -> dict:
        return {"home": self.home, "work": self.work}

    @classmethod
    def from_dict(cls, data: dict) -> "CommutePair":
        return cls(home=data["home"], work=data["work"])


class CommuteStations(NamedTuple):
    from_station: str
    to_station: str


def get_commute_direction(hour: int) -> Direction:
    """Morning (home to work) from 2am until 2pm, evening otherwise."""
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour must be between 0 and 23, got {hour}")
    return "morning" if MORNING_START_HOUR <= hour < EVENING_START_HOUR else "evening"


def get_time_range_label(direction: Direction) -> str:
    return "2:00 AM - 2:00 PM" if direction == "morning" else "2:00 PM - 2:00 AM"


def get_commute_stations(home: str, work: str, direction: Direction) -> CommuteStations:
    if direction == "morning":
        return CommuteStations(from_station=home, to_station=work)
    return CommuteStations(from_station=work, to_station=home)


def current_commute_route(pair: CommutePair, now: Optional[datetime] = None) -> tuple[Direction, Optional[Route]]:
    """Direction for the given (or current local) time and the route to ride.

    Callers re-run this on a timer since the answer changes with the clock.
    """
    now = now or datetime.now()
    direction = get_commute_direction(now.hour)
    stations = get_commute_stations(pair.home, pair.work, direction)
    return direction, calculate_route(stations.from_station, stations.to_station)
