"""Commute routing over the PATH line topology."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional

from .stations import get_station_name
from .topology import PATH_TOPOLOGY, Line, Topology


class UnknownStationError(ValueError):
    """Raised when a station code is not served by any line in the topology."""

    def __init__(self, station: str):
        super().__init__(f"Unknown station: {station}")
        self.station = station


@dataclass(frozen=True)
class RouteSegment:
    """One uninterrupted ride on a single line."""
    line: Line
    from_station: str
    to_station: str
    stations: tuple[str, ...]
    is_transfer: bool = False

    @property
    def color(self) -> str:
        return self.line.color

    @property
    def stops(self) -> int:
        return len(self.stations) - 1

    def __str__(self):
        return (
            f"Take {self.line.name} from {get_station_name(self.from_station)} "
            f"to {get_station_name(self.to_station)} ({self.stops} stops)"
        )


@dataclass(frozen=True)
class Route:
    """A complete route with at most one transfer."""
    segments: tuple[RouteSegment, ...]
    total_stations: int
    requires_transfer: bool
    estimated_duration: int

    def __str__(self):
        result = []
        for i, seg in enumerate(self.segments):
            suffix = " [transfer]" if seg.is_transfer else ""
            result.append(f"{i+1}. {seg}{suffix}")
        transfers = "1 transfer" if self.requires_transfer else "no transfers"
        result.append(f"\nTotal: ~{self.estimated_duration} minutes, {transfers}")
        return "\n".join(result)


MINUTES_PER_STOP = 2
TRANSFER_TIME = 3  # minutes to change trains

# Scoring weights
TRANSFER_PENALTY = 100
STATION_WEIGHT = 2
FREQUENCY_WEIGHT = 2


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_duration(segments) -> int:
    """Estimate ride time in whole minutes for a sequence of segments.

    Each segment costs two minutes per stop plus half the line's headway as
    the expected wait. The transfer allowance is added by the caller.
    """
    duration = 0.0
    for segment in segments:
        travel_time = (len(segment.stations) - 1) * MINUTES_PER_STOP
        wait_time = segment.line.frequency / 2
        duration += travel_time + wait_time
    return _round_half_up(duration)


def score_route(route: Route) -> float:
    """Score a route (lower is better)."""
    score = 0.0
    if route.requires_transfer:
        score += TRANSFER_PENALTY
    score += route.total_stations * STATION_WEIGHT
    avg_frequency = sum(seg.line.frequency for seg in route.segments) / len(route.segments)
    score += avg_frequency * FREQUENCY_WEIGHT
    return score


class RouteFinder:
    """Enumerates and ranks routes over a fixed topology.

    Only direct and single-transfer routes are considered; a pair of stations
    that needs two transfers is reported as having no route.
    """

    def __init__(self, topology: Topology = PATH_TOPOLOGY):
        self.topology = topology

    def _check_station(self, station: str):
        if not self.topology.has_station(station):
            raise UnknownStationError(station)

    def find_direct_route(self, line: Line, from_station: str, to_station: str) -> Optional[Route]:
        """Single-segment route on one line, or None if the line misses either station."""
        from_index = line.index_of(from_station)
        to_index = line.index_of(to_station)
        if from_index is None or to_index is None:
            return None

        start = min(from_index, to_index)
        end = max(from_index, to_index)
        stations = line.stations[start:end + 1]
        if from_index > to_index:
            stations = stations[::-1]

        segment = RouteSegment(
            line=line,
            from_station=from_station,
            to_station=to_station,
            stations=stations,
        )
        return Route(
            segments=(segment,),
            total_stations=len(stations),
            requires_transfer=False,
            estimated_duration=estimate_duration([segment]),
        )

    def iter_direct_routes(self, from_station: str, to_station: str) -> Iterator[Route]:
        for line in self.topology.lines:
            route = self.find_direct_route(line, from_station, to_station)
            if route:
                yield route

    def iter_transfer_routes(self, from_station: str, to_station: str) -> Iterator[Route]:
        """Routes changing lines once at a declared transfer station."""
        for transfer in self.topology.transfer_stations:
            if transfer in (from_station, to_station):
                continue

            first_legs = list(self.iter_direct_routes(from_station, transfer))
            if not first_legs:
                continue
            second_legs = list(self.iter_direct_routes(transfer, to_station))

            for first in first_legs:
                for second in second_legs:
                    first_segment = first.segments[0]
                    second_segment = second.segments[0]
                    # Same line both ways is just a direct route
                    if first_segment.line.id == second_segment.line.id:
                        continue

                    transfer_segment = RouteSegment(
                        line=second_segment.line,
                        from_station=second_segment.from_station,
                        to_station=second_segment.to_station,
                        stations=second_segment.stations,
                        is_transfer=True,
                    )
                    yield Route(
                        segments=(first_segment, transfer_segment),
                        # transfer station is counted in both legs
                        total_stations=first.total_stations + second.total_stations - 1,
                        requires_transfer=True,
                        estimated_duration=estimate_duration([first_segment, second_segment]) + TRANSFER_TIME,
                    )

    def iter_candidate_routes(self, from_station: str, to_station: str) -> Iterator[Route]:
        """Lazily yield every direct route, then every single-transfer route."""
        self._check_station(from_station)
        self._check_station(to_station)
        if from_station == to_station:
            return
        yield from self.iter_direct_routes(from_station, to_station)
        yield from self.iter_transfer_routes(from_station, to_station)

    def find_routes(self, from_station: str, to_station: str) -> list[Route]:
        """All candidate routes, best first. Ties keep enumeration order."""
        return sorted(self.iter_candidate_routes(from_station, to_station), key=score_route)

    def find_best_route(self, from_station: str, to_station: str) -> Optional[Route]:
        """Find the lowest-scoring route between two stations.

        Returns None when the stations are the same or no direct or
        single-transfer route connects them. Raises UnknownStationError for
        station codes that no line serves.
        """
        best = None
        best_score = None
        for route in self.iter_candidate_routes(from_station, to_station):
            score = score_route(route)
            if best_score is None or score < best_score:
                best, best_score = route, score
        return best


def get_all_route_stations(route: Route) -> list[str]:
    """Every station on a route in ride order, with each transfer point listed once."""
    all_stations: list[str] = []
    for i, segment in enumerate(route.segments):
        if i == 0:
            all_stations.extend(segment.stations)
        else:
            all_stations.extend(segment.stations[1:])
    return all_stations


# Singleton instance
route_finder = RouteFinder(PATH_TOPOLOGY)


def calculate_route(from_station: str, to_station: str) -> Optional[Route]:
    """Best route between two PATH station codes, or None if not routable."""
    return route_finder.find_best_route(from_station, to_station)
