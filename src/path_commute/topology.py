"""PATH line definitions and transfer points."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional


@dataclass(frozen=True)
class Line:
    """A PATH service pattern visiting stations in a fixed order."""
    id: str
    name: str
    color: str
    stations: tuple[str, ...]
    frequency: int  # typical minutes between trains

    def index_of(self, station: str) -> Optional[int]:
        """Position of a station on this line, or None if the line skips it."""
        try:
            return self.stations.index(station)
        except ValueError:
            return None


@dataclass(frozen=True)
class Topology:
    """Immutable set of lines plus the stations where riders can change lines.

    Lines and transfer stations keep their declared order, which decides
    which route wins when two candidates score the same.
    """
    lines: tuple[Line, ...]
    transfer_stations: tuple[str, ...]
    _station_set: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for line in self.lines:
            if not line.stations:
                raise ValueError(f"Line {line.id} has no stations")
        for station in self.transfer_stations:
            if len(self.lines_serving(station)) < 2:
                raise ValueError(f"Transfer station {station} is served by fewer than two lines")
        stations = frozenset(s for line in self.lines for s in line.stations)
        object.__setattr__(self, "_station_set", stations)

    @classmethod
    def build(cls, lines: Iterable[Line], transfer_stations: Iterable[str]) -> "Topology":
        return cls(lines=tuple(lines), transfer_stations=tuple(transfer_stations))

    @property
    def stations(self) -> frozenset:
        return self._station_set

    def has_station(self, station: str) -> bool:
        return station in self._station_set

    def lines_serving(self, station: str) -> list[Line]:
        """All lines that stop at a station, in declared order."""
        return [line for line in self.lines if station in line.stations]

    def get_line(self, line_id: str) -> Optional[Line]:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None


PATH_LINES = (
    Line(
        id="NWK-WTC",
        name="Newark - World Trade Center",
        color="#0066CC",
        stations=("NWK", "HAR", "JSQ", "GRV", "EXP", "WTC"),
        frequency=5,
    ),
    Line(
        id="JSQ-33S",
        name="Journal Square - 33rd Street",
        color="#FF6600",
        stations=("JSQ", "GRV", "EXP", "NEW", "CHR", "09S", "14S", "23S", "33S"),
        frequency=5,
    ),
    Line(
        id="HOB-33S",
        name="Hoboken - 33rd Street",
        color="#0066CC",
        stations=("HOB", "CHR", "09S", "14S", "23S", "33S"),
        frequency=7,
    ),
    Line(
        id="HOB-WTC",
        name="Hoboken - World Trade Center",
        color="#009900",
        stations=("HOB", "NEW", "EXP", "WTC"),
        frequency=7,
    ),
)

# Stations served by more than one line
TRANSFER_STATIONS = {
    "EXP": ["NWK-WTC", "JSQ-33S", "HOB-WTC"],  # Exchange Place
    "JSQ": ["NWK-WTC", "JSQ-33S"],  # Journal Square
    "GRV": ["NWK-WTC", "JSQ-33S"],  # Grove Street
    "NEW": ["JSQ-33S", "HOB-WTC"],  # Newport
    "CHR": ["JSQ-33S", "HOB-33S"],  # Christopher Street
    "33S": ["JSQ-33S", "HOB-33S"],  # 33rd Street
    "WTC": ["NWK-WTC", "HOB-WTC"],  # World Trade Center
}

PATH_TOPOLOGY = Topology.build(PATH_LINES, TRANSFER_STATIONS)
