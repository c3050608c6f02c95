"""PATH station catalog and lookups."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Station:
    """Represents a PATH station."""
    code: str
    name: str
    latitude: float
    longitude: float
    state: str


# Format: code, name, lat, lon, state
STATIONS_DATA = [
    ("NWK", "Newark", 40.7357, -74.1635, "NJ"),
    ("HAR", "Harrison", 40.7394, -74.1555, "NJ"),
    ("JSQ", "Journal Square", 40.7332, -74.0627, "NJ"),
    ("GRV", "Grove Street", 40.7195, -74.0434, "NJ"),
    ("NEW", "Newport", 40.7268, -74.0341, "NJ"),
    ("EXP", "Exchange Place", 40.7167, -74.0330, "NJ"),
    ("HOB", "Hoboken", 40.7363, -74.0279, "NJ"),
    ("WTC", "World Trade Center", 40.7126, -74.0113, "NY"),
    ("CHR", "Christopher St", 40.7338, -74.0070, "NY"),
    ("09S", "9th Street", 40.7344, -74.0048, "NY"),
    ("14S", "14th Street", 40.7374, -74.0061, "NY"),
    ("23S", "23rd Street", 40.7429, -74.0067, "NY"),
    ("33S", "33rd Street", 40.7489, -74.0063, "NY"),
]

STATIONS: dict[str, Station] = {}
for data in STATIONS_DATA:
    station = Station(
        code=data[0],
        name=data[1],
        latitude=data[2],
        longitude=data[3],
        state=data[4],
    )
    STATIONS[station.code] = station

STATION_NAME_INDEX: dict[str, Station] = {s.name.lower(): s for s in STATIONS.values()}

# Common aliases
STATION_ALIASES: dict[str, str] = {
    "wtc": "WTC",
    "world trade": "WTC",
    "oculus": "WTC",
    "journal sq": "JSQ",
    "grove st": "GRV",
    "exchange pl": "EXP",
    "pavonia": "NEW",
    "pavonia newport": "NEW",
    "christopher street": "CHR",
    "9th st": "09S",
    "14th st": "14S",
    "23rd st": "23S",
    "33rd st": "33S",
    "herald square": "33S",
    "herald sq": "33S",
    "newark penn": "NWK",
}

EARTH_RADIUS_KM = 6371.0


def find_station(query: str) -> Optional[Station]:
    """Find a station by code, name or alias."""
    query_clean = query.strip()

    if query_clean.upper() in STATIONS:
        return STATIONS[query_clean.upper()]

    query_lower = query_clean.lower()
    if query_lower in STATION_ALIASES:
        return STATIONS[STATION_ALIASES[query_lower]]

    if query_lower in STATION_NAME_INDEX:
        return STATION_NAME_INDEX[query_lower]

    # Partial match - prefer shorter station names (more specific)
    matches = [
        (len(name), station)
        for name, station in STATION_NAME_INDEX.items()
        if query_lower and query_lower in name
    ]
    if matches:
        matches.sort(key=lambda x: x[0])
        return matches[0][1]

    return None


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.asin(math.sqrt(a))


def find_closest_station(latitude: float, longitude: float) -> Station:
    """Return the station nearest to a coordinate."""
    return min(
        STATIONS.values(),
        key=lambda s: haversine_km(latitude, longitude, s.latitude, s.longitude),
    )


def get_station_name(code: str) -> str:
    """Display name for a station code, falling back to the code itself."""
    station = STATIONS.get(code)
    return station.name if station else code
