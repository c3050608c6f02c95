"""FastAPI web interface for PATH commute routing."""

from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .commute import CommutePair, current_commute_route, get_time_range_label
from .config import configure_logging
from .database import db
from .path_feed import FeedError, path_feed
from .routing import Route, UnknownStationError, calculate_route, get_all_route_stations
from .stations import STATIONS, find_closest_station, find_station, get_station_name
from .staleness import get_staleness_status
from .topology import PATH_TOPOLOGY

app = FastAPI(
    title="PATH Commute",
    description="Real-time PATH arrivals, alerts and commute routing",
    version="0.1.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class RouteRequest(BaseModel):
    from_station: str
    to_station: str


class CommuteRequest(BaseModel):
    home: str
    work: str


def _resolve_code(query: str) -> str:
    station = find_station(query)
    if not station:
        raise HTTPException(status_code=404, detail=f"Station not found: {query}")
    return station.code


def _route_payload(route: Route) -> dict:
    return {
        "segments": [
            {
                "line": seg.line.id,
                "line_name": seg.line.name,
                "color": seg.color,
                "from_station": seg.from_station,
                "to_station": seg.to_station,
                "stations": list(seg.stations),
                "stops": seg.stops,
                "is_transfer": seg.is_transfer,
            }
            for seg in route.segments
        ],
        "total_stations": route.total_stations,
        "requires_transfer": route.requires_transfer,
        "estimated_duration": route.estimated_duration,
        "stations": get_all_route_stations(route),
    }


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "PATH Commute"}


@app.get("/status")
async def system_status():
    """Static PATH system information."""
    return {
        "system": "PATH (Port Authority Trans-Hudson)",
        "operating_hours": "24/7",
        "total_stations": len(STATIONS),
        "total_lines": len(PATH_TOPOLOGY.lines),
        "lines": [line.name for line in PATH_TOPOLOGY.lines],
        "stations": [s.name for s in STATIONS.values()],
        "status": "operational",
    }


@app.post("/route")
async def get_route_endpoint(request: RouteRequest):
    """Best route between two stations."""
    from_code = _resolve_code(request.from_station)
    to_code = _resolve_code(request.to_station)

    try:
        route = calculate_route(from_code, to_code)
    except UnknownStationError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if not route:
        raise HTTPException(status_code=404, detail="No route found")

    return {
        "from": get_station_name(from_code),
        "to": get_station_name(to_code),
        **_route_payload(route),
    }


@app.get("/stations")
async def list_stations(state: Optional[str] = None, line: Optional[str] = None):
    """List all stations, optionally filtered."""
    stations = list(STATIONS.values())

    if state:
        stations = [s for s in stations if s.state.lower() == state.lower()]

    if line:
        served = PATH_TOPOLOGY.get_line(line.upper())
        if not served:
            raise HTTPException(status_code=404, detail=f"Line not found: {line}")
        stations = [s for s in stations if s.code in served.stations]

    return {
        "count": len(stations),
        "stations": [
            {
                "code": s.code,
                "name": s.name,
                "state": s.state,
                "lines": [l.id for l in PATH_TOPOLOGY.lines_serving(s.code)],
            }
            for s in stations
        ]
    }


@app.get("/stations/nearest")
async def nearest_station(lat: float = Query(..., ge=-90, le=90), lon: float = Query(..., ge=-180, le=180)):
    """Closest station to a coordinate."""
    station = find_closest_station(lat, lon)
    return {"code": station.code, "name": station.name}


@app.get("/commute/{user_id}")
async def get_commute(user_id: str):
    pair = db.get_commute_pair(user_id)
    if not pair:
        raise HTTPException(status_code=404, detail="No commute configured")
    return {"user_id": user_id, **pair.to_dict()}


@app.put("/commute/{user_id}")
async def set_commute(user_id: str, request: CommuteRequest):
    """Save a user's home and work stations."""
    home = _resolve_code(request.home)
    work = _resolve_code(request.work)
    try:
        pair = CommutePair(home=home, work=work)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.set_commute_pair(pair, user_id)
    return {"user_id": user_id, **pair.to_dict()}


@app.delete("/commute/{user_id}")
async def clear_commute(user_id: str):
    cleared = db.clear_commute_pair(user_id)
    return {"status": "cleared" if cleared else "not_configured", "user_id": user_id}


@app.get("/commute/{user_id}/route")
async def commute_route(user_id: str, hour: Optional[int] = Query(None, ge=0, le=23)):
    """Route for the current commute leg (or the leg at a given hour)."""
    pair = db.get_commute_pair(user_id)
    if not pair:
        raise HTTPException(status_code=404, detail="No commute configured")

    now = datetime.now()
    if hour is not None:
        now = now.replace(hour=hour)
    direction, route = current_commute_route(pair, now)

    return {
        "user_id": user_id,
        "direction": direction,
        "time_range": get_time_range_label(direction),
        "route": _route_payload(route) if route else None,
    }


@app.get("/arrivals/{station}")
async def get_arrivals_endpoint(station: str):
    """Real-time arrivals for a station."""
    code = _resolve_code(station)
    try:
        response = path_feed.fetch_ridepath()
    except FeedError as e:
        raise HTTPException(status_code=502, detail=str(e))

    result = response.get_station(code)
    staleness = get_staleness_status(response.last_updated, None)
    return {
        "station": get_station_name(code),
        "last_updated": response.last_updated,
        "from_cache": response.from_cache,
        "staleness": staleness.status,
        "destinations": [
            {
                "label": dest.label,
                "messages": [
                    {
                        "head_sign": msg.head_sign,
                        "arrival_time_message": msg.arrival_time_message,
                        "seconds_to_arrival": msg.seconds_to_arrival,
                        "line_color": msg.line_color,
                        "delayed": msg.is_delayed,
                    }
                    for msg in dest.messages
                ],
            }
            for dest in (result.destinations if result else [])
        ],
    }


@app.get("/alerts")
async def get_alerts():
    """Current PATH service alerts."""
    data = path_feed.fetch_alerts()
    return {
        "alerts": [
            {
                "subject": a.subject,
                "message": a.message,
                "created": a.created_date,
                "modified": a.modified_date,
            }
            for a in data.alerts
        ],
        "last_updated": data.last_updated,
        "error": data.error,
    }


def run_server(host: str = "0.0.0.0", port: int = 8000):
    """Run the FastAPI server."""
    import uvicorn
    configure_logging()
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
