#!/usr/bin/env python3
"""Command-line interface for PATH commute routing."""

import shlex
import time

from .commute import CommutePair, current_commute_route, get_time_range_label
from .config import POLLING_INTERVAL, configure_logging
from .database import db
from .path_feed import FeedError, path_feed
from .routing import UnknownStationError, calculate_route, get_all_route_stations
from .stations import find_station, get_station_name
from .staleness import get_staleness_status

USER_ID = "cli_user"


def print_banner():
    """Print the welcome banner."""
    print("""
PATH Commute

Commands:
  route FROM TO            Best route between two stations
  set-commute HOME WORK    Save your commute
  commute                  Route for the current commute leg
  clear-commute            Forget your commute
  arrivals STATION         Live arrivals at a station
  watch                    Poll arrivals along your commute (Ctrl-C to stop)
  /quit                    Exit the program

Quote station names with spaces, e.g. route "journal square" wtc
""")


def _code(query: str) -> str:
    station = find_station(query)
    if not station:
        raise UnknownStationError(query)
    return station.code


def cmd_route(args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: route FROM TO"
    route = calculate_route(_code(args[0]), _code(args[1]))
    if not route:
        return "No route found."
    return str(route)


def cmd_set_commute(args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: set-commute HOME WORK"
    pair = CommutePair(home=_code(args[0]), work=_code(args[1]))
    db.set_commute_pair(pair, USER_ID)
    return f"Commute saved: {get_station_name(pair.home)} <-> {get_station_name(pair.work)}"


def cmd_commute(args: list[str]) -> str:
    pair = db.get_commute_pair(USER_ID)
    if not pair:
        return "No commute configured. Use: set-commute HOME WORK"
    direction, route = current_commute_route(pair)
    header = f"{direction.title()} commute ({get_time_range_label(direction)})"
    if not route:
        return f"{header}\nNo route found."
    return f"{header}\n{route}"


def cmd_clear_commute(args: list[str]) -> str:
    if db.clear_commute_pair(USER_ID):
        return "Commute cleared."
    return "No commute configured."


def format_arrivals(codes: list[str]) -> str:
    response = path_feed.fetch_ridepath()
    staleness = get_staleness_status(response.last_updated, None)
    lines = [f"[{staleness.text}]"]
    for code in codes:
        result = response.get_station(code)
        lines.append(get_station_name(code))
        if not result:
            lines.append("  No data")
            continue
        for dest in result.destinations:
            for msg in dest.messages:
                lines.append(f"  {dest.label}: {msg}")
    return "\n".join(lines)


def cmd_arrivals(args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: arrivals STATION"
    return format_arrivals([_code(args[0])])


def cmd_watch(args: list[str]) -> str:
    """Re-fetch arrivals for the commute every polling interval until interrupted."""
    pair = db.get_commute_pair(USER_ID)
    if not pair:
        return "No commute configured. Use: set-commute HOME WORK"
    try:
        while True:
            _, route = current_commute_route(pair)
            if not route:
                return "No route found."
            print(format_arrivals(get_all_route_stations(route)))
            time.sleep(POLLING_INTERVAL)
    except KeyboardInterrupt:
        return "Stopped watching."


COMMANDS = {
    "route": cmd_route,
    "set-commute": cmd_set_commute,
    "commute": cmd_commute,
    "clear-commute": cmd_clear_commute,
    "arrivals": cmd_arrivals,
    "watch": cmd_watch,
}


def handle(user_input: str) -> str:
    """Run one command line and return the text to show."""
    try:
        words = shlex.split(user_input)
    except ValueError as e:
        return f"[Error: {e}]"
    if not words:
        return ""
    name, *args = words
    command = COMMANDS.get(name.lower())
    if not command:
        return f"Unknown command: {name}"
    try:
        return command(args)
    except (ValueError, FeedError) as e:
        return f"[Error: {e}]"


def main():
    """Run the interactive CLI."""
    configure_logging()
    print_banner()

    while True:
        try:
            user_input = input("\n> ").strip()

            if not user_input:
                continue

            if user_input.lower() in ["/quit", "/exit", "/q"]:
                print("\nGoodbye!")
                break

            print(handle(user_input))

        except (KeyboardInterrupt, EOFError):
            print("\n\nGoodbye!")
            break


if __name__ == "__main__":
    main()
