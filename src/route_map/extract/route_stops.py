"""Full-feed route -> stop-set index used to filter stops at runtime.

Serialized as a JSON object with route ids as sorted keys and each value a
lexicographically sorted array of stop ids, so that identical feeds produce
byte-identical files.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from route_map.errors import Diagnostics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteStopIndex:
    stops_by_route: dict[str, frozenset[str]]

    def stops_for_route(self, route_id: str) -> frozenset[str]:
        return self.stops_by_route.get(route_id, frozenset())

    def to_json_dict(self) -> dict[str, list[str]]:
        return {
            route_id: sorted(self.stops_by_route[route_id])
            for route_id in sorted(self.stops_by_route)
        }

    @classmethod
    def from_json_dict(cls, data: dict) -> "RouteStopIndex":
        return cls({str(k): frozenset(str(s) for s in v) for k, v in data.items()})


def build_route_stop_index(
    trips: pd.DataFrame,
    stop_times: pd.DataFrame,
    diagnostics: Diagnostics | None = None,
) -> RouteStopIndex:
    """Map every route in the feed to the stops its trips visit.

    Stop visits whose trip_id is not in trips.txt, or whose trip has a
    blank route_id, are skipped.
    """
    trip_route = dict(zip(trips["trip_id"], trips["route_id"]))

    route_ids = stop_times["trip_id"].map(trip_route)
    known = route_ids.notna() & (route_ids != "")
    if diagnostics is not None:
        diagnostics.record("dangling_trip_id", int((~known).sum()))

    visits = pd.DataFrame(
        {"route_id": route_ids[known], "stop_id": stop_times["stop_id"][known]}
    )
    stops_by_route = {
        route_id: frozenset(group["stop_id"])
        for route_id, group in visits.groupby("route_id", sort=True)
    }

    logger.info(
        "Indexed %d routes, %d route-stop associations",
        len(stops_by_route),
        sum(len(s) for s in stops_by_route.values()),
    )
    return RouteStopIndex(stops_by_route)


def write_route_stop_index(index: RouteStopIndex, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(index.to_json_dict(), f, indent=2)
    logger.info("Wrote route-stops mapping to %s", path)
