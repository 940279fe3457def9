"""Cross-reference trips, routes, shapes and stop visits for selected routes."""

import logging
from dataclasses import dataclass

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TripIndex:
    trip_route: dict[str, str]
    route_shapes: dict[str, tuple[str, ...]]
    selected_trips: frozenset[str]

    def reachable_stops(self, stop_times: pd.DataFrame) -> frozenset[str]:
        """Stop ids visited by at least one trip of a selected route."""
        mask = stop_times["trip_id"].isin(self.selected_trips)
        return frozenset(stop_times.loc[mask, "stop_id"])


def build_trip_index(trips: pd.DataFrame, selected_route_ids) -> TripIndex:
    """Index trips in a single pass.

    Candidate shape ids are kept per selected route in order of first
    appearance in trips.txt.
    Trips with a blank shape_id still count as selected trips.
    """
    selected_route_ids = tuple(selected_route_ids)
    selected = set(selected_route_ids)
    trip_route: dict[str, str] = {}
    route_shapes: dict[str, dict[str, None]] = {rid: {} for rid in selected_route_ids}
    selected_trips: set[str] = set()

    for row in trips.itertuples(index=False):
        trip_route[row.trip_id] = row.route_id
        if row.route_id not in selected:
            continue
        selected_trips.add(row.trip_id)
        if row.shape_id:
            route_shapes[row.route_id][row.shape_id] = None

    index = TripIndex(
        trip_route=trip_route,
        route_shapes={rid: tuple(shapes) for rid, shapes in route_shapes.items()},
        selected_trips=frozenset(selected_trips),
    )
    logger.info(
        "Selected shape_ids: %d, trips: %d",
        sum(len(s) for s in index.route_shapes.values()),
        len(index.selected_trips),
    )
    return index
