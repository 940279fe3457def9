"""Entry point for building the map artifacts from a GTFS directory.

All paths come from the PipelineConfig passed in; nothing is resolved
against the working directory.
"""

import logging
import warnings
from dataclasses import dataclass

from route_map.config import (
    ROUTE_LINES_FILENAME,
    ROUTE_STOPS_FILENAME,
    STOPS_FILENAME,
    PipelineConfig,
)
from route_map.data.gtfs import (
    load_routes,
    load_shapes,
    load_stop_times,
    load_stops,
    load_trips,
)
from route_map.errors import DataIntegrityWarning, Diagnostics
from route_map.extract.emitter import (
    route_lines_collection,
    stops_collection,
    write_geojson,
)
from route_map.extract.joiner import build_trip_index
from route_map.extract.route_stops import (
    RouteStopIndex,
    build_route_stop_index,
    write_route_stop_index,
)
from route_map.extract.selector import select_route_ids
from route_map.extract.shapes import RouteGeometry, ShapePolicy, most_points, reduce_shapes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubsetResult:
    route_lines: dict
    stops: dict
    geometries: tuple[RouteGeometry, ...]
    stop_subset: frozenset[str]


def build_subset(
    config: PipelineConfig,
    policy: ShapePolicy = most_points,
    diagnostics: Diagnostics | None = None,
) -> SubsetResult:
    """Build the route-lines and stops collections for the selected routes.

    Raises ConfigurationError when no configured route exists in the feed.
    """
    gtfs_dir = config.gtfs_dir
    routes = load_routes(gtfs_dir)
    route_ids = select_route_ids(config.selected_routes, routes)

    trips = load_trips(gtfs_dir)
    trip_index = build_trip_index(trips, route_ids)

    geometries = reduce_shapes(trip_index, load_shapes(gtfs_dir), policy, diagnostics)
    stop_subset = trip_index.reachable_stops(load_stop_times(gtfs_dir))

    return SubsetResult(
        route_lines=route_lines_collection(geometries, routes),
        stops=stops_collection(load_stops(gtfs_dir), stop_subset, diagnostics),
        geometries=geometries,
        stop_subset=stop_subset,
    )


def build_full_route_stop_index(
    config: PipelineConfig,
    diagnostics: Diagnostics | None = None,
) -> RouteStopIndex:
    """Index every route in the feed, ignoring the route selection."""
    return build_route_stop_index(
        load_trips(config.gtfs_dir),
        load_stop_times(config.gtfs_dir),
        diagnostics,
    )


def write_subset(result: SubsetResult, output_dir) -> None:
    write_geojson(result.route_lines, output_dir / ROUTE_LINES_FILENAME)
    write_geojson(result.stops, output_dir / STOPS_FILENAME)


def run_pipeline(
    config: PipelineConfig,
    policy: ShapePolicy = most_points,
) -> tuple[SubsetResult, RouteStopIndex, Diagnostics]:
    """Build and write all three artifacts.

    Everything is built before anything is written, so a configuration
    error leaves the output directory untouched. Skipped rows are reported
    in a single DataIntegrityWarning.
    """
    diagnostics = Diagnostics()
    result = build_subset(config, policy, diagnostics)
    index = build_full_route_stop_index(config, diagnostics)

    write_subset(result, config.output_dir)
    write_route_stop_index(index, config.output_dir / ROUTE_STOPS_FILENAME)

    if diagnostics.has_skips():
        logger.warning("Skipped rows: %s", diagnostics.summary())
        warnings.warn(
            f"Skipped rows: {diagnostics.summary()}", DataIntegrityWarning, stacklevel=2
        )
    return result, index, diagnostics
