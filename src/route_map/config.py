import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ViewportPadding:
    """Pixels reserved for fixed UI chrome on each edge of the map canvas."""

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


@dataclass(frozen=True)
class CameraSettings:
    min_zoom: float = 0.0
    max_zoom: float = 20.0
    stop_zoom: float = 16.0
    tile_size: int = 512


@dataclass(frozen=True)
class PipelineConfig:
    gtfs_dir: Path
    output_dir: Path
    selected_routes: tuple[str, ...] = field(default_factory=tuple)


# King County Metro routes by route_short_name (what riders see)
DEFAULT_SELECTED_ROUTES: tuple[str, ...] = (
    "10", "40", "62", "8", "44", "70", "1", "11", "13", "14",
)

GTFS_DOWNLOAD_URL = "https://metro.kingcounty.gov/GTFS/google_transit.zip"

ROUTE_LINES_FILENAME = "shapes_subset.geojson"
STOPS_FILENAME = "stops_subset.geojson"
ROUTE_STOPS_FILENAME = "route_stops_map.json"

# Left rail and top bar of the map page
DEFAULT_PADDING = ViewportPadding(top=64, right=24, bottom=24, left=320)
DEFAULT_CAMERA = CameraSettings()


def parse_route_list(value: str) -> tuple[str, ...]:
    """Split a comma-separated route list, dropping blanks."""
    return tuple(part.strip() for part in value.split(",") if part.strip())


def pipeline_config_from_env(env: dict | None = None) -> PipelineConfig:
    """Build a PipelineConfig from ROUTE_MAP_* environment variables.

    ROUTE_MAP_GTFS_DIR and ROUTE_MAP_OUTPUT_DIR are required.
    ROUTE_MAP_ROUTES is optional and defaults to DEFAULT_SELECTED_ROUTES.
    """
    if env is None:
        env = os.environ
    routes = parse_route_list(env.get("ROUTE_MAP_ROUTES", ""))
    return PipelineConfig(
        gtfs_dir=Path(env["ROUTE_MAP_GTFS_DIR"]),
        output_dir=Path(env["ROUTE_MAP_OUTPUT_DIR"]),
        selected_routes=routes or DEFAULT_SELECTED_ROUTES,
    )
