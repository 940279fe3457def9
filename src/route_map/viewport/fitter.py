"""Fit a camera to map content inside a padded viewport."""

import logging
import math
from dataclasses import dataclass

from route_map.config import CameraSettings, ViewportPadding
from route_map.viewport.mercator import project, unproject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Camera:
    longitude: float
    latitude: float
    zoom: float


def _finite(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def collect_coordinates(features) -> list:
    """Flatten the [lon, lat] positions of GeoJSON features.

    Handles Point, MultiPoint, LineString and MultiLineString geometries.
    """
    coords = []
    for feature in features:
        geometry = feature.get("geometry") or {}
        kind = geometry.get("type")
        if kind == "Point":
            coords.append(geometry["coordinates"])
        elif kind in ("MultiPoint", "LineString"):
            coords.extend(geometry["coordinates"])
        elif kind == "MultiLineString":
            for line in geometry["coordinates"]:
                coords.extend(line)
    return coords


def bounding_box(coordinates) -> tuple[float, float, float, float] | None:
    """(west, south, east, north) over finite positions, or None."""
    lons, lats = [], []
    for coord in coordinates:
        if len(coord) < 2 or not (_finite(coord[0]) and _finite(coord[1])):
            continue
        lons.append(coord[0])
        lats.append(coord[1])
    if not lons:
        return None
    return min(lons), min(lats), max(lons), max(lats)


def fit_bounds(
    coordinates,
    width: float,
    height: float,
    padding: ViewportPadding = ViewportPadding(),
    settings: CameraSettings = CameraSettings(),
) -> Camera | None:
    """Camera framing every position inside the padded canvas.

    Zoom is the largest (fractional) level at which the projected bounding
    box fits in the area left after padding, clamped to the configured
    range. The center is shifted so the box sits in the middle of that area
    rather than the middle of the canvas.

    Returns None when there is no finite position or no room left after
    padding; callers keep their previous camera.
    """
    bbox = bounding_box(coordinates)
    if bbox is None:
        logger.debug("fit_bounds: no finite coordinates")
        return None

    avail_w = width - padding.left - padding.right
    avail_h = height - padding.top - padding.bottom
    if avail_w <= 0 or avail_h <= 0:
        logger.warning("fit_bounds: padding leaves no visible area (%sx%s)", avail_w, avail_h)
        return None

    west, south, east, north = bbox
    ts = settings.tile_size
    x0, y0 = project(west, north, 0, ts)
    x1, y1 = project(east, south, 0, ts)

    scales = []
    if x1 - x0 > 0:
        scales.append(avail_w / (x1 - x0))
    if y1 - y0 > 0:
        scales.append(avail_h / (y1 - y0))
    zoom = math.log2(min(scales)) if scales else settings.max_zoom
    zoom = max(settings.min_zoom, min(settings.max_zoom, zoom))

    scale = 2.0**zoom
    cx = (x0 + x1) / 2 * scale - (padding.left - padding.right) / 2
    cy = (y0 + y1) / 2 * scale - (padding.top - padding.bottom) / 2
    lon, lat = unproject(cx, cy, zoom, ts)
    return Camera(longitude=lon, latitude=lat, zoom=zoom)


def center_on(lon: float, lat: float, zoom: float) -> Camera:
    return Camera(longitude=lon, latitude=lat, zoom=zoom)


def to_screen(
    camera: Camera,
    lon: float,
    lat: float,
    width: float,
    height: float,
    tile_size: int = 512,
) -> tuple[float, float]:
    """Canvas pixel position of (lon, lat) under camera."""
    px, py = project(lon, lat, camera.zoom, tile_size)
    cx, cy = project(camera.longitude, camera.latitude, camera.zoom, tile_size)
    return px - cx + width / 2, py - cy + height / 2
