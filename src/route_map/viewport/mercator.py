"""Spherical Web Mercator (EPSG:3857) in pixel space.

At zoom z the world is a square of tile_size * 2**z pixels with the origin
at the north-west corner (lon -180, lat ~85.05).
"""

from pyproj import Transformer

MAX_LATITUDE = 85.0511287798066
# Half the EPSG:3857 world width in meters
ORIGIN_SHIFT = 20037508.342789244

_to_merc = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)
_to_wgs = Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)


def world_size(zoom: float, tile_size: int = 512) -> float:
    return tile_size * 2.0**zoom


def project(lon: float, lat: float, zoom: float, tile_size: int = 512) -> tuple[float, float]:
    """Geographic degrees to world pixel coordinates at zoom."""
    lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))
    mx, my = _to_merc.transform(lon, lat)
    size = world_size(zoom, tile_size)
    x = (mx + ORIGIN_SHIFT) / (2 * ORIGIN_SHIFT) * size
    y = (ORIGIN_SHIFT - my) / (2 * ORIGIN_SHIFT) * size
    return x, y


def unproject(x: float, y: float, zoom: float, tile_size: int = 512) -> tuple[float, float]:
    """World pixel coordinates at zoom back to (lon, lat) degrees."""
    size = world_size(zoom, tile_size)
    mx = x / size * (2 * ORIGIN_SHIFT) - ORIGIN_SHIFT
    my = ORIGIN_SHIFT - y / size * (2 * ORIGIN_SHIFT)
    lon, lat = _to_wgs.transform(mx, my)
    return lon, lat
