"""Serialize selected route geometries and reachable stops to GeoJSON."""

import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from route_map.errors import Diagnostics

logger = logging.getLogger(__name__)


def _name_or_none(value: str) -> str | None:
    return value or None


def route_lines_collection(geometries, routes: pd.DataFrame) -> dict:
    """One LineString feature per route geometry.

    Properties: route_id, shape_id, route_short_name, route_long_name.
    Names are None when the route is missing from routes.txt or blank.
    """
    route_by_id = {row.route_id: row for row in routes.itertuples(index=False)}

    features = []
    for geom in geometries:
        route = route_by_id.get(geom.route_id)
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": [[lon, lat] for lon, lat in geom.path],
            },
            "properties": {
                "route_id": geom.route_id,
                "shape_id": geom.shape_id,
                "route_short_name": _name_or_none(route.route_short_name) if route else None,
                "route_long_name": _name_or_none(route.route_long_name) if route else None,
            },
        })
    return {"type": "FeatureCollection", "features": features}


def stops_collection(
    stops: pd.DataFrame,
    stop_subset,
    diagnostics: Diagnostics | None = None,
) -> dict:
    """Point features for the stops in stop_subset, in stops.txt order.

    A stop_id listed more than once keeps only its first row.

    Stops with non-finite coordinates are skipped. Stop ids in the subset
    that stops.txt does not define are counted as dangling.
    """
    reachable = stops[stops["stop_id"].isin(stop_subset)].drop_duplicates("stop_id")
    lon = pd.to_numeric(reachable["stop_lon"], errors="coerce").astype(float)
    lat = pd.to_numeric(reachable["stop_lat"], errors="coerce").astype(float)
    valid = np.isfinite(lon) & np.isfinite(lat)

    if diagnostics is not None:
        diagnostics.record("non_finite_stop", int((~valid).sum()))
        diagnostics.record(
            "dangling_stop_id", len(set(stop_subset) - set(reachable["stop_id"]))
        )

    features = []
    for stop_id, name, x, y in zip(
        reachable["stop_id"][valid],
        reachable["stop_name"][valid],
        lon[valid],
        lat[valid],
    ):
        features.append({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [x, y]},
            "properties": {"stop_id": stop_id, "name": name},
        })
    return {"type": "FeatureCollection", "features": features}


def write_geojson(collection: dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(collection, f)
    logger.info("Wrote %d features to %s", len(collection["features"]), path)
