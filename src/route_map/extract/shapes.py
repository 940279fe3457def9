"""Pick one representative line geometry per route.

Feeds often encode short-turn and deadhead variants as distinct shapes, so a
route usually has several candidates. The choice is delegated to a selection
policy: any callable taking the ordered candidate list and returning one
candidate, or None.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
import pandas as pd

from route_map.errors import Diagnostics
from route_map.extract.joiner import TripIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteGeometry:
    route_id: str
    shape_id: str
    path: tuple[tuple[float, float], ...]  # (lon, lat)

    @property
    def point_count(self) -> int:
        return len(self.path)


ShapePolicy = Callable[[list[RouteGeometry]], RouteGeometry | None]


def most_points(candidates: list[RouteGeometry]) -> RouteGeometry | None:
    """Pick the candidate with the most points; the earliest one wins ties."""
    best = None
    for candidate in candidates:
        if best is None or candidate.point_count > best.point_count:
            best = candidate
    return best


def prefer_primary(primary_shape_ids) -> ShapePolicy:
    """Build a policy preferring shapes a feed flags as the primary variant.

    Falls back to most_points over all candidates when none is flagged.
    """
    primary = frozenset(primary_shape_ids)

    def policy(candidates: list[RouteGeometry]) -> RouteGeometry | None:
        flagged = [c for c in candidates if c.shape_id in primary]
        return most_points(flagged or candidates)

    return policy


def shape_paths(
    shapes: pd.DataFrame,
    shape_ids,
    diagnostics: Diagnostics | None = None,
) -> dict[str, tuple[tuple[float, float], ...]]:
    """Build ordered (lon, lat) paths for the given shape ids.

    Points with a non-finite longitude or latitude are dropped. The rest are
    sorted by shape_pt_sequence (stable, so equal sequence numbers keep file
    order); an unparseable sequence number counts as 0. The returned dict is
    ordered by each shape's first valid row in shapes.txt.
    """
    subset = shapes[shapes["shape_id"].isin(set(shape_ids))]
    lon = pd.to_numeric(subset["shape_pt_lon"], errors="coerce").astype(float)
    lat = pd.to_numeric(subset["shape_pt_lat"], errors="coerce").astype(float)
    seq = pd.to_numeric(subset["shape_pt_sequence"], errors="coerce").astype(float).fillna(0)

    valid = np.isfinite(lon) & np.isfinite(lat)
    if diagnostics is not None:
        diagnostics.record("non_finite_shape_point", int((~valid).sum()))

    points = pd.DataFrame(
        {"shape_id": subset["shape_id"], "seq": seq, "lon": lon, "lat": lat}
    )[valid]
    file_order = points["shape_id"].drop_duplicates().tolist()
    points = points.sort_values("seq", kind="stable")

    grouped = {
        shape_id: tuple(zip(group["lon"].tolist(), group["lat"].tolist()))
        for shape_id, group in points.groupby("shape_id", sort=False)
    }
    return {shape_id: grouped[shape_id] for shape_id in file_order}


def reduce_shapes(
    trip_index: TripIndex,
    shapes: pd.DataFrame,
    policy: ShapePolicy = most_points,
    diagnostics: Diagnostics | None = None,
) -> tuple[RouteGeometry, ...]:
    """Choose one geometry per selected route, in selected-route order.

    Candidates reach the policy in order of first appearance in shapes.txt.

    Routes left with no valid candidate are logged and produce nothing.
    """
    wanted = {sid for shape_ids in trip_index.route_shapes.values() for sid in shape_ids}
    paths = shape_paths(shapes, wanted, diagnostics)

    missing = wanted - paths.keys()
    if missing and diagnostics is not None:
        diagnostics.record("shape_without_points", len(missing))

    geometries = []
    for route_id, shape_ids in trip_index.route_shapes.items():
        route_shape_ids = set(shape_ids)
        candidates = [
            RouteGeometry(route_id=route_id, shape_id=sid, path=path)
            for sid, path in paths.items()
            if sid in route_shape_ids
        ]
        chosen = policy(candidates)
        if chosen is None:
            logger.warning("No valid shape for route %s; skipping", route_id)
            continue
        geometries.append(chosen)

    logger.info("Reduced shapes to %d route geometries", len(geometries))
    return tuple(geometries)
