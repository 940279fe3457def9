import pandas as pd

from route_map.errors import Diagnostics
from route_map.extract.joiner import build_trip_index
from route_map.extract.shapes import (
    RouteGeometry,
    most_points,
    prefer_primary,
    reduce_shapes,
    shape_paths,
)

SELECTED = ("100001", "100002", "100003", "100004")


def _shape_rows(shape_id, n, lon0=-122.3, lat0=47.6):
    return [
        {
            "shape_id": shape_id,
            "shape_pt_lat": str(lat0 + i * 0.001),
            "shape_pt_lon": str(lon0 + i * 0.001),
            "shape_pt_sequence": str(i + 1),
        }
        for i in range(n)
    ]


def _trips(*shape_ids, route_id="R1"):
    return pd.DataFrame(
        {
            "route_id": [route_id] * len(shape_ids),
            "trip_id": [f"T{i}" for i in range(len(shape_ids))],
            "shape_id": list(shape_ids),
        }
    )


# --- shape_paths ---


def test_shape_paths_sorted_by_sequence_not_file_order(shapes):
    paths = shape_paths(shapes, ["S10A"])
    assert paths["S10A"] == (
        (-122.330, 47.600),
        (-122.320, 47.610),
        (-122.310, 47.620),
    )


def test_shape_paths_drops_non_finite_points(shapes):
    diagnostics = Diagnostics()
    paths = shape_paths(shapes, ["S10B"], diagnostics)
    assert len(paths["S10B"]) == 4
    assert (-122.320, 47.610) not in paths["S10B"]
    assert diagnostics.skipped["non_finite_shape_point"] == 1


def test_shape_paths_all_invalid_shape_is_absent(shapes):
    paths = shape_paths(shapes, ["S62BAD"])
    assert "S62BAD" not in paths


def test_shape_paths_numeric_sequence_ordering():
    """Sequence 10 sorts after 9, not lexically before it."""
    rows = _shape_rows("S1", 11)
    rows.reverse()
    paths = shape_paths(pd.DataFrame(rows), ["S1"])
    lons = [lon for lon, _ in paths["S1"]]
    assert lons == sorted(lons)


def test_shape_paths_infinite_coordinates_dropped():
    rows = _shape_rows("S1", 3)
    rows[1]["shape_pt_lon"] = "inf"
    paths = shape_paths(pd.DataFrame(rows), ["S1"])
    assert len(paths["S1"]) == 2


# --- policies ---


def test_most_points_picks_largest():
    small = RouteGeometry("R1", "S1", ((0.0, 0.0),) * 12)
    large = RouteGeometry("R1", "S2", ((0.0, 0.0),) * 40)
    assert most_points([small, large]) is large
    assert most_points([large, small]) is large


def test_most_points_tie_goes_to_first():
    first = RouteGeometry("R1", "S1", ((0.0, 0.0),) * 5)
    second = RouteGeometry("R1", "S2", ((1.0, 1.0),) * 5)
    assert most_points([first, second]) is first


def test_most_points_empty():
    assert most_points([]) is None


def test_prefer_primary_overrides_point_count():
    policy = prefer_primary({"S1"})
    small = RouteGeometry("R1", "S1", ((0.0, 0.0),) * 3)
    large = RouteGeometry("R1", "S2", ((0.0, 0.0),) * 30)
    assert policy([small, large]) is small


def test_prefer_primary_falls_back_to_most_points():
    policy = prefer_primary({"S9"})
    small = RouteGeometry("R1", "S1", ((0.0, 0.0),) * 3)
    large = RouteGeometry("R1", "S2", ((0.0, 0.0),) * 30)
    assert policy([small, large]) is large


# --- reduce_shapes ---


def test_reduce_shapes_one_geometry_per_route(trips, shapes):
    index = build_trip_index(trips, SELECTED)
    geometries = reduce_shapes(index, shapes)
    route_ids = [g.route_id for g in geometries]
    assert route_ids == ["100001", "100002", "100003"]


def test_reduce_shapes_prefers_fuller_variant(trips, shapes):
    """S10B keeps 4 valid points after filtering and beats the 3-point S10A."""
    index = build_trip_index(trips, SELECTED)
    geometries = {g.route_id: g for g in reduce_shapes(index, shapes)}
    assert geometries["100001"].shape_id == "S10B"
    assert geometries["100001"].point_count == 4


def test_reduce_shapes_route_without_valid_shape_is_skipped(trips, shapes, caplog):
    index = build_trip_index(trips, ("100004",))
    diagnostics = Diagnostics()
    with caplog.at_level("WARNING"):
        geometries = reduce_shapes(index, shapes, diagnostics=diagnostics)
    assert geometries == ()
    assert "100004" in caplog.text
    assert diagnostics.skipped["shape_without_points"] == 1


def test_reduce_shapes_40_point_shape_beats_12_every_run():
    shapes = pd.DataFrame(_shape_rows("SHORT", 12) + _shape_rows("FULL", 40))
    trips = _trips("SHORT", "FULL")
    for _ in range(5):
        index = build_trip_index(trips, ("R1",))
        (geometry,) = reduce_shapes(index, shapes)
        assert geometry.shape_id == "FULL"
        assert geometry.point_count == 40


def test_reduce_shapes_tie_broken_by_shapes_file_order():
    """Equal point counts go to the shape listed first in shapes.txt."""
    shapes = pd.DataFrame(_shape_rows("B", 5) + _shape_rows("A", 5, lon0=-122.2))
    assert reduce_shapes(build_trip_index(_trips("A", "B"), ("R1",)), shapes)[0].shape_id == "B"
    assert reduce_shapes(build_trip_index(_trips("B", "A"), ("R1",)), shapes)[0].shape_id == "B"


def test_shape_paths_ordered_by_first_valid_row():
    rows = _shape_rows("B", 3) + _shape_rows("A", 3, lon0=-122.2)
    rows[0]["shape_pt_lat"] = "abc"
    rows.insert(1, _shape_rows("A", 1, lon0=-122.1)[0] | {"shape_pt_sequence": "9"})
    paths = shape_paths(pd.DataFrame(rows), ["A", "B"])
    assert list(paths) == ["A", "B"]


def test_reduce_shapes_custom_policy(trips, shapes):
    index = build_trip_index(trips, ("100001",))
    (geometry,) = reduce_shapes(index, shapes, policy=prefer_primary({"S10A"}))
    assert geometry.shape_id == "S10A"
