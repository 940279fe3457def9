import json

import pandas as pd

from route_map.errors import Diagnostics
from route_map.extract.emitter import route_lines_collection, stops_collection, write_geojson
from route_map.extract.shapes import RouteGeometry


def test_route_lines_feature_shape(routes):
    geometry = RouteGeometry("100001", "S10B", ((-122.33, 47.60), (-122.31, 47.62)))
    fc = route_lines_collection([geometry], routes)
    assert fc["type"] == "FeatureCollection"
    (feature,) = fc["features"]
    assert feature["geometry"] == {
        "type": "LineString",
        "coordinates": [[-122.33, 47.60], [-122.31, 47.62]],
    }
    assert feature["properties"] == {
        "route_id": "100001",
        "shape_id": "S10B",
        "route_short_name": "10",
        "route_long_name": "Capitol Hill - Downtown Seattle",
    }


def test_route_lines_unknown_route_has_null_names(routes):
    geometry = RouteGeometry("nope", "S1", ((0.0, 0.0), (1.0, 1.0)))
    props = route_lines_collection([geometry], routes)["features"][0]["properties"]
    assert props["route_short_name"] is None
    assert props["route_long_name"] is None


def test_route_lines_blank_long_name_is_null():
    routes = pd.DataFrame(
        {"route_id": ["R1"], "route_short_name": ["7"], "route_long_name": [""]}
    )
    geometry = RouteGeometry("R1", "S1", ((0.0, 0.0), (1.0, 1.0)))
    props = route_lines_collection([geometry], routes)["features"][0]["properties"]
    assert props["route_short_name"] == "7"
    assert props["route_long_name"] is None


def test_stops_collection_restricted_to_subset(stops):
    fc = stops_collection(stops, frozenset({"A", "C"}))
    ids = [f["properties"]["stop_id"] for f in fc["features"]]
    assert ids == ["A", "C"]


def test_stops_collection_properties_and_lon_lat_order(stops):
    (feature,) = stops_collection(stops, {"E"})["features"]
    assert feature["geometry"] == {"type": "Point", "coordinates": [-122.325, 47.700]}
    assert feature["properties"] == {"stop_id": "E", "name": "Northgate Station"}


def test_stops_collection_skips_bad_coordinates_and_counts(stops):
    diagnostics = Diagnostics()
    fc = stops_collection(stops, {"F", "G", "MISSING"}, diagnostics)
    ids = [f["properties"]["stop_id"] for f in fc["features"]]
    assert ids == ["F"]
    assert diagnostics.skipped["non_finite_stop"] == 1
    assert diagnostics.skipped["dangling_stop_id"] == 1


def test_write_geojson(tmp_path, stops):
    fc = stops_collection(stops, {"A"})
    path = tmp_path / "nested" / "stops.geojson"
    write_geojson(fc, path)
    with open(path) as f:
        assert json.load(f) == fc


def test_stops_collection_one_feature_per_repeated_stop_id():
    stops = pd.DataFrame(
        {
            "stop_id": ["A", "A", "B"],
            "stop_name": ["Pike St", "Pike St (dup)", "Pine St"],
            "stop_lat": ["47.60", "47.61", "47.62"],
            "stop_lon": ["-122.33", "-122.34", "-122.32"],
        }
    )
    fc = stops_collection(stops, {"A", "B"})
    ids = [f["properties"]["stop_id"] for f in fc["features"]]
    assert ids == ["A", "B"]
    assert fc["features"][0]["properties"]["name"] == "Pike St"
