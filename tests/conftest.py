from pathlib import Path

import pytest

from route_map.config import PipelineConfig
from route_map.data.gtfs import (
    load_routes,
    load_shapes,
    load_stop_times,
    load_stops,
    load_trips,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_ROUTES = ("10", "40", "62")


@pytest.fixture
def gtfs_sample_dir():
    return str(FIXTURES_DIR / "gtfs_sample")


@pytest.fixture
def routes(gtfs_sample_dir):
    return load_routes(gtfs_sample_dir)


@pytest.fixture
def trips(gtfs_sample_dir):
    return load_trips(gtfs_sample_dir)


@pytest.fixture
def shapes(gtfs_sample_dir):
    return load_shapes(gtfs_sample_dir)


@pytest.fixture
def stops(gtfs_sample_dir):
    return load_stops(gtfs_sample_dir)


@pytest.fixture
def stop_times(gtfs_sample_dir):
    return load_stop_times(gtfs_sample_dir)


@pytest.fixture
def pipeline_config(gtfs_sample_dir, tmp_path):
    return PipelineConfig(
        gtfs_dir=Path(gtfs_sample_dir),
        output_dir=tmp_path / "out",
        selected_routes=SAMPLE_ROUTES,
    )


@pytest.fixture
def route_lines():
    """Two routes: one north-south, one east-west."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[-122.33, 47.60], [-122.32, 47.65], [-122.31, 47.70]],
                },
                "properties": {"route_id": "R1", "shape_id": "S1"},
            },
            {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[-122.40, 47.62], [-122.20, 47.62]],
                },
                "properties": {"route_id": "R2", "shape_id": "S2"},
            },
        ],
    }


@pytest.fixture
def stop_features():
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [-122.33, 47.60]},
                "properties": {"stop_id": "A", "name": "3rd Ave & Pike St"},
            },
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [-122.20, 47.62]},
                "properties": {"stop_id": "B", "name": "Bellevue TC"},
            },
        ],
    }
