"""GTFS table loader.

Every table is read as strings; numeric columns are coerced by the
consumers that need them so that a bad cell only drops its own row.
"""

import logging
import os
import zipfile

import pandas as pd
import requests

from route_map.config import GTFS_DOWNLOAD_URL
from route_map.errors import FeedFormatError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {
    "routes.txt": ["route_id"],
    "trips.txt": ["route_id", "trip_id"],
    "shapes.txt": ["shape_id", "shape_pt_lat", "shape_pt_lon", "shape_pt_sequence"],
    "stops.txt": ["stop_id", "stop_lat", "stop_lon"],
    "stop_times.txt": ["trip_id", "stop_id"],
}

OPTIONAL_COLUMNS = {
    "routes.txt": ["route_short_name", "route_long_name"],
    "trips.txt": ["shape_id"],
    "stops.txt": ["stop_name"],
}


def download_gtfs(output_dir: str, url: str = GTFS_DOWNLOAD_URL) -> None:
    """Download and unzip a GTFS feed.

    Downloads the zip from url and extracts all files into output_dir.
    """
    os.makedirs(output_dir, exist_ok=True)

    resp = requests.get(url)
    resp.raise_for_status()

    zip_path = os.path.join(output_dir, "google_transit.zip")
    with open(zip_path, "wb") as f:
        f.write(resp.content)

    with zipfile.ZipFile(zip_path, "r") as zf:
        zf.extractall(output_dir)

    os.remove(zip_path)


def load_table(gtfs_dir: str, filename: str) -> pd.DataFrame:
    """Read one GTFS table as an all-string DataFrame.

    Headers and cells are stripped of surrounding whitespace, blank cells
    stay as empty strings rather than NaN. Missing optional columns are
    added as empty strings.

    Raises FeedFormatError if a required column is absent.
    """
    path = os.path.join(gtfs_dir, filename)
    df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    df.columns = [c.strip() for c in df.columns]
    for column in df.columns:
        df[column] = df[column].str.strip()

    missing = [c for c in REQUIRED_COLUMNS.get(filename, []) if c not in df.columns]
    if missing:
        raise FeedFormatError(f"{filename} is missing required columns: {missing}")

    for column in OPTIONAL_COLUMNS.get(filename, []):
        if column not in df.columns:
            df[column] = ""

    logger.info("Loaded %s: %d rows", filename, len(df))
    return df


def load_routes(gtfs_dir: str) -> pd.DataFrame:
    """Parse routes.txt from a GTFS directory."""
    return load_table(gtfs_dir, "routes.txt")


def load_trips(gtfs_dir: str) -> pd.DataFrame:
    """Parse trips.txt from a GTFS directory."""
    return load_table(gtfs_dir, "trips.txt")


def load_shapes(gtfs_dir: str) -> pd.DataFrame:
    """Parse shapes.txt from a GTFS directory."""
    return load_table(gtfs_dir, "shapes.txt")


def load_stops(gtfs_dir: str) -> pd.DataFrame:
    """Parse stops.txt from a GTFS directory."""
    return load_table(gtfs_dir, "stops.txt")


def load_stop_times(gtfs_dir: str) -> pd.DataFrame:
    """Parse stop_times.txt from a GTFS directory."""
    return load_table(gtfs_dir, "stop_times.txt")
