"""Build the map artifacts from a GTFS feed.

Writes shapes_subset.geojson, stops_subset.geojson and route_stops_map.json
into the output directory.

Settings come from the command line, falling back to environment variables
(a .env file is honored):
    ROUTE_MAP_GTFS_DIR, ROUTE_MAP_OUTPUT_DIR, ROUTE_MAP_ROUTES
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from route_map.config import GTFS_DOWNLOAD_URL, PipelineConfig, pipeline_config_from_env
from route_map.data.gtfs import download_gtfs
from route_map.errors import ConfigurationError
from route_map.extract.pipeline import run_pipeline


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--gtfs-dir")
    parser.add_argument("--output-dir")
    parser.add_argument("--routes", help="Comma-separated route_short_name values")
    parser.add_argument(
        "--download",
        action="store_true",
        help=f"Download the feed into --gtfs-dir first (from {GTFS_DOWNLOAD_URL})",
    )
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> PipelineConfig:
    """Command-line values override the ROUTE_MAP_* environment variables."""
    env = dict(os.environ)
    overrides = {
        "ROUTE_MAP_GTFS_DIR": args.gtfs_dir,
        "ROUTE_MAP_OUTPUT_DIR": args.output_dir,
        "ROUTE_MAP_ROUTES": args.routes,
    }
    env.update({k: v for k, v in overrides.items() if v is not None})
    return pipeline_config_from_env(env)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    try:
        config = resolve_config(args)
    except KeyError as e:
        print(f"Error: {e.args[0]} is not set; pass --gtfs-dir and --output-dir", file=sys.stderr)
        return 2

    if args.download:
        download_gtfs(str(config.gtfs_dir))

    try:
        result, index, diagnostics = run_pipeline(config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {len(result.route_lines['features'])} routes to {config.output_dir}")
    total_points = sum(g.point_count for g in result.geometries)
    print(f"Total coordinate points: {total_points}")
    print(f"Stops: {len(result.stops['features'])}, indexed routes: {len(index.stops_by_route)}")
    if diagnostics.has_skips():
        print(f"Skipped rows: {diagnostics.summary()}")
    return 0


if __name__ == "__main__":
    load_dotenv()
    sys.exit(main())
