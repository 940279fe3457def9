"""Rebuild only route_stops_map.json from a GTFS feed.

Usage: python scripts/build_route_stops_map.py GTFS_DIR OUTPUT_DIR
"""

import logging
import sys
from pathlib import Path

from route_map.config import ROUTE_STOPS_FILENAME, PipelineConfig
from route_map.errors import Diagnostics
from route_map.extract.pipeline import build_full_route_stop_index
from route_map.extract.route_stops import write_route_stop_index


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if argv is None:
        argv = sys.argv[1:]
    if len(argv) != 2:
        print(__doc__, file=sys.stderr)
        return 2

    config = PipelineConfig(gtfs_dir=Path(argv[0]), output_dir=Path(argv[1]))
    diagnostics = Diagnostics()
    index = build_full_route_stop_index(config, diagnostics)
    output = config.output_dir / ROUTE_STOPS_FILENAME
    write_route_stop_index(index, output)

    total = sum(len(stops) for stops in index.stops_by_route.values())
    print(f"Found {len(index.stops_by_route)} routes")
    print(f"Total route-stop associations: {total}")
    if diagnostics.has_skips():
        print(f"Skipped rows: {diagnostics.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
