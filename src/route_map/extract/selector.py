"""Resolve rider-facing route short names to internal route ids."""

import logging

import pandas as pd

from route_map.errors import ConfigurationError

logger = logging.getLogger(__name__)


def select_route_ids(short_names, routes: pd.DataFrame) -> tuple[str, ...]:
    """Return every route_id whose route_short_name is in short_names.

    A feed may register several route ids under one short name (e.g.
    directional variants); all of them are selected. The result is ordered
    by configured name, then by position in routes.txt, without duplicates.

    Raises ConfigurationError if nothing matches.
    """
    short_names = list(short_names)
    ids_by_short: dict[str, list[str]] = {}
    for row in routes.itertuples(index=False):
        short = row.route_short_name
        if short:
            ids_by_short.setdefault(short, []).append(row.route_id)

    selected: dict[str, None] = {}
    for name in short_names:
        matches = ids_by_short.get(name.strip(), [])
        if not matches:
            logger.warning("Route short name %r matches no route in the feed", name)
        for route_id in matches:
            selected[route_id] = None

    if not selected:
        raise ConfigurationError(
            f"No routes matched {short_names}. "
            "Check the configured route_short_name values."
        )

    logger.info("Selected %d route ids for %d names", len(selected), len(short_names))
    return tuple(selected)
