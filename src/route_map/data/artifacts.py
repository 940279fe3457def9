"""HTTP client for the artifacts written by the extraction pipeline."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import requests

from route_map.config import ROUTE_LINES_FILENAME, ROUTE_STOPS_FILENAME, STOPS_FILENAME
from route_map.errors import FetchError
from route_map.extract.route_stops import RouteStopIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifacts:
    route_lines: dict
    stops: dict
    route_stop_index: RouteStopIndex


class ArtifactClient:
    """Fetches the route-lines, stops and route-stop index artifacts.

    Any failure raises FetchError. There is no retry and no cached
    fallback; the caller decides what to do.
    """

    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get_json(self, filename: str):
        url = f"{self.base_url}/{filename}"
        try:
            resp = requests.get(
                url, headers={"Cache-Control": "no-cache"}, timeout=self.timeout
            )
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

    def fetch_route_lines(self) -> dict:
        return self._get_json(ROUTE_LINES_FILENAME)

    def fetch_stops(self) -> dict:
        return self._get_json(STOPS_FILENAME)

    def fetch_route_stop_index(self) -> RouteStopIndex:
        return RouteStopIndex.from_json_dict(self._get_json(ROUTE_STOPS_FILENAME))

    def fetch_all(self) -> Artifacts:
        """Fetch all three artifacts concurrently.

        Returns once every request has resolved; if any failed, its
        FetchError is raised.
        """
        with ThreadPoolExecutor(max_workers=3) as executor:
            route_lines = executor.submit(self.fetch_route_lines)
            stops = executor.submit(self.fetch_stops)
            index = executor.submit(self.fetch_route_stop_index)
            artifacts = Artifacts(
                route_lines=route_lines.result(),
                stops=stops.result(),
                route_stop_index=index.result(),
            )
        logger.info(
            "Loaded %d routes, %d stops",
            len(artifacts.route_lines["features"]),
            len(artifacts.stops["features"]),
        )
        return artifacts
