"""Selection state driving which geometry the camera frames.

States:
    SystemView           every selected route is framed
    RouteSelected(id)    one route's line is framed
    StopSelected(id)     centered on one stop at a fixed zoom

Going back to SystemView restores the camera captured when the feed was
loaded, so select/deselect cycles always land on the same camera.
"""

import logging
from dataclasses import dataclass

from route_map.config import DEFAULT_CAMERA, DEFAULT_PADDING, CameraSettings, ViewportPadding
from route_map.data.artifacts import ArtifactClient
from route_map.extract.route_stops import RouteStopIndex
from route_map.viewport.fitter import Camera, center_on, collect_coordinates, fit_bounds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SystemView:
    pass


@dataclass(frozen=True)
class RouteSelected:
    route_id: str


@dataclass(frozen=True)
class StopSelected:
    stop_id: str


class MapSession:
    def __init__(
        self,
        width: float,
        height: float,
        padding: ViewportPadding = DEFAULT_PADDING,
        settings: CameraSettings = DEFAULT_CAMERA,
    ):
        self.width = width
        self.height = height
        self.padding = padding
        self.settings = settings
        self.state = SystemView()
        self.camera: Camera | None = None
        self.system_camera: Camera | None = None
        self.route_stop_index: RouteStopIndex | None = None
        self._routes: dict[str, dict] = {}
        self._stops: dict[str, dict] = {}
        self._loaded = False

    def load(
        self,
        route_lines: dict,
        stops: dict,
        route_stop_index: RouteStopIndex | None = None,
    ) -> Camera | None:
        """Take the loaded collections and capture the system-wide camera.

        May only be called once per session.
        """
        if self._loaded:
            raise RuntimeError("MapSession already loaded")
        self._loaded = True
        self._routes = {f["properties"]["route_id"]: f for f in route_lines["features"]}
        self._stops = {f["properties"]["stop_id"]: f for f in stops["features"]}
        self.route_stop_index = route_stop_index

        self.system_camera = self._fit(list(self._routes.values()))
        self.state = SystemView()
        self.camera = self.system_camera
        return self.camera

    def _fit(self, features) -> Camera | None:
        return fit_bounds(
            collect_coordinates(features),
            self.width,
            self.height,
            self.padding,
            self.settings,
        )

    def _camera_for(self, state) -> Camera | None:
        if isinstance(state, RouteSelected):
            return self._fit([self._routes[state.route_id]])
        if isinstance(state, StopSelected):
            lon, lat = self._stops[state.stop_id]["geometry"]["coordinates"][:2]
            return center_on(lon, lat, self.settings.stop_zoom)
        return self.system_camera

    def _transition(self, state) -> Camera | None:
        camera = self._camera_for(state)
        self.state = state
        if camera is not None:
            self.camera = camera
        return self.camera

    def select_route(self, route_id: str) -> Camera | None:
        if route_id not in self._routes:
            raise KeyError(route_id)
        return self._transition(RouteSelected(route_id))

    def select_stop(self, stop_id: str) -> Camera | None:
        if stop_id not in self._stops:
            raise KeyError(stop_id)
        return self._transition(StopSelected(stop_id))

    def back(self) -> Camera | None:
        return self._transition(SystemView())

    def resize(self, width: float, height: float) -> Camera | None:
        """Refit for a new canvas size.

        The system camera is recaptured for the new size; the current
        state's camera is then recomputed from scratch.
        """
        self.width = width
        self.height = height
        system_camera = self._fit(list(self._routes.values()))
        if system_camera is not None:
            self.system_camera = system_camera
        return self._transition(self.state)

    def visible_stops(self) -> list[dict]:
        """Stop features to draw for the current state."""
        if isinstance(self.state, StopSelected):
            return [self._stops[self.state.stop_id]]
        if isinstance(self.state, RouteSelected) and self.route_stop_index is not None:
            served = self.route_stop_index.stops_for_route(self.state.route_id)
            return [f for sid, f in self._stops.items() if sid in served]
        return list(self._stops.values())


def open_session(
    client: ArtifactClient,
    width: float,
    height: float,
    padding: ViewportPadding = DEFAULT_PADDING,
    settings: CameraSettings = DEFAULT_CAMERA,
) -> MapSession:
    """Fetch every artifact, then build a session framed on the whole system.

    FetchError from any artifact propagates; no camera is computed until all
    three have resolved.
    """
    artifacts = client.fetch_all()
    session = MapSession(width, height, padding, settings)
    session.load(artifacts.route_lines, artifacts.stops, artifacts.route_stop_index)
    return session
