"""
Session Module – builds the wildfire risk map and owns its lifecycle.

Construction order (MapSession.open):
  1. viewport + bounds constraint
  2. base tile layer, scoped to the California bounds
  3. info and legend panels
  4. county features, fetched off the event loop (failure is non-fatal)
  5. one styled, interactive layer per county
  6. drag-end handler pulling the view back inside the bounds
  7. click handler: coordinate popup + query collaborator
"""

import asyncio
import logging

import config
from firewatch.canvas import FeatureLayer, MapCanvas, TileLayer
from firewatch.controls import InfoControl, LegendControl
from firewatch.errors import SessionInitError, SessionStateError
from firewatch.features import load_feature_collection
from firewatch.interaction import FeatureInteractionController
from firewatch.query import HttpQueryClient
from firewatch.styling import style_for
from firewatch.viewport import LatLng, LatLngBounds, Viewport, ViewportConstraint

logger = logging.getLogger(__name__)


class MapSession:

    def __init__(
        self,
        data_source: str = None,
        query=None,
        loader=load_feature_collection,
        legacy_renderer: bool = False,
        forecast_delay: float = config.FORECAST_DELAY_S,
        container_size=config.CONTAINER_SIZE,
    ):
        self.data_source = data_source or config.DATA_URL
        self.query = query if query is not None else HttpQueryClient()
        self.legacy_renderer = legacy_renderer
        self.forecast_delay = forecast_delay
        self.container_size = container_size
        self._loader = loader

        self.bounds = LatLngBounds.from_corners(config.CALIFORNIA_BOUNDS)
        self.canvas = None
        self.constraint = None
        self.info = None
        self.legend = None
        self.controller = None
        self.features = ()
        self.data_error = None
        self._state = "new"

    @property
    def is_open(self) -> bool:
        return self._state == "open"

    @property
    def is_closed(self) -> bool:
        return self._state == "closed"

    # ── Lifecycle ───────────────────────────────────────────────────────────

    async def open(self) -> "MapSession":
        if self._state != "new":
            raise SessionStateError(f"Cannot open a session that is {self._state}")
        self._state = "opening"

        self._guarded(self._build_map)
        try:
            await self._load_features()
        except BaseException:
            self.close()
            raise
        if self._state == "closed":
            logger.info("Session closed while features were loading")
            return self
        self._guarded(self._render_features)
        self._guarded(self._register_handlers)

        self._state = "open"
        logger.info("Map session open (%d counties)", len(self.features))
        return self

    def close(self):
        """Tear the map down; later events and timers become no-ops."""
        if self._state == "closed":
            return
        if self.canvas is not None:
            self.canvas.remove()
        self._state = "closed"
        logger.info("Map session closed")

    async def __aenter__(self):
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb):
        self.close()

    def _guarded(self, step):
        # any construction failure removes whatever was already mounted
        try:
            step()
        except Exception as e:
            logger.error("Error initializing map: %s", e, exc_info=True)
            self.close()
            raise SessionInitError(f"Map initialization failed during {step.__name__}: {e}") from e

    # ── Construction steps ──────────────────────────────────────────────────

    def _build_map(self):
        viewport = Viewport(
            center=LatLng(*config.MAP_CENTER),
            zoom=config.MAP_ZOOM,
            min_zoom=config.MAP_MIN_ZOOM,
            max_zoom=config.MAP_MAX_ZOOM,
            max_bounds=self.bounds,
            size=self.container_size,
        )
        self.constraint = ViewportConstraint(self.bounds, config.MAX_BOUNDS_VISCOSITY)
        self.canvas = MapCanvas(viewport, loop=asyncio.get_running_loop(),
                                legacy_renderer=self.legacy_renderer)

        self.canvas.add_tile_layer(TileLayer(
            url_template=config.TILE_URL,
            attribution=config.TILE_ATTRIBUTION,
            min_zoom=config.TILE_MIN_ZOOM,
            max_zoom=config.TILE_MAX_ZOOM,
            bounds=self.bounds,
        ))

        self.info = InfoControl()
        self.canvas.add_control(self.info)
        self.legend = LegendControl(forecast_delay=self.forecast_delay)
        self.canvas.add_control(self.legend)
        self.controller = FeatureInteractionController(self.canvas, self.info)

    async def _load_features(self):
        try:
            self.features = await asyncio.to_thread(self._loader, self.data_source)
        except Exception as e:
            self.data_error = e
            self.features = ()
            logger.error("Error loading GeoJSON: %s", e, exc_info=True)

    def _render_features(self):
        for feature in self.features:
            layer = FeatureLayer(feature, style_for(feature))
            self.canvas.add_layer(layer)
            self.controller.bind(layer)

    def _register_handlers(self):
        self.canvas.on("dragend", self._on_drag_end)
        self.canvas.on("click", self._on_click)

    # ── Map handlers ────────────────────────────────────────────────────────

    def _on_drag_end(self):
        self.constraint.apply(self.canvas.viewport)

    def _on_click(self, latlng: LatLng):
        self.canvas.open_popup(latlng, f"Lat, Lon : {latlng.lat}, {latlng.lng}")
        try:
            self.query(latlng.lat, latlng.lng)
        except Exception as e:
            logger.warning("Query for (%s, %s) failed: %s", latlng.lat, latlng.lng, e)

    # ── Event dispatch (hosts, CLI, tests) ──────────────────────────────────

    def layer_for(self, name: str) -> FeatureLayer:
        if self.canvas is None:
            raise SessionStateError("Session has not been opened")
        for layer in self.canvas.layers:
            if layer.feature.name == name:
                return layer
        raise KeyError(name)

    def pointer_enter(self, name: str):
        self.layer_for(name).fire("mouseover")

    def pointer_leave(self, name: str):
        self.layer_for(name).fire("mouseout")

    def click_feature(self, name: str):
        self.layer_for(name).fire("click")

    def click_map(self, lat: float, lng: float):
        self.canvas.fire("click", LatLng(lat, lng))

    def drag(self, *steps):
        """Pan by each (d_lat, d_lng) step, then end the drag gesture."""
        if self.canvas is None or self.canvas.removed:
            return None
        for d_lat, d_lng in steps:
            self.canvas.viewport.pan_by(d_lat, d_lng)
            self.canvas.fire("drag")
        self.canvas.fire("dragend")
        return self.canvas.viewport.center
