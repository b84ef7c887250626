"""
Canvas Module – the map instance: viewport, layers, controls, handlers, timers.

Everything runs on one asyncio loop. Handlers are plain callables invoked
synchronously by `fire`, so each runs to completion before the next event.
Once `remove()` has been called the canvas ignores events and timers.
"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass

from firewatch.errors import SessionStateError
from firewatch.viewport import LatLng, LatLngBounds, Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileLayer:
    url_template: str
    attribution: str
    min_zoom: int
    max_zoom: int
    bounds: LatLngBounds


@dataclass(frozen=True)
class Tooltip:
    text: str
    permanent: bool = True
    direction: str = "center"
    class_name: str = ""


@dataclass(frozen=True)
class Popup:
    latlng: LatLng
    content: str


@dataclass(frozen=True)
class FeatureEvent:
    """A pointer event on one feature layer."""
    feature: object
    layer: "FeatureLayer"


class FeatureLayer:
    """Visual handle for one RiskFeature."""

    def __init__(self, feature, style):
        self.feature = feature
        self.style = style
        self.tooltip = None
        self.canvas = None
        self._handlers = {}

    def set_style(self, overrides: dict):
        self.style = self.style.merged(overrides)

    def reset_style(self, style):
        self.style = style

    def bind_tooltip(self, text: str, **options):
        self.tooltip = Tooltip(text, **options)

    def bring_to_front(self):
        if self.canvas is not None:
            self.canvas.bring_to_front(self)

    def on(self, **handlers):
        self._handlers.update(handlers)

    def off(self):
        self._handlers.clear()

    def fire(self, event_type: str):
        if self.canvas is None or self.canvas.removed:
            return
        handler = self._handlers.get(event_type)
        if handler is not None:
            handler(FeatureEvent(self.feature, self))

    @property
    def bounds(self) -> LatLngBounds:
        south, west, north, east = self.feature.bounds
        return LatLngBounds(LatLng(south, west), LatLng(north, east))


class MapCanvas:

    def __init__(self, viewport: Viewport, loop: asyncio.AbstractEventLoop = None,
                 legacy_renderer: bool = False):
        self.viewport = viewport
        # old renderers cannot re-order SVG paths
        self.legacy_renderer = legacy_renderer
        self.tile_layer = None
        self.controls = []
        self.layers = []
        self.popup = None
        self.removed = False
        self._loop = loop
        self._handlers = defaultdict(list)
        self._timers = set()

    def _check_alive(self):
        if self.removed:
            raise SessionStateError("Map canvas has been removed")

    # ── Layers ──────────────────────────────────────────────────────────────

    def add_tile_layer(self, tile_layer: TileLayer):
        self._check_alive()
        self.tile_layer = tile_layer

    def add_layer(self, layer: FeatureLayer):
        self._check_alive()
        layer.canvas = self
        self.layers.append(layer)

    def bring_to_front(self, layer: FeatureLayer):
        if self.layers[-1] is layer:
            return
        self.layers.remove(layer)
        self.layers.append(layer)

    # ── Controls ────────────────────────────────────────────────────────────

    def add_control(self, control):
        self._check_alive()
        handle = control.mount(self)
        self.controls.append(control)
        return handle

    # ── Events ──────────────────────────────────────────────────────────────

    def on(self, event_type: str, handler):
        self._check_alive()
        self._handlers[event_type].append(handler)

    def fire(self, event_type: str, *args):
        if self.removed:
            logger.debug("Ignoring %s on removed canvas", event_type)
            return
        for handler in list(self._handlers[event_type]):
            handler(*args)

    def call_later(self, delay: float, callback) -> asyncio.TimerHandle:
        """Schedule `callback` once; the returned handle cancels it."""
        self._check_alive()
        loop = self._loop or asyncio.get_running_loop()
        timer = None

        def _run():
            self._timers.discard(timer)
            if not self.removed:
                callback()

        timer = loop.call_later(delay, _run)
        self._timers.add(timer)
        return timer

    # ── View ────────────────────────────────────────────────────────────────

    def fit_bounds(self, bounds: LatLngBounds):
        self.viewport.fit_bounds(bounds)

    def open_popup(self, latlng: LatLng, content: str) -> Popup:
        self.popup = Popup(latlng, content)
        return self.popup

    def remove(self):
        """Destroy the map: cancel timers, unmount controls, drop handlers."""
        if self.removed:
            return
        self.removed = True
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()
        for control in self.controls:
            control.unmount()
        self.controls.clear()
        for layer in self.layers:
            layer.off()
        self.layers.clear()
        self._handlers.clear()
        self.popup = None
        self.tile_layer = None
        logger.debug("Map canvas removed")
