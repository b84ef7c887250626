"""
Viewport Module – visible map region and the bounds it is held inside.

Coordinates are (lat, lng) in degrees. Zoom follows the slippy-map
convention: at zoom z the world is TILE_SIZE * 2**z pixels wide.
"""

import logging
import math
from dataclasses import dataclass

import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float


@dataclass(frozen=True)
class LatLngBounds:
    south_west: LatLng
    north_east: LatLng

    @classmethod
    def from_corners(cls, corners) -> "LatLngBounds":
        (s, w), (n, e) = corners
        return cls(LatLng(min(s, n), min(w, e)), LatLng(max(s, n), max(w, e)))

    @property
    def center(self) -> LatLng:
        return LatLng(
            (self.south_west.lat + self.north_east.lat) / 2,
            (self.south_west.lng + self.north_east.lng) / 2,
        )

    def contains(self, point: LatLng) -> bool:
        return (self.south_west.lat <= point.lat <= self.north_east.lat
                and self.south_west.lng <= point.lng <= self.north_east.lng)

    def clamp(self, point: LatLng) -> LatLng:
        """Nearest point inside the rectangle."""
        return LatLng(
            min(max(point.lat, self.south_west.lat), self.north_east.lat),
            min(max(point.lng, self.south_west.lng), self.north_east.lng),
        )

    def to_list(self) -> list:
        return [[self.south_west.lat, self.south_west.lng],
                [self.north_east.lat, self.north_east.lng]]


def _mercator_y(lat: float) -> float:
    lat = max(min(lat, 85.0511), -85.0511)
    return math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))


class Viewport:
    """Current centre and zoom, limited to [min_zoom, max_zoom]."""

    def __init__(self, center: LatLng, zoom: float, min_zoom: float, max_zoom: float,
                 max_bounds: LatLngBounds, size=config.CONTAINER_SIZE,
                 zoom_snap: float = config.ZOOM_SNAP):
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.max_bounds = max_bounds
        self.size = size
        self.zoom_snap = zoom_snap
        self.center = center
        # the initial zoom may sit below min_zoom; clamp like any other change
        self.zoom = self._clamp_zoom(zoom)

    def _clamp_zoom(self, zoom: float) -> float:
        return min(max(zoom, self.min_zoom), self.max_zoom)

    def set_zoom(self, zoom: float):
        self.zoom = self._clamp_zoom(zoom)

    def pan_to(self, center: LatLng):
        self.center = center

    def pan_by(self, d_lat: float, d_lng: float):
        self.center = LatLng(self.center.lat + d_lat, self.center.lng + d_lng)

    def bounds_zoom(self, bounds: LatLngBounds) -> float:
        """Largest zoom at which `bounds` fits in the container."""
        width, height = self.size
        d_lng = bounds.north_east.lng - bounds.south_west.lng
        d_y = _mercator_y(bounds.north_east.lat) - _mercator_y(bounds.south_west.lat)
        scales = []
        if d_lng > 0:
            scales.append(width * 360.0 / (config.TILE_SIZE * d_lng))
        if d_y > 0:
            scales.append(height * 2 * math.pi / (config.TILE_SIZE * d_y))
        if not scales:
            return self.max_zoom
        zoom = math.log2(min(scales))
        if self.zoom_snap:
            zoom = math.floor(zoom / self.zoom_snap) * self.zoom_snap
        return self._clamp_zoom(zoom)

    def fit_bounds(self, bounds: LatLngBounds):
        self.center = bounds.center
        self.zoom = self.bounds_zoom(bounds)
        logger.debug("Fit viewport to %s -> zoom %.2f", bounds, self.zoom)


class ViewportConstraint:
    """
    Pulls the viewport centre back inside `bounds` after a drag ends.

    viscosity 0 leaves the centre where the user dropped it, 1 snaps it onto
    the nearest in-bounds point; values in between move it part of the way.
    """

    def __init__(self, bounds: LatLngBounds, viscosity: float = config.MAX_BOUNDS_VISCOSITY):
        if not 0.0 <= viscosity <= 1.0:
            raise ValueError(f"viscosity must be within [0, 1], got {viscosity}")
        self.bounds = bounds
        self.viscosity = viscosity

    def corrected(self, center: LatLng) -> LatLng:
        target = self.bounds.clamp(center)
        v = self.viscosity
        return LatLng(
            center.lat + v * (target.lat - center.lat),
            center.lng + v * (target.lng - center.lng),
        )

    def apply(self, viewport: Viewport) -> LatLng:
        if not self.bounds.contains(viewport.center):
            corrected = self.corrected(viewport.center)
            logger.debug("Viewport centre %s out of bounds, pulled to %s", viewport.center, corrected)
            viewport.pan_to(corrected)
        return viewport.center
