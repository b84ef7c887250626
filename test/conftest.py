import os

import pytest

import config
from firewatch.canvas import FeatureLayer, MapCanvas
from firewatch.controls import InfoControl
from firewatch.features import load_feature_collection
from firewatch.interaction import FeatureInteractionController
from firewatch.styling import style_for
from firewatch.viewport import LatLng, LatLngBounds, Viewport

DATA_PATH = os.path.join(os.path.dirname(__file__), "data", "counties.json")


def make_viewport():
    return Viewport(
        center=LatLng(*config.MAP_CENTER),
        zoom=config.MAP_ZOOM,
        min_zoom=config.MAP_MIN_ZOOM,
        max_zoom=config.MAP_MAX_ZOOM,
        max_bounds=LatLngBounds.from_corners(config.CALIFORNIA_BOUNDS),
    )


class QueryRecorder:

    def __init__(self):
        self.calls = []

    def __call__(self, lat, lon):
        self.calls.append((lat, lon))


@pytest.fixture
def data_path():
    return DATA_PATH


@pytest.fixture
def counties():
    return load_feature_collection(DATA_PATH)


@pytest.fixture
def query():
    return QueryRecorder()


@pytest.fixture
def wired(counties):
    """Canvas with one bound layer per county, plus its info panel and controller."""
    canvas = MapCanvas(make_viewport())
    info = InfoControl()
    canvas.add_control(info)
    controller = FeatureInteractionController(canvas, info)
    layers = {}
    for feature in counties:
        layer = FeatureLayer(feature, style_for(feature))
        canvas.add_layer(layer)
        controller.bind(layer)
        layers[feature.name] = layer
    return canvas, info, controller, layers
