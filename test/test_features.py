import json

import pytest
import requests

import config
from firewatch import features as features_mod
from firewatch.errors import FeatureDataError
from firewatch.features import (
    feature_collection_to_geojson,
    load_feature_collection,
    parse_feature,
    parse_feature_collection,
)


def test_load_from_file_keeps_order(counties):
    assert [f.name for f in counties] == ["Fresno", "Marin", "Santa Barbara", "Alpine", None]
    assert counties[0].riskfactor == 95.0


def test_missing_properties_are_kept_as_none(counties):
    marin = counties[1]
    assert marin.riskfactor is None
    assert marin.display_risk == config.UNKNOWN_RISK
    unnamed = counties[4]
    assert unnamed.name is None
    assert unnamed.display_name == config.UNKNOWN_NAME


def test_zero_risk_is_not_unknown():
    feature = parse_feature({
        "type": "Feature",
        "properties": {"name": "Zero", "riskfactor": 0},
        "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
    })
    assert feature.display_risk == 0.0


def test_bounds_polygon_and_multipolygon(counties):
    assert counties[0].bounds == (36.0, -120.9, 37.6, -118.4)
    assert counties[2].bounds == (33.9, -120.7, 35.1, -119.4)


def test_features_are_immutable(counties):
    with pytest.raises(AttributeError):
        counties[0].riskfactor = 1


def test_non_numeric_risk_is_dropped():
    feature = parse_feature({
        "type": "Feature",
        "properties": {"name": "Odd", "riskfactor": "very high"},
        "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
    })
    assert feature.riskfactor is None


@pytest.mark.parametrize("risk", [float("nan"), float("inf"), "NaN", "-Infinity"])
def test_non_finite_risk_is_dropped(risk, caplog):
    with caplog.at_level("WARNING", logger="firewatch.features"):
        feature = parse_feature({
            "type": "Feature",
            "properties": {"name": "Odd", "riskfactor": risk},
            "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
        })
    assert feature.riskfactor is None
    assert feature.display_risk == config.UNKNOWN_RISK
    assert "non-finite" in caplog.text


def test_rejects_non_collection():
    with pytest.raises(FeatureDataError):
        parse_feature_collection({"type": "Feature"})
    with pytest.raises(FeatureDataError):
        parse_feature_collection([1, 2, 3])


def test_rejects_non_polygon_geometry():
    with pytest.raises(FeatureDataError):
        parse_feature({"type": "Feature", "properties": {}, "geometry": {"type": "Point", "coordinates": [0, 0]}})


def test_missing_file(tmp_path):
    with pytest.raises(FeatureDataError):
        load_feature_collection(str(tmp_path / "nope.json"))


def test_invalid_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(FeatureDataError):
        load_feature_collection(str(path))


def test_round_trip_to_geojson(counties, data_path):
    with open(data_path) as f:
        raw = json.load(f)
    again = parse_feature_collection(feature_collection_to_geojson(counties))
    assert again == counties
    assert len(raw["features"]) == len(again)


class _FakeResponse:

    def __init__(self, payload=None, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        if self.payload is None:
            raise ValueError("no JSON")
        return self.payload


def test_fetch_over_http(monkeypatch, data_path):
    with open(data_path) as f:
        payload = json.load(f)
    seen = {}

    def fake_get(url, timeout):
        seen["url"] = url
        seen["timeout"] = timeout
        return _FakeResponse(payload)

    monkeypatch.setattr(features_mod.requests, "get", fake_get)
    loaded = load_feature_collection("http://example.test/cali-county-bounds.json")
    assert len(loaded) == 5
    assert seen == {"url": "http://example.test/cali-county-bounds.json", "timeout": config.HTTP_TIMEOUT}


@pytest.mark.parametrize("response", [_FakeResponse(status=500), _FakeResponse(payload=None)])
def test_http_failures_become_feature_data_errors(monkeypatch, response):
    monkeypatch.setattr(features_mod.requests, "get", lambda url, timeout: response)
    with pytest.raises(FeatureDataError):
        load_feature_collection("https://example.test/data.json")


def test_connection_error(monkeypatch):
    def boom(url, timeout):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(features_mod.requests, "get", boom)
    with pytest.raises(FeatureDataError):
        load_feature_collection("https://example.test/data.json")
