"""
Features Module – county polygons carrying a wildfire risk factor.

A feature collection is loaded once per map session from a GeoJSON file or
URL and is never mutated afterwards; layer visuals are computed from it.
"""

import json
import logging
import math
import os
from dataclasses import dataclass, field

import requests
from shapely.geometry import shape

import config
from firewatch.errors import FeatureDataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskFeature:
    """One county polygon with its `name` and `riskfactor` properties."""

    name: str | None
    riskfactor: float | None
    geometry: dict = field(repr=False, compare=False, hash=False)

    @property
    def bounds(self):
        """(south, west, north, east) of the geometry."""
        minx, miny, maxx, maxy = shape(self.geometry).bounds
        return miny, minx, maxy, maxx

    @property
    def display_name(self) -> str:
        return self.name if self.name else config.UNKNOWN_NAME

    @property
    def display_risk(self):
        # 0 is a real reading; only a missing value is unknown
        return self.riskfactor if self.riskfactor is not None else config.UNKNOWN_RISK

    def to_geojson(self) -> dict:
        props = {}
        if self.name is not None:
            props["name"] = self.name
        if self.riskfactor is not None:
            props["riskfactor"] = self.riskfactor
        return {"type": "Feature", "properties": props, "geometry": self.geometry}


FeatureCollection = tuple[RiskFeature, ...]


def parse_feature(raw: dict) -> RiskFeature:
    """Build a RiskFeature from a GeoJSON Feature, tolerating missing props."""
    if not isinstance(raw, dict):
        raise FeatureDataError(f"Feature must be an object, got {type(raw).__name__}")
    geometry = raw.get("geometry")
    if not isinstance(geometry, dict) or geometry.get("type") not in ("Polygon", "MultiPolygon"):
        raise FeatureDataError(f"Feature geometry must be a Polygon or MultiPolygon, got {geometry!r:.60}")
    props = raw.get("properties") or {}

    risk = props.get("riskfactor")
    if risk is not None:
        try:
            risk = float(risk)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric riskfactor %r for %s", risk, props.get("name"))
            risk = None
        if risk is not None and not math.isfinite(risk):
            logger.warning("Ignoring non-finite riskfactor %r for %s", risk, props.get("name"))
            risk = None
    name = props.get("name")
    return RiskFeature(name=str(name) if name else None, riskfactor=risk, geometry=geometry)


def parse_feature_collection(data) -> FeatureCollection:
    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise FeatureDataError("Payload is not a GeoJSON FeatureCollection")
    features = tuple(parse_feature(f) for f in data.get("features") or [])
    logger.info("Parsed %d county features", len(features))
    return features


def feature_collection_to_geojson(features: FeatureCollection) -> dict:
    return {"type": "FeatureCollection", "features": [f.to_geojson() for f in features]}


def load_feature_collection(source: str = None) -> FeatureCollection:
    """
    Fetch and parse the county feature collection.

    `source` is an http(s) URL (fetched with a plain GET) or a local path.
    Any transport, JSON or shape problem is raised as FeatureDataError.
    """
    source = source or config.DATA_URL
    logger.info("Loading county features from %s", source)

    if source.startswith(("http://", "https://")):
        try:
            resp = requests.get(source, timeout=config.HTTP_TIMEOUT)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise FeatureDataError(f"Could not fetch {source}: {e}") from e
    else:
        if not os.path.exists(source):
            raise FeatureDataError(f"Feature file not found: {source}")
        try:
            with open(source, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise FeatureDataError(f"Could not read {source}: {e}") from e

    return parse_feature_collection(data)
