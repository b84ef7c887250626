#!/usr/bin/env python3
"""
app.py – Flask web server for the California Wildfire Risk Map.

Endpoints:
    GET /                         → the interactive Leaflet map page
    GET /cali-county-bounds.json  → county feature collection (GeoJSON)
    GET /api/query?lat=&lon=      → receives clicked map coordinates
    GET /api/health               → liveness check
"""

import asyncio
import logging
import math
import os

from flask import Flask, jsonify, request, send_from_directory

import config
from firewatch.session import MapSession
from firewatch.viewport import LatLng, LatLngBounds
from firewatch.visualization import build_risk_map

logger = logging.getLogger("firewatch.app")

app = Flask(__name__)
app.config["DATA_DIR"] = config.DATA_DIR
app.config["DATA_SOURCE"] = config.DATA_URL


async def _render_map_page(data_source: str) -> str:
    async with MapSession(data_source=data_source) as session:
        return build_risk_map(session, query_url="/api/query").get_root().render()


def _float_arg(name: str) -> float:
    raw = request.args.get(name)
    if raw is None:
        raise ValueError(f"missing '{name}'")
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"'{name}' must be finite")
    return value


# ── Routes ──────────────────────────────────────────────────────────────────


@app.route("/")
def index():
    html = asyncio.run(_render_map_page(app.config["DATA_SOURCE"]))
    return app.response_class(html, mimetype="text/html")


@app.route(f"/{config.DATA_FILE}")
def county_bounds():
    data_dir = os.path.abspath(app.config["DATA_DIR"])
    if not os.path.exists(os.path.join(data_dir, config.DATA_FILE)):
        return jsonify({"error": "County data not found"}), 404
    return send_from_directory(data_dir, config.DATA_FILE, mimetype="application/geo+json")


@app.route("/api/query")
def query():
    """
    Accepts: ?lat=<float>&lon=<float>
    Returns: { lat, lon, inside_bounds }
    """
    try:
        lat = _float_arg("lat")
        lon = _float_arg("lon")
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    bounds = LatLngBounds.from_corners(config.CALIFORNIA_BOUNDS)
    inside = bounds.contains(LatLng(lat, lon))
    logger.info("Query at (%s, %s) inside_bounds=%s", lat, lon, inside)
    return jsonify({"lat": lat, "lon": lon, "inside_bounds": inside})


@app.route("/api/health")
def health():
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format="[%(name)s] %(message)s")
    print("🔥 Wildfire Risk Map starting...")
    print(f"   Open http://localhost:{config.SERVER_PORT} in your browser")
    app.run(debug=False, port=config.SERVER_PORT, threaded=True)
