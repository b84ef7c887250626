"""
Configuration constants for the California Wildfire Risk Map.

Map:  choropleth of California counties shaded by `riskfactor`
      (0–100+, produced upstream and treated as opaque input).

Deployment-specific values can be overridden through FIREWATCH_* env vars.
"""

import os

# ── Map view ────────────────────────────────────────────────────────────────
MAP_CENTER = (37.2, -119.5)
MAP_ZOOM = 5.5
MAP_MIN_ZOOM = 5.75
MAP_MAX_ZOOM = 10
ZOOM_SNAP = 0.25

# Southwest / northeast corners; longitudes are deliberately wide so the
# Pacific side can be panned into view.
CALIFORNIA_BOUNDS = ((31.5, -325.0), (42.5, -60.5))
MAX_BOUNDS_VISCOSITY = 0.8       # 0 = no correction, 1 = hard clamp

# Pixel size of the map container (used for fit-to-bounds zoom)
CONTAINER_SIZE = (1000, 600)
TILE_SIZE = 256

# ── Base tiles ──────────────────────────────────────────────────────────────
TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = "© OpenStreetMap"
TILE_MIN_ZOOM = 5
TILE_MAX_ZOOM = 10

# ── Risk colour table (threshold, hex colour), lowest tier first ────────────
# A value picks the highest threshold it strictly exceeds; the top tier also
# takes anything >= its threshold (values above 100 clamp to it).
RISK_COLOR_TABLE = (
    (0,   "#B8E186"),
    (10,  "#FFEDA0"),
    (20,  "#FEE08F"),
    (30,  "#FFE68A"),
    (40,  "#FEC764"),
    (50,  "#FEB24C"),
    (60,  "#FD8D3C"),
    (70,  "#FC4E2A"),
    (80,  "#E31A1C"),
    (90,  "#BD0026"),
    (100, "#800026"),
)
LEGEND_GRADIENT = (
    "#FFEDA0", "#FED976", "#FEB24C", "#FD8D3C",
    "#FC4E2A", "#E31A1C", "#BD0026", "#800026",
)

# ── Feature styles ──────────────────────────────────────────────────────────
BASE_STYLE = {
    "color": "white",
    "weight": 2,
    "opacity": 1,
    "dash_array": "3",
    "fill_opacity": 0.7,
}
HIGHLIGHT_STYLE = {
    "weight": 5,
    "color": "#666",
    "dash_array": "",
    "fill_opacity": 0.7,
}
LABEL_CLASS = "county-label"

# ── Overlay controls ────────────────────────────────────────────────────────
INFO_POSITION = "topright"
INFO_TITLE = "California Wild Fire Risk"
INFO_PROMPT = "Hover over a county"
UNKNOWN_NAME = "Unknown"
UNKNOWN_RISK = "N/A"

LEGEND_POSITION = "bottomright"
LEGEND_TITLE = "Risk Factor %"
FORECAST_PLACEHOLDER = "Loading..."
FORECAST_TEXT = "Tomorrow: High of 85°F, Low of 65°F"
FORECAST_DELAY_S = 1.0

# ── Data & query collaborators ──────────────────────────────────────────────
DATA_DIR = os.environ.get("FIREWATCH_DATA_DIR", "public")
DATA_FILE = "cali-county-bounds.json"
DATA_URL = os.environ.get("FIREWATCH_DATA_URL", os.path.join(DATA_DIR, DATA_FILE))
QUERY_URL = os.environ.get("FIREWATCH_QUERY_URL", "http://localhost:5050/api/query")
HTTP_TIMEOUT = 30.0              # seconds, for data fetch and query requests

# ── Server ──────────────────────────────────────────────────────────────────
SERVER_PORT = int(os.environ.get("FIREWATCH_PORT", "5050"))

# ── Output ──────────────────────────────────────────────────────────────────
OUTPUT_DIR = os.environ.get("FIREWATCH_OUTPUT_DIR", "output")
RISK_MAP_HTML = "wildfire_risk_map.html"
LOG_LEVEL = os.environ.get("FIREWATCH_LOG_LEVEL", "INFO")
