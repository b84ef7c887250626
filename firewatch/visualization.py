"""
Visualization Module – Interactive Folium/Leaflet wildfire risk map.

Renders an open MapSession as a standalone HTML page. Styles, legend rows
and panel text all come from the session, so the browser map behaves like
the in-process one: hover highlight + info panel, permanent county labels,
click-to-zoom, drag-end bounds correction, click popup + query request.
"""

import logging
import os

import folium
from branca.element import MacroElement
from jinja2 import Template

import config
from firewatch.errors import SessionStateError
from firewatch.features import feature_collection_to_geojson, parse_feature
from firewatch.styling import highlight_leaflet, style_for

logger = logging.getLogger(__name__)

_CSS = """
<style>
.info { padding: 6px 8px; font: 14px/16px Arial, Helvetica, sans-serif;
        background: rgba(255,255,255,0.8); box-shadow: 0 0 15px rgba(0,0,0,0.2);
        border-radius: 5px; }
.info h4 { margin: 0 0 5px; color: #777; }
.legend { line-height: 18px; color: #555; }
.legend i { width: 18px; height: 18px; float: left; margin-right: 8px; opacity: 0.7; }
.county-label { background: transparent; border: none; box-shadow: none;
                font-size: 10px; font-weight: bold; }
</style>
"""


class RiskMapInteractions(MacroElement):
    """Info/legend controls and pointer handlers for the county GeoJson layer."""

    _template = Template("""
        {% macro script(this, kwargs) %}
        (function() {
          var map = {{ this._parent.get_name() }};
          var counties = {% if this.geojson %}{{ this.geojson.get_name() }}{% else %}L.geoJSON(){% endif %};
          var bounds = {{ this.bounds|tojson }};
          var highlight = {{ this.highlight|tojson }};
          var esc = function(s) {
            return String(s).replace(/&/g, '&amp;').replace(/</g, '&lt;').replace(/>/g, '&gt;');
          };

          var info = L.control({position: {{ this.info_position|tojson }}});
          info.onAdd = function() {
            this._div = L.DomUtil.create('div', 'info');
            this.update();
            return this._div;
          };
          info.update = function(props) {
            if (!this._div) return;
            var body = {{ this.prompt|tojson }};
            if (props) {
              var risk = props.risk === {{ this.unknown_risk|tojson }} ? props.risk : props.risk + '%';
              body = '<div><b>County: ' + esc(props.name) + '</b></div><div>Risk: ' + esc(risk) + '</div>';
            }
            this._div.innerHTML = '<h4>' + esc({{ this.title|tojson }}) + '</h4>' + body;
          };
          info.addTo(map);

          var legend = L.control({position: {{ this.legend_position|tojson }}});
          legend.onAdd = function() {
            var div = L.DomUtil.create('div', 'info legend');
            div.innerHTML = {{ this.legend_html|tojson }};
            return div;
          };
          legend.addTo(map);

          var forecastTimer = setTimeout(function() {
            var el = document.getElementById('forecast');
            if (el) el.textContent = {{ this.forecast|tojson }};
          }, {{ this.forecast_delay_ms }});
          map.on('unload', function() { clearTimeout(forecastTimer); });

          var hovered = null;
          counties.eachLayer(function(layer) {
            var props = layer.feature.properties || {};
            if (props.name) {
              layer.bindTooltip(String(props.name), {
                permanent: true, direction: 'center', className: {{ this.label_class|tojson }}
              });
            }
            layer.on({
              mouseover: function() {
                if (hovered === layer) return;
                if (hovered) counties.resetStyle(hovered);
                layer.setStyle(highlight);
                if (!L.Browser.ie && !L.Browser.opera && !L.Browser.edge) layer.bringToFront();
                hovered = layer;
                info.update({
                  name: props.name || {{ this.unknown_name|tojson }},
                  risk: props.riskfactor != null ? props.riskfactor : {{ this.unknown_risk|tojson }}
                });
              },
              mouseout: function() {
                if (hovered !== layer) return;
                counties.resetStyle(layer);
                hovered = null;
                info.update();
              },
              click: function() { map.fitBounds(layer.getBounds()); }
            });
          });

          map.on('dragend', function() { map.panInsideBounds(bounds, {animate: true}); });
          map.on('click', function(e) {
            L.popup()
              .setLatLng(e.latlng)
              .setContent('<p>Lat, Lon : ' + e.latlng.lat + ', ' + e.latlng.lng + '</p>')
              .openOn(map);
            fetch({{ this.query_url|tojson }} + '?lat=' + e.latlng.lat + '&lon=' + e.latlng.lng)
              .catch(function(err) { console.error('Query failed:', err); });
          });
        })();
        {% endmacro %}
    """)

    def __init__(self, geojson, session, query_url: str):
        super().__init__()
        self._name = "RiskMapInteractions"
        self.geojson = geojson
        self.bounds = session.bounds.to_list()
        self.highlight = highlight_leaflet()
        self.info_position = session.info.position
        self.title = config.INFO_TITLE
        self.prompt = config.INFO_PROMPT
        self.unknown_name = config.UNKNOWN_NAME
        self.unknown_risk = config.UNKNOWN_RISK
        self.legend_position = session.legend.position
        self.legend_html = str(session.legend.handle.render())
        self.forecast = session.legend.forecast_text
        self.forecast_delay_ms = int(session.legend.forecast_delay * 1000)
        self.label_class = config.LABEL_CLASS
        self.query_url = query_url


def _leaflet_style(geojson_feature: dict) -> dict:
    return style_for(parse_feature(geojson_feature)).to_leaflet()


def build_risk_map(session, query_url: str = None) -> folium.Map:
    """
    Build a Folium map mirroring an open session:
      1. OSM base tiles scoped to the California bounds
      2. County choropleth (one path per feature, styled by risk)
      3. Info + legend panels and pointer / click / drag handlers
    """
    if not session.is_open:
        raise SessionStateError("Only an open session can be rendered")

    viewport = session.canvas.viewport
    (south, west), (north, east) = session.bounds.to_list()
    m = folium.Map(
        location=[viewport.center.lat, viewport.center.lng],
        zoom_start=viewport.zoom,
        min_zoom=viewport.min_zoom,
        max_zoom=viewport.max_zoom,
        tiles=None,
        max_bounds=True,
        min_lat=south, max_lat=north,
        min_lon=west, max_lon=east,
        zoom_snap=viewport.zoom_snap,
        max_bounds_viscosity=session.constraint.viscosity,
    )

    tiles = session.canvas.tile_layer
    folium.TileLayer(
        tiles=tiles.url_template,
        attr=tiles.attribution,
        name="OpenStreetMap",
        min_zoom=tiles.min_zoom,
        max_zoom=tiles.max_zoom,
        bounds=tiles.bounds.to_list(),
    ).add_to(m)

    geojson = None
    if session.features:
        geojson = folium.GeoJson(
            feature_collection_to_geojson(session.features),
            name="Counties",
            style_function=_leaflet_style,
            zoom_on_click=False,
        )
        geojson.add_to(m)
    else:
        logger.warning("Rendering map without county layers")

    m.get_root().header.add_child(folium.Element(_CSS))
    m.add_child(RiskMapInteractions(geojson, session, query_url or config.QUERY_URL))
    return m


def save_risk_map(session, out_path: str = None, query_url: str = None) -> str:
    """Render the session to HTML under OUTPUT_DIR and return the path."""
    m = build_risk_map(session, query_url=query_url)
    if out_path is None:
        os.makedirs(config.OUTPUT_DIR, exist_ok=True)
        out_path = os.path.join(config.OUTPUT_DIR, config.RISK_MAP_HTML)
    else:
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    m.save(out_path)
    logger.info("Map saved → %s", out_path)
    return out_path
