"""
Styling Module – per-feature path style derived from the risk factor.
"""

from dataclasses import dataclass, replace

import config
from firewatch.color_scale import color_for


@dataclass(frozen=True)
class VisualStyle:
    fill_color: str
    color: str
    weight: float
    opacity: float
    dash_array: str
    fill_opacity: float

    def merged(self, overrides: dict) -> "VisualStyle":
        return replace(self, **overrides)

    def to_leaflet(self) -> dict:
        """Leaflet path options (camelCase keys)."""
        return {
            "fillColor": self.fill_color,
            "color": self.color,
            "weight": self.weight,
            "opacity": self.opacity,
            "dashArray": self.dash_array,
            "fillOpacity": self.fill_opacity,
        }


def style_for(feature) -> VisualStyle:
    """Fresh style for a feature; missing risk renders as the 0 tier."""
    return VisualStyle(fill_color=color_for(feature.riskfactor or 0), **config.BASE_STYLE)


def highlight_style() -> dict:
    """Overrides applied on top of the base style while a feature is hovered."""
    return dict(config.HIGHLIGHT_STYLE)


def highlight_leaflet() -> dict:
    s = config.HIGHLIGHT_STYLE
    return {
        "weight": s["weight"],
        "color": s["color"],
        "dashArray": s["dash_array"],
        "fillOpacity": s["fill_opacity"],
    }
