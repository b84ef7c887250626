"""
Colour Scale Module – maps a wildfire risk factor to a discrete colour tier.

The tier table lives in config.RISK_COLOR_TABLE and is shared by the
feature fill colours and the legend swatches.
"""

import math
from bisect import bisect_left

import config

_THRESHOLDS = [t for t, _ in config.RISK_COLOR_TABLE]
_COLORS = [c for _, c in config.RISK_COLOR_TABLE]


def normalize_risk(risk) -> float:
    """Coerce a raw risk value to a finite float; anything unusable is 0."""
    if risk is None or isinstance(risk, bool):
        return 0.0
    try:
        value = float(risk)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def bucket_index(risk) -> int:
    """Index of the tier that applies to `risk` (0 = lowest)."""
    value = normalize_risk(risk)
    if value >= _THRESHOLDS[-1]:
        return len(_THRESHOLDS) - 1
    # number of thresholds strictly below value, minus the 0 floor tier
    return max(bisect_left(_THRESHOLDS, value) - 1, 0)


def color_for(risk) -> str:
    """Hex colour for a risk value. Total: never raises."""
    return _COLORS[bucket_index(risk)]


def legend_grades() -> list[tuple[str, str]]:
    """(label, colour) rows for the legend, lowest tier first."""
    rows = []
    for i, (threshold, colour) in enumerate(config.RISK_COLOR_TABLE):
        if i + 1 < len(config.RISK_COLOR_TABLE):
            label = f"{threshold}–{config.RISK_COLOR_TABLE[i + 1][0]}%"
        else:
            label = f"{threshold}+"
        rows.append((label, colour))
    return rows
