import math

import pytest

import config
from firewatch.color_scale import bucket_index, color_for, legend_grades, normalize_risk


@pytest.mark.parametrize("risk, expected", [
    (95, "#BD0026"),
    (5, "#B8E186"),
    (105, "#800026"),
    (100, "#800026"),
    (0, "#B8E186"),
    (15, "#FFEDA0"),
    (55, "#FEB24C"),
])
def test_color_for_known_values(risk, expected):
    assert color_for(risk) == expected


def test_above_table_clamps_to_top_tier():
    assert color_for(105) == color_for(100)
    assert color_for(10_000) == color_for(100)


def test_thresholds_are_strictly_exceeded():
    assert color_for(10) == "#B8E186"
    assert color_for(10.01) == "#FFEDA0"
    assert color_for(90) == "#E31A1C"
    assert color_for(90.5) == "#BD0026"


def test_severity_is_monotonic():
    values = [x / 2 for x in range(-40, 260)]
    indices = [bucket_index(v) for v in values]
    assert indices == sorted(indices)
    assert indices[0] == 0
    assert indices[-1] == len(config.RISK_COLOR_TABLE) - 1


@pytest.mark.parametrize("raw", [None, math.nan, math.inf, -math.inf, "high", True])
def test_unusable_risk_is_zero(raw):
    assert normalize_risk(raw) == 0.0
    assert color_for(raw) == color_for(0)


def test_negative_risk_uses_lowest_tier():
    assert color_for(-12) == "#B8E186"


def test_numeric_strings_are_accepted():
    assert color_for("95") == "#BD0026"


def test_legend_grades_follow_table():
    grades = legend_grades()
    assert len(grades) == 11
    assert [c for _, c in grades] == [c for _, c in config.RISK_COLOR_TABLE]
    assert grades[0][0] == "0–10%"
    assert grades[-1][0] == "100+"
