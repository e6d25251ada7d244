from __future__ import annotations

import math

import pytest

from fleetcast.core.normalize import json_float, normalize_heading, parse_float


@pytest.mark.parametrize("raw", [-5, "abc", 360, 400, None, "nan", float("inf"), "", [1], True, False])
def test_out_of_range_or_garbage_heading_becomes_zero(raw) -> None:
    assert normalize_heading(raw) == 0.0


@pytest.mark.parametrize("raw,expected", [(359.9, 359.9), (0, 0.0), ("90.5", 90.5), (" 45 ", 45.0)])
def test_valid_heading_is_kept(raw, expected) -> None:
    assert normalize_heading(raw) == pytest.approx(expected)


def test_coordinates_parse_leniently_to_nan() -> None:
    assert parse_float("12.5") == 12.5
    assert math.isnan(parse_float("north"))
    assert math.isnan(parse_float(None))


def test_json_float_hides_non_finite_values() -> None:
    assert json_float(1.5) == 1.5
    assert json_float(float("nan")) is None
    assert json_float(float("inf")) is None
