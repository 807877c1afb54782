import math

import pytest

from nodekit.mathutil import round_down, round_up


def test_round_down_pinned():
    assert round_down(1.23456, 2) == 1.23


def test_round_up_pinned():
    assert round_up(1.23456, 2) == 1.24


def test_round_down_negative_goes_away_from_zero():
    assert round_down(-1.5, 0) == -2.0


@pytest.mark.parametrize("value", [0.0, 1.23456, -7.891, 100.5, 3.14159])
@pytest.mark.parametrize("places", [0, 1, 2, 4])
def test_bounds(value, places):
    assert round_down(value, places) <= value <= round_up(value, places)


@pytest.mark.parametrize("value", [0.0, 2.0, -3.0, 42.0])
def test_whole_numbers_unchanged(value):
    assert round_down(value, 3) == value
    assert round_up(value, 3) == value


@pytest.mark.parametrize("value", [1.7, -1.7, 12.01])
def test_zero_places_matches_floor_and_ceil(value):
    assert round_down(value, 0) == math.floor(value)
    assert round_up(value, 0) == math.ceil(value)