"""
Tests for travel_insights/geo/projection.py.

What we test
------------
project():
  - The grid reference point maps to (38.0, 126.0).
  - Deterministic: identical inputs give identical outputs.
  - Round-trips ordinary Korean-peninsula coordinates to 6 decimals.
  - Output is rounded to 6 decimals.
  - Longitudes are wrapped into (-180, 180].
  - Pole inputs return finite latitudes within [-90, 90].

to_grid() / from_grid():
  - Reference point lands on the grid origin cell (43, 136).
  - from_grid inverts to_grid.

parse_map_coordinates():
  - Absent, empty, zero and non-numeric values yield None.
  - String inputs are accepted.
"""

from __future__ import annotations

import math

import pytest

from travel_insights.geo.projection import (
    ORIGIN_X,
    ORIGIN_Y,
    from_grid,
    parse_map_coordinates,
    project,
    to_grid,
)


class TestProject:
    def test_reference_point(self):
        coord = project(1_260_000_000, 380_000_000)
        assert coord.lat == 38.0
        assert coord.lng == 126.0

    def test_deterministic(self):
        first = project(1_271_234_567, 375_432_100)
        for _ in range(5):
            assert project(1_271_234_567, 375_432_100) == first

    @pytest.mark.parametrize(
        "map_x,map_y,lat,lng",
        [
            (1_269_780_000, 375_665_000, 37.5665, 126.978),   # Seoul
            (1_290_750_000, 351_796_000, 35.1796, 129.075),   # Busan
            (1_265_312_000, 334_996_000, 33.4996, 126.5312),  # Jeju
        ],
    )
    def test_round_trips_known_places(self, map_x, map_y, lat, lng):
        coord = project(map_x, map_y)
        assert coord.lat == pytest.approx(lat, abs=1e-6)
        assert coord.lng == pytest.approx(lng, abs=1e-6)

    def test_six_decimal_precision(self):
        coord = project(1_271_234_567, 375_432_109)
        assert round(coord.lat, 6) == coord.lat
        assert round(coord.lng, 6) == coord.lng

    def test_longitude_wrapped(self):
        coord = project(-1_700_000_000, 100_000_000)
        assert coord.lng == pytest.approx(-170.0, abs=1e-6)
        assert -180.0 < coord.lng <= 180.0

    @pytest.mark.parametrize("map_y", [900_000_000, -900_000_000])
    def test_poles_do_not_fail(self, map_y):
        coord = project(1_260_000_000, map_y)
        assert math.isfinite(coord.lat)
        assert -90.0 <= coord.lat <= 90.0
        assert abs(coord.lat) > 89.9


class TestGrid:
    def test_reference_point_is_origin_cell(self):
        point = to_grid(38.0, 126.0)
        assert point.x == pytest.approx(ORIGIN_X)
        assert point.y == pytest.approx(ORIGIN_Y)

    def test_east_of_meridian_increases_x(self):
        assert to_grid(38.0, 127.0).x > ORIGIN_X

    def test_north_of_origin_increases_y(self):
        assert to_grid(39.0, 126.0).y > ORIGIN_Y

    def test_from_grid_inverts_to_grid(self):
        point = to_grid(36.35, 127.38)
        lat, lng = from_grid(point.x, point.y)
        assert lat == pytest.approx(36.35, abs=1e-9)
        assert lng == pytest.approx(127.38, abs=1e-9)


class TestParseMapCoordinates:
    @pytest.mark.parametrize(
        "map_x,map_y",
        [
            (None, 380_000_000),
            (1_260_000_000, None),
            ("", "380000000"),
            ("abc", "380000000"),
            (0, 380_000_000),
            ("nan", "380000000"),
        ],
    )
    def test_unusable_values_yield_none(self, map_x, map_y):
        assert parse_map_coordinates(map_x, map_y) is None

    def test_string_values(self):
        coord = parse_map_coordinates("1260000000", " 380000000 ")
        assert coord is not None
        assert (coord.lat, coord.lng) == (38.0, 126.0)
