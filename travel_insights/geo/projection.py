"""
Regional conformal conic grid projection.

Catalog coordinates arrive as fixed-point integers (degrees x 10,000,000):
``map_x`` carries the longitude-like value, ``map_y`` the latitude-like one.
``project()`` turns such a pair into a geographic coordinate usable on a map.

The grid is a Lambert conformal conic projection with fixed parameters:

  - Earth radius 6371.00877 km, grid spacing 5.0 km
  - standard parallels 30°N and 60°N
  - reference meridian 126°E, parallel of origin 38°N
  - grid origin cell (43, 136)

``to_grid`` is the forward transform (lat/lng -> grid cell) and
``from_grid`` its inverse.  ``project`` runs the descaled input through both
halves, so the projection is deterministic and the grid origin point maps
back to exactly (38.0, 126.0).

Pure functions only; no I/O, no state.
"""

from __future__ import annotations

import math
from typing import Any, NamedTuple, Optional

from travel_insights.models.catalog import ProjectedCoordinate

# ── Grid constants ────────────────────────────────────────────────────────────

EARTH_RADIUS_KM = 6371.00877
GRID_KM = 5.0
STANDARD_PARALLEL_1 = 30.0
STANDARD_PARALLEL_2 = 60.0
REFERENCE_LNG = 126.0
REFERENCE_LAT = 38.0
ORIGIN_X = 43.0
ORIGIN_Y = 136.0

COORDINATE_SCALE = 10_000_000
DECIMALS = 6

# Latitudes are clamped this far inside the poles; the cone radius is
# infinite at the south pole and zero at the north pole.
_POLE_EPSILON = 1e-9

_DEGRAD = math.pi / 180.0
_RADDEG = 180.0 / math.pi


class GridPoint(NamedTuple):
    """Position on the conic grid in cell units (origin cell included)."""

    x: float
    y: float


def _cone_parameters() -> tuple[float, float, float, float]:
    """Return ``(re, sn, sf, ro)`` for the fixed grid definition."""
    re = EARTH_RADIUS_KM / GRID_KM
    slat1 = STANDARD_PARALLEL_1 * _DEGRAD
    slat2 = STANDARD_PARALLEL_2 * _DEGRAD
    olat = REFERENCE_LAT * _DEGRAD

    sn = math.log(math.cos(slat1) / math.cos(slat2)) / math.log(
        math.tan(math.pi * 0.25 + slat2 * 0.5) / math.tan(math.pi * 0.25 + slat1 * 0.5)
    )
    sf = math.tan(math.pi * 0.25 + slat1 * 0.5) ** sn * math.cos(slat1) / sn
    ro = re * sf / math.tan(math.pi * 0.25 + olat * 0.5) ** sn
    return re, sn, sf, ro


_RE, _SN, _SF, _RO = _cone_parameters()


def _normalize_angle(angle: float) -> float:
    """Wrap a radian angle into ``(-pi, pi]``."""
    wrapped = math.remainder(angle, 2.0 * math.pi)
    if wrapped == -math.pi:
        return math.pi
    return wrapped


def _clamp_lat(lat: float) -> float:
    limit = 90.0 - _POLE_EPSILON
    return max(-limit, min(limit, lat))


def to_grid(lat: float, lng: float) -> GridPoint:
    """Forward transform: geographic degrees to grid cell coordinates.

    Args:
        lat: Latitude in degrees (clamped just inside the poles).
        lng: Longitude in degrees.

    Returns:
        ``GridPoint`` in cell units, offset by the grid origin cell.
    """
    lat = _clamp_lat(lat)
    ra = _RE * _SF / math.tan(math.pi * 0.25 + lat * _DEGRAD * 0.5) ** _SN
    theta = _normalize_angle(lng * _DEGRAD - REFERENCE_LNG * _DEGRAD) * _SN
    return GridPoint(
        x=ra * math.sin(theta) + ORIGIN_X,
        y=_RO - ra * math.cos(theta) + ORIGIN_Y,
    )


def from_grid(x: float, y: float) -> tuple[float, float]:
    """Inverse transform: grid cell coordinates to geographic degrees.

    Args:
        x: Grid x in cell units.
        y: Grid y in cell units.

    Returns:
        ``(lat, lng)`` in degrees, longitude wrapped into ``(-180, 180]``.
    """
    xn = x - ORIGIN_X
    yn = _RO - (y - ORIGIN_Y)
    ra = math.hypot(xn, yn)
    if ra == 0.0:
        return 90.0, REFERENCE_LNG

    lat = 2.0 * math.atan((_RE * _SF / ra) ** (1.0 / _SN)) - math.pi * 0.5
    theta = math.atan2(xn, yn)
    lng = theta / _SN * _RADDEG + REFERENCE_LNG

    lng = math.remainder(lng, 360.0)
    if lng == -180.0:
        lng = 180.0
    return lat * _RADDEG, lng


def project(map_x: int, map_y: int) -> ProjectedCoordinate:
    """Project a fixed-point catalog coordinate to latitude/longitude.

    Args:
        map_x: Longitude-like value scaled by 10,000,000.
        map_y: Latitude-like value scaled by 10,000,000.

    Returns:
        ``ProjectedCoordinate`` rounded to 6 decimal places.

    Example::

        >>> project(1_260_000_000, 380_000_000)
        ProjectedCoordinate(lat=38.0, lng=126.0)
    """
    lng = map_x / COORDINATE_SCALE
    lat = map_y / COORDINATE_SCALE

    grid = to_grid(lat, lng)
    out_lat, out_lng = from_grid(grid.x, grid.y)

    return ProjectedCoordinate(
        lat=round(out_lat, DECIMALS) + 0.0,
        lng=round(out_lng, DECIMALS) + 0.0,
    )


def parse_map_coordinates(map_x: Any, map_y: Any) -> Optional[ProjectedCoordinate]:
    """Project raw catalog coordinate fields, treating absent values as no coordinate.

    Catalog rows carry coordinates as strings, ints or nothing at all.  Empty,
    zero, non-numeric or non-finite values mean the entity has no location.

    Returns:
        ``ProjectedCoordinate``, or ``None`` when either field is unusable.
    """
    x = _coerce_fixed_point(map_x)
    y = _coerce_fixed_point(map_y)
    if x is None or y is None:
        return None
    return project(x, y)


def _coerce_fixed_point(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return int(number)
