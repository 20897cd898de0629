"""Unit conversions from NOAA's metric/WMO measurements to US display units.

NOAA tags each measurement with a WMO unit code such as ``wmoUnit:degC``,
``wmoUnit:Pa``, ``wmoUnit:km_h-1`` or ``wmoUnit:m_s-1``.
"""

import math

PA_TO_INHG = 0.0002952998751
KMH_TO_MPH = 0.621371192237334
MPS_TO_MPH = 2.2369362920544
KNOTS_TO_MPH = 1.150779448

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE",
    "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW",
    "W", "WNW", "NW", "NNW",
)


def celsius_to_fahrenheit(c: float) -> float:
    return c * 9.0 / 5.0 + 32.0


def pascals_to_inches_mercury(pa: float) -> float:
    return pa * PA_TO_INHG


def speed_to_mph(value: float, unit_code: str | None) -> float:
    """Convert a wind speed to miles per hour based on its unit code.

    Matching is a case-insensitive substring test. Codes that match none of
    the known units are treated as meters per second, NOAA's most common
    observation unit. That fallback is an approximation: an unanticipated
    code is converted as m/s rather than rejected.
    """
    code = (unit_code or "").lower()
    if "km_h" in code or "km/h" in code or "kmh" in code:
        return value * KMH_TO_MPH
    if "m_s" in code or "m/s" in code or "mps" in code:
        return value * MPS_TO_MPH
    if "kt" in code or "knot" in code:
        return value * KNOTS_TO_MPH
    if "mi_h" in code or "mph" in code:
        return value
    return value * MPS_TO_MPH


def degrees_to_compass(deg: float) -> str:
    """Map a bearing in degrees onto the 16-point compass, rounding half up."""
    index = math.floor(deg / 22.5 + 0.5) % 16
    return COMPASS_POINTS[index]
