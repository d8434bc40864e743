"""
Unit conversions for sensor values.

Every converter maps None to None so that missing sensors propagate through
chained conversions without special-casing at the call site.
"""

import math
from typing import Optional


KNOTS_PER_METER_PER_SECOND = 1.94384
KELVIN_OFFSET = 273.15

# Temperatures above this are taken to be Kelvin. Sensor firmware reports
# water temperature in either unit; no sea surface is above 200 C or below 200 K.
KELVIN_HEURISTIC_THRESHOLD = 200.0


def meters_per_second_to_knots(v: Optional[float]) -> Optional[float]:
    """Convert m/s to knots."""
    if v is None:
        return None
    return v * KNOTS_PER_METER_PER_SECOND


def radians_to_degrees(r: Optional[float]) -> Optional[float]:
    """Convert radians to degrees."""
    if r is None:
        return None
    return r * 180.0 / math.pi


def kelvin_to_celsius(t: Optional[float]) -> Optional[float]:
    """
    Convert a raw temperature reading to Celsius using the Kelvin heuristic.

    Args:
        t: Raw temperature, either Kelvin or Celsius

    Returns:
        t - 273.15 if t > KELVIN_HEURISTIC_THRESHOLD, otherwise t unchanged
    """
    if t is None:
        return None
    if t > KELVIN_HEURISTIC_THRESHOLD:
        return t - KELVIN_OFFSET
    return t


def normalize_angle(deg: Optional[float]) -> Optional[float]:
    """Normalize an angle into [0, 360)."""
    if deg is None:
        return None
    result = ((deg % 360.0) + 360.0) % 360.0
    # -1e-15 % 360 rounds up to exactly 360.0
    return 0.0 if result >= 360.0 else result


def signed_angle(deg: Optional[float]) -> Optional[float]:
    """Map an angle into (-180, 180]."""
    if deg is None:
        return None
    a = normalize_angle(deg)
    return a - 360.0 if a > 180.0 else a
