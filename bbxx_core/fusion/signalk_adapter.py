"""
SignalK snapshot adapter.

Builds a RawSample from an already-fetched SignalK "self" vessel snapshot
(nested dict). SignalK reports SI units: radians, m/s and Kelvin. Values
are converted to degrees, knots and Celsius here.

Fetching the snapshot (HTTP, websocket, plugin API) is the caller's concern.
"""

import logging
import numbers
from typing import Any, Dict, Optional

from bbxx_core.proto.raw_sample import RawSample
from bbxx_core.fusion.units import (
    meters_per_second_to_knots,
    radians_to_degrees,
    kelvin_to_celsius,
)

logger = logging.getLogger(__name__)


# SignalK paths read for each sample
SIGNALK_PATHS = {
    'heading_true': 'navigation.headingTrue',
    'heading_magnetic': 'navigation.headingMagnetic',
    'magnetic_variation': 'navigation.magneticVariation',
    'sog': 'navigation.speedOverGround',
    'position': 'navigation.position',
    'awa': 'environment.wind.angleApparent',
    'aws': 'environment.wind.speedApparent',
    'water_temp': 'environment.water.temperature',
}

# Keys that may hold the number inside a value node
VALUE_KEYS = ('value', 'doubleValue', 'number', 'val')


def _is_number(v: Any) -> bool:
    return isinstance(v, numbers.Real) and not isinstance(v, bool)


def extract_value(node: Any) -> Any:
    """
    Unwrap a SignalK value node.

    Args:
        node: Either a bare value or a dict such as {"value": 1.2, ...}

    Returns:
        The number under a known value key, the sole numeric value of a
        single-key dict, None for other dicts, or the node itself
    """
    if isinstance(node, dict):
        for key in VALUE_KEYS:
            if key in node and _is_number(node[key]):
                return node[key]
        if len(node) == 1:
            only = next(iter(node.values()))
            if _is_number(only):
                return only
        return None
    return node


def get_path(snapshot: Optional[Dict], path: str) -> Any:
    """
    Walk a dotted path through a nested dict.

    Returns:
        The node at the path, or None if any segment is missing
    """
    current = snapshot
    for part in path.split('.'):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return None
    return current


def _number_at(snapshot: Dict, path: str) -> Optional[float]:
    """Numeric value at path, None when absent or non-numeric."""
    value = extract_value(get_path(snapshot, path))
    if not _is_number(value):
        if value is not None:
            logger.debug(f"Ignoring non-numeric value at {path}: {value!r}")
        return None
    return float(value)


def sample_from_signalk(snapshot: Dict) -> RawSample:
    """
    Convert a SignalK vessel snapshot into a RawSample.

    Args:
        snapshot: SignalK vessel tree, e.g. the "self" object of a full model

    Returns:
        RawSample in degrees, knots and Celsius (missing paths become None)
    """
    position = get_path(snapshot, SIGNALK_PATHS['position'])
    if isinstance(position, dict) and isinstance(position.get('value'), dict):
        position = position['value']

    lat = lon = None
    if isinstance(position, dict):
        lat = position.get('latitude') if _is_number(position.get('latitude')) else None
        lon = position.get('longitude') if _is_number(position.get('longitude')) else None

    return RawSample(
        heading_true_deg=radians_to_degrees(_number_at(snapshot, SIGNALK_PATHS['heading_true'])),
        heading_magnetic_deg=radians_to_degrees(
            _number_at(snapshot, SIGNALK_PATHS['heading_magnetic'])
        ),
        magnetic_variation_deg=radians_to_degrees(
            _number_at(snapshot, SIGNALK_PATHS['magnetic_variation'])
        ),
        sog_knots=meters_per_second_to_knots(_number_at(snapshot, SIGNALK_PATHS['sog'])),
        apparent_wind_angle_deg=radians_to_degrees(_number_at(snapshot, SIGNALK_PATHS['awa'])),
        apparent_wind_speed_knots=meters_per_second_to_knots(
            _number_at(snapshot, SIGNALK_PATHS['aws'])
        ),
        water_temp_c=kelvin_to_celsius(_number_at(snapshot, SIGNALK_PATHS['water_temp'])),
        latitude_deg=lat,
        longitude_deg=lon,
    )
