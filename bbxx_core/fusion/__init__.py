"""
Fusion Module: Sensor-side math.

Key pieces:
- units: m/s -> knots, radians -> degrees, Kelvin heuristic, angle normalization
- circular: circular and linear means
- true_wind: wind-triangle resolution of true wind
- ObservationAggregator: per-field averaging of raw samples
- signalk_adapter: SignalK snapshot -> RawSample
"""

from .units import (
    meters_per_second_to_knots,
    radians_to_degrees,
    kelvin_to_celsius,
    normalize_angle,
    signed_angle,
    KELVIN_HEURISTIC_THRESHOLD,
)
from .circular import circular_mean, linear_mean
from .true_wind import resolve_true_wind
from .aggregator import (
    ObservationAggregator,
    AggregatorConfig,
    aggregate,
)
from .signalk_adapter import (
    extract_value,
    get_path,
    sample_from_signalk,
)

__all__ = [
    'meters_per_second_to_knots',
    'radians_to_degrees',
    'kelvin_to_celsius',
    'normalize_angle',
    'signed_angle',
    'KELVIN_HEURISTIC_THRESHOLD',
    'circular_mean',
    'linear_mean',
    'resolve_true_wind',
    'ObservationAggregator',
    'AggregatorConfig',
    'aggregate',
    'extract_value',
    'get_path',
    'sample_from_signalk',
]
