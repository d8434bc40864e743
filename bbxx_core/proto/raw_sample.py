"""
Raw Sensor Sample Schema.

One instantaneous read of the navigation and environment sensors. Every
field is independently optional: an absent sensor is not an error.

Units are already converted for the pipeline (degrees, knots, Celsius);
see bbxx_core.fusion.signalk_adapter for conversion from SI sources.
"""

from dataclasses import dataclass, asdict
from typing import Optional

from bbxx_core.fusion.units import normalize_angle


@dataclass(frozen=True)
class RawSample:
    """
    Instantaneous sensor sample.

    Attributes:
        heading_true_deg: True heading (deg, normalized to [0, 360))
        sog_knots: Speed over ground (knots)
        apparent_wind_angle_deg: Apparent wind angle relative to bow (deg, [0, 360))
        apparent_wind_speed_knots: Apparent wind speed (knots)
        water_temp_c: Sea surface temperature (Celsius)
        latitude_deg: Latitude in [-90, 90]
        longitude_deg: Longitude in [-180, 180]
        heading_magnetic_deg: Magnetic heading, used when true heading is absent
        magnetic_variation_deg: Signed magnetic variation (deg, east positive)

    Notes:
        - Angles are normalized on construction
        - Out-of-range position raises ValueError
    """

    heading_true_deg: Optional[float] = None
    sog_knots: Optional[float] = None
    apparent_wind_angle_deg: Optional[float] = None
    apparent_wind_speed_knots: Optional[float] = None
    water_temp_c: Optional[float] = None
    latitude_deg: Optional[float] = None
    longitude_deg: Optional[float] = None
    heading_magnetic_deg: Optional[float] = None
    magnetic_variation_deg: Optional[float] = None

    def __post_init__(self):
        """Normalize angles and validate position ranges."""
        for name in ('heading_true_deg', 'apparent_wind_angle_deg', 'heading_magnetic_deg'):
            object.__setattr__(self, name, normalize_angle(getattr(self, name)))

        if self.latitude_deg is not None and not -90.0 <= self.latitude_deg <= 90.0:
            raise ValueError(f"Latitude must be in [-90, 90]: {self.latitude_deg}")

        if self.longitude_deg is not None and not -180.0 <= self.longitude_deg <= 180.0:
            raise ValueError(f"Longitude must be in [-180, 180]: {self.longitude_deg}")

    @property
    def true_heading_deg(self) -> Optional[float]:
        """
        Best available true heading.

        True heading if present, otherwise magnetic heading corrected by
        variation (or magnetic heading as-is when variation is unknown).
        """
        if self.heading_true_deg is not None:
            return self.heading_true_deg
        if self.heading_magnetic_deg is None:
            return None
        if self.magnetic_variation_deg is None:
            return self.heading_magnetic_deg
        return normalize_angle(self.heading_magnetic_deg + self.magnetic_variation_deg)

    @property
    def has_position(self) -> bool:
        return self.latitude_deg is not None and self.longitude_deg is not None

    @property
    def has_wind_inputs(self) -> bool:
        """Check if all four true-wind inputs are present."""
        return None not in (
            self.apparent_wind_angle_deg,
            self.apparent_wind_speed_knots,
            self.true_heading_deg,
            self.sog_knots,
        )

    def missing_wind_inputs(self) -> list:
        """Names of the true-wind inputs this sample lacks."""
        missing = []
        if self.apparent_wind_angle_deg is None:
            missing.append('apparent wind angle')
        if self.apparent_wind_speed_knots is None:
            missing.append('apparent wind speed')
        if self.true_heading_deg is None:
            missing.append('heading')
        if self.sog_knots is None:
            missing.append('speed over ground')
        return missing

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'RawSample':
        """Build a sample from a dict, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise TypeError(f"Sample must be a dict, got {type(data).__name__}")
        known = {k: data.get(k) for k in cls.__dataclass_fields__ if k in data}
        return cls(**known)
