"""
Observation Schemas.

DerivedWind is the per-sample output of the true wind resolver.
AveragedObservation is the fused result of one aggregation call and the
only input the BBXX encoder accepts.
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional

from bbxx_core.errors import MissingDataError


# Fields an observation cannot be encoded without, with readable names
REQUIRED_FIELDS = {
    'latitude_deg': 'latitude',
    'longitude_deg': 'longitude',
    'true_wind_dir_deg': 'true wind direction',
    'true_wind_speed_knots': 'true wind speed',
    'sog_knots': 'speed over ground',
}


@dataclass(frozen=True)
class DerivedWind:
    """
    True wind resolved from one sample.

    Attributes:
        direction_deg: Direction the wind blows from (deg true, [0, 360))
        speed_knots: Speed in knots

    Notes:
        - Both fields are None together when any input was missing
    """

    direction_deg: Optional[float] = None
    speed_knots: Optional[float] = None

    def __post_init__(self):
        if (self.direction_deg is None) != (self.speed_knots is None):
            raise ValueError("DerivedWind direction and speed must be present together")

    @property
    def is_resolved(self) -> bool:
        return self.direction_deg is not None


@dataclass(frozen=True)
class AveragedObservation:
    """
    Fused observation ready for encoding.

    Attributes:
        latitude_deg: Latitude of the most recent sample
        longitude_deg: Longitude of the most recent sample
        true_wind_dir_deg: Circular mean of per-sample true wind direction
        true_wind_speed_knots: Mean of per-sample true wind speed
        sog_knots: Mean speed over ground
        observation_time_utc: Time of the observation (UTC)
        true_heading_deg: Circular mean heading (optional)
        apparent_wind_angle_deg: Circular mean apparent wind angle (optional)
        apparent_wind_speed_knots: Mean apparent wind speed (optional)
        water_temp_c: Mean water temperature (optional)
        heading_magnetic_deg: Circular mean magnetic heading (optional)
        magnetic_variation_deg: Mean magnetic variation, signed (optional)
        sample_count: Number of samples aggregated

    Notes:
        - Construction fails with MissingDataError when a required field is None,
          so every instance is encodable
    """

    latitude_deg: float
    longitude_deg: float
    true_wind_dir_deg: float
    true_wind_speed_knots: float
    sog_knots: float
    observation_time_utc: datetime
    true_heading_deg: Optional[float] = None
    apparent_wind_angle_deg: Optional[float] = None
    apparent_wind_speed_knots: Optional[float] = None
    water_temp_c: Optional[float] = None
    heading_magnetic_deg: Optional[float] = None
    magnetic_variation_deg: Optional[float] = None
    sample_count: int = 0

    def __post_init__(self):
        """Enforce the required-field invariant and normalize time to UTC."""
        missing = [label for name, label in REQUIRED_FIELDS.items()
                   if getattr(self, name) is None]
        if missing:
            raise MissingDataError(missing)

        t = self.observation_time_utc
        if t.tzinfo is None:
            t = t.replace(tzinfo=timezone.utc)
        object.__setattr__(self, 'observation_time_utc', t.astimezone(timezone.utc))

    @property
    def day(self) -> int:
        """UTC day of month."""
        return self.observation_time_utc.day

    @property
    def hour(self) -> int:
        """UTC hour."""
        return self.observation_time_utc.hour

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        d = asdict(self)
        d['observation_time_utc'] = self.observation_time_utc.isoformat()
        return d
