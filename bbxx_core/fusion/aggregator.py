"""
Observation Aggregator.

Combines N independently-partial raw samples into one averaged,
wind-resolved observation.

Averaging is per field: each output field is the mean over only those
samples where that field is present. A sample missing field X still
contributes to field Y.

True wind is resolved per sample before averaging. Averaging the inputs
first and resolving once gives a different (wrong) answer.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from bbxx_core.errors import MissingDataError
from bbxx_core.proto.raw_sample import RawSample
from bbxx_core.proto.observation import (
    AveragedObservation,
    DerivedWind,
    REQUIRED_FIELDS,
)
from bbxx_core.fusion.circular import circular_mean, linear_mean
from bbxx_core.fusion.true_wind import resolve_true_wind
from bbxx_core.fusion.units import signed_angle
from bbxx_core.metrics import get_metrics

logger = logging.getLogger(__name__)

Reducer = Callable[[Sequence[float]], Optional[float]]


@dataclass
class AggregatorConfig:
    """
    Configuration for observation aggregation.

    Attributes:
        log_samples: Log each sample's resolved true wind at DEBUG
        log_summary: Log the data-availability summary at INFO
    """

    log_samples: bool = True
    log_summary: bool = True


def _average_present(
    values: Sequence[Optional[float]],
    reducer: Reducer,
) -> Optional[float]:
    """Reduce the non-None values, None if there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return reducer(present)


class ObservationAggregator:
    """
    Fuse raw sensor samples into an AveragedObservation.

    Usage:
        aggregator = ObservationAggregator()

        try:
            obs = aggregator.aggregate(samples)
        except MissingDataError as e:
            print(f"Cannot report: {e.missing_fields}")

    Field policy:
    - Linear mean: SOG, apparent wind speed, true wind speed, water temperature
    - Circular mean: heading, apparent wind angle, true wind direction,
      magnetic heading, magnetic variation
    - Position: most recent sample verbatim
    """

    # Raw sample fields averaged as-is
    LINEAR_FIELDS = (
        'sog_knots',
        'apparent_wind_speed_knots',
        'water_temp_c',
    )
    CIRCULAR_FIELDS = (
        'apparent_wind_angle_deg',
        'heading_magnetic_deg',
    )

    def __init__(self, config: Optional[AggregatorConfig] = None):
        """
        Initialize aggregator.

        Args:
            config: Aggregator configuration (uses defaults if None)
        """
        self.config = config or AggregatorConfig()
        self.metrics = get_metrics()

    def resolve_samples(self, samples: Sequence[RawSample]) -> List[DerivedWind]:
        """
        Resolve true wind for every sample.

        Args:
            samples: Raw samples

        Returns:
            One DerivedWind per sample, unresolved where inputs were missing
        """
        winds = []
        for i, sample in enumerate(samples, start=1):
            wind = resolve_true_wind(
                sample.apparent_wind_angle_deg,
                sample.apparent_wind_speed_knots,
                sample.true_heading_deg,
                sample.sog_knots,
            )
            if wind.is_resolved:
                if self.config.log_samples:
                    logger.debug(
                        f"Sample {i} true wind: {wind.direction_deg:.1f} deg "
                        f"at {wind.speed_knots:.1f} knots"
                    )
            else:
                self.metrics.increment('samples_missing_wind')
                logger.debug(
                    f"Sample {i} missing data for true wind calculation: "
                    f"{', '.join(sample.missing_wind_inputs())}"
                )
            winds.append(wind)
        return winds

    def aggregate(
        self,
        samples: Sequence[RawSample],
        observation_time: Optional[datetime] = None,
    ) -> AveragedObservation:
        """
        Aggregate samples into one observation.

        Args:
            samples: Non-empty, time-ordered sequence of raw samples
            observation_time: Observation time (defaults to now, UTC)

        Returns:
            AveragedObservation

        Raises:
            ValueError: If samples is empty
            MissingDataError: If a required field has no data in any sample
        """
        if not samples:
            self.metrics.increment_failure('empty_batch')
            raise ValueError("Cannot aggregate an empty sample sequence")

        self.metrics.increment('samples_in', len(samples))

        winds = self.resolve_samples(samples)
        averaged = self._average_fields(samples, winds)

        # Position is taken from the most recent sample, not averaged
        latest = samples[-1]
        averaged['latitude_deg'] = latest.latitude_deg
        averaged['longitude_deg'] = latest.longitude_deg

        if self.config.log_summary:
            self._log_availability(samples, averaged)

        missing = [label for name, label in REQUIRED_FIELDS.items()
                   if averaged.get(name) is None]
        if missing:
            self.metrics.increment_failure('missing_required')
            logger.error(
                f"Missing required data for BBXX report generation: {', '.join(missing)}"
            )
            raise MissingDataError(missing)

        observation = AveragedObservation(
            observation_time_utc=observation_time or datetime.now(timezone.utc),
            sample_count=len(samples),
            **averaged,
        )
        self.metrics.increment('aggregations')
        if observation.water_temp_c is not None:
            self.metrics.record_histogram('water_temp_c', observation.water_temp_c)
        return observation

    def _average_fields(
        self,
        samples: Sequence[RawSample],
        winds: Sequence[DerivedWind],
    ) -> Dict[str, Optional[float]]:
        """Average every field over the samples where it is present."""
        out: Dict[str, Optional[float]] = {}

        for name in self.LINEAR_FIELDS:
            out[name] = _average_present([getattr(s, name) for s in samples], linear_mean)

        for name in self.CIRCULAR_FIELDS:
            out[name] = _average_present([getattr(s, name) for s in samples], circular_mean)

        out['true_heading_deg'] = _average_present(
            [s.true_heading_deg for s in samples], circular_mean
        )
        out['magnetic_variation_deg'] = signed_angle(_average_present(
            [s.magnetic_variation_deg for s in samples], circular_mean
        ))

        out['true_wind_dir_deg'] = _average_present(
            [w.direction_deg for w in winds], circular_mean
        )
        out['true_wind_speed_knots'] = _average_present(
            [w.speed_knots for w in winds], linear_mean
        )

        return out

    def _log_availability(self, samples: Sequence[RawSample], averaged: Dict) -> None:
        """Log which data groups are available in the averaged result."""
        status = {
            'position': averaged['latitude_deg'] is not None
            and averaged['longitude_deg'] is not None,
            'heading': averaged['true_heading_deg'] is not None,
            'wind': averaged['true_wind_dir_deg'] is not None,
            'speed': averaged['sog_knots'] is not None,
            'waterTemp': averaged['water_temp_c'] is not None,
        }
        available = [k for k, ok in status.items() if ok]
        missing = [k for k, ok in status.items() if not ok]

        logger.info(f"Averaging {len(samples)} samples")
        logger.info(f"Available data: {', '.join(available) or 'none'}")
        if missing:
            logger.info(f"Missing data: {', '.join(missing)}")


def aggregate(
    samples: Sequence[RawSample],
    observation_time: Optional[datetime] = None,
) -> AveragedObservation:
    """Aggregate samples with a default ObservationAggregator."""
    return ObservationAggregator().aggregate(samples, observation_time)
