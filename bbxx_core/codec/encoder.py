"""
BBXX Encoder.

Serializes an AveragedObservation into a BBXX ship report. Encoding is
total: every AveragedObservation carries the fields the report needs.
"""

import logging
from typing import List

from bbxx_core.proto.observation import AveragedObservation
from bbxx_core.codec.schema import MESSAGE_LAYOUT, STATION
from bbxx_core.metrics import get_metrics

logger = logging.getLogger(__name__)


class BbxxEncoder:
    """
    Encode observations as BBXX reports.

    Usage:
        encoder = BbxxEncoder()
        report = encoder.encode(observation, "WXH9553")
        # 'BBXX WXH9553 15144 99281 71127 43/// /2715 1//// ... ICE /////='
    """

    def __init__(self):
        self.metrics = get_metrics()

    def encode_groups(self, obs: AveragedObservation, station_id: str) -> List[str]:
        """
        Encode the observation group by group.

        Args:
            obs: Averaged observation
            station_id: Ship station callsign, emitted as given

        Returns:
            Ordered list of group strings
        """
        groups = []
        for spec in MESSAGE_LAYOUT:
            if spec is STATION:
                groups.append(station_id)
            elif spec.is_literal:
                groups.append(spec.literal)
            else:
                groups.append(spec.encode(obs, station_id))
        return groups

    def encode(self, obs: AveragedObservation, station_id: str) -> str:
        """
        Encode the observation as a single-space separated BBXX report.

        Args:
            obs: Averaged observation
            station_id: Ship station callsign

        Returns:
            BBXX report string ending in '='
        """
        report = " ".join(self.encode_groups(obs, station_id))

        self.metrics.increment('reports_encoded')
        self.metrics.record_histogram('true_wind_speed_knots', obs.true_wind_speed_knots)
        logger.debug(f"Encoded BBXX report: {report}")

        return report


def encode(obs: AveragedObservation, station_id: str) -> str:
    """Encode with a default BbxxEncoder."""
    return BbxxEncoder().encode(obs, station_id)
