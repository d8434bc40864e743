"""
Pytest configuration and shared fixtures for the BBXX observation pipeline tests.

Provides reusable observations, samples and report strings for testing
fusion, encoding and decoding.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bbxx_core.metrics import reset_metrics
from bbxx_core.proto import AveragedObservation, RawSample


# Reference report for the observation in `reference_observation`
REFERENCE_REPORT = (
    "BBXX WXH9553 15144 99281 71127 43/// /2715 "
    "1//// 2//// 4//// 5//// 7//// 8//// "
    "222// 04225 0//// 2//// 3//// 4//// 5//// 6//// ICE /////="
)

# Group positions in a standard report
GROUP_INDEX = {
    'type': 0,
    'station': 1,
    'day_hour': 2,
    'latitude': 3,
    'longitude': 4,
    'precipitation': 5,
    'wind': 6,
    'section_2': 13,
    'water_temp': 14,
    'terminator': 22,
}


def replace_group(report: str, group: str, new: str) -> str:
    """Return report with one group replaced."""
    parts = report.split(" ")
    parts[GROUP_INDEX[group]] = new
    return " ".join(parts)


def remove_group(report: str, group: str) -> str:
    """Return report with one group removed."""
    parts = report.split(" ")
    del parts[GROUP_INDEX[group]]
    return " ".join(parts)


@pytest.fixture(autouse=True)
def fresh_metrics():
    """Give every test a clean global metrics collector."""
    reset_metrics()
    yield


# =============================================================================
# Observation Fixtures
# =============================================================================


@pytest.fixture
def observation_time() -> datetime:
    """Day 15, 14:30 UTC."""
    return datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def reference_observation(observation_time: datetime) -> AveragedObservation:
    """
    Observation off Baja California (N/W quadrant).

    Encodes to REFERENCE_REPORT with station WXH9553.
    """
    return AveragedObservation(
        latitude_deg=28.144,
        longitude_deg=-112.742,
        true_wind_dir_deg=270.0,
        true_wind_speed_knots=15.0,
        sog_knots=6.2,
        observation_time_utc=observation_time,
        water_temp_c=22.5,
    )


@pytest.fixture
def reference_report() -> str:
    return REFERENCE_REPORT


# =============================================================================
# Sample Fixtures
# =============================================================================


@pytest.fixture
def complete_sample() -> RawSample:
    """Sample with every sensor present."""
    return RawSample(
        heading_true_deg=90.0,
        sog_knots=5.0,
        apparent_wind_angle_deg=45.0,
        apparent_wind_speed_knots=12.0,
        water_temp_c=21.0,
        latitude_deg=28.144,
        longitude_deg=-112.742,
    )


@pytest.fixture
def steady_samples() -> List[RawSample]:
    """
    Three samples with no apparent wind, so true wind equals the boat's
    motion reversed: 270 deg at 15 knots.
    """
    return [
        RawSample(
            heading_true_deg=270.0,
            sog_knots=15.0,
            apparent_wind_angle_deg=0.0,
            apparent_wind_speed_knots=0.0,
            water_temp_c=22.5,
            latitude_deg=28.144,
            longitude_deg=-112.742,
        )
        for _ in range(3)
    ]
