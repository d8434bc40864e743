"""
Unit tests for the BBXX encoder.

Tests cover:
- Reference report (exact wire format)
- Latitude/longitude groups and quadrants
- Wind group rounding and the >= 100 knot sentinel
- Water temperature sign and omission
- Observation time handling
- AveragedObservation invariant
"""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from bbxx_core import MissingDataError, aggregate, decode, encode
from bbxx_core.codec import BbxxEncoder, MESSAGE_LAYOUT, half_up, quadrant_for
from bbxx_core.metrics import get_metrics
from bbxx_core.proto import AveragedObservation


def _observation(**overrides) -> AveragedObservation:
    fields = dict(
        latitude_deg=28.144,
        longitude_deg=-112.742,
        true_wind_dir_deg=270.0,
        true_wind_speed_knots=15.0,
        sog_knots=6.0,
        observation_time_utc=datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc),
        water_temp_c=22.5,
    )
    fields.update(overrides)
    return AveragedObservation(**fields)


def _groups(obs: AveragedObservation, station: str = "WXH9553") -> list:
    return encode(obs, station).split(" ")


class TestReferenceReport:
    """Tests for the exact wire format."""

    def test_full_report(self, reference_observation, reference_report):
        assert encode(reference_observation, "WXH9553") == reference_report

    def test_reference_groups(self, reference_observation):
        groups = _groups(reference_observation)
        assert groups[2] == "15144"
        assert groups[3] == "99281"
        assert groups[4] == "71127"
        assert groups[6] == "/2715"
        assert groups[14] == "04225"

    def test_layout(self, reference_observation):
        report = encode(reference_observation, "WXH9553")
        groups = report.split(" ")

        assert len(groups) == len(MESSAGE_LAYOUT)
        assert groups[0] == "BBXX"
        assert groups[1] == "WXH9553"
        assert groups[5] == "43///"
        assert groups[7:13] == ["1////", "2////", "4////", "5////", "7////", "8////"]
        assert groups[13] == "222//"
        assert groups[15:21] == ["0////", "2////", "3////", "4////", "5////", "6////"]
        assert groups[21:] == ["ICE", "/////="]
        assert report.endswith("=")
        assert "  " not in report

    def test_station_id_as_given(self, reference_observation):
        assert _groups(reference_observation, "9RM2K7C")[1] == "9RM2K7C"


class TestPositionGroups:
    """Tests for latitude, longitude and quadrant encoding."""

    @pytest.mark.parametrize("lat,lon,quadrant", [
        (45.0, 123.0, 1),
        (-45.0, 123.0, 3),
        (-45.0, -123.0, 5),
        (45.0, -123.0, 7),
        (0.0, 0.0, 1),
        (0.0, -0.1, 7),
    ])
    def test_quadrant(self, lat, lon, quadrant):
        assert quadrant_for(lat, lon) == quadrant
        groups = _groups(_observation(latitude_deg=lat, longitude_deg=lon))
        assert groups[4][0] == str(quadrant)

    def test_quadrant_groups(self):
        groups = _groups(_observation(latitude_deg=-45.0, longitude_deg=123.0))
        assert groups[3] == "99450"
        assert groups[4] == "31230"

    def test_zero_padding(self):
        groups = _groups(_observation(latitude_deg=1.2, longitude_deg=3.4))
        assert groups[3] == "99012"
        assert groups[4] == "10034"

    def test_rounds_half_up(self):
        """10.25 -> 102.5 tenths -> 103 (built-in round() would give 102)."""
        assert half_up(102.5) == 103
        assert _groups(_observation(latitude_deg=10.25))[3] == "99103"


class TestWindGroup:
    """Tests for the /ddff wind group."""

    @pytest.mark.parametrize("direction,code", [
        (0.0, "00"),
        (4.0, "00"),
        (5.0, "01"),
        (94.9, "09"),
        (355.0, "36"),
    ])
    def test_direction_tens(self, direction, code):
        assert _groups(_observation(true_wind_dir_deg=direction))[6][1:3] == code

    def test_speed_rounded(self):
        assert _groups(_observation(true_wind_speed_knots=7.5))[6] == "/2708"
        assert _groups(_observation(true_wind_speed_knots=99.4))[6] == "/2799"

    @pytest.mark.parametrize("speed", [99.5, 100.0, 135.0])
    def test_speed_100_or_more_uses_sentinel(self, speed):
        assert _groups(_observation(true_wind_speed_knots=speed))[6] == "/27//"


class TestWaterTemperatureGroup:
    """Tests for the 0sTTT group."""

    def test_positive(self):
        assert _groups(_observation(water_temp_c=8.0))[14] == "04080"

    def test_negative(self):
        assert _groups(_observation(water_temp_c=-1.5))[14] == "05015"

    def test_zero_is_positive(self):
        assert _groups(_observation(water_temp_c=0.0))[14] == "04000"

    def test_omitted(self):
        assert _groups(_observation(water_temp_c=None))[14] == "0////"

    def test_largest_encodable(self):
        assert _groups(_observation(water_temp_c=99.94))[14] == "04999"
        assert _groups(_observation(water_temp_c=-99.9))[14] == "05999"

    @pytest.mark.parametrize("temp", [150.0, -120.0, 100.0])
    def test_too_wide_is_omitted(self, temp):
        """Values that need four digits fall back to the sentinel."""
        report = encode(_observation(water_temp_c=temp), "WXH9553")
        groups = report.split(" ")

        assert groups[14] == "0////"
        assert all(len(g) == 5 for g in groups[2:21])
        assert decode(report).is_valid

    def test_too_wide_from_samples(self, steady_samples):
        samples = [dataclasses.replace(s, water_temp_c=150.0) for s in steady_samples]
        report = encode(aggregate(samples), "WXH9553")

        assert report.split(" ")[14] == "0////"
        assert decode(report).is_valid


class TestObservationTime:
    """Tests for the day/hour group."""

    def test_single_digit_padding(self):
        obs = _observation(observation_time_utc=datetime(2024, 3, 5, 3, 59, tzinfo=timezone.utc))
        assert _groups(obs)[2] == "05034"

    def test_converted_to_utc(self):
        tz = timezone(timedelta(hours=2))
        obs = _observation(observation_time_utc=datetime(2024, 1, 15, 23, 0, tzinfo=tz))
        assert _groups(obs)[2] == "15214"

    def test_naive_time_taken_as_utc(self):
        obs = _observation(observation_time_utc=datetime(2024, 1, 15, 14, 0))
        assert _groups(obs)[2] == "15144"


class TestObservationInvariant:
    """Tests for AveragedObservation construction."""

    @pytest.mark.parametrize("name", [
        'latitude_deg',
        'longitude_deg',
        'true_wind_dir_deg',
        'true_wind_speed_knots',
        'sog_knots',
    ])
    def test_required_field(self, name):
        with pytest.raises(MissingDataError):
            _observation(**{name: None})

    def test_optional_fields(self):
        obs = _observation(water_temp_c=None, true_heading_deg=None)
        assert obs.water_temp_c is None

    def test_to_dict(self, reference_observation):
        d = reference_observation.to_dict()
        assert d['latitude_deg'] == 28.144
        assert d['observation_time_utc'] == "2024-01-15T14:30:00+00:00"


class TestEncoderMetrics:
    """Tests for encoder counters."""

    def test_reports_counted(self, reference_observation):
        encoder = BbxxEncoder()
        encoder.encode(reference_observation, "WXH9553")
        encoder.encode(reference_observation, "WXH9553")

        metrics = get_metrics()
        assert metrics.get_counter('reports_encoded') == 2
        assert metrics.get_histogram_stats('true_wind_speed_knots').count == 2
