"""
Unit tests for human-readable formatting and the NOAA form payload.
"""

import pytest

from bbxx_core.codec import (
    build_submission_form,
    decimal_to_dm,
    decimal_to_dm_str,
    human_readable_report,
)
from bbxx_core.codec.submission import CONFIRM_FIELD, REPORT_FIELD


class TestDegreesMinutes:
    """Tests for decimal degrees -> degrees/minutes."""

    def test_split(self):
        degrees, minutes, hemisphere = decimal_to_dm(-33.5)
        assert degrees == 33
        assert minutes == pytest.approx(30.0)
        assert hemisphere == 'S'

    @pytest.mark.parametrize("value,is_latitude,expected", [
        (28.144, True, "28°08.640'N"),
        (-112.742, False, "112°44.520'W"),
        (-5.25, True, "05°15.000'S"),
        (8.5, False, "008°30.000'E"),
        (0.0, True, "00°00.000'N"),
    ])
    def test_format(self, value, is_latitude, expected):
        assert decimal_to_dm_str(value, is_latitude) == expected

    def test_none(self):
        assert decimal_to_dm_str(None) == "N/A"


class TestHumanReadableReport:
    """Tests for the plain-text observation summary."""

    def test_contents(self, reference_observation):
        text = human_readable_report(reference_observation)

        assert "UTC: 2024-01-15 14:30" in text
        assert "28°08.640'N, 112°44.520'W" in text
        assert "True Wind: 270.0° 15.00 knots" in text
        assert "SOG: 6.20 knots" in text
        assert "Water Temp: 22.5°C" in text

    def test_optional_lines_skipped(self, reference_observation):
        text = human_readable_report(reference_observation)
        # No heading on the reference observation
        assert "True Heading" not in text


class TestSubmissionForm:
    """Tests for the NOAA form payload."""

    def test_fields(self, reference_observation, reference_report):
        form = build_submission_form(reference_observation, reference_report, "WXH9553")

        assert form == {
            'ship': "WXH9553",
            'lat': "28.144000",
            'lon': "-112.742000",
            REPORT_FIELD: reference_report,
            CONFIRM_FIELD: 'TRUE',
        }
