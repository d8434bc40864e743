"""
Unit tests for true wind resolution.

Tests cover:
- Wind triangle direction and speed
- Zero apparent wind / zero SOG
- Missing inputs returning an unresolved pair
- Floating point clamp
"""

import math

import pytest

from bbxx_core.fusion import resolve_true_wind
from bbxx_core.proto import DerivedWind


class TestTrueWindResolution:
    """Tests for resolve_true_wind."""

    def test_direction_is_heading_plus_awa(self):
        wind = resolve_true_wind(45.0, 12.0, 90.0, 5.0)
        assert wind.direction_deg == pytest.approx(135.0)

    def test_direction_wraps(self):
        wind = resolve_true_wind(30.0, 10.0, 350.0, 4.0)
        assert wind.direction_deg == pytest.approx(20.0)

    def test_speed_law_of_cosines(self):
        wind = resolve_true_wind(45.0, 12.0, 90.0, 5.0)
        expected = math.sqrt(12.0 ** 2 + 5.0 ** 2 - 2 * 12.0 * 5.0 * math.cos(math.radians(45.0)))
        assert wind.speed_knots == pytest.approx(expected)

    def test_head_wind(self):
        """Apparent wind dead ahead: true speed is AWS minus SOG."""
        wind = resolve_true_wind(0.0, 10.0, 120.0, 4.0)
        assert wind.speed_knots == pytest.approx(6.0)
        assert wind.direction_deg == pytest.approx(120.0)

    def test_tail_wind(self):
        wind = resolve_true_wind(180.0, 5.0, 0.0, 5.0)
        assert wind.speed_knots == pytest.approx(10.0)
        assert wind.direction_deg == pytest.approx(180.0)

    @pytest.mark.parametrize("sog", [0.0, 3.5, 12.0])
    @pytest.mark.parametrize("awa", [0.0, 75.0, 210.0])
    def test_zero_apparent_wind(self, sog, awa):
        """No apparent wind: speed equals SOG and direction equals heading."""
        wind = resolve_true_wind(awa, 0.0, 212.0, sog)
        assert wind.speed_knots == pytest.approx(sog)
        assert wind.direction_deg == pytest.approx(212.0)

    def test_zero_sog(self):
        """Stationary vessel: true wind equals apparent wind."""
        wind = resolve_true_wind(60.0, 14.0, 10.0, 0.0)
        assert wind.speed_knots == pytest.approx(14.0)
        assert wind.direction_deg == pytest.approx(70.0)

    def test_speed_never_negative(self):
        """AWS == SOG with AWA 0 cancels to zero without a math domain error."""
        wind = resolve_true_wind(0.0, 7.3, 0.0, 7.3)
        assert wind.speed_knots == pytest.approx(0.0, abs=1e-6)
        assert wind.speed_knots >= 0.0

    @pytest.mark.parametrize("args", [
        (None, 10.0, 90.0, 5.0),
        (45.0, None, 90.0, 5.0),
        (45.0, 10.0, None, 5.0),
        (45.0, 10.0, 90.0, None),
    ])
    def test_missing_input(self, args):
        wind = resolve_true_wind(*args)
        assert wind.direction_deg is None
        assert wind.speed_knots is None
        assert not wind.is_resolved


class TestDerivedWind:
    """Tests for the DerivedWind pair."""

    def test_half_populated_rejected(self):
        with pytest.raises(ValueError):
            DerivedWind(direction_deg=90.0, speed_knots=None)

    def test_unresolved(self):
        assert not DerivedWind().is_resolved
        assert DerivedWind(10.0, 2.0).is_resolved
