"""
True Wind Resolver.

Resolves the earth-frame wind from the apparent wind measured aboard and
the vessel's heading and speed over ground, using the wind triangle.

    direction = heading + AWA                       (normalized to [0, 360))
    speed     = sqrt(AWS^2 + SOG^2 - 2*AWS*SOG*cos(AWA))
"""

import math
from typing import Optional

from bbxx_core.proto.observation import DerivedWind
from bbxx_core.fusion.units import normalize_angle


def resolve_true_wind(
    apparent_wind_angle_deg: Optional[float],
    apparent_wind_speed_knots: Optional[float],
    true_heading_deg: Optional[float],
    sog_knots: Optional[float],
) -> DerivedWind:
    """
    Resolve true wind for one sample.

    Args:
        apparent_wind_angle_deg: Apparent wind angle relative to the bow (deg)
        apparent_wind_speed_knots: Apparent wind speed (knots)
        true_heading_deg: Vessel true heading (deg)
        sog_knots: Speed over ground (knots)

    Returns:
        DerivedWind, with both fields None if any input is None

    Notes:
        - Zero AWS or SOG are valid inputs
        - AWS=0 gives speed == SOG and direction == heading
    """
    if None in (apparent_wind_angle_deg, apparent_wind_speed_knots,
                true_heading_deg, sog_knots):
        return DerivedWind(None, None)

    if apparent_wind_speed_knots == 0:
        # No apparent wind: AWA is undefined and the true wind is the vessel's
        # own motion reversed, i.e. from dead ahead
        direction = normalize_angle(true_heading_deg)
    else:
        direction = normalize_angle(true_heading_deg + apparent_wind_angle_deg)

    awa_rad = math.radians(apparent_wind_angle_deg)
    aws = apparent_wind_speed_knots
    sog = sog_knots
    speed_sq = aws * aws + sog * sog - 2.0 * aws * sog * math.cos(awa_rad)

    # Floating point can leave a tiny negative when AWS == SOG and AWA == 0
    speed = math.sqrt(max(0.0, speed_sq))

    return DerivedWind(direction_deg=direction, speed_knots=speed)
