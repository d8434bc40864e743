"""
Human-readable formatting of positions and observations.
"""

import math
from typing import Optional, Tuple

from bbxx_core.proto.observation import AveragedObservation


def decimal_to_dm(decimal_degrees: float) -> Tuple[int, float, str]:
    """
    Split decimal degrees into whole degrees, decimal minutes and hemisphere.

    Args:
        decimal_degrees: Signed decimal degrees

    Returns:
        Tuple of (degrees, minutes, hemisphere) with hemisphere 'N' or 'S'
        (callers formatting longitude swap in 'E'/'W')
    """
    hemisphere = 'N' if decimal_degrees >= 0 else 'S'
    abs_degrees = abs(decimal_degrees)
    degrees = int(math.floor(abs_degrees))
    minutes = (abs_degrees - degrees) * 60.0
    return degrees, minutes, hemisphere


def decimal_to_dm_str(decimal_degrees: Optional[float], is_latitude: bool = True) -> str:
    """
    Format decimal degrees as DD°MM.mmm'H (latitude) or DDD°MM.mmm'H (longitude).

    Returns:
        Formatted string, or "N/A" when the value is None
    """
    if decimal_degrees is None:
        return "N/A"

    degrees, minutes, hemisphere = decimal_to_dm(decimal_degrees)
    if not is_latitude:
        hemisphere = 'E' if decimal_degrees >= 0 else 'W'

    deg_text = f"{degrees:02d}" if is_latitude else f"{degrees:03d}"
    return f"{deg_text}°{minutes:06.3f}'{hemisphere}"


def human_readable_report(obs: AveragedObservation) -> str:
    """Multi-line plain-text summary of an observation."""
    lines = [
        f"UTC: {obs.observation_time_utc.strftime('%Y-%m-%d %H:%M')}",
        f"  Position: {obs.latitude_deg:.6f}, {obs.longitude_deg:.6f}",
        f"           {decimal_to_dm_str(obs.latitude_deg, True)}, "
        f"{decimal_to_dm_str(obs.longitude_deg, False)}",
        f"  True Wind: {obs.true_wind_dir_deg:.1f}° {obs.true_wind_speed_knots:.2f} knots",
        f"  SOG: {obs.sog_knots:.2f} knots",
    ]
    if obs.true_heading_deg is not None:
        lines.append(f"  True Heading: {obs.true_heading_deg:.1f}°")
    if obs.water_temp_c is not None:
        lines.append(f"  Water Temp: {obs.water_temp_c:.1f}°C")
    return "\n".join(lines)
