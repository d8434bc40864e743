"""
Means over sample values.

Angles wrap at 360, so their mean is taken on the unit circle:
averaging 359 and 1 gives 0, not 180.
"""

from typing import Optional, Sequence

import numpy as np

from bbxx_core.fusion.units import normalize_angle


def circular_mean(angles: Sequence[Optional[float]]) -> Optional[float]:
    """
    Circular mean of angles in degrees.

    Args:
        angles: Angles in degrees. Callers filter out the samples they do
            not want included.

    Returns:
        Mean angle in [0, 360), or None if the input is empty or contains None
    """
    if len(angles) == 0 or any(a is None for a in angles):
        return None

    rad = np.radians(np.asarray(angles, dtype=float))
    mean_sin = float(np.mean(np.sin(rad)))
    mean_cos = float(np.mean(np.cos(rad)))

    return normalize_angle(float(np.degrees(np.arctan2(mean_sin, mean_cos))))


def linear_mean(values: Sequence[Optional[float]]) -> Optional[float]:
    """Arithmetic mean, None if empty or containing None."""
    if len(values) == 0 or any(v is None for v in values):
        return None
    return float(np.mean(np.asarray(values, dtype=float)))
