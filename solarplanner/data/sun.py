"""
Sun position input module for SolarPlanner.

Maps the position of the sun along a 180° sky arc (6 AM on the left, 6 PM on
the right) to the sun intensity and time of day the engine consumes, and
builds day-long profiles from the same mapping.
"""

import math
from typing import Tuple

import numpy as np
import pandas as pd

from ..utils.constants import (
    SUN_ARC_START_HOUR, SUN_ARC_HOURS, SUN_ARC_DEGREES, HOURS_PER_DAY
)
from ..utils.helpers import clamp, create_hour_index


def sun_position_to_conditions(angle_deg: float) -> Tuple[float, float]:
    """
    Convert a sun angle on the sky arc to engine inputs.

    Args:
        angle_deg: Angle in degrees, clamped to [0, 180]

    Returns:
        Tuple of (sun_intensity, time_of_day)
    """
    angle_deg = clamp(angle_deg, 0.0, SUN_ARC_DEGREES)
    time_of_day = SUN_ARC_START_HOUR + (angle_deg / SUN_ARC_DEGREES) * SUN_ARC_HOURS
    intensity = math.sin(math.radians(angle_deg))
    return intensity, time_of_day


def time_to_sun_angle(time_of_day: float) -> float:
    """Angle on the sky arc for an hour, clamped to the 6 AM - 6 PM arc."""
    angle = (time_of_day - SUN_ARC_START_HOUR) / SUN_ARC_HOURS * SUN_ARC_DEGREES
    return clamp(angle, 0.0, SUN_ARC_DEGREES)


def format_clock(time_of_day: float) -> str:
    """
    Render an hour as a 12-hour clock string.

    Example:
        >>> format_clock(13.5)
        '1:30 PM'
    """
    hour = int(math.floor(time_of_day))
    minute = int(math.floor((time_of_day - hour) * 60))
    suffix = 'PM' if hour % 24 >= 12 else 'AM'
    return f"{hour % 12 or 12}:{minute:02d} {suffix}"


class SunPathGenerator:
    """
    Generator of sun intensity / time-of-day series for day sweeps.

    Hours on the arc follow the sun control mapping; hours off the arc
    (night) get zero intensity.
    """

    def __init__(self, peak_intensity: float = 1.0):
        """
        Initialize generator.

        Args:
            peak_intensity: Intensity at solar noon (0-1), e.g. < 1 for haze
        """
        if not (0 <= peak_intensity <= 1):
            raise ValueError(f"Peak intensity must be between 0 and 1, got {peak_intensity}")
        self.peak_intensity = peak_intensity

    def generate_day_profile(self,
                             time_step_minutes: int = 15,
                             start_hour: float = 0.0,
                             duration_hours: float = HOURS_PER_DAY) -> pd.DataFrame:
        """
        Generate a profile of sun conditions.

        Args:
            time_step_minutes: Step size in minutes
            start_hour: First simulated hour
            duration_hours: Length of the profile in hours

        Returns:
            DataFrame indexed by simulated hour with columns
            ['time_of_day', 'angle', 'sun_intensity', 'on_arc']
        """
        index = create_hour_index(start_hour, duration_hours, time_step_minutes)
        time_of_day = np.mod(index.to_numpy(), HOURS_PER_DAY)

        on_arc = (time_of_day >= SUN_ARC_START_HOUR) & (
            time_of_day <= SUN_ARC_START_HOUR + SUN_ARC_HOURS
        )
        angle = np.clip(
            (time_of_day - SUN_ARC_START_HOUR) / SUN_ARC_HOURS * SUN_ARC_DEGREES,
            0.0, SUN_ARC_DEGREES
        )
        intensity = np.where(on_arc, np.sin(np.radians(angle)), 0.0) * self.peak_intensity
        # sin(180°) is not exactly zero in floating point
        intensity = np.clip(intensity, 0.0, 1.0)

        return pd.DataFrame({
            'time_of_day': time_of_day,
            'angle': angle,
            'sun_intensity': intensity,
            'on_arc': on_arc
        }, index=index)


def generate_day_profile(time_step_minutes: int = 15,
                         peak_intensity: float = 1.0) -> pd.DataFrame:
    """
    Convenience function for a midnight-to-midnight sun profile.

    Args:
        time_step_minutes: Step size in minutes
        peak_intensity: Intensity at solar noon

    Returns:
        DataFrame with sun conditions
    """
    generator = SunPathGenerator(peak_intensity=peak_intensity)
    return generator.generate_day_profile(time_step_minutes=time_step_minutes)
