"""
Helper functions for SolarPlanner calculations and utilities.
"""

import math
from typing import Optional

import pandas as pd

from .constants import SECONDS_PER_HOUR, MINUTES_PER_HOUR


def validate_positive(value: float, name: str) -> None:
    """
    Validate that a value is positive.

    Args:
        value: Value to validate
        name: Name of the value for error messages

    Raises:
        ValueError: If value is not positive
    """
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Validate that a value is zero or positive.

    Raises:
        ValueError: If value is negative
    """
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")


def validate_range(value: float, min_val: float, max_val: float, name: str) -> None:
    """
    Validate that a value is within a specified range.

    Args:
        value: Value to validate
        min_val: Minimum allowed value
        max_val: Maximum allowed value
        name: Name of the value for error messages

    Raises:
        ValueError: If value is outside range
    """
    if not (min_val <= value <= max_val):
        raise ValueError(f"{name} must be between {min_val} and {max_val}, got {value}")


def validate_efficiency(value: float, name: str) -> None:
    """Validate an efficiency in the half-open interval (0, 1]."""
    if not (0 < value <= 1):
        raise ValueError(f"{name} must be in (0, 1], got {value}")


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value into [min_val, max_val]."""
    return max(min_val, min(value, max_val))


def seconds_to_hours(seconds: float, acceleration_factor: float = 1.0) -> float:
    """
    Convert wall-clock seconds to simulated hours.

    Args:
        seconds: Elapsed wall-clock time in seconds
        acceleration_factor: Simulated seconds per real second

    Returns:
        Simulated time in hours
    """
    return seconds * acceleration_factor / SECONDS_PER_HOUR


def power_to_energy(power_w: float, time_hours: float) -> float:
    """
    Convert power to energy.

    Args:
        power_w: Power in W
        time_hours: Time period in hours

    Returns:
        Energy in Wh
    """
    return power_w * time_hours


def ceil_int(value: float) -> int:
    """Round up to the next whole unit."""
    return int(math.ceil(value))


def create_hour_index(start_hour: float, duration_hours: float,
                      time_step_minutes: int) -> pd.Index:
    """
    Create an index of simulated hours for a day sweep.

    Args:
        start_hour: First simulated hour
        duration_hours: Length of the sweep in hours
        time_step_minutes: Step size in minutes

    Returns:
        Float index of hours (may run past 24; wrap with ``% 24``)
    """
    validate_positive(duration_hours, "Duration")
    validate_positive(time_step_minutes, "Time step")
    step_hours = time_step_minutes / MINUTES_PER_HOUR
    periods = int(round(duration_hours / step_hours))
    hours = [start_hour + i * step_hours for i in range(periods)]
    return pd.Index(hours, name='hour', dtype=float)


def format_percent(value: Optional[float]) -> str:
    """Format a percentage for reports."""
    if value is None:
        return "n/a"
    return f"{value:.1f}%"
