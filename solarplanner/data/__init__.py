"""
Data package for SolarPlanner

Contains the sun position input mapping and day profiles, and the
appliance-based sizing calculator.
"""

from .sun import (
    sun_position_to_conditions, time_to_sun_angle, format_clock,
    generate_day_profile, SunPathGenerator
)
from .sizing import Appliance, SizingCalculator

__all__ = [
    "sun_position_to_conditions",
    "time_to_sun_angle",
    "format_clock",
    "generate_day_profile",
    "SunPathGenerator",
    "Appliance",
    "SizingCalculator"
]
