"""
Utilities package for SolarPlanner

Contains configuration management, constants, and helper functions.
Configuration classes live in ``solarplanner.utils.config``.
"""

from .constants import *
from .helpers import *
