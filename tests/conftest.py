"""
Shared fixtures for the SolarPlanner test suite.

The default system used throughout is 2 x 250 W panels at 25 V on a
10 mm² / 20 ft solar run, a 300 Ah / 24 V C20 bank, an 80% inverter and a
90% controller. Derived values used in the tests:

    battery capacity        300 Ah x 24 V      = 7200 Wh
    max charge power        300 / 20 x 24      = 360 W
    solar leg resistance    0.0172 x 6.096 x 2 / 10 = 0.02097024 Ω
    at full sun (500 W)     20 A, 8.388096 W loss, 491.611904 W at controller
    solar on the DC bus     491.611904 x 0.9   = 442.4507136 W
"""

import pytest

from solarplanner.utils.config import SystemConfig, SimulationConfig, PlannerConfig


SOLAR_LEG_RESISTANCE = 0.0172 * (20 * 0.3048) * 2 / 10
NOON_LOSS = 20 ** 2 * SOLAR_LEG_RESISTANCE
NOON_AT_CONTROLLER = 500 - NOON_LOSS
NOON_DC_AVAILABLE = NOON_AT_CONTROLLER * 0.9


@pytest.fixture
def config():
    return SystemConfig()


@pytest.fixture
def max_wh(config):
    return config.battery_max_wh


@pytest.fixture
def planner_config():
    return PlannerConfig(
        system=SystemConfig(),
        simulation=SimulationConfig(mode='HYBRID', sun_intensity=1.0, time_of_day=12, ac_load_w=200)
    )
