"""
SolarPlanner: Small Solar Installation Power-Flow Simulator

A Python framework for exploring how component sizing and changing conditions
affect the energy flow of a small off-grid, on-grid or hybrid solar system:
solar array -> wire -> charge controller -> battery <-> inverter -> AC load,
with an optional utility grid tie.

Main Components:
- Power-flow engine evaluating every electrical quantity for one instant
- Battery energy integrator advancing state of charge over time
- Wire loss and ampacity checks for each conductor run
- Three operating modes (off-grid, on-grid, hybrid) with grid import/export
- Sun position input mapping and day-long sweeps
- Appliance-based system sizing calculator

Example Usage:
    >>> from solarplanner import SystemConfig, evaluate
    >>>
    >>> config = SystemConfig()
    >>> state = evaluate(sun_intensity=1.0, ac_load=200, battery_energy_wh=3600,
    ...                  config=config, time_of_day=12, mode='HYBRID')
    >>> state.generation
    500.0
"""

__version__ = "1.0.0"
__author__ = "SolarPlanner Development Team"

# Core engine and simulation host
from .engine import evaluate, SystemState, WireStats
from .simulation import SolarPlannerSimulation

# Configuration management
from .utils.config import (
    SystemConfig,
    SimulationConfig,
    PlannerConfig,
    create_default_config,
    create_off_grid_config,
    create_grid_tied_config
)

# Component models
from .components.modes import SystemMode
from .components.wiring import WireSegmentStats, WireAnalysis, calculate_wire_segment
from .components.solar import SolarArray
from .components.controller import ChargeController
from .components.battery import BatteryBank, BatteryEnergyIntegrator
from .components.inverter import Inverter

# Inputs and sizing
from .data.sun import sun_position_to_conditions, format_clock, SunPathGenerator
from .data.sizing import SizingCalculator

# Utility constants
from .utils.constants import STANDARD_WIRE_GAUGES_MM2

# Define public API
__all__ = [
    # Engine and host
    'evaluate',
    'SystemState',
    'WireStats',
    'SolarPlannerSimulation',

    # Configuration classes
    'SystemConfig',
    'SimulationConfig',
    'PlannerConfig',
    'create_default_config',
    'create_off_grid_config',
    'create_grid_tied_config',

    # Component classes
    'SystemMode',
    'WireSegmentStats',
    'WireAnalysis',
    'calculate_wire_segment',
    'SolarArray',
    'ChargeController',
    'BatteryBank',
    'BatteryEnergyIntegrator',
    'Inverter',

    # Inputs and sizing
    'sun_position_to_conditions',
    'format_clock',
    'SunPathGenerator',
    'SizingCalculator',

    'STANDARD_WIRE_GAUGES_MM2'
]


def get_version():
    """Return the version string."""
    return __version__


def quick_evaluation(angle_deg: float = 90.0,
                     ac_load: float = 200.0,
                     soc: float = 0.5,
                     mode: str = 'HYBRID',
                     **system_overrides) -> SystemState:
    """
    Evaluate the system for a sun position with default hardware.

    Args:
        angle_deg: Sun angle on the sky arc (0 = 6 AM, 90 = noon, 180 = 6 PM)
        ac_load: AC load in W
        soc: Battery state of charge (0-1)
        mode: Operating mode name
        **system_overrides: SystemConfig fields to change

    Returns:
        SystemState snapshot
    """
    config = SystemConfig(**system_overrides)
    intensity, time_of_day = sun_position_to_conditions(angle_deg)
    return evaluate(intensity, ac_load, soc * config.battery_max_wh,
                    config, time_of_day, mode)


def print_system_summary(config: PlannerConfig):
    """Print a formatted summary of planner configuration."""
    print("SolarPlanner System Configuration")
    print("=" * 40)
    print(config.summary())


def list_wire_gauges():
    """List the standard wire gauges and their rated current."""
    from .components.wiring import ampacity

    print("Standard Wire Gauges")
    print("=" * 40)
    for gauge in STANDARD_WIRE_GAUGES_MM2:
        print(f"  {gauge:>4g} mm²: {ampacity(gauge):.1f} A")
