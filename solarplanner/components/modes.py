"""
Operating modes and power routing for SolarPlanner.

Each mode has one router that decides how solar, battery and grid share the
inverter demand for an instant. Routers return a normalized RoutingResult so
the controller, clamp and netting stages downstream stay mode-agnostic.
The controller derives its demand from the routed inverter draw.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Union

from ..utils.constants import (
    HYBRID_RESERVE_SOC_PERCENT,
    HYBRID_EMERGENCY_SOC_PERCENT,
    LOW_SOLAR_INTENSITY,
)


class SystemMode(str, Enum):
    """How the installation is tied to the utility grid."""
    OFF_GRID = 'OFF_GRID'
    ON_GRID = 'ON_GRID'
    HYBRID = 'HYBRID'

    @classmethod
    def parse(cls, value: Union['SystemMode', str]) -> 'SystemMode':
        """
        Accept a SystemMode or its name in any case ('hybrid', 'off-grid').

        Raises:
            ValueError: If the name is not a known mode
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace('-', '_')
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown system mode: {value}") from None


@dataclass(frozen=True)
class BusConditions:
    """Inputs a router needs for one instant."""
    ac_load: float                 # W AC
    inverter_input: float          # W DC needed by the inverter
    generation: float              # W from the array
    solar_dc_available: float      # W of solar reaching the DC bus
    battery_percent: float
    effective_intensity: float
    max_charge_power: float        # W
    inverter_efficiency: float


@dataclass(frozen=True)
class RoutingResult:
    """Normalized router decision shared by every mode."""
    grid_active: bool = False
    grid_import: float = 0.0
    grid_export: float = 0.0
    inverter_draw_from_battery: float = 0.0
    grid_charging_power: float = 0.0  # AC W drawn to charge the battery


def route_off_grid(conditions: BusConditions) -> RoutingResult:
    """Battery carries the whole inverter demand; there is no grid."""
    draw = conditions.inverter_input
    return RoutingResult(
        grid_active=False,
        inverter_draw_from_battery=draw
    )


def route_on_grid(conditions: BusConditions) -> RoutingResult:
    """Solar goes straight to AC; the grid balances it against the load."""
    solar_ac = conditions.generation * conditions.inverter_efficiency
    if solar_ac >= conditions.ac_load:
        grid_export = solar_ac - conditions.ac_load
        grid_import = 0.0
    else:
        grid_export = 0.0
        grid_import = conditions.ac_load - solar_ac

    return RoutingResult(
        grid_active=True,
        grid_import=grid_import,
        grid_export=grid_export,
        inverter_draw_from_battery=0.0
    )


def route_hybrid(conditions: BusConditions) -> RoutingResult:
    """
    Serve the load from solar first, then the battery, then the grid.

    The battery only discharges above the reserve threshold. Below it the grid
    carries the full AC load, and if the battery is also under the emergency
    threshold while the sun is low the grid charges it at the C-rate limit.
    """
    draw = conditions.inverter_input
    solar_covers_load = conditions.solar_dc_available >= draw
    battery_can_support = conditions.battery_percent > HYBRID_RESERVE_SOC_PERCENT

    if solar_covers_load or battery_can_support:
        # Grid is tied in but idle
        return RoutingResult(
            grid_active=True,
            inverter_draw_from_battery=draw
        )

    grid_import = conditions.ac_load
    grid_charging_power = 0.0
    is_low_solar = conditions.effective_intensity < LOW_SOLAR_INTENSITY
    if conditions.battery_percent < HYBRID_EMERGENCY_SOC_PERCENT and is_low_solar:
        grid_charging_power = conditions.max_charge_power / conditions.inverter_efficiency
        grid_import += grid_charging_power

    return RoutingResult(
        grid_active=True,
        grid_import=grid_import,
        inverter_draw_from_battery=0.0,
        grid_charging_power=grid_charging_power
    )


ROUTERS: Dict[SystemMode, Callable[[BusConditions], RoutingResult]] = {
    SystemMode.OFF_GRID: route_off_grid,
    SystemMode.ON_GRID: route_on_grid,
    SystemMode.HYBRID: route_hybrid,
}


def route(mode: Union[SystemMode, str], conditions: BusConditions) -> RoutingResult:
    """Dispatch to the router for a mode."""
    return ROUTERS[SystemMode.parse(mode)](conditions)
