"""
Configuration management for SolarPlanner.

Contains the SystemConfig, SimulationConfig and PlannerConfig classes for
managing system parameters and settings.
"""

from dataclasses import dataclass, field, asdict, replace
from typing import Dict, Any, Union
import yaml
import json

from .constants import (
    DEFAULT_SYSTEM, DEFAULT_ACCELERATION_FACTOR,
    DEFAULT_TICK_INTERVAL_SECONDS, DEFAULT_TIME_STEP_MINUTES
)
from .helpers import (
    validate_positive, validate_non_negative, validate_range, validate_efficiency
)
from ..components.modes import SystemMode


@dataclass(frozen=True)
class SystemConfig:
    """
    Hardware configuration of the installation.

    Instances are immutable; edits produce a new validated snapshot through
    ``with_changes`` so a running simulation never sees a half-applied edit.
    """
    num_panels: int = DEFAULT_SYSTEM['num_panels']
    panel_wattage: float = DEFAULT_SYSTEM['panel_wattage']  # W
    panel_voltage: float = DEFAULT_SYSTEM['panel_voltage']  # V
    wire_gauge_mm2: float = DEFAULT_SYSTEM['wire_gauge_mm2']
    wire_length_ft: float = DEFAULT_SYSTEM['wire_length_ft']
    battery_capacity_ah: float = DEFAULT_SYSTEM['battery_capacity_ah']
    battery_voltage: float = DEFAULT_SYSTEM['battery_voltage']  # V
    battery_c_rating: float = DEFAULT_SYSTEM['battery_c_rating']
    inverter_efficiency: float = DEFAULT_SYSTEM['inverter_efficiency']
    controller_efficiency: float = DEFAULT_SYSTEM['controller_efficiency']

    def __post_init__(self):
        """Validate system parameters."""
        validate_positive(self.num_panels, "Panel count")
        validate_non_negative(self.panel_wattage, "Panel wattage")
        validate_positive(self.panel_voltage, "Panel voltage")
        validate_positive(self.wire_gauge_mm2, "Wire gauge")
        validate_non_negative(self.wire_length_ft, "Wire length")
        validate_positive(self.battery_capacity_ah, "Battery capacity")
        validate_positive(self.battery_voltage, "Battery voltage")
        validate_positive(self.battery_c_rating, "Battery C-rating")
        validate_efficiency(self.inverter_efficiency, "Inverter efficiency")
        validate_efficiency(self.controller_efficiency, "Controller efficiency")

    @property
    def array_capacity_w(self) -> float:
        """Nameplate array power in W."""
        return self.num_panels * self.panel_wattage

    @property
    def max_charge_current_a(self) -> float:
        """Charge current ceiling from the C-rating."""
        return self.battery_capacity_ah / self.battery_c_rating

    @property
    def max_charge_power_w(self) -> float:
        return self.max_charge_current_a * self.battery_voltage

    @property
    def battery_max_wh(self) -> float:
        return self.battery_capacity_ah * self.battery_voltage

    def with_changes(self, **changes) -> 'SystemConfig':
        """Return a new validated config with the given fields replaced."""
        return replace(self, **changes)


@dataclass
class SimulationConfig:
    """Configuration for simulation parameters and initial conditions."""
    mode: Union[SystemMode, str] = SystemMode.HYBRID
    initial_soc: float = 0.5
    ac_load_w: float = 100.0
    time_of_day: float = 9.0  # Start at 9 AM when sun begins
    sun_intensity: float = 0.0
    acceleration_factor: float = DEFAULT_ACCELERATION_FACTOR
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS
    time_step_minutes: int = DEFAULT_TIME_STEP_MINUTES

    def __post_init__(self):
        """Validate simulation parameters."""
        self.mode = SystemMode.parse(self.mode)
        validate_range(self.initial_soc, 0, 1, "Initial SOC")
        validate_non_negative(self.ac_load_w, "AC load")
        validate_range(self.time_of_day, 0, 24, "Time of day")
        validate_range(self.sun_intensity, 0, 1, "Sun intensity")
        validate_positive(self.acceleration_factor, "Acceleration factor")
        validate_positive(self.tick_interval_seconds, "Tick interval")
        validate_range(self.time_step_minutes, 1, 60, "Time step")


@dataclass
class PlannerConfig:
    """Complete configuration for SolarPlanner."""
    system: SystemConfig = field(default_factory=SystemConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'PlannerConfig':
        """Create PlannerConfig from dictionary."""
        return cls(
            system=SystemConfig(**config_dict.get('system', {})),
            simulation=SimulationConfig(**config_dict.get('simulation', {}))
        )

    @classmethod
    def from_yaml(cls, file_path: str) -> 'PlannerConfig':
        """Load configuration from YAML file."""
        with open(file_path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}
        return cls.from_dict(config_dict)

    @classmethod
    def from_json(cls, file_path: str) -> 'PlannerConfig':
        """Load configuration from JSON file."""
        with open(file_path, 'r') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert PlannerConfig to a plain dictionary."""
        simulation = asdict(self.simulation)
        simulation['mode'] = self.simulation.mode.value
        return {
            'system': asdict(self.system),
            'simulation': simulation
        }

    def to_yaml(self, file_path: str) -> None:
        """Save configuration to YAML file."""
        with open(file_path, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, indent=2)

    def to_json(self, file_path: str) -> None:
        """Save configuration to JSON file."""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def summary(self) -> str:
        """Generate a summary of the planner configuration."""
        system = self.system
        sim = self.simulation
        return f"""
SolarPlanner Configuration Summary
==================================

Solar Array:
- Panels: {system.num_panels} × {system.panel_wattage:g}W @ {system.panel_voltage:g}V
- Array Capacity: {system.array_capacity_w:.0f} W

DC Wiring:
- Gauge: {system.wire_gauge_mm2:g} mm²
- Run Length: {system.wire_length_ft:g} ft

Battery Bank:
- Capacity: {system.battery_capacity_ah:g} Ah @ {system.battery_voltage:g}V ({system.battery_max_wh:.0f} Wh)
- C-Rating: C{system.battery_c_rating:g} (max charge {system.max_charge_power_w:.0f} W)

Conversion:
- Inverter Efficiency: {system.inverter_efficiency*100:.0f}%
- Controller Efficiency: {system.controller_efficiency*100:.0f}%

Simulation:
- Mode: {sim.mode.value}
- Initial SOC: {sim.initial_soc*100:.0f}%
- AC Load: {sim.ac_load_w:g} W
- Speed: {sim.acceleration_factor:g}× real time
"""


def create_default_config() -> PlannerConfig:
    """Create a default planner configuration."""
    return PlannerConfig()


def create_off_grid_config() -> PlannerConfig:
    """Create a default system configured for stand-alone operation."""
    return PlannerConfig(simulation=SimulationConfig(mode=SystemMode.OFF_GRID))


def create_grid_tied_config() -> PlannerConfig:
    """Create a larger array running grid-tied with no battery use."""
    return PlannerConfig(
        system=SystemConfig(num_panels=6, panel_wattage=330, panel_voltage=37),
        simulation=SimulationConfig(mode=SystemMode.ON_GRID, ac_load_w=800)
    )
