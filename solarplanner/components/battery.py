"""
Battery bank component for SolarPlanner.

Contains the BatteryBank class for deriving state of charge from stored
energy, and the BatteryEnergyIntegrator that owns the stored energy and
advances it over time from the engine's net battery flow.
"""

from typing import Dict, Any

import numpy as np

from ..utils.constants import DEFAULT_ACCELERATION_FACTOR
from ..utils.helpers import seconds_to_hours, power_to_energy, validate_positive, validate_range


class BatteryBank:
    """
    Battery bank model described by capacity and nominal voltage.

    Stateless: all quantities are derived from the energy passed in and the
    configuration the bank was built with.
    """

    def __init__(self, config):
        """
        Initialize battery bank.

        Args:
            config: SystemConfig with battery parameters
        """
        self.config = config
        self.capacity_ah = config.battery_capacity_ah
        self.voltage = config.battery_voltage

    @property
    def max_wh(self) -> float:
        """Full-charge energy in Wh."""
        return self.capacity_ah * self.voltage

    def clamp_energy(self, energy_wh: float) -> float:
        """Limit stored energy to [0, max_wh]."""
        return float(np.clip(energy_wh, 0.0, self.max_wh))

    def initial_energy(self, soc: float) -> float:
        """Stored energy for a state-of-charge fraction."""
        return self.clamp_energy(soc * self.max_wh)

    def calculate_state(self, energy_wh: float) -> Dict[str, Any]:
        """
        Get state of charge for a stored energy.

        Args:
            energy_wh: Stored energy in Wh

        Returns:
            Dictionary with level, percentage and full flag
        """
        battery_percent = energy_wh / self.max_wh * 100
        return {
            'battery_level': energy_wh,
            'battery_percent': battery_percent,
            'is_full': battery_percent >= 100
        }

    def __str__(self) -> str:
        """String representation of the battery bank."""
        return f"BatteryBank({self.capacity_ah:g}Ah @ {self.voltage:g}V, {self.max_wh:.0f}Wh)"


class BatteryEnergyIntegrator:
    """
    Owner of the battery's stored energy across time steps.

    The only mutable state in the model. Callers must serialize calls to
    ``advance``; the simulation host does this with a lock.
    """

    def __init__(self, config, initial_soc: float = 0.5,
                 acceleration_factor: float = DEFAULT_ACCELERATION_FACTOR):
        """
        Initialize integrator.

        Args:
            config: SystemConfig with battery parameters
            initial_soc: Starting state of charge (0-1)
            acceleration_factor: Simulated seconds per wall-clock second
        """
        validate_range(initial_soc, 0, 1, "Initial SOC")
        validate_positive(acceleration_factor, "Acceleration factor")
        self.battery = BatteryBank(config)
        self.acceleration_factor = acceleration_factor
        self._energy_wh = self.battery.initial_energy(initial_soc)

    @property
    def energy_wh(self) -> float:
        return self._energy_wh

    @property
    def state_of_charge(self) -> float:
        """Stored energy as a fraction of capacity."""
        return self._energy_wh / self.battery.max_wh

    def advance(self, elapsed_seconds: float, snapshot) -> float:
        """
        Integrate the snapshot's net battery flow over a wall-clock interval.

        Clock anomalies (zero or negative elapsed time) leave the energy
        unchanged.

        Args:
            elapsed_seconds: Wall-clock seconds since the previous tick
            snapshot: SystemState whose net_battery_flow applies to the interval

        Returns:
            New stored energy in Wh
        """
        if elapsed_seconds <= 0:
            return self._energy_wh
        dt_hours = seconds_to_hours(elapsed_seconds, self.acceleration_factor)
        return self.advance_hours(dt_hours, snapshot)

    def advance_hours(self, dt_hours: float, snapshot) -> float:
        """Integrate net battery flow over a span of simulated hours."""
        if dt_hours <= 0:
            return self._energy_wh
        energy_change = power_to_energy(snapshot.net_battery_flow, dt_hours)
        self._energy_wh = self.battery.clamp_energy(self._energy_wh + energy_change)
        return self._energy_wh

    def reclamp(self, config) -> float:
        """Apply a new battery configuration, keeping energy within its capacity."""
        self.battery = BatteryBank(config)
        self._energy_wh = self.battery.clamp_energy(self._energy_wh)
        return self._energy_wh

    def inject(self, energy_wh: float) -> float:
        """Set the stored energy directly (clamped)."""
        self._energy_wh = self.battery.clamp_energy(energy_wh)
        return self._energy_wh

    def __str__(self) -> str:
        """String representation of the integrator."""
        return (
            f"BatteryEnergyIntegrator({self._energy_wh:.1f}Wh, "
            f"SOC={self.state_of_charge*100:.1f}%, speed={self.acceleration_factor:g}×)"
        )
