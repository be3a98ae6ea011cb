"""
Charge controller component for SolarPlanner.

Contains the ChargeController class, which limits what reaches the DC bus to
the battery's C-rate charge ceiling plus whatever the inverter is drawing.
"""

from typing import Dict, Union

from .modes import SystemMode


class ChargeController:
    """
    Charge controller model between the array and the DC bus.

    Decides how much of the solar power is usable after conversion losses and
    how much of it exceeds the current demand; what happens to that excess is
    a routing decision made downstream.
    """

    def __init__(self, config):
        """
        Initialize charge controller.

        Args:
            config: SystemConfig with battery and controller parameters
        """
        self.config = config
        self.efficiency = config.controller_efficiency
        self.battery_capacity_ah = config.battery_capacity_ah
        self.battery_voltage = config.battery_voltage
        self.c_rating = config.battery_c_rating

    @property
    def max_charge_current(self) -> float:
        """Charge current ceiling in A (capacity / C)."""
        return self.battery_capacity_ah / self.c_rating

    @property
    def max_charge_power(self) -> float:
        """Charge power ceiling in W."""
        return self.max_charge_current * self.battery_voltage

    def available_power(self, power_at_controller: float) -> float:
        """Power left after controller conversion losses."""
        return power_at_controller * self.efficiency

    def total_demand(self, inverter_draw: float,
                     mode: Union[SystemMode, str]) -> float:
        """
        Power the DC bus can absorb: battery charge ceiling plus inverter draw.

        Grid-tied operation never charges the battery from solar, so demand is
        zero in ON_GRID mode.
        """
        if SystemMode.parse(mode) is SystemMode.ON_GRID:
            return 0.0
        return self.max_charge_power + inverter_draw

    def calculate_output(self, power_at_controller: float,
                         demand: float) -> Dict[str, float]:
        """
        Split available solar into what the bus takes and what is left over.

        Args:
            power_at_controller: Solar power arriving at the controller in W
            demand: Power the DC bus can absorb in W

        Returns:
            Dictionary with available, demand, output and excess power
        """
        available = self.available_power(power_at_controller)
        return {
            'available_power': available,
            'total_demand': demand,
            'controller_output': min(available, demand),
            'excess_power': max(0.0, available - demand)
        }

    def __str__(self) -> str:
        """String representation of the charge controller."""
        return (
            f"ChargeController(efficiency={self.efficiency*100:.0f}%, "
            f"max charge={self.max_charge_power:.0f}W)"
        )
