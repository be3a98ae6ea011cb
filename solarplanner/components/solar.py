"""
Solar array component for SolarPlanner.

Contains the SolarArray class for modeling array output through a fixed
daylight window and the loss on the wire run to the charge controller.
"""

from typing import Dict, Any

from ..utils.constants import SUN_WINDOW_START, SUN_WINDOW_END
from .wiring import calculate_wire_segment


class SolarArray:
    """
    Solar array model gated by a simple daylight period.

    Sun is only available between 9:00 and 16:00; outside that window the
    supplied intensity is ignored. No solar-elevation astronomy is modeled.
    """

    def __init__(self, config):
        """
        Initialize solar array.

        Args:
            config: SystemConfig with panel and DC wiring parameters
        """
        self.config = config
        self.num_panels = config.num_panels
        self.panel_wattage = config.panel_wattage
        self.panel_voltage = config.panel_voltage
        self.wire_length_ft = config.wire_length_ft
        self.wire_gauge_mm2 = config.wire_gauge_mm2

    @staticmethod
    def is_daylight(time_of_day: float) -> bool:
        """Whether the sun is up at a given hour."""
        return SUN_WINDOW_START <= time_of_day <= SUN_WINDOW_END

    def effective_intensity(self, sun_intensity: float, time_of_day: float) -> float:
        """Intensity after applying the daylight window."""
        if not self.is_daylight(time_of_day):
            return 0.0
        return sun_intensity

    def calculate_power_output(self, sun_intensity: float,
                               time_of_day: float) -> Dict[str, Any]:
        """
        Calculate array output and the power that reaches the controller.

        Args:
            sun_intensity: Sun intensity (0-1)
            time_of_day: Hour of day (0-24)

        Returns:
            Dictionary with generation and solar-leg wire results
        """
        intensity = self.effective_intensity(sun_intensity, time_of_day)
        generation_w = self.num_panels * self.panel_wattage * intensity

        wire = calculate_wire_segment(
            generation_w, self.panel_voltage, self.wire_length_ft, self.wire_gauge_mm2
        )
        power_at_controller_w = max(0.0, generation_w - wire.power_loss)

        return {
            'effective_intensity': intensity,
            'generation_w': generation_w,
            'wire': wire,
            'power_at_controller_w': power_at_controller_w
        }

    def __str__(self) -> str:
        """String representation of the solar array."""
        return (
            f"SolarArray({self.num_panels}×{self.panel_wattage:g}W, "
            f"{self.panel_voltage:g}V, {self.wire_gauge_mm2:g}mm² × {self.wire_length_ft:g}ft)"
        )
