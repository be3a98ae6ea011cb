"""
Power inverter component for SolarPlanner.

Contains the Inverter class for modeling DC-AC conversion at a flat
efficiency and the fixed AC run to the load.
"""

from ..utils.constants import AC_LINE_VOLTAGE, AC_LINE_LENGTH_FT, AC_LINE_GAUGE_MM2
from .wiring import calculate_wire_segment, WireSegmentStats


class Inverter:
    """
    Power inverter model with a single efficiency figure.

    Converts an AC load into the DC power it draws from the bus.
    """

    def __init__(self, config):
        """
        Initialize inverter.

        Args:
            config: SystemConfig with the inverter efficiency
        """
        self.config = config
        self.efficiency = config.inverter_efficiency

    def dc_demand(self, ac_load_w: float) -> float:
        """DC power the inverter draws to supply an AC load."""
        return ac_load_w / self.efficiency

    def load_wire(self, ac_load_w: float) -> WireSegmentStats:
        """Inverter-to-load run; fixed 230 V / 20 ft / 2.5 mm² regardless of DC wiring."""
        return calculate_wire_segment(
            ac_load_w, AC_LINE_VOLTAGE, AC_LINE_LENGTH_FT, AC_LINE_GAUGE_MM2
        )

    def __str__(self) -> str:
        """String representation of the inverter."""
        return f"Inverter(efficiency={self.efficiency*100:.1f}%)"
