"""
DC and AC wiring component for SolarPlanner.

Contains the wire segment model used for every conductor run in the system
(resistive loss, voltage drop and a fixed ampacity check) plus the summary
analysis shown for the user-configurable solar leg.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..utils.constants import (
    COPPER_RESISTIVITY,
    FEET_TO_METERS,
    AMPACITY_PER_MM2,
    STANDARD_WIRE_GAUGES_MM2,
    WIRE_OK_MESSAGE,
    WIRE_WARNING_MESSAGE,
)


@dataclass(frozen=True)
class WireSegmentStats:
    """Electrical result for one conductor run."""
    current: float = 0.0        # A
    power_loss: float = 0.0     # W
    voltage_drop: float = 0.0   # V
    is_safe: bool = True


@dataclass(frozen=True)
class WireAnalysis:
    """Summary of the solar leg as displayed to the user."""
    current: float
    resistance: float
    power_loss: float
    voltage_drop: float
    voltage_drop_percent: float
    is_safe: bool
    recommended_mm2: Optional[float]
    message: str


def wire_resistance(length_ft: float, gauge_mm2: float) -> float:
    """
    Round-trip copper resistance of a run.

    Args:
        length_ft: One-way run length in feet
        gauge_mm2: Conductor cross-section in mm²

    Returns:
        Resistance in ohms
    """
    length_m = length_ft * FEET_TO_METERS
    return (COPPER_RESISTIVITY * length_m * 2) / gauge_mm2


def ampacity(gauge_mm2: float) -> float:
    """Rated current for a conductor cross-section."""
    return gauge_mm2 * AMPACITY_PER_MM2


def calculate_wire_segment(power_w: float, voltage: float,
                           length_ft: float, gauge_mm2: float) -> WireSegmentStats:
    """
    Calculate current, loss and safety for power flowing through one run.

    No power or no voltage means nothing flows; the segment is reported as an
    all-zero safe result. The current is never limited by the ampacity check.

    Args:
        power_w: Power carried by the segment in W
        voltage: Operating voltage of the segment in V
        length_ft: One-way run length in feet
        gauge_mm2: Conductor cross-section in mm²

    Returns:
        WireSegmentStats for the segment
    """
    if power_w <= 0 or voltage <= 0:
        return WireSegmentStats()

    current = power_w / voltage
    resistance = wire_resistance(length_ft, gauge_mm2)
    power_loss = current ** 2 * resistance
    voltage_drop = current * resistance
    is_safe = current <= ampacity(gauge_mm2)

    return WireSegmentStats(
        current=current,
        power_loss=power_loss,
        voltage_drop=voltage_drop,
        is_safe=is_safe
    )


def recommend_wire_gauge(current: float,
                         gauges: Sequence[float] = STANDARD_WIRE_GAUGES_MM2) -> Optional[float]:
    """
    Find the smallest standard gauge rated for a current.

    Returns:
        Gauge in mm², or None if even the largest gauge is overloaded
    """
    for gauge in sorted(gauges):
        if current <= ampacity(gauge):
            return gauge
    return None


def analyze_wire(stats: WireSegmentStats, length_ft: float,
                 gauge_mm2: float, voltage: float) -> WireAnalysis:
    """
    Build the user-facing analysis for a segment.

    Args:
        stats: Segment result from calculate_wire_segment
        length_ft: One-way run length in feet
        gauge_mm2: Installed conductor cross-section
        voltage: Nominal segment voltage, for the percentage drop

    Returns:
        WireAnalysis with a warning message when the run is overloaded
    """
    voltage_drop_percent = (stats.voltage_drop / voltage) * 100 if voltage > 0 else 0.0
    return WireAnalysis(
        current=stats.current,
        resistance=wire_resistance(length_ft, gauge_mm2),
        power_loss=stats.power_loss,
        voltage_drop=stats.voltage_drop,
        voltage_drop_percent=voltage_drop_percent,
        is_safe=stats.is_safe,
        recommended_mm2=recommend_wire_gauge(stats.current),
        message=WIRE_OK_MESSAGE if stats.is_safe else WIRE_WARNING_MESSAGE
    )
