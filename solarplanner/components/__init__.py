"""
Components package for SolarPlanner

Contains models for system components including the solar array, wiring,
charge controller, battery bank, inverter, and grid routing modes.
"""

from .modes import SystemMode, BusConditions, RoutingResult, route
from .wiring import WireSegmentStats, WireAnalysis, calculate_wire_segment, analyze_wire
from .solar import SolarArray
from .controller import ChargeController
from .battery import BatteryBank, BatteryEnergyIntegrator
from .inverter import Inverter

__all__ = [
    "SystemMode",
    "BusConditions",
    "RoutingResult",
    "route",
    "WireSegmentStats",
    "WireAnalysis",
    "calculate_wire_segment",
    "analyze_wire",
    "SolarArray",
    "ChargeController",
    "BatteryBank",
    "BatteryEnergyIntegrator",
    "Inverter"
]
