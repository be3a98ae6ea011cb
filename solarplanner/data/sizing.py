"""
System sizing module for SolarPlanner.

Contains the SizingCalculator, which turns a list of household appliances
into rule-of-thumb recommendations for the inverter, battery bank and solar
array. Independent of the power-flow engine.
"""

import itertools
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

import pandas as pd

from ..utils.constants import SIZING_RULES, DEFAULT_APPLIANCES
from ..utils.helpers import ceil_int, validate_positive, validate_non_negative


@dataclass(frozen=True)
class Appliance:
    """One appliance in the load list."""
    id: int
    name: str
    watts: float
    hours: float  # hours of use per day

    @property
    def wh_per_day(self) -> float:
        return self.watts * self.hours


class SizingCalculator:
    """
    Appliance-based sizing calculator.

    Recommendations assume one day of autonomy on a 24 V lead-acid bank at
    50% depth of discharge, 5 peak sun hours with 70% system efficiency, and
    250 W reference panels.
    """

    def __init__(self, appliances: Optional[List[Dict]] = None,
                 rules: Optional[Dict[str, float]] = None):
        """
        Initialize calculator.

        Args:
            appliances: Initial appliances as dicts with name/watts/hours;
                defaults to a ceiling fan and an LED bulb
            rules: Overrides for SIZING_RULES entries
        """
        self.rules = dict(SIZING_RULES)
        if rules:
            self.rules.update(rules)
        self._ids = itertools.count(1)
        self.appliances: List[Appliance] = []

        initial = DEFAULT_APPLIANCES if appliances is None else appliances
        for item in initial:
            self.add_appliance(item['name'], item['watts'], item.get('hours', 0))

    def add_appliance(self, name: str, watts: float, hours: float = 0) -> Appliance:
        """
        Add an appliance to the list.

        Raises:
            ValueError: If the name is empty, watts is not positive or
                hours is negative
        """
        if not name or not name.strip():
            raise ValueError("Appliance name must not be empty")
        validate_positive(watts, "Appliance watts")
        validate_non_negative(hours, "Appliance hours")

        appliance = Appliance(id=next(self._ids), name=name.strip(), watts=watts, hours=hours)
        self.appliances.append(appliance)
        return appliance

    def remove_appliance(self, appliance_id: int) -> bool:
        """Remove an appliance by id. Returns False if it was not in the list."""
        remaining = [a for a in self.appliances if a.id != appliance_id]
        removed = len(remaining) != len(self.appliances)
        self.appliances = remaining
        return removed

    @property
    def total_watts(self) -> float:
        """Peak load if everything runs at once."""
        return sum(a.watts for a in self.appliances)

    @property
    def total_wh_per_day(self) -> float:
        return sum(a.wh_per_day for a in self.appliances)

    def calculate_recommendations(self) -> Dict[str, float]:
        """
        Calculate component recommendations for the current appliance list.

        Returns:
            Dictionary with daily energy, peak load and recommended sizes
        """
        rules = self.rules
        total_watts = self.total_watts
        total_wh = self.total_wh_per_day

        inverter_va = ceil_int(total_watts * rules['inverter_safety_factor'])

        battery_ah = ceil_int(
            total_wh * rules['days_of_autonomy']
            / rules['battery_bank_voltage'] / rules['battery_depth_of_discharge']
        )

        panel_watts = ceil_int(total_wh / rules['peak_sun_hours'] / rules['system_efficiency'])
        panel_count = ceil_int(panel_watts / rules['reference_panel_watts'])

        unit_battery_wh = rules['unit_battery_voltage'] * rules['unit_battery_capacity_ah']
        num_unit_batteries = ceil_int(battery_ah * rules['battery_bank_voltage'] / unit_battery_wh)

        return {
            'daily_energy_wh': total_wh,
            'peak_load_w': total_watts,
            'inverter_va': inverter_va,
            'battery_ah': battery_ah,
            'battery_voltage': rules['battery_bank_voltage'],
            'panel_watts': panel_watts,
            'panel_count': panel_count,
            'panel_rating_w': rules['reference_panel_watts'],
            'num_unit_batteries': num_unit_batteries
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Appliance list as a table with daily energy per appliance."""
        columns = ['id', 'name', 'watts', 'hours', 'wh_per_day']
        if not self.appliances:
            return pd.DataFrame(columns=columns)
        rows = [dict(asdict(a), wh_per_day=a.wh_per_day) for a in self.appliances]
        return pd.DataFrame(rows, columns=columns).set_index('id')

    def get_report(self) -> str:
        """Generate a text report of the recommendations."""
        if not self.appliances:
            return "No appliances listed."

        rec = self.calculate_recommendations()
        rules = self.rules
        lines = [
            "System Sizing Recommendations",
            "=============================",
            "",
            "Appliances:",
        ]
        for a in self.appliances:
            lines.append(f"- {a.name}: {a.watts:g}W x {a.hours:g}h")
        lines += [
            "",
            f"Daily Energy: {round(rec['daily_energy_wh'])} Wh",
            f"Peak Load: {rec['peak_load_w']:g} W",
            f"Solar Panels: {rec['panel_count']} x {rec['panel_rating_w']:g}W ({rec['panel_watts']}W total)",
            f"Battery Bank ({rec['battery_voltage']:g}V): {rec['battery_ah']} Ah",
            f"{rules['unit_battery_voltage']:g}V Batteries Needed: {rec['num_unit_batteries']} x "
            f"({rules['unit_battery_voltage']:g}V {rules['unit_battery_capacity_ah']:g}Ah)",
            f"Inverter Size: {rec['inverter_va']} VA",
        ]
        return "\n".join(lines)
