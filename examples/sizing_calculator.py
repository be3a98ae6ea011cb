"""
System sizing example: recommend components for a household appliance list
and check the recommended array against the default 10 mm² solar wire.
"""

from solarplanner import SizingCalculator, SystemConfig, quick_evaluation


def main():
    calculator = SizingCalculator()
    calculator.add_appliance('Refrigerator', 150, 10)
    calculator.add_appliance('Television', 100, 4)
    calculator.add_appliance('Water Pump', 750, 1)

    print(calculator.to_dataframe().to_string())
    print()
    print(calculator.get_report())

    rec = calculator.calculate_recommendations()
    system = SystemConfig(
        num_panels=rec['panel_count'],
        panel_wattage=rec['panel_rating_w'],
        battery_capacity_ah=rec['battery_ah'],
        battery_voltage=rec['battery_voltage']
    )
    state = quick_evaluation(
        angle_deg=90, ac_load=rec['peak_load_w'], soc=0.8,
        num_panels=system.num_panels,
        panel_wattage=system.panel_wattage,
        battery_capacity_ah=system.battery_capacity_ah,
        battery_voltage=system.battery_voltage
    )

    print()
    print(f"Noon check with {system.num_panels} panels: {state.generation:.0f} W, "
          f"solar wire {state.wire_analysis.current:.1f} A -> {state.wire_analysis.message}")
    if not state.wire_analysis.is_safe:
        print(f"Upgrade solar wire to {state.wire_analysis.recommended_mm2} mm²")


if __name__ == "__main__":
    main()
