"""
Basic SolarPlanner Usage Example

This script demonstrates how to evaluate a solar installation at a single
instant, sweep it across a day in each operating mode, and run the live
ticking simulation for a few seconds.
"""

import time
from pathlib import Path
from datetime import datetime

import pandas as pd
import matplotlib.pyplot as plt

from solarplanner import (
    SolarPlannerSimulation, SystemConfig, SimulationConfig, PlannerConfig,
    SystemMode, evaluate, quick_evaluation
)
from solarplanner.data.sun import format_clock


def create_example_config(mode: SystemMode = SystemMode.HYBRID) -> PlannerConfig:
    """Create an example planner configuration for a small home system."""

    # 4 x 300 W panels on a 24 V / 200 Ah bank
    system = SystemConfig(
        num_panels=4,
        panel_wattage=300,
        panel_voltage=36,
        wire_gauge_mm2=6,
        wire_length_ft=30,
        battery_capacity_ah=200,
        battery_voltage=24,
        battery_c_rating=10,
        inverter_efficiency=0.9,
        controller_efficiency=0.95
    )

    simulation = SimulationConfig(
        mode=mode,
        initial_soc=0.6,
        ac_load_w=250,
        time_step_minutes=15
    )

    return PlannerConfig(system=system, simulation=simulation)


def run_instant_demonstrations():
    """Demonstrate single-instant evaluations."""

    print("=== Instant Evaluations ===\n")

    config = SystemConfig()
    for mode in SystemMode:
        state = evaluate(
            sun_intensity=1.0, ac_load=200,
            battery_energy_wh=0.5 * config.battery_max_wh,
            config=config, time_of_day=12, mode=mode
        )
        print(f"{mode.value:>8}: generation {state.generation:.0f} W, "
              f"battery flow {state.net_battery_flow:+.1f} W, "
              f"import {state.grid_import:.1f} W, export {state.grid_export:.1f} W, "
              f"wasted {state.wasted_power:.1f} W")

    # Undersized solar wire
    state = quick_evaluation(angle_deg=90, ac_load=200, wire_gauge_mm2=1.5, num_panels=4)
    print(f"\n1.5 mm² solar wire at noon: {state.wire_analysis.current:.1f} A -> "
          f"{state.wire_analysis.message} (use {state.wire_analysis.recommended_mm2} mm²)")
    print()


def run_day_sweeps():
    """Sweep one day in each mode and collect the results."""

    print("=== Day Sweeps ===\n")

    # Evening-heavy household load (W by hour of day)
    load_profile = pd.Series({0: 120, 6: 250, 9: 150, 17: 450, 22: 180})

    sweeps = {}
    comparison = []
    for mode in SystemMode:
        sim = SolarPlannerSimulation(create_example_config(mode))
        sim.run_simulation(duration_hours=24, load_profile=load_profile)
        sweeps[mode] = sim

        perf = sim.performance_metrics
        comparison.append({
            'Mode': mode.value,
            'Generation (Wh)': perf['total_generation_wh'],
            'Grid Import (Wh)': perf['total_grid_import_wh'],
            'Grid Export (Wh)': perf['total_grid_export_wh'],
            'Wasted (Wh)': perf['total_wasted_wh'],
            'Final SOC (%)': perf['final_soc_percent'],
        })

    comparison_df = pd.DataFrame(comparison)
    print(comparison_df.to_string(index=False, float_format='%.1f'))
    print("\n" + sweeps[SystemMode.HYBRID].get_summary_report())

    output_dir = Path(__file__).parent / 'simulation_results'
    sweeps[SystemMode.HYBRID].export_results(str(output_dir), format='csv')
    comparison_df.to_csv(output_dir / 'mode_comparison.csv', index=False)
    print(f"Results exported to: {output_dir}")

    return sweeps


def create_visualization_plots(sweeps):
    """Plot battery and grid behaviour for each mode."""

    fig, axes = plt.subplots(3, 1, figsize=(14, 12), sharex=True)
    fig.suptitle('SolarPlanner - One Day in Each Mode', fontsize=16)

    hybrid = sweeps[SystemMode.HYBRID].time_series_data
    axes[0].plot(hybrid.index, hybrid['generation'], label='Solar Generation', color='gold')
    axes[0].plot(hybrid.index, hybrid['ac_load'], label='AC Load', color='blue', alpha=0.7)
    axes[0].set_ylabel('Power (W)')
    axes[0].set_title('Generation vs Load')
    axes[0].legend()
    axes[0].grid(True, alpha=0.3)

    for mode, sim in sweeps.items():
        data = sim.time_series_data
        axes[1].plot(data.index, data['battery_percent'], label=mode.value, alpha=0.8)
        axes[2].plot(data.index, data['grid_import'] - data['grid_export'],
                     label=mode.value, alpha=0.8)

    axes[1].set_ylabel('Battery SOC (%)')
    axes[1].set_title('Battery State of Charge')
    axes[1].set_ylim(0, 100)
    axes[1].legend()
    axes[1].grid(True, alpha=0.3)

    axes[2].set_ylabel('Net Grid Import (W)')
    axes[2].set_xlabel('Hour')
    axes[2].set_title('Grid Exchange (negative = export)')
    axes[2].legend()
    axes[2].grid(True, alpha=0.3)

    plt.tight_layout()

    output_path = Path(__file__).parent / 'simulation_results' / 'day_sweep_plots.png'
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    print(f"Plots saved to: {output_path}")

    return fig


def run_live_simulation(seconds: float = 2.0):
    """Tick the simulation in real time while moving the sun."""

    print("\n=== Live Simulation ===\n")

    sim = SolarPlannerSimulation(create_example_config())
    with sim:
        for angle in (60, 90, 120):
            sim.set_sun_position(angle)
            time.sleep(seconds / 3)
            state = sim.last_state or sim.current_state()
            print(f"{format_clock(state.time_of_day)}: battery {state.battery_percent:.3f}%, "
                  f"flow {state.net_battery_flow:+.1f} W")

    print(sim.get_status_report())


def main():
    """Main execution function."""

    print("SolarPlanner Demonstration")
    print("=" * 40)
    print(f"Started at: {datetime.now()}")
    print()

    run_instant_demonstrations()
    sweeps = run_day_sweeps()
    create_visualization_plots(sweeps)
    run_live_simulation()


if __name__ == "__main__":
    main()
