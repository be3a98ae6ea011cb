"""
Simulation host for SolarPlanner.

This module provides the SolarPlannerSimulation class that owns the battery
energy, drives the power-flow engine once per tick (live, on a wall-clock
schedule) or once per step (day sweeps), and reports the results.
"""

import json
import logging
import threading
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Any, Optional, Union

import numpy as np
import pandas as pd

from .engine import evaluate, SystemState
from .components.battery import BatteryEnergyIntegrator
from .components.modes import SystemMode
from .data.sun import SunPathGenerator, sun_position_to_conditions, format_clock
from .utils.config import PlannerConfig, SystemConfig
from .utils.constants import MINUTES_PER_HOUR
from .utils.helpers import validate_range, validate_non_negative, format_percent


@dataclass(frozen=True)
class InstantInputs:
    """User-controlled conditions read once per tick."""
    sun_intensity: float
    time_of_day: float
    ac_load: float
    mode: SystemMode


LoadProfile = Union[None, float, int, Dict[float, float], pd.Series]


class SolarPlannerSimulation:
    """
    Interactive solar system simulation.

    Holds the only mutable state of the model (battery energy, through a
    BatteryEnergyIntegrator). Ticks, input edits and config edits all take
    the same lock, so a tick always evaluates one consistent set of inputs
    and no two ticks integrate at once.
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        """
        Initialize the simulation.

        Args:
            config: Planner configuration; defaults are used when omitted
        """
        self.config = config or PlannerConfig()
        self.logger = self._setup_logging()

        sim = self.config.simulation
        self._system = self.config.system
        self._inputs = InstantInputs(
            sun_intensity=sim.sun_intensity,
            time_of_day=sim.time_of_day,
            ac_load=sim.ac_load_w,
            mode=sim.mode
        )
        self.integrator = BatteryEnergyIntegrator(
            self._system,
            initial_soc=sim.initial_soc,
            acceleration_factor=sim.acceleration_factor
        )
        self.tick_interval = sim.tick_interval_seconds

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_tick: Optional[float] = None
        self._wire_warning_active = False

        # Simulation results storage
        self.last_state: Optional[SystemState] = None
        self.results: Dict[str, Any] = {}
        self.time_series_data: Optional[pd.DataFrame] = None
        self.performance_metrics: Dict[str, float] = {}
        self.tick_count = 0

        self.logger.info(f"Initialized SolarPlannerSimulation in {sim.mode.value} mode")

    def _setup_logging(self) -> logging.Logger:
        """Set up simulation logging."""
        logger = logging.getLogger(f'SolarPlanner.{id(self)}')
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)
        return logger

    # ------------------------------------------------------------------
    # Inputs and configuration
    # ------------------------------------------------------------------

    @property
    def system_config(self) -> SystemConfig:
        return self._system

    @property
    def inputs(self) -> InstantInputs:
        return self._inputs

    @property
    def battery_energy_wh(self) -> float:
        return self.integrator.energy_wh

    def set_conditions(self,
                       sun_intensity: Optional[float] = None,
                       time_of_day: Optional[float] = None,
                       ac_load: Optional[float] = None) -> InstantInputs:
        """
        Update the instant conditions; omitted values are kept.

        Raises:
            ValueError: If a value is out of range
        """
        changes = {}
        if sun_intensity is not None:
            validate_range(sun_intensity, 0, 1, "Sun intensity")
            changes['sun_intensity'] = sun_intensity
        if time_of_day is not None:
            validate_range(time_of_day, 0, 24, "Time of day")
            changes['time_of_day'] = time_of_day
        if ac_load is not None:
            validate_non_negative(ac_load, "AC load")
            changes['ac_load'] = ac_load

        with self._lock:
            self._inputs = replace(self._inputs, **changes)
            return self._inputs

    def set_sun_position(self, angle_deg: float) -> InstantInputs:
        """Set intensity and time of day from a sun angle on the sky arc."""
        intensity, time_of_day = sun_position_to_conditions(angle_deg)
        return self.set_conditions(sun_intensity=intensity, time_of_day=time_of_day)

    def set_mode(self, mode: Union[SystemMode, str]) -> SystemMode:
        """Switch operating mode; takes effect on the next evaluation."""
        mode = SystemMode.parse(mode)
        with self._lock:
            previous = self._inputs.mode
            self._inputs = replace(self._inputs, mode=mode)
        if mode is not previous:
            self.logger.info(f"Mode changed: {previous.value} -> {mode.value}")
        return mode

    def update_config(self, system_config: Optional[SystemConfig] = None,
                      **changes) -> SystemConfig:
        """
        Replace the system configuration.

        Either pass a full SystemConfig or field changes for the current one.
        Stored battery energy is re-clamped to the new capacity immediately.
        """
        new_config = system_config or self._system
        if changes:
            new_config = new_config.with_changes(**changes)

        with self._lock:
            self._system = new_config
            self.config.system = new_config
            energy = self.integrator.reclamp(new_config)

        self.logger.info(
            f"System config updated: {new_config.battery_max_wh:.0f}Wh bank, "
            f"battery now at {energy:.1f}Wh"
        )
        return new_config

    def set_battery_energy(self, energy_wh: float) -> float:
        """Set the battery level directly (clamped to capacity)."""
        with self._lock:
            return self.integrator.inject(energy_wh)

    # ------------------------------------------------------------------
    # Live simulation
    # ------------------------------------------------------------------

    def current_state(self) -> SystemState:
        """Evaluate the engine for the current inputs without advancing time."""
        with self._lock:
            inputs, system, energy = self._inputs, self._system, self.integrator.energy_wh
        return evaluate(
            inputs.sun_intensity, inputs.ac_load, energy, system,
            inputs.time_of_day, inputs.mode
        )

    def tick(self, now: Optional[float] = None) -> SystemState:
        """
        Run one integration step.

        Evaluates the engine on the stored battery energy, then integrates the
        resulting net flow over the wall-clock time since the previous tick.

        Args:
            now: Monotonic timestamp in seconds; defaults to time.monotonic()

        Returns:
            The snapshot used for the step
        """
        with self._lock:
            now = time.monotonic() if now is None else now
            previous = self._last_tick
            elapsed = 0.0 if previous is None else now - previous
            self._last_tick = now

            inputs = self._inputs
            state = evaluate(
                inputs.sun_intensity, inputs.ac_load, self.integrator.energy_wh,
                self._system, inputs.time_of_day, inputs.mode
            )
            if previous is not None and elapsed <= 0:
                self.logger.debug(f"Non-positive tick interval ({elapsed:.3f}s), skipping integration")
            self.integrator.advance(elapsed, state)

            self.last_state = state
            self.tick_count += 1
            self._check_wiring(state)

        return state

    def _check_wiring(self, state: SystemState) -> None:
        """
        Log once when the wiring becomes overloaded and once when it recovers.

        Called with the lock held so concurrent ticks see one transition.
        """
        unsafe = not state.wire_stats.all_safe
        if unsafe and not self._wire_warning_active:
            self.logger.warning(
                f"{state.wire_analysis.message} Solar leg at {state.wire_analysis.current:.1f}A "
                f"on {self._system.wire_gauge_mm2:g}mm² "
                f"(recommended {state.wire_analysis.recommended_mm2 or 'n/a'} mm²)"
            )
        elif not unsafe and self._wire_warning_active:
            self.logger.info("Wiring back within rated current")
        self._wire_warning_active = unsafe

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start ticking on a background thread every ``tick_interval`` seconds."""
        if self.is_running:
            return
        self._stop_event.clear()
        with self._lock:
            self._last_tick = time.monotonic()
        self._thread = threading.Thread(
            target=self._run_loop, name='SolarPlannerTicker', daemon=True
        )
        self._thread.start()
        self.logger.info(f"Started live simulation, tick every {self.tick_interval:g}s")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the background ticker and wait for it to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
            self.logger.info(f"Stopped live simulation after {self.tick_count} ticks")

    def _run_loop(self) -> None:
        while not self._stop_event.wait(self.tick_interval):
            try:
                self.tick()
            except Exception:
                self.logger.exception("Simulation tick failed; stopping ticker")
                raise

    def __enter__(self) -> 'SolarPlannerSimulation':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Day sweeps
    # ------------------------------------------------------------------

    def run_simulation(self,
                       start_hour: float = 0.0,
                       duration_hours: float = 24.0,
                       time_step_minutes: Optional[int] = None,
                       load_profile: LoadProfile = None,
                       peak_intensity: float = 1.0) -> Dict[str, Any]:
        """
        Sweep the sun across one or more days in simulated time.

        Args:
            start_hour: First simulated hour
            duration_hours: Length of the sweep in hours
            time_step_minutes: Step size; defaults to the simulation config
            load_profile: AC load as None (current load), a constant, or a
                mapping / Series of hour-of-day -> W (held until the next entry)
            peak_intensity: Sun intensity at solar noon

        Returns:
            Results dictionary with time series and performance metrics
        """
        time_step_minutes = time_step_minutes or self.config.simulation.time_step_minutes
        step_hours = time_step_minutes / MINUTES_PER_HOUR

        with self._lock:
            inputs, system = self._inputs, self._system
            self.logger.info(
                f"Starting day sweep: {duration_hours:g}h from {format_clock(start_hour % 24)}, "
                f"{time_step_minutes}-min steps, {inputs.mode.value} mode"
            )

            profile = SunPathGenerator(peak_intensity).generate_day_profile(
                time_step_minutes=time_step_minutes,
                start_hour=start_hour,
                duration_hours=duration_hours
            )
            loads = self._resolve_loads(load_profile, profile['time_of_day'], inputs.ac_load)

            rows = []
            for (hour, sun), ac_load in zip(profile.iterrows(), loads):
                state = evaluate(
                    sun['sun_intensity'], ac_load, self.integrator.energy_wh,
                    system, sun['time_of_day'], inputs.mode
                )
                energy_after = self.integrator.advance_hours(step_hours, state)
                row = state.to_dict()
                row['battery_energy_after'] = energy_after
                rows.append(row)
                self.last_state = state

        results = pd.DataFrame(rows, index=profile.index)
        self.time_series_data = results
        self.performance_metrics = self._calculate_performance_metrics(results, step_hours, system)
        self.results = {
            'time_series': results,
            'performance_metrics': self.performance_metrics,
            'planner_config': self.config.to_dict(),
            'simulation_parameters': {
                'start_hour': start_hour,
                'duration_hours': duration_hours,
                'time_step_minutes': time_step_minutes,
                'mode': inputs.mode.value,
                'peak_intensity': peak_intensity
            }
        }

        self.logger.info("Day sweep completed successfully")
        return self.results

    @staticmethod
    def _resolve_loads(load_profile: LoadProfile, time_of_day: pd.Series,
                       default_load: float) -> np.ndarray:
        """AC load for each step of a sweep."""
        if load_profile is None:
            return np.full(len(time_of_day), float(default_load))
        if isinstance(load_profile, (int, float)):
            return np.full(len(time_of_day), float(load_profile))

        series = pd.Series(load_profile, dtype=float).sort_index()
        loads = np.array([series.asof(t) for t in time_of_day], dtype=float)
        # Hours before the first entry wrap around to the last one
        return np.where(np.isnan(loads), series.iloc[-1], loads)

    def _calculate_performance_metrics(self, results: pd.DataFrame, step_hours: float,
                                       system: SystemConfig) -> Dict[str, float]:
        """Calculate energy totals and battery statistics for a sweep."""
        energy_after = results['battery_energy_after'].to_numpy()
        # Energy actually stored per step, after the integrator's clamp
        energy_delta = np.diff(energy_after, prepend=results['battery_level'].iloc[0])
        soc_after = energy_after / system.battery_max_wh * 100

        return {
            'total_generation_wh': results['generation'].sum() * step_hours,
            'total_load_wh': results['ac_load'].sum() * step_hours,
            'total_grid_import_wh': results['grid_import'].sum() * step_hours,
            'total_grid_export_wh': results['grid_export'].sum() * step_hours,
            'total_wasted_wh': results['wasted_power'].sum() * step_hours,
            'total_wire_loss_wh': results['solar_to_controller_power_loss'].sum() * step_hours,
            'battery_charged_wh': np.clip(energy_delta, 0, None).sum(),
            'battery_discharged_wh': -np.clip(energy_delta, None, 0).sum(),
            'initial_soc_percent': results['battery_percent'].iloc[0],
            'final_soc_percent': soc_after[-1],
            'min_soc_percent': min(results['battery_percent'].min(), soc_after.min()),
            'max_soc_percent': max(results['battery_percent'].max(), soc_after.max()),
            'peak_generation_w': results['generation'].max(),
            'unsafe_wire_steps': int((~results['solar_to_controller_is_safe']).sum()),
        }

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def export_results(self, output_path: str, format: str = 'csv') -> None:
        """
        Export day-sweep results to files.

        Args:
            output_path: Directory to save results
            format: Export format ('csv', 'json')
        """
        if not self.results:
            raise ValueError("No simulation results to export. Run simulation first.")

        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        if format == 'csv':
            self.time_series_data.to_csv(output_dir / 'time_series_data.csv')
            pd.DataFrame([self.performance_metrics]).to_csv(
                output_dir / 'performance_metrics.csv', index=False
            )
        elif format == 'json':
            json_results = {
                'time_series': self.time_series_data.reset_index().to_dict('records'),
                'performance_metrics': self.performance_metrics,
                'planner_config': self.results['planner_config'],
                'simulation_parameters': self.results['simulation_parameters'],
            }
            with open(output_dir / 'simulation_results.json', 'w') as f:
                json.dump(self._convert_numpy_types(json_results), f, indent=2, default=str)
        else:
            raise ValueError(f"Unknown export format: {format}")

        self.logger.info(f"Results exported to {output_dir} in {format} format")

    def _convert_numpy_types(self, obj):
        """Convert numpy types to Python types for JSON serialization."""
        if isinstance(obj, dict):
            return {key: self._convert_numpy_types(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [self._convert_numpy_types(item) for item in obj]
        elif isinstance(obj, np.bool_):
            return bool(obj)
        elif isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        else:
            return obj

    def get_status_report(self, state: Optional[SystemState] = None) -> str:
        """
        Render a snapshot as the planner's status panel.

        Args:
            state: Snapshot to render; defaults to the current state
        """
        state = state or self.current_state()
        stats = state.wire_stats
        grid_status = 'ACTIVE' if state.grid_active else 'STANDBY'

        return f"""
{format_clock(state.time_of_day)} | {state.mode.value} | Sun {state.sun_intensity*100:.0f}%
Solar: {state.generation:.1f} W generated, {state.power_at_controller:.1f} W at controller
Battery: {state.battery_percent:.1f}% ({state.battery_level:.0f} Wh), net flow {state.net_battery_flow:+.1f} W
Load: {state.ac_load:.0f} W AC ({state.inverter_input:.1f} W DC)
Grid: import {state.grid_import:.1f} W, export {state.grid_export:.1f} W
Wasted: {state.wasted_power:.1f} W

Wire Status: {state.wire_analysis.message}
- Solar -> Controller: {stats.solar_to_controller.current:.1f} A, loss {stats.solar_to_controller.power_loss:.2f} W, drop {state.wire_analysis.voltage_drop_percent:.2f}%
- Controller -> Battery: {stats.controller_to_battery.current:.1f} A, loss {stats.controller_to_battery.power_loss:.2f} W
- Battery -> Inverter: {stats.battery_to_inverter.current:.1f} A, loss {stats.battery_to_inverter.power_loss:.2f} W
- Inverter -> Load: {stats.inverter_to_load.current:.2f} A, loss {stats.inverter_to_load.power_loss:.2f} W
Grid Status: {grid_status}
"""

    def get_summary_report(self) -> str:
        """Generate a text summary report of day-sweep results."""
        if not self.results:
            return "No simulation results available. Run simulation first."

        perf = self.performance_metrics
        params = self.results['simulation_parameters']
        system = self._system

        report = f"""
SolarPlanner Simulation Results Summary
=======================================

System Configuration:
- Solar Array: {system.num_panels} × {system.panel_wattage:g}W ({system.array_capacity_w:.0f} W)
- Battery: {system.battery_capacity_ah:g}Ah @ {system.battery_voltage:g}V ({system.battery_max_wh:.0f} Wh)
- Mode: {params['mode']}

Energy Balance:
- Solar Generation: {perf['total_generation_wh']:.0f} Wh
- Load Consumption: {perf['total_load_wh']:.0f} Wh
- Grid Import: {perf['total_grid_import_wh']:.0f} Wh
- Grid Export: {perf['total_grid_export_wh']:.0f} Wh
- Wasted Solar: {perf['total_wasted_wh']:.0f} Wh
- Solar Wire Losses: {perf['total_wire_loss_wh']:.1f} Wh

Battery Performance:
- Charged: {perf['battery_charged_wh']:.0f} Wh
- Discharged: {perf['battery_discharged_wh']:.0f} Wh
- SOC: {format_percent(perf['initial_soc_percent'])} -> {format_percent(perf['final_soc_percent'])}
- SOC Range: {format_percent(perf['min_soc_percent'])} - {format_percent(perf['max_soc_percent'])}

Wiring:
- Steps with overloaded solar wire: {perf['unsafe_wire_steps']}
"""
        return report
