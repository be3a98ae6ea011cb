"""
Tests for the simulation host: ticking, live configuration edits, day
sweeps and reporting.
"""

import json
import logging
import threading
import time

import pytest

from solarplanner import SolarPlannerSimulation, SystemMode
from solarplanner.utils.config import PlannerConfig, SystemConfig, SimulationConfig
from solarplanner.utils.constants import WIRE_WARNING_MESSAGE

from conftest import NOON_DC_AVAILABLE


@pytest.fixture
def sim(planner_config):
    return SolarPlannerSimulation(planner_config)


def make_sim(mode='HYBRID', **system_overrides):
    return SolarPlannerSimulation(PlannerConfig(
        system=SystemConfig(**system_overrides),
        simulation=SimulationConfig(mode=mode, sun_intensity=1.0, time_of_day=12, ac_load_w=200)
    ))


class TestTick:

    def test_first_tick_does_not_integrate(self, sim):
        state = sim.tick(now=100.0)
        assert sim.battery_energy_wh == pytest.approx(3600.0)
        assert state.battery_percent == pytest.approx(50.0)
        assert sim.last_state is state
        assert sim.tick_count == 1

    def test_tick_integrates_elapsed_time(self, sim):
        sim.tick(now=100.0)
        # 36 s at 10x is 0.1 simulated hours
        sim.tick(now=136.0)
        expected = 3600.0 + (NOON_DC_AVAILABLE - 250.0) * 0.1
        assert sim.battery_energy_wh == pytest.approx(expected)

    def test_clock_going_backwards_is_ignored(self, sim):
        sim.tick(now=100.0)
        sim.tick(now=90.0)
        sim.tick(now=90.0)
        assert sim.battery_energy_wh == pytest.approx(3600.0)

    def test_state_evaluated_before_integration(self, sim):
        sim.tick(now=0.0)
        state = sim.tick(now=360.0)
        assert state.battery_level == pytest.approx(3600.0)
        assert sim.battery_energy_wh > state.battery_level

    def test_on_grid_battery_frozen(self):
        sim = make_sim(mode='ON_GRID')
        for now in range(0, 1000, 100):
            sim.tick(now=float(now))
        assert sim.battery_energy_wh == pytest.approx(3600.0)

    def test_unsafe_wiring_logged_once(self, caplog):
        sim = make_sim(num_panels=4, wire_gauge_mm2=1.5)
        with caplog.at_level(logging.WARNING):
            sim.tick(now=0.0)
            sim.tick(now=1.0)
        warnings = [r for r in caplog.records if WIRE_WARNING_MESSAGE in r.getMessage()]
        assert len(warnings) == 1

    def test_unsafe_wiring_logged_once_with_concurrent_ticks(self, caplog):
        sim = make_sim(num_panels=4, wire_gauge_mm2=1.5)
        with caplog.at_level(logging.WARNING):
            threads = [threading.Thread(target=sim.tick) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()
        warnings = [r for r in caplog.records if WIRE_WARNING_MESSAGE in r.getMessage()]
        assert len(warnings) == 1
        assert sim.tick_count == 8


class TestInputs:

    def test_set_conditions_keeps_omitted_values(self, sim):
        inputs = sim.set_conditions(ac_load=500)
        assert inputs.ac_load == 500
        assert inputs.sun_intensity == 1.0
        assert inputs.time_of_day == 12

    @pytest.mark.parametrize("kwargs", [
        {'sun_intensity': 1.2},
        {'time_of_day': -1},
        {'ac_load': -10},
    ])
    def test_set_conditions_validates(self, sim, kwargs):
        with pytest.raises(ValueError):
            sim.set_conditions(**kwargs)

    def test_set_sun_position(self, sim):
        inputs = sim.set_sun_position(0)
        assert inputs.sun_intensity == pytest.approx(0.0)
        assert inputs.time_of_day == pytest.approx(6.0)
        assert sim.current_state().generation == 0

    def test_set_mode(self, sim):
        assert sim.set_mode('on-grid') is SystemMode.ON_GRID
        assert sim.current_state().mode is SystemMode.ON_GRID

    def test_update_config_reclamps_battery(self, sim):
        sim.set_battery_energy(7200)
        sim.update_config(battery_capacity_ah=100)
        assert sim.system_config.battery_capacity_ah == 100
        assert sim.battery_energy_wh == pytest.approx(2400.0)
        assert sim.current_state().battery_percent == pytest.approx(100.0)

    def test_update_config_with_full_snapshot(self, sim):
        sim.update_config(SystemConfig(num_panels=4))
        assert sim.current_state().generation == pytest.approx(1000.0)

    def test_invalid_update_leaves_config(self, sim):
        with pytest.raises(ValueError):
            sim.update_config(wire_gauge_mm2=0)
        assert sim.system_config.wire_gauge_mm2 == 10


class TestLiveLoop:

    def test_start_and_stop(self):
        sim = SolarPlannerSimulation(PlannerConfig(
            simulation=SimulationConfig(sun_intensity=1.0, time_of_day=12, tick_interval_seconds=0.01)
        ))
        sim.start()
        assert sim.is_running
        time.sleep(0.2)
        sim.stop(timeout=2)
        assert not sim.is_running
        assert sim.tick_count > 0
        assert sim.battery_energy_wh > 3600.0

    def test_context_manager(self):
        sim = SolarPlannerSimulation(PlannerConfig(
            simulation=SimulationConfig(tick_interval_seconds=0.01)
        ))
        with sim:
            time.sleep(0.1)
        assert not sim.is_running


class TestDaySweep:

    def test_sweep_shape(self, sim):
        results = sim.run_simulation()
        data = results['time_series']
        assert len(data) == 96
        assert 'battery_energy_after' in data.columns
        assert 'solar_to_controller_is_safe' in data.columns
        assert data['battery_energy_after'].between(0, 7200).all()
        assert not ((data['grid_import'] > 0) & (data['grid_export'] > 0)).any()
        assert results['simulation_parameters']['mode'] == 'HYBRID'

    def test_generation_only_in_daylight(self, sim):
        data = sim.run_simulation(time_step_minutes=60)['time_series']
        night = data[(data['time_of_day'] < 9) | (data['time_of_day'] > 16)]
        assert (night['generation'] == 0).all()
        assert data.loc[12.0, 'generation'] == pytest.approx(500.0)

    def test_on_grid_sweep_leaves_battery(self):
        sim = make_sim(mode='ON_GRID')
        sim.run_simulation(load_profile=200)
        perf = sim.performance_metrics
        assert perf['initial_soc_percent'] == pytest.approx(50.0)
        assert perf['final_soc_percent'] == pytest.approx(50.0)
        assert perf['total_load_wh'] == pytest.approx(4800.0)
        assert perf['battery_charged_wh'] == 0

    def test_off_grid_sweep_never_touches_grid(self):
        sim = make_sim(mode='OFF_GRID')
        sim.run_simulation()
        perf = sim.performance_metrics
        assert perf['total_grid_import_wh'] == 0
        assert perf['total_grid_export_wh'] == 0
        assert perf['peak_generation_w'] == pytest.approx(500.0)

    def test_load_profile_mapping(self, sim):
        data = sim.run_simulation(load_profile={6: 300, 18: 100})['time_series']
        assert data.loc[0.0, 'ac_load'] == 100
        assert data.loc[7.0, 'ac_load'] == 300
        assert data.loc[18.0, 'ac_load'] == 100

    def test_unsafe_steps_counted(self):
        sim = make_sim(num_panels=4, wire_gauge_mm2=1.5)
        sim.run_simulation()
        assert sim.performance_metrics['unsafe_wire_steps'] > 0

    def test_empty_battery_reports_no_discharge(self):
        sim = SolarPlannerSimulation(PlannerConfig(
            simulation=SimulationConfig(mode='OFF_GRID', initial_soc=0.0, ac_load_w=200)
        ))
        sim.run_simulation(start_hour=0, duration_hours=4, time_step_minutes=15)
        perf = sim.performance_metrics
        assert sim.time_series_data['battery_energy_after'].max() == 0
        assert (sim.time_series_data['net_battery_flow'] < 0).all()
        assert perf['battery_discharged_wh'] == 0
        assert perf['battery_charged_wh'] == 0

    def test_full_battery_reports_no_charge(self):
        sim = SolarPlannerSimulation(PlannerConfig(
            simulation=SimulationConfig(mode='OFF_GRID', initial_soc=1.0, ac_load_w=0)
        ))
        sim.run_simulation(start_hour=10, duration_hours=4, time_step_minutes=15)
        assert sim.performance_metrics['battery_charged_wh'] == 0

    def test_charge_totals_match_stored_energy_change(self, sim):
        sim.run_simulation()
        perf = sim.performance_metrics
        data = sim.time_series_data
        change = data['battery_energy_after'].iloc[-1] - data['battery_level'].iloc[0]
        assert perf['battery_charged_wh'] - perf['battery_discharged_wh'] == pytest.approx(change)


class TestReporting:

    def test_export_before_run(self, sim, tmp_path):
        with pytest.raises(ValueError):
            sim.export_results(str(tmp_path))

    def test_export_csv(self, sim, tmp_path):
        sim.run_simulation(time_step_minutes=60)
        sim.export_results(str(tmp_path), format='csv')
        assert (tmp_path / 'time_series_data.csv').exists()
        assert (tmp_path / 'performance_metrics.csv').exists()

    def test_export_json(self, sim, tmp_path):
        sim.run_simulation(time_step_minutes=60)
        sim.export_results(str(tmp_path), format='json')
        payload = json.loads((tmp_path / 'simulation_results.json').read_text())
        assert len(payload['time_series']) == 24
        assert payload['planner_config']['simulation']['mode'] == 'HYBRID'

    def test_unknown_export_format(self, sim, tmp_path):
        sim.run_simulation(time_step_minutes=60)
        with pytest.raises(ValueError):
            sim.export_results(str(tmp_path), format='xml')

    def test_status_report_wire_warning(self):
        sim = make_sim(mode='OFF_GRID', num_panels=4, wire_gauge_mm2=1.5)
        report = sim.get_status_report()
        assert f"Wire Status: {WIRE_WARNING_MESSAGE}" in report
        assert "Grid Status: STANDBY" in report
        assert "12:00 PM" in report

    def test_status_report_grid_active(self, sim):
        report = sim.get_status_report()
        assert "Wire Status: OK" in report
        assert "Grid Status: ACTIVE" in report

    def test_summary_report(self, sim):
        assert "Run simulation first" in sim.get_summary_report()
        sim.run_simulation()
        assert "Energy Balance" in sim.get_summary_report()


def test_quick_evaluation_from_sun_angle():
    from solarplanner import quick_evaluation

    state = quick_evaluation(angle_deg=90, ac_load=200, soc=0.5, mode='OFF_GRID', num_panels=4)
    assert state.time_of_day == pytest.approx(12.0)
    assert state.generation == pytest.approx(1000.0)
    assert state.battery_percent == pytest.approx(50.0)
    assert not state.grid_active
