"""
Unit tests for configuration classes and file round trips.
"""

import dataclasses

import pytest
import yaml

from solarplanner.components.modes import SystemMode
from solarplanner.utils.config import (
    SystemConfig, SimulationConfig, PlannerConfig,
    create_default_config, create_off_grid_config, create_grid_tied_config,
)


class TestSystemConfig:

    def test_defaults(self, config):
        assert config.num_panels == 2
        assert config.panel_wattage == 250
        assert config.wire_gauge_mm2 == 10
        assert config.battery_voltage == 24

    def test_derived_values(self, config):
        assert config.array_capacity_w == 500
        assert config.max_charge_current_a == pytest.approx(15.0)
        assert config.max_charge_power_w == pytest.approx(360.0)
        assert config.battery_max_wh == 7200

    @pytest.mark.parametrize("field_name, value", [
        ('num_panels', 0),
        ('panel_wattage', -1),
        ('panel_voltage', 0),
        ('wire_gauge_mm2', 0),
        ('wire_length_ft', -5),
        ('battery_capacity_ah', 0),
        ('battery_voltage', 0),
        ('battery_c_rating', 0),
        ('inverter_efficiency', 0),
        ('controller_efficiency', 1.2),
    ])
    def test_invalid_values_rejected(self, field_name, value):
        with pytest.raises(ValueError):
            SystemConfig(**{field_name: value})

    def test_zero_length_wire_allowed(self):
        assert SystemConfig(wire_length_ft=0).wire_length_ft == 0

    def test_with_changes_returns_new_snapshot(self, config):
        updated = config.with_changes(num_panels=4)
        assert updated.num_panels == 4
        assert config.num_panels == 2

    def test_with_changes_validates(self, config):
        with pytest.raises(ValueError):
            config.with_changes(battery_voltage=-12)

    def test_immutable(self, config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.num_panels = 10


class TestSimulationConfig:

    def test_mode_parsed_from_string(self):
        assert SimulationConfig(mode='off-grid').mode is SystemMode.OFF_GRID

    @pytest.mark.parametrize("kwargs", [
        {'mode': 'island'},
        {'initial_soc': 1.2},
        {'ac_load_w': -1},
        {'time_of_day': 25},
        {'sun_intensity': 2},
        {'acceleration_factor': 0},
        {'time_step_minutes': 0},
        {'time_step_minutes': 90},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            SimulationConfig(**kwargs)


class TestPlannerConfig:

    def test_from_dict_partial(self):
        config = PlannerConfig.from_dict({'system': {'num_panels': 3}, 'simulation': {'mode': 'ON_GRID'}})
        assert config.system.num_panels == 3
        assert config.system.panel_wattage == 250
        assert config.simulation.mode is SystemMode.ON_GRID

    def test_to_dict_stores_mode_name(self):
        assert create_off_grid_config().to_dict()['simulation']['mode'] == 'OFF_GRID'

    def test_yaml_round_trip(self, tmp_path):
        path = tmp_path / 'planner.yaml'
        original = create_grid_tied_config()
        original.to_yaml(str(path))

        assert yaml.safe_load(path.read_text())['system']['num_panels'] == 6
        loaded = PlannerConfig.from_yaml(str(path))
        assert loaded.system == original.system
        assert loaded.simulation == original.simulation

    def test_json_round_trip(self, tmp_path):
        path = tmp_path / 'planner.json'
        original = PlannerConfig(simulation=SimulationConfig(initial_soc=0.8, ac_load_w=350))
        original.to_json(str(path))
        assert PlannerConfig.from_json(str(path)).to_dict() == original.to_dict()

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text('')
        assert PlannerConfig.from_yaml(str(path)).to_dict() == create_default_config().to_dict()

    def test_summary(self):
        summary = create_default_config().summary()
        assert '2 × 250W @ 25V' in summary
        assert '7200 Wh' in summary
        assert 'HYBRID' in summary
