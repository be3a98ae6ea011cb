"""
Unit tests for operating modes and the per-mode routers.
"""

import pytest

from solarplanner.components.modes import (
    SystemMode, BusConditions, RoutingResult, route, route_off_grid, route_on_grid, route_hybrid,
)


def make_conditions(**overrides):
    values = dict(
        ac_load=200.0,
        inverter_input=250.0,
        generation=0.0,
        solar_dc_available=0.0,
        battery_percent=50.0,
        effective_intensity=0.0,
        max_charge_power=360.0,
        inverter_efficiency=0.8,
    )
    values.update(overrides)
    return BusConditions(**values)


class TestSystemModeParse:

    @pytest.mark.parametrize("value, expected", [
        ('HYBRID', SystemMode.HYBRID),
        ('hybrid', SystemMode.HYBRID),
        ('off-grid', SystemMode.OFF_GRID),
        (' On_Grid ', SystemMode.ON_GRID),
        (SystemMode.OFF_GRID, SystemMode.OFF_GRID),
    ])
    def test_accepts_names(self, value, expected):
        assert SystemMode.parse(value) is expected

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown system mode"):
            SystemMode.parse('islanded')


class TestOffGridRouter:

    def test_battery_carries_inverter(self):
        result = route_off_grid(make_conditions())
        assert result == RoutingResult(
            grid_active=False,
            inverter_draw_from_battery=250.0
        )


class TestOnGridRouter:

    def test_night_imports_full_load(self):
        result = route_on_grid(make_conditions())
        assert result.grid_active
        assert result.grid_import == 200.0
        assert result.grid_export == 0.0
        assert result.inverter_draw_from_battery == 0.0

    def test_surplus_is_exported(self):
        result = route_on_grid(make_conditions(generation=500.0))
        assert result.grid_export == pytest.approx(200.0)
        assert result.grid_import == 0.0

    def test_exact_cover_neither_imports_nor_exports(self):
        result = route_on_grid(make_conditions(generation=250.0))
        assert result.grid_import == 0.0
        assert result.grid_export == 0.0


class TestHybridRouter:

    def test_battery_above_reserve_supports_load(self):
        result = route_hybrid(make_conditions(battery_percent=30.1))
        assert result.grid_active
        assert result.grid_import == 0.0
        assert result.inverter_draw_from_battery == 250.0

    def test_solar_covering_load_keeps_grid_idle(self):
        result = route_hybrid(make_conditions(battery_percent=10, solar_dc_available=250.0))
        assert result.grid_import == 0.0
        assert result.inverter_draw_from_battery == 250.0

    def test_reserve_band_moves_load_to_grid(self):
        result = route_hybrid(make_conditions(battery_percent=30))
        assert result.grid_import == 200.0
        assert result.inverter_draw_from_battery == 0.0
        assert result.grid_charging_power == 0.0

    def test_emergency_charge_from_grid(self):
        result = route_hybrid(make_conditions(battery_percent=15))
        assert result.grid_charging_power == pytest.approx(450.0)
        assert result.grid_import == pytest.approx(650.0)

    def test_no_emergency_charge_in_sun(self):
        result = route_hybrid(make_conditions(battery_percent=15, effective_intensity=0.1))
        assert result.grid_charging_power == 0.0
        assert result.grid_import == 200.0


def test_route_dispatches_by_name():
    assert route('off_grid', make_conditions()) == route_off_grid(make_conditions())
