"""
Unit tests for the appliance sizing calculator.
"""

import pytest

from solarplanner.data.sizing import SizingCalculator


@pytest.fixture
def calculator():
    return SizingCalculator()


class TestAppliances:

    def test_default_list(self, calculator):
        names = [a.name for a in calculator.appliances]
        assert names == ['Ceiling Fan', 'LED Bulb']
        assert calculator.total_watts == 85
        assert calculator.total_wh_per_day == 660

    def test_add_and_remove(self, calculator):
        appliance = calculator.add_appliance('Television', 100, 4)
        assert appliance.id == 3
        assert appliance.wh_per_day == 400
        assert calculator.remove_appliance(appliance.id)
        assert not calculator.remove_appliance(appliance.id)
        assert calculator.total_watts == 85

    @pytest.mark.parametrize("name, watts, hours", [
        ('', 100, 1),
        ('   ', 100, 1),
        ('Pump', 0, 1),
        ('Pump', 100, -1),
    ])
    def test_invalid_appliance(self, calculator, name, watts, hours):
        with pytest.raises(ValueError):
            calculator.add_appliance(name, watts, hours)

    def test_dataframe(self, calculator):
        df = calculator.to_dataframe()
        assert list(df.columns) == ['name', 'watts', 'hours', 'wh_per_day']
        assert df.loc[1, 'wh_per_day'] == 600


class TestRecommendations:

    def test_default_recommendations(self, calculator):
        rec = calculator.calculate_recommendations()
        assert rec['daily_energy_wh'] == 660
        assert rec['peak_load_w'] == 85
        assert rec['inverter_va'] == 107
        assert rec['battery_ah'] == 55
        assert rec['battery_voltage'] == 24
        assert rec['panel_watts'] == 189
        assert rec['panel_count'] == 1
        assert rec['num_unit_batteries'] == 1

    def test_larger_household(self):
        calculator = SizingCalculator(appliances=[
            {'name': 'Refrigerator', 'watts': 150, 'hours': 10},
            {'name': 'Water Pump', 'watts': 750, 'hours': 1},
        ])
        rec = calculator.calculate_recommendations()
        # 2250 Wh/day
        assert rec['inverter_va'] == 1125
        assert rec['battery_ah'] == 188
        assert rec['panel_watts'] == 643
        assert rec['panel_count'] == 3
        assert rec['num_unit_batteries'] == 3

    def test_rule_override(self):
        calculator = SizingCalculator(rules={'days_of_autonomy': 2})
        assert calculator.calculate_recommendations()['battery_ah'] == 110

    def test_empty_list(self):
        calculator = SizingCalculator(appliances=[])
        rec = calculator.calculate_recommendations()
        assert rec['inverter_va'] == 0
        assert rec['panel_count'] == 0
        assert calculator.get_report() == "No appliances listed."
        assert calculator.to_dataframe().empty

    def test_report(self, calculator):
        report = calculator.get_report()
        assert 'Daily Energy: 660 Wh' in report
        assert 'Inverter Size: 107 VA' in report
        assert 'Battery Bank (24V): 55 Ah' in report
