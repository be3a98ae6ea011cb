"""
Power-flow engine for SolarPlanner.

This module provides ``evaluate``, a pure function that derives every
electrical quantity of the installation for one instant, and the ordered
post-routing pipeline it is built from.

Flow of one evaluation:

    generation -> solar wire -> controller -> mode router
               -> controller output -> net battery flow
               -> full-battery clamp -> grid netting -> wire segments

The engine never mutates the battery; it reports ``net_battery_flow`` and
leaves integration to ``BatteryEnergyIntegrator``. A validated SystemConfig
is assumed: zero gauges, voltages or C-ratings produce non-finite results
rather than errors.
"""

from dataclasses import dataclass, asdict, replace
from typing import Dict, Any, Union

from .components.modes import SystemMode, BusConditions, RoutingResult, route
from .components.wiring import WireSegmentStats, WireAnalysis, calculate_wire_segment, analyze_wire
from .components.solar import SolarArray
from .components.controller import ChargeController
from .components.battery import BatteryBank
from .components.inverter import Inverter
from .utils.constants import DC_BUS_WIRE_LENGTH_FT
from .utils.helpers import clamp


@dataclass(frozen=True)
class WireStats:
    """Results for the four physical runs."""
    solar_to_controller: WireSegmentStats
    controller_to_battery: WireSegmentStats
    battery_to_inverter: WireSegmentStats
    inverter_to_load: WireSegmentStats

    @property
    def all_safe(self) -> bool:
        return all(
            segment.is_safe for segment in (
                self.solar_to_controller, self.controller_to_battery,
                self.battery_to_inverter, self.inverter_to_load
            )
        )


@dataclass(frozen=True)
class PowerFlow:
    """
    Intermediate power accounting passed between pipeline stages.

    ``power_to_battery`` is the controller's output onto the DC bus.
    """
    grid_active: bool
    grid_import: float
    grid_export: float
    inverter_draw_from_battery: float
    grid_charging_power: float
    controller_demand: float
    power_to_battery: float = 0.0
    wasted_power: float = 0.0
    net_battery_flow: float = 0.0

    @classmethod
    def from_routing(cls, routing: RoutingResult, controller_demand: float) -> 'PowerFlow':
        return cls(
            grid_active=routing.grid_active,
            grid_import=routing.grid_import,
            grid_export=routing.grid_export,
            inverter_draw_from_battery=routing.inverter_draw_from_battery,
            grid_charging_power=routing.grid_charging_power,
            controller_demand=controller_demand
        )


@dataclass(frozen=True)
class SystemState:
    """Complete instantaneous snapshot returned by ``evaluate``."""
    sun_intensity: float
    generation: float
    panel_voltage: float
    wire_analysis: WireAnalysis
    wire_stats: WireStats
    power_at_controller: float
    power_to_battery: float
    battery_level: float
    battery_percent: float
    is_battery_full: bool
    ac_load: float
    inverter_input: float
    net_battery_flow: float
    grid_active: bool
    grid_import: float
    grid_export: float
    wasted_power: float
    batt_to_inv_power: float
    mode: SystemMode
    time_of_day: float

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the snapshot into one row of scalars."""
        row = {
            key: value for key, value in asdict(self).items()
            if key not in ('wire_analysis', 'wire_stats')
        }
        row['mode'] = self.mode.value
        row['wire_message'] = self.wire_analysis.message
        row['wire_voltage_drop_percent'] = self.wire_analysis.voltage_drop_percent
        for name, segment in asdict(self.wire_stats).items():
            for field_name, value in segment.items():
                row[f'{name}_{field_name}'] = value
        return row


# ---------------------------------------------------------------------------
# Post-routing pipeline. Each stage is total and returns a new PowerFlow.
# ---------------------------------------------------------------------------

def apply_controller_output(flow: PowerFlow, controller_result: Dict[str, float],
                            mode: SystemMode, inverter_efficiency: float) -> PowerFlow:
    """
    Decide what the controller puts on the DC bus and where excess solar goes.

    HYBRID outputs all available power and exports the excess through the
    inverter. OFF_GRID caps output at demand and wastes the rest. ON_GRID
    never charges from solar.
    """
    if mode is SystemMode.ON_GRID:
        return replace(flow, power_to_battery=0.0, wasted_power=0.0)

    excess = controller_result['excess_power']
    if excess <= 0:
        return replace(flow, power_to_battery=controller_result['available_power'], wasted_power=0.0)

    if mode is SystemMode.HYBRID:
        return replace(
            flow,
            power_to_battery=controller_result['available_power'],
            wasted_power=0.0,
            inverter_draw_from_battery=flow.inverter_draw_from_battery + excess,
            grid_export=excess * inverter_efficiency,
            grid_active=True
        )

    return replace(
        flow,
        power_to_battery=controller_result['total_demand'],
        wasted_power=excess
    )


def compute_net_battery_flow(flow: PowerFlow, mode: SystemMode,
                             inverter_efficiency: float) -> PowerFlow:
    """Battery inflow (controller output plus grid charge on the DC side) less inverter draw."""
    if mode is SystemMode.ON_GRID:
        return replace(flow, net_battery_flow=0.0)

    grid_charge_dc = flow.grid_charging_power * inverter_efficiency
    net = (flow.power_to_battery + grid_charge_dc) - flow.inverter_draw_from_battery
    return replace(flow, net_battery_flow=net)


def apply_full_battery_clamp(flow: PowerFlow, is_full: bool, mode: SystemMode,
                             inverter_efficiency: float) -> PowerFlow:
    """
    Stop charging a full battery.

    The surplus is exported in HYBRID mode and wasted otherwise; either way
    the net flow ends at exactly zero.
    """
    if not is_full or flow.net_battery_flow <= 0:
        return flow

    excess_charge = flow.net_battery_flow
    if mode is SystemMode.HYBRID:
        return replace(
            flow,
            inverter_draw_from_battery=flow.inverter_draw_from_battery + excess_charge,
            grid_export=flow.grid_export + excess_charge * inverter_efficiency,
            net_battery_flow=0.0
        )

    return replace(
        flow,
        power_to_battery=flow.power_to_battery - excess_charge,
        wasted_power=flow.wasted_power + excess_charge,
        net_battery_flow=0.0
    )


def apply_grid_netting(flow: PowerFlow) -> PowerFlow:
    """A single-phase tie cannot import and export at once; net them."""
    if flow.grid_import > 0 and flow.grid_export > 0:
        if flow.grid_import >= flow.grid_export:
            return replace(flow, grid_import=flow.grid_import - flow.grid_export, grid_export=0.0)
        return replace(flow, grid_export=flow.grid_export - flow.grid_import, grid_import=0.0)
    return flow


def evaluate(sun_intensity: float,
             ac_load: float,
             battery_energy_wh: float,
             config,
             time_of_day: float,
             mode: Union[SystemMode, str] = SystemMode.HYBRID) -> SystemState:
    """
    Calculate the full system state for one instant.

    Args:
        sun_intensity: Sun intensity (0-1), clamped
        ac_load: AC load in W, negative values treated as 0
        battery_energy_wh: Stored battery energy, clamped to [0, capacity]
        config: Validated SystemConfig
        time_of_day: Hour of day (0-24)
        mode: SystemMode or its name

    Returns:
        Immutable SystemState snapshot
    """
    mode = SystemMode.parse(mode)
    sun_intensity = clamp(sun_intensity, 0.0, 1.0)
    ac_load = max(0.0, ac_load)

    solar = SolarArray(config)
    controller = ChargeController(config)
    battery = BatteryBank(config)
    inverter = Inverter(config)

    # 1. Generation and the solar leg
    solar_output = solar.calculate_power_output(sun_intensity, time_of_day)
    generation = solar_output['generation_w']
    power_at_controller = solar_output['power_at_controller_w']
    solar_wire = solar_output['wire']

    # 2. Battery state and inverter demand
    battery_level = battery.clamp_energy(battery_energy_wh)
    battery_state = battery.calculate_state(battery_level)
    inverter_input = inverter.dc_demand(ac_load)

    # 3. Mode routing
    conditions = BusConditions(
        ac_load=ac_load,
        inverter_input=inverter_input,
        generation=generation,
        solar_dc_available=controller.available_power(power_at_controller),
        battery_percent=battery_state['battery_percent'],
        effective_intensity=solar_output['effective_intensity'],
        max_charge_power=controller.max_charge_power,
        inverter_efficiency=inverter.efficiency
    )
    routing = route(mode, conditions)
    demand = controller.total_demand(routing.inverter_draw_from_battery, mode)
    flow = PowerFlow.from_routing(routing, demand)

    # 4. Shared post-processing, always in this order
    controller_result = controller.calculate_output(power_at_controller, flow.controller_demand)
    flow = apply_controller_output(flow, controller_result, mode, inverter.efficiency)
    flow = compute_net_battery_flow(flow, mode, inverter.efficiency)
    # The controller leg is sized before a full battery trims the output
    controller_output = flow.power_to_battery
    flow = apply_full_battery_clamp(flow, battery_state['is_full'], mode, inverter.efficiency)
    flow = apply_grid_netting(flow)

    # 5. Wire segments for each transfer
    batt_to_inv_power = (
        flow.grid_charging_power if flow.grid_charging_power > 0
        else flow.inverter_draw_from_battery
    )
    wire_stats = WireStats(
        solar_to_controller=solar_wire,
        controller_to_battery=calculate_wire_segment(
            controller_output, config.battery_voltage,
            DC_BUS_WIRE_LENGTH_FT, config.wire_gauge_mm2
        ),
        battery_to_inverter=calculate_wire_segment(
            batt_to_inv_power, config.battery_voltage,
            DC_BUS_WIRE_LENGTH_FT, config.wire_gauge_mm2
        ),
        inverter_to_load=inverter.load_wire(ac_load)
    )
    wire_analysis = analyze_wire(
        solar_wire, config.wire_length_ft, config.wire_gauge_mm2, config.panel_voltage
    )

    return SystemState(
        sun_intensity=solar_output['effective_intensity'],
        generation=generation,
        panel_voltage=config.panel_voltage,
        wire_analysis=wire_analysis,
        wire_stats=wire_stats,
        power_at_controller=power_at_controller,
        power_to_battery=flow.power_to_battery,
        battery_level=battery_level,
        battery_percent=battery_state['battery_percent'],
        is_battery_full=battery_state['is_full'],
        ac_load=ac_load,
        inverter_input=inverter_input,
        net_battery_flow=flow.net_battery_flow,
        grid_active=flow.grid_active,
        grid_import=flow.grid_import,
        grid_export=flow.grid_export,
        wasted_power=flow.wasted_power,
        batt_to_inv_power=batt_to_inv_power,
        mode=mode,
        time_of_day=time_of_day
    )
