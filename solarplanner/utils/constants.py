"""
Physical constants and system parameters for SolarPlanner.
"""

# Wiring Constants
COPPER_RESISTIVITY = 0.0172                # Ω·mm²/m
FEET_TO_METERS = 0.3048
AMPACITY_PER_MM2 = 5.0                     # A per mm² (fixed heuristic)
STANDARD_WIRE_GAUGES_MM2 = (1.5, 2.5, 4, 6, 10, 16, 25)

# Fixed wire runs (only the solar leg is user-configurable)
DC_BUS_WIRE_LENGTH_FT = 5                  # controller<->battery and battery<->inverter
AC_LINE_VOLTAGE = 230                      # V
AC_LINE_LENGTH_FT = 20
AC_LINE_GAUGE_MM2 = 2.5

WIRE_OK_MESSAGE = "OK"
WIRE_WARNING_MESSAGE = "WARNING: Wire overheating!"

# Daylight window (hours)
SUN_WINDOW_START = 9.0
SUN_WINDOW_END = 16.0

# Hybrid routing thresholds
HYBRID_RESERVE_SOC_PERCENT = 30            # battery discharges only above this
HYBRID_EMERGENCY_SOC_PERCENT = 20          # grid charges the battery below this
LOW_SOLAR_INTENSITY = 0.1

# Sun control arc: 0° = 6 AM, 180° = 6 PM
SUN_ARC_START_HOUR = 6.0
SUN_ARC_HOURS = 12.0
SUN_ARC_DEGREES = 180.0

# Default system (2 x 250 W panels, 300 Ah / 24 V bank)
DEFAULT_SYSTEM = {
    'num_panels': 2,
    'panel_wattage': 250,
    'panel_voltage': 25,
    'wire_gauge_mm2': 10,
    'wire_length_ft': 20,
    'battery_capacity_ah': 300,
    'battery_voltage': 24,
    'battery_c_rating': 20,                # C20 for slower charging
    'inverter_efficiency': 0.8,
    'controller_efficiency': 0.9,
}

# Sizing Guidelines
SIZING_RULES = {
    'inverter_safety_factor': 1.25,        # peak load + 25%
    'battery_bank_voltage': 24,            # V
    'battery_depth_of_discharge': 0.5,     # lead-acid
    'days_of_autonomy': 1,
    'peak_sun_hours': 5,                   # h/day
    'system_efficiency': 0.7,
    'reference_panel_watts': 250,
    'unit_battery_voltage': 12,            # V
    'unit_battery_capacity_ah': 150,
}

DEFAULT_APPLIANCES = [
    {'name': 'Ceiling Fan', 'watts': 75, 'hours': 8},
    {'name': 'LED Bulb', 'watts': 10, 'hours': 6},
]

# Time Constants
SECONDS_PER_HOUR = 3600
HOURS_PER_DAY = 24
MINUTES_PER_HOUR = 60

# Simulation pacing
DEFAULT_ACCELERATION_FACTOR = 10.0         # simulated seconds per wall-clock second
DEFAULT_TICK_INTERVAL_SECONDS = 0.1
DEFAULT_TIME_STEP_MINUTES = 15
