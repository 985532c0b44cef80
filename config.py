"""
Tunable constants for the circuit lab core.

The fixed resistances below are linear approximations chosen for an
educational simulator, not physical law. Every value here can be
overridden per call through core.models.SimulationSettings.
"""

# Effective resistance model (ohms)
RESISTOR_MIN_RESISTANCE = 0.001
RHEOSTAT_MIN_RESISTANCE = 0.1
BULB_RESISTANCE = 10.0
AMMETER_RESISTANCE = 0.01
SWITCH_CLOSED_RESISTANCE = 0.001

# Solver
PIVOT_EPSILON = 1e-9
CLEANUP_TOLERANCE = 1e-12
SHORT_CIRCUIT_CURRENT_LIMIT = 15.0  # amps

# User-facing error strings returned by the solver
ERROR_ABNORMAL_CIRCUIT = "short or abnormal circuit"
WARNING_SHORT_CIRCUIT = "short-circuit warning: current too large"

# Defaults for newly placed components
DEFAULT_VALUES = {
    "BATTERY": 12.0,
    "RESISTOR": 10.0,
    "RHEOSTAT": 10.0,
    "BULB": 0.0,
    "SWITCH": 0.0,
    "AMMETER": 0.0,
    "VOLTMETER": 0.0,
}

LABEL_PREFIXES = {
    "BATTERY": "U",
    "RESISTOR": "R",
    "RHEOSTAT": "RP",
    "BULB": "L",
    "SWITCH": "S",
    "AMMETER": "A",
    "VOLTMETER": "V",
}

PIN_COUNT = 2
