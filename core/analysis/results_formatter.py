"""
Results Formatter - text reports and assistant snapshots of a solved circuit.
"""

import numpy as np


class ResultsFormatter:
    """
    Handles formatting and presentation of simulation results.
    """

    def __init__(self, result):
        self.result = result

    def get_results_description(self):
        """
        Generate a readable description of the DC results.
        """
        if self.result.error and not self.result.success:
            return f"DC Analysis Failed: {self.result.error}\n{self.result.message}\n"

        if not self.result.components:
            return "No simulation results available."

        description = "DC Simulation Results:\n"
        if self.result.error:
            description += f"Warning: {self.result.error}\n"
        description += self._format_node_voltages()
        description += self._format_component_readings()
        return description

    def _format_node_voltages(self):
        """Format node voltage results."""
        description = "Node Voltages:\n"

        if not self.result.node_voltages:
            return description + "  No node voltage data.\n\n"

        for node_id in sorted(self.result.node_voltages.keys()):
            voltage = self.result.node_voltages[node_id]
            if self._is_invalid_value(voltage):
                continue
            ground_status = " (Ground)" if node_id == 0 else ""
            description += f"  Node {node_id}{ground_status}: {self._format_value_with_unit(voltage, 'V')}\n"

        return description + "\n"

    def _format_component_readings(self):
        """Format current and voltage drop of every component."""
        description = "Component Readings:\n"

        for comp in self.result.components:
            reading = self.result.reading(comp.id)
            if self._is_invalid_value(reading.current):
                continue
            arrow = "→" if reading.current >= 0 else "←"
            name = comp.label or comp.id
            current = self._format_value_with_unit(abs(reading.current), 'A')
            drop = self._format_value_with_unit(reading.voltage_drop, 'V')
            description += f"  {name} ({comp.type.value}): {current} {arrow}, drop {drop}\n"

        return description

    def _is_invalid_value(self, value):
        """Check if value is invalid (None, NaN, or infinite)."""
        if value is None:
            return True
        if isinstance(value, float) and (np.isnan(value) or np.isinf(value)):
            return True
        return False

    def _format_value_with_unit(self, value, unit):
        """Format numerical value with appropriate SI prefix and unit."""
        abs_val = abs(value)

        if abs_val == 0:
            return f"0 {unit}"
        elif abs_val >= 1:
            return f"{value:.6g} {unit}"
        elif abs_val >= 1e-3:
            return f"{value*1e3:.6g} m{unit}"
        elif abs_val >= 1e-6:
            return f"{value*1e6:.6g} μ{unit}"
        elif abs_val >= 1e-9:
            return f"{value*1e9:.6g} n{unit}"
        else:
            return f"{value:.2e} {unit}"

    def get_summary_stats(self):
        """Get summary statistics of the simulation results."""
        currents = [abs(r.current) for r in self.result.readings.values()]
        voltages = list(self.result.node_voltages.values())
        return {
            'num_nodes': len(self.result.node_voltages),
            'num_components': len(self.result.components),
            'max_voltage': max(voltages) if voltages else 0,
            'min_voltage': min(voltages) if voltages else 0,
            'max_current': max(currents) if currents else 0,
        }


def get_circuit_summary(components, wires, error=None):
    """
    JSON-ready snapshot handed to the chat assistant.
    It only describes the circuit; nothing here feeds back into the solver.
    """
    return {
        "components": [
            {
                "type": comp.type.value,
                "value": comp.value,
                "label": comp.label,
                "state": "OPEN" if comp.is_open else "CLOSED",
            }
            for comp in components
        ],
        "wires": len(wires),
        "error": error,
    }
