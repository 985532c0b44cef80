"""
Current Calculator - recovers per-component readings from node voltages.

Uses the same effective resistance table as MNA assembly, so a part
that was stamped with conductance 1/R reports V/R here.
"""

import math

from core.models import DEFAULT_SETTINGS, Reading, effective_resistance


class CurrentCalculator:
    """
    Handles calculation of component currents and voltage drops from node voltages.
    """

    def __init__(self, netlist, node_voltages, source_currents=None, settings=None):
        self.netlist = netlist
        self.node_voltages = node_voltages
        self.source_currents = source_currents or {}
        self.settings = settings or DEFAULT_SETTINGS

    def calculate_all_currents(self):
        """
        Calculate the reading of every component.
        Returns dict of component id -> Reading.
        """
        return {component.id: self.calculate_reading(component) for component in self.netlist.components}

    def calculate_reading(self, component):
        node_a, node_b = self.netlist.terminal_nodes(component)
        if node_a is None or node_b is None:
            return Reading()

        voltage_drop = self._voltage(node_a) - self._voltage(node_b)

        if component.type.is_voltage_source:
            return Reading(current=self.source_currents.get(component.id, 0.0), voltage_drop=voltage_drop)

        resistance = effective_resistance(component, self.settings)
        if math.isinf(resistance):
            return Reading(current=0.0, voltage_drop=voltage_drop)

        return Reading(current=voltage_drop / resistance, voltage_drop=voltage_drop)

    def _voltage(self, node_id):
        return self.node_voltages.get(node_id, 0.0)
