"""
DC Analysis Engine - Modified Nodal Analysis for the circuit lab.

Builds the conductance matrix and right-hand side from an
ElectricalNetlist, solves it and hands the solution to the
CurrentCalculator. Failures are reported through AnalysisResults,
never raised to the caller.
"""

import logging
import math

import numpy as np

from config import ERROR_ABNORMAL_CIRCUIT, WARNING_SHORT_CIRCUIT
from core.analysis.current_calculator import CurrentCalculator
from core.analysis.linear_solver import SingularMatrixError, solve_linear_system
from core.models import DEFAULT_SETTINGS, AnalysisResults, Reading, effective_resistance

logger = logging.getLogger(__name__)


class MNASystem:
    """Assembled G x = B system plus the index bookkeeping needed to read x back."""

    def __init__(self, node_count, voltage_sources):
        self.num_unknown_nodes = max(node_count - 1, 0)
        self.voltage_sources = list(voltage_sources)
        self.num_variables = self.num_unknown_nodes + len(self.voltage_sources)
        self.voltage_source_to_matrix_index = {
            vs.id: self.num_unknown_nodes + i for i, vs in enumerate(self.voltage_sources)
        }
        self.G = np.zeros((self.num_variables, self.num_variables))
        self.B = np.zeros(self.num_variables)

    @staticmethod
    def node_index(node_id):
        """Matrix row of a node; ground (node 0) has no row."""
        if node_id is None or node_id == 0:
            return -1
        return node_id - 1

    def add_conductance(self, node_a, node_b, conductance):
        """Apply conductance stamp between two nodes."""
        index_a = self.node_index(node_a)
        index_b = self.node_index(node_b)

        if index_a >= 0:
            self.G[index_a, index_a] += conductance
        if index_b >= 0:
            self.G[index_b, index_b] += conductance
        if index_a >= 0 and index_b >= 0:
            self.G[index_a, index_b] -= conductance
            self.G[index_b, index_a] -= conductance

    def add_voltage_source(self, component_id, node_pos, node_neg, voltage):
        """Apply voltage source stamp enforcing V(pos) - V(neg) = voltage."""
        vs_index = self.voltage_source_to_matrix_index[component_id]
        index_pos = self.node_index(node_pos)
        index_neg = self.node_index(node_neg)

        if index_pos >= 0:
            self.G[vs_index, index_pos] += 1
            self.G[index_pos, vs_index] += 1

        if index_neg >= 0:
            self.G[vs_index, index_neg] -= 1
            self.G[index_neg, vs_index] -= 1

        self.B[vs_index] = voltage


def build_mna_system(netlist, settings=DEFAULT_SETTINGS):
    """Stamp every component of the netlist into a fresh MNASystem."""
    system = MNASystem(netlist.node_count, netlist.voltage_sources)

    for component in netlist.components:
        if component.type.is_voltage_source:
            continue

        resistance = effective_resistance(component, settings)
        if math.isinf(resistance):
            continue

        node_a, node_b = netlist.terminal_nodes(component)
        if node_a is None or node_b is None:
            continue
        system.add_conductance(node_a, node_b, 1.0 / resistance)

    for source in system.voltage_sources:
        node_pos, node_neg = netlist.terminal_nodes(source)
        system.add_voltage_source(source.id, node_pos, node_neg, source.value)

    return system


class DCAnalysisEngine:
    """
    Modular DC analysis engine for circuit simulation.
    One engine instance analyzes one netlist snapshot.
    """

    def __init__(self, netlist, settings=None):
        self.netlist = netlist
        self.settings = settings or DEFAULT_SETTINGS

    def run_analysis(self):
        """
        Run DC analysis.
        Returns AnalysisResults; singular systems come back with success=False.
        """
        result = AnalysisResults(components=list(self.netlist.components))

        system = build_mna_system(self.netlist, self.settings)
        if self.netlist.node_count == 0 or system.num_variables == 0:
            result.success = True
            result.message = "Empty circuit"
            result.readings = {comp.id: Reading() for comp in self.netlist.components}
            if self.netlist.node_count:
                result.node_voltages = {0: 0.0}
            return result

        try:
            solution = solve_linear_system(system.G, system.B, self.settings)
        except SingularMatrixError as e:
            logger.warning(f"DC analysis failed: {e}")
            result.success = False
            result.error = ERROR_ABNORMAL_CIRCUIT
            result.message = self._generate_singular_matrix_hint()
            result.readings = {comp.id: Reading() for comp in self.netlist.components}
            return result

        self._extract_dc_results(system, solution, result)
        self._post_process_results(result)

        result.max_current = max((abs(r.current) for r in result.readings.values()), default=0.0)
        if result.max_current > self.settings.max_current:
            logger.warning(f"Current of {result.max_current:.6g} A exceeds the "
                           f"{self.settings.max_current:g} A short-circuit limit")
            result.error = WARNING_SHORT_CIRCUIT

        result.success = True
        result.message = "DC Analysis completed successfully."
        return result

    def _extract_dc_results(self, system, solution, result):
        """Read node voltages and branch currents back out of the solution vector."""
        result.node_voltages[0] = 0.0
        for node_id in self.netlist.nodes:
            index = system.node_index(node_id)
            if index >= 0:
                result.node_voltages[node_id] = float(solution[index])

        # The MNA unknown flows into the positive terminal; report it leaving +
        source_currents = {
            comp_id: -float(solution[index])
            for comp_id, index in system.voltage_source_to_matrix_index.items()
        }

        calculator = CurrentCalculator(self.netlist, result.node_voltages, source_currents, self.settings)
        result.readings = calculator.calculate_all_currents()

    def _post_process_results(self, result):
        """Post-process results to clean up small numerical errors."""
        tolerance = self.settings.tolerance

        for k, v in list(result.node_voltages.items()):
            if abs(v) < tolerance:
                result.node_voltages[k] = 0.0

        for k, reading in list(result.readings.items()):
            current = 0.0 if abs(reading.current) < tolerance else reading.current
            voltage_drop = 0.0 if abs(reading.voltage_drop) < tolerance else reading.voltage_drop
            result.readings[k] = Reading(current=current, voltage_drop=voltage_drop)

    def _generate_singular_matrix_hint(self):
        """Generate helpful message for singular matrix errors."""
        hint = "Simulation failed: circuit matrix is singular. This usually means:\n"
        hint += "- Some components are left with a terminal that is not wired to anything.\n"
        hint += "- A battery is shorted directly by a wire, or two batteries fight over the same nodes.\n"
        hint += "- Part of the circuit forms an island with no path back to the battery."

        unconnected = [
            comp for comp in self.netlist.components
            if all(len(self.netlist.nodes[self.netlist.node_of(comp.id, pin)].pins) == 1
                   for pin in (0, 1))
        ]
        if unconnected:
            hint += "\nPotential unconnected components:\n"
            for comp in unconnected:
                hint += f"- {comp.label or comp.id}\n"

        return hint
