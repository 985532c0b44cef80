"""
Circuit simulator facade.

Runs the DC solver and the topology classifier on a snapshot of
components and wires. Calls are independent: nothing is cached between
them, so the same simulator can serve several threads as long as each
passes its own snapshot.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from components.component import Component
from components.wire import Wire
from config import ERROR_ABNORMAL_CIRCUIT
from core.analysis.dc_analysis import DCAnalysisEngine
from core.models import AnalysisResults, Reading, SimulationSettings
from core.netlist import ElectricalNetlist
from core.topology import CircuitTopology, TopologyResult, analyze_topology

logger = logging.getLogger(__name__)


@dataclass
class CircuitAnalysis:
    """Solver and classifier output for the same snapshot"""
    dc: AnalysisResults
    topology: TopologyResult


class CircuitSimulator:
    """
    Entry point used by the rendering and assistant layers.
    """

    def __init__(self, settings: Optional[SimulationSettings] = None):
        self.settings = settings or SimulationSettings()

    def run_dc_analysis(self, components: Sequence[Component], wires: Sequence[Wire]) -> AnalysisResults:
        """Solve the circuit; failures come back inside the result, never as exceptions."""
        logger.info(f"Starting DC analysis of {len(components)} components and {len(wires)} wires...")

        try:
            netlist = ElectricalNetlist.build(components, wires)
            result = DCAnalysisEngine(netlist, self.settings).run_analysis()
        except Exception as e:
            logger.error(f"DC analysis crashed: {e}")
            result = AnalysisResults(components=list(components))
            result.success = False
            result.error = ERROR_ABNORMAL_CIRCUIT
            result.message = f"Analysis crashed: {str(e)}"
            result.readings = {comp.id: Reading() for comp in components}
            return result

        if result.success:
            logger.info(f"DC analysis completed: {result.message}")
        return result

    def classify(self, components: Sequence[Component], wires: Sequence[Wire],
                 target: Optional[CircuitTopology] = None) -> TopologyResult:
        return analyze_topology(components, wires, target=target, settings=self.settings)

    def analyze(self, components: Sequence[Component], wires: Sequence[Wire],
                target: Optional[CircuitTopology] = None) -> CircuitAnalysis:
        return CircuitAnalysis(
            dc=self.run_dc_analysis(components, wires),
            topology=self.classify(components, wires, target=target),
        )


def solve_circuit(components: Sequence[Component], wires: Sequence[Wire],
                  settings: Optional[SimulationSettings] = None) -> AnalysisResults:
    """Convenience wrapper around CircuitSimulator.run_dc_analysis()."""
    return CircuitSimulator(settings).run_dc_analysis(components, wires)
