"""
Structural topology classification for pedagogical feedback.

Looks only at how components are wired, not at their values, and labels
the circuit EMPTY, OPEN, SHORT, SERIES, PARALLEL or COMPLEX. Electrical
nodes come from the same ElectricalNetlist the DC engine uses.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence

import networkx as nx

from components.component import Component
from components.wire import Wire
from core.models import DEFAULT_SETTINGS, SimulationSettings
from core.netlist import ElectricalNetlist

logger = logging.getLogger(__name__)


class CircuitTopology(Enum):
    """Circuit topology classifications"""
    EMPTY = "EMPTY"
    OPEN = "OPEN"
    SHORT = "SHORT"
    SERIES = "SERIES"
    PARALLEL = "PARALLEL"
    COMPLEX = "COMPLEX"


VALID_TOPOLOGIES = frozenset({CircuitTopology.SERIES, CircuitTopology.PARALLEL, CircuitTopology.COMPLEX})

NO_POWER_FEEDBACK = "There is no power source. Add a battery."

FEEDBACK = {
    CircuitTopology.EMPTY: "The canvas is empty. Add some components to get started.",
    CircuitTopology.OPEN: "The circuit is not closed. Look for a loose wire or an open switch.",
    CircuitTopology.SHORT: "There is no load in the circuit, so the battery is short-circuited!",
    CircuitTopology.SERIES: "This is a series circuit.",
    CircuitTopology.PARALLEL: "This is a parallel circuit.",
    CircuitTopology.COMPLEX: "This is a mixed series-parallel circuit.",
}

TARGET_HINTS = {
    (CircuitTopology.SERIES, CircuitTopology.PARALLEL):
        "Try removing the extra branch so the current has only one path to follow.",
    (CircuitTopology.SERIES, CircuitTopology.COMPLEX):
        "Remove the side branches until a single loop is left.",
    (CircuitTopology.PARALLEL, CircuitTopology.SERIES):
        "Try connecting the loads side by side across the two battery terminals.",
    (CircuitTopology.PARALLEL, CircuitTopology.COMPLEX):
        "Connect every branch directly between the same two junctions.",
    (CircuitTopology.SERIES, CircuitTopology.OPEN):
        "Connect the components end to end into one closed loop.",
    (CircuitTopology.PARALLEL, CircuitTopology.OPEN):
        "Close the circuit first, then add a second branch across the battery.",
}

SUCCESS_PREFIX = "Well done! The connection is correct."


@dataclass
class TopologyResult:
    topology: CircuitTopology
    loops: int = 0
    branches: int = 0
    is_valid: bool = False
    feedback: str = ""
    target: Optional[CircuitTopology] = None

    @property
    def target_met(self) -> bool:
        return self.target is not None and self.target is self.topology

    def to_dict(self):
        return {
            "type": self.topology.value,
            "loops": self.loops,
            "branches": self.branches,
            "isValid": self.is_valid,
            "feedback": self.feedback,
        }


def build_feedback(topology: CircuitTopology, target: Optional[CircuitTopology] = None,
                   base: Optional[str] = None) -> str:
    """Templated feedback text keyed by (target, actual)."""
    text = base or FEEDBACK[topology]
    if target is None:
        return text
    if target is topology:
        return f"{SUCCESS_PREFIX} {text}"
    hint = TARGET_HINTS.get((target, topology))
    return f"{text} {hint}" if hint else text


class CircuitGraph:
    """
    Multigraph over electrical nodes with one edge per conducting component.
    Open switches and voltmeters carry no current and are left out.
    """

    def __init__(self, netlist: ElectricalNetlist):
        self.netlist = netlist
        self.graph = nx.MultiGraph()
        self._build_graph()

    def _build_graph(self):
        for comp in self.netlist.components:
            if not comp.conducts:
                continue
            node_a, node_b = self.netlist.terminal_nodes(comp)
            self.graph.add_edge(node_a, node_b, key=comp.id, component=comp)

    def node_degrees(self) -> Dict[int, int]:
        """Number of distinct conducting components touching each node."""
        degrees = {}
        for node_id in self.graph.nodes():
            components = {key for _, _, key in self.graph.edges(node_id, keys=True)}
            degrees[node_id] = len(components)
        return degrees

    def junctions(self):
        return [node_id for node_id, degree in self.node_degrees().items() if degree > 2]

    def is_connected(self) -> bool:
        return self.graph.number_of_nodes() > 0 and nx.is_connected(self.graph)

    def cycle_rank(self) -> int:
        """Independent loops: E - V + C."""
        return (self.graph.number_of_edges() - self.graph.number_of_nodes()
                + nx.number_connected_components(self.graph))

    def reduce_series_chains(self) -> nx.MultiGraph:
        """
        Prune dangling branches and contract series chains.
        What is left are the junction nodes and the branches between them.
        """
        reduced = nx.MultiGraph(self.graph)
        changed = True
        while changed:
            changed = False
            reduced.remove_edges_from(list(nx.selfloop_edges(reduced, keys=True)))

            leaves = [node for node, degree in reduced.degree() if degree <= 1]
            if leaves:
                reduced.remove_nodes_from(leaves)
                changed = True
                continue

            for node, degree in list(reduced.degree()):
                if degree == 2:
                    a, b = [neighbor for _, neighbor in reduced.edges(node)]
                    reduced.remove_node(node)
                    reduced.add_edge(a, b)
                    changed = True
                    break

        return reduced


class TopologyAnalyzer:
    """Classifies one circuit snapshot."""

    def __init__(self, components: Sequence[Component], wires: Sequence[Wire],
                 settings: Optional[SimulationSettings] = None):
        self.components = list(components)
        self.wires = list(wires)
        self.settings = settings or DEFAULT_SETTINGS

    def analyze(self, target: Optional[CircuitTopology] = None) -> TopologyResult:
        result = self._classify()
        result.target = target
        result.is_valid = result.topology in VALID_TOPOLOGIES
        base = result.feedback or None
        result.feedback = build_feedback(result.topology, target, base=base)
        logger.debug(f"Topology: {result.topology.value} (loops={result.loops}, branches={result.branches})")
        return result

    def _classify(self) -> TopologyResult:
        if not self.components:
            return TopologyResult(CircuitTopology.EMPTY)

        if not any(comp.type.is_voltage_source for comp in self.components):
            return TopologyResult(CircuitTopology.OPEN, feedback=NO_POWER_FEEDBACK)

        if not any(comp.type.is_load for comp in self.components):
            return TopologyResult(CircuitTopology.SHORT, loops=1)

        circuit_graph = CircuitGraph(ElectricalNetlist.build(self.components, self.wires))
        degrees = circuit_graph.node_degrees()
        junctions = circuit_graph.junctions()

        if not junctions:
            closed = all(degree >= 2 for degree in degrees.values()) and circuit_graph.is_connected()
            if closed:
                return TopologyResult(CircuitTopology.SERIES, loops=1, branches=0)
            return TopologyResult(CircuitTopology.OPEN)

        if self.settings.detect_complex:
            reduced = circuit_graph.reduce_series_chains()
            if reduced.number_of_nodes() > 2:
                return TopologyResult(CircuitTopology.COMPLEX, loops=circuit_graph.cycle_rank(),
                                      branches=len(junctions))

        return TopologyResult(CircuitTopology.PARALLEL, loops=len(junctions), branches=len(junctions))


def analyze_topology(components: Sequence[Component], wires: Sequence[Wire],
                     target: Optional[CircuitTopology] = None,
                     settings: Optional[SimulationSettings] = None) -> TopologyResult:
    """Classify the shape of a circuit snapshot."""
    return TopologyAnalyzer(components, wires, settings).analyze(target)
