"""
Snapshot validation for circuits coming from outside the editor.

The solver already ignores wires it cannot use, but layouts produced by
the image-to-layout service should be checked and cleaned before they
are handed over, so the user sees why a wire disappeared.
"""

import logging
from typing import List, Sequence, Tuple

import networkx as nx

from components.component import Component, ComponentType
from components.wire import Wire
from config import PIN_COUNT
from core.netlist import ElectricalNetlist
from core.topology import CircuitGraph

logger = logging.getLogger(__name__)


class CircuitValidator:
    """Circuit validation and error detection"""

    def __init__(self, components: Sequence[Component], wires: Sequence[Wire]):
        self.components = list(components)
        self.wires = list(wires)
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_circuit(self) -> Tuple[List[str], List[str]]:
        """Run every check; returns (errors, warnings)."""
        self.errors.clear()
        self.warnings.clear()

        self._validate_components()
        self._validate_wires()
        self._validate_connectivity()

        return self.errors, self.warnings

    def _validate_components(self):
        """Validate individual components"""
        seen = set()
        for comp in self.components:
            if comp.id in seen:
                self.errors.append(f"Duplicate component id {comp.id}")
            seen.add(comp.id)

            if comp.type in (ComponentType.RESISTOR, ComponentType.RHEOSTAT) and comp.value < 0:
                self.errors.append(f"{comp.label or comp.id} has negative resistance: {comp.value}")
            elif comp.type is ComponentType.BATTERY and comp.value < 0:
                self.warnings.append(f"{comp.label or comp.id} has negative voltage: {comp.value}")

    def _validate_wires(self):
        """Dangling references, bad pins, self-loops and duplicates"""
        component_ids = {comp.id for comp in self.components}
        pairs = set()
        for wire in self.wires:
            problem = wire_problem(wire, component_ids, pairs)
            if problem:
                self.errors.append(problem)
            pairs.add(wire.pin_pair)

    def _validate_connectivity(self):
        """Validate circuit connectivity"""
        if not self.components:
            return

        wired_pins = set()
        for wire in self.wires:
            wired_pins.add(wire.source)
            wired_pins.add(wire.target)

        for comp in self.components:
            connected = sum(1 for pin in comp.pins if pin in wired_pins)
            if connected == 0:
                self.warnings.append(f"Component {comp.label or comp.id} is not connected")
            elif connected < PIN_COUNT:
                self.warnings.append(f"Component {comp.label or comp.id} has unconnected pins")

        graph = CircuitGraph(ElectricalNetlist.build(self.components, self.wires)).graph
        if graph.number_of_nodes():
            islands = nx.number_connected_components(graph)
            if islands > 1:
                self.warnings.append(f"Circuit has {islands} disconnected subgraphs")


def wire_problem(wire: Wire, component_ids, seen_pairs=()) -> str:
    """Describe why the core would ignore or the editor would reject a wire, or ''."""
    for component_id, pin_index in (wire.source, wire.target):
        if component_id not in component_ids:
            return f"Wire {wire.id} references unknown component {component_id}"
        if pin_index not in range(PIN_COUNT):
            return f"Wire {wire.id} references invalid pin {pin_index} of {component_id}"
    if wire.is_self_loop:
        return f"Wire {wire.id} connects {wire.source_component_id} to itself"
    if wire.pin_pair in seen_pairs:
        return f"Wire {wire.id} duplicates an existing connection"
    return ""


def sanitize_wires(components: Sequence[Component], wires: Sequence[Wire]) -> List[Wire]:
    """Keep only the wires that satisfy the solver's input contract."""
    component_ids = {comp.id for comp in components}
    kept = []
    pairs = set()
    for wire in wires:
        problem = wire_problem(wire, component_ids, pairs)
        if problem:
            logger.warning(f"Dropping wire: {problem}")
            continue
        pairs.add(wire.pin_pair)
        kept.append(wire)
    return kept
