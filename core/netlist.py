"""
Electrical netlist: groups component pins into electrical nodes.

Pins joined by wires, directly or through other wires, share one node.
Both the DC engine and the topology classifier build their node view
through ElectricalNetlist.build(), so the two always agree on which
pins are connected.
"""

import logging
from typing import Dict, List, Optional, Sequence

from networkx.utils import UnionFind

from components.component import Component, ComponentType
from components.wire import Pin, Wire
from config import PIN_COUNT

logger = logging.getLogger(__name__)


def group_pins(components: Sequence[Component], wires: Sequence[Wire]) -> UnionFind:
    """
    Union-find over every pin of every component, merged along the wires.
    Wires that name an unknown component or pin are skipped.
    """
    known_pins = [pin for comp in components for pin in comp.pins]
    pin_sets = UnionFind(known_pins)
    known = set(known_pins)

    for wire in wires:
        if wire.source not in known or wire.target not in known:
            logger.debug(f"Ignoring wire {wire.id}: references an unknown pin "
                         f"({wire.source} -> {wire.target})")
            continue
        pin_sets.union(wire.source, wire.target)

    return pin_sets


class ElectricalNode:
    def __init__(self, node_id: int):
        self.node_id = node_id
        self.pins: List[Pin] = []
        self.is_ground = False

    def add_pin(self, pin: Pin):
        self.pins.append(pin)

    def __repr__(self):
        return f"ElectricalNode({self.node_id}, Pins: {len(self.pins)}, Ground: {self.is_ground})"


class ElectricalNetlist:
    """Pin-to-node mapping for one immutable snapshot of the circuit."""

    def __init__(self, components: Sequence[Component], wires: Sequence[Wire]):
        self.components = list(components)
        self.wires = list(wires)
        self.nodes: Dict[int, ElectricalNode] = {}
        self.pin_to_node: Dict[Pin, int] = {}
        self.ground_node_id: Optional[int] = None
        self._assign_nodes()

    @classmethod
    def build(cls, components: Sequence[Component], wires: Sequence[Wire]) -> "ElectricalNetlist":
        return cls(components, wires)

    def _assign_nodes(self):
        pin_sets = group_pins(self.components, self.wires)

        # Discovery order: component list order, pin 0 before pin 1
        groups: Dict[Pin, List[Pin]] = {}
        for comp in self.components:
            for pin in comp.pins:
                groups.setdefault(pin_sets[pin], []).append(pin)
        ordered_groups = list(groups.values())

        if not ordered_groups:
            return

        ground_index = self._find_ground_group(ordered_groups)

        for index, group in enumerate(ordered_groups):
            if index == ground_index:
                node_id = 0
            elif index < ground_index:
                node_id = index + 1
            else:
                node_id = index
            node = ElectricalNode(node_id)
            for pin in group:
                node.add_pin(pin)
                self.pin_to_node[pin] = node_id
            self.nodes[node_id] = node

        self.ground_node_id = 0
        self.nodes[0].is_ground = True

    def _find_ground_group(self, ordered_groups: List[List[Pin]]) -> int:
        """Negative terminal of the first battery, else the first node found."""
        batteries = self.voltage_sources
        if batteries:
            ground_pin = (batteries[0].id, PIN_COUNT - 1)
            for index, group in enumerate(ordered_groups):
                if ground_pin in group:
                    return index
        return 0

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def voltage_sources(self) -> List[Component]:
        return [comp for comp in self.components if comp.type is ComponentType.BATTERY]

    def node_of(self, component_id: str, pin_index: int) -> Optional[int]:
        return self.pin_to_node.get((component_id, pin_index))

    def terminal_nodes(self, component: Component):
        """(node at pin 0, node at pin 1) for a component."""
        return self.node_of(component.id, 0), self.node_of(component.id, 1)

    def get_ground_node(self) -> Optional[ElectricalNode]:
        if self.ground_node_id is not None:
            return self.nodes.get(self.ground_node_id)
        return None

    def generate_netlist_description(self) -> str:
        description = "Circuit Netlist:\n"
        description += "Components:\n"
        for comp in self.components:
            description += f"  {comp.label or comp.id} ({comp.type.value})\n"

        description += "\nNodes:\n"
        for node_id in sorted(self.nodes.keys()):
            node = self.nodes[node_id]
            description += f"  Node {node_id} {'(Ground)' if node.is_ground else ''}:\n"
            for component_id, pin_index in node.pins:
                description += f"    - {component_id} Pin: {pin_index}\n"

        description += "\nWires:\n"
        if self.wires:
            for wire in self.wires:
                description += (f"  - {wire.source_component_id} ({wire.source_pin_index}) to "
                                f"{wire.target_component_id} ({wire.target_pin_index})\n")
        else:
            description += "  No wires in circuit.\n"

        return description
