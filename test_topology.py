"""
Tests for the structural topology classifier.
"""

import os
import sys

project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

from components.component import Component, ComponentType
from components.wire import Wire
from core.models import SimulationSettings
from core.netlist import ElectricalNetlist
from core.topology import (
    FEEDBACK, NO_POWER_FEEDBACK, SUCCESS_PREFIX, TARGET_HINTS,
    CircuitGraph, CircuitTopology, analyze_topology, build_feedback,
)


def comp(comp_id, comp_type, value=0.0, is_open=None):
    return Component(id=comp_id, type=ComponentType(comp_type), value=value, is_open=is_open)


def wire(a, pin_a, b, pin_b):
    return Wire(f"{a}{pin_a}-{b}{pin_b}", a, pin_a, b, pin_b)


def series_loop(*parts):
    components = [comp("b", "BATTERY", 12)] + list(parts)
    chain = ["b"] + [part.id for part in parts]
    wires = [wire(chain[i], 0 if i == 0 else 1, chain[i + 1], 0) for i in range(len(chain) - 1)]
    wires.append(wire(chain[-1], 1, "b", 1))
    return components, wires


def across(first, second, components, wires):
    """Put component second in parallel with first."""
    components.append(second)
    wires += [wire(first, 0, second.id, 0), wire(first, 1, second.id, 1)]
    return components, wires


def test_empty_canvas():
    result = analyze_topology([], [])

    assert result.topology is CircuitTopology.EMPTY
    assert not result.is_valid
    assert result.feedback == FEEDBACK[CircuitTopology.EMPTY]


def test_no_battery_is_open_with_power_hint():
    components = [comp("r1", "RESISTOR", 10), comp("r2", "RESISTOR", 10)]
    wires = [wire("r1", 0, "r2", 0), wire("r1", 1, "r2", 1)]
    result = analyze_topology(components, wires)

    assert result.topology is CircuitTopology.OPEN
    assert result.feedback == NO_POWER_FEEDBACK


def test_no_load_is_short():
    components, wires = series_loop(comp("s", "SWITCH", is_open=False), comp("a", "AMMETER"))
    result = analyze_topology(components, wires)

    assert result.topology is CircuitTopology.SHORT
    assert result.loops == 1
    assert not result.is_valid


def test_battery_wired_to_itself_is_short():
    result = analyze_topology([comp("b", "BATTERY", 12)], [wire("b", 0, "b", 1)])

    assert result.topology is CircuitTopology.SHORT


def test_single_loop_is_series():
    components, wires = series_loop(comp("r1", "RESISTOR", 10), comp("l", "BULB"), comp("a", "AMMETER"))
    result = analyze_topology(components, wires)

    assert result.topology is CircuitTopology.SERIES
    assert result.loops == 1
    assert result.branches == 0
    assert result.is_valid
    assert result.feedback == FEEDBACK[CircuitTopology.SERIES]


def test_dangling_wire_is_open():
    components = [comp("b", "BATTERY", 12), comp("r", "RESISTOR", 10)]
    result = analyze_topology(components, [wire("b", 0, "r", 0)])

    assert result.topology is CircuitTopology.OPEN
    assert not result.is_valid


def test_switch_state_flips_series_and_open():
    components, wires = series_loop(comp("s", "SWITCH", is_open=True), comp("r", "RESISTOR", 10))
    assert analyze_topology(components, wires).topology is CircuitTopology.OPEN

    closed = [c.with_switch_state(False) if c.id == "s" else c for c in components]
    assert analyze_topology(closed, wires).topology is CircuitTopology.SERIES


def test_voltmeter_does_not_create_a_branch():
    components, wires = series_loop(comp("r", "RESISTOR", 10))
    components, wires = across("r", comp("v", "VOLTMETER"), components, wires)

    assert analyze_topology(components, wires).topology is CircuitTopology.SERIES


def test_two_branches_are_parallel():
    components, wires = series_loop(comp("r1", "RESISTOR", 10))
    components, wires = across("r1", comp("r2", "RESISTOR", 10), components, wires)
    result = analyze_topology(components, wires)

    assert result.topology is CircuitTopology.PARALLEL
    assert result.loops == 2
    assert result.branches == 2
    assert result.is_valid


def test_series_part_in_main_line_stays_parallel():
    components, wires = series_loop(comp("l", "BULB"), comp("r1", "RESISTOR", 10))
    components, wires = across("r1", comp("r2", "RESISTOR", 10), components, wires)

    assert analyze_topology(components, wires).topology is CircuitTopology.PARALLEL


def mixed_circuit():
    """Two parallel pairs connected in series."""
    components, wires = series_loop(comp("r1", "RESISTOR", 10), comp("r3", "RESISTOR", 10))
    components, wires = across("r1", comp("r2", "RESISTOR", 10), components, wires)
    return across("r3", comp("r4", "RESISTOR", 10), components, wires)


def test_parallel_pairs_in_series_are_complex():
    components, wires = mixed_circuit()
    result = analyze_topology(components, wires)

    assert result.topology is CircuitTopology.COMPLEX
    assert result.loops == 3
    assert result.branches == 3
    assert result.is_valid


def test_complex_detection_can_be_disabled():
    components, wires = mixed_circuit()
    result = analyze_topology(components, wires, settings=SimulationSettings(detect_complex=False))

    assert result.topology is CircuitTopology.PARALLEL
    assert result.loops == 3


def test_disconnected_loops_are_open():
    components, wires = series_loop(comp("r1", "RESISTOR", 10))
    components += [comp("r2", "RESISTOR", 10), comp("r3", "RESISTOR", 10)]
    wires += [wire("r2", 0, "r3", 0), wire("r2", 1, "r3", 1)]

    assert analyze_topology(components, wires).topology is CircuitTopology.OPEN


def test_target_met_adds_success_prefix():
    components, wires = series_loop(comp("r", "RESISTOR", 10))
    result = analyze_topology(components, wires, target=CircuitTopology.SERIES)

    assert result.target_met
    assert result.feedback.startswith(SUCCESS_PREFIX)


def test_target_missed_adds_hint():
    components, wires = series_loop(comp("r", "RESISTOR", 10))
    result = analyze_topology(components, wires, target=CircuitTopology.PARALLEL)

    assert not result.target_met
    assert TARGET_HINTS[(CircuitTopology.PARALLEL, CircuitTopology.SERIES)] in result.feedback


def test_build_feedback_without_hint_falls_back_to_base_text():
    text = build_feedback(CircuitTopology.SHORT, target=CircuitTopology.SERIES)

    assert text == FEEDBACK[CircuitTopology.SHORT]


def test_to_dict_uses_wire_format_keys():
    components, wires = series_loop(comp("r", "RESISTOR", 10))
    data = analyze_topology(components, wires).to_dict()

    assert data == {
        "type": "SERIES",
        "loops": 1,
        "branches": 0,
        "isValid": True,
        "feedback": FEEDBACK[CircuitTopology.SERIES],
    }


def test_graph_nodes_come_from_the_shared_netlist():
    components, wires = mixed_circuit()
    netlist = ElectricalNetlist.build(components, wires)
    graph = CircuitGraph(netlist)

    assert set(graph.graph.nodes()) <= set(netlist.nodes)
    assert graph.graph.number_of_edges() == 5
    assert sorted(graph.node_degrees().values()) == [3, 3, 4]
    assert graph.cycle_rank() == 3


def test_series_chains_reduce_to_junctions():
    components, wires = series_loop(comp("l", "BULB"), comp("r1", "RESISTOR", 10))
    components, wires = across("r1", comp("r2", "RESISTOR", 10), components, wires)
    reduced = CircuitGraph(ElectricalNetlist.build(components, wires)).reduce_series_chains()

    assert reduced.number_of_nodes() == 2
    assert reduced.number_of_edges() == 3


def test_junctions_drive_parallel_counts():
    components, wires = series_loop(comp("r1", "RESISTOR", 10))
    components, wires = across("r1", comp("r2", "RESISTOR", 10), components, wires)
    netlist = ElectricalNetlist.build(components, wires)
    junctions = CircuitGraph(netlist).junctions()

    assert sorted(junctions) == sorted({netlist.node_of("b", 0), netlist.node_of("b", 1)})
    assert analyze_topology(components, wires).branches == len(junctions)
