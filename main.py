"""
Command line entry point: solve and classify a saved circuit snapshot.

The snapshot is the JSON the editor exchanges with the core:

    {"components": [{"id": "b1", "type": "BATTERY", "value": 12}, ...],
     "wires": [{"id": "w1", "sourceComponentId": "b1", "sourcePinIndex": 0,
                "targetComponentId": "r1", "targetPinIndex": 0}, ...]}
"""

import argparse
import json
import logging
import sys

from components.component import Component, NetlistError
from components.wire import Wire
from core.analysis.results_formatter import ResultsFormatter, get_circuit_summary
from core.models import SimulationSettings
from core.simulator import CircuitSimulator
from core.topology import CircuitTopology
from core.validator import CircuitValidator, sanitize_wires

logger = logging.getLogger(__name__)


def load_circuit(data):
    """Parse a snapshot dict into component and wire lists."""
    if not isinstance(data, dict):
        raise NetlistError("Circuit snapshot must be a JSON object")
    components = [Component.from_dict(item) for item in data.get("components", [])]
    wires = [Wire.from_dict(item) for item in data.get("wires", [])]
    return components, wires


def load_circuit_file(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise NetlistError(f"{path} is not valid JSON: {e}")
    return load_circuit(data)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Solve a DC circuit snapshot and classify its topology.",
    )
    parser.add_argument("circuit", help="Path to the circuit snapshot (JSON).")
    parser.add_argument(
        "--target",
        choices=["series", "parallel"],
        help="Topology the learner is asked to build; adds a hint to the feedback.",
    )
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON instead of text.")
    parser.add_argument("--sanitize", action="store_true",
                        help="Drop dangling, self-loop and duplicate wires before solving.")
    parser.add_argument("--sparse", action="store_true", help="Use the scipy sparse solver.")
    parser.add_argument("--max-current", type=float, default=None,
                        help="Short-circuit warning threshold in amps.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug).")
    return parser


def run(args):
    components, wires = load_circuit_file(args.circuit)

    validator = CircuitValidator(components, wires)
    errors, warnings = validator.validate_circuit()
    for message in errors:
        logger.warning(message)
    for message in warnings:
        logger.info(message)
    if args.sanitize:
        wires = sanitize_wires(components, wires)

    settings = SimulationSettings(use_sparse=args.sparse)
    if args.max_current is not None:
        settings.max_current = args.max_current

    target = CircuitTopology[args.target.upper()] if args.target else None
    analysis = CircuitSimulator(settings).analyze(components, wires, target=target)

    return components, wires, analysis


def to_payload(components, wires, analysis):
    """JSON output: annotated components for the renderer plus the classifier verdict."""
    return {
        "components": analysis.dc.annotated_components(),
        "error": analysis.dc.error,
        "nodeVoltages": {str(k): v for k, v in sorted(analysis.dc.node_voltages.items())},
        "topology": analysis.topology.to_dict(),
        "summary": get_circuit_summary(components, wires, analysis.dc.error),
    }


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        components, wires, analysis = run(args)
    except (OSError, NetlistError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(to_payload(components, wires, analysis), indent=2, ensure_ascii=False))
    else:
        print(ResultsFormatter(analysis.dc).get_results_description())
        print(f"Topology: {analysis.topology.topology.value}")
        print(analysis.topology.feedback)

    return 0


if __name__ == "__main__":
    sys.exit(main())
