"""
Wires connect one component pin to another.

A wire is an ideal zero-resistance, undirected edge. The caller is
expected to reject self-loops and duplicate pin pairs before a wire is
added; can_connect() implements that rule.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from components.component import NetlistError

Pin = Tuple[str, int]


@dataclass(frozen=True)
class Wire:
    id: str
    source_component_id: str
    source_pin_index: int
    target_component_id: str
    target_pin_index: int

    @property
    def source(self) -> Pin:
        return (self.source_component_id, self.source_pin_index)

    @property
    def target(self) -> Pin:
        return (self.target_component_id, self.target_pin_index)

    @property
    def pin_pair(self) -> FrozenSet[Pin]:
        """Unordered pin pair, used to spot duplicate wires."""
        return frozenset((self.source, self.target))

    @property
    def is_self_loop(self) -> bool:
        return self.source_component_id == self.target_component_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sourceComponentId": self.source_component_id,
            "sourcePinIndex": self.source_pin_index,
            "targetComponentId": self.target_component_id,
            "targetPinIndex": self.target_pin_index,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Wire":
        try:
            return Wire(
                id=str(data.get("id") or uuid.uuid4().hex[:9]),
                source_component_id=str(data["sourceComponentId"]),
                source_pin_index=int(data["sourcePinIndex"]),
                target_component_id=str(data["targetComponentId"]),
                target_pin_index=int(data["targetPinIndex"]),
            )
        except KeyError as e:
            raise NetlistError(f"Wire entry is missing {e.args[0]!r}: {data!r}")
        except (TypeError, ValueError):
            raise NetlistError(f"Wire entry has a non-integer pin index: {data!r}")


def can_connect(wires: Iterable[Wire], source: Pin, target: Pin) -> bool:
    """Check whether a new wire between two pins would be accepted."""
    if source[0] == target[0]:
        return False
    pair = frozenset((source, target))
    return all(wire.pin_pair != pair for wire in wires)


def connect(wires: Iterable[Wire], source: Pin, target: Pin, wire_id: Optional[str] = None) -> Optional[Wire]:
    """Build the wire for a connect-by-click, or None when the rule rejects it."""
    if not can_connect(wires, source, target):
        return None
    return Wire(
        id=wire_id or uuid.uuid4().hex[:9],
        source_component_id=source[0],
        source_pin_index=source[1],
        target_component_id=target[0],
        target_pin_index=target[1],
    )
