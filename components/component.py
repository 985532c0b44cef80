"""
Component model for the circuit lab.

Every component is a two-terminal element identified by a string id.
Pin 0 is the positive terminal of a battery, pin 1 the negative one.
Solved readings (current, voltage drop) are not stored here; they are
returned by the DC engine as a separate map keyed by component id.
"""

import math
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from config import DEFAULT_VALUES, LABEL_PREFIXES, PIN_COUNT


class NetlistError(Exception):
    """Raised when a circuit snapshot cannot be parsed"""
    pass


class ComponentType(Enum):
    """The closed set of component kinds the simulator understands"""
    BATTERY = "BATTERY"
    RESISTOR = "RESISTOR"
    RHEOSTAT = "RHEOSTAT"
    BULB = "BULB"
    SWITCH = "SWITCH"
    AMMETER = "AMMETER"
    VOLTMETER = "VOLTMETER"

    @property
    def is_voltage_source(self) -> bool:
        return self is ComponentType.BATTERY

    @property
    def is_load(self) -> bool:
        """Loads are the parts that turn a battery loop into a useful circuit."""
        return self in LOAD_TYPES

    @classmethod
    def parse(cls, value: Any) -> "ComponentType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise NetlistError(f"Unknown component type: {value!r}")


LOAD_TYPES = frozenset({ComponentType.RESISTOR, ComponentType.RHEOSTAT, ComponentType.BULB})


@dataclass
class Component:
    id: str
    type: ComponentType
    value: float = 0.0
    label: str = ""
    is_open: Optional[bool] = None

    @property
    def pins(self):
        return tuple((self.id, index) for index in range(PIN_COUNT))

    @property
    def conducts(self) -> bool:
        """False for parts that never carry current (open switch, voltmeter)."""
        if self.type is ComponentType.VOLTMETER:
            return False
        if self.type is ComponentType.SWITCH:
            return not self.is_open
        return True

    def with_switch_state(self, is_open: bool) -> "Component":
        """Return a copy with a different switch state, leaving this one untouched."""
        return replace(self, is_open=is_open)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "type": self.type.value,
            "value": self.value,
            "label": self.label,
        }
        if self.is_open is not None:
            data["isOpen"] = self.is_open
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Component":
        if "id" not in data or "type" not in data:
            raise NetlistError(f"Component entry needs 'id' and 'type': {data!r}")

        try:
            value = float(data.get("value", 0.0) or 0.0)
        except (TypeError, ValueError):
            raise NetlistError(f"Component {data['id']} has a non-numeric value: {data.get('value')!r}")
        if not math.isfinite(value):
            raise NetlistError(f"Component {data['id']} has a non-finite value: {value!r}")

        comp_type = ComponentType.parse(data["type"])
        is_open = data.get("isOpen", data.get("is_open"))
        if is_open is not None and not isinstance(is_open, bool):
            raise NetlistError(f"Component {data['id']} has a non-boolean isOpen: {is_open!r}")
        if is_open is None and comp_type is ComponentType.SWITCH:
            is_open = False

        return Component(
            id=str(data["id"]),
            type=comp_type,
            value=value,
            label=str(data.get("label", "")),
            is_open=is_open,
        )


def next_label(comp_type: ComponentType, existing: Iterable[Component] = ()) -> str:
    """Numbered label for a new part, e.g. the third resistor becomes R3."""
    count = sum(1 for comp in existing if comp.type is comp_type)
    return f"{LABEL_PREFIXES[comp_type.value]}{count + 1}"


def make_component(comp_type, existing: Iterable[Component] = (), component_id: Optional[str] = None,
                   value: Optional[float] = None) -> Component:
    """
    Create a component with the defaults a freshly placed part gets:
    12 V batteries, 10 ohm resistors and rheostats, switches start open.
    """
    comp_type = ComponentType.parse(comp_type)
    existing = list(existing)
    return Component(
        id=component_id or uuid.uuid4().hex[:9],
        type=comp_type,
        value=DEFAULT_VALUES[comp_type.value] if value is None else float(value),
        label=next_label(comp_type, existing),
        is_open=True if comp_type is ComponentType.SWITCH else None,
    )
