"""
Shared settings, result containers and the component resistance models
used by both MNA assembly and current recovery.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import config
from components.component import Component, ComponentType


@dataclass
class SimulationSettings:
    """Configuration settings for one solve/classify call"""
    resistor_min_resistance: float = config.RESISTOR_MIN_RESISTANCE
    rheostat_min_resistance: float = config.RHEOSTAT_MIN_RESISTANCE
    bulb_resistance: float = config.BULB_RESISTANCE
    ammeter_resistance: float = config.AMMETER_RESISTANCE
    switch_closed_resistance: float = config.SWITCH_CLOSED_RESISTANCE
    pivot_epsilon: float = config.PIVOT_EPSILON
    tolerance: float = config.CLEANUP_TOLERANCE
    max_current: float = config.SHORT_CIRCUIT_CURRENT_LIMIT
    use_sparse: bool = False
    detect_complex: bool = True


DEFAULT_SETTINGS = SimulationSettings()


@dataclass(frozen=True)
class Reading:
    """Steady-state measurement for one component"""
    current: float = 0.0
    voltage_drop: float = 0.0


ZERO_READING = Reading()


@dataclass
class AnalysisResults:
    """Container for DC analysis results"""
    success: bool = False
    message: str = ""
    error: Optional[str] = None
    node_voltages: Dict[int, float] = field(default_factory=dict)
    readings: Dict[str, Reading] = field(default_factory=dict)
    components: List[Component] = field(default_factory=list)
    max_current: float = 0.0

    def reading(self, component_id: str) -> Reading:
        return self.readings.get(component_id, ZERO_READING)

    def annotated_components(self) -> List[dict]:
        """Component dicts with current and voltageDrop filled in, in input order."""
        annotated = []
        for comp in self.components:
            data = comp.to_dict()
            reading = self.reading(comp.id)
            data["current"] = reading.current
            data["voltageDrop"] = reading.voltage_drop
            annotated.append(data)
        return annotated


ResistanceModel = Optional[Callable[[Component, SimulationSettings], float]]

RESISTANCE_MODELS: Dict[ComponentType, ResistanceModel] = {
    ComponentType.RESISTOR: lambda comp, s: max(s.resistor_min_resistance, comp.value),
    ComponentType.RHEOSTAT: lambda comp, s: max(s.rheostat_min_resistance, comp.value),
    ComponentType.BULB: lambda comp, s: s.bulb_resistance,
    ComponentType.AMMETER: lambda comp, s: s.ammeter_resistance,
    ComponentType.SWITCH: lambda comp, s: math.inf if comp.is_open else s.switch_closed_resistance,
    ComponentType.VOLTMETER: lambda comp, s: math.inf,
    # Batteries are stamped as voltage constraints, not conductances
    ComponentType.BATTERY: None,
}


def effective_resistance(component: Component, settings: SimulationSettings = DEFAULT_SETTINGS) -> float:
    """
    Resistance a component presents to the network.

    Returns math.inf for parts that carry no current. Raises ValueError for
    batteries, which have no resistance model.
    """
    model = RESISTANCE_MODELS[component.type]
    if model is None:
        raise ValueError(f"{component.type.value} has no resistance model")
    return model(component, settings)
