from .models import AnalysisResults, Reading, SimulationSettings, effective_resistance
from .netlist import ElectricalNetlist
from .simulator import CircuitAnalysis, CircuitSimulator, solve_circuit
from .topology import CircuitTopology, TopologyResult, analyze_topology

__all__ = ['AnalysisResults', 'Reading', 'SimulationSettings', 'effective_resistance',
           'ElectricalNetlist', 'CircuitAnalysis', 'CircuitSimulator', 'solve_circuit',
           'CircuitTopology', 'TopologyResult', 'analyze_topology']
