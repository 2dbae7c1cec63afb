# Simulation Package
from .simulator import BranchSimulator, ComparativeSimulator, SimulationConfig
from .metrics import SimulationResults, ResultsExporter, format_report

__all__ = [
    'BranchSimulator',
    'ComparativeSimulator',
    'SimulationConfig',
    'SimulationResults',
    'ResultsExporter',
    'format_report'
]
