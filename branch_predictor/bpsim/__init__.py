# Branch Predictor Simulator Package
"""
bpsim: trace-driven branch predictor simulator

Schemes:
- Bimodal: 2-bit counters indexed by PC
- GShare: 2-bit counters indexed by PC XOR global history
- Hybrid: chooser table selecting between gshare and bimodal
"""

__version__ = "1.0.0"

from .config import PredictorConfig
from .exceptions import BPSimError, ConfigurationError, TraceFormatError
from .utils.helpers import create_predictor

__all__ = [
    'PredictorConfig',
    'BPSimError',
    'ConfigurationError',
    'TraceFormatError',
    'create_predictor',
]
