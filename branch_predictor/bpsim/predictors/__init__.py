# Predictors Package
from typing import Dict, Type

from .base import BasePredictor, PredictorStats
from .bimodal import BimodalPredictor
from .gshare import GSharePredictor
from .hybrid import HybridPredictor


# Scheme name -> predictor class; dispatch happens once, at construction
PREDICTORS: Dict[str, Type[BasePredictor]] = {
    cls.scheme: cls
    for cls in (BimodalPredictor, GSharePredictor, HybridPredictor)
}


__all__ = [
    'BasePredictor',
    'PredictorStats',
    'BimodalPredictor',
    'GSharePredictor',
    'HybridPredictor',
    'PREDICTORS',
]
