"""
Bimodal Predictor

A table of 2-bit saturating counters indexed directly by address bits.
"""

from collections import OrderedDict

from ..components.counters import CounterTable, WEAKLY_TAKEN
from ..components.indexing import IndexingScheme
from ..config import PredictorConfig
from .base import BasePredictor


class BimodalPredictor(BasePredictor):
    """
    Bimodal predictor with a 2^M2 entry counter table.

    With M2 = 0 the table holds a single global counter.
    """

    scheme = 'bimodal'

    def __init__(self, config: PredictorConfig):
        super().__init__("Bimodal", config)
        self.m2 = self.config.m2
        # 2-bit counters: 0,1 = Not Taken; 2,3 = Taken
        self.table = CounterTable(self.m2, initial_value=WEAKLY_TAKEN)

    def index(self, address: int) -> int:
        return IndexingScheme.bimodal(address, self.m2)

    def predict(self, address: int) -> bool:
        """Prediction for address without training."""
        return self.table.is_taken(self.index(address))

    def predict_and_update(self, address: int, taken: bool) -> bool:
        idx = self.index(address)
        predicted_taken = self.table.is_taken(idx)
        self.table.update(idx, taken)
        return predicted_taken == taken

    def tables(self) -> 'OrderedDict[str, CounterTable]':
        return OrderedDict([('BIMODAL', self.table)])
