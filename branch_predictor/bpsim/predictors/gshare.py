"""
GShare Predictor

Counter table indexed by address bits XOR-folded with a global history
register.
"""

from collections import OrderedDict

from ..components.counters import CounterTable, WEAKLY_TAKEN
from ..components.history import GlobalHistoryRegister
from ..components.indexing import IndexingScheme
from ..config import PredictorConfig
from .base import BasePredictor


class GSharePredictor(BasePredictor):
    """
    GShare predictor with a 2^M1 entry table and an N-bit history.

    Folding the recent outcomes into the upper N index bits lets
    correlated branches use different counters without concatenating
    the full history onto the address.
    """

    scheme = 'gshare'

    def __init__(self, config: PredictorConfig):
        super().__init__("GShare", config)
        self.m1 = self.config.m1
        self.n = self.config.n
        self.table = CounterTable(self.m1, initial_value=WEAKLY_TAKEN)
        self.history = GlobalHistoryRegister(self.n)

    def index(self, address: int) -> int:
        """Compute index using the current history."""
        return IndexingScheme.gshare(address, self.history.value, self.m1, self.n)

    def predict(self, address: int) -> bool:
        """Prediction for address without training."""
        return self.table.is_taken(self.index(address))

    def predict_and_update(self, address: int, taken: bool) -> bool:
        idx = self.index(address)
        predicted_taken = self.table.is_taken(idx)

        self.table.update(idx, taken)
        self.history.update(taken)

        return predicted_taken == taken

    def tables(self) -> 'OrderedDict[str, CounterTable]':
        return OrderedDict([('GSHARE', self.table)])

    def history_bits(self) -> int:
        return self.n

    def reset(self) -> None:
        super().reset()
        self.history.reset()
