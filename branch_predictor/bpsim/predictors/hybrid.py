"""
Hybrid Branch Predictor

Combines a gshare and a bimodal predictor with a chooser table of 2-bit
counters that learns, per address, which of the two to trust.
"""

from collections import OrderedDict

from ..components.counters import CounterTable, WEAKLY_NOT_TAKEN
from ..components.indexing import IndexingScheme
from ..config import PredictorConfig
from .base import BasePredictor
from .bimodal import BimodalPredictor
from .gshare import GSharePredictor


# Chooser counters at or above this value select gshare
CHOOSER_GSHARE_THRESHOLD = 2


class HybridPredictor(BasePredictor):
    """
    Tournament of gshare and bimodal.

    Only the sub-predictor selected by the chooser trains its counter on
    each branch, while the shared history register sees every outcome.
    The chooser moves towards whichever sub-predictor was right when
    exactly one of them was.
    """

    scheme = 'hybrid'

    def __init__(self, config: PredictorConfig):
        super().__init__("Hybrid", config)
        self.k = self.config.k

        # Sub-predictors
        self.gshare = GSharePredictor(
            PredictorConfig.gshare(self.config.m1, self.config.n))
        self.bimodal = BimodalPredictor(
            PredictorConfig.bimodal(self.config.m2))

        # Chooser starts weakly biased towards bimodal
        self.chooser = CounterTable(self.k, initial_value=WEAKLY_NOT_TAKEN)

        # Selection statistics
        self.gshare_selections = 0
        self.bimodal_selections = 0

    @property
    def history(self):
        """The single history register, owned by the gshare half."""
        return self.gshare.history

    def chooser_index(self, address: int) -> int:
        return IndexingScheme.chooser(address, self.k)

    def uses_gshare(self, address: int) -> bool:
        """Whether the chooser currently selects gshare for address."""
        counter = self.chooser.value(self.chooser_index(address))
        return counter >= CHOOSER_GSHARE_THRESHOLD

    def predict(self, address: int) -> bool:
        """Prediction for address without training."""
        if self.uses_gshare(address):
            return self.gshare.predict(address)
        return self.bimodal.predict(address)

    def predict_and_update(self, address: int, taken: bool) -> bool:
        # Both sub-predictions are read before anything is trained
        gshare_index = self.gshare.index(address)
        gshare_taken = self.gshare.table.is_taken(gshare_index)
        bimodal_index = self.bimodal.index(address)
        bimodal_taken = self.bimodal.table.is_taken(bimodal_index)

        chooser_index = self.chooser_index(address)
        use_gshare = self.chooser.value(chooser_index) >= CHOOSER_GSHARE_THRESHOLD

        if use_gshare:
            self.gshare_selections += 1
            final_prediction = gshare_taken
            self.gshare.table.update(gshare_index, taken)
        else:
            self.bimodal_selections += 1
            final_prediction = bimodal_taken
            self.bimodal.table.update(bimodal_index, taken)

        self.history.update(taken)

        gshare_correct = gshare_taken == taken
        bimodal_correct = bimodal_taken == taken
        if gshare_correct and not bimodal_correct:
            self.chooser.increment(chooser_index)
        elif bimodal_correct and not gshare_correct:
            self.chooser.decrement(chooser_index)

        return final_prediction == taken

    def tables(self) -> 'OrderedDict[str, CounterTable]':
        return OrderedDict([
            ('CHOOSER', self.chooser),
            ('GSHARE', self.gshare.table),
            ('BIMODAL', self.bimodal.table),
        ])

    def history_bits(self) -> int:
        return self.gshare.history_bits()

    def get_detailed_stats(self) -> dict:
        """Statistics including how often each sub-predictor was selected."""
        stats = super().get_detailed_stats()
        total_selections = self.gshare_selections + self.bimodal_selections
        stats['selection'] = {
            'gshare': self.gshare_selections,
            'bimodal': self.bimodal_selections,
            'gshare_ratio': self.gshare_selections / max(1, total_selections),
        }
        return stats

    def reset(self) -> None:
        """Reset all components."""
        super().reset()
        self.gshare.reset()
        self.bimodal.reset()
        self.gshare_selections = 0
        self.bimodal_selections = 0
