"""
Base Predictor Interface

Abstract base class for all branch predictors in the simulator.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from ..components.counters import CounterTable
from ..config import PredictorConfig
from ..exceptions import ConfigurationError


class PredictorStats:
    """Statistics tracking for a predictor."""

    def __init__(self):
        self.predictions = 0
        self.correct = 0
        self.mispredictions = 0

    def record(self, correct: bool) -> None:
        """Record the outcome of one prediction."""
        self.predictions += 1
        if correct:
            self.correct += 1
        else:
            self.mispredictions += 1

    @property
    def accuracy(self) -> Optional[float]:
        """Fraction of correct predictions, None before the first one."""
        if self.predictions == 0:
            return None
        return self.correct / self.predictions

    @property
    def misprediction_rate(self) -> Optional[float]:
        """Misprediction rate in percent, None before the first prediction."""
        if self.predictions == 0:
            return None
        return self.mispredictions / self.predictions * 100

    def to_dict(self) -> dict:
        return {
            'predictions': self.predictions,
            'correct': self.correct,
            'mispredictions': self.mispredictions,
            'misprediction_rate': self.misprediction_rate,
        }

    def __str__(self) -> str:
        rate = self.misprediction_rate
        rate_str = "n/a" if rate is None else f"{rate:.2f}%"
        return (f"Predictions: {self.predictions}, "
                f"Mispredictions: {self.mispredictions}, "
                f"Rate: {rate_str}")


class BasePredictor(ABC):
    """Abstract base class for branch predictors."""

    # Scheme name this class implements, used by the factory registry
    scheme: str = ''

    def __init__(self, name: str, config: PredictorConfig):
        """
        Initialize the predictor.

        Args:
            name: Name identifier for this predictor
            config: Validated predictor configuration
        """
        if self.scheme and config.scheme != self.scheme:
            raise ConfigurationError(
                f"{type(self).__name__} cannot be built from a "
                f"{config.scheme!r} configuration"
            )
        self.name = name
        self.config = config.validate()
        self.stats = PredictorStats()

    @abstractmethod
    def predict_and_update(self, address: int, taken: bool) -> bool:
        """
        Predict one branch, then train on its actual outcome.

        Args:
            address: Branch address
            taken: Actual branch outcome (True = taken)

        Returns:
            True if the prediction matched the outcome
        """
        pass

    @abstractmethod
    def tables(self) -> 'OrderedDict[str, CounterTable]':
        """Counter tables owned by this predictor, in report order."""
        pass

    def step(self, address: int, taken: bool) -> bool:
        """predict_and_update plus statistics bookkeeping."""
        correct = self.predict_and_update(address, taken)
        self.stats.record(correct)
        return correct

    def final_contents(self) -> List[Tuple[str, List[Tuple[int, int]]]]:
        """
        Final table contents for reporting.

        Returns:
            List of (table label, [(index, value), ...]) in report order
        """
        return [(label, table.contents())
                for label, table in self.tables().items()]

    def get_hardware_cost(self) -> dict:
        """
        Estimate hardware implementation cost.

        Returns:
            Dictionary with storage per table and in total
        """
        cost = {f'{label.lower()}_bits': table.get_storage_bits()
                for label, table in self.tables().items()}
        total_bits = sum(cost.values()) + self.history_bits()
        cost.update({
            'history_bits': self.history_bits(),
            'total_bits': total_bits,
            'total_bytes': total_bits // 8,
            'total_kb': total_bits / 8 / 1024,
        })
        return cost

    def history_bits(self) -> int:
        """Width of the global history register, 0 if there is none."""
        return 0

    def get_detailed_stats(self) -> Dict[str, object]:
        """Statistics plus per-table counter distributions."""
        return {
            'overall': self.stats.to_dict(),
            'tables': {label: table.get_statistics()
                       for label, table in self.tables().items()},
        }

    def reset(self) -> None:
        """Return every table and register to its power-on state."""
        for table in self.tables().values():
            table.reset()
        self.stats = PredictorStats()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config})"
