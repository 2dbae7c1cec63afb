"""
Predictor Configuration

Immutable parameters fixed at startup: the scheme name and the
table/history widths it needs.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple

from .exceptions import ConfigurationError


# Largest table exponent accepted for any table (2^30 one-byte counters).
MAX_INDEX_BITS = 30

# Width parameters each scheme requires, in command-line order.
SCHEME_PARAMS: Dict[str, Tuple[str, ...]] = {
    'bimodal': ('m2',),
    'gshare': ('m1', 'n'),
    'hybrid': ('k', 'm1', 'n', 'm2'),
}


@dataclass(frozen=True)
class PredictorConfig:
    """
    Configuration for one predictor instance.

    Attributes:
        scheme: One of 'bimodal', 'gshare', 'hybrid'
        m1: Gshare table exponent (table has 2^m1 counters)
        m2: Bimodal table exponent
        n: Global history width in bits
        k: Chooser table exponent (hybrid only)
    """
    scheme: str
    m1: Optional[int] = None
    m2: Optional[int] = None
    n: Optional[int] = None
    k: Optional[int] = None

    @classmethod
    def bimodal(cls, m2: int) -> 'PredictorConfig':
        return cls('bimodal', m2=m2)

    @classmethod
    def gshare(cls, m1: int, n: int) -> 'PredictorConfig':
        return cls('gshare', m1=m1, n=n)

    @classmethod
    def hybrid(cls, k: int, m1: int, n: int, m2: int) -> 'PredictorConfig':
        return cls('hybrid', m1=m1, m2=m2, n=n, k=k)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PredictorConfig':
        """
        Build a configuration from a mapping (e.g. a YAML document).

        Keys are case-insensitive so both ``M1`` and ``m1`` are accepted.
        Unknown keys are rejected.
        """
        normalized = {str(key).lower(): value for key, value in data.items()}

        scheme = normalized.pop('scheme', None)
        if scheme is None:
            raise ConfigurationError("Configuration is missing 'scheme'")

        unknown = set(normalized) - {'m1', 'm2', 'n', 'k'}
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )

        return cls(scheme=str(scheme).lower(), **normalized)

    @property
    def params(self) -> Tuple[int, ...]:
        """Scheme parameters in command-line order."""
        return tuple(getattr(self, name)
                     for name in SCHEME_PARAMS.get(self.scheme, ()))

    def validate(self) -> 'PredictorConfig':
        """
        Check the configuration, raising ConfigurationError on any problem.

        Returns:
            self, so construction sites can chain the call
        """
        if self.scheme not in SCHEME_PARAMS:
            raise ConfigurationError(
                f"Unknown predictor scheme: {self.scheme!r} "
                f"(expected one of {', '.join(SCHEME_PARAMS)})"
            )

        for name in SCHEME_PARAMS[self.scheme]:
            value = getattr(self, name)
            if value is None:
                raise ConfigurationError(
                    f"{self.scheme} predictor requires parameter {name.upper()}"
                )
            # bool is an int subclass but never a meaningful width
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"{name.upper()} must be an integer, got {value!r}"
                )
            if value < 0:
                raise ConfigurationError(
                    f"{name.upper()} must be non-negative, got {value}"
                )
            if value > MAX_INDEX_BITS:
                raise ConfigurationError(
                    f"{name.upper()}={value} exceeds the maximum table "
                    f"width of {MAX_INDEX_BITS} bits"
                )

        if self.scheme in ('gshare', 'hybrid') and self.n > self.m1:
            raise ConfigurationError(
                f"History width N={self.n} must not exceed gshare width M1={self.m1}"
            )

        return self

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items()
                if value is not None}

    def __str__(self) -> str:
        return " ".join([self.scheme] + [str(p) for p in self.params])
