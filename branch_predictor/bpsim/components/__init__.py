# Components Package
from .counters import SaturatingCounter, CounterTable
from .history import GlobalHistoryRegister
from .indexing import IndexingScheme

__all__ = [
    'SaturatingCounter',
    'CounterTable',
    'GlobalHistoryRegister',
    'IndexingScheme'
]
