# Trace Package
from .parser import TraceParser, BranchTrace, create_sample_trace
from .formats import TraceFormat, BranchRecord, SimpleTextFormat

__all__ = [
    'TraceParser',
    'BranchTrace',
    'create_sample_trace',
    'TraceFormat',
    'BranchRecord',
    'SimpleTextFormat'
]
