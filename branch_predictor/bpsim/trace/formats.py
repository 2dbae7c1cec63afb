"""
Trace Format Definitions

Defines the text trace format consumed by the simulator.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, TextIO

from ..exceptions import TraceFormatError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BranchRecord:
    """Single branch record from a trace."""
    pc: int              # Branch address
    taken: bool          # Branch outcome


class TraceFormat(ABC):
    """Abstract base class for trace formats."""

    @abstractmethod
    def parse(self, file_handle, source: Optional[str] = None) -> Iterator[BranchRecord]:
        """
        Parse trace file and yield branch records.

        Args:
            file_handle: Open file handle
            source: Name used in error messages

        Yields:
            BranchRecord for each branch in trace
        """
        pass

    @abstractmethod
    def get_format_name(self) -> str:
        """Return format name."""
        pass


class SimpleTextFormat(TraceFormat):
    """
    Text trace format: one branch per line.

    Format: <hex PC> <outcome>
    Example:
        00a3b5fc t
        0x00a3b604 n

    In strict mode a line holds exactly these two fields and the outcome
    must be t or n (any case). In permissive mode extra fields are ignored,
    a token starting with a lowercase t is taken and every other token is
    not taken.
    """

    TAKEN_TOKENS = frozenset({'t'})
    NOT_TAKEN_TOKENS = frozenset({'n'})

    def __init__(self, strict: bool = True):
        self.strict = strict

    def get_format_name(self) -> str:
        return "SimpleText"

    def parse(self, file_handle: TextIO, source: Optional[str] = None) -> Iterator[BranchRecord]:
        """Parse simple text format."""
        for line_num, line in enumerate(file_handle, 1):
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith('#'):
                continue

            yield self.parse_line(line, line_num, source)

    def parse_line(self, line: str, line_num: Optional[int] = None,
                   source: Optional[str] = None) -> BranchRecord:
        """Turn one non-empty trace line into a BranchRecord."""
        parts = line.split()
        if len(parts) < 2 or (self.strict and len(parts) > 2):
            raise TraceFormatError("expected '<address> <outcome>'",
                                   source, line_num, line)

        try:
            pc = int(parts[0], 16)
        except ValueError:
            raise TraceFormatError(f"invalid hex address {parts[0]!r}",
                                   source, line_num, line) from None
        if pc < 0:
            raise TraceFormatError(f"negative address {parts[0]!r}",
                                   source, line_num, line)

        token = parts[1]
        if not self.strict:
            # Legacy rule: only the first character matters, and only 't' is taken
            taken = token[0] == 't'
            if not taken and token.lower() not in self.NOT_TAKEN_TOKENS:
                logger.debug("%s:%s: treating outcome %r as not taken",
                             source, line_num, token)
        elif token.lower() in self.TAKEN_TOKENS:
            taken = True
        elif token.lower() in self.NOT_TAKEN_TOKENS:
            taken = False
        else:
            raise TraceFormatError(f"invalid outcome {token!r} (expected t or n)",
                                   source, line_num, line)

        return BranchRecord(pc=pc, taken=taken)
