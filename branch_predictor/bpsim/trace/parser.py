"""
Trace Parser

Reads branch traces from disk, handling compressed files, and provides a
streaming interface of BranchRecords.
"""

import gzip
import lzma
import bz2
import logging
import random
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union
from dataclasses import dataclass

from .formats import TraceFormat, BranchRecord, SimpleTextFormat


logger = logging.getLogger(__name__)


@dataclass
class TraceInfo:
    """Information about a trace file."""
    path: str
    format: str
    compression: Optional[str]
    size_bytes: int
    estimated_branches: Optional[int]


class BranchTrace:
    """
    Container for branch trace data.

    Holds a whole trace in memory so it can be replayed against several
    predictors.
    """

    def __init__(self, records: Optional[List[BranchRecord]] = None):
        self._records = records or []

    @classmethod
    def from_pairs(cls, pairs: Iterable) -> 'BranchTrace':
        """Build a trace from (address, taken) pairs."""
        return cls([BranchRecord(pc=pc, taken=bool(taken)) for pc, taken in pairs])

    def __iter__(self) -> Iterator[BranchRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, idx: int) -> BranchRecord:
        return self._records[idx]

    def get_statistics(self) -> dict:
        """Get trace statistics."""
        if not self._records:
            return {'count': 0}

        taken_count = sum(1 for r in self._records if r.taken)
        unique_pcs = len(set(r.pc for r in self._records))

        return {
            'count': len(self._records),
            'taken': taken_count,
            'not_taken': len(self._records) - taken_count,
            'taken_ratio': taken_count / len(self._records),
            'unique_pcs': unique_pcs,
        }


class TraceParser:
    """
    Trace parser with transparent decompression.
    """

    # Supported formats
    FORMATS = {
        'text': SimpleTextFormat,
    }

    # Compression handlers
    COMPRESSION = {
        '.gz': gzip.open,
        '.gzip': gzip.open,
        '.xz': lzma.open,
        '.bz2': bz2.open,
        '.lzma': lzma.open,
    }

    def __init__(self, format_name: str = 'text', strict: bool = True):
        """
        Initialize parser.

        Args:
            format_name: Trace format name
            strict: Reject outcome tokens other than t/n
        """
        format_class = self.FORMATS.get(format_name.lower())
        if format_class is None:
            raise ValueError(f"Unknown trace format: {format_name}")
        self.format_name = format_name.lower()
        self.strict = strict
        self._format: TraceFormat = format_class(strict=strict)

    def parse_file(self, filepath: Union[str, Path],
                   max_branches: Optional[int] = None,
                   skip_branches: int = 0) -> Iterator[BranchRecord]:
        """
        Parse a trace file.

        Args:
            filepath: Path to trace file
            max_branches: Maximum branches to read (None = all)
            skip_branches: Number of branches to skip at the start

        Yields:
            BranchRecord for each branch
        """
        filepath = Path(filepath)
        open_func = self.COMPRESSION.get(filepath.suffix.lower(), open)

        logger.debug("Reading %s trace %s", self._format.get_format_name(), filepath)

        with open_func(filepath, 'rt') as file_handle:
            count = 0
            skipped = 0

            for record in self._format.parse(file_handle, source=str(filepath)):
                if skipped < skip_branches:
                    skipped += 1
                    continue

                # Check limit before yielding so max_branches=0 reads nothing
                if max_branches is not None and count >= max_branches:
                    break

                yield record
                count += 1

    def parse_lines(self, lines: Iterable[str],
                    source: str = '<lines>') -> Iterator[BranchRecord]:
        """Parse trace lines that are already in memory."""
        return self._format.parse(lines, source=source)

    def load_trace(self, filepath: Union[str, Path],
                   max_branches: Optional[int] = None,
                   skip_branches: int = 0) -> BranchTrace:
        """
        Load entire trace into memory.

        Args:
            filepath: Path to trace file
            max_branches: Maximum branches to load
            skip_branches: Branches to skip

        Returns:
            BranchTrace with all records
        """
        records = list(self.parse_file(filepath, max_branches, skip_branches))
        return BranchTrace(records)

    def get_trace_info(self, filepath: Union[str, Path]) -> TraceInfo:
        """Get information about a trace file."""
        filepath = Path(filepath)

        compression = None
        if filepath.suffix.lower() in self.COMPRESSION:
            compression = filepath.suffix.lower()[1:]

        size = filepath.stat().st_size

        # Roughly 11 bytes per text record ("xxxxxxxx t\n"). Compressed size
        # says nothing reliable about the record count.
        estimated = None if compression else size // 11

        return TraceInfo(
            path=str(filepath),
            format=self.format_name,
            compression=compression,
            size_bytes=size,
            estimated_branches=estimated
        )


def create_sample_trace(filepath: Union[str, Path],
                        num_branches: int = 10000,
                        pattern: str = 'random',
                        seed: Optional[int] = None) -> None:
    """
    Create a sample trace file for testing.

    Args:
        filepath: Output path
        num_branches: Number of branches to generate
        pattern: Pattern type ('random', 'loop', 'biased')
        seed: Random seed for reproducible traces
    """
    rng = random.Random(seed)
    filepath = Path(filepath)

    open_func = TraceParser.COMPRESSION.get(filepath.suffix.lower(), open)

    with open_func(filepath, 'wt') as f:
        f.write("# Sample branch trace\n")
        f.write("# Format: PC OUTCOME\n")

        pc = 0x400000

        for i in range(num_branches):
            if pattern == 'loop':
                # Loop pattern: mostly taken, occasionally not
                taken = (i % 10) != 9
            elif pattern == 'biased':
                # Biased: 80% taken
                taken = rng.random() > 0.2
            else:
                taken = rng.random() > 0.5

            outcome = 't' if taken else 'n'
            f.write(f"{pc:x} {outcome}\n")

            # Advance PC
            pc += 4

            # Occasional jumps
            if i % 100 == 0:
                pc = 0x400000 + rng.randint(0, 0x4000) * 4
