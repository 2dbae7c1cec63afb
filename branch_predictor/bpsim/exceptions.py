"""
Simulator Exceptions

Error types raised by the predictor engine and the trace reader.
"""

from typing import Optional


class BPSimError(Exception):
    """Base class for all simulator errors."""


class ConfigurationError(BPSimError, ValueError):
    """Invalid predictor configuration, raised before any trace is read."""


class TraceFormatError(BPSimError, ValueError):
    """A trace line that cannot be turned into a branch record."""

    def __init__(self, message: str, path: Optional[str] = None,
                 line_number: Optional[int] = None, line: Optional[str] = None):
        self.path = path
        self.line_number = line_number
        self.line = line

        location = ""
        if path is not None:
            location = f"{path}:"
        if line_number is not None:
            location += f"{line_number}:"
        if location:
            message = f"{location} {message}"
        super().__init__(message)
