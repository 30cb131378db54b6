"""Errors raised by the cleanse pipeline.

Only structural problems are errors. Dirty field content is repaired by the
sanitizer and never raises.
"""

from __future__ import annotations


class CleanseError(Exception):
    """Base error for this package."""


class DialectError(CleanseError, ValueError):
    """Raised when a dialect setting cannot describe a delimited format."""


class ParseError(CleanseError):
    """Raised when the input does not conform to the configured dialect."""

    def __init__(self, message: str, record_number: int | None = None) -> None:
        self.record_number = record_number
        if record_number is not None:
            message = f"record {record_number}: {message}"
        super().__init__(message)
