"""Delimited-text dialect settings shared by the reader and the writer."""

from __future__ import annotations

import csv
from dataclasses import dataclass

from cleanse.errors import DialectError

QUOTING_MODES = {
    "minimal": csv.QUOTE_MINIMAL,
    "all": csv.QUOTE_ALL,
}

# Spellings accepted for characters that are awkward to pass on a command line.
NAMED_BYTES = {
    "\\t": b"\t",
    "tab": b"\t",
    "comma": b",",
    "pipe": b"|",
    "semicolon": b";",
}


def parse_byte(value: str | bytes, name: str) -> bytes:
    """Convert a user-supplied character setting into a single ASCII byte."""
    if isinstance(value, str):
        value = NAMED_BYTES.get(value, None) or value.encode("utf-8")
    if len(value) != 1:
        raise DialectError(f"{name} must be a single byte, got {value!r}")
    if value[0] > 0x7F:
        raise DialectError(f"{name} must be an ASCII byte, got {value!r}")
    return value


@dataclass(frozen=True)
class Dialect:
    """How a byte stream maps to records and fields.

    The same instance configures both the reader and the writer, so whatever
    the writer emits the reader parses back into the same fields.
    """

    delimiter: bytes = b","
    quotechar: bytes = b'"'
    escapechar: bytes | None = None
    doublequote: bool = True
    terminator: bytes = b"\n"
    quoting: str = "minimal"

    def __post_init__(self) -> None:
        parse_byte(self.delimiter, "delimiter")
        parse_byte(self.quotechar, "quotechar")
        if self.escapechar is not None:
            parse_byte(self.escapechar, "escapechar")
        if self.terminator != b"\n":
            raise DialectError(f"terminator must be a newline, got {self.terminator!r}")
        if self.delimiter in (b"\n", b"\r"):
            raise DialectError("delimiter cannot be a line break")
        if self.delimiter == b" ":
            raise DialectError("delimiter cannot be a space")
        if self.delimiter == self.quotechar:
            raise DialectError("delimiter and quotechar must differ")
        if self.delimiter == self.escapechar:
            raise DialectError("delimiter and escapechar must differ")
        if self.escapechar == self.quotechar:
            raise DialectError("quotechar and escapechar must differ")
        if not self.doublequote and self.escapechar is None:
            raise DialectError("an escapechar is required when doublequote is off")
        if self.quoting not in QUOTING_MODES:
            raise DialectError(
                f"quoting must be one of {sorted(QUOTING_MODES)}, got {self.quoting!r}"
            )

    @classmethod
    def from_options(
        cls,
        delimiter: str = ",",
        quotechar: str = '"',
        escapechar: str | None = None,
        doublequote: bool = True,
        quote_all: bool = False,
    ) -> Dialect:
        """Build a dialect from text settings such as command-line flags."""
        return cls(
            delimiter=parse_byte(delimiter, "delimiter"),
            quotechar=parse_byte(quotechar, "quotechar"),
            escapechar=parse_byte(escapechar, "escapechar") if escapechar else None,
            doublequote=doublequote,
            quoting="all" if quote_all else "minimal",
        )

    def csv_kwargs(self) -> dict:
        """Keyword arguments for csv.reader / csv.writer.

        All configured bytes are ASCII, so they decode to the same single
        character under latin-1 (reader side) and UTF-8 (writer side).
        """
        return {
            "delimiter": self.delimiter.decode("ascii"),
            "quotechar": self.quotechar.decode("ascii"),
            "escapechar": self.escapechar.decode("ascii") if self.escapechar else None,
            "doublequote": self.doublequote,
            "quoting": QUOTING_MODES[self.quoting],
            "lineterminator": self.terminator.decode("ascii"),
            "strict": True,
        }
