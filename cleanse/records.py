"""Record Reader: parse a delimited byte stream into numbered records.

The standard csv module only parses text, so the byte stream is viewed
through latin-1, which maps every byte to exactly one code point and back.
Field values come out as the original bytes, including delimiters and
newlines protected by quoting and any invalid UTF-8.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

from cleanse.dialect import Dialect
from cleanse.errors import ParseError

# Byte-transparent text view of the input.
TRANSPARENT_ENCODING = "latin-1"


@dataclass(frozen=True)
class Field:
    """One cell of a record, with its 1-based position."""

    record_number: int
    field_number: int
    value: bytes


def read_records(
    stream: BinaryIO, dialect: Dialect, start: int = 1
) -> Iterator[tuple[int, list[bytes]]]:
    """Yield (record_number, field values) for each record in the stream.

    Records are numbered from ``start``. Raises ParseError when the input
    breaks the dialect's quoting rules (e.g. an unterminated quoted field).
    The stream is left open.
    """
    text = io.TextIOWrapper(stream, encoding=TRANSPARENT_ENCODING, newline="")
    reader = csv.reader(text, **dialect.csv_kwargs())
    record_number = start - 1
    try:
        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                raise ParseError(str(e), record_number + 1) from e
            record_number += 1
            yield record_number, [value.encode(TRANSPARENT_ENCODING) for value in row]
    finally:
        text.detach()


def iter_fields(record_number: int, values: list[bytes], start: int = 1) -> Iterator[Field]:
    """Attach positions to the values of one record."""
    for field_number, value in enumerate(values, start=start):
        yield Field(record_number, field_number, value)
