"""Record Writer: serialize sanitized records back into the dialect."""

from __future__ import annotations

import csv
import io
from typing import BinaryIO

from cleanse.dialect import Dialect

OUTPUT_ENCODING = "utf-8"
CARRIAGE_RETURN = b"\r"


class RecordWriter:
    """Write records of UTF-8 field bytes to a binary sink.

    Quoting follows the dialect, so a field is only quoted when the dialect
    quotes everything or when its content needs it. The sink is flushed but
    never closed; its owner closes it.
    """

    def __init__(self, sink: BinaryIO, dialect: Dialect) -> None:
        self.dialect = dialect
        self._text = io.TextIOWrapper(sink, encoding=OUTPUT_ENCODING, newline="")
        kwargs = dialect.csv_kwargs()
        self._writer = csv.writer(self._text, **kwargs)
        # Bare carriage returns are line breaks to the reader but are not
        # quoted by every csv.writer when the terminator is "\n".
        kwargs["quoting"] = csv.QUOTE_ALL
        self._quote_all_writer = csv.writer(self._text, **kwargs)

    def write_record(self, fields: list[bytes]) -> None:
        row = [value.decode(OUTPUT_ENCODING) for value in fields]
        if any(CARRIAGE_RETURN in value for value in fields):
            self._quote_all_writer.writerow(row)
        else:
            self._writer.writerow(row)

    def flush(self) -> None:
        self._text.flush()

    def close(self) -> None:
        """Flush pending output and release the sink."""
        if self._text is None:
            return
        text, self._text = self._text, None
        text.detach()

    def __enter__(self) -> RecordWriter:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
