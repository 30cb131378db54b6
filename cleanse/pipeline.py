"""Streaming cleanse pipeline: read, sanitize, write, audit, one record at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO

from cleanse.audit import AuditEntry, AuditReporter
from cleanse.dialect import Dialect
from cleanse.records import iter_fields, read_records
from cleanse.sanitizer import sanitize_field
from cleanse.writer import RecordWriter

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 500000


@dataclass
class CleanseStats:
    """Counts for one run."""

    records: int = 0
    fields: int = 0
    repaired_fields: int = 0


def cleanse(
    source: BinaryIO,
    sink: BinaryIO,
    dialect: Dialect,
    reporter: AuditReporter | None = None,
    start: int = 1,
) -> CleanseStats:
    """Sanitize every field of ``source`` and write the records to ``sink``.

    Each record is written before its audit entries are reported, and the
    next record is not read until both are done. ParseError and OSError
    propagate; whatever was already written stays written.
    """
    reporter = reporter or AuditReporter()
    stats = CleanseStats()

    with RecordWriter(sink, dialect) as writer:
        for record_number, values in read_records(source, dialect, start=start):
            repaired: list[bytes] = []
            entries: list[AuditEntry] = []
            for field in iter_fields(record_number, values, start=start):
                clean, entry = sanitize_field(field, dialect)
                repaired.append(clean.value)
                if entry is not None:
                    entries.append(entry)

            writer.write_record(repaired)
            for entry in entries:
                reporter.emit(entry)

            stats.records += 1
            stats.fields += len(repaired)
            stats.repaired_fields += len(entries)
            if stats.records % PROGRESS_INTERVAL == 0:
                logger.info(f"  {stats.records:,} records...")

    return stats
