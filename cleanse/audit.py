"""Audit Reporter: one log line per repaired field."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cleanse.sanitizer import RepairKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditEntry:
    """The repairs applied to one field, in the order the rules were checked."""

    record_number: int
    field_number: int
    kinds: tuple[RepairKind, ...]

    def message(self) -> str:
        kinds = ", ".join(str(kind) for kind in self.kinds)
        return f"Record number {self.record_number}, field number {self.field_number}: [{kinds}]"


class AuditReporter:
    """Emit audit entries immediately, in the order they are reported."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger
        self.count = 0

    def report(self, record_number: int, field_number: int, kinds: Sequence[RepairKind]) -> None:
        """Log one repaired field. Callers only report fields that changed."""
        self.emit(AuditEntry(record_number, field_number, tuple(kinds)))

    def emit(self, entry: AuditEntry) -> None:
        self.log.info(entry.message())
        self.count += 1
