"""Field Sanitizer: repair one field so it cannot break record structure.

Each rule is a pure bytes -> bytes step. Rules run in a fixed order and
every rule always runs, so a field can collect all three repair kinds.
Delimiter and newline replacement work on the literal bytes before the
UTF-8 check, since the field may not yet decode as text.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from functools import lru_cache, partial

from cleanse.audit import AuditEntry
from cleanse.dialect import Dialect
from cleanse.records import Field

REPLACEMENT_BYTE = b" "


class RepairKind(enum.Enum):
    """Which repair rule changed a field."""

    DelimiterReplacement = "DelimiterReplacement"
    TerminatorReplacement = "TerminatorReplacement"
    FixedEncoding = "FixedEncoding"

    def __str__(self) -> str:
        return self.value


def replace_byte(value: bytes, target: bytes) -> bytes:
    return value.replace(target, REPLACEMENT_BYTE)


def fix_encoding(value: bytes) -> bytes:
    """Replace malformed UTF-8 sequences with U+FFFD."""
    try:
        value.decode("utf-8")
    except UnicodeDecodeError:
        return value.decode("utf-8", errors="replace").encode("utf-8")
    return value


@lru_cache(maxsize=None)
def build_rules(
    delimiter: bytes, terminator: bytes
) -> tuple[tuple[RepairKind, Callable[[bytes], bytes]], ...]:
    """The repair rules in the order they must be checked."""
    return (
        (RepairKind.DelimiterReplacement, partial(replace_byte, target=delimiter)),
        (RepairKind.TerminatorReplacement, partial(replace_byte, target=terminator)),
        (RepairKind.FixedEncoding, fix_encoding),
    )


def sanitize(
    value: bytes, delimiter: bytes = b",", terminator: bytes = b"\n"
) -> tuple[bytes, list[RepairKind]]:
    """Repair a field value and report which rules changed it.

    Returns the repaired bytes (always valid UTF-8) and the repair kinds
    applied, in rule order. Never raises.
    """
    applied: list[RepairKind] = []
    for kind, rule in build_rules(delimiter, terminator):
        repaired = rule(value)
        if repaired != value:
            applied.append(kind)
        value = repaired
    return value, applied


def sanitize_field(field: Field, dialect: Dialect) -> tuple[Field, AuditEntry | None]:
    """Sanitize a positioned field with the dialect's delimiter and terminator.

    The audit entry is None when no rule changed the field.
    """
    value, applied = sanitize(field.value, dialect.delimiter, dialect.terminator)
    entry = None
    if applied:
        entry = AuditEntry(field.record_number, field.field_number, tuple(applied))
    return Field(field.record_number, field.field_number, value), entry
