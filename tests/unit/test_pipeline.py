"""Unit tests for cleanse/pipeline.py."""

from __future__ import annotations

import io
import logging

import pytest

from cleanse.audit import AuditReporter
from cleanse.dialect import Dialect
from cleanse.errors import ParseError
from cleanse.pipeline import CleanseStats, cleanse
from cleanse.records import read_records

DIRTY_INPUTS = [
    b'a,b,c,d\n1,"2,3",4,5\nthis,is,"a\nvery gross",li\xffe\n',
    b'"x,\ny\xfe",,\n\xc3\xa9,"q""",\n',
    b'"\n\n",",,,",\xff\xff\xff\n',
    b"clean,data\nonly,here\n",
    b"",
]


def _run(data: bytes, dialect: Dialect | None = None, **kwargs) -> tuple[bytes, CleanseStats]:
    sink = io.BytesIO()
    stats = cleanse(io.BytesIO(data), sink, dialect or Dialect(), **kwargs)
    return sink.getvalue(), stats


def _parse(data: bytes, dialect: Dialect | None = None) -> list[list[bytes]]:
    return [fields for _, fields in read_records(io.BytesIO(data), dialect or Dialect())]


class TestCleanse:
    """End-to-end behaviour of the streaming pipeline."""

    def test_sample(self, sample_input: bytes, sample_output: bytes) -> None:
        output, stats = _run(sample_input)
        assert output == sample_output
        assert stats == CleanseStats(records=3, fields=12, repaired_fields=3)

    def test_audit_lines(self, sample_input: bytes, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="cleanse.audit"):
            _run(sample_input)
        messages = [r.message for r in caplog.records if r.name == "cleanse.audit"]
        assert messages == [
            "Record number 2, field number 2: [DelimiterReplacement]",
            "Record number 3, field number 3: [TerminatorReplacement]",
            "Record number 3, field number 4: [FixedEncoding]",
        ]

    def test_reporter_counts_entries(self, sample_input: bytes) -> None:
        reporter = AuditReporter()
        _run(sample_input, reporter=reporter)
        assert reporter.count == 3

    def test_start_index(self, sample_input: bytes, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="cleanse.audit"):
            _run(sample_input, start=0)
        messages = [r.message for r in caplog.records if r.name == "cleanse.audit"]
        assert messages[0] == "Record number 1, field number 1: [DelimiterReplacement]"

    def test_tab_dialect(self) -> None:
        output, _ = _run(b'a,b\t"c\td"\n', Dialect(delimiter=b"\t"))
        assert output == b"a,b\tc d\n"

    def test_nul_byte_passes_through(self) -> None:
        output, stats = _run(b"a,b\x00c\n")
        assert output == b"a,b\x00c\n"
        assert stats.repaired_fields == 0

    def test_quote_all_output(self) -> None:
        output, _ = _run(b'a,"b\nc"\n', Dialect(quoting="all"))
        assert output == b'"a","b c"\n'

    def test_parse_error_keeps_earlier_records(self) -> None:
        sink = io.BytesIO()
        with pytest.raises(ParseError) as exc_info:
            cleanse(io.BytesIO(b'a,b\nc,"d\n'), sink, Dialect())
        assert exc_info.value.record_number == 2
        assert sink.getvalue() == b"a,b\n"

    def test_progress_logged(self, caplog, monkeypatch) -> None:
        monkeypatch.setattr("cleanse.pipeline.PROGRESS_INTERVAL", 2)
        with caplog.at_level(logging.INFO, logger="cleanse.pipeline"):
            _run(b"a\nb\nc\nd\n")
        progress = [r.message for r in caplog.records if r.name == "cleanse.pipeline"]
        assert progress == ["  2 records...", "  4 records..."]


class TestProperties:
    """Invariants that hold for any parseable input."""

    @pytest.mark.parametrize("data", DIRTY_INPUTS)
    def test_output_fields_are_clean(self, data: bytes) -> None:
        output, _ = _run(data)
        for fields in _parse(output):
            for value in fields:
                assert b"," not in value
                assert b"\n" not in value
                value.decode("utf-8")

    @pytest.mark.parametrize("data", DIRTY_INPUTS)
    def test_idempotent(self, data: bytes, caplog) -> None:
        once, _ = _run(data)
        with caplog.at_level(logging.INFO, logger="cleanse.audit"):
            twice, stats = _run(once)
        assert twice == once
        assert stats.repaired_fields == 0
        assert not [r for r in caplog.records if r.name == "cleanse.audit"]

    @pytest.mark.parametrize("data", DIRTY_INPUTS)
    def test_structure_preserved(self, data: bytes) -> None:
        output, _ = _run(data)
        before = _parse(data)
        after = _parse(output)
        assert [len(fields) for fields in after] == [len(fields) for fields in before]

    @pytest.mark.parametrize("data", DIRTY_INPUTS)
    def test_audit_completeness(self, data: bytes) -> None:
        output, stats = _run(data)
        changed = sum(
            old != new
            for old_fields, new_fields in zip(_parse(data), _parse(output))
            for old, new in zip(old_fields, new_fields)
        )
        assert stats.repaired_fields == changed

    def test_large_input(self) -> None:
        data = b'id,"note,with comma"\n' * 100000
        output, stats = _run(data)
        assert stats.records == 100000
        assert stats.repaired_fields == 100000
        assert output == b"id,note with comma\n" * 100000
