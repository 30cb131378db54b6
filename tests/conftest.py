"""Shared fixtures for unit and E2E tests.

``SAMPLE_INPUT`` is a small comma-delimited file with one field of each kind
of defect: a quoted delimiter, a quoted newline and an invalid UTF-8 byte.
"""

from __future__ import annotations

from pathlib import Path

import pytest

SAMPLE_INPUT = b'a,b,c,d\n1,"2,3",4,5\nthis,is,"a\nvery gross",li\xffe\n'

SAMPLE_OUTPUT = "a,b,c,d\n1,2 3,4,5\nthis,is,a very gross,li\ufffde\n".encode("utf-8")

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture()
def sample_csv(tmp_path: Path) -> Path:
    """Write SAMPLE_INPUT to a temporary file and return its path."""
    path = tmp_path / "input.csv"
    path.write_bytes(SAMPLE_INPUT)
    return path


@pytest.fixture()
def dirty_tsv() -> Path:
    """Path to the checked-in tab-delimited fixture with dirty fields."""
    return FIXTURES_DIR / "dirty.tsv"


@pytest.fixture()
def sample_input() -> bytes:
    return SAMPLE_INPUT


@pytest.fixture()
def sample_output() -> bytes:
    return SAMPLE_OUTPUT
