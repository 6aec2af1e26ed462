from __future__ import annotations
import re
import pytest

from subpeak.peak_core.model import (
    LocateOutcome,
    PeakEstimate,
    PeakPoint,
    PeakShape,
)
from subpeak.peak_core.errors import MalformedPlateauError
from subpeak.peak_io.tsv import PositionsMetadata

# ---------- Shared fixtures ----------


@pytest.fixture
def md() -> PositionsMetadata:
    """Provide a fixed PositionsMetadata object for reproducible tests."""
    return PositionsMetadata(
        software_version="0.1.0",
        error_range=3,
        created_at_iso="2026-10-19T09:00:00Z",
    )


@pytest.fixture
def ok_outcome() -> LocateOutcome:
    """A successful, interpolated outcome."""
    return LocateOutcome(
        signal_id="isolated",
        estimate=PeakEstimate(
            position=5.0 + 1.0 / 3.0,
            shape=PeakShape.ISOLATED,
            peak=PeakPoint(index=5, value=10),
        ),
    )


@pytest.fixture
def failed_outcome() -> LocateOutcome:
    """A failed outcome (plateau too wide)."""
    return LocateOutcome(
        signal_id="clipped",
        error=MalformedPlateauError("Flat top too wide"),
    )


@pytest.fixture
def POS_4DEC_RE():
    """Regex for floats with exactly 4 decimals."""
    return re.compile(r"^-?\d+\.\d{4}$")


@pytest.fixture
def parse_noncomment_header_and_rows():
    """Return first non-comment header and data rows from TSV text."""

    def _parser(text: str) -> tuple[str, list[str]]:
        lines = [ln.rstrip("\r\n") for ln in text.splitlines()]
        header = None
        rows: list[str] = []
        for ln in lines:
            stripped = ln.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if header is None:
                header = stripped
            else:
                rows.append(stripped)
        if header is None:
            raise AssertionError("no header found in provided text")
        return header, rows

    return _parser

