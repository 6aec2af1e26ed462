"""
peak_io.tsv
===========

Tab-separated input and output for batch peak localization.

What this module provides
-------------------------
- `read_signals_tsv(path)`: read named integer signals from a TSV file.
- `PositionsMetadata`: file-level metadata written as a commented header.
- `write_positions_tsv(path, metadata, outcomes, append=True)`: write or
  append one row per `LocateOutcome` using a fixed column schema.
- `SchemaMismatchError`: raised when appending to a file whose column header
  does not match the expected schema.

Input format
------------
Lines starting with '#' are comments. The header must contain the columns
``signal_id`` and ``samples``; ``samples`` holds comma-separated integers:

    signal_id	samples
    ramp	1,2,3,4,5,6,5,4,3,2
    clipped	1,2,3,4,5,10,10,10,3,2

Output format
-------------
1) A commented metadata block (software version, error range, creation time
   and a column dictionary).
2) One header line:
   signal_id, position, shape, peak_index, peak_value, error
3) One data row per outcome. ``position`` has exactly four decimals. Fields
   that do not apply (the estimate of a failed signal, the error of a
   successful one) are written as "NaN".

When appending, the on-disk header is validated first. When overwriting
(`append=False`) the file is written to ``path + ".tmp"`` and moved into place
with `os.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, TextIO
import math
import os

import pandas as pd

from subpeak.peak_core.model import LocateOutcome, SignalRecord, validate_error_range

__all__ = [
    "PositionsMetadata",
    "SchemaMismatchError",
    "read_signals_tsv",
    "parse_samples",
    "write_positions_tsv",
]


# =============================================================================
# Exceptions
# =============================================================================


class SchemaMismatchError(ValueError):
    """
    Raised when appending to an existing file whose column header line does not
    match the expected positions schema.

    The message includes the file path, the expected header and the found one.
    """

    pass


# =============================================================================
# Data models
# =============================================================================


@dataclass(frozen=True)
class PositionsMetadata:
    """
    Container for file-level metadata written as commented header lines.

    Attributes
    ----------
    software_version : str
        Software version string used to generate the file.
    error_range : int
        Plateau tolerance and competing-peak search radius used for the run.
    created_at_iso : Optional[str], default None
        ISO 8601 creation instant. If None, the current UTC time is used.
    """

    software_version: str
    error_range: int
    created_at_iso: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.software_version:
            raise ValueError("software_version must be a non-empty string")
        validate_error_range(self.error_range)


# =============================================================================
# Reading
# =============================================================================


def parse_samples(text: str, signal_id: str = "") -> tuple[int, ...]:
    """Parse a comma-separated list of integers."""
    tokens = [t.strip() for t in str(text).split(",")]
    if not any(tokens):
        raise ValueError(f"Signal '{signal_id}' has no samples")
    out: List[int] = []
    for pos, tok in enumerate(tokens):
        try:
            out.append(int(tok))
        except ValueError:
            raise ValueError(
                f"Signal '{signal_id}': sample {pos} is not an integer: {tok!r}"
            ) from None
    return tuple(out)


def read_signals_tsv(path: str) -> List[SignalRecord]:
    """
    Read named signals from a tab-separated file.

    Raises
    ------
    ValueError
        On missing columns, duplicate ids, or samples that are not integers.
    """
    df = pd.read_csv(
        path, sep="\t", comment="#", dtype=str, keep_default_na=False
    )
    df.columns = [c.strip() for c in df.columns]

    required = ["signal_id", "samples"]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(
            f"Missing required columns {missing} in '{path}'. "
            f"Found columns: {list(df.columns)}"
        )

    ids = df["signal_id"].str.strip()
    dups = sorted(set(ids[ids.duplicated()]))
    if dups:
        raise ValueError(f"Duplicate signal_id values in '{path}': {', '.join(dups)}")

    return [
        SignalRecord(signal_id=sid, samples=parse_samples(raw, sid))
        for sid, raw in zip(ids, df["samples"])
    ]


# =============================================================================
# Writing
# =============================================================================


def write_positions_tsv(
    path: str,
    metadata: PositionsMetadata,
    outcomes: Iterable[LocateOutcome],
    append: bool = True,
) -> None:
    """
    Write (or append) a positions TSV with a commented metadata block and a
    fixed column header.

    Raises
    ------
    SchemaMismatchError
        When appending to an existing file whose header does not match.
    ValueError
        If the existing file appears to contain no header line.
    """
    creating_new = not os.path.exists(path)

    if not append:
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", newline="") as f:
            _write_metadata_block(f, metadata)
            _write_column_header(f)
            for o in outcomes:
                f.write(_row_to_tsv(o))
        os.replace(tmp_path, path)
        return

    mode = "a" if not creating_new else "w"
    if not creating_new:
        _check_header_or_raise(path)
    with open(path, mode, newline="") as f:
        if creating_new:
            _write_metadata_block(f, metadata)
            _write_column_header(f)
        for o in outcomes:
            f.write(_row_to_tsv(o))


# =============================================================================
# Internal helpers
# =============================================================================


def _write_metadata_block(f: TextIO, md: PositionsMetadata) -> None:
    created = md.created_at_iso or datetime.now(timezone.utc).strftime(
        "%Y-%m-%dT%H:%M:%SZ"
    )
    f.write(f"# Error range: {md.error_range} samples\n")

    f.write("# signal_id: input signal identifier\n")
    f.write("# position: peak position, samples (0-based, may be fractional)\n")
    f.write("# shape: peak shape class used to derive the position\n")
    f.write("# peak_index: index of the global maximum sample\n")
    f.write("# peak_value: value of the global maximum sample\n")
    f.write("# error: error kind when localization failed\n")

    f.write(f"# Generated with software version: {md.software_version}\n")
    f.write(f"# Created at: {created}\n")
    f.write("\n")


def _write_column_header(f: TextIO) -> None:
    f.write("\t".join(_expected_columns()) + "\n")


def _fmt_4dec_or_nan(x: Optional[float]) -> str:
    if x is None or not math.isfinite(x):
        return "NaN"
    return f"{x:.4f}"


def _fmt_default_or_nan(x: Optional[object]) -> str:
    if x is None:
        return "NaN"
    return str(x)


def _row_to_tsv(o: LocateOutcome) -> str:
    """
    Convert an outcome to a TSV line.

    Successful outcomes fill position/shape/peak columns and leave `error` as
    NaN; failed ones do the opposite.
    """
    est = o.estimate
    fields = [
        o.signal_id,
        _fmt_4dec_or_nan(est.position if est else None),
        _fmt_default_or_nan(est.shape.value if est else None),
        _fmt_default_or_nan(est.peak.index if est else None),
        _fmt_default_or_nan(est.peak.value if est else None),
        _fmt_default_or_nan(o.error.kind if o.error is not None else None),
    ]
    return "\t".join(fields) + "\n"


def _expected_columns() -> list[str]:
    return ["signal_id", "position", "shape", "peak_index", "peak_value", "error"]


def _check_header_or_raise(path: str) -> None:
    """
    Ensure the existing file at `path` has the expected column schema.

    Comment lines and blank lines are skipped; the first remaining line is the
    header.
    """
    expected_cols = _expected_columns()
    expected_header = "\t".join(expected_cols)

    header_line: Optional[str] = None
    with open(path, "r", newline="") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            header_line = line
            break

    if header_line is None:
        raise ValueError(f"File '{path}' appears to contain no column header")

    if header_line.split("\t") != expected_cols:
        raise SchemaMismatchError(
            "Existing file schema does not match expected header.\n"
            f"Path:     {path}\n"
            f"Expected: {expected_header}\n"
            f"Found:    {header_line}\n"
            "Hint: If you intend to replace the file, "
            "call write_positions_tsv(..., append=False)."
        )
