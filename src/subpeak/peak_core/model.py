from __future__ import annotations

"""
model.py
========
Minimal data models shared across the peak localization routines.

All values are immutable: routines build new instances instead of updating
one object in place. Absence of a peak is expressed as ``None`` rather than a
sentinel index.
"""

import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .errors import PeakLocatorError


DEFAULT_ERROR_RANGE = 3


# A candidate extremum: sample index plus sample value.
@dataclass(frozen=True)
class PeakPoint:
    # 0-based index into the signal.
    index: int
    # Sample value at that index.
    value: int


class PeakShape(str, Enum):
    """Shape class of the global maximum, deciding how it is refined."""

    FLAT_TOP = "flat_top"
    BOUNDARY = "boundary"
    ISOLATED = "isolated"
    SYMMETRIC_AMBIGUITY = "symmetric_ambiguity"
    ASYMMETRIC_AMBIGUITY = "asymmetric_ambiguity"


# Result of a successful localization.
@dataclass(frozen=True)
class PeakEstimate:
    # Peak position in sample units (may be fractional).
    position: float
    # Classification that produced the position.
    shape: PeakShape
    # Global maximum the estimate was derived from.
    peak: PeakPoint

    @property
    def is_refined(self) -> bool:
        """True when the position comes from parabolic interpolation."""
        return self.shape in (PeakShape.ISOLATED, PeakShape.ASYMMETRIC_AMBIGUITY)


# Result-or-error value for one signal of a batch.
@dataclass(frozen=True)
class LocateOutcome:
    signal_id: str
    estimate: Optional[PeakEstimate] = None
    error: Optional[PeakLocatorError] = None

    def __post_init__(self) -> None:
        if (self.estimate is None) == (self.error is None):
            raise ValueError("LocateOutcome needs exactly one of estimate or error")

    @property
    def ok(self) -> bool:
        return self.estimate is not None


# Tunables of the localization routines.
@dataclass(frozen=True)
class LocatorConfig:
    # Maximum plateau half-width and competing-peak search radius (samples).
    error_range: int = DEFAULT_ERROR_RANGE

    def __post_init__(self) -> None:
        validate_error_range(self.error_range)


# One named input signal, as read from a signals TSV.
@dataclass(frozen=True)
class SignalRecord:
    signal_id: str
    samples: Tuple[int, ...]


def validate_error_range(error_range: int) -> int:
    """Return `error_range` unchanged, or raise ValueError if it is not a positive int."""
    if isinstance(error_range, bool) or not isinstance(error_range, numbers.Integral):
        raise ValueError(f"error_range must be an int, got {error_range!r}")
    if error_range <= 0:
        raise ValueError(f"error_range must be > 0, got {error_range}")
    return int(error_range)


__all__ = [
    "DEFAULT_ERROR_RANGE",
    "PeakPoint",
    "PeakShape",
    "PeakEstimate",
    "LocateOutcome",
    "LocatorConfig",
    "SignalRecord",
    "validate_error_range",
]
