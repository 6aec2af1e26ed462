from __future__ import annotations

"""
locator.py
==========

Top-level peak localization: find the dominant peak of an integer signal and
report its position in (possibly fractional) sample units.

Algorithm
---------
1) Reject signals shorter than three samples.
2) Find the global maximum. Ties go to the **last** occurrence (``>=`` scan),
   whereas the neighbourhood scan keeps the **first** occurrence (``>``).
   Both rules are kept as they are: unifying them changes results on tied
   inputs.
3) Classify the maximum and refine it:

   - ``FLAT_TOP``: the left neighbour equals the maximum. The integer center
     of the plateau is returned (no interpolation).
   - ``BOUNDARY``: the maximum is the first or last sample. Its index is
     returned as is.
   - Otherwise look for strict local peaks within ``error_range`` samples on
     each side of the maximum:

     * ``ISOLATED``: none found. Interpolate over the maximum and its two
       immediate neighbours.
     * ``SYMMETRIC_AMBIGUITY``: one on each side, of equal value. The shape
       says nothing about the sub-sample location, so the integer index is
       returned.
     * ``ASYMMETRIC_AMBIGUITY``: otherwise. The interpolation triple is
       widened toward the side with the larger competing peak: that peak's
       index becomes one endpoint, the maximum's immediate neighbour on the
       opposite side the other.

Errors (`InsufficientDataError`, `MalformedPlateauError`,
`DegenerateFitError`, `InvalidSignalError`) propagate to the caller; use
`try_locate_peak` / `locate_many` to get them back as values instead.
"""

import numbers
from typing import Iterable, List, Optional, Sequence

import numpy as np

from subpeak.peak_core.errors import (
    InsufficientDataError,
    InvalidSignalError,
    PeakLocatorError,
)
from subpeak.peak_core.model import (
    DEFAULT_ERROR_RANGE,
    LocateOutcome,
    PeakEstimate,
    PeakPoint,
    PeakShape,
    SignalRecord,
    validate_error_range,
)
from .neighborhood import scan_local_maximum
from .parabola import interpolate_vertex
from .plateau import locate_plateau_center

MIN_SIGNAL_LENGTH = 3


def as_signal(signal: Sequence[int]) -> np.ndarray:
    """Validate `signal` and return it as a 1-D integer numpy array."""
    arr = np.asarray(signal)
    if arr.ndim != 1:
        raise InvalidSignalError(f"Signal must be one-dimensional, got shape {arr.shape}")
    if arr.size < MIN_SIGNAL_LENGTH:
        raise InsufficientDataError(
            f"Signal has {arr.size} samples; at least {MIN_SIGNAL_LENGTH} are "
            "needed to determine the peak"
        )
    if arr.dtype == object and all(
        isinstance(v, numbers.Integral) and not isinstance(v, bool) for v in arr
    ):
        raise InvalidSignalError(
            "Signal samples are outside the supported integer range (int64)"
        )
    if not np.issubdtype(arr.dtype, np.integer):
        raise InvalidSignalError(f"Signal samples must be integers, got dtype {arr.dtype}")
    return arr


def global_maximum(signal: np.ndarray) -> PeakPoint:
    """Maximum sample of `signal`; the last index wins among equal maxima."""
    last = signal.size - 1 - int(np.argmax(signal[::-1]))
    return PeakPoint(index=last, value=int(signal[last]))


def _competitor_value(point: Optional[PeakPoint]) -> float:
    return float("-inf") if point is None else float(point.value)


def locate_peak(
    signal: Sequence[int], error_range: int = DEFAULT_ERROR_RANGE
) -> PeakEstimate:
    """Locate the dominant peak of `signal` and classify its shape."""
    error_range = validate_error_range(error_range)
    arr = as_signal(signal)
    peak = global_maximum(arr)
    i = peak.index
    last = arr.size - 1

    # index 0 has no left neighbour, so it can never be a flat top's right edge
    if i > 0 and int(arr[i - 1]) == peak.value:
        center = locate_plateau_center(i, arr, error_range)
        return PeakEstimate(float(center), PeakShape.FLAT_TOP, peak)

    if i == 0 or i == last:
        return PeakEstimate(float(i), PeakShape.BOUNDARY, peak)

    left = scan_local_maximum(i - error_range, i - 1, arr)
    right = scan_local_maximum(i + 1, i + error_range, arr)

    if left is None and right is None:
        position = interpolate_vertex(i - 1, i, i + 1, arr)
        return PeakEstimate(position, PeakShape.ISOLATED, peak)

    if left is not None and right is not None and left.value == right.value:
        return PeakEstimate(float(i), PeakShape.SYMMETRIC_AMBIGUITY, peak)

    if _competitor_value(left) > _competitor_value(right):
        position = interpolate_vertex(left.index, i, i + 1, arr)
    else:
        position = interpolate_vertex(i - 1, i, right.index, arr)
    return PeakEstimate(position, PeakShape.ASYMMETRIC_AMBIGUITY, peak)


def locate_peak_position(
    signal: Sequence[int], error_range: int = DEFAULT_ERROR_RANGE
) -> float:
    """Peak position of `signal` in sample units."""
    return locate_peak(signal, error_range).position


def try_locate_peak(
    signal: Sequence[int],
    error_range: int = DEFAULT_ERROR_RANGE,
    signal_id: str = "",
) -> LocateOutcome:
    """Like `locate_peak`, but return localization errors as a value."""
    try:
        estimate = locate_peak(signal, error_range)
    except PeakLocatorError as e:
        return LocateOutcome(signal_id=signal_id, error=e)
    return LocateOutcome(signal_id=signal_id, estimate=estimate)


def locate_many(
    records: Iterable[SignalRecord], error_range: int = DEFAULT_ERROR_RANGE
) -> List[LocateOutcome]:
    """One independent outcome per record; a failing signal never stops the batch."""
    error_range = validate_error_range(error_range)
    return [
        try_locate_peak(r.samples, error_range, signal_id=r.signal_id)
        for r in records
    ]


__all__ = [
    "MIN_SIGNAL_LENGTH",
    "as_signal",
    "global_maximum",
    "locate_peak",
    "locate_peak_position",
    "try_locate_peak",
    "locate_many",
]
