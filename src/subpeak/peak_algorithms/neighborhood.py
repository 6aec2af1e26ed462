from __future__ import annotations

"""Bounded local-maximum scan used to detect competing peaks near the global maximum."""

from typing import Optional, Sequence

import numpy as np

from subpeak.peak_core.model import PeakPoint


def scan_local_maximum(
    range_start: int, range_end: int, signal: Sequence[int]
) -> Optional[PeakPoint]:
    """
    Return the strict local peak inside ``signal[range_start:range_end + 1]``.

    The maximum of the inclusive range is searched with a strict comparison,
    so among equal values the earliest index is kept. It is reported only if
    it is strictly greater than both of its neighbours in the full signal;
    a neighbour beyond either end of the signal never blocks it.

    Returns None when either bound falls outside the signal, when the range
    is empty, or when the range maximum is not a strict local peak.
    """
    arr = np.asarray(signal)
    n = arr.size
    if not (0 <= range_start < n and 0 <= range_end < n):
        return None
    if range_start > range_end:
        return None

    # argmax returns the first occurrence on ties
    k = range_start + int(np.argmax(arr[range_start : range_end + 1]))
    value = int(arr[k])

    if k > 0 and not int(arr[k - 1]) < value:
        return None
    if k < n - 1 and not int(arr[k + 1]) < value:
        return None
    return PeakPoint(index=k, value=value)


__all__ = ["scan_local_maximum"]
