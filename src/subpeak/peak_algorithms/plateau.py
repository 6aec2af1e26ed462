from __future__ import annotations

"""
plateau.py
==========

Center estimation for flat-topped peaks.

A flat top has no well-defined sub-sample vertex, so the reported position is
the integer midpoint of the run of equal samples that ends at the global
maximum. Runs of ``2 * error_range`` samples or more are rejected as
malformed (clipping, saturation or corrupted data).
"""

from typing import Sequence

import numpy as np

from subpeak.peak_core.errors import MalformedPlateauError
from subpeak.peak_core.model import DEFAULT_ERROR_RANGE, validate_error_range


def plateau_left_edge(right_edge: int, signal: Sequence[int], max_width: int) -> int:
    """
    Walk left from `right_edge` over samples equal to ``signal[right_edge]``.

    Returns the index of the first sample of the run. Raises
    MalformedPlateauError as soon as the run reaches `max_width` samples.
    """
    arr = np.asarray(signal)
    if not 0 <= right_edge < arr.size:
        raise IndexError(f"right_edge {right_edge} outside signal of length {arr.size}")
    top = arr[right_edge]

    p = right_edge
    while p >= 0 and arr[p] == top:
        width = right_edge - p + 1
        if width >= max_width:
            raise MalformedPlateauError(
                f"Flat top at index {right_edge} spans at least {width} samples "
                f"(limit is fewer than {max_width})"
            )
        p -= 1
    return p + 1


def locate_plateau_center(
    right_edge: int,
    signal: Sequence[int],
    error_range: int = DEFAULT_ERROR_RANGE,
) -> int:
    """Return the integer midpoint of the plateau whose last sample is `right_edge`."""
    error_range = validate_error_range(error_range)
    left_edge = plateau_left_edge(right_edge, signal, 2 * error_range)
    return (right_edge - left_edge) // 2 + left_edge


__all__ = ["plateau_left_edge", "locate_plateau_center"]
