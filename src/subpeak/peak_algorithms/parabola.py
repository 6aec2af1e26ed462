from __future__ import annotations

"""
parabola.py
===========

Three-point parabolic (quadratic) interpolation of a peak vertex.

The three samples are placed at abscissas -1, 0 and +1 whatever their real
index spacing, and the unique parabola ``y = a*x**2 + b*x + c`` through them
is solved in closed form:

    c = y1
    b = (y2 - y0) / 2
    a = y0 - c + b

The vertex lies at ``x = -b / (2a)`` relative to the center sample. When
``a == 0`` the three points are colinear and there is no vertex; this raises
`DegenerateFitError` instead of returning an infinite or NaN position.
"""

from typing import Sequence, Tuple

from subpeak.peak_core.errors import DegenerateFitError


def parabola_coefficients(y0: float, y1: float, y2: float) -> Tuple[float, float, float]:
    """Return ``(a, b, c)`` of the parabola through (-1, y0), (0, y1), (1, y2)."""
    c = float(y1)
    b = (float(y2) - float(y0)) / 2.0
    a = float(y0) - c + b
    return a, b, c


def vertex_offset(y0: float, y1: float, y2: float) -> float:
    """Vertex abscissa relative to the center sample."""
    a, b, _ = parabola_coefficients(y0, y1, y2)
    if a == 0.0:
        raise DegenerateFitError(
            f"Samples ({y0}, {y1}, {y2}) are colinear; the parabola has no vertex"
        )
    return -b / (2.0 * a)


def interpolate_vertex(
    left_index: int,
    center_index: int,
    right_index: int,
    signal: Sequence[int],
) -> float:
    """Sub-sample peak position from the samples at the three given indices."""
    offset = vertex_offset(
        signal[left_index], signal[center_index], signal[right_index]
    )
    return center_index + offset


__all__ = ["parabola_coefficients", "vertex_offset", "interpolate_vertex"]
