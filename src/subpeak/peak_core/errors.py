from __future__ import annotations

"""
errors.py
=========

Exception taxonomy raised by the peak localization routines.

Every error derives from `PeakLocatorError` (itself a `ValueError`), so a
caller can either handle one kind precisely or catch the whole family. Each
class carries a short, stable `kind` string that batch writers store in the
output file instead of the full message.
"""


class PeakLocatorError(ValueError):
    """Base class for all peak localization failures."""

    kind = "peak_locator_error"


class InsufficientDataError(PeakLocatorError):
    """Raised when a signal holds fewer than three samples."""

    kind = "insufficient_data"


class MalformedPlateauError(PeakLocatorError):
    """
    Raised when a flat top spans at least ``2 * error_range`` samples.

    A plateau that wide does not look like a genuine peak top (typically
    clipping or a data error). The caller may retry with a larger
    ``error_range`` or reject the signal.
    """

    kind = "malformed_plateau"


class DegenerateFitError(PeakLocatorError):
    """Raised when the three interpolation samples admit no parabola vertex."""

    kind = "degenerate_fit"


class InvalidSignalError(PeakLocatorError):
    """Raised when the input is not a one-dimensional integer sequence."""

    kind = "invalid_signal"


__all__ = [
    "PeakLocatorError",
    "InsufficientDataError",
    "MalformedPlateauError",
    "DegenerateFitError",
    "InvalidSignalError",
]
