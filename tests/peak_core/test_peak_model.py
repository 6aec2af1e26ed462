import dataclasses

import numpy as np
import pytest

from subpeak.peak_core.errors import (
    DegenerateFitError,
    InsufficientDataError,
    InvalidSignalError,
    MalformedPlateauError,
    PeakLocatorError,
)
from subpeak.peak_core.model import (
    LocateOutcome,
    LocatorConfig,
    PeakEstimate,
    PeakPoint,
    PeakShape,
    validate_error_range,
)


def test_peak_point_is_immutable():
    p = PeakPoint(index=4, value=10)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.index = 5
    assert p == PeakPoint(4, 10)


def test_locator_config_defaults():
    assert LocatorConfig().error_range == 3


@pytest.mark.parametrize("bad", [0, -1, 2.5, "3", True, None])
def test_locator_config_rejects_bad_error_range(bad):
    with pytest.raises(ValueError):
        LocatorConfig(error_range=bad)


def test_validate_error_range_accepts_numpy_ints():
    assert validate_error_range(np.int64(4)) == 4


def test_estimate_refinement_flag():
    peak = PeakPoint(2, 7)
    assert PeakEstimate(2.3, PeakShape.ISOLATED, peak).is_refined
    assert PeakEstimate(2.3, PeakShape.ASYMMETRIC_AMBIGUITY, peak).is_refined
    assert not PeakEstimate(2.0, PeakShape.FLAT_TOP, peak).is_refined
    assert not PeakEstimate(2.0, PeakShape.BOUNDARY, peak).is_refined


def test_outcome_requires_exactly_one_variant(ok_outcome):
    assert ok_outcome.ok
    with pytest.raises(ValueError):
        LocateOutcome(signal_id="x")
    with pytest.raises(ValueError):
        LocateOutcome(
            signal_id="x",
            estimate=ok_outcome.estimate,
            error=InsufficientDataError("short"),
        )


def test_error_taxonomy():
    for cls, kind in (
        (InsufficientDataError, "insufficient_data"),
        (MalformedPlateauError, "malformed_plateau"),
        (DegenerateFitError, "degenerate_fit"),
        (InvalidSignalError, "invalid_signal"),
    ):
        assert issubclass(cls, PeakLocatorError)
        assert issubclass(cls, ValueError)
        assert cls.kind == kind


def test_shape_values_are_strings():
    assert PeakShape("flat_top") is PeakShape.FLAT_TOP
    assert PeakShape.SYMMETRIC_AMBIGUITY.value == "symmetric_ambiguity"
