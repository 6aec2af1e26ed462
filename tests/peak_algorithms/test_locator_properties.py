from __future__ import annotations
from hypothesis import given, settings, strategies as st

from subpeak.peak_algorithms.locator import locate_peak, try_locate_peak
from subpeak.peak_core.errors import MalformedPlateauError
from subpeak.peak_core.model import PeakShape


# --- Local strategies (avoid function-scoped fixtures in @given tests) ---


def _sample_value():
    return st.integers(min_value=-1000, max_value=1000)


def _signal_list(min_size: int = 3, max_size: int = 40):
    return st.lists(_sample_value(), min_size=min_size, max_size=max_size)


def _error_range():
    return st.integers(min_value=1, max_value=6)


@settings(max_examples=200)
@given(signal=_signal_list(), error_range=_error_range())
def test_position_stays_near_global_maximum(signal, error_range):
    outcome = try_locate_peak(signal, error_range)
    if not outcome.ok:
        # the only failure reachable with valid input is a wide plateau
        assert isinstance(outcome.error, MalformedPlateauError)
        return
    est = outcome.estimate
    assert 0.0 <= est.position <= len(signal) - 1
    assert est.peak.value == max(signal)
    if est.is_refined:
        assert abs(est.position - est.peak.index) <= 0.5
    else:
        assert est.position == int(est.position)


@given(signal=_signal_list())
def test_global_maximum_is_last_occurrence(signal):
    outcome = try_locate_peak(signal)
    if outcome.ok:
        top = max(signal)
        assert outcome.estimate.peak.index == len(signal) - 1 - signal[::-1].index(top)


@given(signal=_signal_list())
def test_locate_is_idempotent(signal):
    first = try_locate_peak(signal)
    second = try_locate_peak(signal)
    assert first.estimate == second.estimate
    assert type(first.error) is type(second.error)
    assert str(first.error) == str(second.error)


@given(
    n=st.integers(min_value=3, max_value=30),
    start=_sample_value(),
    increasing=st.booleans(),
)
def test_strictly_monotonic_signal_returns_boundary(n, start, increasing):
    step = 1 if increasing else -1
    signal = [start + step * k for k in range(n)]
    est = locate_peak(signal)
    assert est.shape is PeakShape.BOUNDARY
    assert est.position == (n - 1 if increasing else 0)
