"""
locate_example.py
=================

Purpose
-------
Minimal end-to-end use of the `subpeak` peak locator on a handful of short
integer signals. Each signal is processed independently: a signal that
cannot be localized (for example a plateau that is too wide) is reported and
the loop moves on to the next one.

What this example does
----------------------
1. Defines a list of sample signals covering the shape classes handled by
   the locator (isolated, flat top, boundary, and nearby competing peaks).
2. Calls `try_locate_peak()` for each, which returns either an estimate or
   the localization error as a value.
3. Prints the position (four decimals) and shape, or the error.

Usage
-----
    PYTHONPATH=src python examples/locate_example.py
"""

from subpeak.peak_algorithms.locator import try_locate_peak

SIGNALS = [
    [1, 2, 3, 4, 5, 6, 5, 4, 3, 2],
    [1, 2, 3, 4, 5, 10, 9, 4, 3, 2],
    [1, 2, 3, 4, 5, 10, 10, 10, 3, 2],
    [10, 9, 8, 7, 6, 5, 4, 3, 2, 1],
    [1, 2, 3, 4, 5, 6, 7, 8, 9, 10],
    [10, 7, 9, 8, 6, 5, 4, 3, 2, 1],
    [1, 2, 3, 4, 5, 6, 8, 9, 7, 10],
    [1, 2, 3, 5, 4, 10, 2, 4, 3, 2],
    [1, 2, 3, 4, 5, 10, 7, 9, 5, 2],
    [1, 2, 3, 5, 1, 10, 7, 9, 5, 2],
    [1, 2, 5, 9, 7, 10, 7, 9, 5, 2],
    [1, 2, 5, 9, 7, 10, 2, 3, 1, 0],
    [1, 2, 3, 5, 3, 10, 8, 9, 8, 1],
    [1, 8, 3, 4, 5, 10, 9, 4, 3, 2],
    [1, 2, 9, 9, 9, 9, 9, 9, 2, 1],
    [4, 2],
]


def main() -> None:
    for i, signal in enumerate(SIGNALS):
        outcome = try_locate_peak(signal, signal_id=f"signal_{i:02d}")
        if outcome.ok:
            est = outcome.estimate
            print(f"{outcome.signal_id}: {est.position:.4f} ({est.shape.value})")
        else:
            print(f"{outcome.signal_id}: Error: {outcome.error}")


if __name__ == "__main__":
    main()
