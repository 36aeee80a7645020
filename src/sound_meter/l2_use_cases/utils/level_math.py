"""RMS and calibrated-decibel helpers for int16 sample chunks."""

from __future__ import annotations

import math

import numpy as np

DEFAULT_REFERENCE = 32767.0  # full scale for 16-bit audio
DEFAULT_OFFSET = 90.0  # lifts dBFS into a 0-100 room-noise range
DISPLAY_FLOOR = 0.0
DISPLAY_CEILING = 100.0


def compute_rms(samples: np.ndarray, n: int | None = None) -> float:
    """Root mean square over the first *n* samples (all of them when n is None).

    Squares are accumulated in float64 so full-scale int16 blocks cannot overflow.
    """
    if n is None:
        n = len(samples)
    if n <= 0:
        return 0.0
    window = np.asarray(samples[:n], dtype=np.float64)
    return float(np.sqrt(np.dot(window, window) / n))


def rms_to_decibel(
    rms: float,
    reference: float = DEFAULT_REFERENCE,
    offset: float = DEFAULT_OFFSET,
) -> float:
    """20*log10(rms/reference) + offset; exactly 0.0 for silence."""
    if rms <= 0:
        return 0.0
    return 20.0 * math.log10(rms / reference) + offset


def clamp(value: float, floor: float = DISPLAY_FLOOR, ceiling: float = DISPLAY_CEILING) -> float:
    return min(max(value, floor), ceiling)
