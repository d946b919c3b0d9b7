"""Tapering window envelopes applied before the FFT."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike
from scipy.signal import windows

WINDOW_TYPES = ("hann", "hamming", "blackman", "rectangular")

_GENERATORS = {
    "hann": windows.hann,
    "hamming": windows.hamming,
    "blackman": windows.blackman,
}


def generate_window(window_type: str | None, size: int) -> np.ndarray:
    """
    Return ``size`` symmetric window coefficients.

    Parameters
    ----------
    window_type:
        One of ``hann``, ``hamming``, ``blackman`` (case-insensitive). Any
        other value, including ``rectangular``, yields all ones.
    size:
        Number of coefficients. Must be >= 0.

    Returns
    -------
    np.ndarray
        Read-only float64 array of exactly ``size`` elements.
    """
    size = int(size)
    if size < 0:
        raise ValueError(f"size must be >= 0, got {size}")

    kind = str(window_type or "").strip().lower()
    generator = _GENERATORS.get(kind)
    if generator is None:
        coefficients = np.ones(size, dtype=float)
    else:
        coefficients = np.asarray(generator(size, sym=True), dtype=float)

    coefficients.setflags(write=False)
    return coefficients


@dataclass(frozen=True, eq=False)
class WindowCoefficients:
    """
    Immutable window envelope for a given ``(window_type, size)``.

    Instances are never modified; reconfiguring an analyzer builds a new one.
    """

    window_type: str
    size: int
    coefficients: np.ndarray = field(repr=False)

    @classmethod
    def build(cls, window_type: str, size: int) -> "WindowCoefficients":
        return cls(
            window_type=window_type,
            size=int(size),
            coefficients=generate_window(window_type, size),
        )

    def matches(self, window_type: str, size: int) -> bool:
        """True when this envelope already covers ``(window_type, size)``."""
        return self.window_type == window_type and self.size == int(size)

    def apply(self, signal: ArrayLike) -> np.ndarray:
        """
        Weight the first ``min(len(signal), size)`` samples.

        Samples beyond the window length are dropped.
        """
        samples = np.asarray(signal, dtype=float).reshape(-1)
        count = min(samples.size, self.coefficients.size)
        return samples[:count] * self.coefficients[:count]

    def __len__(self) -> int:
        return self.size


__all__ = ["WINDOW_TYPES", "WindowCoefficients", "generate_window"]
