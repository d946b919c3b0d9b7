"""Radix-2 FFT helpers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import math
from typing import Any, List

import numpy as np
from numpy.typing import ArrayLike

from ..errors import ConfigurationError
from .complex_math import (
    ONE,
    ComplexValue,
    complex_add,
    complex_multiply,
    complex_subtract,
)
from .fit import finite_or_default


def is_power_of_two(value: Any) -> bool:
    """Return True for positive integral values of the form ``2**k``."""
    if isinstance(value, bool):
        return False
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        return False
    if not math.isfinite(as_float) or not as_float.is_integer():
        return False
    n = int(as_float)
    return n > 0 and (n & (n - 1)) == 0


def bit_reverse(index: int, bits: int) -> int:
    """Reverse the lowest ``bits`` bits of ``index``."""
    reversed_index = 0
    for _ in range(bits):
        reversed_index = (reversed_index << 1) | (index & 1)
        index >>= 1
    return reversed_index


def zero_pad(signal: ArrayLike, size: int) -> np.ndarray:
    """Copy ``signal`` into a zero-filled buffer of ``size``, truncating if longer."""
    samples = np.asarray(signal, dtype=float).reshape(-1)
    padded = np.zeros(int(size), dtype=float)
    count = min(samples.size, padded.size)
    padded[:count] = samples[:count]
    return padded


def radix2_fft(samples: ArrayLike) -> List[ComplexValue]:
    """
    Iterative Cooley-Tukey FFT of a real-valued block.

    Parameters
    ----------
    samples:
        1-D real samples whose length is a power of two.

    Returns
    -------
    list of ComplexValue
        One coefficient per input sample.

    Raises
    ------
    ConfigurationError
        If the block length is not a power of two.
    """
    x = np.asarray(samples, dtype=float).reshape(-1)
    n = x.size
    if n == 0:
        return []
    if not is_power_of_two(n):
        raise ConfigurationError(f"FFT size must be a power of two, got {n}")
    if n == 1:
        return [ComplexValue(float(x[0]), 0.0)]

    bits = n.bit_length() - 1
    spectrum: List[ComplexValue] = [ONE] * n
    for i in range(n):
        spectrum[bit_reverse(i, bits)] = ComplexValue(float(x[i]), 0.0)

    size = 2
    while size <= n:
        half = size // 2
        angle = -2.0 * math.pi / size
        w = ComplexValue(math.cos(angle), math.sin(angle))
        for start in range(0, n, size):
            wn = ONE
            for j in range(half):
                even = spectrum[start + j]
                odd = complex_multiply(wn, spectrum[start + j + half])
                spectrum[start + j] = complex_add(even, odd)
                spectrum[start + j + half] = complex_subtract(even, odd)
                wn = complex_multiply(wn, w)
        size *= 2

    return spectrum


def _parts(coefficient: Any) -> tuple[float, float]:
    if isinstance(coefficient, (complex, np.complexfloating)):
        return float(coefficient.real), float(coefficient.imag)
    if isinstance(coefficient, Mapping):
        return float(coefficient["real"]), float(coefficient["imag"])
    real, imag = coefficient
    return float(real), float(imag)


def power_spectrum(coefficients: Iterable[Any]) -> np.ndarray:
    """
    Squared magnitude ``|X[k]|**2`` of every coefficient.

    Coefficients may be :class:`ComplexValue`, plain ``(real, imag)`` pairs,
    ``{"real": ..., "imag": ...}`` mappings or Python complex numbers.
    Non-finite magnitudes are reported as 0 so the result is never negative
    or NaN.
    """
    powers = []
    for coefficient in coefficients:
        real, imag = _parts(coefficient)
        powers.append(finite_or_default(real * real + imag * imag))
    result = np.asarray(powers, dtype=float)
    result.setflags(write=False)
    return result


def frequency_bins(sample_rate_hz: float, fft_size: int) -> np.ndarray:
    """Frequencies (Hz) of the first ``fft_size // 2`` bins."""
    if sample_rate_hz <= 0:
        raise ValueError(f"sample_rate_hz must be > 0, got {sample_rate_hz}")
    half = int(fft_size) // 2
    return np.arange(half, dtype=float) * (float(sample_rate_hz) / float(fft_size))


__all__ = [
    "bit_reverse",
    "frequency_bins",
    "is_power_of_two",
    "power_spectrum",
    "radix2_fft",
    "zero_pad",
]
