"""Complex arithmetic on ``(real, imag)`` pairs used by the FFT butterflies."""

from __future__ import annotations

from typing import NamedTuple


class ComplexValue(NamedTuple):
    """A transient ``(real, imag)`` pair."""

    real: float
    imag: float

    @property
    def magnitude_squared(self) -> float:
        return self.real * self.real + self.imag * self.imag


ONE = ComplexValue(1.0, 0.0)


def complex_add(a: ComplexValue, b: ComplexValue) -> ComplexValue:
    return ComplexValue(a.real + b.real, a.imag + b.imag)


def complex_subtract(a: ComplexValue, b: ComplexValue) -> ComplexValue:
    return ComplexValue(a.real - b.real, a.imag - b.imag)


def complex_multiply(a: ComplexValue, b: ComplexValue) -> ComplexValue:
    return ComplexValue(
        a.real * b.real - a.imag * b.imag,
        a.real * b.imag + a.imag * b.real,
    )


__all__ = [
    "ComplexValue",
    "ONE",
    "complex_add",
    "complex_multiply",
    "complex_subtract",
]
