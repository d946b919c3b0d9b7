"""Immutable feature records returned by the analyzers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

import numpy as np
from numpy.typing import ArrayLike

from .complex_math import ComplexValue


ComplexityLevel = Literal["low", "medium", "high"]
DFAClassification = Literal["anti-persistent", "random", "persistent", "non-stationary"]


def to_sample_window(signal: ArrayLike | None) -> np.ndarray:
    """
    Convert input to a 1-D float64 numpy array.

    Empty input is allowed and multi-dimensional input is flattened; the
    analyzers turn both into degenerate features instead of failing.
    """
    if signal is None:
        return np.empty(0, dtype=float)
    return np.asarray(signal, dtype=float).reshape(-1)


@dataclass(frozen=True, slots=True)
class SpectralFeatures:
    """Shape statistics of the positive-frequency half of the power spectrum."""

    centroid: float = 0.0
    bandwidth: float = 0.0
    rolloff: float = 0.0
    energy: float = 0.0
    entropy: float = 0.0

    def to_mapping(self) -> dict:
        return {
            "centroid": self.centroid,
            "bandwidth": self.bandwidth,
            "rolloff": self.rolloff,
            "energy": self.energy,
            "entropy": self.entropy,
        }


@dataclass(frozen=True, eq=False)
class SpectralAnalysis:
    """
    Result of one spectral ``analyze`` call.

    ``fft`` holds all ``fft_size`` raw coefficients and ``power_spectrum``
    the matching read-only squared magnitudes, for consumers that need more
    resolution than :class:`SpectralFeatures`.
    """

    features: SpectralFeatures
    fft: Tuple[ComplexValue, ...]
    power_spectrum: np.ndarray
    timestamp: float

    @property
    def spectral_centroid(self) -> float:
        return self.features.centroid

    @property
    def spectral_bandwidth(self) -> float:
        return self.features.bandwidth

    @property
    def spectral_rolloff(self) -> float:
        return self.features.rolloff

    def to_mapping(self) -> dict:
        return {
            "features": self.features.to_mapping(),
            "fft": [{"real": c.real, "imag": c.imag} for c in self.fft],
            "powerSpectrum": self.power_spectrum.tolist(),
            "spectralCentroid": self.spectral_centroid,
            "spectralBandwidth": self.spectral_bandwidth,
            "spectralRolloff": self.spectral_rolloff,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class BoxCountingResult:
    dimension: float = 1.0
    boxes: Tuple[Tuple[int, int], ...] = ()
    goodness: float = 0.0

    def to_mapping(self) -> dict:
        return {
            "dimension": self.dimension,
            "boxes": [{"size": size, "count": count} for size, count in self.boxes],
            "goodness": self.goodness,
        }


@dataclass(frozen=True, slots=True)
class CorrelationResult:
    dimension: float = 1.0
    correlations: Tuple[Tuple[float, float], ...] = ()

    def to_mapping(self) -> dict:
        return {
            "dimension": self.dimension,
            "correlations": [
                {"distance": distance, "correlation": value}
                for distance, value in self.correlations
            ],
        }


@dataclass(frozen=True, slots=True)
class HiguchiResult:
    dimension: float = 1.0
    curves: Tuple[Tuple[int, float], ...] = ()

    def to_mapping(self) -> dict:
        return {
            "dimension": self.dimension,
            "curves": [{"k": k, "length": length} for k, length in self.curves],
        }


@dataclass(frozen=True, slots=True)
class DFAResult:
    exponent: float = 0.5
    fluctuations: Tuple[Tuple[int, float], ...] = ()
    classification: DFAClassification = "random"

    def to_mapping(self) -> dict:
        return {
            "exponent": self.exponent,
            "fluctuations": [
                {"windowSize": size, "fluctuation": value}
                for size, value in self.fluctuations
            ],
            "classification": self.classification,
        }


@dataclass(frozen=True, slots=True)
class ComplexityAssessment:
    """
    Summary over the box-counting, correlation and Higuchi dimensions.

    ``consistency`` is named from the reader's point of view: low variance
    between the estimators means *high* consistency.
    """

    average_dimension: float
    dimension_variance: float
    complexity: ComplexityLevel
    consistency: ComplexityLevel

    def to_mapping(self) -> dict:
        return {
            "averageDimension": self.average_dimension,
            "dimensionVariance": self.dimension_variance,
            "complexity": self.complexity,
            "consistency": self.consistency,
        }


@dataclass(frozen=True, slots=True)
class FractalFeatures:
    """Result of one fractal ``analyze`` call."""

    box_counting: BoxCountingResult
    correlation: CorrelationResult
    higuchi: HiguchiResult
    dfa: DFAResult
    complexity: ComplexityAssessment
    timestamp: float

    def to_mapping(self) -> dict:
        return {
            "boxCounting": self.box_counting.to_mapping(),
            "correlation": self.correlation.to_mapping(),
            "higuchi": self.higuchi.to_mapping(),
            "dfa": self.dfa.to_mapping(),
            "complexity": self.complexity.to_mapping(),
            "timestamp": self.timestamp,
        }


__all__ = [
    "BoxCountingResult",
    "ComplexityAssessment",
    "ComplexityLevel",
    "CorrelationResult",
    "DFAClassification",
    "DFAResult",
    "FractalFeatures",
    "HiguchiResult",
    "SpectralAnalysis",
    "SpectralFeatures",
    "to_sample_window",
]
