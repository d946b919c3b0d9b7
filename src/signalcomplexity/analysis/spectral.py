"""Windowed FFT spectral analysis."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import time
from typing import Any, Iterable, List

import numpy as np
from numpy.typing import ArrayLike

from ..config.runtime import SpectralConfig
from ..tools.debug import time_block
from .complex_math import ComplexValue
from .features import SpectralAnalysis, SpectralFeatures, to_sample_window
from .fft import frequency_bins, power_spectrum, radix2_fft, zero_pad
from .fit import finite_or_default
from .windows import WindowCoefficients, generate_window

logger = logging.getLogger(__name__)

ROLLOFF_FRACTION = 0.85


@dataclass(frozen=True, eq=False)
class _SpectralState:
    """Configuration and the window envelope built for it, swapped as one unit."""

    config: SpectralConfig
    window: WindowCoefficients


def extract_features(
    power: ArrayLike,
    sample_rate: float,
    fft_size: int,
) -> SpectralFeatures:
    """
    Compute spectral shape statistics from a full power spectrum.

    Only the lower half of ``power`` is used, capped at ``fft_size // 2``
    bins; the upper half mirrors the lower one for real input.

    Parameters
    ----------
    power:
        Power spectrum, ``|X[k]|**2`` for each bin.
    sample_rate:
        Sampling rate in Hz.
    fft_size:
        Transform length the spectrum was computed with.

    Returns
    -------
    SpectralFeatures
        Finite centroid, bandwidth, rolloff, energy and entropy.
    """
    freqs = frequency_bins(sample_rate, fft_size)
    spectrum = np.asarray(power, dtype=float).reshape(-1)
    count = min(spectrum.size // 2, freqs.size)
    spectrum = spectrum[:count]
    freqs = freqs[:count]

    finite = np.isfinite(spectrum)
    positive = finite & (spectrum > 0.0)
    p = spectrum[positive]
    f = freqs[positive]

    total = float(np.sum(p))
    if total > 0.0:
        centroid = finite_or_default(np.dot(f, p) / total)
        spread = float(np.dot(p, (f - centroid) ** 2))
        bandwidth = finite_or_default(math.sqrt(max(spread / total, 0.0)))
        probabilities = p / total
        entropy = finite_or_default(-np.sum(probabilities * np.log2(probabilities)))
    else:
        centroid = bandwidth = entropy = 0.0

    finite_power = np.where(finite, spectrum, 0.0)
    energy = finite_or_default(np.sum(finite_power))

    rolloff = 0.0
    if count:
        cumulative = np.cumsum(finite_power)
        reached = np.nonzero(cumulative >= ROLLOFF_FRACTION * energy)[0]
        if reached.size:
            rolloff = finite_or_default(freqs[reached[0]])

    return SpectralFeatures(
        centroid=centroid,
        bandwidth=bandwidth,
        rolloff=rolloff,
        energy=energy,
        entropy=entropy,
    )


class SpectralAnalyzer:
    """
    Window -> zero-pad -> FFT -> power spectrum -> shape statistics.

    The analyzer keeps a single immutable snapshot of its configuration and
    window envelope. :meth:`analyze` reads that snapshot once, so a concurrent
    :meth:`reconfigure` never exposes a half-built envelope.
    """

    def __init__(self, config: SpectralConfig | None = None, **overrides: Any) -> None:
        base = config or SpectralConfig()
        if overrides:
            base = base.merged(**overrides)
        self._state = _SpectralState(
            config=base,
            window=WindowCoefficients.build(base.window_type, base.window_size),
        )

    # ----------------------------------------------------------------- config
    @property
    def config(self) -> SpectralConfig:
        return self._state.config

    @property
    def window(self) -> WindowCoefficients:
        return self._state.window

    @property
    def window_function(self) -> np.ndarray:
        """Read-only coefficients of the current window envelope."""
        return self._state.window.coefficients

    def reconfigure(self, **changes: Any) -> SpectralConfig:
        """
        Merge ``changes`` over the current configuration.

        The window envelope is rebuilt only when the window type or size
        changes. Raises ConfigurationError for invalid options, leaving the
        previous configuration in place.
        """
        current = self._state
        config = current.config.merged(**changes)
        window = current.window
        if not window.matches(config.window_type, config.window_size):
            window = WindowCoefficients.build(config.window_type, config.window_size)
            logger.debug(
                "Rebuilt %s window with %d coefficients",
                config.window_type,
                config.window_size,
            )
        self._state = _SpectralState(config=config, window=window)
        return config

    # ---------------------------------------------------------------- helpers
    @staticmethod
    def generate_window(window_type: str, size: int) -> np.ndarray:
        return generate_window(window_type, size)

    def apply_window(self, signal: ArrayLike) -> np.ndarray:
        return self._state.window.apply(to_sample_window(signal))

    def compute_fft(self, signal: ArrayLike) -> List[ComplexValue]:
        """Zero-pad (or truncate) ``signal`` to ``fft_size`` and transform it."""
        return self._transform(to_sample_window(signal), self._state.config)

    @staticmethod
    def compute_power_spectrum(coefficients: Iterable[Any]) -> np.ndarray:
        return power_spectrum(coefficients)

    def extract_spectral_features(self, coefficients: Iterable[Any]) -> SpectralFeatures:
        config = self._state.config
        return extract_features(
            power_spectrum(coefficients), config.sample_rate, config.fft_size
        )

    def frequency_bins(self) -> np.ndarray:
        config = self._state.config
        return frequency_bins(config.sample_rate, config.fft_size)

    # --------------------------------------------------------------- analysis
    def analyze(self, signal: ArrayLike) -> SpectralAnalysis:
        """
        Analyze one sample window.

        Parameters
        ----------
        signal:
            1-D array-like of samples; may be empty.

        Returns
        -------
        SpectralAnalysis
            Features plus the raw FFT and power spectrum.
        """
        state = self._state
        config = state.config
        with time_block("spectral.analyze"):
            samples = to_sample_window(signal)
            windowed = state.window.apply(samples)
            coefficients = self._transform(windowed, config)
            power = power_spectrum(coefficients)
            features = extract_features(power, config.sample_rate, config.fft_size)

        return SpectralAnalysis(
            features=features,
            fft=tuple(coefficients),
            power_spectrum=power,
            timestamp=time.time(),
        )

    @staticmethod
    def _transform(samples: np.ndarray, config: SpectralConfig) -> List[ComplexValue]:
        finite = np.isfinite(samples)
        if not finite.all():
            logger.debug(
                "Zeroing %d non-finite samples before FFT", int((~finite).sum())
            )
            samples = np.where(finite, samples, 0.0)
        return radix2_fft(zero_pad(samples, config.fft_size))


__all__ = ["ROLLOFF_FRACTION", "SpectralAnalyzer", "extract_features"]
