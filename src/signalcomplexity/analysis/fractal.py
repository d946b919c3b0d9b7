"""Fractal-dimension estimators and their aggregate complexity assessment."""

from __future__ import annotations

import logging
import math
import time
from typing import Any, List, Sequence

import numpy as np
from numpy.typing import ArrayLike

from ..config.runtime import FractalConfig
from ..tools.debug import time_block
from .features import (
    BoxCountingResult,
    ComplexityAssessment,
    ComplexityLevel,
    CorrelationResult,
    DFAClassification,
    DFAResult,
    FractalFeatures,
    HiguchiResult,
    to_sample_window,
)
from .fit import (
    euclidean_distance,
    finite_or_default,
    goodness_of_fit,
    linear_slope,
    linear_trend,
)

logger = logging.getLogger(__name__)

MIN_BOX_COUNTING_SAMPLES = 4
MIN_CORRELATION_SAMPLES = 10
MIN_HIGUCHI_SAMPLES = 10
MIN_DFA_SAMPLES = 16

EMBEDDING_DIMENSION = 2
CORRELATION_FLOOR = 1e-10
CORRELATION_BLOCK_ROWS = 256
DFA_GROWTH = 1.2


def _log_pairs(x: Sequence[float], y: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    """Log-transform paired measurements, keeping only pairs finite in both."""
    with np.errstate(divide="ignore", invalid="ignore"):
        log_x = np.log(np.asarray(x, dtype=float))
        log_y = np.log(np.asarray(y, dtype=float))
    keep = np.isfinite(log_x) & np.isfinite(log_y)
    return log_x[keep], log_y[keep]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def count_boxes(normalized: np.ndarray, box_size: int) -> int:
    """Number of distinct ``(column, row)`` grid cells the curve passes through."""
    columns = np.arange(normalized.size) // box_size
    rows = np.floor(normalized * box_size).astype(np.int64)
    cells = np.unique(np.column_stack((columns, rows)), axis=0)
    return int(cells.shape[0])


def correlation_integrals(
    embedded: np.ndarray, radii: np.ndarray, *, block_rows: int = CORRELATION_BLOCK_ROWS
) -> np.ndarray:
    """
    Fraction of unordered point pairs closer than each radius.

    Time is O(n**2). Distances are evaluated ``block_rows`` points at a time
    against every later point, so memory stays O(block_rows * n); each
    radius is a binary search over a block's sorted distances.
    """
    count = embedded.shape[0]
    radii = np.asarray(radii, dtype=float)
    if count < 2:
        return np.zeros(radii.size, dtype=float)

    step = max(1, int(block_rows))
    columns = np.arange(count)
    below = np.zeros(radii.size, dtype=np.int64)
    for start in range(0, count - 1, step):
        stop = min(start + step, count - 1)
        distances = euclidean_distance(
            embedded[start:stop, np.newaxis, :], embedded[np.newaxis, :, :]
        )
        later = columns[np.newaxis, :] > np.arange(start, stop)[:, np.newaxis]
        below += np.searchsorted(np.sort(distances[later]), radii, side="left")
    return below / (count * (count - 1) / 2.0)


def higuchi_length(signal: np.ndarray, k: int) -> float:
    """Mean normalised curve length ``L(k)`` over the ``k`` phase offsets."""
    n = signal.size
    total = 0.0
    for m in range(1, k + 1):
        num_points = (n - m) // k
        if num_points < 2:
            continue
        subsequence = signal[m - 1 :: k][: num_points + 1]
        length = float(np.sum(np.abs(np.diff(subsequence))))
        total += length * (n - 1) / (num_points * k * k)
    return total / k


def dfa_fluctuation(profile: np.ndarray, window_size: int) -> float:
    """Root-mean-square residual of per-window linear detrending."""
    num_windows = profile.size // window_size
    if num_windows == 0:
        return 0.0
    positions = np.arange(window_size, dtype=float)
    total_variance = 0.0
    for index in range(num_windows):
        window = profile[index * window_size : (index + 1) * window_size]
        trend = linear_trend(window)
        residuals = window - (trend.slope * positions + trend.intercept)
        total_variance += float(np.dot(residuals, residuals)) / window_size
    return math.sqrt(total_variance / num_windows)


def classify_dfa_exponent(exponent: float) -> DFAClassification:
    if exponent < 0.5:
        return "anti-persistent"
    if exponent == 0.5:
        return "random"
    if exponent < 1.0:
        return "persistent"
    return "non-stationary"


def assess_complexity(
    box_counting: BoxCountingResult,
    correlation: CorrelationResult,
    higuchi: HiguchiResult,
) -> ComplexityAssessment:
    """
    Average and spread of three dimension estimates.

    The DFA exponent measures persistence rather than geometry and is left
    out.
    """
    dimensions = np.array(
        [box_counting.dimension, correlation.dimension, higuchi.dimension],
        dtype=float,
    )
    average = finite_or_default(np.mean(dimensions))
    variance = finite_or_default(np.var(dimensions))

    complexity: ComplexityLevel
    if average > 1.5:
        complexity = "high"
    elif average > 1.2:
        complexity = "medium"
    else:
        complexity = "low"

    consistency: ComplexityLevel
    if variance < 0.1:
        consistency = "high"
    elif variance < 0.3:
        consistency = "medium"
    else:
        consistency = "low"

    return ComplexityAssessment(
        average_dimension=average,
        dimension_variance=variance,
        complexity=complexity,
        consistency=consistency,
    )


class FractalAnalyzer:
    """
    Box-counting, correlation, Higuchi and DFA estimates for one window.

    Every estimator falls back to a sentinel on short or degenerate input
    (dimension 1, DFA exponent 0.5) instead of raising.
    """

    def __init__(self, config: FractalConfig | None = None, **overrides: Any) -> None:
        base = config or FractalConfig()
        if overrides:
            base = base.merged(**overrides)
        self._config = base

    @property
    def config(self) -> FractalConfig:
        return self._config

    def reconfigure(self, **changes: Any) -> FractalConfig:
        """Merge ``changes`` over the current configuration and return it."""
        self._config = self._config.merged(**changes)
        return self._config

    def analyze(self, signal: ArrayLike) -> FractalFeatures:
        """
        Run all four estimators on ``signal``.

        Non-finite samples are dropped before estimation.
        """
        config = self._config
        with time_block("fractal.analyze"):
            samples = to_sample_window(signal)
            finite = np.isfinite(samples)
            if not finite.all():
                logger.debug("Dropping %d non-finite samples", int((~finite).sum()))
                samples = samples[finite]

            box_counting = self.box_counting_dimension(samples, config)
            correlation = self.correlation_dimension(samples, config)
            higuchi = self.higuchi_dimension(samples, config)
            dfa = self.detrended_fluctuation(samples, config)

        return FractalFeatures(
            box_counting=box_counting,
            correlation=correlation,
            higuchi=higuchi,
            dfa=dfa,
            complexity=assess_complexity(box_counting, correlation, higuchi),
            timestamp=time.time(),
        )

    # ------------------------------------------------------------ estimators
    def box_counting_dimension(
        self, signal: ArrayLike, config: FractalConfig | None = None
    ) -> BoxCountingResult:
        """
        Box-counting dimension of the min-max normalised curve.

        Counts grow as boxes shrink, so the dimension is the *negated* slope
        of log(count) against log(box size).
        """
        config = config or self._config
        x = to_sample_window(signal)
        n = x.size
        if n < MIN_BOX_COUNTING_SAMPLES:
            return BoxCountingResult()

        low = float(np.min(x))
        span = float(np.max(x)) - low
        if not span > 0.0:
            logger.debug("Box counting: constant signal, returning sentinel")
            return BoxCountingResult()
        normalized = (x - low) / span

        sizes: List[int] = []
        counts: List[int] = []
        limit = min(config.max_box_size, n / 4)
        box_size = config.min_box_size
        while box_size <= limit:
            sizes.append(box_size)
            counts.append(count_boxes(normalized, box_size))
            box_size *= 2

        boxes = tuple(zip(sizes, counts))
        if len(sizes) < 2:
            return BoxCountingResult(boxes=boxes)

        log_sizes, log_counts = _log_pairs(sizes, counts)
        slope = linear_slope(log_sizes, log_counts)
        return BoxCountingResult(
            dimension=finite_or_default(-slope, 1.0),
            boxes=boxes,
            goodness=goodness_of_fit(sizes, counts, slope),
        )

    def correlation_dimension(
        self, signal: ArrayLike, config: FractalConfig | None = None
    ) -> CorrelationResult:
        """
        Grassberger-Procaccia style estimate on a 2-D, lag-1 delay embedding.

        Cost is quadratic in the window length.
        """
        config = config or self._config
        x = to_sample_window(signal)
        n = x.size
        if n < MIN_CORRELATION_SAMPLES:
            return CorrelationResult()
        if not float(np.ptp(x)) > 0.0:
            logger.debug("Correlation dimension: constant signal, returning sentinel")
            return CorrelationResult()

        embedded = np.column_stack(
            [x[offset : n - EMBEDDING_DIMENSION + 1 + offset] for offset in range(EMBEDDING_DIMENSION)]
        )

        options = config.correlation
        log_min = math.log(options.min_distance)
        log_max = math.log(options.max_distance)
        step = (log_max - log_min) / options.num_points
        radii = np.exp(log_min + np.arange(options.num_points) * step)

        integrals = correlation_integrals(embedded, radii)
        slope = linear_slope(np.log(radii), np.log(np.maximum(integrals, CORRELATION_FLOOR)))
        return CorrelationResult(
            dimension=max(0.0, finite_or_default(slope)),
            correlations=tuple(
                (float(radius), float(value)) for radius, value in zip(radii, integrals)
            ),
        )

    def higuchi_dimension(
        self, signal: ArrayLike, config: FractalConfig | None = None
    ) -> HiguchiResult:
        """Higuchi fractal dimension, clamped to [1, 2]."""
        config = config or self._config
        x = to_sample_window(signal)
        n = x.size
        if n < MIN_HIGUCHI_SAMPLES:
            return HiguchiResult()

        ks: List[int] = []
        lengths: List[float] = []
        limit = min(config.higuchi.max_k, n / 4)
        k = config.higuchi.min_k
        while k <= limit:
            ks.append(k)
            lengths.append(higuchi_length(x, k))
            k += 1

        inverse_k = [1.0 / k for k in ks]
        log_inverse_k, log_lengths = _log_pairs(inverse_k, lengths)
        slope = linear_slope(log_inverse_k, log_lengths)
        return HiguchiResult(
            dimension=_clamp(finite_or_default(slope, 1.0), 1.0, 2.0),
            curves=tuple(zip(ks, lengths)),
        )

    def detrended_fluctuation(
        self, signal: ArrayLike, config: FractalConfig | None = None
    ) -> DFAResult:
        """Detrended fluctuation analysis scaling exponent, clamped to [0, 2]."""
        config = config or self._config
        x = to_sample_window(signal)
        n = x.size
        if n < MIN_DFA_SAMPLES:
            return DFAResult()

        profile = np.cumsum(x - np.mean(x))

        sizes: List[int] = []
        fluctuations: List[float] = []
        limit = min(config.dfa.max_window_size, n / 4)
        window_size = config.dfa.min_window_size
        while window_size <= limit:
            sizes.append(window_size)
            fluctuations.append(dfa_fluctuation(profile, window_size))
            window_size = max(window_size + 1, int(window_size * DFA_GROWTH))

        log_sizes, log_fluctuations = _log_pairs(sizes, fluctuations)
        curve = tuple(zip(sizes, fluctuations))
        if log_sizes.size < 2:
            logger.debug("DFA: fewer than two usable scales, returning sentinel")
            return DFAResult(fluctuations=curve)

        exponent = _clamp(
            finite_or_default(linear_slope(log_sizes, log_fluctuations), 0.5), 0.0, 2.0
        )
        return DFAResult(
            exponent=exponent,
            fluctuations=curve,
            classification=classify_dfa_exponent(exponent),
        )


__all__ = [
    "FractalAnalyzer",
    "assess_complexity",
    "classify_dfa_exponent",
    "correlation_integrals",
    "count_boxes",
    "dfa_fluctuation",
    "higuchi_length",
]
