"""Least-squares helpers shared by the spectral and fractal estimators."""

from __future__ import annotations

import math
from typing import NamedTuple, Union

import numpy as np
from numpy.typing import ArrayLike


Number = Union[float, np.floating]


class LinearFit(NamedTuple):
    """Slope/intercept pair of an ordinary least-squares line."""

    slope: float
    intercept: float


def finite_or_default(value: Number, default: float = 0.0) -> float:
    """
    Return ``value`` as a float, or ``default`` when it is NaN or infinite.

    Every reduction that leaves this package passes through here so callers
    can treat returned features as always finite.
    """
    try:
        result = float(value)
    except (TypeError, ValueError):
        return float(default)
    return result if math.isfinite(result) else float(default)


def _paired(x: ArrayLike, y: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    xs = np.asarray(x, dtype=float).reshape(-1)
    ys = np.asarray(y, dtype=float).reshape(-1)
    if xs.size != ys.size:
        raise ValueError(
            f"x and y must have the same length, got {xs.size} and {ys.size}"
        )
    return xs, ys


def linear_fit(x: ArrayLike, y: ArrayLike) -> LinearFit:
    """
    Fit ``y = slope * x + intercept`` by least squares.

    Parameters
    ----------
    x, y:
        Paired 1-D sequences of equal length.

    Returns
    -------
    LinearFit
        The fitted line. The slope is 0 when fewer than two points are given
        or when ``x`` has no variance; the intercept is then the mean of
        ``y`` (0 for empty input).
    """
    xs, ys = _paired(x, y)
    if xs.size == 0:
        return LinearFit(0.0, 0.0)

    mean_x = float(np.mean(xs))
    mean_y = float(np.mean(ys))
    if xs.size < 2:
        return LinearFit(0.0, mean_y)

    dx = xs - mean_x
    denominator = float(np.dot(dx, dx))
    if not denominator > 0.0:
        return LinearFit(0.0, mean_y)

    slope = float(np.dot(dx, ys - mean_y)) / denominator
    return LinearFit(slope, mean_y - slope * mean_x)


def linear_slope(x: ArrayLike, y: ArrayLike) -> float:
    """Shorthand for ``linear_fit(x, y).slope``."""
    return linear_fit(x, y).slope


def linear_trend(values: ArrayLike) -> LinearFit:
    """Fit a line to ``values`` against their indices ``0..n-1``."""
    ys = np.asarray(values, dtype=float).reshape(-1)
    return linear_fit(np.arange(ys.size, dtype=float), ys)


def goodness_of_fit(x: ArrayLike, y: ArrayLike, slope: float) -> float:
    """
    R² of a log-log line with the given ``slope``.

    ``x`` and ``y`` are the raw (positive) measurements; both are
    log-transformed here and the intercept is re-derived from ``slope`` and
    the log means. Returns 0 when fewer than two points are given or when
    ``log(y)`` has no variance.
    """
    xs, ys = _paired(x, y)
    if xs.size < 2:
        return 0.0

    with np.errstate(divide="ignore", invalid="ignore"):
        log_x = np.log(xs)
        log_y = np.log(ys)

    mean_log_x = float(np.mean(log_x))
    mean_log_y = float(np.mean(log_y))
    intercept = mean_log_y - slope * mean_log_x

    residuals = log_y - (slope * log_x + intercept)
    ss_res = float(np.dot(residuals, residuals))
    deviations = log_y - mean_log_y
    ss_tot = float(np.dot(deviations, deviations))

    if not ss_tot > 0.0:
        return 0.0
    return finite_or_default(1.0 - ss_res / ss_tot)


def euclidean_distance(p: ArrayLike, q: ArrayLike) -> Union[float, np.ndarray]:
    """
    Euclidean distance between points ``p`` and ``q``.

    Coordinates run along the last axis, so stacked points broadcast and a
    whole vector of pairwise distances comes back as an array.
    """
    diff = np.atleast_1d(np.asarray(p, dtype=float) - np.asarray(q, dtype=float))
    distance = np.sqrt(np.sum(diff * diff, axis=-1))
    if np.ndim(distance) == 0:
        return float(distance)
    return distance


__all__ = [
    "LinearFit",
    "euclidean_distance",
    "finite_or_default",
    "goodness_of_fit",
    "linear_fit",
    "linear_slope",
    "linear_trend",
]
