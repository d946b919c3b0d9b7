"""Frame slicing and a fixed-size sample ring for streaming input."""

from __future__ import annotations

from typing import Iterable, Iterator

import numpy as np
from numpy.typing import ArrayLike

from ..errors import ConfigurationError
from ..analysis.features import to_sample_window


def hop_size(frame_size: int, overlap: float) -> int:
    """Samples between successive frame starts for the given overlap."""
    if frame_size <= 0:
        raise ValueError(f"frame_size must be a positive integer, got {frame_size}")
    if not 0.0 <= overlap < 1.0:
        raise ConfigurationError(f"overlap must be in [0, 1), got {overlap}")
    return max(1, int(round(frame_size * (1.0 - overlap))))


def iter_frames(signal: ArrayLike, frame_size: int, overlap: float = 0.0) -> Iterator[np.ndarray]:
    """
    Yield successive ``frame_size`` slices of ``signal``.

    The trailing partial frame is dropped. A non-empty signal shorter than
    one frame is yielded once as-is so short recordings still get analysed.
    """
    samples = to_sample_window(signal)
    hop = hop_size(frame_size, overlap)
    total = samples.size
    if total == 0:
        return
    if total < frame_size:
        yield samples
        return
    for start in range(0, total - frame_size + 1, hop):
        yield samples[start : start + frame_size]


class SampleWindowBuffer:
    """
    Fixed-size ring of float samples.
    Overwrites the oldest samples when full.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._data = np.zeros(self._capacity, dtype=float)
        self._start = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return self._size == self._capacity

    def append(self, value: float) -> None:
        idx = (self._start + self._size) % self._capacity
        self._data[idx] = float(value)
        if self._size < self._capacity:
            self._size += 1
        else:
            self._start = (self._start + 1) % self._capacity

    def extend(self, values: Iterable[float]) -> None:
        for value in values:
            self.append(value)

    def clear(self) -> None:
        self._data = np.zeros(self._capacity, dtype=float)
        self._start = 0
        self._size = 0

    def snapshot(self) -> np.ndarray:
        """Return a copy of the buffered samples ordered oldest to newest."""
        order = (self._start + np.arange(self._size)) % self._capacity
        return self._data[order]

    def __len__(self) -> int:  # pragma: no cover - trivial
        return self._size


__all__ = ["SampleWindowBuffer", "hop_size", "iter_frames"]
