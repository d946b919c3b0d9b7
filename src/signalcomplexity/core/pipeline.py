"""Run the spectral and fractal analyzers side by side on sample windows."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, List

from numpy.typing import ArrayLike

from ..analysis.features import FractalFeatures, SpectralAnalysis
from ..analysis.fractal import FractalAnalyzer
from ..analysis.spectral import SpectralAnalyzer
from ..config.runtime import AnalysisConfig
from .frames import SampleWindowBuffer, hop_size, iter_frames

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ComplexityReport:
    """Both analyzers' results for the same window. No merging is done here."""

    spectral: SpectralAnalysis
    fractal: FractalFeatures

    def to_mapping(self) -> dict:
        return {
            "spectral": self.spectral.to_mapping(),
            "fractal": self.fractal.to_mapping(),
        }


class ComplexityPipeline:
    """
    Hand each window to both analyzers independently.

    Recordings and streams are cut into frames of the spectral
    ``window_size`` with the configured ``overlap``. The frame length also
    bounds the quadratic cost of the correlation dimension, so keep it small
    enough for the caller's per-frame time budget.
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config or AnalysisConfig()
        self.spectral = SpectralAnalyzer(self._config.spectral)
        self.fractal = FractalAnalyzer(self._config.fractal)
        self._buffer = SampleWindowBuffer(self.frame_size)
        self._since_last = 0

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    @property
    def frame_size(self) -> int:
        return self._config.spectral.window_size

    @property
    def hop(self) -> int:
        return hop_size(self.frame_size, self._config.spectral.overlap)

    def analyze(self, window: ArrayLike) -> ComplexityReport:
        """Analyze one window with both analyzers."""
        return ComplexityReport(
            spectral=self.spectral.analyze(window),
            fractal=self.fractal.analyze(window),
        )

    def analyze_recording(self, signal: ArrayLike) -> List[ComplexityReport]:
        """Frame a whole recording and analyze every frame."""
        reports = [
            self.analyze(frame)
            for frame in iter_frames(signal, self.frame_size, self._config.spectral.overlap)
        ]
        logger.debug("Analyzed %d frames", len(reports))
        return reports

    def push(self, samples: Iterable[float]) -> List[ComplexityReport]:
        """
        Feed streaming samples.

        Returns a report for every frame completed by these samples: the
        first once the buffer fills, then one per hop.
        """
        reports: List[ComplexityReport] = []
        hop = self.hop
        for value in samples:
            self._buffer.append(value)
            self._since_last += 1
            # The fill itself counts frame_size >= hop samples.
            if self._buffer.is_full and self._since_last >= hop:
                reports.append(self.analyze(self._buffer.snapshot()))
                self._since_last = 0
        return reports

    def reset(self) -> None:
        """Drop buffered streaming samples."""
        self._buffer.clear()
        self._since_last = 0


__all__ = ["ComplexityPipeline", "ComplexityReport"]
