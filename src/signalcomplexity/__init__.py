"""
Spectral and fractal complexity descriptors for sampled signals.

:class:`SpectralAnalyzer` and :class:`FractalAnalyzer` each turn one window
of samples into an immutable feature record; :class:`ComplexityPipeline`
runs both over recordings or live streams.
"""

__version__ = "1.0.0"

from .analysis.features import (
    ComplexityAssessment,
    FractalFeatures,
    SpectralAnalysis,
    SpectralFeatures,
)
from .analysis.fractal import FractalAnalyzer
from .analysis.spectral import SpectralAnalyzer
from .analysis.windows import generate_window
from .config import AnalysisConfig, FractalConfig, SpectralConfig, config_from_mapping, load_config
from .core import ComplexityPipeline, ComplexityReport
from .errors import ConfigurationError, SignalComplexityError

__all__ = [
    "AnalysisConfig",
    "ComplexityAssessment",
    "ComplexityPipeline",
    "ComplexityReport",
    "ConfigurationError",
    "FractalAnalyzer",
    "FractalConfig",
    "FractalFeatures",
    "SignalComplexityError",
    "SpectralAnalysis",
    "SpectralAnalyzer",
    "SpectralConfig",
    "SpectralFeatures",
    "config_from_mapping",
    "generate_window",
    "load_config",
]
