"""Configuration records and loaders.

Typed, frozen dataclasses (see :mod:`runtime`) carry named defaults for both
analyzers. They can be built from plain mappings with camelCase or
snake_case keys, or loaded from a YAML file.
"""

from .runtime import (
    AnalysisConfig,
    CorrelationConfig,
    DFAConfig,
    FractalConfig,
    HiguchiConfig,
    SpectralConfig,
    config_from_mapping,
    load_config,
)

__all__ = [
    "AnalysisConfig",
    "CorrelationConfig",
    "DFAConfig",
    "FractalConfig",
    "HiguchiConfig",
    "SpectralConfig",
    "config_from_mapping",
    "load_config",
]
