"""Typed configuration records for the spectral and fractal analyzers."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import logging
import math
from pathlib import Path
import re
from typing import Any, Mapping, MutableMapping

import yaml

from ..analysis.fft import is_power_of_two
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Keys used by older option blocks for the nested fractal sections.
_NESTED_ALIASES = {
    "correlation_dimension": "correlation",
}


def _snake(key: str) -> str:
    """Normalise ``windowSize`` / ``window-size`` / ``window_size`` alike."""
    text = str(key).strip().replace("-", "_")
    return _CAMEL_BOUNDARY.sub("_", text).lower()


def _normalize_keys(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    normalized: MutableMapping[str, Any] = {}
    for key, value in data.items():
        name = _snake(key)
        normalized[_NESTED_ALIASES.get(name, name)] = value
    return normalized


def _field_names(cls: type) -> set[str]:
    return {f.name for f in fields(cls)}


def _as_int(name: str, value: Any, *, minimum: int) -> int:
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None
    if not math.isfinite(as_float) or not as_float.is_integer():
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    result = int(as_float)
    if result < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {result}")
    return result


def _as_positive_float(name: str, value: Any) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(result) or result <= 0.0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {value!r}")
    return result


def _as_overlap(name: str, value: Any) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None
    if not 0.0 <= result < 1.0:
        raise ConfigurationError(f"{name} must be in [0, 1), got {result}")
    return result


def _checked_changes(cls: type, changes: Mapping[str, Any]) -> dict[str, Any]:
    normalized = dict(_normalize_keys(changes))
    unknown = set(normalized) - _field_names(cls)
    if unknown:
        raise ConfigurationError(
            f"Unknown {cls.__name__} option(s): {', '.join(sorted(unknown))}"
        )
    return normalized


def _known_only(cls: type, data: Mapping[str, Any] | None) -> dict[str, Any]:
    if not data:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"Expected mapping for {cls.__name__}, got {type(data).__name__}"
        )
    normalized = _normalize_keys(data)
    ignored = set(normalized) - _field_names(cls)
    if ignored:
        logger.debug("Ignoring unknown %s keys: %s", cls.__name__, sorted(ignored))
    return {key: normalized[key] for key in normalized.keys() & _field_names(cls)}


@dataclass(frozen=True, slots=True)
class SpectralConfig:
    """
    Options for :class:`~signalcomplexity.analysis.spectral.SpectralAnalyzer`.

    ``window_type`` values other than hann/hamming/blackman select the
    rectangular window. ``overlap`` is not used by a single ``analyze`` call;
    it sets the hop between frames when a recording is split up.
    """

    window_size: int = 256
    window_type: str = "hann"
    fft_size: int = 512
    sample_rate: float = 1000.0
    overlap: float = 0.5

    def __post_init__(self) -> None:
        if not is_power_of_two(self.fft_size):
            raise ConfigurationError(
                f"fft_size must be a power of two, got {self.fft_size!r}"
            )
        object.__setattr__(self, "fft_size", int(float(self.fft_size)))
        object.__setattr__(
            self, "window_size", _as_int("window_size", self.window_size, minimum=1)
        )
        object.__setattr__(
            self, "window_type", str(self.window_type or "").strip().lower()
        )
        object.__setattr__(
            self, "sample_rate", _as_positive_float("sample_rate", self.sample_rate)
        )
        object.__setattr__(self, "overlap", _as_overlap("overlap", self.overlap))

    @property
    def bin_width_hz(self) -> float:
        return self.sample_rate / self.fft_size

    def merged(self, **changes: Any) -> SpectralConfig:
        """Return a copy with ``changes`` applied (camelCase keys accepted)."""
        if not changes:
            return self
        return replace(self, **_checked_changes(SpectralConfig, changes))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> SpectralConfig:
        """Build from a mapping, ignoring unknown keys."""
        return cls(**_known_only(cls, data))

    def to_mapping(self) -> dict:
        return {
            "windowSize": self.window_size,
            "windowType": self.window_type,
            "fftSize": self.fft_size,
            "sampleRate": self.sample_rate,
            "overlap": self.overlap,
        }


@dataclass(frozen=True, slots=True)
class CorrelationConfig:
    """Radius grid for the correlation integral."""

    min_distance: float = 0.01
    max_distance: float = 1.0
    num_points: int = 100

    def __post_init__(self) -> None:
        low = _as_positive_float("min_distance", self.min_distance)
        high = _as_positive_float("max_distance", self.max_distance)
        if low > high:
            raise ConfigurationError(
                f"min_distance ({low}) must not exceed max_distance ({high})"
            )
        object.__setattr__(self, "min_distance", low)
        object.__setattr__(self, "max_distance", high)
        object.__setattr__(
            self, "num_points", _as_int("num_points", self.num_points, minimum=1)
        )


@dataclass(frozen=True, slots=True)
class HiguchiConfig:
    """Range of decimation intervals ``k``."""

    min_k: int = 2
    max_k: int = 20

    def __post_init__(self) -> None:
        low = _as_int("min_k", self.min_k, minimum=1)
        high = _as_int("max_k", self.max_k, minimum=low)
        object.__setattr__(self, "min_k", low)
        object.__setattr__(self, "max_k", high)


@dataclass(frozen=True, slots=True)
class DFAConfig:
    """
    Range of detrending window sizes.

    ``overlap`` is validated and round-tripped only; fluctuations are
    always measured over non-overlapping windows.
    """

    min_window_size: int = 4
    max_window_size: int = 64
    overlap: float = 0.5

    def __post_init__(self) -> None:
        low = _as_int("min_window_size", self.min_window_size, minimum=2)
        high = _as_int("max_window_size", self.max_window_size, minimum=low)
        object.__setattr__(self, "min_window_size", low)
        object.__setattr__(self, "max_window_size", high)
        object.__setattr__(self, "overlap", _as_overlap("overlap", self.overlap))


_NESTED_TYPES = {
    "correlation": CorrelationConfig,
    "higuchi": HiguchiConfig,
    "dfa": DFAConfig,
}


@dataclass(frozen=True, slots=True)
class FractalConfig:
    """
    Options for :class:`~signalcomplexity.analysis.fractal.FractalAnalyzer`.

    The nested sections accept either their record type or a plain mapping.
    """

    min_box_size: int = 2
    max_box_size: int = 64
    correlation: CorrelationConfig = field(default_factory=CorrelationConfig)
    higuchi: HiguchiConfig = field(default_factory=HiguchiConfig)
    dfa: DFAConfig = field(default_factory=DFAConfig)

    def __post_init__(self) -> None:
        low = _as_int("min_box_size", self.min_box_size, minimum=1)
        high = _as_int("max_box_size", self.max_box_size, minimum=low)
        object.__setattr__(self, "min_box_size", low)
        object.__setattr__(self, "max_box_size", high)
        for name, cls in _NESTED_TYPES.items():
            value = getattr(self, name)
            if isinstance(value, cls):
                continue
            if value is None:
                object.__setattr__(self, name, cls())
            elif isinstance(value, Mapping):
                object.__setattr__(self, name, cls(**_checked_changes(cls, value)))
            else:
                raise ConfigurationError(
                    f"{name} must be a {cls.__name__} or mapping, got {type(value).__name__}"
                )

    def merged(self, **changes: Any) -> FractalConfig:
        """
        Return a copy with ``changes`` applied.

        Nested sections given as mappings are merged over the current section
        rather than replacing it.
        """
        if not changes:
            return self
        normalized = _checked_changes(FractalConfig, changes)
        for name, cls in _NESTED_TYPES.items():
            value = normalized.get(name)
            if isinstance(value, Mapping):
                current = getattr(self, name)
                normalized[name] = replace(current, **_checked_changes(cls, value))
        return replace(self, **normalized)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> FractalConfig:
        """Build from a mapping, ignoring unknown keys at every level."""
        payload = _known_only(cls, data)
        for name, nested in _NESTED_TYPES.items():
            if isinstance(payload.get(name), Mapping):
                payload[name] = nested(**_known_only(nested, payload[name]))
        return cls(**payload)

    def to_mapping(self) -> dict:
        return {
            "minBoxSize": self.min_box_size,
            "maxBoxSize": self.max_box_size,
            "correlationDimension": {
                "minDistance": self.correlation.min_distance,
                "maxDistance": self.correlation.max_distance,
                "numPoints": self.correlation.num_points,
            },
            "higuchi": {"minK": self.higuchi.min_k, "maxK": self.higuchi.max_k},
            "dfa": {
                "minWindowSize": self.dfa.min_window_size,
                "maxWindowSize": self.dfa.max_window_size,
                "overlap": self.dfa.overlap,
            },
        }


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Spectral and fractal options travelling together."""

    spectral: SpectralConfig = field(default_factory=SpectralConfig)
    fractal: FractalConfig = field(default_factory=FractalConfig)

    def to_mapping(self) -> dict:
        return {
            "spectral": self.spectral.to_mapping(),
            "fractal": self.fractal.to_mapping(),
        }


def _unwrap(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """Accept an optional top-level ``analysis`` block."""
    block = data.get("analysis")
    if isinstance(block, Mapping):
        return block
    return data


def config_from_mapping(data: Mapping[str, Any] | None) -> AnalysisConfig:
    """
    Build :class:`AnalysisConfig` from ``data``.

    Supported shape::

        analysis:            # optional wrapper
          spectral:
            windowSize: 128
            fftSize: 256
          fractal:
            maxBoxSize: 32
            higuchi: {maxK: 10}

    Unknown keys are ignored; invalid values raise ConfigurationError.
    """
    if not data:
        return AnalysisConfig()
    root = _unwrap(data)
    return AnalysisConfig(
        spectral=SpectralConfig.from_mapping(root.get("spectral")),
        fractal=FractalConfig.from_mapping(root.get("fractal")),
    )


def load_config(path: str | Path | None) -> AnalysisConfig:
    """
    Load configuration from a YAML file at ``path``.

    Missing files fall back to default :class:`AnalysisConfig`.
    """
    if path is None:
        return AnalysisConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        logger.debug("Config file %s not found; using defaults", cfg_path)
        return AnalysisConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            f"Expected mapping in {cfg_path}, got {type(raw).__name__}"
        )
    return config_from_mapping(raw)


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
