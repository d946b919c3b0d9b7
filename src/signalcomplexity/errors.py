"""Exception types raised by signalcomplexity."""

from __future__ import annotations


class SignalComplexityError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(SignalComplexityError, ValueError):
    """
    Raised when an analyzer is configured with structurally invalid options.

    Degenerate *input* (short windows, constant signals, zero energy) never
    raises; it yields the documented sentinel values instead.
    """


__all__ = ["SignalComplexityError", "ConfigurationError"]
