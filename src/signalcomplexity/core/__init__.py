"""Framing and orchestration around the analyzers.

This package cuts recordings or live sample streams into fixed-size frames
(:mod:`frames`) and hands each frame to both analyzers (:mod:`pipeline`).
"""

from .frames import SampleWindowBuffer, hop_size, iter_frames
from .pipeline import ComplexityPipeline, ComplexityReport

__all__ = [
    "SampleWindowBuffer",
    "hop_size",
    "iter_frames",
    "ComplexityPipeline",
    "ComplexityReport",
]
