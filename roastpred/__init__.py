"""
Roast Predictor

Predicts a coffee roast bean-temperature and rate-of-rise curve from a handful
of checkpoints, and lines up hand-logged readings against it.
"""

from .checkpoints import format_mmss, sample_checkpoints
from .overlay import ActualReadings
from .params import DEFAULT_PARAMETERS, RoastParameters, normalize_parameters
from .phases import find_crossing_time, segment_phases, summarize_curve
from .rootfind import bisect_root
from .sessions import RoastSession, SessionStore, SessionStoreError
from .synthesizer import (
    apply_tail_correction,
    build_ror_profile,
    cubic_shape,
    exponential_shape,
    integrate_ror,
    synthesize,
)

__version__ = "0.1.0"

__all__ = [
    "ActualReadings",
    "DEFAULT_PARAMETERS",
    "RoastParameters",
    "RoastSession",
    "SessionStore",
    "SessionStoreError",
    "apply_tail_correction",
    "bisect_root",
    "build_ror_profile",
    "cubic_shape",
    "exponential_shape",
    "find_crossing_time",
    "format_mmss",
    "integrate_ror",
    "normalize_parameters",
    "sample_checkpoints",
    "segment_phases",
    "summarize_curve",
    "synthesize",
]
