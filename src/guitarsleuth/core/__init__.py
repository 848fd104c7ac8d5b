"""Core dating and identification engines for guitarsleuth.

This package exposes the pure functions the CLI and other callers use:
- classify_serial: Classifies a serial number with an ordered rule table.
- resolve_neck_block: Decodes a neck-block Emperor date stamp.
- lookup_serial: Combines both with catalog evidence into one confidence.
- match_features: Ranks models against observed physical features.
- QuizFlow: Drives match_features one feature category at a time.
"""

from guitarsleuth.core.aggregator import lookup_serial
from guitarsleuth.core.emperor_code import resolve_neck_block
from guitarsleuth.core.feature_matcher import match_features
from guitarsleuth.core.quiz import QuizError, QuizFlow
from guitarsleuth.core.serial_classifier import (
    MissingSerialError,
    classify_serial,
    normalize_serial,
)

__all__ = [
    "MissingSerialError",
    "QuizError",
    "QuizFlow",
    "classify_serial",
    "lookup_serial",
    "match_features",
    "normalize_serial",
    "resolve_neck_block",
]
