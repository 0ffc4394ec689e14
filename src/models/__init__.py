"""
Models package for phtmlmin

Contains data structures and type definitions for the minification pipeline.
"""

from .state import ProgramState, MinifyReport, pipeline
from .minifier import (
    StashedContent,
    TransformFailure,
    TransformOk,
    TransformErr,
    TransformResult,
    BodyState,
    Strategy,
    MinifyResult,
)

__all__ = [
    "ProgramState",
    "MinifyReport",
    "pipeline",
    "StashedContent",
    "TransformFailure",
    "TransformOk",
    "TransformErr",
    "TransformResult",
    "BodyState",
    "Strategy",
    "MinifyResult",
]
