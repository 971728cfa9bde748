"""Versioned state-transformation timeline."""

from timeline.core import (
    INITIAL_ID,
    BranchError,
    BranchResult,
    EditResult,
    FailurePolicy,
    RemoveResult,
    StaleResultError,
    Timeline,
    TransformationError,
    TransformationRegistry,
    cache_as_tree,
    cache_with_relatives,
)
from timeline.config import TimelineSettings, load_settings

__version__ = "0.1.0"

__all__ = [
    "INITIAL_ID",
    "Timeline",
    "TimelineSettings",
    "load_settings",
    "TransformationRegistry",
    "FailurePolicy",
    "BranchResult",
    "EditResult",
    "RemoveResult",
    "BranchError",
    "StaleResultError",
    "TransformationError",
    "cache_as_tree",
    "cache_with_relatives",
]
