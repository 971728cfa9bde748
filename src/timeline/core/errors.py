"""Error taxonomy of the timeline engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from timeline.core.models import TransformationFailure


class TimelineError(Exception):
    """Base class for all engine errors."""


class BranchError(TimelineError):
    """
    Structural failure surfaced by ``apply()``.

    Raised when a result represents a missing identifier (or another failed
    precondition) or an aggregate of transformation failures.
    """

    def __init__(self, message: str, failures: Optional[Sequence["TransformationFailure"]] = None):
        self.message = message
        self.failures: List["TransformationFailure"] = list(failures or [])
        super().__init__(message)


class StaleResultError(BranchError):
    """Raised when a result is applied after the live timeline moved on."""


class TransformationError(TimelineError):
    """
    Raised by transformation functions to reject their input.

    The recomputation runner turns it into a recorded failure; it never
    escapes the runner.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RegistryError(TimelineError):
    """Invalid transformation registration."""


def missing_state_message(node_id: str) -> str:
    return f"State '{node_id}' does not exist"


def format_failures(failures: Sequence["TransformationFailure"]) -> str:
    """Join failures as ``'message' at 'id'`` separated by commas."""
    return ",".join(failure.describe() for failure in failures)


def aggregate_message(verb: str, node_id: str, failures: Sequence["TransformationFailure"]) -> str:
    """
    Build the message of a ``BranchError`` that aggregates failures.

    Args:
        verb: Gerund describing the operation ("Branching from", "Editing")
        node_id: Identifier the operation targeted
        failures: Failures recorded during recomputation

    Returns:
        Message like "Editing 'a' resulted in following errors: 'boom' at 'b'"
    """
    return f"{verb} '{node_id}' resulted in following errors: {format_failures(failures)}"
