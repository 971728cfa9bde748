"""
Deferred results of timeline operations.

Every ``branch``/``edit``/``remove`` call returns one of these instead of
mutating the timeline. A result is one of three variants:

- OK: a candidate (states, cache) pair is ready; ``apply()`` installs it
- BRANCH_ERROR: a precondition failed; no candidate was built
- TRANSFORMATION_ERROR: the candidate was built but some transformation
  rejected its input; ``apply()`` always raises

Callback accessors (``ok``, ``transformation_error``, ``branch_error``) run
their callback synchronously only when the variant matches and always return
the same handle, so they can be chained.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from timeline.core.errors import BranchError
from timeline.core.ids import Id
from timeline.core.models import Cache, States, TransformationFailure

Applicator = Callable[[], None]


class Outcome(str, Enum):
    OK = "ok"
    BRANCH_ERROR = "branch_error"
    TRANSFORMATION_ERROR = "transformation_error"


@dataclass(frozen=True)
class OperationResult:
    """Fields shared by all result variants."""

    outcome: Outcome
    message: Optional[str] = None
    states: Optional[States] = field(default=None, repr=False)
    cache: Optional[Cache] = field(default=None, repr=False)
    failures: List[TransformationFailure] = field(default_factory=list)
    applicator: Optional[Applicator] = field(default=None, repr=False, compare=False)

    @property
    def succeeded(self) -> bool:
        return self.outcome == Outcome.OK

    def _commit(self) -> None:
        if self.outcome != Outcome.OK or self.applicator is None:
            raise BranchError(self.message or "Result cannot be applied", self.failures)
        self.applicator()

    def apply(self) -> None:
        self._commit()

    def ok(self, callback: Callable[[States, Cache, Applicator], None]) -> "OperationResult":
        if self.outcome == Outcome.OK:
            callback(self.states, self.cache, self._commit)
        return self


@dataclass(frozen=True)
class EditResult(OperationResult):
    """Result of ``Timeline.edit`` and ``Timeline.recompute``."""

    def transformation_error(
        self, callback: Callable[[States, Cache, List[TransformationFailure]], None]
    ) -> "EditResult":
        if self.outcome == Outcome.TRANSFORMATION_ERROR:
            callback(self.states, self.cache, self.failures)
        return self

    def branch_error(self, callback: Callable[[str], None]) -> "EditResult":
        if self.outcome == Outcome.BRANCH_ERROR:
            callback(self.message)
        return self


@dataclass(frozen=True)
class BranchResult(OperationResult):
    """Result of ``Timeline.branch``; carries the identifier of the new node."""

    id: Optional[Id] = None

    def apply(self) -> Id:
        self._commit()
        return self.id

    def ok(self, callback: Callable[[Id, States, Cache, Applicator], None]) -> "BranchResult":
        if self.outcome == Outcome.OK:
            callback(self.id, self.states, self.cache, self._commit)
        return self

    def transformation_error(
        self, callback: Callable[[Id, States, Cache, List[TransformationFailure]], None]
    ) -> "BranchResult":
        if self.outcome == Outcome.TRANSFORMATION_ERROR:
            callback(self.id, self.states, self.cache, self.failures)
        return self

    def branch_error(self, callback: Callable[[str], None]) -> "BranchResult":
        if self.outcome == Outcome.BRANCH_ERROR:
            callback(self.message)
        return self


@dataclass(frozen=True)
class RemoveResult(OperationResult):
    """Result of ``Timeline.remove``. Removal never runs transformations."""
