"""
Timeline orchestrator.

Owns the live (states, cache) pair. Every structural operation works on a
deep-copied candidate pair and returns a deferred result; the live pair only
changes when a successful result is applied.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Union

from timeline.config import TimelineSettings
from timeline.core.errors import (
    StaleResultError,
    aggregate_message,
    missing_state_message,
)
from timeline.core.ids import INITIAL_ID, Id, IdFactory
from timeline.core.models import Cache, StateNode, States, TransformationFailure, clone_pair, iter_subtree
from timeline.core.registry import Transformation, TransformationRegistry
from timeline.core.results import (
    Applicator,
    BranchResult,
    EditResult,
    Outcome,
    RemoveResult,
)
from timeline.core.runner import run
from timeline.utils.logging import log_calls

logger = logging.getLogger(__name__)


class Timeline:
    """Versioned tree of states derived from one initial value by named transformations."""

    def __init__(
        self,
        transformations: Union[TransformationRegistry, Mapping[str, Transformation]],
        create_initial: Callable[[], Any],
        *,
        id_factory: Optional[IdFactory] = None,
        settings: Optional[TimelineSettings] = None,
    ):
        self.settings = settings or TimelineSettings()
        self.transformations = TransformationRegistry.from_mapping(transformations)
        self.id_factory = id_factory or self.settings.make_id_factory()

        self._states: States = {}
        self._cache: Cache = {INITIAL_ID: create_initial()}
        self._version = 0

    # =========================================================================
    # Read Access
    # =========================================================================

    def get_states(self) -> States:
        """Live recipe map. Treat as read-only; a later apply swaps it out."""
        return self._states

    def get_cache(self) -> Cache:
        """Live value map. Treat as read-only; a later apply swaps it out."""
        return self._cache

    @property
    def version(self) -> int:
        """Number of results applied so far."""
        return self._version

    def has_state(self, node_id: Id) -> bool:
        return node_id == INITIAL_ID or node_id in self._states

    # =========================================================================
    # Structural Operations
    # =========================================================================

    @log_calls(__name__)
    async def branch(self, parent_id: Id, transformation_name: str, *args: Any) -> BranchResult:
        """
        Derive a new child of ``parent_id``.

        The new node is computed in a candidate pair; nothing changes until
        the returned result is applied.
        """
        if not self.has_state(parent_id):
            return self._branch_failed(BranchResult, missing_state_message(parent_id))
        problem = self.transformations.check_arguments(transformation_name, args)
        if problem:
            return self._branch_failed(BranchResult, problem)

        states, cache = clone_pair(self._states, self._cache)
        new_id = self.id_factory()
        if new_id == INITIAL_ID or new_id in states:
            raise ValueError(f"Identifier factory produced a duplicate id: {new_id}")

        states[new_id] = StateNode(
            transformation_name=transformation_name,
            transformation_args=args,
            parent_id=parent_id,
        )
        if parent_id != INITIAL_ID:
            states[parent_id].children_ids.append(new_id)

        logger.debug("Candidate %s created under %s", new_id, parent_id)
        failures = await run(
            self.transformations, new_id, states, cache, failure_policy=self.settings.failure_policy
        )

        if failures:
            return BranchResult(
                outcome=Outcome.TRANSFORMATION_ERROR,
                message=aggregate_message("Branching from", parent_id, failures),
                states=states,
                cache=cache,
                failures=failures,
                id=new_id,
            )

        return BranchResult(
            outcome=Outcome.OK,
            states=states,
            cache=cache,
            applicator=self._applicator(states, cache),
            id=new_id,
        )

    @log_calls(__name__)
    async def edit(self, node_id: Id, transformation_name: str, *args: Any) -> EditResult:
        """
        Replace the recipe of ``node_id`` and recompute it and every descendant.

        The root has no recipe and cannot be edited.
        """
        if node_id not in self._states:
            return self._branch_failed(EditResult, missing_state_message(node_id))
        problem = self.transformations.check_arguments(transformation_name, args)
        if problem:
            return self._branch_failed(EditResult, problem)

        states, cache = clone_pair(self._states, self._cache)
        node = states[node_id]
        node.transformation_name = transformation_name
        node.transformation_args = args

        logger.debug("Candidate edit of %s to %s", node_id, node.describe())
        failures = await run(
            self.transformations, node_id, states, cache, failure_policy=self.settings.failure_policy
        )
        return self._recomputed("Editing", node_id, states, cache, failures)

    @log_calls(__name__)
    async def recompute(self) -> EditResult:
        """Re-derive every state from the root value, e.g. after transformations changed."""
        states, cache = clone_pair(self._states, self._cache)
        failures = await run(
            self.transformations, INITIAL_ID, states, cache, failure_policy=self.settings.failure_policy
        )
        return self._recomputed("Recomputing", INITIAL_ID, states, cache, failures)

    @log_calls(__name__)
    def remove(self, node_id: Id) -> RemoveResult:
        """Prune ``node_id`` and its whole subtree from both maps."""
        if node_id not in self._states:
            return self._branch_failed(RemoveResult, missing_state_message(node_id))

        states, cache = clone_pair(self._states, self._cache)
        node = states[node_id]
        if node.parent_id != INITIAL_ID:
            states[node.parent_id].children_ids.remove(node_id)

        for doomed in list(iter_subtree(states, node_id)):
            del states[doomed]
            cache.pop(doomed, None)

        return RemoveResult(
            outcome=Outcome.OK,
            states=states,
            cache=cache,
            applicator=self._applicator(states, cache),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _branch_failed(self, result_cls, message: str):
        logger.warning("Rejected operation: %s", message)
        return result_cls(outcome=Outcome.BRANCH_ERROR, message=message)

    def _recomputed(
        self,
        verb: str,
        node_id: Id,
        states: States,
        cache: Cache,
        failures: List[TransformationFailure],
    ) -> EditResult:
        if failures:
            return EditResult(
                outcome=Outcome.TRANSFORMATION_ERROR,
                message=aggregate_message(verb, node_id, failures),
                states=states,
                cache=cache,
                failures=failures,
            )
        return EditResult(
            outcome=Outcome.OK,
            states=states,
            cache=cache,
            applicator=self._applicator(states, cache),
        )

    def _applicator(self, states: States, cache: Cache) -> Applicator:
        """Build the commit closure for a candidate pair snapshotted at the current version."""
        snapshot_version = self._version

        def apply() -> None:
            if self._states is states and self._cache is cache:
                return
            if self.settings.strict_apply and self._version != snapshot_version:
                raise StaleResultError(
                    f"Timeline changed since this result was computed "
                    f"(version {snapshot_version}, now {self._version})"
                )
            self._states = states
            self._cache = cache
            self._version += 1
            logger.info("Applied candidate: %d state(s), version %d", len(states), self._version)

        return apply
