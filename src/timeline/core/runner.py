"""
Recomputation runner.

Re-derives cached values of a subtree, parent before child, inside a
candidate (states, cache) pair. Rejections are collected as
TransformationFailure records; anything else propagates.
"""

from __future__ import annotations

import inspect
import logging
from copy import deepcopy
from enum import Enum
from typing import List, Mapping, Union

from timeline.core.errors import TransformationError
from timeline.core.ids import INITIAL_ID, Id
from timeline.core.models import Cache, States, TransformationFailure, root_children
from timeline.core.registry import Transformation, TransformationRegistry

logger = logging.getLogger(__name__)


class FailurePolicy(str, Enum):
    """What happens to the descendants of a node whose transformation was rejected."""

    CONTINUE = "continue"  # Recompute them from the failed node's unchanged value
    HALT_SUBTREE = "halt_subtree"  # Leave them untouched


async def run(
    transformations: Union[TransformationRegistry, Mapping[str, Transformation]],
    start_id: Id,
    states: States,
    cache: Cache,
    *,
    failure_policy: FailurePolicy = FailurePolicy.CONTINUE,
) -> List[TransformationFailure]:
    """
    Recompute ``start_id`` and its descendants in place.

    Args:
        transformations: Registry or mapping of name -> transformation
        start_id: First node to recompute; "initial" recomputes the whole tree
        states: Candidate recipe tree
        cache: Candidate value cache, updated in place
        failure_policy: Handling of descendants of a rejected node

    Returns:
        Failures in processing order; empty means every node was derived
    """
    registry = TransformationRegistry.from_mapping(transformations)
    failures: List[TransformationFailure] = []
    queue: List[Id] = root_children(states) if start_id == INITIAL_ID else [start_id]

    for node_id in queue:
        node = states[node_id]
        fn = registry.get(node.transformation_name)

        # Each transformation gets its own copy so it may mutate freely
        state_input = deepcopy(cache[node.parent_id])

        try:
            output = fn(state_input, *node.transformation_args)
            if inspect.isawaitable(output):
                output = await output
        except TransformationError as exc:
            failures.append(TransformationFailure(id=node_id, message=exc.message))
            logger.info("Transformation %s rejected at %s: %s", node.describe(), node_id, exc.message)
            if failure_policy == FailurePolicy.HALT_SUBTREE:
                logger.debug("Skipping %d descendant(s) of %s", len(node.children_ids), node_id)
                continue
            queue.extend(node.children_ids)
            continue

        cache[node_id] = output
        queue.extend(node.children_ids)
        logger.debug("Derived %s via %s", node_id, node.describe())

    return failures
