"""
Timeline engine core.

Components:
- StateNode / States / Cache: recipe tree and materialized values
- TransformationRegistry: named transformations over one state type
- run: topological recomputation of a subtree
- Timeline: branch / edit / remove with deferred, atomic apply
- cache_with_relatives / cache_as_tree: read-only views for renderers

Example:
    from timeline.core import Timeline

    timeline = Timeline({"add": lambda n, k: n + k}, lambda: 0)
    node_id = (await timeline.branch("initial", "add", 2)).apply()
    timeline.get_cache()[node_id]  # 2
"""

from timeline.core.errors import (
    BranchError,
    RegistryError,
    StaleResultError,
    TimelineError,
    TransformationError,
)
from timeline.core.ids import INITIAL_ID, Id, IdFactory, SequentialIds, uuid_ids
from timeline.core.models import Cache, StateNode, States, TransformationFailure
from timeline.core.registry import Transformation, TransformationRegistry
from timeline.core.runner import FailurePolicy, run
from timeline.core.results import BranchResult, EditResult, Outcome, RemoveResult
from timeline.core.timeline import Timeline
from timeline.core.projections import NodeRelatives, TreeViewNode, cache_as_tree, cache_with_relatives

__all__ = [
    "INITIAL_ID",
    "Id",
    "IdFactory",
    "SequentialIds",
    "uuid_ids",
    "StateNode",
    "States",
    "Cache",
    "TransformationFailure",
    "Transformation",
    "TransformationRegistry",
    "FailurePolicy",
    "run",
    "Outcome",
    "BranchResult",
    "EditResult",
    "RemoveResult",
    "Timeline",
    "NodeRelatives",
    "TreeViewNode",
    "cache_with_relatives",
    "cache_as_tree",
    "TimelineError",
    "BranchError",
    "StaleResultError",
    "TransformationError",
    "RegistryError",
]
