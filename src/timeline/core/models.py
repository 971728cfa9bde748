"""
Timeline data models.

The timeline keeps two parallel maps:
- States: the recipe tree (transformation name, arguments, parent, children)
- Cache: the materialized value of every successfully derived state

Tree Structure:
    initial (root value, no recipe)
    ├── a  move(0, X)
    │   ├── b  move(4, O)
    │   └── c  move(8, O)
    └── d  move(4, X)

The root never appears in States. Its children are derived by scanning for
nodes whose parent is "initial".
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Iterator, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from timeline.core.ids import INITIAL_ID, Id


class StateNode(BaseModel):
    """Recipe of a single non-root state."""

    transformation_name: str
    transformation_args: Tuple[Any, ...] = ()
    parent_id: Id
    children_ids: List[Id] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def is_root_child(self) -> bool:
        return self.parent_id == INITIAL_ID

    @property
    def is_leaf(self) -> bool:
        return len(self.children_ids) == 0

    def describe(self) -> str:
        """Human-readable recipe, e.g. ``move(0, 'X')``."""
        args = ", ".join(repr(arg) for arg in self.transformation_args)
        return f"{self.transformation_name}({args})"


class TransformationFailure(BaseModel):
    """A transformation rejected its input while deriving ``id``."""

    id: Id
    message: str

    model_config = ConfigDict(frozen=True)

    def describe(self) -> str:
        return f"'{self.message}' at '{self.id}'"


States = Dict[Id, StateNode]
Cache = Dict[Id, Any]


def clone_pair(states: States, cache: Cache) -> Tuple[States, Cache]:
    """Deep-copy a (states, cache) pair into an independent candidate pair."""
    return deepcopy(states), deepcopy(cache)


def root_children(states: States) -> List[Id]:
    """Ids whose parent is the root, in insertion order."""
    return [node_id for node_id, node in states.items() if node.parent_id == INITIAL_ID]


def iter_subtree(states: States, start: Id) -> Iterator[Id]:
    """
    Yield ``start`` and all of its descendants breadth-first.

    When ``start`` is the root, the root itself is not yielded; the walk
    begins with the root's derived children.
    """
    queue = root_children(states) if start == INITIAL_ID else [start]
    for node_id in queue:
        queue.extend(states[node_id].children_ids)
        yield node_id
