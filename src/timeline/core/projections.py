"""
Read-only views of a (states, cache) pair for renderers.

Both views are rebuilt on every call from explicit arguments, so they work
on the live pair as well as on a candidate pair handed to a callback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel

from timeline.core.ids import INITIAL_ID, Id
from timeline.core.models import Cache, States, iter_subtree, root_children


class NodeRelatives(BaseModel):
    """Cached value of a node with the ids of its parent and children."""

    data: Any
    parent: Optional[Id] = None
    children: List[Id]


@dataclass(eq=True)
class TreeViewNode:
    """
    Node of the explicit tree view.

    The tree is owned top-down through ``children``; ``parent`` is a back
    reference and takes no part in equality or repr.
    """

    id: Id
    data: Any
    parent: Optional["TreeViewNode"] = field(default=None, repr=False, compare=False)
    children: List["TreeViewNode"] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def depth(self) -> int:
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def path(self) -> List[Id]:
        """Ids from the root down to this node."""
        ids: List[Id] = []
        node: Optional[TreeViewNode] = self
        while node is not None:
            ids.append(node.id)
            node = node.parent
        return list(reversed(ids))

    def walk(self) -> Iterator["TreeViewNode"]:
        """Pre-order traversal starting at this node."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, node_id: Id) -> Optional["TreeViewNode"]:
        return next((node for node in self.walk() if node.id == node_id), None)


def cache_with_relatives(states: States, cache: Cache) -> Dict[Id, NodeRelatives]:
    """
    Map every cached id to its value, parent id and child ids.

    The root's parent is None and its children are derived from the states.
    Nodes without a cached value are left out.
    """
    relatives: Dict[Id, NodeRelatives] = {}
    for node_id, value in cache.items():
        if node_id == INITIAL_ID:
            relatives[node_id] = NodeRelatives(data=value, parent=None, children=root_children(states))
        else:
            node = states[node_id]
            relatives[node_id] = NodeRelatives(data=value, parent=node.parent_id, children=list(node.children_ids))
    return relatives


def cache_as_tree(states: States, cache: Cache) -> TreeViewNode:
    """
    Build an explicit node-object tree breadth-first from the root.

    Nodes that have no cached value (possible in a failed candidate) carry
    ``data=None``.
    """
    root = TreeViewNode(id=INITIAL_ID, data=cache.get(INITIAL_ID))
    nodes: Dict[Id, TreeViewNode] = {INITIAL_ID: root}

    for node_id in iter_subtree(states, INITIAL_ID):
        state = states[node_id]
        parent = nodes[state.parent_id]
        node = TreeViewNode(id=node_id, data=cache.get(node_id), parent=parent)
        nodes[node_id] = node
        parent.children.append(node)

    return root
