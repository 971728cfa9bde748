"""
Tests for timeline data models and tree helpers.

Tests cover:
- StateNode
- TransformationFailure
- clone_pair / root_children / iter_subtree
- identifier factories
"""

import pytest

from timeline.core.ids import INITIAL_ID, SequentialIds, uuid_ids
from timeline.core.models import StateNode, TransformationFailure, clone_pair, iter_subtree, root_children


def _sample_states():
    return {
        "a": StateNode(transformation_name="add", transformation_args=(1,), parent_id=INITIAL_ID, children_ids=["b", "c"]),
        "b": StateNode(transformation_name="add", transformation_args=(2,), parent_id="a", children_ids=["d"]),
        "c": StateNode(transformation_name="add", transformation_args=(3,), parent_id="a"),
        "d": StateNode(transformation_name="add", transformation_args=(4,), parent_id="b"),
        "e": StateNode(transformation_name="scale", transformation_args=(2,), parent_id=INITIAL_ID),
    }


class TestStateNode:
    """Tests for StateNode model."""

    def test_state_node_defaults(self):
        """A fresh node has no children."""
        node = StateNode(transformation_name="move", transformation_args=(0, "X"), parent_id=INITIAL_ID)

        assert node.children_ids == []
        assert node.is_leaf
        assert node.is_root_child

    def test_state_node_describe(self):
        node = StateNode(transformation_name="move", transformation_args=(0, "X"), parent_id="a")

        assert node.describe() == "move(0, 'X')"
        assert not node.is_root_child


class TestTransformationFailure:
    def test_describe(self):
        failure = TransformationFailure(id="n1", message="Index 0 is already occupied")

        assert failure.describe() == "'Index 0 is already occupied' at 'n1'"

    def test_failure_is_frozen(self):
        failure = TransformationFailure(id="n1", message="boom")

        with pytest.raises(Exception):
            failure.message = "other"


class TestTreeHelpers:
    def test_root_children_in_insertion_order(self):
        assert root_children(_sample_states()) == ["a", "e"]

    def test_iter_subtree_breadth_first(self):
        assert list(iter_subtree(_sample_states(), "a")) == ["a", "b", "c", "d"]

    def test_iter_subtree_from_root_skips_root(self):
        assert list(iter_subtree(_sample_states(), INITIAL_ID)) == ["a", "e", "b", "c", "d"]

    def test_clone_pair_is_deep(self):
        """Mutating the clone never shows through the original."""
        states = _sample_states()
        cache = {INITIAL_ID: {"values": [1]}, "a": {"values": [2]}}

        states_copy, cache_copy = clone_pair(states, cache)
        states_copy["a"].children_ids.append("z")
        cache_copy["a"]["values"].append(99)
        del states_copy["e"]

        assert states["a"].children_ids == ["b", "c"]
        assert cache["a"]["values"] == [2]
        assert "e" in states


class TestIdFactories:
    def test_sequential_ids(self):
        ids = SequentialIds("n")

        assert [ids(), ids(), ids()] == ["n0", "n1", "n2"]

    def test_sequential_ids_default_prefix(self):
        ids = SequentialIds()

        assert ids() == "state0"

    def test_sequential_ids_rejects_empty_prefix(self):
        with pytest.raises(ValueError):
            SequentialIds("")

    def test_uuid_ids_are_unique(self):
        ids = uuid_ids()
        generated = {ids() for _ in range(50)}

        assert len(generated) == 50
        assert INITIAL_ID not in generated
