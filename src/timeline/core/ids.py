"""Identifier factories for timeline nodes."""

from __future__ import annotations

import uuid
from typing import Callable

Id = str
IdFactory = Callable[[], Id]

# Reserved identifier of the root state. It never has a recipe.
INITIAL_ID: Id = "initial"


def uuid_ids() -> IdFactory:
    """Return a factory producing random UUID4 strings."""

    def _next() -> Id:
        return str(uuid.uuid4())

    return _next


class SequentialIds:
    """
    Deterministic identifier factory: state0, state1, ...

    Handy for tests and terminal output where UUIDs are noisy.
    """

    def __init__(self, prefix: str = "state", start: int = 0):
        if not prefix:
            raise ValueError("Identifier prefix must not be empty")
        self.prefix = prefix
        self._counter = start

    def __call__(self) -> Id:
        node_id = f"{self.prefix}{self._counter}"
        self._counter += 1
        if node_id == INITIAL_ID:
            return self()
        return node_id
