"""Name-keyed registry of transformation functions."""

from __future__ import annotations

import collections.abc
import inspect
import logging
import types
import typing
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from timeline.core.errors import RegistryError

logger = logging.getLogger(__name__)

Transformation = Callable[..., Any]

_MISSING = object()


def _is_awaitable_hint(annotation: Any) -> bool:
    return typing.get_origin(annotation) in (collections.abc.Awaitable, collections.abc.Coroutine)


def _unwrap_awaitable(annotation: Any) -> Any:
    """Reduce ``S``, ``Awaitable[S]`` and ``S | Awaitable[S]`` to ``S``."""
    if _is_awaitable_hint(annotation):
        args = typing.get_args(annotation)
        return args[-1] if args else _MISSING
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        members = {_unwrap_awaitable(arg) for arg in typing.get_args(annotation)}
        if len(members) == 1:
            return members.pop()
    return annotation


def _state_types(fn: Transformation) -> tuple[Any, Any]:
    """Return (input annotation, output annotation); ``_MISSING`` where absent or unresolvable."""
    try:
        hints = typing.get_type_hints(fn)
    except (NameError, TypeError) as exc:
        logger.debug("Skipping state type check for %r: %s", fn, exc)
        return _MISSING, _MISSING

    params = list(inspect.signature(fn).parameters.values())
    first = hints.get(params[0].name, _MISSING) if params else _MISSING
    output = hints.get("return", _MISSING)
    if output is not _MISSING and inspect.iscoroutinefunction(fn):
        return first, output
    return first, _unwrap_awaitable(output) if output is not _MISSING else _MISSING


class TransformationRegistry(BaseModel):
    """
    Maps transformation names to ``(state, *args) -> state`` callables.

    Callables may return the new state directly or an awaitable of it. All
    annotated registrations must agree on a single state type.
    """

    items: Dict[str, Transformation] = Field(default_factory=dict)

    model_config = {"arbitrary_types_allowed": True}

    @classmethod
    def from_mapping(cls, transformations: Mapping[str, Transformation]) -> "TransformationRegistry":
        if isinstance(transformations, TransformationRegistry):
            return transformations
        registry = cls()
        for name, fn in transformations.items():
            registry.register(name, fn)
        return registry

    def register(self, name: str, fn: Transformation) -> None:
        if name in self.items:
            raise ValueError(f"Duplicate registration: {name}")
        if not callable(fn):
            raise RegistryError(f"Transformation '{name}' is not callable")

        params = list(inspect.signature(fn).parameters.values())
        positional = [
            p
            for p in params
            if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.VAR_POSITIONAL)
        ]
        if not positional:
            raise RegistryError(f"Transformation '{name}' must accept the state as its first positional argument")

        input_type, output_type = _state_types(fn)
        if input_type is not _MISSING and output_type is not _MISSING and input_type != output_type:
            raise RegistryError(
                f"Transformation '{name}' maps {input_type!r} to {output_type!r}; input and output state types must match"
            )
        state_type = input_type if input_type is not _MISSING else output_type
        if state_type is not _MISSING:
            known = self.state_type()
            if known is not None and known != state_type:
                raise RegistryError(
                    f"Transformation '{name}' works on {state_type!r} but registered transformations "
                    f"work on {known!r}; all transformations must share one state type"
                )

        self.items[name] = fn
        logger.debug("Registered transformation %s", name)

    def get(self, name: str) -> Transformation:
        if name not in self.items:
            available = ", ".join(sorted(self.items.keys()))
            raise KeyError(f"Unknown: {name}. Available: {available}")
        return self.items[name]

    def state_type(self) -> Optional[Any]:
        """The shared state annotation, or None when no registration is annotated."""
        for fn in self.items.values():
            input_type, output_type = _state_types(fn)
            for candidate in (input_type, output_type):
                if candidate is not _MISSING:
                    return candidate
        return None

    def check_arguments(self, name: str, args: Sequence[Any]) -> Optional[str]:
        """
        Check that ``args`` bind to the transformation after its state argument.

        Returns:
            An error message, or None when the call would bind
        """
        if name not in self.items:
            return f"Unknown transformation '{name}'"
        try:
            inspect.signature(self.items[name]).bind(None, *args)
        except TypeError as exc:
            return f"Transformation '{name}' cannot take arguments {tuple(args)!r}: {exc}"
        return None

    def names(self) -> Iterable[str]:
        return sorted(self.items.keys())

    def __contains__(self, name: object) -> bool:
        return name in self.items

    def __len__(self) -> int:
        return len(self.items)
