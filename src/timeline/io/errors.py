"""Errors raised while reading settings and session files."""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from pydantic import ValidationError

Loc = Sequence[Union[str, int]]


def format_location(loc: Loc) -> str:
    """Render a pydantic location like ``operations[2].args`` (``<root>`` when empty)."""
    text = ""
    for entry in loc:
        if isinstance(entry, int):
            text += f"[{entry}]"
        else:
            text += f".{entry}" if text else str(entry)
    return text or "<root>"


class LoaderError(RuntimeError):
    """A settings or session file could not be loaded."""

    max_problems = 3

    def __init__(self, file_path: str, message: str, *, cause: Exception | None = None):
        self.file_path = file_path
        self.message = message
        self.cause = cause
        self.problems: List[str] = []
        self.operation_index: Optional[int] = None
        if isinstance(cause, ValidationError):
            self._collect(cause)
        super().__init__(str(self))

    def _collect(self, cause: ValidationError) -> None:
        for err in cause.errors():
            loc = list(err.get("loc", ()))
            # Session entries sit under operations[<n>]
            if self.operation_index is None and len(loc) > 1 and loc[0] == "operations" and isinstance(loc[1], int):
                self.operation_index = loc[1]
            self.problems.append(f"{format_location(loc)}: {err.get('msg') or err.get('type')}")

    def __str__(self) -> str:
        where = self.message
        if self.operation_index is not None:
            where += f" at operation #{self.operation_index + 1}"
        base = f"{where} ({self.file_path})"
        if self.problems:
            shown = self.problems[: self.max_problems]
            hidden = len(self.problems) - len(shown)
            if hidden:
                shown.append(f"... ({hidden} more)")
            return f"{base}: " + "; ".join(shown)
        if self.cause:
            return f"{base}: {self.cause}"
        return base
