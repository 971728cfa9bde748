"""
Session scripts: batches of timeline operations read from YAML.

Expected format:
operations:
  - op: branch
    parent: initial
    as: opening          # label bound to the new node's id
    transformation: move
    args: [0, X]
  - op: edit
    target: opening
    transformation: move
    args: [4, X]
  - op: remove
    target: opening

Labels may be used wherever an id is expected; unknown labels are passed
through as raw ids.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from timeline.core.ids import INITIAL_ID, Id
from timeline.core.models import TransformationFailure
from timeline.core.timeline import Timeline
from timeline.io.errors import LoaderError

logger = logging.getLogger(__name__)


class OperationSpec(BaseModel):
    op: Literal["branch", "edit", "remove"]
    parent: Optional[str] = None
    target: Optional[str] = None
    label: Optional[str] = Field(default=None, alias="as")
    transformation: Optional[str] = None
    args: List[Any] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @model_validator(mode="after")
    def check_fields(self) -> "OperationSpec":
        if self.op == "branch":
            if not self.transformation:
                raise ValueError("branch requires 'transformation'")
            if self.target is not None:
                raise ValueError("branch takes 'parent', not 'target'")
        else:
            if not self.target:
                raise ValueError(f"{self.op} requires 'target'")
            if self.parent is not None or self.label is not None:
                raise ValueError(f"{self.op} takes neither 'parent' nor 'as'")
        if self.op == "edit" and not self.transformation:
            raise ValueError("edit requires 'transformation'")
        if self.op == "remove" and (self.transformation or self.args):
            raise ValueError("remove takes no transformation or args")
        return self

    def describe(self) -> str:
        if self.op == "remove":
            return f"remove {self.target}"
        args = ", ".join(repr(a) for a in self.args)
        where = self.parent or INITIAL_ID if self.op == "branch" else self.target
        return f"{self.op} {where} {self.transformation}({args})"


class SessionFileSpec(BaseModel):
    operations: List[OperationSpec] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class OperationReport(BaseModel):
    """Outcome of replaying one operation."""

    operation: OperationSpec
    applied: bool
    node_id: Optional[Id] = None
    message: Optional[str] = None
    failures: List[TransformationFailure] = Field(default_factory=list)


def load_session(path: str) -> SessionFileSpec:
    if not os.path.exists(path):
        raise LoaderError(path, "Session file not found")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise LoaderError(path, "Malformed YAML", cause=exc) from exc
    try:
        return SessionFileSpec.model_validate(data)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid session definition", cause=exc) from exc


async def replay(timeline: Timeline, session: SessionFileSpec) -> List[OperationReport]:
    """
    Run every operation of ``session`` against ``timeline``.

    Successful results are applied immediately; failed ones are reported and
    leave the timeline untouched. Later operations see earlier commits.
    """
    labels: Dict[str, Id] = {}
    reports: List[OperationReport] = []

    def resolve(ref: Optional[str]) -> Id:
        if ref is None:
            return INITIAL_ID
        return labels.get(ref, ref)

    for spec in session.operations:
        if spec.op == "branch":
            result = await timeline.branch(resolve(spec.parent), spec.transformation, *spec.args)
        elif spec.op == "edit":
            result = await timeline.edit(resolve(spec.target), spec.transformation, *spec.args)
        else:
            result = timeline.remove(resolve(spec.target))

        node_id = None
        if result.succeeded:
            result.apply()
            node_id = getattr(result, "id", None) or resolve(spec.target)
        if result.succeeded and spec.label and node_id:
            labels[spec.label] = node_id
        if result.succeeded and spec.op == "remove":
            for label, bound in list(labels.items()):
                if bound not in timeline.get_states():
                    del labels[label]

        reports.append(
            OperationReport(
                operation=spec,
                applied=result.succeeded,
                node_id=node_id,
                message=result.message,
                failures=result.failures,
            )
        )
        if not result.succeeded:
            logger.info("Operation %s failed: %s", spec.describe(), result.message)

    return reports
