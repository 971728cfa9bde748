from __future__ import annotations

"""Timeline settings and their YAML loader."""

import logging
import os
from typing import Any, Dict, Literal

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from timeline.core.ids import IdFactory, SequentialIds, uuid_ids
from timeline.core.runner import FailurePolicy
from timeline.io.errors import LoaderError


class TimelineSettings(BaseModel):
    """
    Tunables of a Timeline.

    Example YAML:
        timeline:
          id_strategy: sequential
          id_prefix: board
          failure_policy: halt_subtree
          strict_apply: true
          log_level: INFO
    """

    id_strategy: Literal["uuid", "sequential"] = "uuid"
    id_prefix: str = "state"
    failure_policy: FailurePolicy = FailurePolicy.CONTINUE
    strict_apply: bool = False
    log_level: str = "WARNING"

    model_config = {"extra": "forbid"}

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("id_prefix")
    @classmethod
    def validate_id_prefix(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("id_prefix must not be empty")
        return v.strip()

    def make_id_factory(self) -> IdFactory:
        if self.id_strategy == "sequential":
            return SequentialIds(self.id_prefix)
        return uuid_ids()


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_settings(path: str | None) -> TimelineSettings:
    """Load settings from YAML. No path yields the defaults.

    The settings may sit at the top level or under a ``timeline:`` key.
    """
    if path is None:
        return TimelineSettings()
    if not os.path.exists(path):
        raise LoaderError(path, "Settings file not found")
    try:
        data = _read_yaml(path)
    except yaml.YAMLError as exc:
        raise LoaderError(path, "Malformed YAML", cause=exc) from exc
    if not isinstance(data, dict):
        raise LoaderError(path, "Settings must be a mapping")
    section = data.get("timeline", data)
    try:
        return TimelineSettings.model_validate(section)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid timeline settings", cause=exc) from exc


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
