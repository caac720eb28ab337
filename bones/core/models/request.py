"""
Workflow request — the validated result of CLI resolution.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator


class ProjectMode(str, Enum):
    """Which configured base directory a new project lands in."""

    PERSONAL = "personal"
    WORK = "work"


class WorkflowRequest(BaseModel):
    """Everything one scaffold run needs to know about the caller's intent.

    ``project_root`` is always explicit: the core never consults the
    process working directory. ``mode`` is ``None`` for the legacy
    flag-style front-end, which scaffolds into an existing directory.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str
    project_root: Path
    mode: ProjectMode | None = None
    include_extra_feature: bool = False
    initialize_version_control: bool = True
    require_fresh_root: bool = True

    @field_validator("project_name")
    @classmethod
    def _name_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("project name must not be empty")
        return value
