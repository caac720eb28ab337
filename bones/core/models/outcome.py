"""
Outcome models — what happened to each entry and each external tool.

Adapters and the materializer report results through these models rather
than raising. The workflow decides which outcomes are fatal.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ToolOutcome(BaseModel):
    """Result of running an external tool.

    ``not_found`` is kept apart from ``failed``: a tool that ran and
    exited nonzero is a different situation from a tool that is not
    installed, and call sites react to the two differently.
    """

    tool: str
    args: list[str] = Field(default_factory=list)
    status: Literal["ok", "failed", "not_found"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    return_code: int | None = None
    note: str = ""                  # e.g. why the call was short-circuited

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def not_found(self) -> bool:
        return self.status == "not_found"

    @property
    def command_line(self) -> str:
        return " ".join([self.tool, *self.args])

    @classmethod
    def success(cls, tool: str, output: str = "", **kwargs: Any) -> ToolOutcome:
        """Create a success outcome."""
        return cls(tool=tool, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, tool: str, error: str, **kwargs: Any) -> ToolOutcome:
        """Create an outcome for a tool that ran and reported failure."""
        return cls(tool=tool, status="failed", error=error, **kwargs)

    @classmethod
    def missing(cls, tool: str, **kwargs: Any) -> ToolOutcome:
        """Create an outcome for a tool that could not be launched."""
        kwargs.setdefault("error", f"'{tool}' is not installed or not on PATH")
        return cls(tool=tool, status="not_found", **kwargs)


class MaterializationOutcome(BaseModel):
    """Per-entry result of the materialization engine."""

    source_path: str
    destination: str = ""
    status: Literal["written", "skipped", "warned", "failed"]
    error: str | None = None

    @property
    def written(self) -> bool:
        return self.status == "written"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @property
    def warned(self) -> bool:
        return self.status == "warned"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def resolved(self) -> bool:
        """Whether the entry ended without any error."""
        return self.status in ("written", "skipped")
