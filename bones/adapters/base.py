"""
Adapter base — the contract between the workflow and external tools.

The workflow never spawns processes itself; it asks an adapter, and the
adapter answers with a ToolOutcome. Adapters NEVER raise for tool
failures, including a tool that is not installed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, Field

from bones.core.models.outcome import ToolOutcome


class ExecutionContext(BaseModel):
    """Everything an adapter needs to run one external command."""

    tool: str
    args: list[str] = Field(default_factory=list)
    working_dir: Path
    timeout: float | None = None    # None waits indefinitely

    @property
    def argv(self) -> list[str]:
        return [self.tool, *self.args]


class Adapter(ABC):
    """Abstract base class for all tool adapters.

    To create a new adapter:
        1. Subclass Adapter
        2. Implement name, is_available, execute
        3. Hand it to the ScaffoldWorkflow (or wrap a CommandRunner)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'command', 'git', 'spec-kit')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the underlying executable can be found.

        Should be fast and never raise.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> ToolOutcome:
        """Run the command described by ``context``.

        MUST never raise. Failures are captured in the ToolOutcome.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
