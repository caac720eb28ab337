"""
Spec-Kit adapter — runs the external ``specify`` scaffolding tool.

The tool is a nice-to-have: the workflow treats both "not installed" and
"ran and failed" as warnings. This adapter only reports which happened.
"""

from __future__ import annotations

import logging
from pathlib import Path

from bones.adapters.base import Adapter, ExecutionContext
from bones.adapters.shell.command import CommandRunner, which
from bones.core.models.config import DEFAULT_SPEC_TOOL_ARGS
from bones.core.models.outcome import ToolOutcome

logger = logging.getLogger(__name__)


class SpecKitAdapter(Adapter):
    """Run ``specify init --here ...`` inside a project root."""

    def __init__(
        self,
        runner: Adapter | None = None,
        executable: str = "specify",
        args: list[str] | None = None,
        timeout: float | None = None,
    ):
        self._runner = runner or CommandRunner()
        self._executable = executable
        self._args = list(args) if args is not None else list(DEFAULT_SPEC_TOOL_ARGS)
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "spec-kit"

    def is_available(self) -> bool:
        return which(self._executable)

    def execute(self, context: ExecutionContext) -> ToolOutcome:
        return self._runner.execute(context)

    def setup(self, project_root: Path) -> ToolOutcome:
        """Run the scaffolding tool with ``project_root`` as working directory."""
        outcome = self.execute(
            ExecutionContext(
                tool=self._executable,
                args=self._args,
                working_dir=project_root,
                timeout=self._timeout,
            )
        )
        logger.debug("%s finished with status %s", self._executable, outcome.status)
        return outcome
