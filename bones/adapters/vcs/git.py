"""
Git adapter — repository initialisation, nothing more.

Initialisation is idempotent by inspection: when ``.git`` is already
present the adapter reports success without running anything.
"""

from __future__ import annotations

import logging
from pathlib import Path

from bones.adapters.base import Adapter, ExecutionContext
from bones.adapters.shell.command import CommandRunner, which
from bones.core.models.outcome import ToolOutcome

logger = logging.getLogger(__name__)

GIT_DIR = ".git"


class GitAdapter(Adapter):
    """Run ``git init`` in a project root."""

    def __init__(
        self,
        runner: Adapter | None = None,
        executable: str = "git",
        timeout: float | None = None,
    ):
        self._runner = runner or CommandRunner()
        self._executable = executable
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return which(self._executable)

    def execute(self, context: ExecutionContext) -> ToolOutcome:
        return self._runner.execute(context)

    def init_repository(self, project_root: Path) -> ToolOutcome:
        """Initialise a repository at ``project_root`` unless one exists."""
        if (project_root / GIT_DIR).is_dir():
            logger.info("Git repository already present in %s", project_root)
            return ToolOutcome.success(
                self._executable,
                args=["init"],
                note="already initialized",
            )

        return self.execute(
            ExecutionContext(
                tool=self._executable,
                args=["init"],
                working_dir=project_root,
                timeout=self._timeout,
            )
        )
