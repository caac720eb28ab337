"""
Command runner — launch an external program and classify how it ended.

Output is captured in full rather than streamed to the console, so the
caller decides what to show. There is no timeout unless one is
configured: a hung tool hangs the run.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from bones.adapters.base import Adapter, ExecutionContext
from bones.core.models.outcome import ToolOutcome

logger = logging.getLogger(__name__)


class CommandRunner(Adapter):
    """Run ``tool args...`` in a working directory and return a ToolOutcome.

    Classification:
        exit 0                    → ok (stdout kept)
        nonzero exit              → failed (stderr kept)
        executable not launchable → not_found
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "command"

    def is_available(self) -> bool:
        return True

    def run(self, tool: str, args: list[str], working_dir: Path) -> ToolOutcome:
        """Convenience wrapper building the ExecutionContext."""
        return self.execute(
            ExecutionContext(
                tool=tool,
                args=list(args),
                working_dir=working_dir,
                timeout=self._timeout,
            )
        )

    def execute(self, context: ExecutionContext) -> ToolOutcome:
        # A missing cwd also raises FileNotFoundError; keep it out of not_found.
        if not context.working_dir.is_dir():
            return ToolOutcome.failure(
                context.tool,
                error=f"Working directory does not exist: {context.working_dir}",
                args=context.args,
            )

        logger.debug("Executing: %s (cwd=%s)", " ".join(context.argv), context.working_dir)
        start = time.monotonic()

        # subprocess.run owns the pipes and closes them on every path,
        # including the launch failures below.
        try:
            result = subprocess.run(
                context.argv,
                cwd=str(context.working_dir),
                capture_output=True,
                text=True,
                timeout=context.timeout,
            )
        except (FileNotFoundError, NotADirectoryError):
            logger.info("%s: executable not found", context.tool)
            return ToolOutcome.missing(context.tool, args=context.args)
        except PermissionError as e:
            logger.info("%s: cannot be launched: %s", context.tool, e)
            return ToolOutcome.missing(
                context.tool,
                args=context.args,
                error=f"'{context.tool}' cannot be launched: {e}",
            )
        except subprocess.TimeoutExpired:
            return ToolOutcome.failure(
                context.tool,
                error=f"Command timed out after {context.timeout}s",
                args=context.args,
            )
        except OSError as e:
            return ToolOutcome.failure(
                context.tool,
                error=f"Command execution error: {e}",
                args=context.args,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = result.stdout.strip()
        stderr = result.stderr.strip()

        if result.returncode == 0:
            return ToolOutcome.success(
                context.tool,
                output=stdout,
                args=context.args,
                return_code=0,
                duration_ms=elapsed_ms,
            )

        logger.debug("%s exited with %d: %s", context.tool, result.returncode, stderr)
        return ToolOutcome.failure(
            context.tool,
            error=stderr or f"Command exited with code {result.returncode}",
            output=stdout,
            args=context.args,
            return_code=result.returncode,
            duration_ms=elapsed_ms,
        )


def which(tool: str) -> bool:
    """Whether ``tool`` resolves on PATH."""
    return shutil.which(tool) is not None
