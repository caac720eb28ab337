"""
Mock adapters — test doubles for the fetcher, tool runner and status sink.

Nothing here touches the network, spawns a process or writes to a
terminal. Each double keeps a call log so tests can assert on what was
asked for, and in which order.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from bones.adapters.base import Adapter, ExecutionContext
from bones.adapters.http.github import FetchError
from bones.core.models.manifest import EntryCategory, ManifestEntry, parse_entries
from bones.core.models.outcome import ToolOutcome


class MockFetcher:
    """In-memory template repository.

    ``files`` maps repository paths to content. ``manifests`` maps manifest
    names to decoded JSON documents; a manifest that is not registered
    behaves like a 404.
    """

    def __init__(
        self,
        files: dict[str, bytes | str] | None = None,
        manifests: dict[str, list[dict]] | None = None,
    ):
        self._files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self.add_file(path, content)
        self._manifests: dict[str, list[dict]] = dict(manifests or {})
        self._failures: dict[str, FetchError] = {}
        self._call_log: list[str] = []

    @property
    def call_log(self) -> list[str]:
        """Every path requested, manifests included."""
        return self._call_log

    def add_file(self, path: str, content: bytes | str) -> None:
        self._files[path] = content.encode("utf-8") if isinstance(content, str) else content

    def set_manifest(self, name: str, document: list[dict]) -> None:
        self._manifests[name] = document

    def set_failure(self, path: str, cause: str = "Mock failure", status: int | None = None) -> None:
        """Make every fetch of ``path`` fail."""
        self._failures[path] = FetchError(path, cause, status=status)

    def fetch_bytes(self, path: str) -> bytes:
        self._call_log.append(path)
        if path in self._failures:
            raise self._failures[path]
        if path not in self._files:
            raise FetchError(path, "HTTP 404: Not Found", status=404)
        return self._files[path]

    def fetch_text(self, path: str) -> str:
        return self.fetch_bytes(path).decode("utf-8")

    def fetch_manifest(
        self,
        name: str,
        *,
        category: EntryCategory,
        allow_missing: bool = False,
    ) -> list[ManifestEntry] | None:
        self._call_log.append(name)
        if name in self._failures:
            raise self._failures[name]
        if name not in self._manifests:
            if allow_missing:
                return None
            raise FetchError(name, "HTTP 404: Not Found", status=404)
        try:
            return parse_entries(self._manifests[name], category)
        except ValueError as e:
            raise FetchError(name, f"manifest unreadable: {e}") from e


Effect = Callable[[ExecutionContext], None]


class MockToolRunner(Adapter):
    """Stands in for CommandRunner.

    Responses are keyed by tool name. By default every tool succeeds.
    An *effect* runs before the response is returned, so a test can make
    ``git init`` create ``.git`` the way the real tool does.
    """

    def __init__(self, adapter_name: str = "mock", default_output: str = "[mock] executed"):
        self._name = adapter_name
        self._default_output = default_output
        self._responses: dict[str, ToolOutcome] = {}
        self._effects: dict[str, Effect] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls_for(self, tool: str) -> list[ExecutionContext]:
        return [c for c in self._call_log if c.tool == tool]

    def is_available(self) -> bool:
        return True

    def set_response(self, tool: str, outcome: ToolOutcome) -> None:
        self._responses[tool] = outcome

    def set_failure(self, tool: str, error: str = "Mock failure", return_code: int = 1) -> None:
        """Make ``tool`` run and exit nonzero."""
        self._responses[tool] = ToolOutcome.failure(tool, error=error, return_code=return_code)

    def set_missing(self, tool: str) -> None:
        """Make ``tool`` behave as if it is not installed."""
        self._responses[tool] = ToolOutcome.missing(tool)

    def set_effect(self, tool: str, effect: Effect) -> None:
        self._effects[tool] = effect

    def execute(self, context: ExecutionContext) -> ToolOutcome:
        self._call_log.append(context)

        response = self._responses.get(context.tool)
        if response is not None and not response.ok:
            return response.model_copy(update={"args": context.args})

        if context.tool in self._effects:
            self._effects[context.tool](context)

        if response is not None:
            return response.model_copy(update={"args": context.args})
        return ToolOutcome.success(
            context.tool,
            output=self._default_output,
            args=context.args,
            return_code=0,
        )

    def reset(self) -> None:
        self._call_log.clear()
        self._responses.clear()
        self._effects.clear()


def create_git_dir(context: ExecutionContext) -> None:
    """Effect for ``git init``: leave a ``.git`` directory behind."""
    (context.working_dir / ".git").mkdir(exist_ok=True)


def write_placeholder(relative: str, content: str = "placeholder\n") -> Effect:
    """Effect writing a file under the working directory."""

    def effect(context: ExecutionContext) -> None:
        target: Path = context.working_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    return effect


class RecordingSink:
    """StatusSink that remembers every signal as ``(kind, message)``."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def progress(self) -> None:
        self.events.append(("progress", ""))

    def skip(self) -> None:
        self.events.append(("skip", ""))

    def info(self, message: str) -> None:
        self.events.append(("info", message))

    def warning(self, message: str) -> None:
        self.events.append(("warning", message))

    def error(self, message: str) -> None:
        self.events.append(("error", message))

    def success(self, message: str) -> None:
        self.events.append(("success", message))

    def of(self, kind: str) -> list[str]:
        return [message for k, message in self.events if k == kind]

    @property
    def marks(self) -> str:
        """Progress marks as the console would draw them."""
        return "".join(
            "." if k == "progress" else "#" for k, _ in self.events if k in ("progress", "skip")
        )
