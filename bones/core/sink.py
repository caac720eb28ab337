"""
Status sink — the only way the core talks to the user.

The workflow and the materializer emit signals here and never write to a
terminal themselves. The CLI provides a click-backed implementation;
tests use ``bones.adapters.mock.RecordingSink``.
"""

from __future__ import annotations

from typing import Protocol


class StatusSink(Protocol):
    """Receiver for progress marks and summaries. Owns no decisions."""

    def progress(self) -> None:
        """An entry was written."""

    def skip(self) -> None:
        """An entry already existed and was left alone."""

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...


class NullSink:
    """Discards every signal."""

    def progress(self) -> None:
        pass

    def skip(self) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass
