"""
Terminal status sink backed by click.

Progress marks share one line: a blue ``.`` per file written and a yellow
``#`` per file already present. Any message closes the open mark line first.
"""

from __future__ import annotations

import click


class ClickConsole:
    """StatusSink that writes coloured output with ``click.secho``."""

    def __init__(self, quiet: bool = False, color: bool | None = None):
        self._quiet = quiet
        self._color = color
        self._marks_open = False

    def progress(self) -> None:
        self._mark(".", "blue")

    def skip(self) -> None:
        self._mark("#", "yellow")

    def info(self, message: str) -> None:
        if self._quiet:
            return
        self._close_marks()
        click.secho(message, color=self._color)

    def warning(self, message: str) -> None:
        self._close_marks()
        click.secho(f"⚠️  {message}", fg="yellow", color=self._color)

    def error(self, message: str) -> None:
        self._close_marks()
        click.secho(f"❌ {message}", fg="red", err=True, color=self._color)

    def success(self, message: str) -> None:
        self._close_marks()
        click.secho(f"✅ {message}", fg="green", bold=True, color=self._color)

    def _mark(self, char: str, fg: str) -> None:
        if self._quiet:
            return
        click.secho(char, fg=fg, nl=False, color=self._color)
        self._marks_open = True

    def _close_marks(self) -> None:
        if self._marks_open:
            click.echo()
            self._marks_open = False
