"""
Legacy flag-style front-end — scaffold into the current directory.

Usage:
    bones-here            files, prompts and git
    bones-here -sk        ... plus Spec-Kit setup
    bones-here -nogit     skip git initialisation

Flags are case-insensitive (``-SK`` == ``-sk``). The directory may
already exist and may already hold some of the files; those are left
alone, so running it twice is harmless.
"""

from __future__ import annotations

from pathlib import Path

import click

from bones.core.models.request import WorkflowRequest
from bones.core.observability.logging_config import setup_from_flags
from bones.ui.cli.common import load_config_or_exit, run_scaffold


@click.command(
    context_settings={
        "help_option_names": ["-h", "--help"],
        "token_normalize_func": str.lower,
    }
)
@click.option("-sk", "spec_kit", is_flag=True, help="Also run Spec-Kit setup.")
@click.option("-nogit", "no_git", is_flag=True, help="Do not initialize a git repository.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to bones.yml (default: auto-detect).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
def here(
    spec_kit: bool,
    no_git: bool,
    config_path: str | None,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Add template files to the current directory."""
    setup_from_flags(debug=debug, verbose=verbose, quiet=quiet)

    config = load_config_or_exit(config_path)
    root = Path.cwd()

    request = WorkflowRequest(
        project_name=root.name or str(root),
        project_root=root,
        mode=None,
        include_extra_feature=spec_kit,
        initialize_version_control=not no_git,
        require_fresh_root=False,
    )
    run_scaffold(config, request, quiet=quiet)


if __name__ == "__main__":
    here()
