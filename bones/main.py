"""
Bones — CLI entrypoint.

Usage:
    bones work demo
    bones personal my-tool sk
    bones personal my-tool --no-git
    python -m bones --help
"""

from __future__ import annotations

import click

from bones import __version__
from bones.core.models.request import ProjectMode, WorkflowRequest
from bones.core.observability.logging_config import setup_from_flags
from bones.ui.cli.common import load_config_or_exit, run_scaffold, validate_project_name


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="bones")
@click.argument("mode", type=click.Choice(["work", "personal"], case_sensitive=False))
@click.argument("name", callback=validate_project_name)
@click.argument(
    "extra",
    required=False,
    type=click.Choice(["sk"], case_sensitive=False),
)
@click.option("--no-git", is_flag=True, help="Do not initialize a git repository.")
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
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def cli(
    mode: str,
    name: str,
    extra: str | None,
    no_git: bool,
    config_path: str | None,
    verbose: bool,
    quiet: bool,
    debug: bool,
    as_json: bool,
) -> None:
    """Create project NAME under the MODE base directory.

    MODE is "work" or "personal". Add "sk" to also run Spec-Kit setup.
    """
    setup_from_flags(debug=debug, verbose=verbose, quiet=quiet)

    config = load_config_or_exit(config_path)
    project_mode = ProjectMode(mode.lower())

    request = WorkflowRequest(
        project_name=name,
        project_root=config.directories.base_for(project_mode) / name,
        mode=project_mode,
        include_extra_feature=extra is not None,
        initialize_version_control=not no_git,
        require_fresh_root=True,
    )
    run_scaffold(config, request, quiet=quiet, as_json=as_json)


if __name__ == "__main__":
    cli()
