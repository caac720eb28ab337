"""
Shared plumbing for the two CLI front-ends.

Both front-ends end up here: load configuration, run the scaffold
workflow, render the result, exit with the right code.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from bones.core.config.loader import ConfigError, load_config
from bones.core.models.config import BonesConfig
from bones.core.models.request import WorkflowRequest
from bones.core.sink import NullSink, StatusSink
from bones.core.use_cases.scaffold import ScaffoldResult, ScaffoldWorkflow, Stage
from bones.ui.cli.console import ClickConsole


def validate_project_name(ctx: click.Context, param: click.Parameter, value: str) -> str:
    """Click callback: the name must be one usable path component."""
    name = value.strip()
    if not name:
        raise click.BadParameter("project name must not be empty")
    if name in (".", "..") or "/" in name or "\\" in name:
        raise click.BadParameter(f"'{value}' is not a valid directory name")
    return name


def load_config_or_exit(config_path: str | None) -> BonesConfig:
    try:
        return load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def build_workflow(config: BonesConfig, sink: StatusSink) -> ScaffoldWorkflow:
    return ScaffoldWorkflow.from_config(config, sink=sink)


def run_scaffold(
    config: BonesConfig,
    request: WorkflowRequest,
    *,
    quiet: bool = False,
    as_json: bool = False,
) -> ScaffoldResult:
    """Run the workflow for ``request`` and exit 1 if it stopped early."""
    sink: StatusSink = NullSink() if as_json else ClickConsole(quiet=quiet)

    if not as_json and not quiet:
        click.secho(
            f"🦴 Creating '{request.project_name}' in {request.project_root}",
            fg="cyan",
            bold=True,
        )
        click.echo(f"   Template: {config.repository.url} ({config.repository.branch})")

    result = build_workflow(config, sink).run(request)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            sys.exit(1)
        return result

    if not result.ok:
        sink.error(result.error or "Scaffold failed")
        if result.failed_stage is not Stage.ENSURE_SKELETON:
            click.secho(
                f"   Stopped at {result.failed_stage.value if result.failed_stage else '?'}; "
                f"anything already written under {request.project_root} was left in place.",
                fg="red",
                err=True,
            )
        sys.exit(1)

    _summarize(result, quiet=quiet)
    sink.success(f"Project '{request.project_name}' is ready at {request.project_root}")
    return result


def _summarize(result: ScaffoldResult, quiet: bool) -> None:
    if quiet:
        return
    for report in (result.general, result.prompts):
        if report is None:
            continue
        click.echo(
            f"   {report.label or 'files'}: {report.written} written, "
            f"{report.skipped} already present"
            + (f", {report.warned} optional missing" if report.warned else "")
        )
    if result.warnings:
        click.secho(f"   Finished with {len(result.warnings)} warning(s).", fg="yellow")
