"""
Scaffold use case — create a project from the template repository.

Stages run in order and stop at the first fatal failure:

    ensure-skeleton → resolve-manifest → materialize-general
    → materialize-prompts → init-repository (unless --no-git)
    → run-spec-tool (with sk) → fetch-governance (if the tool succeeded)
    → done

Nothing is rolled back. When a stage fails, whatever earlier stages put
on disk stays there, and the result says which stage stopped the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from bones.adapters.http.github import ContentFetcher, FetchError, GitHubRawFetcher
from bones.adapters.scaffolding.spec_kit import SpecKitAdapter
from bones.adapters.shell.command import CommandRunner
from bones.adapters.vcs.git import GitAdapter
from bones.core.engine.materializer import MaterializationReport, Materializer
from bones.core.models.config import BonesConfig
from bones.core.models.manifest import Manifest, ManifestEntry
from bones.core.models.outcome import MaterializationOutcome, ToolOutcome
from bones.core.models.request import WorkflowRequest
from bones.core.services.manifest import ManifestResolver, ManifestSource, source_from_config
from bones.core.sink import NullSink, StatusSink

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Workflow stages, in execution order."""

    ENSURE_SKELETON = "ensure-skeleton"
    RESOLVE_MANIFEST = "resolve-manifest"
    MATERIALIZE_GENERAL = "materialize-general"
    MATERIALIZE_PROMPTS = "materialize-prompts"
    INIT_REPOSITORY = "init-repository"
    RUN_SPEC_TOOL = "run-spec-tool"
    FETCH_GOVERNANCE = "fetch-governance"
    DONE = "done"


class ScaffoldError(Exception):
    """A fatal failure that stops the workflow at ``stage``."""

    def __init__(self, stage: Stage, message: str):
        super().__init__(message)
        self.stage = stage
        self.message = message


@dataclass
class ScaffoldResult:
    """Result of one scaffold run."""

    project_root: Path | None = None
    completed_stages: list[Stage] = field(default_factory=list)
    failed_stage: Stage | None = None
    error: str | None = None
    manifest: Manifest | None = None
    general: MaterializationReport | None = None
    prompts: MaterializationReport | None = None
    repository: ToolOutcome | None = None
    spec_tool: ToolOutcome | None = None
    governance: MaterializationOutcome | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def governance_written(self) -> bool:
        return self.governance is not None and self.governance.written

    def to_dict(self) -> dict:
        result: dict = {
            "ok": self.ok,
            "project_root": str(self.project_root) if self.project_root else None,
            "completed_stages": [s.value for s in self.completed_stages],
            "warnings": self.warnings,
        }
        if self.error:
            result["error"] = self.error
            result["failed_stage"] = self.failed_stage.value if self.failed_stage else None
        if self.general:
            result["general"] = self.general.to_dict()
        if self.prompts:
            result["prompts"] = self.prompts.to_dict()
        if self.repository:
            result["repository"] = self.repository.model_dump(mode="json")
        if self.spec_tool:
            result["spec_tool"] = self.spec_tool.model_dump(mode="json")
        if self.governance:
            result["governance"] = self.governance.model_dump(mode="json")
        return result


class ScaffoldWorkflow:
    """Sequence the resolver, materializer and tool adapters for one request."""

    def __init__(
        self,
        config: BonesConfig,
        fetcher: ContentFetcher,
        *,
        manifest_source: ManifestSource | None = None,
        git: GitAdapter | None = None,
        spec_kit: SpecKitAdapter | None = None,
        sink: StatusSink | None = None,
    ):
        self._config = config
        self._fetcher = fetcher
        self._source = manifest_source or source_from_config(config.manifest, fetcher)
        self._git = git or GitAdapter(executable=config.tools.git, timeout=config.tools.timeout)
        self._spec_kit = spec_kit or SpecKitAdapter(
            executable=config.tools.spec_tool,
            args=config.tools.spec_tool_args,
            timeout=config.tools.timeout,
        )
        self._sink = sink or NullSink()

    @classmethod
    def from_config(cls, config: BonesConfig, sink: StatusSink | None = None) -> ScaffoldWorkflow:
        """Wire the real fetcher and tool adapters from configuration."""
        fetcher = GitHubRawFetcher(
            config.repository.url,
            branch=config.repository.branch,
            timeout=config.repository.timeout,
        )
        runner = CommandRunner(timeout=config.tools.timeout)
        return cls(
            config,
            fetcher,
            git=GitAdapter(runner, executable=config.tools.git, timeout=config.tools.timeout),
            spec_kit=SpecKitAdapter(
                runner,
                executable=config.tools.spec_tool,
                args=config.tools.spec_tool_args,
                timeout=config.tools.timeout,
            ),
            sink=sink,
        )

    # ── Entry point ─────────────────────────────────────────────

    def run(self, request: WorkflowRequest) -> ScaffoldResult:
        """Execute every stage for ``request``. Never raises ScaffoldError."""
        root = request.project_root
        result = ScaffoldResult(project_root=root)
        logger.info("Scaffolding %s at %s", request.project_name, root)

        try:
            self._ensure_skeleton(request)
            result.completed_stages.append(Stage.ENSURE_SKELETON)

            result.manifest = self._resolve_manifest()
            result.completed_stages.append(Stage.RESOLVE_MANIFEST)

            materializer = Materializer(
                self._fetcher,
                root,
                prompts_dir=self._config.prompts_dir,
                include_extra_feature=request.include_extra_feature,
                sink=self._sink,
            )

            result.general = materializer.materialize(result.manifest.general, label="files")
            self._collect_warnings(result, result.general)
            self._check_report(result.general, Stage.MATERIALIZE_GENERAL)
            result.completed_stages.append(Stage.MATERIALIZE_GENERAL)

            result.prompts = materializer.materialize(result.manifest.prompts, label="prompts")
            self._collect_warnings(result, result.prompts)
            self._check_report(result.prompts, Stage.MATERIALIZE_PROMPTS)
            result.completed_stages.append(Stage.MATERIALIZE_PROMPTS)

            if request.initialize_version_control:
                result.repository = self._init_repository(root)
                result.completed_stages.append(Stage.INIT_REPOSITORY)

            if request.include_extra_feature:
                result.spec_tool = self._run_spec_tool(root, result)
                result.completed_stages.append(Stage.RUN_SPEC_TOOL)

                if result.spec_tool.ok:
                    result.governance = self._fetch_governance(materializer, result)
                    result.completed_stages.append(Stage.FETCH_GOVERNANCE)

            result.completed_stages.append(Stage.DONE)

        except ScaffoldError as e:
            result.failed_stage = e.stage
            result.error = e.message
            logger.info("Scaffold stopped at %s: %s", e.stage.value, e.message)

        return result

    # ── Stages ──────────────────────────────────────────────────

    def _ensure_skeleton(self, request: WorkflowRequest) -> None:
        root = request.project_root
        if request.require_fresh_root and root.exists():
            raise ScaffoldError(Stage.ENSURE_SKELETON, f"Directory '{root}' already exists.")

        try:
            root.mkdir(parents=True, exist_ok=not request.require_fresh_root)
            (root / self._config.prompts_dir).mkdir(parents=True, exist_ok=True)
        except FileExistsError as e:
            raise ScaffoldError(
                Stage.ENSURE_SKELETON, f"Cannot create directory structure: {e}"
            ) from e
        except OSError as e:
            raise ScaffoldError(
                Stage.ENSURE_SKELETON, f"Failed to create directory structure: {e}"
            ) from e

    def _resolve_manifest(self) -> Manifest:
        try:
            return ManifestResolver(self._source).resolve()
        except FetchError as e:
            raise ScaffoldError(Stage.RESOLVE_MANIFEST, str(e)) from e

    @staticmethod
    def _check_report(report: MaterializationReport, stage: Stage) -> None:
        failure = report.first_failure
        if failure is not None:
            raise ScaffoldError(
                stage,
                f"Failed to fetch required file '{failure.source_path}': {failure.error}",
            )

    @staticmethod
    def _collect_warnings(result: ScaffoldResult, report: MaterializationReport) -> None:
        for outcome in report.outcomes:
            if outcome.warned:
                result.warnings.append(
                    f"Could not fetch optional file '{outcome.source_path}': {outcome.error}"
                )

    def _init_repository(self, root: Path) -> ToolOutcome:
        outcome = self._git.init_repository(root)
        if outcome.not_found:
            raise ScaffoldError(Stage.INIT_REPOSITORY, f"Git is not installed: {outcome.error}")
        if outcome.failed:
            raise ScaffoldError(
                Stage.INIT_REPOSITORY, f"Failed to initialize git repository: {outcome.error}"
            )

        if outcome.note:
            self._sink.info("Git has already been initialized.")
        else:
            self._sink.info("Git repository initialized.")
        return outcome

    def _run_spec_tool(self, root: Path, result: ScaffoldResult) -> ToolOutcome:
        outcome = self._spec_kit.setup(root)
        if outcome.not_found:
            self._warn(result, "Spec-Kit has not been installed; skipping Spec-Kit setup.")
        elif outcome.failed:
            self._warn(result, f"Spec-Kit setup failed: {outcome.error}")
        else:
            self._sink.info("Spec-Kit setup completed.")
        return outcome

    def _fetch_governance(
        self, materializer: Materializer, result: ScaffoldResult
    ) -> MaterializationOutcome:
        governance = self._config.governance
        entry = ManifestEntry(
            source_path=governance.source,
            destination_path=governance.destination,
            required=False,
        )
        # The tool leaves a placeholder at this path; ours replaces it.
        outcome = materializer.materialize_one(entry, overwrite=True)
        if outcome.warned:
            result.warnings.append(
                f"Could not fetch optional file '{outcome.source_path}': {outcome.error}"
            )
        return outcome

    def _warn(self, result: ScaffoldResult, message: str) -> None:
        result.warnings.append(message)
        self._sink.warning(message)
