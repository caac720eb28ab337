"""
Configuration model — loaded from bones.yml.

Every section has defaults, so an absent config file still yields a
working setup pointed at the public template repository.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from bones.core.models.manifest import ManifestEntry
from bones.core.models.request import ProjectMode

DEFAULT_REPOSITORY = "https://github.com/jakewatkins/copilot-resources"

DEFAULT_SPEC_TOOL_ARGS = [
    "init",
    "--here",
    "--force",
    "--ai",
    "copilot",
    "--script",
    "sh",
    "--ignore-agent-tools",
]


class RepositoryConfig(BaseModel):
    """Where template files are fetched from."""

    url: str = DEFAULT_REPOSITORY
    branch: str = "main"
    timeout: float = 15.0           # per-request socket timeout, seconds

    @field_validator("url")
    @classmethod
    def _url_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("repository url must not be empty")
        return value.strip()


class ManifestConfig(BaseModel):
    """Manifest names in the template repository, or an inline manifest.

    Setting ``files`` or ``prompt_files`` switches to inline mode: the
    manifest is taken from this file and nothing is fetched for it.
    """

    files_manifest: str = "file-list.json"
    prompts_manifest: str = "prompt-list.json"
    files: list[ManifestEntry] | None = None
    prompt_files: list[ManifestEntry] | None = None

    @property
    def inline(self) -> bool:
        return self.files is not None or self.prompt_files is not None


class DirectoriesConfig(BaseModel):
    """Base directories for each project mode."""

    personal_base: str = "~/projects/personal"
    work_base: str = "~/projects/work"

    def base_for(self, mode: ProjectMode) -> Path:
        """Base directory for ``mode`` with ``~`` expanded."""
        raw = self.personal_base if mode is ProjectMode.PERSONAL else self.work_base
        return Path(raw).expanduser()


class ToolsConfig(BaseModel):
    """External executables and how they are invoked."""

    git: str = "git"
    spec_tool: str = "specify"
    spec_tool_args: list[str] = Field(default_factory=lambda: list(DEFAULT_SPEC_TOOL_ARGS))
    timeout: float | None = None    # None waits for the tool indefinitely


class GovernanceConfig(BaseModel):
    """The file fetched after a successful Spec-Kit setup."""

    source: str = "constitution.md"
    destination: str = ".specify/memory/constitution.md"


class BonesConfig(BaseModel):
    """Root configuration."""

    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    manifest: ManifestConfig = Field(default_factory=ManifestConfig)
    directories: DirectoriesConfig = Field(default_factory=DirectoriesConfig)
    prompts_dir: str = ".github/prompts"
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    governance: GovernanceConfig = Field(default_factory=GovernanceConfig)
