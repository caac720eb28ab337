"""
Domain models — Pydantic types for bones.

All models are re-exported here for convenient access:

    from bones.core.models import ManifestEntry, WorkflowRequest, ToolOutcome
"""

from bones.core.models.config import (
    BonesConfig,
    DirectoriesConfig,
    GovernanceConfig,
    ManifestConfig,
    RepositoryConfig,
    ToolsConfig,
)
from bones.core.models.manifest import (
    EntryCategory,
    EntryCondition,
    Manifest,
    ManifestEntry,
    parse_entries,
)
from bones.core.models.outcome import MaterializationOutcome, ToolOutcome
from bones.core.models.request import ProjectMode, WorkflowRequest

__all__ = [
    # config.py
    "BonesConfig",
    "DirectoriesConfig",
    # manifest.py
    "EntryCategory",
    "EntryCondition",
    "GovernanceConfig",
    "Manifest",
    "ManifestConfig",
    "ManifestEntry",
    # outcome.py
    "MaterializationOutcome",
    # request.py
    "ProjectMode",
    "RepositoryConfig",
    "ToolOutcome",
    "ToolsConfig",
    "WorkflowRequest",
    "parse_entries",
]
