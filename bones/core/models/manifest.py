"""
Manifest model — what to pull from the template repository and where to put it.

A manifest is a JSON list of entries. Manifest authors are not consistent
about capitalisation (``sourcePath``, ``SourcePath``, ``source_path``), so
field names are folded case-insensitively before validation.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class EntryCategory(str, Enum):
    """How an entry's destination is computed."""

    GENERAL = "general"   # destination_path honoured verbatim
    PROMPT = "prompt"     # placed by filename under the prompts directory


class EntryCondition(str, Enum):
    """When an entry takes part in a run."""

    ALWAYS = "always"
    EXTRA_FEATURE = "extra_feature"   # only with Spec-Kit enabled


# lower-cased author spelling → model field
_FIELD_NAMES: dict[str, str] = {
    "sourcepath": "source_path",
    "source_path": "source_path",
    "source": "source_path",
    "destinationpath": "destination_path",
    "destination_path": "destination_path",
    "destination": "destination_path",
    "isrequired": "required",
    "is_required": "required",
    "required": "required",
    "category": "category",
    "condition": "condition",
    "onlywhenspeckit": "only_when_spec_kit",
    "only_when_spec_kit": "only_when_spec_kit",
}


class ManifestEntry(BaseModel):
    """One row of a file manifest. Immutable for the duration of a run."""

    model_config = ConfigDict(frozen=True)

    source_path: str
    destination_path: str = ""
    required: bool = True
    category: EntryCategory = EntryCategory.GENERAL
    condition: EntryCondition = EntryCondition.ALWAYS

    @model_validator(mode="before")
    @classmethod
    def _fold_field_names(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        folded: dict[str, Any] = {}
        spec_kit_only: Any = None
        for key, value in data.items():
            name = _FIELD_NAMES.get(str(key).lower())
            if name is None:
                continue
            if name == "only_when_spec_kit":
                spec_kit_only = value
                continue
            # null means "use the default"; a null source still fails below
            if value is None and name != "source_path":
                continue
            folded[name] = value

        # An explicit condition wins over the boolean shorthand.
        if spec_kit_only is not None and "condition" not in folded:
            folded["condition"] = (
                EntryCondition.EXTRA_FEATURE if spec_kit_only else EntryCondition.ALWAYS
            )
        return folded

    @field_validator("source_path")
    @classmethod
    def _source_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("source path must not be empty")
        return value

    @property
    def filename(self) -> str:
        """Basename of the source path (used for prompt placement)."""
        return PurePosixPath(self.source_path.replace("\\", "/")).name

    @property
    def needs_extra_feature(self) -> bool:
        return self.condition is EntryCondition.EXTRA_FEATURE


class Manifest(BaseModel):
    """Resolved manifest: general files first, then prompt files."""

    general: list[ManifestEntry] = Field(default_factory=list)
    prompts: list[ManifestEntry] = Field(default_factory=list)

    @property
    def entries(self) -> list[ManifestEntry]:
        """All entries in resolution order."""
        return [*self.general, *self.prompts]

    @property
    def total(self) -> int:
        return len(self.general) + len(self.prompts)


def parse_entries(document: Any, category: EntryCategory) -> list[ManifestEntry]:
    """Validate a decoded manifest document into entries of ``category``.

    Raises:
        ValueError: If the document is not a list of entry mappings.
            (pydantic's ValidationError is a ValueError subclass.)
    """
    if not isinstance(document, list):
        raise ValueError(f"expected a list of entries, got {type(document).__name__}")

    entries: list[ManifestEntry] = []
    for index, item in enumerate(document):
        if not isinstance(item, dict):
            raise ValueError(f"entry {index} is not a mapping")
        entry = ManifestEntry.model_validate(item)
        entries.append(entry.model_copy(update={"category": category}))
    return entries
