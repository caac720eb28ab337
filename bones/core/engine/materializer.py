"""
Materialization engine — fetch each manifest entry and write it to disk.

Per entry, in manifest order:
    feature-gated and feature off    →  excluded (no outcome)
    destination is an existing file  →  skipped (no fetch, no overwrite)
    destination exists as a dir      →  error, never replaced
    otherwise                        →  mkdir -p, fetch, write bytes verbatim
    any error                        →  warned (optional) / failed (required)

A failed required entry stops the iteration; nothing after it is tried.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from bones.adapters.http.github import ContentFetcher, FetchError
from bones.core.models.manifest import EntryCategory, ManifestEntry
from bones.core.models.outcome import MaterializationOutcome
from bones.core.sink import NullSink, StatusSink

logger = logging.getLogger(__name__)


@dataclass
class MaterializationReport:
    """Outcomes of materializing one entry list."""

    label: str = ""
    outcomes: list[MaterializationOutcome] = field(default_factory=list)
    excluded: int = 0
    aborted: bool = False

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def written(self) -> int:
        return sum(1 for o in self.outcomes if o.written)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.skipped)

    @property
    def warned(self) -> int:
        return sum(1 for o in self.outcomes if o.warned)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def first_failure(self) -> MaterializationOutcome | None:
        return next((o for o in self.outcomes if o.failed), None)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "total": self.total,
            "written": self.written,
            "skipped": self.skipped,
            "warned": self.warned,
            "failed": self.failed,
            "excluded": self.excluded,
            "aborted": self.aborted,
            "outcomes": [o.model_dump(mode="json") for o in self.outcomes],
        }


class Materializer:
    """Place manifest entries under a project root."""

    def __init__(
        self,
        fetcher: ContentFetcher,
        project_root: Path,
        *,
        prompts_dir: str = ".github/prompts",
        include_extra_feature: bool = False,
        sink: StatusSink | None = None,
    ):
        self._fetcher = fetcher
        self._root = project_root
        self._prompts_root = project_root / prompts_dir
        self._include_extra = include_extra_feature
        self._sink = sink or NullSink()

    # ── Destination rules ───────────────────────────────────────

    def destination_for(self, entry: ManifestEntry) -> Path:
        """Where ``entry`` lands on disk.

        Prompt entries ignore ``destination_path`` and keep only the
        filename of ``source_path``. General entries without a destination
        land at their source path.

        Raises:
            ValueError: If the destination would leave the project root.
        """
        if entry.category is EntryCategory.PROMPT:
            if not entry.filename:
                raise ValueError(f"prompt source '{entry.source_path}' has no filename")
            return self._prompts_root / entry.filename

        return self._inside_root(entry.destination_path or entry.source_path)

    def _inside_root(self, relative: str) -> Path:
        candidate = PurePosixPath(relative.replace("\\", "/"))
        if candidate.is_absolute():
            raise ValueError(f"destination must be relative to the project root: {relative}")

        target = self._root.joinpath(*candidate.parts)
        if not target.resolve().is_relative_to(self._root.resolve()):
            raise ValueError(f"destination escapes the project root: {relative}")
        return target

    # ── Iteration ───────────────────────────────────────────────

    def selected(self, entries: Iterable[ManifestEntry]) -> list[ManifestEntry]:
        """Drop feature-gated entries when the feature is off."""
        chosen = []
        for entry in entries:
            if entry.needs_extra_feature and not self._include_extra:
                logger.debug("Excluding %s (Spec-Kit only)", entry.source_path)
                continue
            chosen.append(entry)
        return chosen

    def iter_materialize(
        self, entries: Iterable[ManifestEntry]
    ) -> Iterator[MaterializationOutcome]:
        """Yield one outcome per selected entry, stopping after a failure."""
        yield from self._materialize_each(self.selected(entries))

    def _materialize_each(
        self, chosen: list[ManifestEntry]
    ) -> Iterator[MaterializationOutcome]:
        for entry in chosen:
            outcome = self.materialize_one(entry)
            yield outcome
            if outcome.failed:
                logger.debug("Required entry %s failed, stopping", entry.source_path)
                return

    def materialize(
        self, entries: Iterable[ManifestEntry], label: str = ""
    ) -> MaterializationReport:
        """Materialize ``entries`` and collect a report."""
        entries = list(entries)
        chosen = self.selected(entries)
        report = MaterializationReport(label=label, excluded=len(entries) - len(chosen))
        for outcome in self._materialize_each(chosen):
            report.outcomes.append(outcome)
            if outcome.failed:
                report.aborted = True
        logger.info(
            "%s: %d written, %d skipped, %d warned, %d failed",
            label or "entries",
            report.written,
            report.skipped,
            report.warned,
            report.failed,
        )
        return report

    # ── Single entry ────────────────────────────────────────────

    def materialize_one(
        self, entry: ManifestEntry, *, overwrite: bool = False
    ) -> MaterializationOutcome:
        """Fetch and write one entry.

        Args:
            entry: The entry to place.
            overwrite: Replace an existing file instead of skipping it.
        """
        destination: Path | None = None
        try:
            destination = self.destination_for(entry)

            if destination.exists() and not destination.is_file():
                raise ValueError(f"destination is a directory: {destination}")
            if destination.exists() and not overwrite:
                logger.debug("Skipping %s: %s exists", entry.source_path, destination)
                self._sink.skip()
                return MaterializationOutcome(
                    source_path=entry.source_path,
                    destination=str(destination),
                    status="skipped",
                )

            destination.parent.mkdir(parents=True, exist_ok=True)
            content = self._fetcher.fetch_bytes(entry.source_path)
            destination.write_bytes(content)

        except (FetchError, OSError, ValueError) as e:
            return self._error_outcome(entry, destination, e)

        logger.debug("Wrote %s → %s (%d bytes)", entry.source_path, destination, len(content))
        self._sink.progress()
        return MaterializationOutcome(
            source_path=entry.source_path,
            destination=str(destination),
            status="written",
        )

    def _error_outcome(
        self, entry: ManifestEntry, destination: Path | None, error: Exception
    ) -> MaterializationOutcome:
        where = str(destination) if destination is not None else ""
        if entry.required:
            logger.info("Required file %s failed: %s", entry.source_path, error)
            return MaterializationOutcome(
                source_path=entry.source_path,
                destination=where,
                status="failed",
                error=str(error),
            )

        logger.info("Optional file %s failed: %s", entry.source_path, error)
        self._sink.warning(f"Could not fetch optional file '{entry.source_path}': {error}")
        return MaterializationOutcome(
            source_path=entry.source_path,
            destination=where,
            status="warned",
            error=str(error),
        )
