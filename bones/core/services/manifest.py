"""
Manifest resolver — produces the ordered general + prompt entry lists.

The manifest comes either from the template repository (two JSON files)
or from the configuration file itself. Both sources answer the same two
questions, so the resolver does not care which one it holds.

Missing-manifest policy:
    general files manifest absent  →  zero entries
    prompt files manifest absent   →  fatal FetchError
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Protocol

from bones.adapters.http.github import ContentFetcher, FetchError
from bones.core.models.config import ManifestConfig
from bones.core.models.manifest import EntryCategory, Manifest, ManifestEntry

logger = logging.getLogger(__name__)


class ManifestSource(Protocol):
    """Where manifest entries come from."""

    def general_entries(self) -> list[ManifestEntry]: ...

    def prompt_entries(self) -> list[ManifestEntry]: ...


class RemoteManifestSource:
    """Manifests fetched as JSON files from the template repository."""

    def __init__(
        self,
        fetcher: ContentFetcher,
        files_manifest: str = "file-list.json",
        prompts_manifest: str = "prompt-list.json",
    ):
        self._fetcher = fetcher
        self._files_manifest = files_manifest
        self._prompts_manifest = prompts_manifest

    def general_entries(self) -> list[ManifestEntry]:
        entries = self._fetcher.fetch_manifest(
            self._files_manifest,
            category=EntryCategory.GENERAL,
            allow_missing=True,
        )
        return entries or []

    def prompt_entries(self) -> list[ManifestEntry]:
        entries = self._fetcher.fetch_manifest(
            self._prompts_manifest,
            category=EntryCategory.PROMPT,
            allow_missing=False,
        )
        if entries is None:
            raise FetchError(self._prompts_manifest, "manifest unreadable")
        return entries


class InlineManifestSource:
    """Manifest embedded in bones.yml.

    ``None`` means the list was not given at all, which for prompt files
    is the same failure as a missing remote prompt manifest.
    """

    def __init__(
        self,
        general: list[ManifestEntry] | None,
        prompts: list[ManifestEntry] | None,
    ):
        self._general = general
        self._prompts = prompts

    def general_entries(self) -> list[ManifestEntry]:
        return [_as(entry, EntryCategory.GENERAL) for entry in self._general or []]

    def prompt_entries(self) -> list[ManifestEntry]:
        if self._prompts is None:
            raise FetchError("prompt_files", "manifest unreadable: not present in configuration")
        return [_as(entry, EntryCategory.PROMPT) for entry in self._prompts]


def _as(entry: ManifestEntry, category: EntryCategory) -> ManifestEntry:
    if entry.category is category:
        return entry
    return entry.model_copy(update={"category": category})


def source_from_config(manifest: ManifestConfig, fetcher: ContentFetcher) -> ManifestSource:
    """Pick the inline or remote source according to configuration."""
    if manifest.inline:
        logger.debug("Using manifest embedded in configuration")
        return InlineManifestSource(manifest.files, manifest.prompt_files)
    return RemoteManifestSource(fetcher, manifest.files_manifest, manifest.prompts_manifest)


class ManifestResolver:
    """Resolve both manifest lists concurrently into one Manifest."""

    def __init__(self, source: ManifestSource):
        self._source = source

    def resolve(self) -> Manifest:
        """Fetch general and prompt entries in parallel.

        Both legs are awaited before either result is read, so a failure
        in one leg is never masked by the other's success.

        Raises:
            FetchError: If either leg fails.
        """
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="manifest") as pool:
            general_future = pool.submit(self._source.general_entries)
            prompt_future = pool.submit(self._source.prompt_entries)
            wait([general_future, prompt_future])

        # .result() re-raises the leg's exception
        general = general_future.result()
        prompts = prompt_future.result()

        manifest = Manifest(general=general, prompts=prompts)
        logger.info(
            "Resolved manifest: %d general, %d prompt entries",
            len(manifest.general),
            len(manifest.prompts),
        )
        return manifest
