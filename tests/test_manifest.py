"""
Tests for the manifest resolver and its remote / inline sources.
"""

import threading

import pytest

from bones.adapters.http.github import FetchError
from bones.adapters.mock import MockFetcher
from bones.core.models.config import ManifestConfig
from bones.core.models.manifest import EntryCategory, ManifestEntry
from bones.core.services.manifest import (
    InlineManifestSource,
    ManifestResolver,
    RemoteManifestSource,
    source_from_config,
)


class TestRemoteManifestSource:
    def test_both_present(self, fetcher: MockFetcher):
        source = RemoteManifestSource(fetcher)
        general = source.general_entries()
        prompts = source.prompt_entries()
        assert [e.source_path for e in general][:2] == ["README.md", ".gitignore"]
        assert all(e.category is EntryCategory.GENERAL for e in general)
        assert all(e.category is EntryCategory.PROMPT for e in prompts)

    def test_general_missing_is_empty(self):
        fetcher = MockFetcher(manifests={"prompt-list.json": [{"sourcePath": "p.md"}]})
        assert RemoteManifestSource(fetcher).general_entries() == []

    def test_prompts_missing_is_fatal(self):
        fetcher = MockFetcher(manifests={"file-list.json": [{"sourcePath": "a"}]})
        with pytest.raises(FetchError):
            RemoteManifestSource(fetcher).prompt_entries()

    def test_custom_manifest_names(self):
        fetcher = MockFetcher(
            manifests={
                "meta/files.json": [{"sourcePath": "a"}],
                "meta/prompts.json": [{"sourcePath": "p"}],
            }
        )
        source = RemoteManifestSource(fetcher, "meta/files.json", "meta/prompts.json")
        assert source.general_entries()[0].source_path == "a"
        assert source.prompt_entries()[0].source_path == "p"

    def test_malformed_general_is_fatal(self):
        fetcher = MockFetcher(manifests={"file-list.json": [{"destinationPath": "x"}]})
        with pytest.raises(FetchError, match="unreadable"):
            RemoteManifestSource(fetcher).general_entries()


class TestInlineManifestSource:
    def test_entries_recategorized(self):
        source = InlineManifestSource(
            [ManifestEntry(source_path="a")],
            [ManifestEntry(source_path="p.md")],
        )
        assert source.general_entries()[0].category is EntryCategory.GENERAL
        assert source.prompt_entries()[0].category is EntryCategory.PROMPT

    def test_general_absent(self):
        assert InlineManifestSource(None, []).general_entries() == []

    def test_prompts_absent_is_fatal(self):
        with pytest.raises(FetchError, match="prompt_files"):
            InlineManifestSource([], None).prompt_entries()

    def test_source_from_config(self, fetcher: MockFetcher):
        inline = ManifestConfig(prompt_files=[ManifestEntry(source_path="p.md")])
        assert isinstance(source_from_config(inline, fetcher), InlineManifestSource)
        assert isinstance(source_from_config(ManifestConfig(), fetcher), RemoteManifestSource)


class TestManifestResolver:
    def test_resolve(self, fetcher: MockFetcher):
        manifest = ManifestResolver(RemoteManifestSource(fetcher)).resolve()
        assert len(manifest.general) == 4
        assert len(manifest.prompts) == 2
        assert manifest.entries[0].source_path == "README.md"

    def test_inline_source_fetches_nothing(self):
        fetcher = MockFetcher()
        source = source_from_config(
            ManifestConfig(
                files=[ManifestEntry(source_path="a")],
                prompt_files=[ManifestEntry(source_path="p.md")],
            ),
            fetcher,
        )
        manifest = ManifestResolver(source).resolve()
        assert manifest.total == 2
        assert fetcher.call_log == []

    def test_prompt_failure_propagates(self):
        fetcher = MockFetcher(manifests={"file-list.json": [{"sourcePath": "a"}]})
        with pytest.raises(FetchError):
            ManifestResolver(RemoteManifestSource(fetcher)).resolve()

    def test_failure_not_masked_by_other_leg(self):
        fetcher = MockFetcher(manifests={"prompt-list.json": [{"sourcePath": "p"}]})
        fetcher.set_failure("file-list.json", "HTTP 500 Server Error", status=500)
        with pytest.raises(FetchError, match="file-list.json"):
            ManifestResolver(RemoteManifestSource(fetcher)).resolve()

    def test_legs_run_concurrently(self):
        """Each leg waits for the other to start; serial execution would deadlock."""
        barrier = threading.Barrier(2, timeout=5)

        class BarrierSource:
            def general_entries(self):
                barrier.wait()
                return [ManifestEntry(source_path="g")]

            def prompt_entries(self):
                barrier.wait()
                return [ManifestEntry(source_path="p", category=EntryCategory.PROMPT)]

        manifest = ManifestResolver(BarrierSource()).resolve()
        assert [e.source_path for e in manifest.entries] == ["g", "p"]
