"""
GitHub raw-content fetcher — pulls template files and manifests over HTTPS.

Files are read straight from raw.githubusercontent.com; the repository is
never cloned. One attempt per fetch, no retries.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Protocol

from bones import __version__
from bones.core.models.manifest import EntryCategory, ManifestEntry, parse_entries

logger = logging.getLogger(__name__)

RAW_HOST = "raw.githubusercontent.com"
_GITHUB_HOSTS = {"github.com", "www.github.com"}
USER_AGENT = f"bones/{__version__}"


class ContentFetcher(Protocol):
    """What the resolver and materializer need from a fetcher."""

    def fetch_bytes(self, path: str) -> bytes: ...

    def fetch_text(self, path: str) -> str: ...

    def fetch_manifest(
        self,
        name: str,
        *,
        category: EntryCategory = ...,
        allow_missing: bool = ...,
    ) -> list[ManifestEntry] | None: ...


class FetchError(Exception):
    """Raised when a file or manifest cannot be retrieved or parsed."""

    def __init__(self, path: str, cause: str, status: int | None = None) -> None:
        super().__init__(f"Failed to fetch '{path}': {cause}")
        self.path = path
        self.cause = cause
        self.status = status

    @property
    def not_found(self) -> bool:
        return self.status == 404


def raw_base_url(repository_url: str, branch: str) -> str:
    """Turn a repository reference into the raw-content base for ``branch``.

    ``https://github.com/owner/repo(.git)`` becomes
    ``https://raw.githubusercontent.com/owner/repo/<branch>``. Any other
    URL (a raw host, a mirror) gets the branch appended as-is.
    """
    url = repository_url.strip().rstrip("/").removesuffix(".git")
    parts = urllib.parse.urlsplit(url)
    if parts.netloc.lower() in _GITHUB_HOSTS:
        repo_path = parts.path.strip("/")
        return f"https://{RAW_HOST}/{repo_path}/{branch}"
    return f"{url}/{branch}"


class GitHubRawFetcher:
    """Fetch raw file content and manifests from a template repository."""

    def __init__(
        self,
        repository_url: str,
        branch: str = "main",
        timeout: float = 15.0,
    ) -> None:
        self._base_url = raw_base_url(repository_url, branch)
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        """Fully-qualified URL for a repository-relative path."""
        relative = urllib.parse.quote(path.strip().replace("\\", "/").lstrip("/"))
        return f"{self._base_url}/{relative}"

    def fetch_bytes(self, path: str) -> bytes:
        """Download ``path`` and return the body untouched.

        Raises:
            FetchError: On any HTTP or network failure.
        """
        url = self.url_for(path)
        logger.debug("GET %s", url)
        request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as resp:
                return resp.read()
        except urllib.error.HTTPError as e:
            raise FetchError(path, f"HTTP {e.code} {e.reason}", status=e.code) from e
        except urllib.error.URLError as e:
            raise FetchError(path, str(e.reason)) from e
        except OSError as e:
            # socket timeouts and resets surface here
            raise FetchError(path, str(e) or type(e).__name__) from e

    def fetch_text(self, path: str) -> str:
        """Download ``path`` and decode it as UTF-8."""
        body = self.fetch_bytes(path)
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FetchError(path, f"not valid UTF-8 text: {e}") from e

    def fetch_manifest(
        self,
        name: str,
        *,
        category: EntryCategory = EntryCategory.GENERAL,
        allow_missing: bool = False,
    ) -> list[ManifestEntry] | None:
        """Download and parse a JSON manifest.

        Args:
            name: Manifest path within the repository.
            category: Category stamped on every parsed entry.
            allow_missing: Return None instead of raising when the manifest
                does not exist (404) or is empty.

        Returns:
            Parsed entries (possibly empty), or None for an allowed miss.

        Raises:
            FetchError: On transport failure, or when the body is not a
                JSON list of valid entries.
        """
        try:
            text = self.fetch_text(name)
        except FetchError as e:
            if allow_missing and e.not_found:
                logger.info("Manifest %s not found, treating as empty", name)
                return None
            raise

        text = text.lstrip("\ufeff")
        if not text.strip():
            if allow_missing:
                logger.info("Manifest %s is empty, treating as empty", name)
                return None
            raise FetchError(name, "manifest unreadable: empty document")

        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise FetchError(name, f"manifest unreadable: {e}") from e

        if document is None:
            if allow_missing:
                return None
            raise FetchError(name, "manifest unreadable: null document")

        try:
            entries = parse_entries(document, category)
        except ValueError as e:
            raise FetchError(name, f"manifest unreadable: {e}") from e

        logger.debug("Manifest %s: %d entries", name, len(entries))
        return entries
