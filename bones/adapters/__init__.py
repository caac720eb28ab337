"""Adapters — bindings for the network and external tools.

Public re-exports for convenient access.
"""

from bones.adapters.base import Adapter, ExecutionContext
from bones.adapters.http.github import FetchError, GitHubRawFetcher
from bones.adapters.mock import MockFetcher, MockToolRunner
from bones.adapters.shell.command import CommandRunner

__all__ = [
    "Adapter",
    "CommandRunner",
    "ExecutionContext",
    "FetchError",
    "GitHubRawFetcher",
    "MockFetcher",
    "MockToolRunner",
]
