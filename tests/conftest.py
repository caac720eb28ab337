"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from bones.adapters.mock import MockFetcher, MockToolRunner, RecordingSink, create_git_dir
from bones.adapters.scaffolding.spec_kit import SpecKitAdapter
from bones.adapters.vcs.git import GitAdapter
from bones.core.models.config import BonesConfig
from bones.core.use_cases.scaffold import ScaffoldWorkflow

GENERAL_MANIFEST = [
    {"sourcePath": "README.md", "destinationPath": "README.md", "isRequired": True},
    {"sourcePath": ".gitignore", "destinationPath": ".gitignore", "isRequired": True},
    {
        "sourcePath": "templates/copilot-instructions.md",
        "destinationPath": ".github/copilot-instructions.md",
        "isRequired": False,
    },
    {
        "sourcePath": "speckit/settings.json",
        "destinationPath": ".vscode/settings.json",
        "isRequired": False,
        "onlyWhenSpecKit": True,
    },
]

PROMPT_MANIFEST = [
    {"sourcePath": "prompts/plan.prompt.md", "destinationPath": "ignored/anywhere.md"},
    {"sourcePath": "prompts/review.prompt.md"},
]

TEMPLATE_FILES = {
    "README.md": "# Template\n",
    ".gitignore": "__pycache__/\n",
    "templates/copilot-instructions.md": "Be helpful.\n",
    "speckit/settings.json": '{"spec": true}\n',
    "prompts/plan.prompt.md": "Plan it.\n",
    "prompts/review.prompt.md": "Review it.\n",
    "constitution.md": "# Constitution\n",
}


@pytest.fixture
def fetcher() -> MockFetcher:
    """A template repository with both manifests and every listed file."""
    return MockFetcher(
        files=TEMPLATE_FILES,
        manifests={
            "file-list.json": GENERAL_MANIFEST,
            "prompt-list.json": PROMPT_MANIFEST,
        },
    )


@pytest.fixture
def runner() -> MockToolRunner:
    """Tool runner where ``git init`` leaves a ``.git`` directory behind."""
    tools = MockToolRunner()
    tools.set_effect("git", create_git_dir)
    return tools


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def config(tmp_path: Path) -> BonesConfig:
    """Default config with both base directories under tmp_path."""
    return BonesConfig.model_validate(
        {
            "directories": {
                "personal_base": str(tmp_path / "personal"),
                "work_base": str(tmp_path / "work"),
            }
        }
    )


@pytest.fixture
def workflow(config, fetcher, runner, sink) -> ScaffoldWorkflow:
    return _wire(config, fetcher, runner, sink)


@pytest.fixture
def make_workflow():
    """Factory for workflows built around a custom fetcher."""
    return _wire


def _wire(config, fetcher, runner, sink=None) -> ScaffoldWorkflow:
    """A workflow wired to mocks instead of the network and subprocesses."""
    return ScaffoldWorkflow(
        config,
        fetcher,
        git=GitAdapter(runner, executable=config.tools.git),
        spec_kit=SpecKitAdapter(
            runner,
            executable=config.tools.spec_tool,
            args=config.tools.spec_tool_args,
        ),
        sink=sink,
    )
