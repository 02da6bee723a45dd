"""Shared test fixtures and configuration."""

import sys
from pathlib import Path

# Add vscode_doiuse/ to Python path so `from doiuse_ls.xxx` imports work,
# and tests/ so test packages can share `doubles`
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "vscode_doiuse"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

import pytest

from doiuse_ls.context import ValidationContext
from doubles import RecordingPublisher


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def context(workspace: Path) -> ValidationContext:
    return ValidationContext(workspace_root=str(workspace))
