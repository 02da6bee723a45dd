"""Ignore-glob matching for document paths."""

from __future__ import annotations

import os
from collections.abc import Sequence

from wcmatch import glob

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB


def relative_path(fs_path: str, workspace_root: str | None) -> str:
    """Path used for ignore matching: workspace-relative when a root is known."""
    path = os.path.relpath(fs_path, workspace_root) if workspace_root else fs_path
    return path.replace(os.sep, "/")


def is_ignored(path: str, globs: Sequence[str]) -> bool:
    """Return True if ``path`` matches at least one of ``globs``."""
    if not globs:
        return False
    return glob.globmatch(path, list(globs), flags=GLOB_FLAGS)
