"""Browser-target resolution with a per-directory-scope cache."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from doiuse_ls.errors import NotInitialized
from doiuse_ls.settings.store import SettingsStore
from doiuse_ls.targets.browserslist import read_directory

logger = logging.getLogger(__name__)

# Scope key for files governed by the editor-level default
DEFAULT_SCOPE = "<default>"


@dataclass(frozen=True)
class _Discovery:
    scope: str
    targets: tuple[str, ...]
    visited: tuple[str, ...]
    source: Path | None = None


def _ancestors(directory: Path, root: Path | None) -> list[Path]:
    """Directories from ``directory`` upward, stopping at ``root`` if inside it."""
    chain = [directory, *directory.parents]
    if root is not None and (directory == root or root in directory.parents):
        return chain[: chain.index(root) + 1]
    return chain


class BrowserTargetResolver:
    """Resolves the ordered browser queries that apply to a file.

    An explicit ``browsers`` setting wins for every file. Otherwise the
    nearest ancestor directory that declares browsers (package.json field,
    ``.browserslistrc`` or ``browserslist``) is the scope, falling back to the
    editor default. Results are cached per scope, and every directory passed
    on the way up is remembered as belonging to that scope.
    """

    def __init__(
        self,
        settings: SettingsStore,
        workspace_root: str | None = None,
        default_browsers: Sequence[str] = (),
        env: str = "production",
    ) -> None:
        self._settings = settings
        self._root = Path(workspace_root).resolve() if workspace_root else None
        self._default = tuple(default_browsers)
        self._env = env
        self._targets: dict[str, tuple[str, ...]] = {}
        self._scopes: dict[str, str] = {}
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def __len__(self) -> int:
        return len(self._targets)

    def set_workspace_root(self, workspace_root: str | None) -> None:
        self._root = Path(workspace_root).resolve() if workspace_root else None
        self.clear()

    def clear(self) -> None:
        """Drop every cached scope at once."""
        self._targets = {}
        self._scopes = {}
        self._generation += 1

    def cached(self, scope: str) -> tuple[str, ...] | None:
        return self._targets.get(scope)

    def _explicit(self) -> tuple[str, ...]:
        try:
            return self._settings.current().browsers
        except NotInitialized:
            return ()

    def _start_directory(self, file_path: str | None) -> Path | None:
        if file_path:
            return Path(file_path).resolve().parent
        return self._root

    async def resolve(self, file_path: str | None) -> tuple[str, ...]:
        """Return the browser queries for ``file_path`` (empty if indeterminate)."""
        explicit = self._explicit()
        if explicit:
            return explicit

        directory = self._start_directory(file_path)
        if directory is None:
            return self._default

        key = str(directory)
        scope = self._scopes.get(key)
        if scope is not None and scope in self._targets:
            return self._targets[scope]

        generation = self._generation
        discovery = await asyncio.to_thread(
            self._discover, directory, dict(self._scopes), self._targets,
        )

        if generation != self._generation:
            # Invalidated while scanning; hand back the result but keep it out of the new cache
            return discovery.targets

        if discovery.scope not in self._targets:
            self._targets[discovery.scope] = discovery.targets
            logger.info(
                "Resolved browser targets for scope %s%s: %s",
                discovery.scope,
                f" (from {discovery.source.name})" if discovery.source else "",
                ", ".join(discovery.targets) or "<none>",
            )
        for visited in discovery.visited:
            self._scopes[visited] = discovery.scope
        return self._targets[discovery.scope]

    def _discover(
        self,
        directory: Path,
        known: dict[str, str],
        targets: dict[str, tuple[str, ...]],
    ) -> _Discovery:
        """Walk upward from ``directory``; runs in a worker thread."""
        visited: list[str] = []
        for candidate in _ancestors(directory, self._root):
            key = str(candidate)
            scope = known.get(key)
            if scope is not None and scope in targets:
                return _Discovery(scope, targets[scope], tuple(visited))
            visited.append(key)
            found = read_directory(candidate, self._env)
            if found is not None:
                source, queries = found
                return _Discovery(key, tuple(queries), tuple(visited), source)
        return _Discovery(DEFAULT_SCOPE, self._default, tuple(visited))
