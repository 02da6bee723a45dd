"""Locating the doiuse module and a node runtime for a workspace."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from doiuse_ls.errors import EngineNotFound

logger = logging.getLogger(__name__)

MODULE_NAME = "doiuse"


@dataclass(frozen=True)
class EngineLocation:
    node: str
    module_dir: Path

    @property
    def node_modules(self) -> Path:
        return self.module_dir.parent


def _is_module(candidate: Path) -> bool:
    return (candidate / "package.json").is_file()


def find_local_module(workspace_root: str | None, name: str = MODULE_NAME) -> Path | None:
    """Search ``node_modules`` from the workspace root upward."""
    if not workspace_root:
        return None
    start = Path(workspace_root).resolve()
    for directory in (start, *start.parents):
        candidate = directory / "node_modules" / name
        if _is_module(candidate):
            return candidate
    return None


def find_node_path_module(name: str = MODULE_NAME) -> Path | None:
    for entry in os.environ.get("NODE_PATH", "").split(os.pathsep):
        if entry and _is_module(Path(entry) / name):
            return Path(entry) / name
    return None


async def global_node_modules(npm: str | None = None) -> Path | None:
    """Ask npm for the global ``node_modules`` directory."""
    npm = npm or shutil.which("npm")
    if npm is None:
        return None
    try:
        proc = await asyncio.create_subprocess_exec(
            npm, "root", "-g",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        stdout, _ = await proc.communicate()
    except OSError as e:
        logger.debug("Could not run '%s root -g': %s", npm, e)
        return None
    if proc.returncode != 0:
        return None
    root = stdout.decode().strip()
    return Path(root) if root else None


async def locate_engine(workspace_root: str | None, node_executable: str = "node") -> EngineLocation:
    """Resolve doiuse from the workspace, NODE_PATH, then the global npm root.

    Raises EngineNotFound when either node or the module is missing.
    """
    node = shutil.which(node_executable)
    if node is None:
        raise EngineNotFound(f"node executable '{node_executable}' not found")

    module_dir = find_local_module(workspace_root) or find_node_path_module()
    if module_dir is None:
        global_root = await global_node_modules()
        if global_root is not None and _is_module(global_root / MODULE_NAME):
            module_dir = global_root / MODULE_NAME

    if module_dir is None:
        raise EngineNotFound("Module not found.")

    logger.info("Using %s from %s (node: %s)", MODULE_NAME, module_dir, node)
    return EngineLocation(node=node, module_dir=module_dir)
