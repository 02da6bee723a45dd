"""Per-workspace state shared by every validation pass."""

from __future__ import annotations

from doiuse_ls.engine.base import ScanEngine
from doiuse_ls.options import ServerOptions
from doiuse_ls.settings.store import SettingsStore
from doiuse_ls.targets.resolver import BrowserTargetResolver


class ValidationContext:
    """Settings, target cache and engine for one workspace.

    Replacing the settings clears the target cache.
    """

    def __init__(
        self,
        options: ServerOptions | None = None,
        workspace_root: str | None = None,
        engine: ScanEngine | None = None,
    ) -> None:
        self.options = options or ServerOptions()
        self.workspace_root = workspace_root
        self.engine = engine
        self.settings = SettingsStore()
        self.resolver = BrowserTargetResolver(
            self.settings,
            workspace_root=workspace_root,
            default_browsers=self.options.default_browsers,
            env=self.options.browserslist_env,
        )
        self.settings.on_change(self.resolver.clear)

    def set_workspace_root(self, workspace_root: str | None) -> None:
        self.workspace_root = workspace_root
        self.resolver.set_workspace_root(workspace_root)
