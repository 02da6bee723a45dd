"""Server-level options, loaded once at startup."""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, field_validator


class ServerOptions(BaseModel):
    """Process options that are not part of the workspace ``doiuse`` section."""

    node_executable: str = "node"
    scan_timeout: float | None = None
    default_browsers: tuple[str, ...] = ()
    browserslist_env: str = "production"
    dev_mode: bool = False

    @field_validator("scan_timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            return None
        return value


def _split_list(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def load_options() -> ServerOptions:
    """Load options from DOIUSE_LS_OPTIONS_PATH (JSON) or the environment."""
    opts_path = os.environ.get("DOIUSE_LS_OPTIONS_PATH", "")
    if opts_path and Path(opts_path).exists():
        return ServerOptions.model_validate(json.loads(Path(opts_path).read_text()))

    timeout = os.environ.get("DOIUSE_LS_SCAN_TIMEOUT", "")
    return ServerOptions(
        node_executable=os.environ.get("DOIUSE_LS_NODE", "node"),
        scan_timeout=float(timeout) if timeout else None,
        default_browsers=_split_list(os.environ.get("DOIUSE_LS_DEFAULT_BROWSERS", "")),
        browserslist_env=os.environ.get("BROWSERSLIST_ENV", "production"),
        dev_mode=bool(os.environ.get("DOIUSE_LS_DEV_MODE")),
    )
