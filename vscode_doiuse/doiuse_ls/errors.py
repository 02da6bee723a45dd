"""Exception types raised across the validation service."""

from __future__ import annotations

INSTALL_HINT = (
    "Failed to load doiuse library. "
    "Please install doiuse in your workspace folder using 'npm install doiuse' "
    "or 'npm install -g doiuse' and then press Retry."
)


class DoiuseError(Exception):
    """Base class for all service errors."""


class ConfigurationError(DoiuseError):
    """Initialization failed in a way the user can fix and retry."""

    code = 99

    def __init__(self, message: str, retry: bool = True) -> None:
        super().__init__(message)
        self.message = message
        self.retry = retry


class EngineNotFound(ConfigurationError):
    """The doiuse module (or a node runtime) could not be located."""

    def __init__(self, detail: str = "Module not found.") -> None:
        super().__init__(INSTALL_HINT, retry=True)
        self.detail = detail


class NotInitialized(DoiuseError):
    """Settings were requested before the first configuration notification."""


class ScanParseFailure(DoiuseError):
    """The stylesheet could not be parsed during a scan."""


class EngineError(DoiuseError):
    """The scanning engine failed for a reason other than a parse error."""
