"""Browser-target discovery and caching."""

from doiuse_ls.targets.resolver import DEFAULT_SCOPE, BrowserTargetResolver

__all__ = ["DEFAULT_SCOPE", "BrowserTargetResolver"]
