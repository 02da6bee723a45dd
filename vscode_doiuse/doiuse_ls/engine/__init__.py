"""Feature-usage scanning engines."""

from doiuse_ls.engine.base import ScanEngine
from doiuse_ls.engine.locate import EngineLocation, locate_engine
from doiuse_ls.engine.node import NodeDoiuseEngine

__all__ = ["EngineLocation", "NodeDoiuseEngine", "ScanEngine", "locate_engine"]
