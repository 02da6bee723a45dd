"""Abstract scanning engine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Collection, Sequence

from doiuse_ls.validator.models import FeatureFinding
from doiuse_ls.validator.syntax import Syntax


class ScanEngine(ABC):
    """Reports uses of features not fully supported by a browser target."""

    @abstractmethod
    async def scan(
        self,
        text: str,
        browsers: Sequence[str],
        ignore: Collection[str] = (),
        syntax: Syntax | None = None,
    ) -> list[FeatureFinding]:
        """Scan a stylesheet and return every finding, in source order.

        Raises ScanParseFailure when the text cannot be parsed with ``syntax``.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the engine."""
