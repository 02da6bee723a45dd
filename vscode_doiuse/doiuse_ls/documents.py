"""Inventory of documents currently open in the editor."""

from __future__ import annotations

import logging

from doiuse_ls.validator.models import TextDocument

logger = logging.getLogger(__name__)


class DocumentStore:
    """Keeps the latest snapshot of every open document, keyed by uri."""

    def __init__(self) -> None:
        self._documents: dict[str, TextDocument] = {}

    def open(self, document: TextDocument) -> TextDocument:
        self._documents[document.uri] = document
        return document

    def change(self, document: TextDocument) -> TextDocument:
        """Replace a snapshot, ignoring versions older than the stored one."""
        current = self._documents.get(document.uri)
        if current is not None and document.version < current.version:
            logger.debug(
                "Ignoring stale change for %s (v%d < v%d)",
                document.uri,
                document.version,
                current.version,
            )
            return current
        self._documents[document.uri] = document
        return document

    def close(self, uri: str) -> TextDocument | None:
        return self._documents.pop(uri, None)

    def get(self, uri: str) -> TextDocument | None:
        return self._documents.get(uri)

    def all(self) -> list[TextDocument]:
        return list(self._documents.values())

    def __len__(self) -> int:
        return len(self._documents)
