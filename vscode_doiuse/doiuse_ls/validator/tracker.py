"""Collects per-document failure messages for one aggregated report."""

from __future__ import annotations

import traceback

from doiuse_ls.validator.models import TextDocument


def error_message(err: BaseException, document: TextDocument) -> str:
    """Format a pipeline failure the way the editor extension displays it."""
    message = str(err) or "unknown error"
    location = document.fs_path or document.uri
    stack = "".join(traceback.format_exception(type(err), err, err.__traceback__)).strip()
    return f"vscode-doiuse: '{message}' while validating: {location} stacktrace: {stack}"


class ErrorMessageTracker:
    """Deduplicating, order-preserving message accumulator."""

    def __init__(self) -> None:
        self._messages: dict[str, None] = {}

    def add(self, message: str) -> None:
        self._messages.setdefault(message, None)

    @property
    def messages(self) -> list[str]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)
