"""Conversion of engine findings into protocol diagnostics."""

from __future__ import annotations

import re
from collections.abc import Iterable

from doiuse_ls.settings.models import MessageLevel, Severity
from doiuse_ls.validator.models import (
    Diagnostic,
    FeatureFinding,
    Position,
    Range,
)

# postcss prefixes messages with the anonymous input location
_INPUT_PREFIX_RE = re.compile(r"<input css \d+>:\d*:\d*:\s")


def classify(finding: FeatureFinding) -> Severity:
    """Missing support is an error, partial support a warning."""
    if finding.missing:
        return Severity.Error
    if finding.partial:
        return Severity.Warning
    return Severity.Information


def clean_message(message: str) -> str:
    return _INPUT_PREFIX_RE.sub("", message, count=1)


def to_range(finding: FeatureFinding) -> Range:
    """Translate 1-based engine positions to a 0-based protocol range.

    Only the start column is decremented; the end column is passed through,
    so the range covers one character past the reported end.
    """
    pos = finding.position
    return Range(
        start=Position(line=pos.start_line - 1, character=pos.start_column - 1),
        end=Position(line=pos.end_line - 1, character=pos.end_column),
    )


def build(finding: FeatureFinding, message_level: MessageLevel) -> Diagnostic | None:
    """Build a diagnostic, or None when it is below the configured level."""
    severity = classify(finding)
    if severity > message_level.severity:
        return None
    return Diagnostic(
        severity=severity,
        message=clean_message(finding.message),
        range=to_range(finding),
        code=finding.feature_id,
    )


def build_all(
    findings: Iterable[FeatureFinding],
    message_level: MessageLevel,
) -> list[Diagnostic]:
    """Map findings to diagnostics in order, dropping filtered ones."""
    built = (build(finding, message_level) for finding in findings)
    return [diagnostic for diagnostic in built if diagnostic is not None]
