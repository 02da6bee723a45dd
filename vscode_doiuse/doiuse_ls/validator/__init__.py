"""Document validation pipeline."""

from doiuse_ls.validator.diagnostics import build, build_all, classify
from doiuse_ls.validator.ignore import is_ignored
from doiuse_ls.validator.models import (
    Diagnostic,
    FeatureFinding,
    PipelineOutcome,
    PipelineStage,
    TextDocument,
)
from doiuse_ls.validator.syntax import Syntax, syntax_for

__all__ = [
    "Diagnostic",
    "FeatureFinding",
    "PipelineOutcome",
    "PipelineStage",
    "Syntax",
    "TextDocument",
    "build",
    "build_all",
    "classify",
    "is_ignored",
    "syntax_for",
]
