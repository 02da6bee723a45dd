"""Stylesheet syntax selection by document language identifier."""

from __future__ import annotations

from enum import Enum


class Syntax(str, Enum):
    """postcss syntax modules understood by the scanning engine."""

    less = "postcss-less"
    scss = "postcss-scss"
    sugarss = "sugarss"


LANGUAGE_SYNTAX: dict[str, Syntax | None] = {
    "css": None,
    "less": Syntax.less,
    "scss": Syntax.scss,
    "sass": Syntax.sugarss,
    "sass-indented": Syntax.sugarss,
    "stylus": Syntax.sugarss,
}

SUPPORTED_LANGUAGES = tuple(LANGUAGE_SYNTAX)


def syntax_for(language_id: str) -> Syntax | None:
    """Return the syntax for a language, or None for the default CSS grammar."""
    return LANGUAGE_SYNTAX.get(language_id)
