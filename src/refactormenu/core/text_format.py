"""String helpers used when echoing change reports."""

from __future__ import annotations

import re

ELLIPSIS = "…"

_WHITESPACE_RUN = re.compile(r"\s+")
_BLANK_LINE_RUN = re.compile(r"\n[ \t]*(?:\n[ \t]*)+\n")


def is_blank(text: str | None) -> bool:
    """Return ``True`` when ``text`` is empty or whitespace only."""

    return not text or not text.strip()


def collapse_whitespace(text: str) -> str:
    """Collapse every run of whitespace into a single space and trim the ends."""

    return _WHITESPACE_RUN.sub(" ", text).strip()


def collapse_vertical_whitespace(text: str) -> str:
    """Collapse runs of blank lines into a single blank line."""

    return _BLANK_LINE_RUN.sub("\n\n", text)


def ellipsize(text: str, max_width: int) -> str:
    """Truncate ``text`` to ``max_width`` characters, ending with an ellipsis.

    Strings that already fit are returned unchanged.
    """

    if max_width <= 0:
        return ""
    if len(text) <= max_width:
        return text
    return text[: max_width - 1] + ELLIPSIS


__all__ = [
    "ELLIPSIS",
    "collapse_vertical_whitespace",
    "collapse_whitespace",
    "ellipsize",
    "is_blank",
]
