"""Place generated declarations above the enclosing top-level form."""

from __future__ import annotations

from typing import Mapping, Sequence

from ..core.text_format import collapse_vertical_whitespace
from .editor_widget import EditorWidget

DEFAULT_COMMENT_PREFIXES: tuple[str, ...] = (";", "#", "//")
MODE_COMMENT_PREFIXES: Mapping[str, tuple[str, ...]] = {
    "lisp-editing": (";",),
    "c-editing": ("//", "/*", "*"),
    "python": ("#",),
}
_CLOSING_DELIMITERS = ")]}"


def comment_prefixes_for(mode: str | None) -> tuple[str, ...]:
    return MODE_COMMENT_PREFIXES.get(mode or "", DEFAULT_COMMENT_PREFIXES)


def is_comment_line(line: str, prefixes: Sequence[str]) -> bool:
    stripped = line.strip()
    return bool(stripped) and stripped.startswith(tuple(prefixes))


def is_toplevel_line(line: str, prefixes: Sequence[str]) -> bool:
    """Return ``True`` when ``line`` opens a top-level declaration."""

    if not line or line[0].isspace() or line[0] in _CLOSING_DELIMITERS:
        return False
    return not is_comment_line(line, prefixes)


def toplevel_start_line(lines: Sequence[str], line_index: int, prefixes: Sequence[str]) -> int:
    """Return the index of the first line of the top-level form at ``line_index``.

    Comment lines directly above the form are treated as part of it.
    """

    start = 0
    for index in range(min(line_index, len(lines) - 1), -1, -1):
        if is_toplevel_line(lines[index], prefixes):
            start = index
            break
    while start > 0 and is_comment_line(lines[start - 1], prefixes):
        start -= 1
    return start


def insert_above(
    editor: EditorWidget,
    text: str,
    *,
    comment_prefixes: Sequence[str] | None = None,
) -> int:
    """Insert ``text`` above the top-level form enclosing the cursor.

    A blank line is ensured above the inserted text and one blank line
    separates it from the form below. Returns the offset just past the
    inserted text and leaves the cursor there.
    """

    prefixes = tuple(comment_prefixes) if comment_prefixes else comment_prefixes_for(editor.mode)
    buffer = editor.current_full_text()
    lines = buffer.split("\n")
    cursor_line, _column = editor.cursor_line_column()
    target = toplevel_start_line(lines, cursor_line - 1, prefixes)
    offset = sum(len(line) + 1 for line in lines[:target])

    body = collapse_vertical_whitespace(text.strip("\n"))
    leading = "\n" if target > 0 and lines[target - 1].strip() else ""
    editor.insert_text(f"{leading}{body}\n\n", position=offset)
    end = offset + len(leading) + len(body)
    editor.set_cursor(end)
    return end


__all__ = [
    "DEFAULT_COMMENT_PREFIXES",
    "MODE_COMMENT_PREFIXES",
    "comment_prefixes_for",
    "insert_above",
    "is_comment_line",
    "is_toplevel_line",
    "toplevel_start_line",
]
