"""Locate the first line that changed between two text snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Callable, Optional

POSITIONAL = "positional"
SEQUENCE = "sequence"
DIFF_STRATEGIES: tuple[str, ...] = (POSITIONAL, SEQUENCE)


@dataclass(slots=True, frozen=True)
class DiffResult:
    """First changed line between a ``before`` and ``after`` snapshot."""

    line_index: int
    before_text: str
    after_text: str

    @property
    def line_number(self) -> int:
        """Return the 1-based line number of the change."""

        return self.line_index + 1


def split_lines(text: str) -> list[str]:
    return text.split("\n")


def first_differing_line(before: str, after: str) -> Optional[DiffResult]:
    """Return the first positionally paired line that differs.

    Lines are paired by index up to the length of the shorter text; trailing
    lines beyond that length are never compared.
    """

    before_lines = split_lines(before)
    after_lines = split_lines(after)
    for index, (old, new) in enumerate(zip(before_lines, after_lines)):
        if old != new:
            return DiffResult(line_index=index, before_text=old, after_text=new)
    return None


def first_divergent_line(before: str, after: str) -> Optional[DiffResult]:
    """Return the true first point of divergence using a sequence diff.

    Unlike :func:`first_differing_line`, inserted or deleted lines are
    reported where they occur, including past the end of the shorter text.
    The index refers to the ``after`` snapshot.
    """

    if before == after:
        return None
    before_lines = split_lines(before)
    after_lines = split_lines(after)
    matcher = SequenceMatcher(a=before_lines, b=after_lines, autojunk=False)
    for tag, i1, _i2, j1, _j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        old = before_lines[i1] if i1 < len(before_lines) and tag != "insert" else ""
        new = after_lines[j1] if j1 < len(after_lines) and tag != "delete" else ""
        return DiffResult(line_index=j1, before_text=old, after_text=new)
    return None


def resolve_strategy(name: str | None) -> Callable[[str, str], Optional[DiffResult]]:
    """Return the diff function registered under ``name``."""

    key = (name or POSITIONAL).strip().lower()
    if key == POSITIONAL:
        return first_differing_line
    if key == SEQUENCE:
        return first_divergent_line
    raise ValueError(f"Unknown diff strategy: {name!r}")


__all__ = [
    "DiffResult",
    "DIFF_STRATEGIES",
    "POSITIONAL",
    "SEQUENCE",
    "first_differing_line",
    "first_divergent_line",
    "resolve_strategy",
    "split_lines",
]
