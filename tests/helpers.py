"""Shared test helpers and stub classes.

Import from here instead of duplicating these classes in individual test files.
"""

from __future__ import annotations

from typing import Optional, Sequence

from refactormenu.menu.actions import MenuCandidate


class RecordingPresenter:
    """Selection presenter stub that records what it was shown.

    Picks the candidate whose title equals ``choose`` (or the first one when
    ``choose`` is ``True``); ``choose=None`` simulates a cancelled popup.

    Example:
        presenter = RecordingPresenter(choose="Extract function")
        dispatcher = MenuDispatcher(builder, presenter, editor)
    """

    def __init__(self, choose: str | bool | None = True) -> None:
        self.choose = choose
        self.calls: list[list[MenuCandidate]] = []

    @property
    def shown_titles(self) -> list[str]:
        return [candidate.title for candidate in self.calls[-1]] if self.calls else []

    def __call__(self, candidates: Sequence[MenuCandidate]) -> Optional[MenuCandidate]:
        self.calls.append(list(candidates))
        if self.choose is None or self.choose is False:
            return None
        if self.choose is True:
            return candidates[0]
        for candidate in candidates:
            if candidate.title == self.choose:
                return candidate
        return None


def numbered_lines(count: int, *, prefix: str = "line") -> str:
    """Return ``count`` lines of the form ``"line 1"``, ``"line 2"``..."""

    return "\n".join(f"{prefix} {index}" for index in range(1, count + 1))
