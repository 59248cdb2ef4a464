"""Protocols describing what the menu needs from the host editor."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, Sequence, runtime_checkable

from ..core.ranges import LineRange
from .actions import Command, MenuCandidate


@runtime_checkable
class TextSource(Protocol):
    """Anything that can produce a whole-text snapshot."""

    def current_full_text(self) -> str:
        ...


@runtime_checkable
class EditorHost(TextSource, Protocol):
    """Collaborator surface supplied by the editing environment."""

    def cursor_modes(self) -> Iterable[str]:
        ...

    def visible_line_range(self) -> LineRange:
        ...

    def message_width(self) -> int:
        ...

    def show_message(self, message: str) -> None:
        ...

    def show_error(self, message: str) -> None:
        ...

    def invoke(self, command: Command) -> Any:
        ...

    def begin_atomic_edit_group(self) -> None:
        ...

    def end_atomic_edit_group(self) -> None:
        ...


class SelectionPresenter(Protocol):
    """Shows candidates and returns the chosen one, or ``None`` when cancelled."""

    def __call__(self, candidates: Sequence[MenuCandidate]) -> Optional[MenuCandidate]:
        ...


__all__ = ["EditorHost", "SelectionPresenter", "TextSource"]
