"""Selection presenters for the refactor menu."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from ..menu.actions import MenuCandidate

LOGGER = logging.getLogger(__name__)

QCursor: Any = None
QMenu: Any = None

try:  # pragma: no cover - PySide6 optional in CI
    from PySide6.QtGui import QCursor as _QtCursor
    from PySide6.QtWidgets import QMenu as _QtMenu

    QCursor = _QtCursor
    QMenu = _QtMenu
except Exception:  # pragma: no cover - runtime fallback
    LOGGER.debug("PySide6 unavailable; Qt popup presenter disabled", exc_info=True)


class CallbackPresenter:
    """Delegates the choice to ``chooser``; used by headless hosts and tests."""

    def __init__(self, chooser: Callable[[Sequence[MenuCandidate]], Optional[MenuCandidate]]) -> None:
        self._chooser = chooser

    def __call__(self, candidates: Sequence[MenuCandidate]) -> Optional[MenuCandidate]:
        return self._chooser(candidates)


class QtPopupPresenter:
    """Shows the candidates in a ``QMenu`` popup next to the text cursor."""

    def __init__(self, editor: Any, *, title: str = "Refactor") -> None:
        self._editor = editor
        self._title = title

    def __call__(self, candidates: Sequence[MenuCandidate]) -> Optional[MenuCandidate]:
        if QMenu is None:
            raise RuntimeError("PySide6 must be installed to show the refactor popup.")
        widget = self._editor.widget() if hasattr(self._editor, "widget") else self._editor
        menu = QMenu(widget)
        menu.setTitle(self._title)
        menu.setToolTipsVisible(True)
        for index, candidate in enumerate(candidates):
            action = menu.addAction(candidate.title)
            if candidate.description:
                action.setToolTip(candidate.description)
                action.setStatusTip(candidate.description)
            action.setData(index)
        selected = menu.exec(self._popup_position(widget))
        if selected is None:
            return None
        index = selected.data()
        if not isinstance(index, int) or not 0 <= index < len(candidates):
            return None
        return candidates[index]

    def _popup_position(self, widget: Any) -> Any:
        if widget is not None:
            try:
                rect = widget.cursorRect()
                return widget.viewport().mapToGlobal(rect.bottomLeft())
            except Exception:  # pragma: no cover - requires a live Qt widget
                LOGGER.debug("Unable to anchor popup at the text cursor", exc_info=True)
        return QCursor.pos()


__all__ = ["CallbackPresenter", "QtPopupPresenter"]
