"""Editor widget implementation with Qt + headless fallbacks.

The widget keeps buffer logic (text, cursor, modes, undo history, viewport)
decoupled from the Qt presentation layer so tests can run in headless
environments. When PySide6 is available and a ``QApplication`` has been
instantiated, the widget wires a ``QPlainTextEdit``; otherwise an in-memory
buffer is used. The widget implements the ``EditorHost`` surface consumed by
the refactor menu.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Protocol

from ..core.ranges import LineRange
from .document_model import DEFAULT_MODE, DocumentState

LOGGER = logging.getLogger(__name__)

QApplication: Any = None
QPlainTextEdit: Any = None
QTextCursor: Any = None

try:  # pragma: no cover - PySide6 optional in CI
    from PySide6.QtGui import QTextCursor as _QtTextCursor
    from PySide6.QtWidgets import (
        QApplication as _QtApplication,
        QPlainTextEdit as _QtPlainTextEdit,
    )

    QApplication = _QtApplication
    QPlainTextEdit = _QtPlainTextEdit
    QTextCursor = _QtTextCursor
except Exception:  # pragma: no cover - runtime fallback
    LOGGER.debug("PySide6 unavailable; editor widget runs headless", exc_info=True)


class TextChangeListener(Protocol):
    """Callback signature invoked when the editor text changes."""

    def __call__(self, text: str, state: DocumentState) -> None:
        ...


class MessageListener(Protocol):
    """Callback invoked when the editor echoes a message or an error."""

    def __call__(self, message: str, *, error: bool) -> None:
        ...


@dataclass(slots=True)
class _UndoEntry:
    """Represents a text snapshot for undo/redo bookkeeping."""

    text: str
    cursor: int = 0


class EditorWidget:
    """High-level buffer orchestrating the text editor component.

    The Qt editor is only created once a ``QApplication`` exists; use
    :meth:`widget` to embed it in a window.
    """

    MAX_HISTORY = 50
    DEFAULT_VIEWPORT_HEIGHT = 40
    DEFAULT_MESSAGE_WIDTH = 80

    def __init__(self, parent: Any | None = None) -> None:
        self._state = DocumentState()
        self._text_buffer: str = ""
        self._cursor: int = 0
        self._qt_editor: Any = None
        self._text_listeners: list[TextChangeListener] = []
        self._message_listeners: list[MessageListener] = []
        self._undo_stack: list[_UndoEntry] = []
        self._redo_stack: list[_UndoEntry] = []
        self._group_depth = 0
        self._group_snapshot: _UndoEntry | None = None
        self._viewport_first_line = 1
        self._viewport_height = self.DEFAULT_VIEWPORT_HEIGHT
        self._message_width = self.DEFAULT_MESSAGE_WIDTH
        self._last_message: str | None = None
        self._last_error: str | None = None

        self._build_ui(parent)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------
    def _build_ui(self, parent: Any | None) -> None:
        """Instantiate Qt widgets when a QApplication is available."""

        if QApplication is None or QPlainTextEdit is None:
            return
        try:
            if QApplication.instance() is None:
                # Headless mode – the logical buffer keeps working.
                return
        except Exception:  # pragma: no cover - Qt not initialised
            return

        self._qt_editor = QPlainTextEdit(parent)
        self._qt_editor.textChanged.connect(self._handle_qt_text_changed)  # type: ignore[attr-defined]
        self._qt_editor.cursorPositionChanged.connect(  # type: ignore[attr-defined]
            self._handle_qt_cursor_changed
        )

    def widget(self) -> Any | None:
        """Return the underlying ``QPlainTextEdit`` (``None`` when headless)."""

        return self._qt_editor

    # ------------------------------------------------------------------
    # Document accessors
    # ------------------------------------------------------------------
    def load_document(self, document: DocumentState) -> None:
        """Load a new document state into the widget."""

        self._state = document
        self._text_buffer = document.text
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._sync_qt_text()
        self.set_cursor(document.cursor)
        self._emit_text_changed()

    def to_document(self) -> DocumentState:
        """Return the current document representation."""

        self._state.text = self._text_buffer
        self._state.cursor = self._cursor
        return self._state

    def current_full_text(self) -> str:
        return self._text_buffer

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------
    @property
    def mode(self) -> str:
        return self._state.metadata.mode

    def set_mode(self, mode: str, *, minor_modes: Iterable[str] | None = None) -> None:
        """Set the major mode (and optionally the minor modes) of the buffer."""

        self._state.metadata.mode = mode.strip() or DEFAULT_MODE
        if minor_modes is not None:
            self._state.metadata.minor_modes = tuple(m for m in minor_modes if m)

    def cursor_modes(self) -> tuple[str, ...]:
        """Return the major mode followed by the active minor modes."""

        metadata = self._state.metadata
        return (metadata.mode, *metadata.minor_modes)

    # ------------------------------------------------------------------
    # Editing helpers
    # ------------------------------------------------------------------
    def set_text(self, text: str, *, mark_dirty: bool = True) -> None:
        """Replace the entire document content with ``text``."""

        previous = self._text_buffer
        if previous == text:
            return
        self._push_undo_snapshot(_UndoEntry(text=previous, cursor=self._cursor))
        self._text_buffer = text
        if mark_dirty:
            self._state.update_text(text)
        else:
            self._state.text = text
        self._sync_qt_text()
        self._cursor = min(self._cursor, len(text))
        self._emit_text_changed()

    def insert_text(self, text: str, position: int | None = None) -> int:
        """Insert ``text`` at ``position`` (default: the cursor); return its end."""

        start = self._cursor if position is None else position
        start = max(0, min(start, len(self._text_buffer)))
        self.set_text(self._text_buffer[:start] + text + self._text_buffer[start:])
        end = start + len(text)
        self.set_cursor(end)
        return end

    def replace_range(self, start: int, end: int, replacement: str) -> int:
        """Replace the slice ``[start:end]`` with ``replacement``; return its end."""

        begin, finish = self._clamp_range(start, end)
        self.set_text(self._text_buffer[:begin] + replacement + self._text_buffer[finish:])
        caret = begin + len(replacement)
        self.set_cursor(caret)
        return caret

    def invoke(self, command: Any) -> Any:
        """Run an editing command against this buffer."""

        return command()

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------
    @property
    def cursor_position(self) -> int:
        return self._cursor

    def set_cursor(self, position: int) -> None:
        caret = max(0, min(int(position), len(self._text_buffer)))
        self._cursor = caret
        self._state.cursor = caret
        if self._qt_editor is not None and QTextCursor is not None:
            cursor = self._qt_editor.textCursor()
            cursor.setPosition(caret)
            self._qt_editor.blockSignals(True)
            self._qt_editor.setTextCursor(cursor)
            self._qt_editor.blockSignals(False)

    def cursor_line_column(self) -> tuple[int, int]:
        """Return the 1-based ``(line, column)`` of the cursor."""

        text = self._text_buffer
        caret = self._cursor
        line = text.count("\n", 0, caret) + 1
        last_newline = text.rfind("\n", 0, caret)
        column = caret + 1 if last_newline == -1 else caret - last_newline
        return (line, max(column, 1))

    # ------------------------------------------------------------------
    # Viewport + messages
    # ------------------------------------------------------------------
    def set_viewport(self, first_line: int, height: int | None = None) -> None:
        """Scroll the headless viewport so ``first_line`` is at the top."""

        self._viewport_first_line = max(1, int(first_line))
        if height is not None:
            self._viewport_height = max(1, int(height))

    def visible_line_range(self) -> LineRange:
        """Return the 1-based, inclusive range of lines shown on screen."""

        qt_range = self._qt_visible_line_range()
        if qt_range is not None:
            return qt_range
        first = self._viewport_first_line
        return LineRange(first, first + self._viewport_height - 1)

    def set_message_width(self, width: int) -> None:
        self._message_width = max(1, int(width))

    def message_width(self) -> int:
        return self._message_width

    def show_message(self, message: str) -> None:
        self._last_message = message
        self._emit_message(message, error=False)

    def show_error(self, message: str) -> None:
        self._last_error = message
        self._emit_message(message, error=True)

    @property
    def last_message(self) -> str | None:
        return self._last_message

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def add_text_listener(self, listener: TextChangeListener) -> None:
        """Register a callback fired whenever the text buffer mutates."""

        self._text_listeners.append(listener)

    def add_message_listener(self, listener: MessageListener) -> None:
        """Register a callback fired when a message or error is echoed."""

        self._message_listeners.append(listener)

    # ------------------------------------------------------------------
    # Undo/redo support (headless-friendly)
    # ------------------------------------------------------------------
    def begin_atomic_edit_group(self) -> None:
        """Start grouping edits so they undo as a single step.

        Groups nest; only the outermost group records an undo entry.
        """

        if self._group_depth == 0:
            self._group_snapshot = _UndoEntry(text=self._text_buffer, cursor=self._cursor)
        self._group_depth += 1

    def end_atomic_edit_group(self) -> None:
        if self._group_depth == 0:
            raise RuntimeError("end_atomic_edit_group called without a matching begin")
        self._group_depth -= 1
        if self._group_depth:
            return
        snapshot = self._group_snapshot
        self._group_snapshot = None
        if snapshot is not None and snapshot.text != self._text_buffer:
            self._push_undo_snapshot(snapshot)

    @property
    def in_atomic_edit_group(self) -> bool:
        return self._group_depth > 0

    def undo(self) -> None:
        """Restore the previous text snapshot if available."""

        if not self._undo_stack:
            return
        entry = self._undo_stack.pop()
        self._redo_stack.append(_UndoEntry(text=self._text_buffer, cursor=self._cursor))
        self._restore(entry)

    def redo(self) -> None:
        """Reapply an undone text snapshot if available."""

        if not self._redo_stack:
            return
        entry = self._redo_stack.pop()
        self._undo_stack.append(_UndoEntry(text=self._text_buffer, cursor=self._cursor))
        self._restore(entry)

    @property
    def undo_depth(self) -> int:
        return len(self._undo_stack)

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------
    @property
    def line_count(self) -> int:
        if not self._text_buffer:
            return 0
        return self._text_buffer.count("\n") + 1

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _clamp_range(self, start: int, end: int) -> tuple[int, int]:
        length = len(self._text_buffer)
        start = max(0, min(start, length))
        end = max(0, min(end, length))
        if end < start:
            start, end = end, start
        return start, end

    def _push_undo_snapshot(self, entry: _UndoEntry) -> None:
        if self._group_depth:
            return
        self._undo_stack.append(entry)
        if len(self._undo_stack) > self.MAX_HISTORY:
            self._undo_stack.pop(0)
        self._redo_stack.clear()

    def _restore(self, entry: _UndoEntry) -> None:
        self._text_buffer = entry.text
        self._state.update_text(entry.text)
        self._sync_qt_text()
        self.set_cursor(entry.cursor)
        self._emit_text_changed()

    def _sync_qt_text(self) -> None:
        if self._qt_editor is None:
            return
        self._qt_editor.blockSignals(True)
        self._qt_editor.setPlainText(self._text_buffer)
        self._qt_editor.blockSignals(False)

    def _emit_text_changed(self) -> None:
        for listener in list(self._text_listeners):
            listener(self._text_buffer, self._state)

    def _emit_message(self, message: str, *, error: bool) -> None:
        for listener in list(self._message_listeners):
            listener(message, error=error)

    def _qt_visible_line_range(self) -> LineRange | None:
        editor = self._qt_editor
        if editor is None:
            return None
        try:
            block = editor.firstVisibleBlock()
            first = block.blockNumber() + 1
            last = first
            offset = editor.contentOffset()
            height = editor.viewport().height()
            while block.isValid():
                top = editor.blockBoundingGeometry(block).translated(offset).top()
                if top > height:
                    break
                last = block.blockNumber() + 1
                block = block.next()
        except Exception:  # pragma: no cover - requires a live Qt viewport
            LOGGER.debug("Unable to compute the Qt viewport", exc_info=True)
            return None
        return LineRange(first, last)

    # Qt callbacks -----------------------------------------------------
    def _handle_qt_text_changed(self) -> None:
        if self._qt_editor is None:
            return
        self._text_buffer = self._qt_editor.toPlainText()
        self._state.update_text(self._text_buffer)
        self._emit_text_changed()

    def _handle_qt_cursor_changed(self) -> None:
        if self._qt_editor is None:
            return
        self._cursor = self._qt_editor.textCursor().position()
        self._state.cursor = self._cursor


__all__ = ["EditorWidget", "MessageListener", "TextChangeListener"]
