"""Tests for inserting declarations above the enclosing top-level form."""

from __future__ import annotations

from refactormenu.editor.document_model import DocumentMetadata, DocumentState
from refactormenu.editor.editor_widget import EditorWidget
from refactormenu.editor.insertion import (
    comment_prefixes_for,
    insert_above,
    is_toplevel_line,
    toplevel_start_line,
)


def _editor(text: str, mode: str = "lisp-editing") -> EditorWidget:
    widget = EditorWidget()
    widget.load_document(DocumentState(text=text, metadata=DocumentMetadata(mode=mode)))
    return widget


def test_inserts_above_the_first_form(editor: EditorWidget) -> None:
    editor.set_cursor(editor.current_full_text().index("2))"))

    end = insert_above(editor, "(defun gamma ())")

    assert editor.current_full_text() == "(defun gamma ())\n\n(defun alpha ()\n  (beta 1\n        2))\n"
    assert end == len("(defun gamma ())")
    assert editor.cursor_position == end


def test_inserts_above_a_later_form_with_blank_separator() -> None:
    widget = _editor("(defun a ())\n(defun b ()\n  (c))\n")
    widget.set_cursor(widget.current_full_text().index("(c)"))

    insert_above(widget, "\n(defvar x 1)\n")

    assert widget.current_full_text() == "(defun a ())\n\n(defvar x 1)\n\n(defun b ()\n  (c))\n"


def test_comment_block_stays_attached_to_its_form() -> None:
    widget = _editor("(defun a ())\n\n;; Doc for b\n;; more\n(defun b ()\n  (c))\n")
    widget.set_cursor(widget.current_full_text().index("(c)"))

    insert_above(widget, "(defvar x 1)")

    assert widget.current_full_text() == (
        "(defun a ())\n\n(defvar x 1)\n\n;; Doc for b\n;; more\n(defun b ()\n  (c))\n"
    )


def test_single_atomic_step_when_grouped(editor: EditorWidget) -> None:
    original = editor.current_full_text()

    editor.begin_atomic_edit_group()
    insert_above(editor, "(defun gamma ())")
    editor.end_atomic_edit_group()
    editor.undo()

    assert editor.current_full_text() == original


def test_toplevel_detection_uses_mode_comment_prefixes() -> None:
    lisp = comment_prefixes_for("lisp-editing")
    c = comment_prefixes_for("c-editing")

    assert is_toplevel_line("(defun a ())", lisp)
    assert not is_toplevel_line("  (a)", lisp)
    assert not is_toplevel_line(")", lisp)
    assert not is_toplevel_line(";; note", lisp)
    assert not is_toplevel_line("// note", c)
    assert comment_prefixes_for("unknown") == (";", "#", "//")


def test_toplevel_start_defaults_to_the_first_line() -> None:
    lines = ["  indented", "  still indented"]

    assert toplevel_start_line(lines, 1, (";",)) == 0


def test_runs_of_blank_lines_in_the_body_are_collapsed(editor: EditorWidget) -> None:
    insert_above(editor, "(defvar x 1)\n\n\n\n(defvar y 2)")

    assert editor.current_full_text().startswith("(defvar x 1)\n\n(defvar y 2)\n\n(defun alpha ()")
