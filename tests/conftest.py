"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from refactormenu.editor.document_model import DocumentMetadata, DocumentState
from refactormenu.editor.editor_widget import EditorWidget
from refactormenu.menu.registry import ActionRegistry, get_action_registry, reset_action_registry


@pytest.fixture(autouse=True)
def _fresh_registry() -> Iterator[None]:
    """Every test starts and ends with an empty process-wide registry."""

    reset_action_registry()
    yield
    reset_action_registry()


@pytest.fixture
def registry() -> ActionRegistry:
    return get_action_registry()


@pytest.fixture
def editor() -> EditorWidget:
    widget = EditorWidget()
    widget.load_document(
        DocumentState(
            text="(defun alpha ()\n  (beta 1\n        2))\n",
            metadata=DocumentMetadata(mode="lisp-editing"),
        )
    )
    return widget
