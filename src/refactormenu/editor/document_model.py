"""Dataclasses representing editor buffer state."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_MODE = "fundamental"


@dataclass(slots=True)
class DocumentMetadata:
    """Editing modes of the buffer currently loaded in the editor.

    ``mode`` is the major editing mode; ``minor_modes`` are reported after it
    by :meth:`EditorWidget.cursor_modes`.
    """

    mode: str = DEFAULT_MODE
    minor_modes: tuple[str, ...] = ()


@dataclass(slots=True)
class DocumentState:
    """Text, cursor and modes of an editor buffer."""

    text: str = ""
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    cursor: int = 0
    dirty: bool = False

    @property
    def mode(self) -> str:
        return self.metadata.mode

    def update_text(self, new_text: str) -> None:
        """Update the buffer text and mark it dirty."""

        self.text = new_text
        self.dirty = True


__all__ = ["DEFAULT_MODE", "DocumentMetadata", "DocumentState"]
