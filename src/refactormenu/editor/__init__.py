"""Editor package containing the buffer model, host widget and insertion helpers."""

from . import document_model, editor_widget, insertion

__all__ = ["document_model", "editor_widget", "insertion"]
