"""Presentation helpers for the refactor menu."""

from .refactor_popup import CallbackPresenter, QtPopupPresenter

__all__ = ["CallbackPresenter", "QtPopupPresenter"]
