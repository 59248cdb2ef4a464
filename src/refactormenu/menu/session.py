"""The user-facing "show refactor menu" command."""

from __future__ import annotations

import logging
from typing import Any

from .actions import MenuContext
from .builder import MenuBuilder
from .dispatcher import MenuDispatcher
from .errors import NoActionsAvailable, RefactorExecutionError
from .host import EditorHost, SelectionPresenter
from .language_packs import LanguagePacks
from .registry import ActionRegistry, get_action_registry
from .reporter import ChangeReport, ChangeReporter

LOGGER = logging.getLogger(__name__)


class RefactorMenu:
    """Binds a host editor, a presenter and a registry into one command."""

    def __init__(
        self,
        host: EditorHost,
        presenter: SelectionPresenter,
        *,
        registry: ActionRegistry | None = None,
        settings: Any | None = None,
        language_packs: LanguagePacks | None = None,
    ) -> None:
        self._host = host
        self._registry = registry if registry is not None else get_action_registry()
        self._settings = settings
        self._language_packs = language_packs or LanguagePacks()
        order = getattr(settings, "menu_order", "registration") if settings is not None else "registration"
        self._builder = MenuBuilder(self._registry, order=order)
        self._reporter = ChangeReporter(host, settings=settings)
        self._dispatcher = MenuDispatcher(self._builder, presenter, host, self._reporter)

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    @property
    def builder(self) -> MenuBuilder:
        return self._builder

    @property
    def reporter(self) -> ChangeReporter:
        return self._reporter

    @property
    def language_packs(self) -> LanguagePacks:
        return self._language_packs

    def context(self) -> MenuContext:
        """Capture the cursor context, activating pending language packs."""

        context = MenuContext.from_host(self._host)
        self._language_packs.ensure_active(context.modes, self._registry)
        return context

    def show(self) -> ChangeReport | None:
        """Show the refactor menu at the cursor and run the selection.

        An empty menu is reported through ``show_error`` without touching the
        buffer. A failing command is reported the same way and re-raised as
        :class:`RefactorExecutionError`. Errors raised outside the command
        (by the presenter or while reporting) propagate unchanged.
        """

        context = self.context()
        try:
            return self._dispatcher.run(context)
        except NoActionsAvailable as exc:
            self._host.show_error(str(exc))
            return None
        except Exception as exc:
            selection = self._dispatcher.last_selection
            if selection is None or not self._dispatcher.command_failed:
                raise
            LOGGER.warning("Refactor %r failed: %s", selection.title, exc, exc_info=True)
            error = RefactorExecutionError(selection.title, exc)
            self._host.show_error(str(error))
            raise error from exc


__all__ = ["RefactorMenu"]
