"""Present the refactor menu and run the selected command."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from .actions import MenuCandidate, MenuContext
from .builder import MenuBuilder
from .host import EditorHost, SelectionPresenter
from .reporter import ChangeReport, ChangeReporter

LOGGER = logging.getLogger(__name__)


@contextmanager
def atomic_edit_group(host: EditorHost) -> Iterator[None]:
    """Group every edit made inside the block into one undo step.

    Edits already applied when the block raises stay in the buffer.
    """

    host.begin_atomic_edit_group()
    try:
        yield
    finally:
        host.end_atomic_edit_group()


class MenuDispatcher:
    """Runs one round of build -> present -> invoke -> report."""

    def __init__(
        self,
        builder: MenuBuilder,
        presenter: SelectionPresenter,
        host: EditorHost,
        reporter: ChangeReporter | None = None,
    ) -> None:
        self._builder = builder
        self._presenter = presenter
        self._host = host
        self._reporter = reporter or ChangeReporter(host)
        self._last_selection: MenuCandidate | None = None
        self._command_failed = False

    @property
    def reporter(self) -> ChangeReporter:
        return self._reporter

    @property
    def last_selection(self) -> MenuCandidate | None:
        """Return the candidate chosen during the latest :meth:`run`."""

        return self._last_selection

    @property
    def command_failed(self) -> bool:
        """Return ``True`` when the latest executed command itself raised."""

        return self._command_failed

    def run(self, context: MenuContext) -> ChangeReport | None:
        """Show the menu for ``context`` and execute the chosen command.

        Returns the change report when one was produced. A cancelled
        selection performs no edit and returns ``None``.

        Raises:
            NoActionsAvailable: When nothing applies at the cursor.
        """

        self._last_selection = None
        self._command_failed = False
        candidates = self._builder.require(context)
        selection = self._presenter(candidates)
        if selection is None:
            LOGGER.debug("Refactor menu cancelled")
            return None
        self._last_selection = selection
        return self.execute(selection)

    def execute(self, candidate: MenuCandidate) -> ChangeReport | None:
        self._command_failed = False
        LOGGER.debug("Running refactor %s", candidate.action_id or candidate.title)
        with self._reporter.scope(candidate.title):
            with atomic_edit_group(self._host):
                try:
                    self._host.invoke(candidate.command)
                except Exception:
                    self._command_failed = True
                    raise
        return self._reporter.last_report


__all__ = ["MenuDispatcher", "atomic_edit_group"]
