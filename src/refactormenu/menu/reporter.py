"""Announce off-screen buffer changes made by a refactor command.

A reporting scope snapshots the host's full text before and after the
wrapped command runs. When the first changed line lies outside the visible
window, a one-line summary is echoed through the host so the user learns
what happened without scrolling. Errors raised by the command propagate
unchanged and skip reporting entirely.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

from ..core.ranges import LineRange
from ..core.text_diff import DiffResult, resolve_strategy
from ..core.text_format import collapse_whitespace, ellipsize, is_blank
from .host import EditorHost

LOGGER = logging.getLogger(__name__)

DELETED_LINE_PLACEHOLDER = "nil"


@dataclass(slots=True, frozen=True)
class ChangeReport:
    """Outcome of a reporting scope that detected a change."""

    description: str
    diff: DiffResult
    visible: bool
    message: Optional[str] = None


def format_change_message(description: str, diff: DiffResult, max_width: int) -> str:
    """Return ``"<description> line <n>: <text>"`` fitted to ``max_width``."""

    after = diff.after_text
    text = DELETED_LINE_PLACEHOLDER if is_blank(after) else collapse_whitespace(after)
    return ellipsize(f"{description} line {diff.line_number}: {text}", max_width)


class ChangeReporter:
    """Wraps refactor commands in before/after snapshot comparison."""

    def __init__(self, host: EditorHost, *, settings: Any | None = None) -> None:
        self._host = host
        self._settings = settings
        self._last_report: ChangeReport | None = None

    @property
    def enabled(self) -> bool:
        if self._settings is None:
            return True
        return bool(getattr(self._settings, "report_changes", True))

    @property
    def last_report(self) -> ChangeReport | None:
        return self._last_report

    @contextmanager
    def scope(self, description: str) -> Iterator[None]:
        """Report the change made by the body of the ``with`` block."""

        self._last_report = None
        before = self._host.current_full_text()
        yield
        after = self._host.current_full_text()
        self._last_report = self.compare(description, before, after)

    def run(self, description: str, body: Callable[[], Any]) -> ChangeReport | None:
        """Execute ``body`` inside :meth:`scope` and return the report."""

        with self.scope(description):
            body()
        return self._last_report

    def compare(self, description: str, before: str, after: str) -> ChangeReport | None:
        if not self.enabled:
            return None
        diff = self._diff(before, after)
        if diff is None:
            return None
        window = LineRange.from_value(self._host.visible_line_range())
        if diff.line_number in window:
            LOGGER.debug(
                "Change at line %s is visible (%s-%s); not reporting",
                diff.line_number,
                window.first_line,
                window.last_line,
            )
            return ChangeReport(description=description, diff=diff, visible=True)
        message = format_change_message(description, diff, self._max_width())
        self._host.show_message(message)
        LOGGER.debug("Reported off-screen change: %s", message)
        return ChangeReport(description=description, diff=diff, visible=False, message=message)

    def _diff(self, before: str, after: str) -> DiffResult | None:
        strategy = getattr(self._settings, "diff_strategy", None) if self._settings is not None else None
        return resolve_strategy(strategy)(before, after)

    def _max_width(self) -> int:
        override = getattr(self._settings, "message_width", None) if self._settings is not None else None
        if override:
            return int(override)
        return int(self._host.message_width())


__all__ = [
    "ChangeReport",
    "ChangeReporter",
    "DELETED_LINE_PLACEHOLDER",
    "format_change_message",
]
