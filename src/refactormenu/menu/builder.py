"""Build the filtered list of refactorings applicable at the cursor."""

from __future__ import annotations

import logging

from .actions import MenuCandidate, MenuContext
from .errors import NoActionsAvailable, PredicateEvaluationError
from .registry import ActionRegistry, get_action_registry

LOGGER = logging.getLogger(__name__)

MENU_ORDERS: tuple[str, ...] = ("registration", "title")


class MenuBuilder:
    """Evaluates every registered factory against the current context."""

    def __init__(self, registry: ActionRegistry | None = None, *, order: str = "registration") -> None:
        self._registry = registry if registry is not None else get_action_registry()
        if order not in MENU_ORDERS:
            raise ValueError(f"Unknown menu order: {order!r}")
        self._order = order

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    @property
    def order(self) -> str:
        return self._order

    def build(self, context: MenuContext) -> list[MenuCandidate]:
        """Return the candidates applicable to ``context``, possibly empty.

        A factory that raises is treated as "not applicable" and skipped;
        the remaining factories are still evaluated.
        """

        candidates: list[MenuCandidate] = []
        for factory in self._registry.all_factories():
            try:
                candidate = factory(context)
            except PredicateEvaluationError as exc:
                LOGGER.debug("Skipping refactor action: %s", exc, exc_info=True)
                continue
            except Exception:
                LOGGER.debug("Refactor action factory %r failed; skipping", factory, exc_info=True)
                continue
            if candidate is not None:
                candidates.append(candidate)
        if self._order == "title":
            candidates.sort(key=lambda candidate: candidate.title.casefold())
        return candidates

    def require(self, context: MenuContext) -> list[MenuCandidate]:
        """Like :meth:`build`, raising :class:`NoActionsAvailable` when empty."""

        candidates = self.build(context)
        if not candidates:
            LOGGER.info("No refactorings available for modes %s", sorted(context.modes))
            raise NoActionsAvailable()
        return candidates


__all__ = ["MENU_ORDERS", "MenuBuilder"]
