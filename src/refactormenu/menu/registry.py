"""Process-wide registry of refactor actions."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Callable, Iterator, Optional

from .actions import Command, MenuCandidate, MenuContext, Predicate, RefactorAction
from .errors import InvalidActionError

LOGGER = logging.getLogger(__name__)

Factory = Callable[[MenuContext], Optional[MenuCandidate]]


class ActionRegistry:
    """Mapping from action id to a candidate-producing factory.

    Iteration follows registration order. Re-registering an existing id
    replaces its factory in place, keeping the original position.

    Example:
        registry = ActionRegistry()
        registry.register(RefactorAction(extract, modes="lisp-editing", title="Extract function"))
        factories = registry.all_factories()
    """

    def __init__(self) -> None:
        self._factories: dict[str, Factory] = {}
        self._actions: dict[str, RefactorAction] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, action: RefactorAction) -> RefactorAction:
        """Register ``action``, overwriting any entry with the same id."""

        if not isinstance(action, RefactorAction):
            raise InvalidActionError(
                f"Expected a RefactorAction, got {type(action).__name__}"
            )
        replaced = action.action_id in self._factories
        self._actions[action.action_id] = action
        self._factories[action.action_id] = action.as_factory()
        LOGGER.debug(
            "%s refactor action: %s (modes=%s)",
            "Replaced" if replaced else "Registered",
            action.action_id,
            sorted(action.modes),
        )
        return action

    def unregister(self, action_id: str) -> bool:
        """Remove an action. Returns ``False`` when the id is unknown."""

        self._actions.pop(action_id, None)
        if self._factories.pop(action_id, None) is None:
            return False
        LOGGER.debug("Unregistered refactor action: %s", action_id)
        return True

    def reset(self) -> None:
        """Clear all registered actions."""

        self._factories.clear()
        self._actions.clear()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def all_factories(self) -> list[Factory]:
        return list(self._factories.values())

    def actions(self) -> list[RefactorAction]:
        return list(self._actions.values())

    def get(self, action_id: str) -> RefactorAction | None:
        return self._actions.get(action_id)

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._factories))


# -----------------------------------------------------------------------------
# Global Registry
# -----------------------------------------------------------------------------

_GLOBAL_REGISTRY: ActionRegistry | None = None


def init_action_registry() -> ActionRegistry:
    """Create the process-wide registry if needed and return it."""
    global _GLOBAL_REGISTRY
    if _GLOBAL_REGISTRY is None:
        _GLOBAL_REGISTRY = ActionRegistry()
        LOGGER.debug("Initialized refactor action registry")
    return _GLOBAL_REGISTRY


def get_action_registry() -> ActionRegistry:
    """Get the process-wide registry."""
    return init_action_registry()


def reset_action_registry() -> None:
    """Tear down the process-wide registry (for testing)."""
    global _GLOBAL_REGISTRY
    if _GLOBAL_REGISTRY is not None:
        _GLOBAL_REGISTRY.reset()
    _GLOBAL_REGISTRY = None


def register_action(
    command: Command,
    modes: str | Iterable[str],
    title: str,
    predicate: Predicate | None = None,
    description: str | None = None,
    *,
    registry: ActionRegistry | None = None,
) -> RefactorAction:
    """Declare a refactor action and add it to ``registry``.

    Args:
        command: Callable performing the refactor.
        modes: A single mode or an iterable of modes the action applies to.
        title: Short label shown in the menu.
        predicate: Zero-argument callable; the action is offered only when
            it returns a truthy value. Defaults to always applicable.
        description: Optional longer hint shown next to the title.
        registry: Target registry (default: the process-wide registry).

    Raises:
        InvalidActionError: When ``modes`` or ``title`` is missing.
    """
    action = RefactorAction(
        command=command,
        modes=modes,  # type: ignore[arg-type]
        title=title,
        predicate=predicate,  # type: ignore[arg-type]
        description=description,
    )
    target = registry if registry is not None else get_action_registry()
    return target.register(action)


__all__ = [
    "ActionRegistry",
    "Factory",
    "get_action_registry",
    "init_action_registry",
    "register_action",
    "reset_action_registry",
]
