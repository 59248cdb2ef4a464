"""Exception hierarchy for the refactor menu."""

from __future__ import annotations

NO_ACTIONS_MESSAGE = "No refactorings available"


class RefactorMenuError(RuntimeError):
    """Base class for all refactor menu errors."""


class InvalidActionError(RefactorMenuError, ValueError):
    """Raised when an action declaration is malformed."""


class PredicateEvaluationError(RefactorMenuError):
    """Raised when an action predicate fails; treated as "not applicable"."""

    def __init__(self, action_id: str, error: BaseException) -> None:
        super().__init__(f"Predicate for {action_id!r} raised {type(error).__name__}: {error}")
        self.action_id = action_id
        self.error = error


class NoActionsAvailable(RefactorMenuError):
    """Raised when no registered action applies at the cursor."""

    def __init__(self, message: str = NO_ACTIONS_MESSAGE) -> None:
        super().__init__(message)


class RefactorExecutionError(RefactorMenuError):
    """Raised by the menu command when the selected refactor itself failed."""

    def __init__(self, title: str, error: BaseException) -> None:
        super().__init__(f"{title} failed: {error}")
        self.title = title
        self.error = error


class LanguagePackError(RefactorMenuError):
    """Raised when a language pack loader reference cannot be resolved."""


__all__ = [
    "InvalidActionError",
    "LanguagePackError",
    "NO_ACTIONS_MESSAGE",
    "NoActionsAvailable",
    "PredicateEvaluationError",
    "RefactorExecutionError",
    "RefactorMenuError",
]
