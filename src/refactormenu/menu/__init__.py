"""Refactor menu: action registry, menu building, dispatch and change reports."""

from .actions import MenuCandidate, MenuContext, RefactorAction
from .builder import MenuBuilder
from .dispatcher import MenuDispatcher, atomic_edit_group
from .errors import (
    InvalidActionError,
    LanguagePackError,
    NoActionsAvailable,
    PredicateEvaluationError,
    RefactorExecutionError,
    RefactorMenuError,
)
from .language_packs import LanguagePacks
from .registry import (
    ActionRegistry,
    get_action_registry,
    init_action_registry,
    register_action,
    reset_action_registry,
)
from .reporter import ChangeReport, ChangeReporter
from .session import RefactorMenu

__all__ = [
    "ActionRegistry",
    "ChangeReport",
    "ChangeReporter",
    "InvalidActionError",
    "LanguagePackError",
    "LanguagePacks",
    "MenuBuilder",
    "MenuCandidate",
    "MenuContext",
    "MenuDispatcher",
    "NoActionsAvailable",
    "PredicateEvaluationError",
    "RefactorAction",
    "RefactorExecutionError",
    "RefactorMenu",
    "RefactorMenuError",
    "atomic_edit_group",
    "get_action_registry",
    "init_action_registry",
    "register_action",
    "reset_action_registry",
]
