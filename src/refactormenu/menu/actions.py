"""Action descriptors and menu candidates."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Callable, Optional

from .errors import InvalidActionError, PredicateEvaluationError

Command = Callable[[], Any]
Predicate = Callable[[], Any]


def _always() -> bool:
    return True


def normalize_modes(modes: str | Iterable[str] | None) -> frozenset[str]:
    """Coerce a single mode or an iterable of modes into a frozen set."""

    if modes is None:
        return frozenset()
    if isinstance(modes, str):
        candidates: Iterable[str] = (modes,)
    else:
        candidates = modes
    normalized: set[str] = set()
    for mode in candidates:
        if not isinstance(mode, str):
            raise InvalidActionError(f"Mode identifiers must be strings, got {type(mode).__name__}")
        cleaned = mode.strip()
        if cleaned:
            normalized.add(cleaned)
    return frozenset(normalized)


def command_name(command: Any) -> str:
    """Return a human-readable name for ``command``.

    Module-level functions are named ``"module.qualname"``. Lambdas, nested
    functions, callable instances and bound methods also carry the identity
    of the underlying object, so two distinct callables never share a name.
    """

    owner = getattr(command, "__self__", None)
    function = getattr(command, "__func__", None)
    if owner is not None and not isinstance(owner, (type, ModuleType)):
        base = command_name(function) if function is not None else _qualified_name(command)[0]
        return f"{base}@{id(owner):x}"

    name, anonymous = _qualified_name(command)
    if anonymous or "<lambda>" in name or "<locals>" in name:
        return f"{name}@{id(command):x}"
    return name


def _qualified_name(command: Any) -> tuple[str, bool]:
    name = getattr(command, "__qualname__", None) or getattr(command, "__name__", None)
    anonymous = not name
    if anonymous:
        name = type(command).__qualname__
        module = type(command).__module__
    else:
        module = getattr(command, "__module__", None)
    return (f"{module}.{name}" if module else str(name)), anonymous


@dataclass(slots=True, frozen=True)
class MenuContext:
    """State captured at the cursor when the menu is requested."""

    modes: frozenset[str]
    host: Any | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "modes", normalize_modes(self.modes))

    @classmethod
    def for_modes(cls, *modes: str, host: Any | None = None) -> "MenuContext":
        return cls(modes=frozenset(modes), host=host)

    @classmethod
    def from_host(cls, host: Any) -> "MenuContext":
        """Build a context from the host's active modes at the cursor."""

        return cls(modes=normalize_modes(host.cursor_modes()), host=host)


@dataclass(slots=True, frozen=True)
class MenuCandidate:
    """An action that passed mode and predicate filtering."""

    title: str
    command: Command
    description: Optional[str] = None
    action_id: str = ""

    @property
    def label(self) -> str:
        """Return the popup label, with the description hint when present."""

        if self.description:
            return f"{self.title} - {self.description}"
        return self.title


@dataclass(slots=True, frozen=True)
class RefactorAction:
    """Immutable declaration of a mode- and predicate-gated refactor.

    ``modes`` accepts a single mode string or any iterable of modes and is
    normalized to a ``frozenset``. ``action_id`` defaults to
    ``"<command name>:<title>"``.
    """

    command: Command
    modes: frozenset[str]
    title: str
    predicate: Predicate = _always
    description: Optional[str] = None
    action_id: str = field(default="")

    def __post_init__(self) -> None:
        if not callable(self.command):
            raise InvalidActionError("Refactor actions require a callable command")
        modes = normalize_modes(self.modes)
        if not modes:
            raise InvalidActionError("Refactor actions must declare at least one mode")
        title = self.title.strip() if isinstance(self.title, str) else ""
        if not title:
            raise InvalidActionError("Refactor actions must declare a non-blank title")
        predicate = self.predicate if self.predicate is not None else _always
        if not callable(predicate):
            raise InvalidActionError(f"Predicate for {title!r} is not callable")
        description = self.description.strip() if self.description else None
        object.__setattr__(self, "modes", modes)
        object.__setattr__(self, "title", title)
        object.__setattr__(self, "predicate", predicate)
        object.__setattr__(self, "description", description or None)
        if not self.action_id:
            object.__setattr__(self, "action_id", self.make_id(self.command, title))

    @staticmethod
    def make_id(command: Any, title: str) -> str:
        return f"{command_name(command)}:{title}"

    def applies_to(self, modes: Iterable[str]) -> bool:
        """Return ``True`` when any active mode is one of this action's modes."""

        return not self.modes.isdisjoint(modes)

    def candidate_for(self, context: MenuContext) -> Optional[MenuCandidate]:
        """Return a menu candidate when this action applies to ``context``.

        The predicate is only evaluated once the mode matches. Any error it
        raises is re-raised as :class:`PredicateEvaluationError`.
        """

        if not self.applies_to(context.modes):
            return None
        try:
            applicable = self.predicate()
        except Exception as exc:
            raise PredicateEvaluationError(self.action_id, exc) from exc
        if not applicable:
            return None
        return MenuCandidate(
            title=self.title,
            command=self.command,
            description=self.description,
            action_id=self.action_id,
        )

    def as_factory(self) -> Callable[[MenuContext], Optional[MenuCandidate]]:
        return self.candidate_for


__all__ = [
    "Command",
    "MenuCandidate",
    "MenuContext",
    "Predicate",
    "RefactorAction",
    "command_name",
    "normalize_modes",
]
