"""Lazy activation of per-language refactor extensions."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union

from .errors import LanguagePackError
from .registry import ActionRegistry

LOGGER = logging.getLogger(__name__)

Loader = Callable[[ActionRegistry], Any]
LoaderRef = Union[Loader, str]


@dataclass(slots=True)
class LanguagePackFailure:
    """Represents a language pack that failed to activate."""

    mode: str
    error: Exception


def resolve_loader(reference: LoaderRef) -> Loader:
    """Resolve ``"package.module:function"`` (or a callable) to a loader."""

    if callable(reference):
        return reference
    if not isinstance(reference, str) or ":" not in reference:
        raise LanguagePackError(
            f"Language pack reference {reference!r} must be a callable or 'module:function'"
        )
    module_name, _, attribute = reference.partition(":")
    try:
        module = importlib.import_module(module_name.strip())
    except ImportError as exc:
        raise LanguagePackError(f"Cannot import language pack module {module_name!r}") from exc
    loader = getattr(module, attribute.strip(), None)
    if not callable(loader):
        raise LanguagePackError(f"{reference!r} does not name a callable loader")
    return loader


class LanguagePacks:
    """Activates the loader registered for a mode on first use of that mode.

    Each mode activates at most once, whether or not its loader succeeded.
    Failures are logged and kept in :attr:`failures`; they never prevent the
    menu from being built for other actions.
    """

    def __init__(self, loaders: Mapping[str, LoaderRef] | None = None) -> None:
        self._loaders: dict[str, LoaderRef] = {}
        self._active: set[str] = set()
        self._failures: list[LanguagePackFailure] = []
        for mode, loader in (loaders or {}).items():
            self.register(mode, loader)

    def register(self, mode: str, loader: LoaderRef) -> None:
        cleaned = (mode or "").strip()
        if not cleaned:
            raise LanguagePackError("Language packs must name a mode")
        if not callable(loader) and not isinstance(loader, str):
            raise LanguagePackError(f"Loader for {cleaned!r} must be a callable or 'module:function'")
        self._loaders[cleaned] = loader
        self._active.discard(cleaned)

    def is_active(self, mode: str) -> bool:
        return mode in self._active

    @property
    def modes(self) -> list[str]:
        return list(self._loaders)

    @property
    def failures(self) -> list[LanguagePackFailure]:
        return list(self._failures)

    def ensure_active(self, modes: Iterable[str], registry: ActionRegistry) -> list[str]:
        """Run the pending loaders for ``modes``; return the modes activated now."""

        activated: list[str] = []
        for mode in modes:
            if mode in self._active or mode not in self._loaders:
                continue
            self._active.add(mode)
            try:
                loader = resolve_loader(self._loaders[mode])
                loader(registry)
            except Exception as exc:
                self._failures.append(LanguagePackFailure(mode=mode, error=exc))
                LOGGER.warning("Failed to activate language pack for %s: %s", mode, exc, exc_info=True)
                continue
            activated.append(mode)
            LOGGER.debug("Activated language pack for %s", mode)
        return activated


__all__ = ["LanguagePackFailure", "LanguagePacks", "Loader", "resolve_loader"]
