"""Bootstrap helpers and the ``refactormenu`` console script."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO, get_args, get_origin, get_type_hints

from .menu.host import EditorHost, SelectionPresenter
from .menu.language_packs import LanguagePacks
from .menu.registry import ActionRegistry, init_action_registry
from .menu.session import RefactorMenu
from .services.settings import Settings, SettingsStore
from .utils import logging as logging_utils

_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}
_LOGGER = logging.getLogger(__name__)


def configure_logging(
    debug: bool = False,
    *,
    settings: Settings | None = None,
    log_file: bool = False,
) -> Path | None:
    """Configure the package logger for the console script.

    The level is DEBUG when ``debug`` is set or ``settings.debug_logging`` is
    enabled. Returns the log file path when ``log_file`` is requested.
    """

    level = logging_utils.level_for(settings, debug=debug)
    log_path = logging_utils.setup_logging(level, log_file=log_file)
    _LOGGER.debug("Logging configured (level=%s, file=%s)", logging.getLevelName(level), log_path)
    return log_path


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        settings = active_store.load(overrides=overrides)
    except Exception as exc:  # pragma: no cover - unreadable settings store
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        settings = Settings()
    return settings


def initialize(
    host: EditorHost,
    presenter: SelectionPresenter,
    *,
    settings: Settings | None = None,
    registry: ActionRegistry | None = None,
    language_packs: LanguagePacks | None = None,
) -> RefactorMenu:
    """Create the refactor menu command for ``host``.

    Language packs named in ``settings.language_packs`` are registered for
    lazy activation: each loads on the first menu request in its mode.
    """

    active_settings = settings or Settings()
    active_registry = registry if registry is not None else init_action_registry()
    packs = language_packs or LanguagePacks()
    for mode, reference in (active_settings.language_packs or {}).items():
        packs.register(mode, reference)
    _LOGGER.debug(
        "Refactor menu initialized (packs=%s, report_changes=%s)",
        packs.modes,
        active_settings.report_changes,
    )
    return RefactorMenu(
        host,
        presenter,
        registry=active_registry,
        settings=active_settings,
        language_packs=packs,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point invoked by the `refactormenu` console script."""

    args = _parse_cli_args(argv)

    debug = _env_flag("REFACTORMENU_DEBUG", default=False)
    configure_logging(debug, log_file=args.log_file)

    resolved_path = Path(args.settings_path).expanduser() if args.settings_path else None
    settings_store = SettingsStore(resolved_path)
    try:
        cli_overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    settings = load_settings(resolved_path, store=settings_store, overrides=cli_overrides or None)

    if settings.debug_logging and not debug:
        configure_logging(settings=settings, log_file=args.log_file)

    if args.dump_settings:
        _dump_settings(settings, settings_store, overrides=cli_overrides)
        return

    _list_actions(settings)


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _parse_cli_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="refactormenu",
        add_help=True,
        description="Inspect the refactor menu configuration and the actions its language packs register.",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.refactormenu/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings (repeatable).",
    )
    parser.add_argument(
        "--log-file",
        action="store_true",
        help="Also write a rotating log under ~/.refactormenu/logs (or REFACTORMENU_LOG_DIR).",
    )
    return parser.parse_args(argv)


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if not items:
        return overrides

    fields = Settings.__dataclass_fields__  # type: ignore[attr-defined]
    type_hints = get_type_hints(Settings)
    for entry in items:
        if "=" not in entry:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        key, raw_value = entry.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Override is missing a field name.")
        if key not in fields:
            raise ValueError(f"Unknown setting '{key}'.")
        annotation = type_hints.get(key, fields[key].type)
        overrides[key] = _coerce_value(annotation, raw_value.strip())
    return overrides


def _coerce_value(annotation: Any, raw_value: str) -> Any:
    target = _resolve_annotation(annotation)
    normalized = raw_value.strip()

    if normalized.lower() in {"none", "null"} and target is not str:
        return None
    if target is str:
        return normalized
    if target is bool:
        return _parse_bool(normalized)
    if target is int:
        return int(normalized, 10)
    if target is dict:
        try:
            payload = json.loads(normalized or "{}")
        except json.JSONDecodeError as exc:
            raise ValueError("Dict overrides must be valid JSON objects") from exc
        if not isinstance(payload, dict):
            raise ValueError("Dict overrides must be valid JSON objects")
        return payload
    return normalized


def _resolve_annotation(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is None:
        return annotation
    if origin is dict:
        return origin
    args = [arg for arg in get_args(annotation) if arg is not type(None)]
    if not args:
        return origin
    return _resolve_annotation(args[0])


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot coerce '{value}' to a boolean.")


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    destination = stream or sys.stdout
    metadata = {
        "path": str(store.path),
        "cli_overrides": sorted(overrides.keys()),
        "environment_variables": _active_env_overrides(),
    }
    output = {"settings": asdict(settings), "meta": metadata}
    json.dump(output, destination, indent=2)
    destination.write("\n")


def _list_actions(settings: Settings, *, stream: TextIO | None = None) -> None:
    """Activate every configured language pack and print its actions."""

    destination = stream or sys.stdout
    registry = ActionRegistry()
    packs = LanguagePacks(settings.language_packs)
    packs.ensure_active(packs.modes, registry)
    for failure in packs.failures:
        destination.write(f"! {failure.mode}: {failure.error}\n")
    if not len(registry):
        destination.write("No refactor actions registered.\n")
        return
    for action in registry.actions():
        modes = ", ".join(sorted(action.modes))
        line = f"{action.title} [{modes}]"
        if action.description:
            line = f"{line} - {action.description}"
        destination.write(line + "\n")


def _active_env_overrides() -> list[str]:
    return sorted(name for name in os.environ if name.startswith("REFACTORMENU_"))


__all__ = ["configure_logging", "initialize", "load_settings", "main"]
