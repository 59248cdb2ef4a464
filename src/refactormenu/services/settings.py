"""Settings dataclasses and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..core.text_diff import DIFF_STRATEGIES, POSITIONAL
from ..menu.builder import MENU_ORDERS

__all__ = [
    "Settings",
    "SettingsStore",
    "default_settings_path",
]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".refactormenu"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_PATH_ENV = "REFACTORMENU_SETTINGS_PATH"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "REFACTORMENU_MENU_ORDER": "menu_order",
    "REFACTORMENU_DIFF_STRATEGY": "diff_strategy",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "REFACTORMENU_REPORT_CHANGES": "report_changes",
    "REFACTORMENU_DEBUG_LOGGING": "debug_logging",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "REFACTORMENU_MESSAGE_WIDTH": "message_width",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_CHOICES: Mapping[str, tuple[str, ...]] = {
    "menu_order": MENU_ORDERS,
    "diff_strategy": DIFF_STRATEGIES,
}


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between sessions."""

    report_changes: bool = True
    message_width: int | None = None
    menu_order: str = "registration"
    diff_strategy: str = POSITIONAL
    debug_logging: bool = False
    language_packs: dict[str, str] = field(default_factory=dict)


def default_settings_path() -> Path:
    override = os.environ.get(_SETTINGS_PATH_ENV)
    return Path(override).expanduser() if override else _DEFAULT_SETTINGS_PATH


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_settings_path()

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, applying runtime/environment overrides when present."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            data = _filter_fields(payload)
            packs = data.get("language_packs")
            if packs is not None and not isinstance(packs, Mapping):
                LOGGER.warning("Ignoring non-mapping language_packs payload of type %s", type(packs))
                data.pop("language_packs")
            try:
                settings = Settings(**data)
            except TypeError as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="runtime")

        settings = self._apply_env_overrides(settings)
        return _validate_choices(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        payload = asdict(settings)
        payload["version"] = _SETTINGS_VERSION
        body = json.dumps(payload, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            payload = json.loads(text)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain a JSON object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {field.name for field in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        packs_override = filtered.get("language_packs")
        if isinstance(packs_override, Mapping):
            merged = dict(settings.language_packs or {})
            merged.update(packs_override)
            filtered["language_packs"] = merged
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip()
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _INT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value, 10)
            except ValueError:
                LOGGER.warning(
                    "Environment override %s=%s is not a valid integer",
                    env_name,
                    value,
                )
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {field.name for field in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}


def _validate_choices(settings: Settings) -> Settings:
    defaults = Settings()
    updates: Dict[str, Any] = {}
    for name, choices in _CHOICES.items():
        value = getattr(settings, name)
        normalized = str(value).strip().lower() if value is not None else ""
        if normalized in choices:
            if normalized != value:
                updates[name] = normalized
            continue
        fallback = getattr(defaults, name)
        LOGGER.warning("Unknown %s %r; falling back to %r", name, value, fallback)
        updates[name] = fallback
    width = settings.message_width
    if width is not None and (not isinstance(width, int) or width < 1):
        LOGGER.warning("Ignoring invalid message_width %r", width)
        updates["message_width"] = None
    return replace(settings, **updates) if updates else settings
