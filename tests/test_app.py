"""Tests covering the application bootstrap helpers."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

import pytest

from refactormenu import app
from refactormenu.editor.editor_widget import EditorWidget
from refactormenu.menu.registry import ActionRegistry
from refactormenu.services.settings import Settings, SettingsStore

from tests.helpers import RecordingPresenter


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []

    def record(debug: bool = False, *, settings: Settings | None = None, log_file: bool = False) -> None:
        calls.append({"debug": debug, "settings": settings, "log_file": log_file})

    monkeypatch.setattr(app, "configure_logging", record)
    monkeypatch.delenv("REFACTORMENU_DEBUG", raising=False)
    monkeypatch.delenv("REFACTORMENU_DEBUG_LOGGING", raising=False)
    for name in ("REFACTORMENU_MENU_ORDER", "REFACTORMENU_REPORT_CHANGES", "REFACTORMENU_MESSAGE_WIDTH"):
        monkeypatch.delenv(name, raising=False)
    return calls


def test_coerce_cli_overrides_uses_field_types() -> None:
    overrides = app._coerce_cli_overrides(
        [
            "report_changes=no",
            "message_width=64",
            "menu_order=title",
            'language_packs={"lisp-editing": "lisp_refactors:register"}',
        ]
    )

    assert overrides == {
        "report_changes": False,
        "message_width": 64,
        "menu_order": "title",
        "language_packs": {"lisp-editing": "lisp_refactors:register"},
    }


def test_coerce_cli_overrides_accepts_none_for_optional_fields() -> None:
    assert app._coerce_cli_overrides(["message_width=none"]) == {"message_width": None}


@pytest.mark.parametrize(
    "entry",
    [
        "report_changes",
        "=1",
        "theme=dark",
        "report_changes=maybe",
        "message_width=wide",
        "language_packs=[1, 2]",
        "language_packs={broken",
    ],
)
def test_coerce_cli_overrides_rejects_invalid_entries(entry: str) -> None:
    with pytest.raises(ValueError):
        app._coerce_cli_overrides([entry])


def test_load_settings_applies_overrides(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings(menu_order="title"))

    settings = app.load_settings(path, overrides={"report_changes": False})

    assert settings.menu_order == "title"
    assert settings.report_changes is False


def test_dump_settings_includes_metadata(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    buffer = io.StringIO()

    app._dump_settings(Settings(message_width=50), store, overrides={"message_width": 50}, stream=buffer)

    payload = json.loads(buffer.getvalue())
    assert payload["settings"]["message_width"] == 50
    assert payload["meta"]["path"] == str(store.path)
    assert payload["meta"]["cli_overrides"] == ["message_width"]


def test_list_actions_prints_pack_actions_and_failures() -> None:
    buffer = io.StringIO()
    settings = Settings(
        language_packs={
            "lisp-editing": "tests.sample_pack:register",
            "c-editing": "tests.missing_pack:register",
        }
    )

    app._list_actions(settings, stream=buffer)

    lines = buffer.getvalue().splitlines()
    assert lines[0].startswith("! c-editing:")
    assert lines[1] == "Extract function [lisp-editing] - Move the form at point into a new defun"
    assert lines[2] == "Inline variable [lisp-editing, scheme-editing]"


def test_list_actions_without_packs() -> None:
    buffer = io.StringIO()

    app._list_actions(Settings(), stream=buffer)

    assert buffer.getvalue() == "No refactor actions registered.\n"


def test_main_dumps_settings(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "settings.json"

    app.main(["--dump-settings", "--settings-path", str(path), "--set", "menu_order=title"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["settings"]["menu_order"] == "title"
    assert payload["meta"]["cli_overrides"] == ["menu_order"]


def test_main_rejects_bad_overrides(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        app.main(["--settings-path", str(tmp_path / "settings.json"), "--set", "bogus"])

    assert excinfo.value.code == 2
    assert "Invalid --set override" in capsys.readouterr().err


def test_main_lists_actions(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings(language_packs={"lisp-editing": "tests.sample_pack:register"}))

    app.main(["--settings-path", str(path)])

    output = capsys.readouterr().out
    assert "Extract function [lisp-editing]" in output


def test_initialize_uses_explicit_registry() -> None:
    registry = ActionRegistry()
    editor = EditorWidget()

    menu = app.initialize(editor, RecordingPresenter(), registry=registry)

    assert menu.registry is registry
    assert menu.builder.order == "registration"


def test_main_raises_log_level_from_settings(tmp_path: Path, logging_calls: list[dict[str, Any]]) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings(debug_logging=True))

    app.main(["--settings-path", str(path), "--log-file", "--dump-settings"])

    assert [call["debug"] for call in logging_calls] == [False, False]
    assert logging_calls[-1]["settings"].debug_logging is True
    assert all(call["log_file"] for call in logging_calls)


def test_main_configures_logging_once_without_debug_settings(
    tmp_path: Path, logging_calls: list[dict[str, Any]]
) -> None:
    app.main(["--settings-path", str(tmp_path / "settings.json"), "--dump-settings"])

    assert logging_calls == [{"debug": False, "settings": None, "log_file": False}]
