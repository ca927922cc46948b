"""
enes unit tests for the runtime config loader

File: tests/unit/config/test_enes_loader.py

Purpose
- Validate effective config precedence and override coercion.

What this test file should cover
- Precedence: CLI > env (ENES_) > file > defaults.
- A missing default enes.toml is fine; a missing explicit config path is an error.
- Env coercion for booleans and strings, including optional fields.
- log_file normalisation relative to the config file location.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from enes.config import (
    ConfigLoadError,
    ConfigValidationError,
    default_config,
    load_config,
)

pytestmark = pytest.mark.unit


def _write_config(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    config = load_config(environ={})

    assert config == default_config()


def test_missing_explicit_config_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})


def test_invalid_toml_is_reported(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "enes.toml", "[output\nverbose = true\n")

    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(path, environ={})


def test_precedence_cli_over_env_over_file(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path / "enes.toml",
        '[output]\nverbose = true\nformat = "yaml"\n\n[observability]\nlog_level = "INFO"\n',
    )
    environ = {"ENES_OUTPUT_FORMAT": "json", "ENES_OBSERVABILITY_LOG_LEVEL": "debug"}

    config = load_config(
        path,
        cli_overrides={"observability.log_level": "ERROR", "output.verbose": None},
        environ=environ,
    )

    assert config["output"]["verbose"] is True
    assert config["output"]["format"] == "json"
    assert config["observability"]["log_level"] == "ERROR"
    assert config["parsing"]["encoding"] == "utf-8"


def test_default_config_file_in_working_directory_is_picked_up(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_config(tmp_path / "enes.toml", '[parsing]\nencoding = "latin-1"\n')
    monkeypatch.chdir(tmp_path)

    assert load_config(environ={})["parsing"]["encoding"] == "latin-1"


@pytest.mark.parametrize(("raw", "expected"), [("yes", True), ("0", False), (" On ", True)])
def test_boolean_env_values_are_coerced(tmp_path: Path, raw: str, expected: bool) -> None:
    config = load_config(
        _write_config(tmp_path / "enes.toml", ""), environ={"ENES_OUTPUT_VERBOSE": raw}
    )

    assert config["output"]["verbose"] is expected


def test_invalid_boolean_env_value_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="ENES_OUTPUT_VERBOSE -> output.verbose"):
        load_config(
            _write_config(tmp_path / "enes.toml", ""), environ={"ENES_OUTPUT_VERBOSE": "maybe"}
        )


def test_invalid_integer_env_value_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="must be an integer"):
        load_config(
            _write_config(tmp_path / "enes.toml", ""),
            environ={"ENES_META_SCHEMA_VERSION": "one"},
        )


def test_unknown_file_field_fails_validation(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "enes.toml", "[output]\ncolour = true\n")

    with pytest.raises(ConfigValidationError, match="output.colour: unknown field"):
        load_config(path, environ={})


def test_log_file_from_env_is_resolved_against_config_directory(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "enes.toml", "")

    config = load_config(path, environ={"ENES_OBSERVABILITY_LOG_FILE": "logs/run.log"})

    assert config["observability"]["log_file"] == (
        tmp_path.resolve() / "logs" / "run.log"
    ).as_posix()
