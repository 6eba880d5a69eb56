# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the YAML driver settings."""

from pathlib import Path

import pytest

from csdriver.host.settings import (
    RUNTIME_DIRECTORY,
    SETTINGS_ENV_VAR,
    DriverSettings,
    SettingsError,
    load_settings,
    settings_from_environment,
)

# ###############
# Public Interface
# ###############


def test_defaults() -> None:
    settings = DriverSettings()
    assert settings.default_references == ["System", "System.Xml"]
    assert settings.linq_references == ["System.Core"]
    assert settings.stdlib_name == "mscorlib"
    assert Path(settings.system_directory) == RUNTIME_DIRECTORY


def test_bundled_runtime_contains_stdlib() -> None:
    assert (RUNTIME_DIRECTORY / "mscorlib.dll").is_file()


class TestLoadSettings:
    def test_load_overrides(self, tmp_path) -> None:
        path = tmp_path / "csdriver.yaml"
        path.write_text(
            "default-references: [System]\nstdlib-name: corlib\nsystem-directory: /opt/runtime\n",
            encoding="utf-8",
        )

        settings = load_settings(path)

        assert settings.default_references == ["System"]
        assert settings.stdlib_name == "corlib"
        assert settings.system_directory == "/opt/runtime"

    def test_relative_system_directory_is_anchored_at_file(self, tmp_path) -> None:
        path = tmp_path / "csdriver.yaml"
        path.write_text("system-directory: lib\n", encoding="utf-8")

        settings = load_settings(path)

        assert settings.system_directory == str((tmp_path / "lib").resolve())

    def test_empty_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "csdriver.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path) == DriverSettings()

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(SettingsError, match="Cannot read settings file"):
            load_settings(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path) -> None:
        path = tmp_path / "csdriver.yaml"
        path.write_text("default-references: [System\n", encoding="utf-8")
        with pytest.raises(SettingsError, match="Invalid YAML"):
            load_settings(path)

    def test_unknown_key(self, tmp_path) -> None:
        path = tmp_path / "csdriver.yaml"
        path.write_text("colour: blue\n", encoding="utf-8")
        with pytest.raises(SettingsError, match="Invalid settings file"):
            load_settings(path)


class TestSettingsFromEnvironment:
    def test_unset_variable_gives_defaults(self) -> None:
        assert settings_from_environment({}) == DriverSettings()

    def test_variable_names_file(self, tmp_path) -> None:
        path = tmp_path / "csdriver.yaml"
        path.write_text("stdlib-name: corlib\n", encoding="utf-8")

        settings = settings_from_environment({SETTINGS_ENV_VAR: str(path)})

        assert settings.stdlib_name == "corlib"

    def test_reads_process_environment(self, tmp_path, monkeypatch) -> None:
        path = tmp_path / "csdriver.yaml"
        path.write_text("linq-references: []\n", encoding="utf-8")
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))

        assert settings_from_environment().linq_references == []
