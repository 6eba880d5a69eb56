# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Optional YAML settings for the driver installation.

The settings file replaces values that are otherwise built into the driver:
the implicit soft-reference list, the runtime library directory and the name
of the standard library unit.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

# ###############
# Public Interface
# ###############

SETTINGS_ENV_VAR = "CSDRIVER_SETTINGS"

RUNTIME_DIRECTORY = Path(__file__).resolve().parent.parent / "runtime"


class SettingsError(Exception):
    """Raised when the settings file cannot be read or is invalid."""


class DriverSettings(BaseModel):
    """Installation-wide driver settings."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    default_references: list[str] = Field(
        alias="default-references",
        default_factory=lambda: ["System", "System.Xml"],
    )
    linq_references: list[str] = Field(alias="linq-references", default_factory=lambda: ["System.Core"])
    system_directory: str = Field(alias="system-directory", default=str(RUNTIME_DIRECTORY))
    stdlib_name: str = Field(alias="stdlib-name", default="mscorlib")


def load_settings(path: Path) -> DriverSettings:
    """Load and validate a settings file.

    An empty file yields the built-in defaults.

    Args:
        path: Path to the YAML settings file.

    Returns:
        A validated DriverSettings instance.

    Raises:
        SettingsError: If the file cannot be read, contains invalid YAML,
            or does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Cannot read settings file '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise SettingsError(f"Invalid YAML in settings file '{path}': {exc}") from exc

    if data is None:
        data = {}

    try:
        settings = DriverSettings.model_validate(data)
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings file '{path}': {exc}") from exc

    # Relative runtime directories are anchored at the settings file.
    system_directory = Path(settings.system_directory)
    if not system_directory.is_absolute():
        settings.system_directory = str((path.parent / system_directory).resolve())
    return settings


def settings_from_environment(environ: dict[str, str] | None = None) -> DriverSettings:
    """Return the settings named by ``CSDRIVER_SETTINGS``, or the defaults.

    Raises:
        SettingsError: If the variable names a file that cannot be loaded.
    """
    env = os.environ if environ is None else environ
    location = env.get(SETTINGS_ENV_VAR)
    if not location:
        return DriverSettings()
    return load_settings(Path(location))
