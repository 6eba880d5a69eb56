# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Host environment integration: driver settings and external tools."""

from csdriver.host.pkg_config import PkgConfigError, query_libs
from csdriver.host.settings import (
    RUNTIME_DIRECTORY,
    SETTINGS_ENV_VAR,
    DriverSettings,
    SettingsError,
    load_settings,
    settings_from_environment,
)

__all__ = [
    "DriverSettings",
    "PkgConfigError",
    "RUNTIME_DIRECTORY",
    "SETTINGS_ENV_VAR",
    "SettingsError",
    "load_settings",
    "query_libs",
    "settings_from_environment",
]
