# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Expansion of ``-pkg:`` options through the external ``pkg-config`` tool."""

import subprocess

# ###############
# Public Interface
# ###############

PKG_CONFIG_EXECUTABLE = "pkg-config"


class PkgConfigError(Exception):
    """Raised when pkg-config cannot be spawned or exits with a non-zero code."""


def query_libs(packages: list[str], *, executable: str = PKG_CONFIG_EXECUTABLE) -> list[str]:
    """Return the extra compiler arguments that reference *packages*.

    The call blocks until pkg-config exits and its output has been read.

    Args:
        packages: Package names as given to ``-pkg:``.
        executable: Name or path of the pkg-config program.

    Returns:
        The whitespace-separated tokens of ``pkg-config --libs``. An empty
        list means the packages did not return any information.

    Raises:
        PkgConfigError: If pkg-config is not available or reports a failure.
    """
    result = _run_pkg_config([executable, "--libs", *packages])
    if result.returncode != 0:
        detail = result.stderr.strip()
        raise PkgConfigError(f"Error running pkg-config. Check the above output. {detail}".rstrip())
    return result.stdout.split()


# ################
# Implementation
# ################


def _run_pkg_config(command: list[str]) -> subprocess.CompletedProcess[str]:
    """Run pkg-config and return the raw CompletedProcess result.

    Raises:
        PkgConfigError: If the executable cannot be started.
    """
    try:
        return subprocess.run(command, capture_output=True, text=True)
    except OSError as exc:
        raise PkgConfigError(f"Couldn't run pkg-config: {exc}") from exc
