# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the csdriver command-line interface."""

import logging
import sys

from csdriver.compiler.context import RunContext
from csdriver.compiler.driver import run
from csdriver.host.settings import SettingsError, settings_from_environment

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the csdriver CLI."""
    logging.basicConfig(format="%(name)s: %(levelname)s: %(message)s", level=logging.WARNING)
    sys.exit(_dispatch(sys.argv[1:]))


# ################
# Implementation
# ################


def _dispatch(argv: list[str]) -> int:
    """Load the driver settings and compile once."""
    try:
        settings = settings_from_environment()
    except SettingsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return run(argv, RunContext(settings=settings))


if __name__ == "__main__":
    main()
