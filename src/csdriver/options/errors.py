# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised by option handlers."""

# ###############
# Public Interface
# ###############


class OptionError(Exception):
    """Raised when an option is malformed and argument parsing must stop.

    Attributes:
        code: Diagnostic code reported for the failure.
    """

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class OptionExit(Exception):
    """Raised by informational options that end the process without compiling.

    Attributes:
        exit_code: Process exit code.
        text: Text to print on standard output before exiting.
    """

    def __init__(self, exit_code: int, text: str) -> None:
        super().__init__(text)
        self.exit_code = exit_code
        self.text = text
