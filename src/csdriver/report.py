# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Diagnostic sink shared by every stage of a compilation run.

A single :class:`Report` instance tracks cumulative error and warning counts,
applies warning suppression, warning levels and warnings-as-errors promotion,
and remembers whether an expected diagnostic has been produced.
"""

from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass
from typing import TextIO

from yachalk import chalk

# ###############
# Public Interface
# ###############

DEFAULT_WARNING_LEVEL = 4


class FatalError(Exception):
    """Raised when the run must stop immediately without further phases.

    Covers missing runtime capabilities and errors promoted by ``--fatal``.
    """


class InternalError(Exception):
    """Raised when an internal invariant of the driver is violated."""


@dataclass(frozen=True)
class Location:
    """A position in a source file.

    Attributes:
        file: Path of the source file as given on the command line.
        line: 1-based line number.
        column: 1-based column number.
    """

    file: str
    line: int
    column: int = 1

    def __str__(self) -> str:
        return f"{self.file}({self.line},{self.column})"


@dataclass(frozen=True)
class Diagnostic:
    """A single reported error or warning.

    Attributes:
        code: Numeric diagnostic code. Negative codes are driver-internal.
        message: Human-readable message.
        is_error: True for errors (including promoted warnings).
        location: Optional source location.
    """

    code: int
    message: str
    is_error: bool
    location: Location | None = None

    @property
    def code_text(self) -> str:
        """Return the printable code, e.g. ``CS0246`` or ``CS8029``."""
        if self.code < 0:
            return f"CS8{-self.code:03d}"
        return f"CS{self.code:04d}"

    def format(self) -> str:
        kind = "error" if self.is_error else "warning"
        prefix = f"{self.location}: " if self.location is not None else ""
        return f"{prefix}{kind} {self.code_text}: {self.message}"


class Report:
    """Reporting sink with cumulative counts.

    Attributes:
        errors: Number of errors reported so far.
        warnings: Number of warnings reported so far.
        warning_level: Warnings with a higher level are not shown (0-4).
        warnings_as_errors: Promote every shown warning to an error.
        fatal: Raise :class:`FatalError` on the first error.
        stacktrace: Print the Python stack after each error.
        expected_error: Diagnostic code the run is expected to report, or 0.
        debug_flags: Developer debug level set with ``--mcs-debug``.
        stream: Destination text stream (stderr when None).
        color: Colour errors and warnings on the stream.
    """

    def __init__(self, stream: TextIO | None = None, *, color: bool | None = None) -> None:
        self.stream = stream
        self.color = color
        self.reset()

    def reset(self) -> None:
        """Restore all counters and knobs to their defaults."""
        self.errors = 0
        self.warnings = 0
        self.warning_level = DEFAULT_WARNING_LEVEL
        self.warnings_as_errors = False
        self.fatal = False
        self.stacktrace = False
        self.expected_error = 0
        self.expected_error_seen = False
        self.debug_flags = 0
        self.diagnostics: list[Diagnostic] = []
        self._ignored_warnings: set[int] = set()
        self._extra_information: list[str] = []

    def set_ignore_warning(self, code: int) -> None:
        """Suppress every future warning with *code*."""
        self._ignored_warnings.add(code)

    def is_warning_ignored(self, code: int) -> bool:
        return code in self._ignored_warnings

    def extra_information(self, text: str) -> None:
        """Attach *text* to the next diagnostic printed."""
        self._extra_information.append(text)

    def error(self, code: int, message: str, location: Location | None = None) -> None:
        """Report an error.

        Raises:
            FatalError: If the sink was configured with ``fatal``.
        """
        self._emit(Diagnostic(code=code, message=message, is_error=True, location=location))

    def warning(self, code: int, level: int, message: str, location: Location | None = None) -> None:
        """Report a warning of the given *level* (1 is the most important)."""
        if level > self.warning_level or code in self._ignored_warnings:
            self._extra_information.clear()
            return
        self._emit(Diagnostic(code=code, message=message, is_error=self.warnings_as_errors, location=location))

    def runtime_missing_support(self, feature: str) -> None:
        """Tell the user that the output backend lacks *feature*.

        This is not a compile error and leaves the counters untouched.
        """
        self._print(f"Your runtime does not support `{feature}'. Please use a newer output backend.", None)

    def message(self, text: str) -> None:
        """Print an informational line on the diagnostic stream."""
        self._print(text, None)

    @property
    def expected_error_missing(self) -> bool:
        """Return True if an expected diagnostic was configured but never reported."""
        return self.expected_error != 0 and not self.expected_error_seen

    # ################
    # Implementation
    # ################

    def _emit(self, diagnostic: Diagnostic) -> None:
        for extra in self._extra_information:
            self._print(extra, None)
        self._extra_information.clear()

        self.diagnostics.append(diagnostic)
        if diagnostic.code == self.expected_error and diagnostic.is_error:
            self.expected_error_seen = True

        if diagnostic.is_error:
            self.errors += 1
        else:
            self.warnings += 1

        self._print(diagnostic.format(), diagnostic)

        if diagnostic.is_error:
            if self.stacktrace:
                self._print("".join(traceback.format_stack()[:-2]), None)
            if self.fatal:
                raise FatalError(diagnostic.format())

    def _print(self, text: str, diagnostic: Diagnostic | None) -> None:
        stream = self.stream if self.stream is not None else sys.stderr
        if diagnostic is not None and self._use_color(stream):
            text = chalk.red(text) if diagnostic.is_error else chalk.yellow(text)
        print(text, file=stream)

    def _use_color(self, stream: TextIO) -> bool:
        if self.color is not None:
            return self.color
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())
