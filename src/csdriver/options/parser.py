# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Command-line parsing into a :class:`RunContext`.

Arguments are processed left to right. ``@file`` arguments add the
response file's arguments to the unprocessed tail, before any ``--``
already present, so arguments that follow the ``@file`` are seen first. Until a
bare ``--`` appears, each argument starting with ``-`` or ``/`` is tried
against the legacy dialect and then the colon dialect; anything else names
source files.
"""

from __future__ import annotations

import codecs
import os
import sys
from collections.abc import Callable
from typing import TextIO

from csdriver.compiler.context import RunContext
from csdriver.compiler.references import is_valid_extern_alias
from csdriver.host.pkg_config import PkgConfigError, query_libs
from csdriver.model.config import Target, default_encoding
from csdriver.options.colon import find_colon_option
from csdriver.options.errors import OptionError
from csdriver.options.legacy import find_legacy_option
from csdriver.options.response_files import SEPARATOR, ResponseFileError, ResponseFileSet, splice_arguments
from csdriver.options.sources import add_source_spec

# ###############
# Public Interface
# ###############


class OptionParser:
    """Populates a run context from command-line arguments.

    Args:
        context: Destination of every setting.
        pkg_config: Expands ``-pkg:`` package names into extra arguments.
        out: Stream for informational output (stdout when None).
    """

    def __init__(
        self,
        context: RunContext,
        *,
        pkg_config: Callable[[list[str]], list[str]] = query_libs,
        out: TextIO | None = None,
    ) -> None:
        self.context = context
        self._pkg_config = pkg_config
        self._out = out
        self._response_files = ResponseFileSet()
        self._args: list[str] = []
        self._index = 0

    def parse(self, args: list[str]) -> bool:
        """Parse *args* into the context.

        Returns:
            False if parsing was aborted or the arguments name nothing to
            compile; the error has been reported.

        Raises:
            OptionExit: If an informational option such as ``--help`` was given.
        """
        report = self.context.report
        try:
            self._parse_arguments(args)
        except (ResponseFileError, OptionError) as exc:
            report.error(exc.code, str(exc))
            return False

        sources = self.context.sources
        if self.context.config.target.requires_source and sources.first_source is None:
            report.error(2008, "No files to compile were specified")
            return False
        if sources.first_source is None and len(self.context.resources) == 0:
            report.error(2008, "No files to compile were specified")
            return False
        return True

    # Helpers shared by the option tables.

    def has_value(self) -> bool:
        """Return True if an argument follows the current one."""
        return self._index + 1 < len(self._args)

    def next_value(self, option: str) -> str:
        """Consume and return the argument following the current one.

        Raises:
            OptionError: If *option* is the last argument.
        """
        if not self.has_value():
            raise OptionError(5, f"`{option}' requires an argument")
        self._index += 1
        return self._args[self._index]

    def splice(self, extra: list[str]) -> None:
        """Insert *extra* into the arguments that have not been processed yet.

        The new arguments go before the next ``--`` separator, or at the end.
        """
        position = self._index + 1
        self._args = self._args[:position] + splice_arguments(self._args[position:], extra)

    def compatibility(self, hint: str) -> None:
        self.context.report.warning(-29, 1, f"Compatibility: {hint}")

    def print(self, text: str) -> None:
        print(text, file=self._out if self._out is not None else sys.stdout)

    def set_target(self, value: str) -> None:
        """Select the target kind; an unknown value is reported and the current target kept."""
        try:
            self.context.config.target = Target(value)
        except ValueError:
            self.context.report.error(
                2019, "Invalid target type for -target. Valid options are `exe', `winexe', `library' or `module'"
            )

    def set_warning_level(self, value: str) -> None:
        try:
            level = int(value)
        except ValueError:
            level = -1
        if not 0 <= level <= 4:
            self.context.report.error(1900, "Warning level must be in the range 0-4")
            return
        self.context.report.warning_level = level

    def set_code_page(self, value: str) -> None:
        config = self.context.config
        if value == "utf8":
            config.encoding = "utf-8"
            return
        if value == "reset":
            config.encoding = default_encoding()
            return
        try:
            config.encoding = _encoding_for_code_page(int(value))
        except (ValueError, LookupError):
            self.context.report.error(2016, f"Code page `{value}' is invalid or not installed")

    def add_extern_alias(self, identifier: str, name: str) -> None:
        report = self.context.report
        if not name:
            report.error(1680, f"Invalid reference alias '{identifier}='. Missing filename")
            return
        if not is_valid_extern_alias(identifier):
            report.error(
                1679, f"Invalid extern alias for /reference. Alias '{identifier}' is not a valid identifier"
            )
            return
        self.context.references.add_alias(identifier, name)

    def add_resource(self, embedded: bool, option: str, value: str) -> None:
        """Register a resource from a ``FILE[,NAME[,public|private]]`` value."""
        resources = self.context.resources
        parts = value.split(",")
        if len(parts) == 1 and parts[0]:
            resources.add(embedded, parts[0], os.path.basename(parts[0]))
        elif len(parts) == 2:
            resources.add(embedded, parts[0], parts[1])
        elif len(parts) == 3:
            visibility = parts[2]
            if visibility not in ("public", "private"):
                self.context.report.error(
                    1906, f"Invalid resource visibility option `{visibility}'. Use either `public' or `private' instead"
                )
                return
            resources.add(embedded, parts[0], parts[1], private=visibility == "private")
        else:
            self.context.report.error(-2005, f"Wrong number of arguments for option `{option}'")

    def add_sources(self, spec: str, *, recurse: bool = False) -> None:
        add_source_spec(self.context.sources, spec, self.context.report, recurse=recurse)

    def expand_packages(self, packages: list[str]) -> None:
        """Splice the arguments pkg-config returns for *packages*.

        Raises:
            OptionError: If pkg-config cannot be run or fails.
        """
        try:
            extra = self._pkg_config(packages)
        except PkgConfigError as exc:
            raise OptionError(-27, str(exc)) from exc
        if not extra:
            self.context.report.warning(-27, 1, "Specified package did not return any information")
            return
        self.splice(extra)

    # ################
    # Implementation
    # ################

    def _parse_arguments(self, args: list[str]) -> None:
        self._args = list(args)
        self._index = 0
        parsing_options = True

        while self._index < len(self._args):
            arg = self._args[self._index]
            if not arg:
                self._index += 1
                continue

            if arg.startswith("@"):
                extra = self._response_files.load(arg[1:], encoding=self.context.config.encoding)
                self.splice(extra)
            elif parsing_options and arg == SEPARATOR:
                parsing_options = False
            elif parsing_options and arg.startswith("-"):
                if not self._dispatch_legacy(arg) and not self._dispatch_colon("/" + arg[1:]):
                    raise OptionError(2007, f"Unrecognized command-line option: `{arg}'")
            elif parsing_options and arg.startswith("/"):
                if not self._dispatch_colon(arg):
                    # A rooted path such as /home/a.cs is a source file, /a.cs is not.
                    if len(arg) < 2 or arg.find("/", 2) == -1:
                        raise OptionError(2007, f"Unrecognized command-line option: `{arg}'")
                    self.add_sources(arg)
            else:
                self.add_sources(arg)
            self._index += 1

    def _dispatch_legacy(self, arg: str) -> bool:
        handler = find_legacy_option(arg)
        if handler is None:
            return False
        handler(self)
        return True

    def _dispatch_colon(self, option: str) -> bool:
        found = find_colon_option(option)
        if found is None:
            return False
        handler, value = found
        handler(self, option, value)
        return True


def _encoding_for_code_page(code_page: int) -> str:
    """Return the Python codec name of a numeric code page.

    Raises:
        LookupError: If no codec implements the code page.
    """
    name = _CODE_PAGE_ALIASES.get(code_page, f"cp{code_page}")
    return codecs.lookup(name).name


_CODE_PAGE_ALIASES: dict[int, str] = {
    65001: "utf-8",
    1200: "utf-16-le",
    1201: "utf-16-be",
    20127: "ascii",
    28591: "latin-1",
}
