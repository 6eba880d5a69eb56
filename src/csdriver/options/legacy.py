# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""The legacy option dialect.

Legacy options match a whole argument exactly and may consume the argument
that follows. Most of them have a colon-dialect replacement and report a
compatibility warning (-29) pointing at it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from csdriver.options.errors import OptionError, OptionExit
from csdriver.options.usage import ABOUT, usage_text, version_text

if TYPE_CHECKING:
    from csdriver.options.parser import OptionParser

LegacyHandler = Callable[["OptionParser"], None]

# ################
# Implementation
# ################


def _verbose_parser(parser: OptionParser) -> None:
    parser.context.config.verbose_parser += 1


def _version(parser: OptionParser) -> None:
    raise OptionExit(0, version_text())


def _parse_only(parser: OptionParser) -> None:
    parser.context.config.parse_only = True


def _main_class(parser: OptionParser) -> None:
    parser.compatibility("Use -main:CLASS instead of --main CLASS or -m CLASS")
    parser.context.config.main_class = parser.next_value("--main")


def _unsafe(parser: OptionParser) -> None:
    parser.compatibility("Use -unsafe instead of --unsafe")
    parser.context.config.unsafe = True


def _help(parser: OptionParser) -> None:
    raise OptionExit(0, usage_text())


def _define(parser: OptionParser) -> None:
    parser.compatibility("Use -d:SYMBOL instead of --define SYMBOL")
    parser.context.config.add_conditional(parser.next_value("--define"))


def _tokenize_only(parser: OptionParser) -> None:
    parser.context.config.tokenize_only = True


def _output(parser: OptionParser) -> None:
    parser.compatibility("Use -out:FILE instead of --output FILE or -o FILE")
    parser.context.config.output_file = parser.next_value("--output")


def _checked(parser: OptionParser) -> None:
    parser.compatibility("Use -checked instead of --checked")
    parser.context.config.checked = True


def _stacktrace(parser: OptionParser) -> None:
    parser.context.report.stacktrace = True


def _link_resource(parser: OptionParser) -> None:
    parser.compatibility("Use -linkres:VALUE instead of --linkres VALUE")
    file = parser.next_value("--linkres")
    parser.context.resources.add(False, file, file)


def _resource(parser: OptionParser) -> None:
    parser.compatibility("Use -res:VALUE instead of --res VALUE")
    file = parser.next_value("--resource")
    parser.context.resources.add(True, file, file)


def _target(parser: OptionParser) -> None:
    parser.compatibility("Use -target:KIND instead of --target KIND")
    parser.set_target(parser.next_value("--target"))


def _reference(parser: OptionParser) -> None:
    parser.compatibility("Use -r:LIBRARY instead of -r library")
    value = parser.next_value("-r")
    if "=" in value:
        alias, name = value.split("=", 1)
        parser.add_extern_alias(alias, name)
        return
    parser.context.references.hard.append(value)


def _link_path(parser: OptionParser) -> None:
    parser.compatibility("Use -lib:ARG instead of -L arg")
    parser.context.link_paths.add(parser.next_value("-L"))


def _no_stdlib(parser: OptionParser) -> None:
    parser.compatibility("Use -nostdlib instead of --nostdlib")
    parser.context.config.stdlib = False


def _fatal(parser: OptionParser) -> None:
    parser.context.report.fatal = True


def _warnings_as_errors(parser: OptionParser) -> None:
    parser.compatibility("Use -warnaserror: option instead of --werror")
    parser.context.report.warnings_as_errors = True


def _no_warn(parser: OptionParser) -> None:
    parser.compatibility("Use -nowarn instead of --nowarn")
    value = parser.next_value("--nowarn")
    try:
        code = int(value)
    except ValueError as exc:
        raise OptionError(1904, f"`{value}' is not a valid warning number") from exc
    parser.context.report.set_ignore_warning(code)


def _warning_level(parser: OptionParser) -> None:
    parser.compatibility("Use -warn:LEVEL instead of --wlevel LEVEL")
    if not parser.has_value():
        raise OptionError(1900, "--wlevel requires a value from 0 to 4")
    parser.set_warning_level(parser.next_value("--wlevel"))


def _debug_flags(parser: OptionParser) -> None:
    value = parser.next_value("--mcs-debug")
    try:
        parser.context.report.debug_flags = int(value)
    except ValueError as exc:
        raise OptionError(5, "Invalid argument to --mcs-debug") from exc


def _about(parser: OptionParser) -> None:
    raise OptionExit(0, ABOUT)


def _recurse(parser: OptionParser) -> None:
    parser.compatibility("Use -recurse:PATTERN option instead --recurse PATTERN")
    parser.add_sources(parser.next_value("--recurse"), recurse=True)


def _timestamp(parser: OptionParser) -> None:
    parser.context.config.timestamps = True


def _debug(parser: OptionParser) -> None:
    parser.compatibility("Use -debug option instead of -g or --debug")
    parser.context.config.debug = True


def _no_config(parser: OptionParser) -> None:
    parser.compatibility("Use -noconfig option instead of --noconfig")
    parser.context.config.load_default_config = False


def _expect_error(parser: OptionParser) -> None:
    value = parser.next_value("--expect-error")
    try:
        parser.context.report.expected_error = int(value)
    except ValueError as exc:
        raise OptionError(5, "--expect-error requires a numeric argument") from exc


# ###############
# Public Interface
# ###############

LEGACY_OPTIONS: list[tuple[tuple[str, ...], LegacyHandler]] = [
    (("-v",), _verbose_parser),
    (("--version",), _version),
    (("--parse",), _parse_only),
    (("--main", "-m"), _main_class),
    (("--unsafe",), _unsafe),
    (("--help",), _help),
    (("--define",), _define),
    (("--tokenize",), _tokenize_only),
    (("-o", "--output"), _output),
    (("--checked",), _checked),
    (("--stacktrace",), _stacktrace),
    (("--linkresource", "--linkres"), _link_resource),
    (("--resource", "--res"), _resource),
    (("--target",), _target),
    (("-r",), _reference),
    (("-L",), _link_path),
    (("--nostdlib",), _no_stdlib),
    (("--fatal",), _fatal),
    (("--werror",), _warnings_as_errors),
    (("--nowarn",), _no_warn),
    (("--wlevel",), _warning_level),
    (("--mcs-debug",), _debug_flags),
    (("--about",), _about),
    (("--recurse",), _recurse),
    (("--timestamp",), _timestamp),
    (("--debug", "-g"), _debug),
    (("--noconfig",), _no_config),
    (("--expect-error",), _expect_error),
]


def find_legacy_option(arg: str) -> LegacyHandler | None:
    """Return the handler whose names contain *arg* exactly, or None."""
    for names, handler in LEGACY_OPTIONS:
        if arg in names:
            return handler
    return None
