# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""The colon option dialect: ``/name[:value]`` or ``-name[:value]``.

Names are matched case-insensitively. Boolean switches accept a bare name,
a ``+`` suffix to enable and a ``-`` suffix to disable.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from csdriver.model.config import LanguageVersion
from csdriver.options.errors import OptionError, OptionExit
from csdriver.options.usage import OTHER_FLAGS, usage_text

if TYPE_CHECKING:
    from csdriver.options.parser import OptionParser

ColonHandler = Callable[["OptionParser", str, str], None]

# ################
# Implementation
# ################


def _require(name: str, value: str, code: int = 5) -> str:
    if not value:
        raise OptionError(code, f"-{name} requires an argument")
    return value


def _split(value: str, separators: str) -> list[str]:
    items = [value]
    for separator in separators:
        items = [part for item in items for part in item.split(separator)]
    return items


def _switch(
    names: tuple[str, ...], apply: Callable[[OptionParser, bool], None]
) -> list[tuple[tuple[str, ...], ColonHandler]]:
    on = tuple(name for base in names for name in (base, base + "+"))
    off = tuple(base + "-" for base in names)
    return [
        (on, lambda parser, option, value: apply(parser, True)),
        (off, lambda parser, option, value: apply(parser, False)),
    ]


def _no_op(parser: OptionParser, option: str, value: str) -> None:
    pass


def _target(parser: OptionParser, option: str, value: str) -> None:
    parser.set_target(value)


def _output(parser: OptionParser, option: str, value: str) -> None:
    parser.context.config.output_file = _require("out", value)


def _define(parser: OptionParser, option: str, value: str) -> None:
    config = parser.context.config
    for symbol in _split(_require("define", value), ";,"):
        if not symbol.isidentifier():
            parser.context.report.warning(2029, 1, f"Invalid conditional define symbol `{symbol}'")
            continue
        config.add_conditional(symbol)


def _bug_report(parser: OptionParser, option: str, value: str) -> None:
    parser.print("To file bug reports, please visit the project issue tracker")


def _packages(parser: OptionParser, option: str, value: str) -> None:
    packages = [name for name in _split(_require("pkg", value), ";,\n\r") if name]
    parser.expand_packages(packages)


def _resource(parser: OptionParser, option: str, value: str) -> None:
    name = option[1:].split(":", 1)[0].lower()
    parser.add_resource(name.startswith("r"), option, value)


def _recurse(parser: OptionParser, option: str, value: str) -> None:
    parser.add_sources(_require("recurse", value), recurse=True)


def _reference(parser: OptionParser, option: str, value: str) -> None:
    references = parser.context.references
    for item in _split(_require("reference", value), ";,"):
        if "=" in item:
            alias, name = item.split("=", 1)
            parser.add_extern_alias(alias, name)
        elif item:
            references.hard.append(item)


def _add_module(parser: OptionParser, option: str, value: str) -> None:
    parser.context.modules.extend(_split(_require("addmodule", value), ";,"))


def _win32_resource(parser: OptionParser, option: str, value: str) -> None:
    parser.context.config.win32_resource = _require("win32res", value)


def _win32_icon(parser: OptionParser, option: str, value: str) -> None:
    parser.context.config.win32_icon = _require("win32icon", value)


def _doc(parser: OptionParser, option: str, value: str) -> None:
    parser.context.config.doc_file = _require("doc", value, code=2006)


def _lib(parser: OptionParser, option: str, value: str) -> None:
    for directory in _require("lib", value).split(","):
        parser.context.link_paths.add(directory)


def _warn(parser: OptionParser, option: str, value: str) -> None:
    parser.set_warning_level(value)


def _no_warn(parser: OptionParser, option: str, value: str) -> None:
    report = parser.context.report
    for item in _require("nowarn", value).split(","):
        try:
            code = int(item)
        except ValueError:
            code = 0
        if code < 1:
            report.error(1904, f"`{item}' is not a valid warning number")
            continue
        report.set_ignore_warning(code)


def _help2(parser: OptionParser, option: str, value: str) -> None:
    raise OptionExit(0, OTHER_FLAGS)


def _help(parser: OptionParser, option: str, value: str) -> None:
    raise OptionExit(0, usage_text())


def _main_class(parser: OptionParser, option: str, value: str) -> None:
    parser.context.config.main_class = _require("main", value)


def _key_file(parser: OptionParser, option: str, value: str) -> None:
    parser.context.config.key_file = _require("keyfile", value)


def _key_container(parser: OptionParser, option: str, value: str) -> None:
    parser.context.config.key_container = _require("keycontainer", value)


def _language_version(parser: OptionParser, option: str, value: str) -> None:
    config = parser.context.config
    selected = value.lower()
    if selected == "iso-1":
        config.language_version = LanguageVersion.ISO_1
    elif selected == "iso-2":
        config.language_version = LanguageVersion.ISO_2
    elif selected == "default":
        config.language_version = LanguageVersion.DEFAULT
        config.add_conditional("__V2__")
    elif selected == "linq":
        config.language_version = LanguageVersion.LINQ
    else:
        parser.context.report.error(
            1617,
            f"Invalid option `{value}' for /langversion. It must be either `ISO-1', `ISO-2', `Default' or `LINQ'",
        )


def _code_page(parser: OptionParser, option: str, value: str) -> None:
    parser.set_code_page(value)


def _set_optimize(parser: OptionParser, enabled: bool) -> None:
    parser.context.config.optimize = enabled


def _set_debug(parser: OptionParser, enabled: bool) -> None:
    parser.context.config.debug = enabled


def _set_checked(parser: OptionParser, enabled: bool) -> None:
    parser.context.config.checked = enabled


def _set_cls_check(parser: OptionParser, enabled: bool) -> None:
    parser.context.config.verify_cls_compliance = enabled


def _set_unsafe(parser: OptionParser, enabled: bool) -> None:
    parser.context.config.unsafe = enabled


def _set_warnings_as_errors(parser: OptionParser, enabled: bool) -> None:
    parser.context.report.warnings_as_errors = enabled


def _set_no_config(parser: OptionParser, enabled: bool) -> None:
    parser.context.config.load_default_config = not enabled


def _set_no_stdlib(parser: OptionParser, enabled: bool) -> None:
    parser.context.config.stdlib = not enabled


def _set_delay_sign(parser: OptionParser, enabled: bool) -> None:
    parser.context.config.delay_sign = enabled


# ###############
# Public Interface
# ###############

COLON_OPTIONS: list[tuple[tuple[str, ...], ColonHandler]] = [
    (("nologo", "fullpaths", "incremental", "incremental+", "incremental-"), _no_op),
    (("t", "target"), _target),
    (("out",), _output),
    *_switch(("o", "optimize"), _set_optimize),
    (("d", "define"), _define),
    (("bugreport",), _bug_report),
    (("pkg",), _packages),
    (("linkres", "linkresource", "res", "resource"), _resource),
    (("recurse",), _recurse),
    (("r", "reference"), _reference),
    (("addmodule",), _add_module),
    (("win32res",), _win32_resource),
    (("win32icon",), _win32_icon),
    (("doc",), _doc),
    (("lib",), _lib),
    *_switch(("debug",), _set_debug),
    *_switch(("checked",), _set_checked),
    *_switch(("clscheck",), _set_cls_check),
    *_switch(("unsafe",), _set_unsafe),
    *_switch(("warnaserror",), _set_warnings_as_errors),
    (("w", "warn"), _warn),
    (("nowarn",), _no_warn),
    *_switch(("noconfig",), _set_no_config),
    (("help2",), _help2),
    (("help", "?"), _help),
    (("m", "main"), _main_class),
    *_switch(("nostdlib",), _set_no_stdlib),
    (("keyfile",), _key_file),
    (("keycontainer",), _key_container),
    *_switch(("delaysign",), _set_delay_sign),
    (("langversion",), _language_version),
    (("codepage",), _code_page),
]


def find_colon_option(option: str) -> tuple[ColonHandler, str] | None:
    """Look up a ``/name[:value]`` option.

    Args:
        option: The option with a leading ``/``.

    Returns:
        The handler and the value after the first colon (empty when absent),
        or None if no entry matches the name.
    """
    name, _, value = option[1:].partition(":")
    name = name.lower()
    for names, handler in COLON_OPTIONS:
        if name in names:
            return handler, value
    return None
