# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution of referenced units and linked modules.

Resolution of a reference name tries, in order:

1. a direct load when the name looks like a path,
2. a unit with the same simple name that is already loaded,
3. every directory of the link path list, first ``<dir>/<name>`` and then
   ``<dir>/<name>.dll``; the first success wins.

Soft references that cannot be found are dropped silently. Hard references
report "cannot find metadata file" together with the log of every attempt.
"""

from __future__ import annotations

import logging
import os
import unicodedata
from pathlib import Path

from csdriver.compiler.context import RunContext
from csdriver.compiler.interfaces import OutputBackend, UnitLoader
from csdriver.compiler.units import BadUnitFormatError, LoadedUnit, UnitNotFoundError

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

UNIT_EXTENSIONS = (".dll", ".exe")
DEFAULT_UNIT_EXTENSION = ".dll"
MODULE_EXTENSION = ".netmodule"

_ALIAS_CONNECTOR_CATEGORIES = frozenset({"Cf", "Mn", "Mc", "Pc"})


def is_path_shaped(name: str) -> bool:
    """Return True if *name* contains a directory separator."""
    return "/" in name or "\\" in name


def is_valid_extern_alias(identifier: str) -> bool:
    """Return True if *identifier* can name an extern alias.

    The identifier must be non-empty, start with a letter or underscore, and
    continue with letters, decimal digits, formatting characters, combining marks or
    connector punctuation.
    """
    if not identifier:
        return False
    first = identifier[0]
    if first != "_" and not first.isalpha():
        return False
    for ch in identifier[1:]:
        if ch.isalpha() or ch.isdecimal():
            continue
        if unicodedata.category(ch) not in _ALIAS_CONNECTOR_CATEGORIES:
            return False
    return True


class ReferenceResolver:
    """Resolves reference and module names to loaded units.

    Args:
        context: The run whose references, link paths and namespace are used.
        loader: Reads unit files from disk.
    """

    def __init__(self, context: RunContext, loader: UnitLoader) -> None:
        self._context = context
        self._loader = loader

    def resolve(self, name: str, alias: str | None = None, soft: bool = False) -> LoadedUnit | None:
        """Resolve *name* and bind it into the namespace.

        Args:
            name: Unit name or path.
            alias: Extern alias to bind under; None merges into the global root.
            soft: Silently abandon the reference if it cannot be found.

        Returns:
            The loaded unit, or None if it could not be resolved.
        """
        log: list[str] = []
        try:
            unit = self._locate(name, log)
        except BadUnitFormatError as exc:
            self._report_bad_unit(exc)
            return None

        if unit is None:
            if soft:
                logger.debug("Soft reference '%s' not found; ignored", name)
                return None
            self._report_not_found(name, log)
            return None

        namespace = self._context.namespace
        if alias is None:
            namespace.add_unit_reference(unit)
        else:
            namespace.define_root_namespace(alias, unit)
        logger.debug("Resolved reference '%s' to '%s'", name, unit.path)
        return unit

    def resolve_all(self) -> None:
        """Resolve every configured reference in a fixed order.

        The standard library (unless disabled) comes first, then soft, hard and
        aliased references, so later units shadow identifiers of earlier ones.
        """
        context = self._context
        if context.config.stdlib:
            self.resolve(context.settings.stdlib_name)
        for name in context.references.soft:
            self.resolve(name, soft=True)
        for name in context.references.hard:
            self.resolve(name)
        for alias, name in context.references.aliases.items():
            self.resolve(name, alias=alias)

    def load_module(self, name: str, backend: OutputBackend) -> LoadedUnit | None:
        """Link the module *name* into the output container.

        Returns:
            The linked module, or None after reporting an error.
        """
        try:
            module = self._locate_module(name, backend)
        except BadUnitFormatError as exc:
            self._report_invalid_metadata("module", exc)
            return None
        if module is not None:
            self._context.namespace.add_module_reference(module)
        return module

    def load_modules(self, backend: OutputBackend) -> list[LoadedUnit]:
        """Link every ``-addmodule`` entry in order."""
        linked = []
        for name in self._context.modules:
            module = self.load_module(name, backend)
            if module is not None:
                linked.append(module)
        return linked

    # ################
    # Implementation
    # ################

    def _locate(self, name: str, log: list[str]) -> LoadedUnit | None:
        if is_path_shaped(name):
            try:
                return self._loader.load(Path(name))
            except UnitNotFoundError as exc:
                log.append(exc.log)
        else:
            simple_name = name
            if simple_name.endswith(UNIT_EXTENSIONS):
                simple_name = simple_name[:-4]
            unit = self._context.namespace.find_loaded(simple_name)
            if unit is not None:
                return unit

        for directory in self._context.link_paths:
            for candidate in _candidates(directory, name, UNIT_EXTENSIONS, DEFAULT_UNIT_EXTENSION):
                try:
                    return self._loader.load(candidate)
                except UnitNotFoundError as exc:
                    log.append(exc.log)
        return None

    def _locate_module(self, name: str, backend: OutputBackend) -> LoadedUnit | None:
        log: list[str] = []
        try:
            return backend.add_module(Path(name))
        except UnitNotFoundError as exc:
            log.append(exc.log)

        for directory in self._context.link_paths:
            for candidate in _candidates(directory, name, (MODULE_EXTENSION,), MODULE_EXTENSION):
                try:
                    return backend.add_module(candidate)
                except UnitNotFoundError as exc:
                    log.append(exc.log)

        self._report_not_found(name, log)
        return None

    def _report_not_found(self, name: str, log: list[str]) -> None:
        report = self._context.report
        if log:
            report.extra_information("Log:\n" + "\n".join(log) + "\n(log related to previous error)")
        report.error(6, f"cannot find metadata file `{name}'")

    def _report_bad_unit(self, exc: BadUnitFormatError) -> None:
        if self._loader.is_module(exc.path):
            self._context.report.error(
                1509,
                f"Referenced file `{os.path.basename(exc.path)}' is not an assembly. "
                "Consider using `-addmodule' option instead",
            )
            return
        self._report_invalid_metadata("assembly", exc)

    def _report_invalid_metadata(self, kind: str, exc: BadUnitFormatError) -> None:
        report = self._context.report
        if exc.log:
            report.extra_information("Log:\n" + exc.log + "\n(log related to previous error)")
        report.error(9, f"file `{exc.path}' has invalid `{kind}' metadata")


def _candidates(directory: str, name: str, extensions: tuple[str, ...], default_extension: str) -> list[Path]:
    base = Path(directory) / name
    if name.endswith(extensions):
        return [base]
    return [base, Path(directory) / (name + default_extension)]
