# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Strictly staged compilation pipeline.

Phases run one after another and never overlap. Most phases are followed by
a gate that stops the run as soon as the cumulative error count is non-zero:

1. parse (or tokenize) every source file
2. add the implicit default references
3. resolve references
4. establish the output name and initialize the output container
5. link ``-addmodule`` modules
6. resolve core types (a failure stops the run immediately)
7. resolve the tree, populate and define types
8. export documentation
9. verify using aliases
10. resolve assembly attributes and verify CLS compliance of modules
11. emit code
12. close types
13. resolve the entry point
14. emit managed resources
15. emit native resources
16. save the artifact

Expected-error reconciliation happens afterwards in :meth:`Pipeline.exit_code`.
"""

from __future__ import annotations

import io
import logging
import os
import sys
import time
from collections.abc import Callable
from typing import TextIO

from csdriver.compiler.context import RunContext
from csdriver.compiler.interfaces import Capability, EmitResult, EntryPointKind, Toolchain
from csdriver.compiler.references import ReferenceResolver
from csdriver.compiler.units import LoadedUnit
from csdriver.model.config import LanguageVersion, Target
from csdriver.report import FatalError, InternalError, Location

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_EXPECTED_ERROR_MISSING = 2


class Pipeline:
    """Runs the compilation phases for one :class:`RunContext`.

    Args:
        context: State populated by the option parser.
        toolchain: Collaborators driven by the phases.
        out: Stream for informational output (timestamps, token counts).
    """

    def __init__(self, context: RunContext, toolchain: Toolchain, *, out: TextIO | None = None) -> None:
        self._context = context
        self._toolchain = toolchain
        self._out = out
        self._resolver = ReferenceResolver(context, toolchain.loader)
        self._stopwatch = _Stopwatch(self._print) if context.config.timestamps else None
        self._ran = False
        self.output_file: str | None = None
        self.linked_modules: list[LoadedUnit] = []

    def run(self) -> bool:
        """Run every phase.

        Returns:
            True if every gate passed and no error was reported.

        Raises:
            FatalError: If a required runtime capability is missing.
            InternalError: If the pipeline is run twice.
        """
        if self._ran:
            raise InternalError("pipeline was already run; create a new one for each compilation")
        self._ran = True
        return self._compile() and self._context.report.errors == 0

    def exit_code(self, success: bool) -> int:
        """Return the process exit code, reconciling an expected diagnostic.

        When an expected error code is configured, the run succeeds only if
        that code was reported. Exit code 2 distinguishes a run that reported
        no errors at all from one that reported different errors.
        """
        report = self._context.report
        if report.expected_error:
            if report.expected_error_seen:
                return EXIT_SUCCESS
            if report.errors == 0:
                self._print(f"Failed to report expected error {report.expected_error}.\nNo other errors reported.")
                return EXIT_EXPECTED_ERROR_MISSING
            self._print(
                f"Failed to report expected error {report.expected_error}.\nHowever, other errors were reported."
            )
            return EXIT_FAILURE
        return EXIT_SUCCESS if success else EXIT_FAILURE

    # ################
    # Implementation
    # ################

    def _clean(self) -> bool:
        return self._context.report.errors == 0

    def _compile(self) -> bool:
        context = self._context
        config = context.config
        report = context.report
        toolchain = self._toolchain
        type_system = toolchain.type_system

        logger.debug("Parsing %d source file(s)", len(context.sources))
        self._parse()
        if not self._clean():
            return False
        if config.tokenize_only or config.parse_only:
            return True

        if config.load_default_config:
            self._define_default_config()
        if not self._clean():
            return False

        self._time("Loading references")
        context.link_paths.finalize(context.settings.system_directory, os.getcwd())
        self._resolver.resolve_all()
        self._time("   References loaded")
        if not self._clean():
            return False

        if not self._establish_output():
            return False

        self.linked_modules = self._resolver.load_modules(toolchain.backend)

        if not type_system.resolve_core_types():
            logger.debug("Core type resolution failed")
            return False
        self._time("   Core Types done")

        self._time("Resolving tree")
        type_system.resolve_tree()
        if not self._clean():
            return False
        self._time("Populate tree")
        type_system.populate(boot_corlib=not config.stdlib)
        type_system.define_types()

        if report.errors == 0 and config.doc_file is not None:
            if not toolchain.doc_exporter.export(config.doc_file):
                return False

        type_system.verify_using_aliases()
        if not self._clean():
            return False

        attributes = type_system.resolve_assembly_attributes()
        if config.verify_cls_compliance and attributes.cls_compliant:
            toolchain.compliance.verify(self.linked_modules)
        if not self._clean():
            return False

        self._time("Emitting code")
        self._total("Total so far")
        result = toolchain.code_generator.emit(toolchain.tree)
        self._time("   done")
        if not self._clean():
            return False

        self._time("Closing types")
        type_system.close_types()

        if not self._define_entry_point(result):
            return False

        if not self._emit_resources():
            return False

        self._emit_native_resources()

        if not self._clean():
            return False

        toolchain.backend.save(self.output_file, config.debug)
        self._time("Saved output")
        self._total("Total")
        logger.debug("Saved '%s'", self.output_file)
        return True

    def _parse(self) -> None:
        tokenize_only = self._context.config.tokenize_only
        for file in self._context.sources:
            if tokenize_only:
                self._tokenize_file(file)
            else:
                self._parse_file(file)

    def _open_source(self, file: str) -> io.StringIO | None:
        report = self._context.report
        try:
            with open(file, "rb") as handle:
                data = handle.read()
        except OSError:
            report.error(2001, f"Source file `{file}' could not be found")
            return None
        if data[:2] == b"MZ":
            report.error(2015, f"Source file `{file}' is a binary file and not a text file")
            return None
        return io.StringIO(data.decode(self._context.config.encoding, errors="replace"))

    def _tokenize_file(self, file: str) -> None:
        stream = self._open_source(file)
        if stream is None:
            return
        lexer = self._toolchain.lexer_factory(stream, file)
        tokens = errors = 0
        while True:
            token = lexer.next()
            if token.is_eof:
                break
            tokens += 1
            if token.is_error:
                errors += 1
        self._print(f"Tokenized: {tokens} found {errors} errors")

    def _parse_file(self, file: str) -> None:
        stream = self._open_source(file)
        if stream is None:
            return
        report = self._context.report
        try:
            diagnostics = self._toolchain.parser.parse(stream, file)
        except (FatalError, InternalError):
            raise
        except Exception as exc:
            report.error(589, f"Compilation aborted in file `{file}', {exc}", Location(file, 1))
            return
        for diagnostic in diagnostics:
            if diagnostic.is_error:
                report.error(diagnostic.code, diagnostic.message, diagnostic.location)
            else:
                report.warning(diagnostic.code, 1, diagnostic.message, diagnostic.location)

    def _define_default_config(self) -> None:
        context = self._context
        soft = context.references.soft
        if context.config.language_version is LanguageVersion.LINQ:
            soft.extend(context.settings.linq_references)
        soft.extend(context.settings.default_references)

    def _establish_output(self) -> bool:
        context = self._context
        config = context.config
        backend = self._toolchain.backend

        output = config.output_file
        if output is None:
            first = context.sources.first_source
            if first is None:
                context.report.error(
                    1562, "If no source files are specified you must specify the output file with -out:"
                )
                return False
            stem, extension = os.path.splitext(first)
            output = (stem if extension else first) + config.target_ext
            config.output_file = output
        self.output_file = output

        if not backend.init(output, config.debug):
            return False

        if config.target is Target.MODULE:
            if not backend.supports(Capability.MODULE_ONLY):
                context.report.runtime_missing_support("/target:module")
                raise FatalError("the output backend cannot produce modules")
            backend.set_module_only()
        return True

    def _define_entry_point(self, result: EmitResult) -> bool:
        context = self._context
        config = context.config
        report = context.report

        if not config.target.needs_entry_point:
            if config.main_class is not None:
                report.error(2017, "Cannot specify -main if building a module or library")
            return True

        entry_point = result.entry_point
        if entry_point is None:
            if config.main_class is not None:
                declaration = self._toolchain.type_system.lookup_declaration(config.main_class)
                if declaration is None:
                    report.error(1555, f"Could not find `{config.main_class}' specified for Main method")
                elif not declaration.is_class_or_struct:
                    report.error(
                        1556, f"`{config.main_class}' specified for Main method must be a valid class or struct"
                    )
                else:
                    report.error(
                        1558,
                        f"`{declaration.name}' does not have a suitable static Main method",
                        declaration.location,
                    )
                return False

            if report.errors == 0:
                report.error(
                    5001,
                    f"Program `{self.output_file}' does not contain a static `Main' method "
                    "suitable for an entry point",
                )
            return False

        self._toolchain.backend.define_entry_point(entry_point, _ENTRY_POINT_KINDS[config.target])
        return True

    def _emit_resources(self) -> bool:
        context = self._context
        if len(context.resources) == 0:
            return True
        if context.config.target is Target.MODULE:
            context.report.error(1507, "Cannot link resource file when building a module")
            return False
        context.resources.emit_all(self._toolchain.backend)
        return True

    def _emit_native_resources(self) -> None:
        config = self._context.config
        report = self._context.report
        backend = self._toolchain.backend

        if config.win32_resource is not None:
            if backend.supports(Capability.NATIVE_RESOURCE):
                backend.define_native_resource(config.win32_resource)
            else:
                report.runtime_missing_support("resource embedding")
        else:
            backend.define_version_info_resource()

        if config.win32_icon is not None:
            if backend.supports(Capability.ICON_RESOURCE):
                backend.define_icon_resource(config.win32_icon)
            else:
                report.runtime_missing_support("resource embedding")

    def _time(self, message: str) -> None:
        if self._stopwatch is not None:
            self._stopwatch.show(message)

    def _total(self, message: str) -> None:
        if self._stopwatch is not None:
            self._stopwatch.show_total(message)

    def _print(self, text: str) -> None:
        print(text, file=self._out if self._out is not None else sys.stdout)


_ENTRY_POINT_KINDS: dict[Target, EntryPointKind] = {
    Target.EXE: EntryPointKind.CONSOLE,
    Target.WINEXE: EntryPointKind.WINDOW,
    Target.LIBRARY: EntryPointKind.DLL,
    Target.MODULE: EntryPointKind.DLL,
}


class _Stopwatch:
    """Prints ``[SS:mmm] message`` lines relative to the last and the first event."""

    def __init__(self, printer: Callable[[str], None]) -> None:
        self._printer = printer
        self._first = self._last = time.monotonic()

    def show(self, message: str) -> None:
        now = time.monotonic()
        self._printer(_format_span(now - self._last, message))
        self._last = now

    def show_total(self, message: str) -> None:
        now = time.monotonic()
        self._printer(_format_span(now - self._first, message))
        self._last = now


def _format_span(seconds: float, message: str) -> str:
    whole = int(seconds)
    millis = int((seconds - whole) * 1000)
    return f"[{whole:02d}:{millis:03d}] {message}"
