# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Driver facade: parses the command line, wires the toolchain and runs the pipeline."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TextIO

from csdriver.compiler.context import RunContext
from csdriver.compiler.interfaces import Toolchain
from csdriver.compiler.output import ArtifactContainer
from csdriver.compiler.pipeline import EXIT_FAILURE, Pipeline
from csdriver.compiler.units import ManifestUnitLoader
from csdriver.frontend.codegen import TreeCodeGenerator, XmlDocExporter
from csdriver.frontend.lexer import Lexer
from csdriver.frontend.parser import SourceParser
from csdriver.frontend.semantics import ModuleComplianceChecker, SimpleTypeSystem
from csdriver.frontend.tree import ProgramTree
from csdriver.host.pkg_config import query_libs
from csdriver.options.errors import OptionExit
from csdriver.options.parser import OptionParser
from csdriver.report import FatalError, InternalError

logger = logging.getLogger(__name__)

ToolchainFactory = Callable[[RunContext], Toolchain]

# ###############
# Public Interface
# ###############


def default_toolchain(context: RunContext) -> Toolchain:
    """Build the default front end and JSON output backend for *context*."""
    tree = ProgramTree()
    loader = ManifestUnitLoader()
    backend = ArtifactContainer(loader)
    conditionals = context.config.conditionals
    return Toolchain(
        lexer_factory=lambda stream, file: Lexer(stream, file, conditionals),
        parser=SourceParser(tree, conditionals),
        type_system=SimpleTypeSystem(context, tree),
        code_generator=TreeCodeGenerator(context, backend),
        backend=backend,
        loader=loader,
        compliance=ModuleComplianceChecker(context),
        doc_exporter=XmlDocExporter(context, tree),
        tree=tree,
    )


class Driver:
    """One compilation: a parsed command line bound to a run context.

    Use :meth:`create` to parse arguments; it returns None when the command
    line is invalid.
    """

    def __init__(
        self,
        context: RunContext,
        *,
        toolchain_factory: ToolchainFactory = default_toolchain,
        out: TextIO | None = None,
    ) -> None:
        self.context = context
        self._toolchain_factory = toolchain_factory
        self._out = out
        self.pipeline: Pipeline | None = None

    @classmethod
    def create(
        cls,
        args: list[str],
        context: RunContext | None = None,
        *,
        toolchain_factory: ToolchainFactory = default_toolchain,
        pkg_config: Callable[[list[str]], list[str]] = query_libs,
        out: TextIO | None = None,
    ) -> Driver | None:
        """Parse *args* into a new driver.

        Returns:
            The driver, or None if argument parsing failed.

        Raises:
            OptionExit: If an informational option such as ``--help`` was given.
        """
        context = context if context is not None else RunContext()
        parser = OptionParser(context, pkg_config=pkg_config, out=out)
        if not parser.parse(args):
            return None
        if context.report.debug_flags > 0:
            logging.getLogger("csdriver").setLevel(logging.DEBUG)
        logger.debug(
            "Parsed %d source file(s), target %s", len(context.sources), context.config.target.value
        )
        return cls(context, toolchain_factory=toolchain_factory, out=out)

    def compile(self) -> bool:
        """Run the pipeline once.

        Returns:
            True if every phase succeeded and no error was reported.
        """
        self.pipeline = Pipeline(self.context, self._toolchain_factory(self.context), out=self._out)
        return self.pipeline.run()

    def exit_code(self, success: bool) -> int:
        if self.pipeline is None:
            return EXIT_FAILURE
        return self.pipeline.exit_code(success)

    def reset(self) -> None:
        """Discard all run state so the context can host another compilation."""
        self.context.reset()
        self.pipeline = None


def run(
    args: list[str],
    context: RunContext | None = None,
    *,
    toolchain_factory: ToolchainFactory = default_toolchain,
    pkg_config: Callable[[list[str]], list[str]] = query_libs,
    out: TextIO | None = None,
) -> int:
    """Compile once and return the process exit code.

    Prints the final tally on *out* (stdout when None).
    """
    context = context if context is not None else RunContext()
    stream = out if out is not None else sys.stdout
    try:
        driver = Driver.create(args, context, toolchain_factory=toolchain_factory, pkg_config=pkg_config, out=out)
    except OptionExit as exc:
        print(exc.text, file=stream)
        return exc.exit_code
    except FatalError:
        return EXIT_FAILURE
    if driver is None:
        return EXIT_FAILURE

    success = _compile(driver)
    code = driver.exit_code(success)

    report = context.report
    if success:
        if report.warnings > 0:
            print(f"Compilation succeeded - {report.warnings} warning(s)", file=stream)
    else:
        print(f"Compilation failed: {report.errors} error(s), {report.warnings} warnings", file=stream)
    return code


def invoke_compiler(args: list[str], error_stream: TextIO, context: RunContext | None = None) -> bool:
    """Run one hosted compilation with diagnostics written to *error_stream*.

    The run state is always reset afterwards, so a long-lived process can
    call this repeatedly with the same *context*.

    Returns:
        True if the compilation succeeded without errors.
    """
    context = context if context is not None else RunContext()
    previous_stream = context.report.stream
    context.report.stream = error_stream
    try:
        try:
            driver = Driver.create(args, context, out=error_stream)
        except OptionExit as exc:
            print(exc.text, file=error_stream)
            return False
        except FatalError:
            return False
        if driver is None:
            return False
        return _compile(driver) and context.report.errors == 0
    finally:
        context.report.stream = previous_stream
        context.reset()


# ################
# Implementation
# ################


def _compile(driver: Driver) -> bool:
    report = driver.context.report
    try:
        return driver.compile()
    except FatalError as exc:
        logger.debug("Compilation aborted: %s", exc)
        return False
    except InternalError as exc:
        report.message(f"error: internal compiler error: {exc}")
        return False
