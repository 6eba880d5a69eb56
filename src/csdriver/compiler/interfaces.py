# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Capability interfaces of the subsystems driven by the pipeline.

The pipeline only talks to these protocols, one method per phase, so tests can
substitute stubs that inject diagnostics at a chosen phase.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, TextIO

from csdriver.report import Diagnostic, Location

# ###############
# Public Interface
# ###############


class Capability(enum.Enum):
    """Optional features an output backend may or may not provide."""

    MODULE_ONLY = "module-only"
    RESOURCE_EMBEDDING = "resource-embedding"
    NATIVE_RESOURCE = "native-resource"
    ICON_RESOURCE = "icon-resource"


class EntryPointKind(enum.Enum):
    """How the runtime starts the artifact."""

    CONSOLE = "console"
    WINDOW = "window"
    DLL = "dll"


@dataclass(frozen=True)
class EntryMethod:
    """A method usable as the program entry point."""

    type_name: str
    method_name: str = "Main"
    location: Location | None = None


@dataclass(frozen=True)
class Declaration:
    """A top-level declaration found by name in the program tree.

    Attributes:
        name: Fully qualified name.
        kind: Declaration keyword (``class``, ``struct``, ``interface``, ``enum``,
            ``delegate`` or ``namespace``).
        location: Where the declaration starts.
    """

    name: str
    kind: str
    location: Location | None = None

    @property
    def is_class_or_struct(self) -> bool:
        return self.kind in ("class", "struct")


@dataclass(frozen=True)
class AssemblyAttributes:
    """Assembly-level attributes relevant to the driver."""

    cls_compliant: bool = False


@dataclass(frozen=True)
class EmitResult:
    """Outcome of code generation.

    Attributes:
        entry_point: Entry method discovered while emitting, if any.
    """

    entry_point: EntryMethod | None = None


class Token(Protocol):
    @property
    def is_eof(self) -> bool: ...

    @property
    def is_error(self) -> bool: ...


class Lexer(Protocol):
    def next(self) -> Token: ...


class Parser(Protocol):
    def parse(self, stream: TextIO, file: str) -> list[Diagnostic]:
        """Parse one source file into the shared program tree and return its diagnostics."""
        ...


class TypeSystem(Protocol):
    def resolve_core_types(self) -> bool: ...

    def resolve_tree(self) -> None: ...

    def populate(self, boot_corlib: bool) -> None: ...

    def define_types(self) -> None: ...

    def verify_using_aliases(self) -> None: ...

    def resolve_assembly_attributes(self) -> AssemblyAttributes: ...

    def close_types(self) -> None: ...

    def lookup_declaration(self, name: str) -> Declaration | None: ...


class CodeGenerator(Protocol):
    def emit(self, tree: Any) -> EmitResult: ...


class ComplianceChecker(Protocol):
    def verify(self, modules: list[Any]) -> None: ...


class DocExporter(Protocol):
    def export(self, path: str) -> bool: ...


class UnitLoader(Protocol):
    def load(self, path: Path) -> Any:
        """Load a referenced unit.

        Raises:
            UnitNotFoundError: If nothing exists at *path*.
            BadUnitFormatError: If the file is not a valid unit.
        """
        ...

    def is_module(self, path: Path) -> bool:
        """Return True if *path* is a valid module container rather than a unit."""
        ...


class OutputBackend(Protocol):
    def init(self, path: str, debug_info: bool) -> bool: ...

    def supports(self, capability: Capability) -> bool: ...

    def set_module_only(self) -> None: ...

    def add_module(self, path: Path) -> Any: ...

    def define_type(self, full_name: str) -> None: ...

    def embed_resource(self, name: str, file: str, private: bool) -> None: ...

    def add_resource_file(self, name: str, file_name: str, private: bool) -> None: ...

    def define_entry_point(self, method: EntryMethod, kind: EntryPointKind) -> None: ...

    def define_native_resource(self, file: str) -> None: ...

    def define_version_info_resource(self) -> None: ...

    def define_icon_resource(self, file: str) -> None: ...

    def save(self, path: str, debug_info: bool) -> None: ...


@dataclass
class Toolchain:
    """The set of collaborators a pipeline run drives.

    Attributes:
        lexer_factory: Creates a lexer over an open source stream.
        parser: Parses source streams into *tree*.
        type_system: Resolution phases over *tree*.
        code_generator: Emits *tree* into the output container.
        backend: Output container writer.
        loader: Loads referenced units from disk.
        compliance: CLS compliance verification of linked modules.
        doc_exporter: Documentation file writer.
        tree: The shared program tree, opaque to the driver.
    """

    lexer_factory: Callable[[TextIO, str], Lexer]
    parser: Parser
    type_system: TypeSystem
    code_generator: CodeGenerator
    backend: OutputBackend
    loader: UnitLoader
    compliance: ComplianceChecker
    doc_exporter: DocExporter
    tree: Any = None
