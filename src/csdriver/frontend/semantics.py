# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Name resolution over the program tree and the referenced units."""

from __future__ import annotations

import logging

from csdriver.compiler.context import RunContext
from csdriver.compiler.interfaces import AssemblyAttributes, Declaration
from csdriver.compiler.units import LoadedUnit
from csdriver.frontend.tree import ProgramTree, SourceSpan, TypeDecl
from csdriver.report import Location

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

CORE_TYPES = (
    "System.Object",
    "System.ValueType",
    "System.String",
    "System.Int32",
    "System.Void",
)


class SimpleTypeSystem:
    """Resolves the names used by the program tree.

    Types are looked up first among the declarations of the tree and then in
    the units bound into the run's namespace registry.

    Args:
        context: The run providing the report and the namespace registry.
        tree: The parsed program.
    """

    def __init__(self, context: RunContext, tree: ProgramTree) -> None:
        self._context = context
        self._tree = tree
        self._declared: dict[str, TypeDecl] = {}
        self.boot_corlib = False
        self.closed = False

    def resolve_core_types(self) -> bool:
        """Check that every predefined type is declared or imported.

        Returns:
            False if any predefined type is missing; each one is reported.
        """
        missing = [name for name in CORE_TYPES if not self._type_exists(name)]
        for name in missing:
            self._context.report.error(518, f"The predefined type `{name}' is not defined or imported")
        return not missing

    def resolve_tree(self) -> None:
        """Resolve the namespaces named by ``using`` directives."""
        for using in self._tree.usings:
            if using.alias is not None:
                continue
            if not self._namespace_exists(using.target):
                self._unknown_name(using.target, using.span)

    def populate(self, boot_corlib: bool) -> None:
        """Register every declaration, reporting duplicates."""
        self.boot_corlib = boot_corlib
        self._declared.clear()
        for decl in self._tree.types:
            if decl.full_name in self._declared:
                container = decl.namespace or "global::"
                self._context.report.error(
                    101,
                    f"The namespace `{container}' already contains a definition for `{decl.name}'",
                    _location(decl.span),
                )
                continue
            self._declared[decl.full_name] = decl

    def define_types(self) -> None:
        """Resolve the base types of every declaration."""
        for decl in self._declared.values():
            for base in decl.bases:
                if self._resolve_type(base, decl) is None:
                    self._unknown_name(base, decl.span)

    def verify_using_aliases(self) -> None:
        """Check that every alias names a namespace or a type."""
        for using in self._tree.usings:
            if using.alias is None:
                continue
            if not (self._namespace_exists(using.target) or self._type_exists(using.target)):
                self._unknown_name(using.target, using.span)

    def resolve_assembly_attributes(self) -> AssemblyAttributes:
        return AssemblyAttributes(cls_compliant=bool(self._tree.cls_compliant))

    def close_types(self) -> None:
        self.closed = True
        logger.debug("Closed %d type(s)", len(self._declared))

    def lookup_declaration(self, name: str) -> Declaration | None:
        """Return the declaration named *name*, including namespaces."""
        decl = self._tree.find_type(name)
        if decl is not None:
            return Declaration(name=decl.full_name, kind=decl.kind, location=_location(decl.span))
        if name in self._tree.namespaces:
            return Declaration(name=name, kind="namespace")
        return None

    # ################
    # Implementation
    # ################

    def _type_exists(self, full_name: str) -> bool:
        if self._tree.find_type(full_name) is not None:
            return True
        return self._context.namespace.lookup_type(full_name) is not None

    def _namespace_exists(self, name: str) -> bool:
        return self._tree.declares_namespace(name) or self._context.namespace.has_namespace(name)

    def _resolve_type(self, name: str, scope: TypeDecl) -> str | None:
        aliases = {u.alias: u.target for u in self._tree.usings if u.alias is not None}
        head, _, rest = name.partition(".")
        if head in aliases:
            name = f"{aliases[head]}.{rest}" if rest else aliases[head]

        candidates = [name]
        namespace = scope.namespace
        while namespace:
            candidates.append(f"{namespace}.{name}")
            namespace = namespace.rpartition(".")[0]
        candidates.extend(f"{u.target}.{name}" for u in self._tree.usings if u.alias is None)

        for candidate in candidates:
            if self._type_exists(candidate):
                return candidate
        return None

    def _unknown_name(self, name: str, span: SourceSpan) -> None:
        self._context.report.error(
            246,
            f"The type or namespace name `{name}' could not be found. "
            "Are you missing a using directive or an assembly reference?",
            _location(span),
        )


class ModuleComplianceChecker:
    """Verifies that linked modules match a CLS-compliant assembly."""

    def __init__(self, context: RunContext) -> None:
        self._context = context

    def verify(self, modules: list[LoadedUnit]) -> None:
        for module in modules:
            if not module.cls_compliant:
                self._context.report.error(
                    3013,
                    f"Added modules must be marked with the CLSCompliant attribute to match the assembly "
                    f"(module `{module.name}')",
                )


def _location(span: SourceSpan) -> Location:
    return Location(span.file, span.line, span.column)
