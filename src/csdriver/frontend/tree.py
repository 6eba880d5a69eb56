# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Program tree shared by the parser, the type system and the code generator."""

from __future__ import annotations

from pydantic import BaseModel, Field

# ###############
# Public Interface
# ###############


class SourceSpan(BaseModel):
    """Where a declaration starts."""

    file: str
    line: int
    column: int = 1


class MainMethod(BaseModel):
    """A static ``Main`` method that may serve as the entry point."""

    span: SourceSpan
    returns_int: bool = False


class TypeDecl(BaseModel):
    """A type declaration.

    Attributes:
        name: Simple name as written.
        full_name: Name qualified with the enclosing namespaces and types.
        kind: ``class``, ``struct``, ``interface``, ``enum`` or ``delegate``.
        namespace: Enclosing namespace, empty for the global namespace.
        bases: Non-generic base type names as written.
        main_methods: Static ``Main`` methods declared directly in the type.
    """

    name: str
    full_name: str
    kind: str
    namespace: str = ""
    span: SourceSpan
    bases: list[str] = Field(default_factory=list)
    main_methods: list[MainMethod] = Field(default_factory=list)


class UsingDirective(BaseModel):
    """A ``using N;`` or ``using A = N;`` directive."""

    target: str
    alias: str | None = None
    namespace: str = ""
    span: SourceSpan


class ProgramTree(BaseModel):
    """Everything the parser collected across all source files."""

    files: list[str] = Field(default_factory=list)
    types: list[TypeDecl] = Field(default_factory=list)
    usings: list[UsingDirective] = Field(default_factory=list)
    namespaces: list[str] = Field(default_factory=list)
    cls_compliant: bool | None = None

    def find_type(self, full_name: str) -> TypeDecl | None:
        for decl in self.types:
            if decl.full_name == full_name:
                return decl
        return None

    def declares_namespace(self, name: str) -> bool:
        prefix = name + "."
        return any(ns == name or ns.startswith(prefix) for ns in self.namespaces)
