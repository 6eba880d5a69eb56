# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compilation run state, reference resolution and the staged pipeline."""

from csdriver.compiler.context import RunContext
from csdriver.compiler.interfaces import (
    AssemblyAttributes,
    Capability,
    Declaration,
    EmitResult,
    EntryMethod,
    EntryPointKind,
    Toolchain,
)
from csdriver.compiler.output import ArtifactContainer
from csdriver.compiler.pipeline import Pipeline
from csdriver.compiler.references import ReferenceResolver, is_valid_extern_alias
from csdriver.compiler.resources import ResourceEntry, ResourceTable
from csdriver.compiler.units import (
    BadUnitFormatError,
    LoadedUnit,
    ManifestUnitLoader,
    NamespaceRegistry,
    UnitNotFoundError,
)

__all__ = [
    "ArtifactContainer",
    "AssemblyAttributes",
    "BadUnitFormatError",
    "Capability",
    "Declaration",
    "EmitResult",
    "EntryMethod",
    "EntryPointKind",
    "LoadedUnit",
    "ManifestUnitLoader",
    "NamespaceRegistry",
    "Pipeline",
    "ReferenceResolver",
    "ResourceEntry",
    "ResourceTable",
    "RunContext",
    "Toolchain",
    "UnitNotFoundError",
    "is_valid_extern_alias",
]
