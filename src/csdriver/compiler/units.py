# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading of referenced units and the namespace they populate.

Referenced assemblies and linkable modules are stored as JSON manifests.
The format is versioned so future schema changes can be detected::

    {"v": "1", "kind": "assembly", "name": "System", "types": ["System.Uri"], "cls-compliant": true}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

# ###############
# Public Interface
# ###############

UNIT_FORMAT_VERSION = "1"

ASSEMBLY_KIND = "assembly"
MODULE_KIND = "module"


class UnitNotFoundError(Exception):
    """Raised when no file exists at the requested location.

    Attributes:
        log: Loader diagnostic text for this attempt.
    """

    def __init__(self, path: Path) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path
        self.log = f"Attempted to load '{path}': not found"


class BadUnitFormatError(Exception):
    """Raised when a file exists but is not a structurally valid unit.

    Attributes:
        path: The offending file.
        log: Loader diagnostic text.
    """

    def __init__(self, path: Path, log: str) -> None:
        super().__init__(f"Invalid unit '{path}': {log}")
        self.path = path
        self.log = log


class LoadedUnit(BaseModel):
    """A referenced assembly or linked module."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    kind: str = ASSEMBLY_KIND
    path: str = ""
    types: list[str] = Field(default_factory=list)
    cls_compliant: bool = Field(alias="cls-compliant", default=False)

    def defines(self, type_name: str) -> bool:
        return type_name in self.types

    def defines_namespace(self, namespace: str) -> bool:
        prefix = namespace + "."
        return any(t.startswith(prefix) for t in self.types)


class ManifestUnitLoader:
    """Reads JSON unit manifests from disk."""

    def load(self, path: Path) -> LoadedUnit:
        """Load an assembly manifest.

        Raises:
            UnitNotFoundError: If *path* does not exist.
            BadUnitFormatError: If *path* is not a valid assembly manifest.
        """
        unit = self._read(path)
        if unit.kind != ASSEMBLY_KIND:
            raise BadUnitFormatError(path, f"expected an assembly manifest, found '{unit.kind}'")
        return unit

    def load_module(self, path: Path) -> LoadedUnit:
        """Load a module manifest.

        Raises:
            UnitNotFoundError: If *path* does not exist.
            BadUnitFormatError: If *path* is not a valid module manifest.
        """
        unit = self._read(path)
        if unit.kind != MODULE_KIND:
            raise BadUnitFormatError(path, f"expected a module manifest, found '{unit.kind}'")
        return unit

    def is_module(self, path: Path) -> bool:
        try:
            self.load_module(path)
        except (UnitNotFoundError, BadUnitFormatError):
            return False
        return True

    def _read(self, path: Path) -> LoadedUnit:
        if not path.is_file():
            raise UnitNotFoundError(path)
        try:
            obj = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise BadUnitFormatError(path, str(exc)) from exc
        if not isinstance(obj, dict):
            raise BadUnitFormatError(path, "manifest must be a JSON object")
        version = obj.get("v")
        if version != UNIT_FORMAT_VERSION:
            raise BadUnitFormatError(path, f"unsupported unit format version: {version!r}")
        try:
            return LoadedUnit.model_validate({**_without_version(obj), "path": str(path)})
        except ValidationError as exc:
            raise BadUnitFormatError(path, str(exc)) from exc


class NamespaceRegistry:
    """Identifiers made visible by resolved references and linked modules.

    Unaliased units merge into the global root. Aliased units are only
    reachable through their extern alias. Units loaded later shadow the
    identifiers of units loaded earlier.
    """

    def __init__(self) -> None:
        self.global_units: list[LoadedUnit] = []
        self.aliased_units: dict[str, list[LoadedUnit]] = {}
        self.modules: list[LoadedUnit] = []

    def add_unit_reference(self, unit: LoadedUnit) -> None:
        if unit not in self.global_units:
            self.global_units.append(unit)

    def define_root_namespace(self, alias: str, unit: LoadedUnit) -> None:
        self.aliased_units.setdefault(alias, []).append(unit)

    def add_module_reference(self, module: LoadedUnit) -> None:
        self.modules.append(module)

    def loaded_units(self) -> list[LoadedUnit]:
        """Return every loaded unit, global and aliased, in load order."""
        units = list(self.global_units)
        for aliased in self.aliased_units.values():
            units.extend(aliased)
        return units

    def find_loaded(self, simple_name: str) -> LoadedUnit | None:
        """Return an already-loaded unit by its simple name."""
        for unit in self.loaded_units():
            if unit.name == simple_name:
                return unit
        return None

    def lookup_type(self, full_name: str, alias: str | None = None) -> LoadedUnit | None:
        """Return the unit that provides *full_name*, honouring shadowing order."""
        units = self.aliased_units.get(alias, []) if alias is not None else [*self.global_units, *self.modules]
        for unit in reversed(units):
            if unit.defines(full_name):
                return unit
        return None

    def has_namespace(self, namespace: str) -> bool:
        return any(unit.defines_namespace(namespace) for unit in [*self.global_units, *self.modules])

    def reset(self) -> None:
        self.global_units.clear()
        self.aliased_units.clear()
        self.modules.clear()


# ################
# Implementation
# ################


def _without_version(obj: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in obj.items() if k != "v"}
