# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Default output container: a versioned JSON artifact.

The artifact records everything the pipeline assembles (defined types,
linked modules, resources, entry point and native resources) as compact JSON
so it stays portable and human-readable.
"""

from __future__ import annotations

import base64
import json
import os
from pathlib import Path
from typing import Any

from csdriver.compiler.interfaces import Capability, EntryMethod, EntryPointKind
from csdriver.compiler.units import LoadedUnit, ManifestUnitLoader

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"


class ArtifactContainer:
    """Output backend that writes the compiled artifact as JSON.

    Args:
        loader: Reads module manifests for ``-addmodule``.
        capabilities: Features this backend supports; all of them by default.
    """

    def __init__(
        self,
        loader: ManifestUnitLoader | None = None,
        capabilities: frozenset[Capability] | None = None,
    ) -> None:
        self._loader = loader if loader is not None else ManifestUnitLoader()
        self._capabilities = frozenset(Capability) if capabilities is None else capabilities
        self.path: str | None = None
        self.debug_info = False
        self.module_only = False
        self.modules: list[LoadedUnit] = []
        self.types: list[str] = []
        self.resources: list[dict[str, Any]] = []
        self.entry_point: dict[str, str] | None = None
        self.native_resource: str | None = None
        self.version_info = False
        self.icon: str | None = None

    def init(self, path: str, debug_info: bool) -> bool:
        self.path = path
        self.debug_info = debug_info
        return True

    def supports(self, capability: Capability) -> bool:
        return capability in self._capabilities

    def set_module_only(self) -> None:
        self.module_only = True

    def add_module(self, path: Path) -> LoadedUnit:
        """Link a module manifest.

        Raises:
            UnitNotFoundError: If *path* does not exist.
            BadUnitFormatError: If *path* is not a module manifest.
        """
        module = self._loader.load_module(path)
        self.modules.append(module)
        return module

    def define_type(self, full_name: str) -> None:
        self.types.append(full_name)

    def embed_resource(self, name: str, file: str, private: bool) -> None:
        data = Path(file).read_bytes()
        self.resources.append(
            {
                "name": name,
                "embedded": True,
                "private": private,
                "data": base64.b64encode(data).decode("ascii"),
            }
        )

    def add_resource_file(self, name: str, file_name: str, private: bool) -> None:
        self.resources.append({"name": name, "embedded": False, "private": private, "file": file_name})

    def define_entry_point(self, method: EntryMethod, kind: EntryPointKind) -> None:
        self.entry_point = {"type": method.type_name, "method": method.method_name, "kind": kind.value}

    def define_native_resource(self, file: str) -> None:
        self.native_resource = os.path.basename(file)

    def define_version_info_resource(self) -> None:
        self.version_info = True

    def define_icon_resource(self, file: str) -> None:
        self.icon = os.path.basename(file)

    def save(self, path: str, debug_info: bool) -> None:
        """Write the artifact to *path*, creating parent directories as needed."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(self.to_dict(), separators=(",", ":")), encoding="utf-8")
        if debug_info:
            symbols = target.with_name(target.name + ".mdb")
            symbols.write_text(json.dumps({"v": ARTIFACT_FORMAT_VERSION, "types": self.types}), encoding="utf-8")

    def to_dict(self) -> dict[str, Any]:
        return {
            "v": ARTIFACT_FORMAT_VERSION,
            "name": Path(self.path).stem if self.path else "",
            "module-only": self.module_only,
            "types": self.types,
            "modules": [m.name for m in self.modules],
            "resources": self.resources,
            "entry-point": self.entry_point,
            "native-resource": self.native_resource,
            "version-info": self.version_info,
            "icon": self.icon,
        }
