# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for unit manifests and the namespace registry."""

import pytest

from csdriver.compiler.units import (
    BadUnitFormatError,
    LoadedUnit,
    ManifestUnitLoader,
    NamespaceRegistry,
    UnitNotFoundError,
)

# ###############
# Public Interface
# ###############


# -------- ManifestUnitLoader tests --------


class TestManifestUnitLoader:
    def test_load_assembly(self, write_unit) -> None:
        path = write_unit("Lib.dll", "Lib", ["Lib.Thing"])

        unit = ManifestUnitLoader().load(path)

        assert unit.name == "Lib"
        assert unit.path == str(path)
        assert unit.defines("Lib.Thing")
        assert unit.defines_namespace("Lib")
        assert unit.cls_compliant

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(UnitNotFoundError) as exc_info:
            ManifestUnitLoader().load(tmp_path / "Nope.dll")
        assert "not found" in exc_info.value.log

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "Broken.dll"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(BadUnitFormatError):
            ManifestUnitLoader().load(path)

    def test_unsupported_version(self, tmp_path) -> None:
        path = tmp_path / "Old.dll"
        path.write_text('{"v": "0", "kind": "assembly", "name": "Old"}', encoding="utf-8")
        with pytest.raises(BadUnitFormatError, match="unsupported unit format version"):
            ManifestUnitLoader().load(path)

    def test_module_is_not_an_assembly(self, write_unit) -> None:
        path = write_unit("Mod.netmodule", "Mod", kind="module")
        loader = ManifestUnitLoader()

        with pytest.raises(BadUnitFormatError):
            loader.load(path)
        assert loader.is_module(path)
        assert loader.load_module(path).kind == "module"

    def test_assembly_is_not_a_module(self, write_unit) -> None:
        path = write_unit("Lib.dll", "Lib")
        loader = ManifestUnitLoader()

        assert not loader.is_module(path)
        with pytest.raises(BadUnitFormatError):
            loader.load_module(path)


# -------- NamespaceRegistry tests --------


class TestNamespaceRegistry:
    def test_later_units_shadow_earlier_ones(self) -> None:
        registry = NamespaceRegistry()
        registry.add_unit_reference(LoadedUnit(name="First", types=["Shared.T"]))
        registry.add_unit_reference(LoadedUnit(name="Second", types=["Shared.T"]))

        assert registry.lookup_type("Shared.T").name == "Second"

    def test_aliased_units_are_isolated(self) -> None:
        registry = NamespaceRegistry()
        registry.define_root_namespace("Old", LoadedUnit(name="Legacy", types=["Legacy.T"]))

        assert registry.lookup_type("Legacy.T") is None
        assert registry.lookup_type("Legacy.T", alias="Old").name == "Legacy"
        assert not registry.has_namespace("Legacy")
        assert registry.find_loaded("Legacy") is not None

    def test_modules_are_visible_globally(self) -> None:
        registry = NamespaceRegistry()
        registry.add_module_reference(LoadedUnit(name="Mod", kind="module", types=["Mod.T"]))
        assert registry.lookup_type("Mod.T").name == "Mod"
        assert registry.has_namespace("Mod")

    def test_unit_is_added_once(self) -> None:
        registry = NamespaceRegistry()
        unit = LoadedUnit(name="Lib")
        registry.add_unit_reference(unit)
        registry.add_unit_reference(unit)
        assert registry.global_units == [unit]

    def test_reset(self) -> None:
        registry = NamespaceRegistry()
        registry.add_unit_reference(LoadedUnit(name="Lib"))
        registry.reset()
        assert registry.loaded_units() == []
