# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for name resolution over the program tree."""

import io

import pytest

from csdriver.compiler.context import RunContext
from csdriver.compiler.units import LoadedUnit
from csdriver.frontend.parser import SourceParser
from csdriver.frontend.semantics import CORE_TYPES, ModuleComplianceChecker, SimpleTypeSystem
from csdriver.frontend.tree import ProgramTree
from csdriver.report import Report

# ################
# Implementation
# ################


def _context(*units: LoadedUnit) -> RunContext:
    context = RunContext(report=Report(io.StringIO(), color=False))
    for unit in units:
        context.namespace.add_unit_reference(unit)
    return context


def _corlib() -> LoadedUnit:
    return LoadedUnit(name="mscorlib", types=[*CORE_TYPES, "System.Collections.ArrayList"])


def _type_system(source: str, context: RunContext) -> SimpleTypeSystem:
    tree = ProgramTree()
    SourceParser(tree).parse(io.StringIO(source), "test.cs")
    return SimpleTypeSystem(context, tree)


def _codes(context: RunContext) -> list[int]:
    return [d.code for d in context.report.diagnostics]


# ###############
# Public Interface
# ###############


class TestCoreTypes:
    def test_core_types_from_reference(self) -> None:
        context = _context(_corlib())
        assert _type_system("class C { }", context).resolve_core_types()
        assert context.report.errors == 0

    def test_missing_core_types_are_each_reported(self) -> None:
        context = _context()
        assert not _type_system("class C { }", context).resolve_core_types()
        assert _codes(context) == [518] * len(CORE_TYPES)

    def test_core_types_declared_in_source(self) -> None:
        """A corlib build declares the predefined types itself."""
        source = (
            "namespace System { class Object { } struct ValueType { } class String { } "
            "struct Int32 { } struct Void { } }"
        )
        context = _context()
        assert _type_system(source, context).resolve_core_types()


class TestResolution:
    def test_unknown_using_namespace(self) -> None:
        context = _context(_corlib())
        type_system = _type_system("using Missing.Things;\nclass C { }", context)

        type_system.resolve_tree()

        assert _codes(context) == [246]
        assert context.report.diagnostics[0].location.line == 1

    def test_using_namespace_from_reference_or_source(self) -> None:
        context = _context(_corlib())
        type_system = _type_system("using System.Collections;\nusing Mine;\nnamespace Mine { class C { } }", context)
        type_system.resolve_tree()
        assert context.report.errors == 0

    def test_duplicate_declarations(self) -> None:
        context = _context(_corlib())
        type_system = _type_system("namespace N { class A { } }\nnamespace N { class A { } }", context)

        type_system.populate(boot_corlib=False)

        assert _codes(context) == [101]
        assert "The namespace `N' already contains a definition for `A'" in context.report.stream.getvalue()

    @pytest.mark.parametrize(
        "source",
        [
            "class A { } class B : A { }",
            "using System.Collections;\nclass B : ArrayList { }",
            "using Col = System.Collections;\nclass B : Col.ArrayList { }",
            "namespace N { class A { } }\nnamespace N.Inner { class B : A { } }",
            "class B : System.Object { }",
        ],
    )
    def test_base_types_resolve(self, source) -> None:
        context = _context(_corlib())
        type_system = _type_system(source, context)
        type_system.populate(boot_corlib=False)
        type_system.define_types()
        assert context.report.errors == 0

    def test_unknown_base_type(self) -> None:
        context = _context(_corlib())
        type_system = _type_system("class B : Missing { }", context)
        type_system.populate(boot_corlib=False)

        type_system.define_types()

        assert _codes(context) == [246]

    def test_using_alias_verification(self) -> None:
        context = _context(_corlib())
        type_system = _type_system(
            "using Good = System.Collections;\nusing List = System.Collections.ArrayList;\nusing Bad = Nope;", context
        )

        type_system.verify_using_aliases()

        assert _codes(context) == [246]
        assert "`Nope'" in context.report.stream.getvalue()


class TestQueries:
    def test_assembly_attributes(self) -> None:
        context = _context(_corlib())
        type_system = _type_system("[assembly: CLSCompliant(true)]", context)
        assert type_system.resolve_assembly_attributes().cls_compliant

    def test_lookup_declaration(self) -> None:
        context = _context(_corlib())
        type_system = _type_system("namespace N { interface I { } class C { } }", context)

        assert type_system.lookup_declaration("N.C").is_class_or_struct
        assert type_system.lookup_declaration("N.I").kind == "interface"
        assert type_system.lookup_declaration("N").kind == "namespace"
        assert type_system.lookup_declaration("Missing") is None

    def test_close_types(self) -> None:
        type_system = _type_system("class C { }", _context(_corlib()))
        type_system.close_types()
        assert type_system.closed


class TestModuleComplianceChecker:
    def test_non_compliant_module_is_reported(self) -> None:
        context = _context()
        modules = [
            LoadedUnit(name="good", kind="module", cls_compliant=True),
            LoadedUnit(name="bad", kind="module"),
        ]

        ModuleComplianceChecker(context).verify(modules)

        assert _codes(context) == [3013]
        assert "module `bad'" in context.report.stream.getvalue()
