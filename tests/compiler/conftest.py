# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for compiler tests: a run context and a recording stub toolchain."""

import io
import json
from dataclasses import dataclass
from pathlib import Path

import pytest

from csdriver.compiler.context import RunContext
from csdriver.compiler.interfaces import (
    AssemblyAttributes,
    Capability,
    EmitResult,
    EntryMethod,
    Toolchain,
)
from csdriver.compiler.units import ManifestUnitLoader
from csdriver.report import Report

# ################
# Implementation
# ################


@dataclass(frozen=True)
class StubToken:
    is_eof: bool = False
    is_error: bool = False


class StubLexer:
    """Yields one token per whitespace-separated word; the word ``ERR`` is an error token."""

    def __init__(self, stream, file):
        self._words = stream.read().split()

    def next(self):
        if not self._words:
            return StubToken(is_eof=True)
        return StubToken(is_error=self._words.pop(0) == "ERR")


class StubParser:
    def __init__(self, diagnostics=None, raise_for=()):
        self.files = []
        self._diagnostics = diagnostics or {}
        self._raise_for = set(raise_for)

    def parse(self, stream, file):
        self.files.append(file)
        if file in self._raise_for:
            raise RuntimeError("parser crashed")
        return list(self._diagnostics.get(file, []))


class StubTypeSystem:
    """Records every phase call and reports error 999 in the phase named by *fail_at*."""

    def __init__(self, report, *, fail_at=None, core_ok=True, declarations=None, cls_compliant=False):
        self.calls = []
        self.boot_corlib = None
        self._report = report
        self._fail_at = fail_at
        self._core_ok = core_ok
        self._declarations = declarations or {}
        self._cls_compliant = cls_compliant

    def _phase(self, name):
        self.calls.append(name)
        if name == self._fail_at:
            self._report.error(999, f"injected failure in {name}")

    def resolve_core_types(self):
        self._phase("resolve_core_types")
        return self._core_ok

    def resolve_tree(self):
        self._phase("resolve_tree")

    def populate(self, boot_corlib):
        self.boot_corlib = boot_corlib
        self._phase("populate")

    def define_types(self):
        self._phase("define_types")

    def verify_using_aliases(self):
        self._phase("verify_using_aliases")

    def resolve_assembly_attributes(self):
        self._phase("resolve_assembly_attributes")
        return AssemblyAttributes(cls_compliant=self._cls_compliant)

    def close_types(self):
        self._phase("close_types")

    def lookup_declaration(self, name):
        return self._declarations.get(name)


class StubCodeGenerator:
    def __init__(self, report, entry_point=None, fail=False):
        self.emitted = False
        self._report = report
        self._entry_point = entry_point
        self._fail = fail

    def emit(self, tree):
        self.emitted = True
        if self._fail:
            self._report.error(999, "injected failure in emit")
        return EmitResult(entry_point=self._entry_point)


class StubBackend:
    """Output backend recording each call; modules are read from real manifests."""

    def __init__(self, capabilities=None):
        self.capabilities = frozenset(Capability) if capabilities is None else capabilities
        self.calls = []
        self.saved = None
        self.entry_point = None
        self._loader = ManifestUnitLoader()

    def init(self, path, debug_info):
        self.calls.append(("init", path))
        return True

    def supports(self, capability):
        return capability in self.capabilities

    def set_module_only(self):
        self.calls.append(("module_only",))

    def add_module(self, path):
        module = self._loader.load_module(Path(path))
        self.calls.append(("module", module.name))
        return module

    def define_type(self, full_name):
        self.calls.append(("type", full_name))

    def embed_resource(self, name, file, private):
        self.calls.append(("embed", name))

    def add_resource_file(self, name, file_name, private):
        self.calls.append(("link", name, file_name))

    def define_entry_point(self, method, kind):
        self.entry_point = (method, kind)

    def define_native_resource(self, file):
        self.calls.append(("native", file))

    def define_version_info_resource(self):
        self.calls.append(("version_info",))

    def define_icon_resource(self, file):
        self.calls.append(("icon", file))

    def save(self, path, debug_info):
        self.saved = path


class StubCompliance:
    def __init__(self):
        self.verified = None

    def verify(self, modules):
        self.verified = list(modules)


class StubDocExporter:
    def __init__(self, ok=True):
        self.exported = None
        self._ok = ok

    def export(self, path):
        self.exported = path
        return self._ok


# ###############
# Public Interface
# ###############


@pytest.fixture
def context():
    """A fresh run context whose diagnostics go to an in-memory stream."""
    run = RunContext(report=Report(io.StringIO(), color=False))
    run.config.encoding = "utf-8"
    return run


@pytest.fixture
def add_source(tmp_path, context):
    """Write a source file into the temporary directory and register it with the context."""

    def _add(name="prog.cs", text="class Program { }"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        context.sources.add(str(path))
        return str(path)

    return _add


@pytest.fixture
def write_unit(tmp_path):
    """Write a unit manifest into the temporary directory."""

    def _write(file_name, name, types=(), kind="assembly", cls_compliant=True, directory=None):
        target = Path(directory) if directory is not None else tmp_path
        path = target / file_name
        manifest = {"v": "1", "kind": kind, "name": name, "types": list(types), "cls-compliant": cls_compliant}
        path.write_text(json.dumps(manifest), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_toolchain(context):
    """Build a stub toolchain; the keyword arguments configure the stubs."""

    def _make(
        *,
        entry_point=EntryMethod("Program"),
        fail_at=None,
        core_ok=True,
        declarations=None,
        cls_compliant=False,
        emit_fails=False,
        capabilities=None,
        doc_ok=True,
        parse_diagnostics=None,
        parse_crashes=(),
    ):
        report = context.report
        return Toolchain(
            lexer_factory=StubLexer,
            parser=StubParser(parse_diagnostics, parse_crashes),
            type_system=StubTypeSystem(
                report,
                fail_at=fail_at,
                core_ok=core_ok,
                declarations=declarations,
                cls_compliant=cls_compliant,
            ),
            code_generator=StubCodeGenerator(report, entry_point=entry_point, fail=emit_fails),
            backend=StubBackend(capabilities),
            loader=ManifestUnitLoader(),
            compliance=StubCompliance(),
            doc_exporter=StubDocExporter(doc_ok),
        )

    return _make

