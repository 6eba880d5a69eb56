# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end tests for the driver facade with the default toolchain."""

import base64
import io
import json
import logging
from pathlib import Path

import pytest

from csdriver.compiler.context import RunContext
from csdriver.compiler.driver import Driver, invoke_compiler, run
from csdriver.report import Report

# ################
# Implementation
# ################

HELLO = """\
using System;

namespace App {
    class Program {
        static void Main() { Console.WriteLine("hi"); }
    }
}
"""


def _context() -> RunContext:
    return RunContext(report=Report(io.StringIO(), color=False))


def _run(args: list[str]) -> tuple[int, RunContext, str]:
    context = _context()
    out = io.StringIO()
    code = run(args, context, out=out)
    return code, context, out.getvalue()


def _diagnostics(context: RunContext) -> str:
    return context.report.stream.getvalue()


def _write(directory: Path, name: str, text: str) -> str:
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def _artifact(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


# ###############
# Public Interface
# ###############


# -------- successful compilation tests --------


class TestSuccessfulCompilation:
    def test_console_program(self, tmp_path: Path) -> None:
        """A program with one static Main compiles into an artifact with that entry point."""
        source = _write(tmp_path, "hello.cs", HELLO)
        output = tmp_path / "hello.exe"

        code, context, out = _run([source, f"-out:{output}"])

        assert code == 0
        assert out == ""
        artifact = _artifact(output)
        assert artifact["types"] == ["App.Program"]
        assert artifact["entry-point"] == {"type": "App.Program", "method": "Main", "kind": "console"}
        assert artifact["version-info"] is True

    def test_output_name_defaults_to_first_source(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "hello.cs", HELLO)
        code, _, _ = _run([source])
        assert code == 0
        assert (tmp_path / "hello.exe").is_file()

    def test_warnings_are_tallied(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "hello.cs", HELLO)
        code, _, out = _run(["--unsafe", source, f"-out:{tmp_path / 'hello.exe'}"])
        assert code == 0
        assert out == "Compilation succeeded - 1 warning(s)\n"

    def test_debug_writes_symbols(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "hello.cs", HELLO)
        code, _, _ = _run(["-debug", source, f"-out:{tmp_path / 'hello.exe'}"])
        assert code == 0
        assert (tmp_path / "hello.exe.mdb").is_file()

    def test_library_with_embedded_resource(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "lib.cs", "namespace Lib { public class Util { } }")
        data = _write(tmp_path, "strings.txt", "hello")

        code, _, _ = _run(["-target:library", f"-res:{data},Strings", source])

        assert code == 0
        artifact = _artifact(tmp_path / "lib.dll")
        assert artifact["entry-point"] is None
        [resource] = artifact["resources"]
        assert resource["name"] == "Strings"
        assert base64.b64decode(resource["data"]) == b"hello"

    def test_module_target(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "part.cs", "class Part { }")
        code, _, _ = _run(["-target:module", source])
        assert code == 0
        assert _artifact(tmp_path / "part.netmodule")["module-only"] is True

    def test_added_module_types_are_visible(self, tmp_path: Path) -> None:
        """Types of a linked module resolve as base types."""
        manifest = {"v": "1", "kind": "module", "name": "Helper", "types": ["Helpers.Tool"], "cls-compliant": True}
        _write(tmp_path, "Helper.netmodule", json.dumps(manifest))
        source = _write(tmp_path, "app.cs", "class Derived : Helpers.Tool { }")

        code, context, _ = _run(["-target:library", f"-lib:{tmp_path}", "-addmodule:Helper", source])

        assert code == 0, _diagnostics(context)
        assert _artifact(tmp_path / "app.dll")["modules"] == ["Helper"]

    def test_main_option_selects_entry_point(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "two.cs", "class A { static void Main() { } }\nclass B { static void Main() { } }")

        code, _, _ = _run(["-main:B", source])

        assert code == 0
        assert _artifact(tmp_path / "two.exe")["entry-point"]["type"] == "B"

    def test_documentation_file(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "hello.cs", HELLO)
        code, _, _ = _run([source, f"-doc:{tmp_path / 'hello.xml'}"])
        assert code == 0
        assert "T:App.Program" in (tmp_path / "hello.xml").read_text(encoding="utf-8")

    def test_conditional_symbols_reach_the_source(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "cond.cs", "#if HAS_MAIN\nclass P { static void Main() { } }\n#endif\n")
        code, context, _ = _run([source])
        assert code == 1
        assert "CS5001" in _diagnostics(context)
        code, _, _ = _run(["-d:HAS_MAIN", source])
        assert code == 0


# -------- failing compilation tests --------


class TestFailingCompilation:
    def test_ambiguous_entry_points(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "two.cs", "class A { static void Main() { } }\nclass B { static void Main() { } }")

        code, context, out = _run([source])

        assert code == 1
        assert _diagnostics(context).count("error CS0017") == 2
        assert out == "Compilation failed: 2 error(s), 0 warnings\n"
        assert not (tmp_path / "two.exe").exists()

    def test_main_option_on_library(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "hello.cs", HELLO)
        code, context, _ = _run(["-target:library", "-main:App.Program", source])
        assert code == 1
        assert "error CS2017" in _diagnostics(context)
        assert not (tmp_path / "hello.dll").exists()

    def test_unrecognized_option(self, tmp_path: Path) -> None:
        code, context, out = _run(["-frobnicate"])
        assert code == 1
        assert "error CS2007" in _diagnostics(context)
        assert out == ""

    def test_no_sources(self) -> None:
        code, context, _ = _run([])
        assert code == 1
        assert "error CS2008: No files to compile were specified" in _diagnostics(context)

    def test_missing_namespace_without_default_references(self, tmp_path: Path) -> None:
        """System.Xml comes from a default reference that -noconfig suppresses."""
        source = _write(tmp_path, "xml.cs", "using System.Xml;\nclass P { static void Main() { } }")

        assert _run([source])[0] == 0
        code, context, _ = _run(["-noconfig", source])

        assert code == 1
        assert "error CS0246" in _diagnostics(context)

    def test_nostdlib_lacks_core_types(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "hello.cs", HELLO)
        code, context, _ = _run(["-nostdlib", source])
        assert code == 1
        assert _diagnostics(context).count("error CS0518") == 5

    def test_missing_reference(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "hello.cs", HELLO)
        code, context, _ = _run(["-r:Nowhere", source])
        assert code == 1
        assert "error CS0006: cannot find metadata file `Nowhere'" in _diagnostics(context)

    def test_non_compliant_module_in_compliant_assembly(self, tmp_path: Path) -> None:
        manifest = {"v": "1", "kind": "module", "name": "Legacy", "types": [], "cls-compliant": False}
        _write(tmp_path, "Legacy.netmodule", json.dumps(manifest))
        source = _write(tmp_path, "lib.cs", "using System;\n[assembly: CLSCompliant(true)]\nclass C { }")

        code, context, _ = _run(["-target:library", f"-lib:{tmp_path}", "-addmodule:Legacy", source])

        assert code == 1
        assert "error CS3013" in _diagnostics(context)

    def test_fatal_stops_at_first_error(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "bad.cs", "class A : Missing { }\nclass B : AlsoMissing { }")
        code, context, _ = _run(["--fatal", "-target:library", source])
        assert code == 1
        assert context.report.errors == 1

    def test_fatal_during_option_parsing(self, tmp_path: Path) -> None:
        code, context, _ = _run(["--fatal", "-target:bogus", "a.cs"])
        assert code == 1
        assert "error CS2019" in _diagnostics(context)


# -------- expected error tests --------


class TestExpectedError:
    def test_expected_error_reported(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "bad.cs", "class A : Missing { }")
        code, _, _ = _run(["--expect-error", "246", "-target:library", source])
        assert code == 0

    def test_expected_error_missing(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "hello.cs", HELLO)
        code, _, out = _run(["--expect-error", "1234", source])
        assert code == 2
        assert "Failed to report expected error 1234." in out


# -------- informational tests --------


class TestInformational:
    def test_help(self) -> None:
        code, _, out = _run(["--help"])
        assert code == 0
        assert "-target:KIND" in out

    def test_tokenize(self, tmp_path: Path) -> None:
        source = _write(tmp_path, "t.cs", "class A { }")
        code, _, out = _run(["--tokenize", source])
        assert code == 0
        assert out == "Tokenized: 4 found 0 errors\n"


# -------- Driver tests --------


class TestDriver:
    def test_create_returns_none_for_invalid_arguments(self) -> None:
        assert Driver.create(["-bogus"], _context()) is None

    def test_debug_flags_enable_debug_logging(self, tmp_path: Path) -> None:
        logger = logging.getLogger("csdriver")
        previous = logger.level
        try:
            driver = Driver.create(["--mcs-debug", "1", _write(tmp_path, "hello.cs", HELLO)], _context())
            assert driver is not None
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)

    def test_exit_code_before_compile(self, tmp_path: Path) -> None:
        driver = Driver.create([_write(tmp_path, "hello.cs", HELLO)], _context())
        assert driver.exit_code(True) == 1

    def test_reset_clears_run_state(self, tmp_path: Path) -> None:
        context = _context()
        driver = Driver.create([_write(tmp_path, "hello.cs", HELLO), "-d:X"], context, out=io.StringIO())
        assert driver.compile()

        driver.reset()

        assert context.sources.files == []
        assert context.config.conditionals == []
        assert context.namespace.global_units == []
        assert driver.pipeline is None


# -------- invoke_compiler tests --------


class TestInvokeCompiler:
    def test_success_and_reset(self, tmp_path: Path) -> None:
        """The hosted entry point leaves the context ready for another run."""
        context = _context()
        original_stream = context.report.stream
        errors = io.StringIO()
        source = _write(tmp_path, "hello.cs", HELLO)

        assert invoke_compiler([source], errors, context)

        assert context.report.stream is original_stream
        assert context.sources.files == []
        assert context.report.errors == 0
        assert invoke_compiler([source], errors, context)

    def test_failure_writes_to_error_stream(self, tmp_path: Path) -> None:
        context = _context()
        errors = io.StringIO()
        source = _write(tmp_path, "bad.cs", "class A : Missing { }")

        assert not invoke_compiler(["-target:library", source], errors, context)

        assert "error CS0246" in errors.getvalue()
        assert context.report.errors == 0

    def test_invalid_arguments(self) -> None:
        errors = io.StringIO()
        assert not invoke_compiler([], errors, _context())
        assert "CS2008" in errors.getvalue()

    @pytest.mark.parametrize("arg", ["--help", "--version"])
    def test_informational_options_do_not_succeed(self, arg: str) -> None:
        errors = io.StringIO()
        assert not invoke_compiler([arg], errors, _context())
        assert "csdriver" in errors.getvalue()
