# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the diagnostic report sink."""

import io

import pytest

from csdriver.report import Diagnostic, FatalError, Location, Report

# ################
# Implementation
# ################


def _report(**kwargs) -> Report:
    return Report(io.StringIO(), color=False, **kwargs)


# ###############
# Public Interface
# ###############


class TestFormatting:
    def test_error_with_location(self) -> None:
        report = _report()
        report.error(246, "The type or namespace name `Foo' could not be found", Location("a.cs", 3, 7))
        assert report.stream.getvalue() == (
            "a.cs(3,7): error CS0246: The type or namespace name `Foo' could not be found\n"
        )

    def test_driver_codes_are_printed_with_prefix(self) -> None:
        diagnostic = Diagnostic(code=-29, message="Compatibility", is_error=False)
        assert diagnostic.format() == "warning CS8029: Compatibility"

    def test_location_defaults_to_first_column(self) -> None:
        assert str(Location("b.cs", 10)) == "b.cs(10,1)"

    def test_colored_output_keeps_message(self) -> None:
        report = Report(io.StringIO(), color=True)
        report.error(1, "boom")
        assert "error CS0001: boom" in report.stream.getvalue()


class TestCounting:
    def test_errors_and_warnings_are_counted(self) -> None:
        report = _report()
        report.error(1, "one")
        report.warning(2, 1, "two")
        report.warning(3, 4, "three")
        assert (report.errors, report.warnings) == (1, 2)
        assert [d.code for d in report.diagnostics] == [1, 2, 3]

    def test_warning_above_level_is_dropped(self) -> None:
        report = _report()
        report.warning_level = 2
        report.warning(219, 3, "unused")
        assert report.warnings == 0
        assert report.stream.getvalue() == ""

    def test_ignored_warning_is_dropped(self) -> None:
        report = _report()
        report.set_ignore_warning(168)
        report.warning(168, 1, "declared but never used")
        assert report.warnings == 0

    def test_warnings_as_errors_are_counted_as_errors(self) -> None:
        report = _report()
        report.warnings_as_errors = True
        report.warning(168, 1, "declared but never used")
        assert (report.errors, report.warnings) == (1, 0)
        assert "error CS0168" in report.stream.getvalue()

    def test_runtime_missing_support_is_not_counted(self) -> None:
        report = _report()
        report.runtime_missing_support("/target:module")
        assert report.errors == 0
        assert "Your runtime does not support `/target:module'" in report.stream.getvalue()


class TestBehaviour:
    def test_fatal_raises_after_printing(self) -> None:
        report = _report()
        report.fatal = True
        with pytest.raises(FatalError):
            report.error(6, "cannot find metadata file `X'")
        assert report.errors == 1
        assert "CS0006" in report.stream.getvalue()

    def test_extra_information_precedes_next_diagnostic(self) -> None:
        report = _report()
        report.extra_information("Log: attempt")
        report.error(6, "missing")
        assert report.stream.getvalue().splitlines() == ["Log: attempt", "error CS0006: missing"]

    def test_extra_information_is_discarded_with_dropped_warning(self) -> None:
        report = _report()
        report.set_ignore_warning(5)
        report.extra_information("Log: attempt")
        report.warning(5, 1, "ignored")
        report.error(6, "missing")
        assert report.stream.getvalue() == "error CS0006: missing\n"

    def test_expected_error_is_recorded(self) -> None:
        report = _report()
        report.expected_error = 246
        assert report.expected_error_missing
        report.error(246, "missing type")
        assert report.expected_error_seen
        assert not report.expected_error_missing

    def test_stacktrace_includes_caller(self) -> None:
        report = _report()
        report.stacktrace = True
        report.error(1, "boom")
        assert "test_stacktrace_includes_caller" in report.stream.getvalue()

    def test_reset_clears_state(self) -> None:
        report = _report()
        report.error(1, "boom")
        report.set_ignore_warning(3)
        report.warning_level = 1

        report.reset()

        assert (report.errors, report.warnings, report.warning_level) == (0, 0, 4)
        assert not report.is_warning_ignored(3)
        assert report.diagnostics == []
