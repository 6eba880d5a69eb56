# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the compilation configuration and the collected inputs."""

import pytest
from pydantic import ValidationError

from csdriver.model.config import CompileConfig, LanguageVersion, Target
from csdriver.model.inputs import LinkPathList, ReferenceSet, SourceFileSet

# ###############
# Public Interface
# ###############


# -------- Target tests --------


@pytest.mark.parametrize(
    ("target", "extension", "needs_entry_point", "requires_source"),
    [
        (Target.EXE, ".exe", True, True),
        (Target.WINEXE, ".exe", True, True),
        (Target.LIBRARY, ".dll", False, False),
        (Target.MODULE, ".netmodule", False, True),
    ],
)
def test_target_properties(target, extension, needs_entry_point, requires_source) -> None:
    assert target.extension == extension
    assert target.needs_entry_point is needs_entry_point
    assert target.requires_source is requires_source


# -------- CompileConfig tests --------


class TestCompileConfig:
    def test_defaults(self) -> None:
        config = CompileConfig()
        assert config.target is Target.EXE
        assert config.target_ext == ".exe"
        assert config.stdlib
        assert config.load_default_config
        assert config.verify_cls_compliance
        assert config.language_version is LanguageVersion.DEFAULT
        assert config.output_file is None
        assert config.conditionals == []

    def test_assignment_is_validated(self) -> None:
        config = CompileConfig()
        config.target = "library"
        assert config.target is Target.LIBRARY
        with pytest.raises(ValidationError):
            config.target = "bogus"

    def test_add_conditional_is_idempotent(self) -> None:
        config = CompileConfig()
        config.add_conditional("DEBUG")
        config.add_conditional("DEBUG")
        assert config.conditionals == ["DEBUG"]

    def test_reset_restores_defaults(self) -> None:
        config = CompileConfig(encoding="utf-8")
        config.target = Target.MODULE
        config.main_class = "Program"
        config.add_conditional("X")

        config.reset()

        assert config == CompileConfig(encoding=config.encoding)
        assert config.conditionals == []


# -------- input collection tests --------


class TestSourceFileSet:
    def test_first_source_survives_duplicates(self) -> None:
        sources = SourceFileSet()
        assert sources.add("a.cs")
        assert sources.add("b.cs")
        assert not sources.add("a.cs")
        assert sources.files == ["a.cs", "b.cs"]
        assert sources.first_source == "a.cs"
        assert len(sources) == 2


class TestReferenceSet:
    def test_alias_rebinding_overwrites(self) -> None:
        references = ReferenceSet()
        references.add_alias("X", "One")
        references.add_alias("X", "Two")
        assert references.aliases == {"X": "Two"}


class TestLinkPathList:
    def test_finalize_appends_system_and_working_directories_once(self) -> None:
        paths = LinkPathList()
        paths.add("user")

        paths.finalize("/runtime", "/work")
        paths.finalize("/other", "/elsewhere")

        assert list(paths) == ["user", "/runtime", "/work"]
        assert paths.finalized
