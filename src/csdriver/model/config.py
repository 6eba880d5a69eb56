# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Process-wide compilation settings populated by the option handlers."""

from __future__ import annotations

import enum
import locale

from pydantic import BaseModel, ConfigDict, Field

# ###############
# Public Interface
# ###############


class Target(enum.Enum):
    """Kind of artifact produced by a compilation."""

    LIBRARY = "library"
    EXE = "exe"
    WINEXE = "winexe"
    MODULE = "module"

    @property
    def extension(self) -> str:
        """Return the file extension used when deriving the output name."""
        return _TARGET_EXTENSIONS[self]

    @property
    def needs_entry_point(self) -> bool:
        """Return True if the artifact must define an entry point."""
        return self in (Target.EXE, Target.WINEXE)

    @property
    def requires_source(self) -> bool:
        """Return True if at least one source file must be given for this target."""
        return self in (Target.EXE, Target.WINEXE, Target.MODULE)


class LanguageVersion(enum.Enum):
    """Language version modes selectable with ``-langversion``."""

    ISO_1 = "ISO-1"
    ISO_2 = "ISO-2"
    DEFAULT = "Default"
    LINQ = "LINQ"


def default_encoding() -> str:
    """Return the platform default text encoding used for source files."""
    return locale.getpreferredencoding(False)


class CompileConfig(BaseModel):
    """Mutable configuration for one compilation run.

    Exactly one :class:`Target` is active. Instances are only mutated by
    option handlers and are reset between independent runs with
    :meth:`reset`.
    """

    model_config = ConfigDict(validate_assignment=True)

    target: Target = Target.EXE
    output_file: str | None = None
    debug: bool = False
    optimize: bool = False
    checked: bool = False
    unsafe: bool = False
    stdlib: bool = True
    load_default_config: bool = True
    verify_cls_compliance: bool = True
    language_version: LanguageVersion = LanguageVersion.DEFAULT
    encoding: str = Field(default_factory=default_encoding)
    main_class: str | None = None
    conditionals: list[str] = Field(default_factory=list)
    doc_file: str | None = None
    key_file: str | None = None
    key_container: str | None = None
    delay_sign: bool = False
    win32_resource: str | None = None
    win32_icon: str | None = None
    tokenize_only: bool = False
    parse_only: bool = False
    timestamps: bool = False
    verbose_parser: int = 0

    @property
    def target_ext(self) -> str:
        return self.target.extension

    def add_conditional(self, symbol: str) -> None:
        """Define a conditional compilation symbol once."""
        if symbol not in self.conditionals:
            self.conditionals.append(symbol)

    def reset(self) -> None:
        """Restore every field to its default value in place."""
        for name, info in type(self).model_fields.items():
            setattr(self, name, info.get_default(call_default_factory=True))


# ################
# Implementation
# ################

_TARGET_EXTENSIONS: dict[Target, str] = {
    Target.LIBRARY: ".dll",
    Target.EXE: ".exe",
    Target.WINEXE: ".exe",
    Target.MODULE: ".netmodule",
}
