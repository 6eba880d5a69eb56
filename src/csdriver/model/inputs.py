# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Inputs collected while parsing the command line: sources, references, search paths."""

from __future__ import annotations

from dataclasses import dataclass, field

# ###############
# Public Interface
# ###############


@dataclass
class SourceFileSet:
    """Ordered, duplicate-free list of source file paths.

    Attributes:
        files: Source paths in the order they were added.
        first_source: The first path ever added; used to derive the default
            output name and to check that an entry-point target has sources.
    """

    files: list[str] = field(default_factory=list)
    first_source: str | None = None

    def add(self, path: str) -> bool:
        """Add *path*; return False if it was already present."""
        if self.first_source is None:
            self.first_source = path
        if path in self.files:
            return False
        self.files.append(path)
        return True

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self):
        return iter(self.files)


@dataclass
class ReferenceSet:
    """Units to resolve before the output container is created.

    Attributes:
        hard: References whose resolution failure is a build error.
        soft: References whose resolution failure is silently ignored.
        aliases: Extern alias bindings (identifier -> unit name). A later
            binding for the same identifier overwrites the earlier one.
    """

    hard: list[str] = field(default_factory=list)
    soft: list[str] = field(default_factory=list)
    aliases: dict[str, str] = field(default_factory=dict)

    def add_alias(self, identifier: str, name: str) -> None:
        self.aliases[identifier] = name


@dataclass
class LinkPathList:
    """Ordered directories searched for references and modules.

    User directories come first; :meth:`finalize` appends the runtime library
    directory and then the working directory.
    """

    directories: list[str] = field(default_factory=list)
    finalized: bool = False

    def add(self, directory: str) -> None:
        self.directories.append(directory)

    def finalize(self, system_directory: str, working_directory: str) -> None:
        """Append the runtime directory and the working directory once."""
        if self.finalized:
            return
        self.directories.append(system_directory)
        self.directories.append(working_directory)
        self.finalized = True

    def __iter__(self):
        return iter(self.directories)
