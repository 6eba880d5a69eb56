# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Managed resources attached to the output container.

Entries are collected while the command line is parsed and emitted once,
late in the pipeline, after the output container exists.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from csdriver.compiler.interfaces import Capability, OutputBackend
from csdriver.report import InternalError, Report

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ResourceEntry:
    """A resource to embed in, or link from, the output.

    Attributes:
        name: Unique resource identifier.
        file: Source path of the resource data.
        embedded: True to copy the bytes into the output, False to record an
            external file reference.
        private: Visibility of the resource.
    """

    name: str
    file: str
    embedded: bool
    private: bool = False


class ResourceTable:
    """Resources keyed by unique name, in insertion order."""

    def __init__(self, report: Report) -> None:
        self._report = report
        self._entries: dict[str, ResourceEntry] = {}
        self._emitted = False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())

    def add(self, embedded: bool, file: str, name: str, private: bool = False) -> bool:
        """Register a resource.

        A duplicate name is reported as an error and the first entry is kept.

        Returns:
            True if the entry was added.
        """
        if name in self._entries:
            self._report.error(1508, f"The resource identifier `{name}' has already been used in this assembly")
            return False
        self._entries[name] = ResourceEntry(name=name, file=file, embedded=embedded, private=private)
        return True

    def emit_all(self, backend: OutputBackend) -> int:
        """Write every entry into *backend*.

        Each source file is checked at emission time; a vanished file is
        reported for that entry only and the remaining entries still emit.

        Returns:
            Number of entries emitted.

        Raises:
            InternalError: If called more than once.
        """
        if self._emitted:
            raise InternalError("resources were already emitted")
        self._emitted = True

        emitted = 0
        for entry in self._entries.values():
            if not os.path.isfile(entry.file):
                self._report.error(1566, f"Error reading resource file `{entry.file}'")
                continue
            if entry.embedded:
                if not backend.supports(Capability.RESOURCE_EMBEDDING):
                    self._report.runtime_missing_support("Resource embedding")
                    continue
                backend.embed_resource(entry.name, entry.file, entry.private)
            else:
                backend.add_resource_file(entry.name, os.path.basename(entry.file), entry.private)
            emitted += 1
        return emitted

    def reset(self) -> None:
        self._entries.clear()
        self._emitted = False
