# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Expansion of source file arguments, wildcards and ``-recurse`` patterns."""

from __future__ import annotations

import fnmatch
import os

from csdriver.model.inputs import SourceFileSet
from csdriver.report import Report

# ###############
# Public Interface
# ###############


def split_path_and_pattern(spec: str) -> tuple[str, str]:
    """Split a source spec into its directory and file pattern.

    ``"src/*.cs"`` gives ``("src", "*.cs")``; a bare pattern uses ``"."``.
    A spec rooted at ``/`` keeps the root as its directory.
    """
    pos = spec.rfind("/")
    if pos != -1:
        if pos == 0:
            return "/", spec[1:]
        return spec[:pos], spec[pos + 1 :]
    pos = spec.rfind("\\")
    if pos != -1:
        return spec[:pos], spec[pos + 1 :]
    return ".", spec


def add_source_spec(sources: SourceFileSet, spec: str, report: Report, *, recurse: bool = False) -> None:
    """Add the files named by *spec* to *sources*.

    A spec without ``*`` in its file part is added literally; existence is
    checked later when the file is parsed. Wildcard specs are matched against
    the directory listing in sorted order, and *recurse* descends into every
    subdirectory with the same pattern.

    Args:
        sources: Destination set.
        spec: Literal path or wildcard pattern.
        report: Sink for "could not be found" and duplicate diagnostics.
        recurse: Also match the pattern in subdirectories.
    """
    path, pattern = split_path_and_pattern(spec)
    if "*" not in pattern:
        _add(sources, spec, report)
        return

    try:
        entries = sorted(os.listdir(path))
    except OSError:
        report.error(2001, f"Source file `{spec}' could not be found")
        return

    for entry in entries:
        full_path = os.path.join(path, entry)
        if os.path.isfile(full_path) and fnmatch.fnmatchcase(entry, pattern):
            _add(sources, full_path, report)

    if not recurse:
        return

    for entry in entries:
        full_path = os.path.join(path, entry)
        if os.path.isdir(full_path):
            add_source_spec(sources, f"{full_path}/{pattern}", report, recurse=True)


# ################
# Implementation
# ################


def _add(sources: SourceFileSet, path: str, report: Report) -> None:
    if not sources.add(path):
        report.warning(2002, 1, f"Source file `{path}' specified multiple times")
