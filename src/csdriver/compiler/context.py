# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Explicit state of one compilation run."""

from __future__ import annotations

from dataclasses import dataclass, field

from csdriver.compiler.resources import ResourceTable
from csdriver.compiler.units import NamespaceRegistry
from csdriver.host.settings import DriverSettings
from csdriver.model.config import CompileConfig
from csdriver.model.inputs import LinkPathList, ReferenceSet, SourceFileSet
from csdriver.report import Report

# ###############
# Public Interface
# ###############


@dataclass
class RunContext:
    """Everything a compilation run mutates, passed explicitly to each component.

    A context is scoped to one run; :meth:`reset` returns it to a pristine
    state so a long-lived process can host several compilations.
    """

    report: Report = field(default_factory=Report)
    config: CompileConfig = field(default_factory=CompileConfig)
    settings: DriverSettings = field(default_factory=DriverSettings)
    sources: SourceFileSet = field(default_factory=SourceFileSet)
    references: ReferenceSet = field(default_factory=ReferenceSet)
    modules: list[str] = field(default_factory=list)
    link_paths: LinkPathList = field(default_factory=LinkPathList)
    namespace: NamespaceRegistry = field(default_factory=NamespaceRegistry)
    resources: ResourceTable = field(init=False)

    def __post_init__(self) -> None:
        self.resources = ResourceTable(self.report)

    def reset(self) -> None:
        """Discard every piece of run state; settings and the report stream are kept."""
        self.report.reset()
        self.config.reset()
        self.sources = SourceFileSet()
        self.references = ReferenceSet()
        self.modules = []
        self.link_paths = LinkPathList()
        self.namespace.reset()
        self.resources.reset()
