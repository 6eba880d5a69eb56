# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Code generation into the output container and XML documentation export."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from csdriver.compiler.context import RunContext
from csdriver.compiler.interfaces import EmitResult, EntryMethod, OutputBackend
from csdriver.frontend.tree import ProgramTree, TypeDecl
from csdriver.report import Location

# ###############
# Public Interface
# ###############


class TreeCodeGenerator:
    """Defines every declared type in the output and discovers the entry point.

    Args:
        context: The run providing configuration and the report.
        backend: Output container receiving the types.
    """

    def __init__(self, context: RunContext, backend: OutputBackend) -> None:
        self._context = context
        self._backend = backend

    def emit(self, tree: ProgramTree) -> EmitResult:
        """Emit *tree* and return the entry method, if one was found.

        When several static ``Main`` methods qualify and no ``-main`` class was
        given, each candidate is reported as ambiguous and no entry point is
        returned.
        """
        for decl in tree.types:
            self._backend.define_type(decl.full_name)

        config = self._context.config
        if not config.target.needs_entry_point:
            return EmitResult()

        candidates = [decl for decl in tree.types if decl.kind in ("class", "struct") and decl.main_methods]
        if config.main_class is not None:
            candidates = [decl for decl in candidates if decl.full_name == config.main_class]
            if not candidates:
                return EmitResult()

        if len(candidates) > 1:
            for decl in candidates:
                self._report_ambiguous(decl)
            return EmitResult()
        if not candidates:
            return EmitResult()

        decl = candidates[0]
        main = decl.main_methods[0]
        location = Location(main.span.file, main.span.line, main.span.column)
        return EmitResult(entry_point=EntryMethod(type_name=decl.full_name, location=location))

    def _report_ambiguous(self, decl: TypeDecl) -> None:
        span = decl.main_methods[0].span
        self._context.report.error(
            17,
            f"Program `{self._context.config.output_file}' has more than one entry point defined: "
            f"`{decl.full_name}.Main'",
            Location(span.file, span.line, span.column),
        )


class XmlDocExporter:
    """Writes the documentation file listing every declared type."""

    def __init__(self, context: RunContext, tree: ProgramTree) -> None:
        self._context = context
        self._tree = tree

    def export(self, path: str) -> bool:
        """Write the documentation XML to *path*.

        Returns:
            False if the file could not be written; the error has been reported.
        """
        output = self._context.config.output_file or ""
        root = ET.Element("doc")
        assembly = ET.SubElement(root, "assembly")
        ET.SubElement(assembly, "name").text = Path(output).stem
        members = ET.SubElement(root, "members")
        for decl in self._tree.types:
            ET.SubElement(members, "member", name=f"T:{decl.full_name}")
            for _ in decl.main_methods:
                ET.SubElement(members, "member", name=f"M:{decl.full_name}.Main")

        ET.indent(root)
        try:
            ET.ElementTree(root).write(path, encoding="utf-8", xml_declaration=True)
        except OSError as exc:
            self._context.report.error(1569, f"Error generating XML documentation file `{path}' (`{exc}')")
            return False
        return True
