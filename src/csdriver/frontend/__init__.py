# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Default compiler front end driven by the pipeline."""

from csdriver.frontend.codegen import TreeCodeGenerator, XmlDocExporter
from csdriver.frontend.lexer import Lexer, Token, TokenType
from csdriver.frontend.parser import SourceParser
from csdriver.frontend.semantics import ModuleComplianceChecker, SimpleTypeSystem
from csdriver.frontend.tree import ProgramTree, TypeDecl, UsingDirective

__all__ = [
    "Lexer",
    "ModuleComplianceChecker",
    "ProgramTree",
    "SimpleTypeSystem",
    "SourceParser",
    "Token",
    "TokenType",
    "TreeCodeGenerator",
    "TypeDecl",
    "UsingDirective",
    "XmlDocExporter",
]
