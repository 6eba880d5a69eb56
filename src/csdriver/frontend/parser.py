# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declaration-level parser for C# source files.

The parser only recognizes what the driver needs: namespaces, type
declarations with their base lists, using directives, static ``Main``
methods and the assembly-level ``CLSCompliant`` attribute. Member bodies
are skipped by brace matching.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TextIO

from csdriver.frontend.lexer import Lexer, Token, TokenType
from csdriver.frontend.tree import MainMethod, ProgramTree, SourceSpan, TypeDecl, UsingDirective
from csdriver.report import Diagnostic, Location

# ###############
# Public Interface
# ###############

TYPE_KEYWORDS = ("class", "struct", "interface", "enum")


class SourceParser:
    """Parses source files into a shared :class:`ProgramTree`.

    Args:
        tree: Destination tree shared by all files of a run.
        conditionals: Symbols defined on the command line.
    """

    def __init__(self, tree: ProgramTree, conditionals: Iterable[str] = ()) -> None:
        self.tree = tree
        self._conditionals = list(conditionals)

    def parse(self, stream: TextIO, file: str) -> list[Diagnostic]:
        """Parse one file into the tree.

        Returns:
            The diagnostics found in the file; lexical errors come first.
        """
        lexer = Lexer(stream, file, self._conditionals)
        tokens: list[Token] = []
        diagnostics: list[Diagnostic] = []
        while True:
            token = lexer.next()
            if token.is_error:
                diagnostics.append(_diagnostic(token.code, token.value, file, token))
                continue
            tokens.append(token)
            if token.is_eof:
                break
        self.tree.files.append(file)
        diagnostics.extend(_FileParser(self.tree, file, tokens).run())
        return diagnostics


# ################
# Implementation
# ################


@dataclass
class _Scope:
    kind: str
    name: str = ""
    decl: TypeDecl | None = None
    member_start: int = 0


def _diagnostic(code: int, message: str, file: str, token: Token) -> Diagnostic:
    return Diagnostic(code=code, message=message, is_error=True, location=Location(file, token.line, token.column))


class _FileParser:
    """Walks the token list of one file with a stack of brace scopes."""

    def __init__(self, tree: ProgramTree, file: str, tokens: list[Token]) -> None:
        self._tree = tree
        self._file = file
        self._tokens = tokens
        self._pos = 0
        self._scopes: list[_Scope] = [_Scope("namespace")]
        self._pending: _Scope | None = None
        self._diagnostics: list[Diagnostic] = []

    def run(self) -> list[Diagnostic]:
        while not self._current().is_eof:
            self._step()
        if len(self._scopes) > 1:
            self._error(1513, "} expected", self._current())
        return self._diagnostics

    # Token access

    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if not token.is_eof:
            self._pos += 1
        return token

    def _error(self, code: int, message: str, token: Token) -> None:
        self._diagnostics.append(_diagnostic(code, message, self._file, token))

    def _span(self, token: Token) -> SourceSpan:
        return SourceSpan(file=self._file, line=token.line, column=token.column)

    @property
    def _scope(self) -> _Scope:
        return self._scopes[-1]

    # Dispatch

    def _step(self) -> None:
        token = self._current()
        if token.is_symbol("{"):
            self._advance()
            self._scopes.append(self._pending or _Scope("block"))
            self._pending = None
            self._scope.member_start = self._pos
            return
        if token.is_symbol("}"):
            self._advance()
            if len(self._scopes) == 1:
                self._error(1022, "Type or namespace definition, or end-of-file expected", token)
                return
            self._scopes.pop()
            self._scope.member_start = self._pos
            return
        if token.is_symbol(";"):
            self._advance()
            self._pending = None
            self._scope.member_start = self._pos
            return

        kind = self._scope.kind
        if kind == "namespace" and self._namespace_member(token):
            return
        if kind == "type" and self._type_member(token):
            return
        self._advance()

    def _namespace_member(self, token: Token) -> bool:
        if token.is_keyword("using"):
            self._using()
            return True
        if token.is_keyword("namespace"):
            self._advance()
            name = self._qualified_name()
            if name:
                full_name = f"{self._scope.name}.{name}" if self._scope.name else name
                if full_name not in self._tree.namespaces:
                    self._tree.namespaces.append(full_name)
                self._pending = _Scope("namespace", full_name)
            return True
        if token.is_symbol("[") and self._peek().type is TokenType.IDENTIFIER and self._peek().value == "assembly":
            self._assembly_attributes()
            return True
        return self._type_declaration(token)

    def _type_member(self, token: Token) -> bool:
        if self._type_declaration(token):
            return True
        if token.type is TokenType.IDENTIFIER and token.value == "Main" and self._peek().is_symbol("("):
            self._main_method(token)
            self._advance()
            return True
        return False

    # Declarations

    def _qualified_name(self) -> str:
        parts: list[str] = []
        while self._current().type is TokenType.IDENTIFIER:
            parts.append(self._advance().value)
            if self._current().is_symbol("::") or self._current().is_symbol("."):
                self._advance()
                continue
            break
        return ".".join(parts)

    def _using(self) -> None:
        start = self._advance()
        if self._current().is_symbol("("):
            return
        if self._current().is_keyword("static"):
            self._advance()
        alias = None
        if self._current().type is TokenType.IDENTIFIER and self._peek().is_symbol("="):
            alias = self._advance().value
            self._advance()
        target = self._qualified_name()
        if not target:
            self._error(1001, "Identifier expected", self._current())
            return
        self._tree.usings.append(
            UsingDirective(target=target, alias=alias, namespace=self._scope.name, span=self._span(start))
        )

    def _assembly_attributes(self) -> None:
        self._advance()
        depth = 1
        while depth and not self._current().is_eof:
            token = self._advance()
            if token.is_symbol("["):
                depth += 1
            elif token.is_symbol("]"):
                depth -= 1
            elif token.type is TokenType.IDENTIFIER and token.value in ("CLSCompliant", "CLSCompliantAttribute"):
                if self._current().is_symbol("(") and self._peek().is_keyword("true", "false"):
                    self._tree.cls_compliant = self._peek().value == "true"

    def _type_declaration(self, token: Token) -> bool:
        if token.is_keyword("delegate"):
            return self._delegate(token)
        if not token.is_keyword(*TYPE_KEYWORDS):
            return False
        name_token = self._peek()
        if name_token.type is not TokenType.IDENTIFIER:
            return False
        self._advance()
        self._advance()

        decl = self._declare(token.value, name_token)
        self._skip_type_parameters()
        if self._current().is_symbol(":"):
            self._advance()
            decl.bases.extend(self._base_list())
        while not (self._current().is_symbol("{") or self._current().is_symbol(";") or self._current().is_eof):
            self._advance()
        self._pending = _Scope("type", decl.full_name, decl)
        return True

    def _delegate(self, token: Token) -> bool:
        name_token = None
        depth = 0
        offset = 1
        while True:
            ahead = self._peek(offset)
            if ahead.is_eof or ahead.is_symbol(";") or ahead.is_symbol("{") or ahead.is_symbol("}"):
                return False
            if ahead.is_symbol("<"):
                depth += 1
            elif ahead.is_symbol(">"):
                depth -= 1
            elif ahead.is_symbol(">>"):
                depth -= 2
            elif ahead.is_symbol("(") and depth == 0:
                break
            elif ahead.type is TokenType.IDENTIFIER and depth == 0:
                name_token = ahead
            offset += 1
        if name_token is None:
            return False
        self._declare("delegate", name_token)
        while not (self._current().is_symbol(";") or self._current().is_symbol("{") or self._current().is_eof):
            self._advance()
        return True

    def _declare(self, kind: str, name_token: Token) -> TypeDecl:
        scope = self._scope
        namespace = scope.name if scope.kind == "namespace" else (scope.decl.namespace if scope.decl else "")
        full_name = f"{scope.name}.{name_token.value}" if scope.name else name_token.value
        decl = TypeDecl(
            name=name_token.value,
            full_name=full_name,
            kind=kind,
            namespace=namespace,
            span=self._span(name_token),
        )
        self._tree.types.append(decl)
        return decl

    def _skip_type_parameters(self) -> None:
        if not self._current().is_symbol("<"):
            return
        depth = 0
        while not self._current().is_eof:
            token = self._advance()
            if token.is_symbol("<"):
                depth += 1
            elif token.is_symbol(">"):
                depth -= 1
            elif token.is_symbol(">>"):
                depth -= 2
            if depth <= 0:
                return

    def _base_list(self) -> list[str]:
        bases: list[str] = []
        while self._current().type is TokenType.IDENTIFIER and self._current().value != "where":
            name = self._qualified_name()
            if self._current().is_symbol("<"):
                self._skip_type_parameters()
            else:
                bases.append(name)
            if not self._current().is_symbol(","):
                break
            self._advance()
        return bases

    def _main_method(self, token: Token) -> None:
        scope = self._scope
        decl = scope.decl
        if decl is None or decl.kind not in ("class", "struct"):
            return
        header = self._tokens[scope.member_start : self._pos]
        if not header or not any(t.is_keyword("static") for t in header):
            return
        return_type = header[-1]
        if not return_type.is_keyword("void", "int"):
            return
        decl.main_methods.append(MainMethod(span=self._span(token), returns_int=return_type.value == "int"))
