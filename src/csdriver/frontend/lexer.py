# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for C# source text.

Produces tokens on demand through :meth:`Lexer.next`. Malformed input does
not raise; it yields ``ERROR`` tokens carrying a diagnostic code so that a
tokenize-only run can count them. Conditional compilation directives
(``#define``, ``#undef``, ``#if``, ``#elif``, ``#else``, ``#endif``) are
evaluated while scanning and inactive regions are skipped.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TextIO

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """Token categories produced by the scanner."""

    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    STRING = "STRING"
    CHARACTER = "CHARACTER"
    SYMBOL = "SYMBOL"
    ERROR = "ERROR"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: Raw token text, or the diagnostic message for ``ERROR`` tokens.
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
        code: Diagnostic code of an ``ERROR`` token, otherwise 0.
    """

    type: TokenType
    value: str
    line: int
    column: int
    code: int = 0

    @property
    def is_eof(self) -> bool:
        return self.type is TokenType.EOF

    @property
    def is_error(self) -> bool:
        return self.type is TokenType.ERROR

    def is_symbol(self, text: str) -> bool:
        return self.type is TokenType.SYMBOL and self.value == text

    def is_keyword(self, *words: str) -> bool:
        return self.type is TokenType.KEYWORD and self.value in words


KEYWORDS = frozenset(
    """
    abstract as base bool break byte case catch char checked class const continue decimal default
    delegate do double else enum event explicit extern false finally fixed float for foreach goto
    if implicit in int interface internal is lock long namespace new null object operator out
    override params private protected public readonly ref return sbyte sealed short sizeof
    stackalloc static string struct switch this throw true try typeof uint ulong unchecked unsafe
    ushort using virtual void volatile while
    """.split()
)


class Lexer:
    """On-demand scanner over one source file.

    Args:
        stream: Open text stream of the source file.
        file: Name of the file, used for locations.
        conditionals: Symbols defined on the command line.
    """

    def __init__(self, stream: TextIO, file: str, conditionals: Iterable[str] = ()) -> None:
        self.file = file
        self._source = stream.read()
        self._pos = 0
        self._line = 1
        self._column = 1
        self._defines = set(conditionals)
        # One frame per open #if: (branch active, some branch already taken, parent active)
        self._frames: list[tuple[bool, bool, bool]] = []
        self._finished = False
        self._pending: Token | None = None

    def next(self) -> Token:
        """Return the next token; ``EOF`` is returned forever once reached."""
        while True:
            self._skip_trivia()
            if self._pending is not None:
                token, self._pending = self._pending, None
                return token
            if self._pos >= len(self._source):
                return self._end_of_file()
            if self._current() == "#" and self._at_line_start():
                token = self._directive()
                if token is not None:
                    return token
                continue
            if not self._active:
                self._skip_line()
                continue
            return self._scan_token()

    # ################
    # Implementation
    # ################

    @property
    def _active(self) -> bool:
        return not self._frames or self._frames[-1][0]

    def _current(self) -> str:
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self) -> str:
        if self._pos + 1 < len(self._source):
            return self._source[self._pos + 1]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _at_line_start(self) -> bool:
        start = self._source.rfind("\n", 0, self._pos) + 1
        return not self._source[start : self._pos].strip()

    def _skip_line(self) -> None:
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()

    def _skip_trivia(self) -> None:
        while self._pos < len(self._source):
            ch = self._current()
            if ch in " \t\r\n\f\v\ufeff":
                self._advance()
            elif ch == "/" and self._peek() == "/":
                self._skip_line()
            elif ch == "/" and self._peek() == "*" and self._active:
                self._skip_block_comment()
            else:
                return

    def _skip_block_comment(self) -> None:
        line, column = self._line, self._column
        self._advance()
        self._advance()
        while self._pos < len(self._source):
            if self._current() == "*" and self._peek() == "/":
                self._advance()
                self._advance()
                return
            self._advance()
        self._pending = self._error(1035, "End-of-file found, '*/' expected", line, column)

    def _end_of_file(self) -> Token:
        if self._frames and not self._finished:
            self._finished = True
            self._frames.clear()
            return self._error(1027, "#endif directive expected", self._line, self._column)
        return Token(TokenType.EOF, "", self._line, self._column)

    def _error(self, code: int, message: str, line: int, column: int) -> Token:
        return Token(TokenType.ERROR, message, line, column, code)

    # Preprocessor

    def _directive(self) -> Token | None:
        line, column = self._line, self._column
        start = self._pos
        self._skip_line()
        text = self._source[start + 1 : self._pos]
        text = text.split("//", 1)[0].strip()
        parts = text.split(None, 1)
        name = parts[0] if parts else ""
        argument = parts[1].strip() if len(parts) > 1 else ""

        if name in ("define", "undef"):
            if self._active:
                if name == "define":
                    self._defines.add(argument)
                else:
                    self._defines.discard(argument)
            return None
        if name == "if":
            parent = self._active
            taken = parent and self._evaluate(argument)
            self._frames.append((taken, taken, parent))
            return None
        if name in ("elif", "else", "endif"):
            if not self._frames:
                return self._error(1028, "Unexpected processor directive", line, column)
            _, taken, parent = self._frames.pop()
            if name == "endif":
                return None
            enabled = parent and not taken and (name == "else" or self._evaluate(argument))
            self._frames.append((enabled, taken or enabled, parent))
            return None
        if name in ("region", "endregion", "pragma", "line", "warning", "error"):
            return None
        if not self._active:
            return None
        return self._error(1024, "Wrong preprocessor directive", line, column)

    def _evaluate(self, expression: str) -> bool:
        return _ConditionEvaluator(_CONDITION_TOKEN.findall(expression), self._defines).evaluate()

    # Tokens

    def _scan_token(self) -> Token:
        ch = self._current()
        line, column = self._line, self._column

        if ch == '"' or (ch == "@" and self._peek() == '"'):
            return self._scan_string(line, column)
        if ch == "'":
            return self._scan_character(line, column)
        if ch.isdigit():
            return self._scan_number(line, column)
        if ch.isalpha() or ch == "_" or (ch == "@" and (self._peek().isalpha() or self._peek() == "_")):
            return self._scan_word(line, column)
        for symbol in _SYMBOLS:
            if self._source.startswith(symbol, self._pos):
                for _ in symbol:
                    self._advance()
                return Token(TokenType.SYMBOL, symbol, line, column)
        self._advance()
        return self._error(1056, f"Unexpected character `{ch}'", line, column)

    def _scan_string(self, line: int, column: int) -> Token:
        verbatim = self._current() == "@"
        if verbatim:
            self._advance()
        self._advance()
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == '"':
                self._advance()
                if verbatim and self._current() == '"':
                    chars.append(self._advance())
                    continue
                return Token(TokenType.STRING, "".join(chars), line, column)
            if ch == "\n" and not verbatim:
                return self._error(1010, "Newline in constant", line, column)
            if ch == "\\" and not verbatim:
                chars.append(self._advance())
                if self._pos >= len(self._source):
                    break
            chars.append(self._advance())
        return self._error(1010, "Newline in constant", line, column)

    def _scan_character(self, line: int, column: int) -> Token:
        self._advance()
        chars: list[str] = []
        while self._pos < len(self._source) and self._current() not in "'\n":
            if self._current() == "\\":
                chars.append(self._advance())
                if self._pos >= len(self._source):
                    break
            chars.append(self._advance())
        if self._current() != "'" or not chars:
            if self._current() == "'":
                self._advance()
            return self._error(1012, "Too many characters in character literal", line, column)
        self._advance()
        return Token(TokenType.CHARACTER, "".join(chars), line, column)

    def _scan_number(self, line: int, column: int) -> Token:
        match = _NUMBER.match(self._source, self._pos)
        text = match.group(0) if match else self._current()
        for _ in text:
            self._advance()
        return Token(TokenType.NUMBER, text, line, column)

    def _scan_word(self, line: int, column: int) -> Token:
        verbatim = self._current() == "@"
        if verbatim:
            self._advance()
        start = self._pos
        while self._pos < len(self._source) and (self._current().isalnum() or self._current() == "_"):
            self._advance()
        word = self._source[start : self._pos]
        if not verbatim and word in KEYWORDS:
            return Token(TokenType.KEYWORD, word, line, column)
        return Token(TokenType.IDENTIFIER, word, line, column)


_CONDITION_TOKEN = re.compile(r"&&|\|\||==|!=|!|\(|\)|[A-Za-z_][A-Za-z0-9_]*")

_NUMBER = re.compile(r"0[xX][0-9a-fA-F]+[uUlL]*|\d+(\.\d+)?([eE][+-]?\d+)?[fFdDmMuUlL]*")

# Longest symbols first so that prefixes do not shadow them.
_SYMBOLS = sorted(
    """
    << >> <= >= == != && || ++ -- += -= *= /= %= &= |= ^= -> ?? :: <<= >>=
    { } ( ) [ ] ; , . : ? + - * / % & | ^ ! ~ = < >
    """.split(),
    key=len,
    reverse=True,
)


class _ConditionEvaluator:
    """Evaluates a ``#if`` expression over the defined symbols.

    Grammar: ``or := and ('||' and)*``, ``and := eq ('&&' eq)*``,
    ``eq := unary (('==' | '!=') unary)*``, ``unary := '!' unary | primary``,
    ``primary := '(' or ')' | true | false | SYMBOL``. Malformed expressions
    evaluate to False.
    """

    def __init__(self, words: list[str], defines: set[str]) -> None:
        self._words = words
        self._defines = defines
        self._pos = 0

    def evaluate(self) -> bool:
        try:
            value = self._or()
        except IndexError:
            return False
        return value if self._pos == len(self._words) else False

    def _take(self) -> str:
        word = self._words[self._pos]
        self._pos += 1
        return word

    def _at(self, *words: str) -> bool:
        return self._pos < len(self._words) and self._words[self._pos] in words

    def _or(self) -> bool:
        value = self._and()
        while self._at("||"):
            self._take()
            value = self._and() or value
        return value

    def _and(self) -> bool:
        value = self._equality()
        while self._at("&&"):
            self._take()
            value = self._equality() and value
        return value

    def _equality(self) -> bool:
        value = self._unary()
        while self._at("==", "!="):
            operator = self._take()
            other = self._unary()
            value = value == other if operator == "==" else value != other
        return value

    def _unary(self) -> bool:
        if self._at("!"):
            self._take()
            return not self._unary()
        return self._primary()

    def _primary(self) -> bool:
        word = self._take()
        if word == "(":
            value = self._or()
            if self._take() != ")":
                raise IndexError("unbalanced parenthesis")
            return value
        if word == "true":
            return True
        if word == "false":
            return False
        if word in (")", "&&", "||", "==", "!=", "!"):
            raise IndexError(f"unexpected `{word}'")
        return word in self._defines
