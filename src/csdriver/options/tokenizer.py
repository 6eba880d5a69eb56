# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tokenizer for response-file text."""

# ###############
# Public Interface
# ###############


def tokenize(text: str) -> list[str]:
    """Split response-file text into arguments.

    Arguments are separated by runs of spaces. A single or double quote opens
    a verbatim span that keeps embedded spaces and ends at the matching quote
    or at the end of the line; the quote characters themselves are dropped.
    Each line is tokenized on its own and empty lines yield nothing.

    Example:
        >>> tokenize('-r:"a b.dll" -d:X')
        ['-r:a b.dll', '-d:X']

    Args:
        text: Full content of a response file.

    Returns:
        The arguments in order of appearance.
    """
    args: list[str] = []
    for line in text.splitlines():
        args.extend(_tokenize_line(line))
    return args


# ################
# Implementation
# ################


def _tokenize_line(line: str) -> list[str]:
    tokens: list[str] = []
    current: list[str] = []
    i = 0
    length = len(line)
    while i < length:
        ch = line[i]
        if ch in ('"', "'"):
            end = ch
            i += 1
            while i < length and line[i] != end:
                current.append(line[i])
                i += 1
        elif ch == " ":
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(ch)
        i += 1
    if current:
        tokens.append("".join(current))
    return tokens
