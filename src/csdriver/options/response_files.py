# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Response-file loading and argument splicing."""

from __future__ import annotations

from pathlib import Path

from csdriver.options.tokenizer import tokenize

# ###############
# Public Interface
# ###############

SEPARATOR = "--"


class ResponseFileError(Exception):
    """Raised when a response file cannot be included.

    Attributes:
        code: Diagnostic code to report.
    """

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code


class ResponseFileSet:
    """Names of the response files already expanded during one run."""

    def __init__(self) -> None:
        self._seen: list[str] = []

    def __contains__(self, name: str) -> bool:
        return name in self._seen

    def load(self, name: str, encoding: str = "utf-8") -> list[str]:
        """Record *name* as included and return its tokenized arguments.

        Raises:
            ResponseFileError: If *name* was already included or cannot be read.
        """
        if name in self._seen:
            raise ResponseFileError(1515, f"Response file `{name}' specified multiple times")
        self._seen.append(name)
        try:
            text = Path(name).read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise ResponseFileError(2011, f"Unable to open response file: {name}") from exc
        return tokenize(text)


def splice_arguments(args: list[str], extra: list[str]) -> list[str]:
    """Return *args* with *extra* inserted before the first ``--`` separator.

    When *args* holds no separator, *extra* is appended at the end. Arguments
    after an existing separator therefore stay literal source names.
    """
    try:
        split = args.index(SEPARATOR)
    except ValueError:
        return [*args, *extra]
    return [*args[:split], *extra, *args[split:]]
