# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Command-line and response-file option parsing."""

from csdriver.options.errors import OptionError, OptionExit
from csdriver.options.parser import OptionParser
from csdriver.options.response_files import ResponseFileError, ResponseFileSet, splice_arguments
from csdriver.options.tokenizer import tokenize

__all__ = [
    "OptionError",
    "OptionExit",
    "OptionParser",
    "ResponseFileError",
    "ResponseFileSet",
    "splice_arguments",
    "tokenize",
]
