# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration and input model for a compilation run."""

from csdriver.model.config import CompileConfig, LanguageVersion, Target, default_encoding
from csdriver.model.inputs import LinkPathList, ReferenceSet, SourceFileSet

__all__ = [
    "CompileConfig",
    "LanguageVersion",
    "LinkPathList",
    "ReferenceSet",
    "SourceFileSet",
    "Target",
    "default_encoding",
]
