# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the csdriver documentation."""

project = "csdriver"
author = "CSDriver Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]

html_theme = "alabaster"
