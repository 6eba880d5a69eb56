# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Command-line driver and pipeline orchestrator for a batch compiler."""

__version__ = "0.1.0"
