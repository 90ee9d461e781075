# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors
"""Command-line interface for the plugin development workflow."""

from __future__ import annotations

from .app import app

__all__ = ["app"]
