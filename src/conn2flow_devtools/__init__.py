# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors
"""Developer workflow tooling for Conn2Flow plugins."""

from __future__ import annotations

from importlib import metadata

__all__ = ["__version__"]

try:
    __version__ = metadata.version("conn2flow-devtools")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
