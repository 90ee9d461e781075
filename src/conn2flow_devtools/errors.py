# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Exceptions shared by the devtools workflows."""

from __future__ import annotations


class DevtoolsError(RuntimeError):
    """Base class for fatal errors raised by devtools workflows."""


class EnvironmentConfigError(DevtoolsError):
    """Raised when ``environment.json`` is missing or structurally invalid."""


class ResourceConfigError(DevtoolsError):
    """Raised when a plugin resource tree cannot be aggregated."""


class ManifestError(DevtoolsError):
    """Raised when a plugin manifest cannot be read or bumped."""


__all__ = (
    "DevtoolsError",
    "EnvironmentConfigError",
    "ManifestError",
    "ResourceConfigError",
)
