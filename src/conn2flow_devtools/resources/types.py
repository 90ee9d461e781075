# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Shared type aliases for resource documents."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

# Output and orphan records keep insertion order, which fixes the key order on disk.
Record: TypeAlias = dict[str, Any]

__all__ = ["JSONPrimitive", "JSONValue", "Record"]
