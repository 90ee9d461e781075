# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Semantic version bumping for plugin manifests."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Final

from .environment import MANIFEST_FILENAME, EnvironmentContext
from .errors import ManifestError
from .resources.io import write_json

VERSION_KEYS: Final[tuple[str, ...]] = ("version", "versao")


class BumpKind(str, Enum):
    """Semantic version component to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


def _component(raw: str) -> int:
    digits = ""
    for char in raw.strip():
        if not char.isdigit():
            break
        digits += char
    return int(digits) if digits else 0


def bump_version(version: str, kind: BumpKind) -> str:
    """Return ``version`` with the ``kind`` component incremented.

    Missing or non-numeric components read as ``0``; lower components reset
    to ``0`` when a higher one is bumped.
    """

    parts = [_component(part) for part in str(version).split(".")[:3]]
    major, minor, patch = (parts + [0, 0, 0])[:3]
    if kind is BumpKind.MAJOR:
        return f"{major + 1}.0.0"
    if kind is BumpKind.MINOR:
        return f"{major}.{minor + 1}.0"
    return f"{major}.{minor}.{patch + 1}"


def resolve_manifest_path(
    *,
    manifest_path: Path | None = None,
    plugin_path: Path | None = None,
    environment: EnvironmentContext | None = None,
) -> Path:
    """Locate the manifest to bump.

    Priority: explicit manifest, ``<plugin_path>/manifest.json``, then the
    active plugin of the environment descriptor.

    Raises:
        ManifestError: When no source can provide a manifest location.
    """

    if manifest_path is not None:
        return manifest_path
    if plugin_path is not None:
        return plugin_path / MANIFEST_FILENAME
    if environment is None:
        raise ManifestError("No manifest path, plugin path or environment descriptor available")
    return environment.plugin_root_from_descriptor() / MANIFEST_FILENAME


@dataclass(frozen=True, slots=True)
class VersionBump:
    """Result of bumping a manifest."""

    manifest: Path
    key: str
    previous: str
    current: str


def bump_manifest(manifest_path: Path, kind: BumpKind = BumpKind.PATCH) -> VersionBump:
    """Increment the version stored in ``manifest_path`` and rewrite the file.

    Args:
        manifest_path: Location of ``manifest.json``.
        kind: Component to increment.

    Returns:
        VersionBump: Previous and new versions.

    Raises:
        ManifestError: If the manifest is missing, unparsable or lacks a
            ``version``/``versao`` field.
    """

    if not manifest_path.is_file():
        raise ManifestError(f"Manifest not found: {manifest_path}")
    try:
        manifest: Any = json.loads(manifest_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Failed to parse {manifest_path}") from exc
    if not isinstance(manifest, dict) or not manifest:
        raise ManifestError(f"Failed to parse {manifest_path}")

    key = next((candidate for candidate in VERSION_KEYS if manifest.get(candidate) is not None), None)
    if key is None:
        raise ManifestError(f"No 'version' field found in {manifest_path}")
    previous = str(manifest[key])
    current = bump_version(previous, kind)
    manifest[key] = current
    write_json(manifest_path, manifest)
    return VersionBump(manifest=manifest_path, key=key, previous=previous, current=current)


__all__ = [
    "VERSION_KEYS",
    "BumpKind",
    "VersionBump",
    "bump_manifest",
    "bump_version",
    "resolve_manifest_path",
]
