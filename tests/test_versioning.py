# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors
"""Tests for manifest version bumping."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conn2flow_devtools.environment import load_environment
from conn2flow_devtools.errors import ManifestError
from conn2flow_devtools.versioning import BumpKind, bump_manifest, bump_version, resolve_manifest_path


@pytest.mark.parametrize(
    ("version", "kind", "expected"),
    [
        ("1.2.3", BumpKind.PATCH, "1.2.4"),
        ("1.2.3", BumpKind.MINOR, "1.3.0"),
        ("1.2.3", BumpKind.MAJOR, "2.0.0"),
        ("1", BumpKind.PATCH, "1.0.1"),
        ("1.2", BumpKind.MINOR, "1.3.0"),
        ("1.2.3-beta", BumpKind.PATCH, "1.2.4"),
        ("", BumpKind.PATCH, "0.0.1"),
    ],
)
def test_bump_version(version: str, kind: BumpKind, expected: str) -> None:
    assert bump_version(version, kind) == expected


def test_bump_manifest_rewrites_version(tmp_path: Path) -> None:
    manifest = tmp_path / "manifest.json"
    manifest.write_text(json.dumps({"id": "demo", "nome": "Demonstração", "version": "0.9.9"}), encoding="utf-8")

    bump = bump_manifest(manifest, BumpKind.MINOR)

    assert (bump.key, bump.previous, bump.current) == ("version", "0.9.9", "0.10.0")
    text = manifest.read_text(encoding="utf-8")
    assert json.loads(text)["version"] == "0.10.0"
    assert "Demonstração" in text
    assert '\n    "version": "0.10.0"' in text


def test_bump_manifest_falls_back_to_versao(tmp_path: Path) -> None:
    manifest = tmp_path / "manifest.json"
    manifest.write_text(json.dumps({"versao": "2.0.0"}), encoding="utf-8")

    bump = bump_manifest(manifest)

    assert bump.key == "versao"
    assert json.loads(manifest.read_text(encoding="utf-8")) == {"versao": "2.0.1"}


@pytest.mark.parametrize(
    ("content", "message"),
    [
        (None, "Manifest not found"),
        ("{oops", "Failed to parse"),
        ("[]", "Failed to parse"),
        ('{"id": "demo"}', "No 'version' field"),
    ],
)
def test_bump_manifest_errors(tmp_path: Path, content: str | None, message: str) -> None:
    manifest = tmp_path / "manifest.json"
    if content is not None:
        manifest.write_text(content, encoding="utf-8")
    with pytest.raises(ManifestError, match=message):
        bump_manifest(manifest)


def test_manifest_resolution_priority(environment_file: Path, tmp_path: Path) -> None:
    context = load_environment(environment_file)
    explicit = tmp_path / "x" / "manifest.json"

    assert resolve_manifest_path(manifest_path=explicit, plugin_path=tmp_path / "y", environment=context) == explicit
    assert resolve_manifest_path(plugin_path=tmp_path / "y", environment=context) == tmp_path / "y" / "manifest.json"
    assert resolve_manifest_path(environment=context) == tmp_path.resolve() / "plugin" / "manifest.json"
    with pytest.raises(ManifestError):
        resolve_manifest_path()
