# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest


def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=4, ensure_ascii=False), encoding="utf-8")
    return path


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


class PluginBuilder:
    """Write a minimal plugin tree: language map, fragment files, bodies and modules."""

    FILES = {
        "layouts": "layouts.json",
        "pages": "pages.json",
        "components": "components.json",
        "variables": "variables.json",
    }

    def __init__(self, root: Path, languages: Sequence[str] = ("pt-br",)) -> None:
        self.root = root
        self.languages = tuple(languages)
        self.write_language_map()

    @property
    def resources(self) -> Path:
        return self.root / "resources"

    def write_language_map(self) -> Path:
        payload = {
            "languages": {
                code: {"name": code, "data": dict(self.FILES), "version": "1"} for code in self.languages
            }
        }
        return write_json(self.resources / "resources.map.json", payload)

    def fragments(self, kind: str, entries: list[dict[str, Any]], *, language: str = "pt-br") -> Path:
        return write_json(self.resources / language / self.FILES[kind], entries)

    def body(
        self,
        kind: str,
        resource_id: str,
        *,
        html: str | None = None,
        css: str | None = None,
        language: str = "pt-br",
        module: str | None = None,
    ) -> Path:
        base = self.resources if module is None else self.root / "modules" / module
        directory = base / language / kind / resource_id
        directory.mkdir(parents=True, exist_ok=True)
        if html is not None:
            (directory / f"{resource_id}.html").write_text(html, encoding="utf-8")
        if css is not None:
            (directory / f"{resource_id}.css").write_text(css, encoding="utf-8")
        return directory

    def module(self, name: str, resources: dict[str, Any]) -> Path:
        return write_json(self.root / "modules" / name / f"{name}.json", {"id": name, "resources": resources})

    def data(self, filename: str) -> Any:
        return read_json(self.root / "db" / "data" / filename)

    def orphans(self, filename: str) -> Any:
        return read_json(self.root / "db" / "orphans" / filename)


@pytest.fixture
def plugin(tmp_path: Path) -> PluginBuilder:
    """Return a builder for a single-language plugin rooted in ``tmp_path/plugin``."""

    root = tmp_path / "plugin"
    root.mkdir()
    return PluginBuilder(root)


@pytest.fixture
def environment_file(tmp_path: Path) -> Path:
    """Write an ``environment.json`` whose active plugin lives in ``tmp_path/src/plugin``."""

    source = tmp_path / "src"
    return write_json(
        tmp_path / "environment.json",
        {
            "devEnvironment": {
                "source": str(source),
                "target": str(tmp_path / "target"),
                "dockerPath": "/var/www/sites/localhost/conn2flow-gestor/",
                "deploys": str(tmp_path / "deploys"),
            },
            "activePlugin": {"id": "demo"},
            "plugins": [{"id": "demo", "name": "Demo Plugin", "path": "plugin"}],
        },
    )


@pytest.fixture
def plugin_factory(tmp_path: Path):
    """Return a callable building plugins with custom language lists below ``tmp_path``."""

    def _build(name: str = "plugin", languages: Sequence[str] = ("pt-br",)) -> PluginBuilder:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        return PluginBuilder(root, languages=languages)

    return _build
