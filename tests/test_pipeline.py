# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors
"""Tests for loading, writing and the deploy copy around aggregation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from conn2flow_devtools.errors import ResourceConfigError
from conn2flow_devtools.resources import (
    ResourceKind,
    ResourceLoader,
    load_language_map,
    run_resource_update,
)

if TYPE_CHECKING:
    from conftest import PluginBuilder


def test_writer_removes_legacy_data_file(plugin: PluginBuilder) -> None:
    legacy = plugin.root / "db" / "data" / "Data.json"
    legacy.parent.mkdir(parents=True)
    legacy.write_text("{}", encoding="utf-8")

    report = run_resource_update(plugin.root)

    assert not legacy.exists()
    assert sorted(path.name for path in report.written if path.parent.name == "data") == [
        "ComponentesData.json",
        "LayoutsData.json",
        "PaginasData.json",
        "VariaveisData.json",
    ]
    assert len(report.written) == 8


def test_summary_lists_counts_and_target(plugin: PluginBuilder) -> None:
    plugin.fragments("layouts", [{"id": "L1"}, {"id": "L1"}])
    plugin.fragments("pages", [{"id": "home"}])

    report = run_resource_update(plugin.root)

    assert report.summary() == (
        f"Target: {plugin.root}\nLayouts=1 Pages=1 Components=0 Variables=0 Orphans=1"
    )


def test_deploy_copy_leaves_source_untouched(plugin: PluginBuilder, tmp_path: Path) -> None:
    plugin.fragments("layouts", [{"id": "main"}])
    (plugin.root / ".git").mkdir()
    (plugin.root / ".git" / "HEAD").write_text("ref", encoding="utf-8")
    (plugin.root / "node_modules" / "pkg").mkdir(parents=True)
    deploy = tmp_path / "deploys" / "plugin"

    report = run_resource_update(plugin.root, deploy)

    assert report.target == deploy
    assert not (plugin.root / "db").exists()
    assert json.loads((deploy / "db" / "data" / "LayoutsData.json").read_text(encoding="utf-8"))[0]["id"] == "main"
    assert (deploy / "resources" / "resources.map.json").is_file()
    assert not (deploy / ".git").exists()
    assert not (deploy / "node_modules").exists()


def test_deploy_root_equal_to_source_writes_in_place(plugin: PluginBuilder) -> None:
    report = run_resource_update(plugin.root, plugin.root)
    assert report.target == plugin.root
    assert (plugin.root / "db" / "data" / "LayoutsData.json").is_file()


def test_missing_source_directory_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(ResourceConfigError, match="Invalid plugin source directory"):
        run_resource_update(tmp_path / "absent")


def test_missing_language_map_is_fatal(tmp_path: Path) -> None:
    (tmp_path / "resources").mkdir()
    with pytest.raises(ResourceConfigError, match="resources.map.json not found"):
        run_resource_update(tmp_path)


def test_language_map_without_languages_is_fatal(tmp_path: Path) -> None:
    resources = tmp_path / "resources"
    resources.mkdir()
    (resources / "resources.map.json").write_text('{"version": "1"}', encoding="utf-8")
    with pytest.raises(ResourceConfigError, match="missing 'languages'"):
        load_language_map(resources)


def test_loader_skips_languages_without_data_and_bad_files(tmp_path: Path) -> None:
    resources = tmp_path / "resources"
    (resources / "pt-br").mkdir(parents=True)
    (resources / "resources.map.json").write_text(
        json.dumps(
            {
                "languages": {
                    "pt-br": {"data": {"layouts": "layouts.json", "pages": "", "components": "broken.json"}},
                    "en": {"name": "English"},
                }
            }
        ),
        encoding="utf-8",
    )
    (resources / "pt-br" / "layouts.json").write_text('[{"id": "a"}, "junk", 3]', encoding="utf-8")
    (resources / "pt-br" / "broken.json").write_text("{not json", encoding="utf-8")

    loader = ResourceLoader(tmp_path, load_language_map(resources))

    assert [fragment.id for fragment in loader.global_fragments("pt-br", ResourceKind.LAYOUTS)] == ["a"]
    assert loader.global_fragments("pt-br", ResourceKind.PAGES) == []
    assert loader.global_fragments("pt-br", ResourceKind.COMPONENTS) == []
    assert loader.global_fragments("pt-br", ResourceKind.VARIABLES) == []
    assert loader.global_fragments("en", ResourceKind.LAYOUTS) == []


def test_language_entries_that_are_not_objects_declare_no_data(tmp_path: Path) -> None:
    resources = tmp_path / "resources"
    (resources / "pt-br").mkdir(parents=True)
    (resources / "resources.map.json").write_text(
        json.dumps(
            {
                "languages": {
                    "pt-br": {"data": {"layouts": "layouts.json"}},
                    "en": [],
                    "es": {"name": "Español", "data": []},
                    "fr": "fr.json",
                }
            }
        ),
        encoding="utf-8",
    )
    (resources / "pt-br" / "layouts.json").write_text('[{"id": "main"}]', encoding="utf-8")

    language_map = load_language_map(resources)

    assert language_map.codes == ["pt-br", "en", "es", "fr"]
    assert [language_map.data_files(code) for code in ("en", "es", "fr")] == [None, None, None]

    report = run_resource_update(tmp_path)

    assert report.result.count(ResourceKind.LAYOUTS) == 1


def test_modules_without_resources_are_skipped(plugin: PluginBuilder) -> None:
    plugin.module("b-shop", {"pt-br": {"layouts": [{"id": "x"}]}})
    plugin.module("a-blog", {"pt-br": {"layouts": [{"id": "y"}]}})
    (plugin.root / "modules" / "empty").mkdir()
    bare = plugin.root / "modules" / "bare"
    bare.mkdir()
    (bare / "bare.json").write_text('{"id": "bare"}', encoding="utf-8")

    loader = ResourceLoader(plugin.root, load_language_map(plugin.resources))

    assert [module.name for module in loader.modules()] == ["a-blog", "b-shop"]
