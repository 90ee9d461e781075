# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors
"""Tests for uniqueness keys and collision rules."""

from __future__ import annotations

from typing import Any

import pytest

from conn2flow_devtools.resources import (
    KIND_POLICIES,
    Fragment,
    OrphanReason,
    ResourceKind,
    UniquenessIndex,
    normalize_page_path,
)


def _claim(index: UniquenessIndex, kind: ResourceKind, data: dict[str, Any], module: str | None = None):
    fragment = Fragment(kind=kind, language="pt-br", data=data, scope_module=module)
    return index.claim(fragment, KIND_POLICIES[kind])


def test_layout_ids_collide_across_global_and_module_scope() -> None:
    index = UniquenessIndex()
    first = _claim(index, ResourceKind.LAYOUTS, {"id": "main"})
    second = _claim(index, ResourceKind.LAYOUTS, {"id": "main"}, module="shop")
    assert first.accepted
    assert first.key == "pt-br|main"
    assert second.reason is OrphanReason.DUPLICATE_ID


def test_same_id_in_other_language_is_accepted() -> None:
    index = UniquenessIndex()
    assert _claim(index, ResourceKind.COMPONENTS, {"id": "card"}).accepted
    other = index.claim(
        Fragment(kind=ResourceKind.COMPONENTS, language="en", data={"id": "card"}),
        KIND_POLICIES[ResourceKind.COMPONENTS],
    )
    assert other.accepted
    assert other.key == "en|card"


def test_kinds_have_separate_namespaces() -> None:
    index = UniquenessIndex()
    assert _claim(index, ResourceKind.LAYOUTS, {"id": "x"}).accepted
    assert _claim(index, ResourceKind.COMPONENTS, {"id": "x"}).accepted


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("/Home/", "home"), ("home", "home"), ("//a/b//", "a/b"), ("", "")],
)
def test_page_paths_are_normalised(raw: str, expected: str) -> None:
    assert normalize_page_path(raw) == expected


def test_page_path_collision_is_case_and_slash_insensitive() -> None:
    index = UniquenessIndex()
    assert _claim(index, ResourceKind.PAGES, {"id": "a", "path": "/Home/"}).accepted
    clash = _claim(index, ResourceKind.PAGES, {"id": "b", "path": "home"})
    assert clash.reason is OrphanReason.DUPLICATE_PATH


def test_page_path_defaults_to_id() -> None:
    index = UniquenessIndex()
    assert _claim(index, ResourceKind.PAGES, {"id": "about"}).accepted
    clash = _claim(index, ResourceKind.PAGES, {"id": "other", "caminho": "About"}, module="site")
    assert clash.reason is OrphanReason.DUPLICATE_PATH


def test_page_ids_are_scoped_by_module() -> None:
    index = UniquenessIndex()
    assert _claim(index, ResourceKind.PAGES, {"id": "list", "path": "a/list"}, module="a").accepted
    assert _claim(index, ResourceKind.PAGES, {"id": "list", "path": "b/list"}, module="b").accepted
    duplicate = _claim(index, ResourceKind.PAGES, {"id": "list", "path": "c/list"}, module="a")
    assert duplicate.reason is OrphanReason.DUPLICATE_ID


def test_rejected_page_does_not_reserve_its_path() -> None:
    index = UniquenessIndex()
    assert _claim(index, ResourceKind.PAGES, {"id": "a", "path": "a"}).accepted
    assert _claim(index, ResourceKind.PAGES, {"id": "a", "path": "fresh"}).reason is OrphanReason.DUPLICATE_ID
    assert _claim(index, ResourceKind.PAGES, {"id": "b", "path": "fresh"}).accepted


def test_variables_with_distinct_groups_coexist() -> None:
    index = UniquenessIndex()
    assert _claim(index, ResourceKind.VARIABLES, {"id": "title", "group": "header"}).accepted
    assert _claim(index, ResourceKind.VARIABLES, {"id": "title", "group": "footer"}).accepted
    repeat = _claim(index, ResourceKind.VARIABLES, {"id": "title", "grupo": "header"})
    assert repeat.reason is OrphanReason.DUPLICATE_GROUP


def test_ungrouped_variable_after_grouped_one_is_rejected() -> None:
    index = UniquenessIndex()
    assert _claim(index, ResourceKind.VARIABLES, {"id": "title", "group": "header"}).accepted
    late = _claim(index, ResourceKind.VARIABLES, {"id": "title"})
    assert late.reason is OrphanReason.DUPLICATE_GROUP


def test_grouped_variable_after_ungrouped_one_is_accepted() -> None:
    index = UniquenessIndex()
    assert _claim(index, ResourceKind.VARIABLES, {"id": "title", "group": ""}).accepted
    assert _claim(index, ResourceKind.VARIABLES, {"id": "title", "group": "header"}).accepted
    assert _claim(index, ResourceKind.VARIABLES, {"id": "title"}).reason is OrphanReason.DUPLICATE_GROUP


def test_variable_keys_include_module() -> None:
    index = UniquenessIndex()
    assert _claim(index, ResourceKind.VARIABLES, {"id": "title"}).accepted
    scoped = _claim(index, ResourceKind.VARIABLES, {"id": "title"}, module="shop")
    assert scoped.accepted
    assert scoped.key == "pt-br|shop|title"
