# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors
"""Tests for the environment descriptor."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conn2flow_devtools.environment import (
    ENVIRONMENT_ENV_VAR,
    PluginIdentity,
    default_environment_path,
    join_plugin_path,
    load_environment,
    normalize_path,
)
from conn2flow_devtools.errors import EnvironmentConfigError


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_environment_parses_descriptor(environment_file: Path, tmp_path: Path) -> None:
    context = load_environment(environment_file)

    assert context.project_dir == tmp_path.resolve()
    assert context.require_active_plugin().name == "Demo Plugin"
    dev_env = context.require_dev_environment()
    assert dev_env.docker_path == "/var/www/sites/localhost/conn2flow-gestor/"
    assert context.default_plugin_root() == tmp_path / "src" / "plugin"
    assert context.default_deploy_root() == tmp_path / "deploys" / "plugin"
    assert context.plugin_root_from_descriptor() == tmp_path.resolve() / "plugin"


def test_deploy_root_defaults_below_source(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "environment.json",
        {
            "devEnvironment": {"source": "/work/src/"},
            "activePlugin": {"id": "p"},
            "plugins": [{"id": "p", "path": "/plugins/p"}],
        },
    )
    context = load_environment(path)
    assert context.default_deploy_root() == Path("/work/src/deploys/plugins/p")
    assert context.default_plugin_root() == Path("/work/src/plugins/p")


@pytest.mark.parametrize(
    "payload",
    [
        {"plugins": [{"id": "p", "path": "p"}]},
        {"activePlugin": {"id": "p"}, "plugins": []},
        {"activePlugin": {"id": "other"}, "plugins": [{"id": "p", "path": "p"}]},
    ],
)
def test_active_plugin_must_be_registered(tmp_path: Path, payload: dict[str, object]) -> None:
    context = load_environment(_write(tmp_path / "environment.json", payload))
    with pytest.raises(EnvironmentConfigError):
        context.require_active_plugin()


def test_missing_or_invalid_descriptor_raises(tmp_path: Path) -> None:
    with pytest.raises(EnvironmentConfigError, match="not found"):
        load_environment(tmp_path / "environment.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(EnvironmentConfigError, match="failed to parse"):
        load_environment(broken)

    with pytest.raises(EnvironmentConfigError, match="expected a JSON object"):
        load_environment(_write(tmp_path / "list.json", []))

    with pytest.raises(EnvironmentConfigError, match="invalid environment descriptor"):
        load_environment(_write(tmp_path / "bad.json", {"plugins": [{"name": "no id"}]}))


def test_missing_dev_environment_section(tmp_path: Path) -> None:
    context = load_environment(_write(tmp_path / "environment.json", {"activePlugin": {"id": "p"}}))
    with pytest.raises(EnvironmentConfigError, match="devEnvironment"):
        context.default_plugin_root()


def test_identity_lookup_order(environment_file: Path) -> None:
    context = load_environment(environment_file)

    assert context.identity_for() == PluginIdentity("demo", "Demo Plugin")
    assert context.identity_for(plugin_path="plugin") == PluginIdentity("demo", "Demo Plugin")
    assert context.identity_for(manifest_path="plugin/manifest.json") == PluginIdentity("demo", "Demo Plugin")
    assert context.identity_for(plugin_path="elsewhere") == PluginIdentity.unknown()
    assert context.identity_for(manifest_path="elsewhere/manifest.json") == PluginIdentity("unknown", "unknown")


def test_identity_falls_back_to_active_id(tmp_path: Path) -> None:
    context = load_environment(_write(tmp_path / "environment.json", {"activePlugin": {"id": "ghost"}}))
    assert context.identity_for() == PluginIdentity("ghost", "unknown")


def test_normalize_path_converts_msys_drives_on_windows() -> None:
    assert normalize_path("/c/Users/dev/site", separator="\\") == "c:\\Users\\dev\\site"
    assert normalize_path("/c/Users/dev/site", separator="/") == "/c/Users/dev/site"
    assert normalize_path("D:\\work", separator="\\") == "D:\\work"


def test_join_plugin_path_strips_separators() -> None:
    assert join_plugin_path("/base/", "/plugin") == Path("/base/plugin")
    assert join_plugin_path(Path("/base"), "plugin/") == Path("/base/plugin")


def test_default_environment_path_honours_variable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENVIRONMENT_ENV_VAR, str(tmp_path / "custom.json"))
    assert default_environment_path() == tmp_path / "custom.json"
    monkeypatch.delenv(ENVIRONMENT_ENV_VAR)
    monkeypatch.chdir(tmp_path)
    assert default_environment_path() == tmp_path / "environment.json"
