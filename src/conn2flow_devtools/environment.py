# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Models and helpers for the project-level ``environment.json`` descriptor."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import EnvironmentConfigError

ENVIRONMENT_FILENAME: Final[str] = "environment.json"
ENVIRONMENT_ENV_VAR: Final[str] = "CONN2FLOW_ENVIRONMENT"
MANIFEST_FILENAME: Final[str] = "manifest.json"
UNKNOWN_PLUGIN: Final[str] = "unknown"

_MSYS_DRIVE_RE: Final[re.Pattern[str]] = re.compile(r"^/([a-zA-Z])/(.+)$")
_PATH_SEPARATORS: Final[str] = "/\\"


def normalize_path(path: str, *, separator: str = os.sep) -> str:
    """Convert MSYS-style drive paths (``/c/Users``) into Windows paths.

    Args:
        path: Raw path taken from the descriptor.
        separator: Host path separator, injectable for tests.

    Returns:
        str: ``C:\\Users\\...`` on Windows hosts, otherwise ``path`` unchanged.
    """

    if separator == "\\":
        match = _MSYS_DRIVE_RE.match(path)
        if match:
            return f"{match.group(1)}:\\" + match.group(2).replace("/", "\\")
    return path


def join_plugin_path(base: str | Path, relative: str) -> Path:
    """Join ``relative`` onto ``base`` ignoring stray separators on either side."""

    return Path(str(base).rstrip(_PATH_SEPARATORS) + "/" + relative.lstrip(_PATH_SEPARATORS))


class DevEnvironment(BaseModel):
    """Paths of the local development environment."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    source: str | None = None
    target: str | None = None
    docker_path: str | None = Field(default=None, alias="dockerPath")
    deploys: str | None = None
    tests: str | None = None
    tests_build: str | None = Field(default=None, alias="testsBuild")

    def normalized(self) -> DevEnvironment:
        """Return a copy whose paths went through :func:`normalize_path`."""

        return self.model_copy(
            update={
                name: normalize_path(value) if value else value
                for name, value in (
                    ("source", self.source),
                    ("target", self.target),
                    ("docker_path", self.docker_path),
                    ("deploys", self.deploys),
                    ("tests", self.tests),
                    ("tests_build", self.tests_build),
                )
            },
        )


class PluginEntry(BaseModel):
    """A plugin registered in the descriptor."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str | None = None
    path: str


class ActivePlugin(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""


class PluginEnvironment(BaseModel):
    """Parsed ``environment.json`` document."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    dev_environment: DevEnvironment | None = Field(default=None, alias="devEnvironment")
    active_plugin: ActivePlugin = Field(default_factory=ActivePlugin, alias="activePlugin")
    plugins: list[PluginEntry] = Field(default_factory=list)

    def find_plugin(self, plugin_id: str) -> PluginEntry | None:
        """Return the plugin registered under ``plugin_id``."""

        for entry in self.plugins:
            if entry.id == plugin_id:
                return entry
        return None


@dataclass(frozen=True, slots=True)
class PluginIdentity:
    """Identifier and display name used in commit and tag messages."""

    id: str
    name: str

    @classmethod
    def unknown(cls) -> PluginIdentity:
        return cls(id=UNKNOWN_PLUGIN, name=UNKNOWN_PLUGIN)


@dataclass(frozen=True, slots=True)
class EnvironmentContext:
    """A loaded descriptor together with the file it came from."""

    path: Path
    document: PluginEnvironment

    @property
    def project_dir(self) -> Path:
        """Return the directory holding the descriptor."""

        return self.path.parent

    def require_active_plugin(self) -> PluginEntry:
        """Return the active plugin entry.

        Raises:
            EnvironmentConfigError: If the active id or the plugin list is missing,
                or the active id is not registered.
        """

        active_id = self.document.active_plugin.id
        if not active_id or not self.document.plugins:
            raise EnvironmentConfigError(f"{self.path}: invalid or missing activePlugin/plugins")
        entry = self.document.find_plugin(active_id)
        if entry is None:
            raise EnvironmentConfigError(f"Active plugin path not found for id {active_id}")
        return entry

    def require_dev_environment(self) -> DevEnvironment:
        """Return the normalised ``devEnvironment`` section.

        Raises:
            EnvironmentConfigError: When the section is absent.
        """

        if self.document.dev_environment is None:
            raise EnvironmentConfigError(f"{self.path}: missing devEnvironment section")
        return self.document.dev_environment.normalized()

    def default_plugin_root(self) -> Path:
        """Return ``devEnvironment.source`` joined with the active plugin path."""

        dev_env = self.require_dev_environment()
        entry = self.require_active_plugin()
        if not dev_env.source:
            raise EnvironmentConfigError(f"{self.path}: devEnvironment.source is not set")
        return join_plugin_path(dev_env.source, entry.path)

    def default_deploy_root(self) -> Path:
        """Return the deploy directory for the active plugin."""

        dev_env = self.require_dev_environment()
        entry = self.require_active_plugin()
        deploys = dev_env.deploys or f"{(dev_env.source or '').rstrip(_PATH_SEPARATORS)}/deploys/"
        return join_plugin_path(deploys, entry.path)

    def plugin_root_from_descriptor(self) -> Path:
        """Return the active plugin directory relative to the descriptor location."""

        entry = self.require_active_plugin()
        return join_plugin_path(self.project_dir, entry.path)

    def identity_for(
        self,
        *,
        plugin_path: str | None = None,
        manifest_path: str | None = None,
    ) -> PluginIdentity:
        """Resolve the plugin identity used in commit and tag messages.

        Lookup order mirrors the manifest resolution: an explicit manifest path
        matches ``<plugin.path>/manifest.json``, an explicit plugin path matches
        ``plugin.path``, otherwise the active plugin is used.
        """

        if manifest_path:
            entry = next(
                (p for p in self.document.plugins if f"{p.path}/{MANIFEST_FILENAME}" == manifest_path),
                None,
            )
        elif plugin_path:
            entry = next((p for p in self.document.plugins if p.path == plugin_path), None)
        else:
            active_id = self.document.active_plugin.id
            if not active_id:
                return PluginIdentity.unknown()
            entry = self.document.find_plugin(active_id)
            if entry is None:
                return PluginIdentity(id=active_id, name=UNKNOWN_PLUGIN)
        if entry is None:
            return PluginIdentity.unknown()
        return PluginIdentity(id=entry.id or UNKNOWN_PLUGIN, name=entry.name or UNKNOWN_PLUGIN)


def default_environment_path() -> Path:
    """Return the descriptor path from ``CONN2FLOW_ENVIRONMENT`` or the working directory."""

    override = os.environ.get(ENVIRONMENT_ENV_VAR)
    if override:
        return Path(override)
    return Path.cwd() / ENVIRONMENT_FILENAME


def load_environment(path: Path) -> EnvironmentContext:
    """Load and validate the descriptor stored at ``path``.

    Args:
        path: Location of ``environment.json``.

    Returns:
        EnvironmentContext: Parsed descriptor bound to its location.

    Raises:
        EnvironmentConfigError: When the file is missing, unparsable or invalid.
    """

    if not path.is_file():
        raise EnvironmentConfigError(f"environment.json not found at {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise EnvironmentConfigError(f"{path}: failed to parse environment JSON") from exc
    if not isinstance(payload, dict):
        raise EnvironmentConfigError(f"{path}: expected a JSON object")
    try:
        document = PluginEnvironment.model_validate(payload)
    except ValidationError as exc:
        raise EnvironmentConfigError(f"{path}: invalid environment descriptor: {exc}") from exc
    return EnvironmentContext(path=path.resolve(), document=document)


__all__ = [
    "ENVIRONMENT_ENV_VAR",
    "ENVIRONMENT_FILENAME",
    "MANIFEST_FILENAME",
    "ActivePlugin",
    "DevEnvironment",
    "EnvironmentContext",
    "PluginEntry",
    "PluginEnvironment",
    "PluginIdentity",
    "default_environment_path",
    "join_plugin_path",
    "load_environment",
    "normalize_path",
]
