# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Materialise resource fragments and bodies from a plugin tree."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from .io import coerce_fragment_list, read_bytes_if_exists, read_fragment_list, read_json_object
from .language_map import LanguageMap
from .models import Fragment, ResourceKind

LOGGER = logging.getLogger(__name__)

RESOURCES_DIRNAME: Final[str] = "resources"
MODULES_DIRNAME: Final[str] = "modules"


@dataclass(frozen=True, slots=True)
class ModuleSource:
    """A module directory and the ``resources`` table of its document."""

    name: str
    path: Path
    resources: Mapping[str, Any] = field(default_factory=dict)

    def entries(self, language: str, kind: ResourceKind) -> list[dict[str, Any]]:
        """Return the raw fragment entries declared for ``language`` and ``kind``."""

        per_language = self.resources.get(language)
        if not isinstance(per_language, Mapping):
            return []
        return coerce_fragment_list(per_language.get(kind.value))


class ResourceLoader:
    """Read fragments and bodies below a plugin root.

    Global fragments live in ``resources/<lang>/<file>`` as named by the
    language map; module fragments are embedded in
    ``modules/<mod>/<mod>.json`` under ``resources.<lang>.<kind>``.
    """

    def __init__(self, plugin_root: Path, language_map: LanguageMap) -> None:
        self.plugin_root = plugin_root
        self.language_map = language_map

    @property
    def resources_dir(self) -> Path:
        return self.plugin_root / RESOURCES_DIRNAME

    @property
    def modules_dir(self) -> Path:
        return self.plugin_root / MODULES_DIRNAME

    def global_fragments(self, language: str, kind: ResourceKind) -> list[Fragment]:
        """Return the global fragments of ``kind`` for ``language``.

        Languages without data files and kinds without a configured file
        yield an empty list, as do missing fragment files.
        """

        data_files = self.language_map.data_files(language)
        if data_files is None:
            return []
        filename = data_files.filename_for(kind)
        if filename is None:
            return []
        entries = read_fragment_list(self.resources_dir / language / filename)
        return [Fragment(kind=kind, language=language, data=entry) for entry in entries]

    def modules(self) -> list[ModuleSource]:
        """Return the modules carrying a ``resources`` table, sorted by directory name."""

        if not self.modules_dir.is_dir():
            return []
        sources: list[ModuleSource] = []
        for module_path in sorted(path for path in self.modules_dir.iterdir() if path.is_dir()):
            document = read_json_object(module_path / f"{module_path.name}.json")
            resources = document.get("resources") if document else None
            if not isinstance(resources, Mapping) or not resources:
                LOGGER.debug("skipping module %s without resources", module_path.name)
                continue
            sources.append(ModuleSource(name=module_path.name, path=module_path, resources=resources))
        return sources

    def module_fragments(self, module: ModuleSource, language: str, kind: ResourceKind) -> list[Fragment]:
        return [
            Fragment(kind=kind, language=language, data=entry, scope_module=module.name)
            for entry in module.entries(language, kind)
        ]

    def body_dir(self, fragment: Fragment) -> Path:
        """Return the directory holding ``<id>.html`` and ``<id>.css`` for ``fragment``."""

        relative = Path(fragment.language) / fragment.kind.value / fragment.id
        if fragment.scope_module is None:
            return self.resources_dir / relative
        module_path = self.modules_dir / fragment.scope_module
        primary = module_path / relative
        if primary.is_dir():
            return primary
        legacy = module_path / RESOURCES_DIRNAME / relative
        return legacy if legacy.is_dir() else primary

    def read_body(self, fragment: Fragment) -> tuple[bytes | None, bytes | None]:
        """Return the raw HTML and CSS bodies of ``fragment``; missing files read as ``None``."""

        directory = self.body_dir(fragment)
        html = read_bytes_if_exists(directory / f"{fragment.id}.html")
        css = read_bytes_if_exists(directory / f"{fragment.id}.css")
        return html, css


__all__ = ["MODULES_DIRNAME", "RESOURCES_DIRNAME", "ModuleSource", "ResourceLoader"]
