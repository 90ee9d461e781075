# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Language map describing which fragment files exist per language."""

from __future__ import annotations

from pathlib import Path
from collections.abc import Mapping
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..errors import ResourceConfigError
from .io import read_json
from .models import ResourceKind

LANGUAGE_MAP_FILENAME: Final[str] = "resources.map.json"


class LanguageDataFiles(BaseModel):
    """Fragment file names of one language, relative to ``resources/<lang>``."""

    model_config = ConfigDict(extra="ignore")

    layouts: str | None = None
    pages: str | None = None
    components: str | None = None
    variables: str | None = None

    def filename_for(self, kind: ResourceKind) -> str | None:
        """Return the configured file for ``kind``; empty entries count as absent."""

        value: str | None = getattr(self, kind.value)
        return value or None


class LanguageEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    data: LanguageDataFiles | None = None
    version: str | int | None = None

    @field_validator("data", mode="before")
    @classmethod
    def _ignore_malformed_data(cls, value: Any) -> Any:
        return value if isinstance(value, Mapping) else None


class LanguageMap(BaseModel):
    """Parsed ``resources.map.json`` document."""

    model_config = ConfigDict(extra="ignore")

    languages: dict[str, LanguageEntry | None]

    @field_validator("languages", mode="before")
    @classmethod
    def _ignore_malformed_entries(cls, value: Any) -> Any:
        """Treat language entries that are not objects as languages without data."""

        if not isinstance(value, Mapping):
            return value
        return {code: entry if isinstance(entry, Mapping) else None for code, entry in value.items()}

    @property
    def codes(self) -> list[str]:
        """Return the language codes in declaration order."""

        return list(self.languages)

    def data_files(self, language: str) -> LanguageDataFiles | None:
        """Return the data files for ``language`` or ``None`` when it declares none."""

        entry = self.languages.get(language)
        if entry is None:
            return None
        return entry.data


def load_language_map(resources_dir: Path) -> LanguageMap:
    """Load the language map stored in ``resources_dir``.

    Args:
        resources_dir: The plugin's ``resources`` directory.

    Returns:
        LanguageMap: Validated language map.

    Raises:
        ResourceConfigError: If the file is missing or lacks a ``languages`` table.
    """

    path = resources_dir / LANGUAGE_MAP_FILENAME
    if not path.is_file():
        raise ResourceConfigError(f"{LANGUAGE_MAP_FILENAME} not found in: {resources_dir}")
    payload = read_json(path)
    if not isinstance(payload, dict) or "languages" not in payload:
        raise ResourceConfigError(f"Invalid structure in {path}: missing 'languages'")
    try:
        return LanguageMap.model_validate(payload)
    except ValidationError as exc:
        raise ResourceConfigError(f"Invalid structure in {path}: {exc}") from exc


__all__ = [
    "LANGUAGE_MAP_FILENAME",
    "LanguageDataFiles",
    "LanguageEntry",
    "LanguageMap",
    "load_language_map",
]
