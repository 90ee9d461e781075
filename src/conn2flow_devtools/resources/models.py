# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Value types shared by the resource aggregation pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final

from .types import Record

ORPHAN_REASON_FIELD: Final[str] = "_motivo"
MODULE_FIELD: Final[str] = "modulo"


class ResourceKind(str, Enum):
    """Resource kinds compiled into the plugin data files."""

    LAYOUTS = "layouts"
    PAGES = "pages"
    COMPONENTS = "components"
    VARIABLES = "variables"


# Global resources are processed in this order for every language.
PROCESSING_ORDER: Final[tuple[ResourceKind, ...]] = (
    ResourceKind.LAYOUTS,
    ResourceKind.COMPONENTS,
    ResourceKind.PAGES,
    ResourceKind.VARIABLES,
)


class OrphanReason(str, Enum):
    """Reasons attached to fragments rejected during aggregation."""

    MISSING_ID = "missing id"
    DUPLICATE_ID = "duplicate id"
    DUPLICATE_PATH = "duplicate path"
    DUPLICATE_GROUP = "duplicate group"


def first_present(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first value among ``keys`` that is present and not ``None``."""

    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def is_missing_identifier(value: Any) -> bool:
    """Return ``True`` for identifiers that cannot key a resource.

    ``None``, empty strings, ``"0"``, ``0``, ``False`` and empty lists or
    objects are all rejected.
    """

    if value is None or value is False:
        return True
    if isinstance(value, (list, tuple, dict)):
        return not value
    if isinstance(value, str):
        return value in {"", "0"}
    if isinstance(value, (int, float)):
        return value == 0
    return False


@dataclass(frozen=True, slots=True)
class Fragment:
    """One resource item read from a language file or a module document.

    Attributes:
        kind: Resource kind of the fragment.
        language: Language code the fragment was read for.
        data: Raw fields of the fragment.
        scope_module: Module directory name for module fragments, ``None`` for
            the global tree.
    """

    kind: ResourceKind
    language: str
    data: Record
    scope_module: str | None = None

    @property
    def raw_id(self) -> Any:
        return self.data.get("id")

    @property
    def id(self) -> str:
        """Return the identifier as used inside uniqueness keys."""

        return str(self.raw_id)

    @property
    def has_identifier(self) -> bool:
        return not is_missing_identifier(self.raw_id)

    @property
    def is_module(self) -> bool:
        return self.scope_module is not None

    @property
    def module(self) -> str | None:
        """Return the owning module: the module directory, else the declared module field."""

        if self.scope_module is not None:
            return self.scope_module
        declared = first_present(self.data, "module", "modulo")
        return None if declared is None else str(declared)

    def get(self, *keys: str, default: Any = None) -> Any:
        """Read a field through its English and Portuguese spellings."""

        return first_present(self.data, *keys, default=default)


@dataclass(frozen=True, slots=True)
class ResourceBody:
    """HTML/CSS body of a resource plus its computed version metadata."""

    html: str | None
    css: str | None
    version: int
    checksum: str


@dataclass(slots=True)
class AggregationResult:
    """Collections produced by one aggregation run."""

    records: dict[ResourceKind, list[Record]] = field(
        default_factory=lambda: {kind: [] for kind in ResourceKind},
    )
    orphans: dict[ResourceKind, list[Record]] = field(
        default_factory=lambda: {kind: [] for kind in ResourceKind},
    )

    def count(self, kind: ResourceKind) -> int:
        return len(self.records[kind])

    @property
    def orphan_total(self) -> int:
        """Return the number of orphans across every kind."""

        return sum(len(items) for items in self.orphans.values())


__all__ = [
    "MODULE_FIELD",
    "ORPHAN_REASON_FIELD",
    "PROCESSING_ORDER",
    "AggregationResult",
    "Fragment",
    "OrphanReason",
    "ResourceBody",
    "ResourceKind",
    "first_present",
    "is_missing_identifier",
]
