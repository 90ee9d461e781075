# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Per-kind policies: uniqueness keys, output file names and record shapes."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Final

from .models import MODULE_FIELD, Fragment, ResourceBody, ResourceKind
from .types import Record

KEY_SEPARATOR: Final[str] = "|"
DEFAULT_STATUS: Final[str] = "A"


class UniquenessRule(Enum):
    """How fragments of a kind are deduplicated."""

    ID = "id"
    ID_AND_PATH = "id+path"
    GROUP = "group"


def compose_key(*parts: Any) -> str:
    """Join key parts with the key separator, rendering ``None`` as empty."""

    return KEY_SEPARATOR.join("" if part is None else str(part) for part in parts)


def language_id_key(fragment: Fragment) -> str:
    return compose_key(fragment.language, fragment.id)


def language_module_id_key(fragment: Fragment) -> str:
    return compose_key(fragment.language, fragment.module, fragment.id)


def page_path(fragment: Fragment) -> Any:
    """Return the declared page path, defaulting to ``<id>/``."""

    return fragment.get("path", "caminho", default=f"{fragment.id}/")


def normalize_page_path(path: Any) -> str:
    """Lowercase ``path`` and strip leading and trailing slashes."""

    return str(path).strip("/").lower()


def page_path_key(fragment: Fragment) -> str:
    return compose_key(fragment.language, normalize_page_path(page_path(fragment)))


def variable_group(fragment: Fragment) -> Any:
    return fragment.get("group", "grupo")


def _stored_id_key(record: Mapping[str, Any]) -> str | None:
    if record.get("language") is None or record.get("id") is None:
        return None
    return compose_key(record["language"], record["id"])


def _stored_page_key(record: Mapping[str, Any]) -> str | None:
    if record.get("language") is None or record.get("id") is None:
        return None
    return compose_key(record["language"], record.get(MODULE_FIELD), record["id"])


def _body_fields(fragment: Fragment, body: ResourceBody | None) -> Record:
    if body is None:
        raise ValueError(f"{fragment.kind.value} record {fragment.id!r} requires a resolved body")
    return {
        "html": body.html,
        "css": body.css,
        "framework_css": fragment.get("framework_css"),
        "status": fragment.get("status", default=DEFAULT_STATUS),
        "versao": body.version,
        "file_version": fragment.get("version"),
        "checksum": body.checksum,
    }


def _display_name(fragment: Fragment) -> Any:
    return fragment.get("name", "nome", default=fragment.raw_id)


def build_layout_record(fragment: Fragment, body: ResourceBody | None) -> Record:
    record: Record = {
        "nome": _display_name(fragment),
        "id": fragment.raw_id,
        "language": fragment.language,
    }
    if fragment.is_module:
        record[MODULE_FIELD] = fragment.scope_module
    record.update(_body_fields(fragment, body))
    return record


def build_component_record(fragment: Fragment, body: ResourceBody | None) -> Record:
    record: Record = {
        "nome": _display_name(fragment),
        "id": fragment.raw_id,
        "language": fragment.language,
        MODULE_FIELD: fragment.module,
    }
    record.update(_body_fields(fragment, body))
    return record


def build_page_record(fragment: Fragment, body: ResourceBody | None) -> Record:
    record: Record = {
        "layout_id": fragment.get("layout"),
        "nome": _display_name(fragment),
        "id": fragment.raw_id,
        "language": fragment.language,
        "caminho": page_path(fragment),
        "tipo": fragment.get("type", "tipo"),
        MODULE_FIELD: fragment.module,
        "opcao": fragment.get("option", "opcao"),
        "raiz": fragment.get("root", "raiz"),
        "sem_permissao": fragment.get("without_permission", "sem_permissao"),
    }
    record.update(_body_fields(fragment, body))
    return record


def build_variable_record(fragment: Fragment, _body: ResourceBody | None) -> Record:
    return {
        "linguagem_codigo": fragment.language,
        MODULE_FIELD: fragment.module or None,
        "id": fragment.raw_id,
        "valor": fragment.get("value", "valor"),
        "tipo": fragment.get("type", "tipo"),
        "grupo": variable_group(fragment),
        "descricao": fragment.get("description", "descricao"),
    }


RecordBuilder = Callable[[Fragment, ResourceBody | None], Record]
KeyBuilder = Callable[[Fragment], str]
StoredKeyBuilder = Callable[[Mapping[str, Any]], str | None]


@dataclass(frozen=True, slots=True)
class KindPolicy:
    """Behaviour that differs between resource kinds.

    Attributes:
        kind: Resource kind governed by the policy.
        data_filename: File name under ``db/data`` and ``db/orphans``.
        language_field: Record field carrying the language code.
        rule: Uniqueness rule applied by the index.
        key: Builds the primary uniqueness key of a fragment.
        build_record: Produces the output record.
        stored_key: Rebuilds the primary key from a previously written record;
            ``None`` for kinds without version counters.
    """

    kind: ResourceKind
    data_filename: str
    language_field: str
    rule: UniquenessRule
    key: KeyBuilder
    build_record: RecordBuilder
    stored_key: StoredKeyBuilder | None

    @property
    def has_body(self) -> bool:
        """Return ``True`` for kinds carrying HTML/CSS bodies and version counters."""

        return self.stored_key is not None


KIND_POLICIES: Final[Mapping[ResourceKind, KindPolicy]] = MappingProxyType(
    {
        ResourceKind.LAYOUTS: KindPolicy(
            kind=ResourceKind.LAYOUTS,
            data_filename="LayoutsData.json",
            language_field="language",
            rule=UniquenessRule.ID,
            key=language_id_key,
            build_record=build_layout_record,
            stored_key=_stored_id_key,
        ),
        ResourceKind.PAGES: KindPolicy(
            kind=ResourceKind.PAGES,
            data_filename="PaginasData.json",
            language_field="language",
            rule=UniquenessRule.ID_AND_PATH,
            key=language_module_id_key,
            build_record=build_page_record,
            stored_key=_stored_page_key,
        ),
        ResourceKind.COMPONENTS: KindPolicy(
            kind=ResourceKind.COMPONENTS,
            data_filename="ComponentesData.json",
            language_field="language",
            rule=UniquenessRule.ID,
            key=language_id_key,
            build_record=build_component_record,
            stored_key=_stored_id_key,
        ),
        ResourceKind.VARIABLES: KindPolicy(
            kind=ResourceKind.VARIABLES,
            data_filename="VariaveisData.json",
            language_field="linguagem_codigo",
            rule=UniquenessRule.GROUP,
            key=language_module_id_key,
            build_record=build_variable_record,
            stored_key=None,
        ),
    },
)


__all__ = [
    "DEFAULT_STATUS",
    "KIND_POLICIES",
    "KindPolicy",
    "UniquenessRule",
    "compose_key",
    "normalize_page_path",
    "page_path",
    "page_path_key",
    "variable_group",
]
