# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Merge global and module fragments into the plugin data collections."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from .checksum import VersionCalculator
from .index import UniquenessIndex
from .io import decode_body
from .kinds import KIND_POLICIES, KindPolicy
from .loader import ResourceLoader
from .models import (
    MODULE_FIELD,
    ORPHAN_REASON_FIELD,
    PROCESSING_ORDER,
    AggregationResult,
    Fragment,
    OrphanReason,
    ResourceBody,
    ResourceKind,
)
from .types import Record

LOGGER = logging.getLogger(__name__)


def build_orphan(fragment: Fragment, reason: OrphanReason, policy: KindPolicy) -> Record:
    """Annotate a rejected fragment without overwriting its own fields."""

    orphan: Record = dict(fragment.data)
    orphan.setdefault(ORPHAN_REASON_FIELD, reason.value)
    orphan.setdefault(policy.language_field, fragment.language)
    if fragment.is_module:
        orphan.setdefault(MODULE_FIELD, fragment.scope_module)
    return orphan


class ResourceAggregator:
    """Run one aggregation pass over a plugin tree.

    The aggregator owns the uniqueness index and the output collections for
    the duration of :meth:`aggregate`; each call starts from scratch.
    """

    def __init__(
        self,
        loader: ResourceLoader,
        *,
        previous: Mapping[ResourceKind, Mapping[str, Record]] | None = None,
        policies: Mapping[ResourceKind, KindPolicy] = KIND_POLICIES,
    ) -> None:
        self._loader = loader
        self._versions = VersionCalculator(previous)
        self._policies = policies

    def aggregate(self) -> AggregationResult:
        """Process every language for the global tree, then for every module.

        Returns:
            AggregationResult: Output and orphan collections per kind.
        """

        result = AggregationResult()
        index = UniquenessIndex()
        languages = self._loader.language_map.codes

        for language in languages:
            for kind in PROCESSING_ORDER:
                self._process(self._loader.global_fragments(language, kind), index, result)

        for module in self._loader.modules():
            for language in languages:
                for kind in PROCESSING_ORDER:
                    self._process(self._loader.module_fragments(module, language, kind), index, result)
        return result

    def _process(
        self,
        fragments: Iterable[Fragment],
        index: UniquenessIndex,
        result: AggregationResult,
    ) -> None:
        for fragment in fragments:
            policy = self._policies[fragment.kind]
            if not fragment.has_identifier:
                self._reject(fragment, OrphanReason.MISSING_ID, policy, result)
                continue
            claim = index.claim(fragment, policy)
            if claim.reason is not None:
                self._reject(fragment, claim.reason, policy, result)
                continue
            body = self._resolve_body(fragment, claim.key, policy)
            result.records[fragment.kind].append(policy.build_record(fragment, body))

    def _resolve_body(self, fragment: Fragment, key: str, policy: KindPolicy) -> ResourceBody | None:
        if not policy.has_body:
            return None
        raw_html, raw_css = self._loader.read_body(fragment)
        version, checksum = self._versions.resolve(fragment.kind, key, raw_html, raw_css)
        return ResourceBody(
            html=decode_body(raw_html, source=f"{key} html"),
            css=decode_body(raw_css, source=f"{key} css"),
            version=version,
            checksum=checksum.to_json(),
        )

    @staticmethod
    def _reject(
        fragment: Fragment,
        reason: OrphanReason,
        policy: KindPolicy,
        result: AggregationResult,
    ) -> None:
        LOGGER.debug(
            "orphaned %s fragment id=%r language=%s module=%s reason=%s",
            fragment.kind.value,
            fragment.raw_id,
            fragment.language,
            fragment.scope_module or "-",
            reason.value,
        )
        result.orphans[fragment.kind].append(build_orphan(fragment, reason, policy))


__all__ = ["ResourceAggregator", "build_orphan"]
