# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Uniqueness bookkeeping shared by the global and module passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .kinds import KindPolicy, UniquenessRule, page_path_key, variable_group
from .models import Fragment, OrphanReason, ResourceKind


@dataclass(frozen=True, slots=True)
class Claim:
    """Outcome of registering a fragment with the index.

    Attributes:
        key: Primary uniqueness key of the fragment.
        reason: Orphan reason when the claim was rejected, ``None`` on success.
    """

    key: str
    reason: OrphanReason | None = None

    @property
    def accepted(self) -> bool:
        return self.reason is None


def _is_empty_group(group: Any) -> bool:
    return group is None or group == ""


@dataclass(slots=True)
class UniquenessIndex:
    """Keys claimed so far during one aggregation run.

    Each kind owns one namespace shared by the global tree and every module,
    so a module layout reusing a global layout's language and id collides.
    """

    ids: dict[ResourceKind, set[str]] = field(default_factory=lambda: {kind: set() for kind in ResourceKind})
    page_paths: set[str] = field(default_factory=set)
    variable_groups: dict[str, list[Any]] = field(default_factory=dict)

    def claim(self, fragment: Fragment, policy: KindPolicy) -> Claim:
        """Register ``fragment`` under the rule of ``policy``.

        Args:
            fragment: Fragment carrying a usable identifier.
            policy: Policy of the fragment's kind.

        Returns:
            Claim: The primary key and, when rejected, the orphan reason. A
            rejected claim leaves the index untouched.
        """

        key = policy.key(fragment)
        if policy.rule is UniquenessRule.GROUP:
            return self._claim_group(fragment, key)

        claimed = self.ids[policy.kind]
        if key in claimed:
            return Claim(key, OrphanReason.DUPLICATE_ID)
        if policy.rule is UniquenessRule.ID_AND_PATH:
            path_key = page_path_key(fragment)
            if path_key in self.page_paths:
                return Claim(key, OrphanReason.DUPLICATE_PATH)
            self.page_paths.add(path_key)
        claimed.add(key)
        return Claim(key)

    def _claim_group(self, fragment: Fragment, key: str) -> Claim:
        # An ungrouped entry needs an untouched key; a grouped entry only needs
        # its own group to be free. Whichever arrives first wins.
        groups = self.variable_groups.setdefault(key, [])
        group = variable_group(fragment)
        if _is_empty_group(group):
            if groups:
                return Claim(key, OrphanReason.DUPLICATE_GROUP)
            groups.append("")
            return Claim(key)
        if group in groups:
            return Claim(key, OrphanReason.DUPLICATE_GROUP)
        groups.append(group)
        return Claim(key)


__all__ = ["Claim", "UniquenessIndex"]
