# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Persist aggregated collections and read back the previous run."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .io import read_fragment_list, write_json
from .kinds import KIND_POLICIES, KindPolicy
from .models import AggregationResult, ResourceKind
from .types import Record

DATA_DIR: Final[Path] = Path("db") / "data"
ORPHANS_DIR: Final[Path] = Path("db") / "orphans"
LEGACY_DATA_FILENAME: Final[str] = "Data.json"


@dataclass(frozen=True, slots=True)
class DataLayout:
    """Output locations below a plugin root."""

    plugin_root: Path

    @property
    def data_dir(self) -> Path:
        return self.plugin_root / DATA_DIR

    @property
    def orphans_dir(self) -> Path:
        return self.plugin_root / ORPHANS_DIR

    @property
    def legacy_file(self) -> Path:
        return self.data_dir / LEGACY_DATA_FILENAME

    def data_file(self, policy: KindPolicy) -> Path:
        return self.data_dir / policy.data_filename

    def orphan_file(self, policy: KindPolicy) -> Path:
        return self.orphans_dir / policy.data_filename


def load_previous_records(
    layout: DataLayout,
    policies: Mapping[ResourceKind, KindPolicy] = KIND_POLICIES,
) -> dict[ResourceKind, dict[str, Record]]:
    """Index the records of the last written data files by uniqueness key.

    Args:
        layout: Output locations of the plugin.
        policies: Kind policies providing the stored-key builders.

    Returns:
        dict[ResourceKind, dict[str, Record]]: Previous records per kind. Kinds
        without version counters and records lacking key fields are skipped.
    """

    previous: dict[ResourceKind, dict[str, Record]] = {}
    for kind, policy in policies.items():
        if policy.stored_key is None:
            continue
        keyed: dict[str, Record] = {}
        for record in read_fragment_list(layout.data_file(policy)):
            key = policy.stored_key(record)
            if key is not None:
                keyed[key] = record
        previous[kind] = keyed
    return previous


class ResourceWriter:
    """Overwrite the data and orphan files with the collections of one run."""

    def __init__(
        self,
        layout: DataLayout,
        policies: Mapping[ResourceKind, KindPolicy] = KIND_POLICIES,
    ) -> None:
        self._layout = layout
        self._policies = policies

    def write(self, result: AggregationResult) -> list[Path]:
        """Write every collection and drop the legacy combined file.

        Args:
            result: Collections produced by the aggregator.

        Returns:
            list[Path]: Files written, data files first.
        """

        written: list[Path] = []
        for kind, policy in self._policies.items():
            path = self._layout.data_file(policy)
            write_json(path, result.records[kind])
            written.append(path)
        for kind, policy in self._policies.items():
            path = self._layout.orphan_file(policy)
            write_json(path, result.orphans[kind])
            written.append(path)
        if self._layout.legacy_file.is_file():
            self._layout.legacy_file.unlink()
        return written


__all__ = [
    "DATA_DIR",
    "LEGACY_DATA_FILENAME",
    "ORPHANS_DIR",
    "DataLayout",
    "ResourceWriter",
    "load_previous_records",
]
