# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""End-to-end resource update: optional deploy copy, aggregate, write."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..errors import ResourceConfigError
from .aggregator import ResourceAggregator
from .language_map import load_language_map
from .loader import RESOURCES_DIRNAME, ResourceLoader
from .models import AggregationResult, ResourceKind
from .writer import DataLayout, ResourceWriter, load_previous_records

COPY_IGNORED: Final[tuple[str, ...]] = (".git", "node_modules")


@dataclass(frozen=True, slots=True)
class ResourceUpdateReport:
    """Outcome of :func:`run_resource_update`."""

    target: Path
    result: AggregationResult
    written: tuple[Path, ...]

    def summary(self) -> str:
        """Return the two-line plain-text summary printed by the CLI."""

        result = self.result
        return (
            f"Target: {self.target}\n"
            f"Layouts={result.count(ResourceKind.LAYOUTS)} "
            f"Pages={result.count(ResourceKind.PAGES)} "
            f"Components={result.count(ResourceKind.COMPONENTS)} "
            f"Variables={result.count(ResourceKind.VARIABLES)} "
            f"Orphans={result.orphan_total}"
        )


def copy_plugin_tree(source: Path, destination: Path) -> None:
    """Copy ``source`` over ``destination``, skipping VCS and dependency folders.

    Raises:
        ResourceConfigError: If the destination cannot be created.
    """

    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ResourceConfigError(f"Invalid deploy directory and failed to create it: {destination}") from exc
    shutil.copytree(
        source,
        destination,
        ignore=shutil.ignore_patterns(*COPY_IGNORED),
        dirs_exist_ok=True,
    )


def run_resource_update(plugin_root: Path, deploy_root: Path | None = None) -> ResourceUpdateReport:
    """Aggregate the resources of ``plugin_root`` and write the data files.

    Args:
        plugin_root: Source plugin directory.
        deploy_root: Optional deploy directory. When it differs from
            ``plugin_root`` the plugin is copied there first and only the copy
            is written to.

    Returns:
        ResourceUpdateReport: Effective target, collections and written files.

    Raises:
        ResourceConfigError: When the source directory or the language map is
            missing or invalid.
    """

    if not plugin_root.is_dir():
        raise ResourceConfigError(f"Invalid plugin source directory: {plugin_root}")
    target = plugin_root
    if deploy_root is not None and deploy_root.resolve() != plugin_root.resolve():
        copy_plugin_tree(plugin_root, deploy_root)
        target = deploy_root

    layout = DataLayout(target)
    loader = ResourceLoader(target, load_language_map(target / RESOURCES_DIRNAME))
    aggregator = ResourceAggregator(loader, previous=load_previous_records(layout))
    result = aggregator.aggregate()
    written = ResourceWriter(layout).write(result)
    return ResourceUpdateReport(target=target, result=result, written=tuple(written))


__all__ = ["ResourceUpdateReport", "copy_plugin_tree", "run_resource_update"]
