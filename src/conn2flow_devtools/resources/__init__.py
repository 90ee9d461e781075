# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Resource aggregation: compile plugin fragments into data files."""

from __future__ import annotations

from .aggregator import ResourceAggregator
from .checksum import ChecksumTriple, VersionCalculator, build_checksum
from .index import Claim, UniquenessIndex
from .kinds import KIND_POLICIES, KindPolicy, UniquenessRule, normalize_page_path
from .language_map import LANGUAGE_MAP_FILENAME, LanguageMap, load_language_map
from .loader import ModuleSource, ResourceLoader
from .models import AggregationResult, Fragment, OrphanReason, ResourceKind
from .pipeline import ResourceUpdateReport, run_resource_update
from .writer import DataLayout, ResourceWriter, load_previous_records

__all__ = [
    "KIND_POLICIES",
    "LANGUAGE_MAP_FILENAME",
    "AggregationResult",
    "ChecksumTriple",
    "Claim",
    "DataLayout",
    "Fragment",
    "KindPolicy",
    "LanguageMap",
    "ModuleSource",
    "OrphanReason",
    "ResourceAggregator",
    "ResourceKind",
    "ResourceLoader",
    "ResourceUpdateReport",
    "ResourceWriter",
    "UniquenessIndex",
    "UniquenessRule",
    "VersionCalculator",
    "build_checksum",
    "load_language_map",
    "load_previous_records",
    "normalize_page_path",
    "run_resource_update",
]
