# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""I/O helpers for resource JSON documents and body files."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .types import JSONValue, Record

LOGGER = logging.getLogger(__name__)


def read_json(path: Path) -> JSONValue | None:
    """Return the parsed JSON document at ``path`` or ``None`` when unusable.

    Missing files and documents that fail to parse both yield ``None``; the
    resource tree tolerates partial data.
    """

    if not path.is_file():
        return None
    try:
        with path.open("r", encoding="utf-8") as stream:
            payload: JSONValue = json.load(stream)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        LOGGER.warning("ignoring unreadable JSON document %s: %s", path, exc)
        return None
    return payload


def read_json_object(path: Path) -> Mapping[str, JSONValue] | None:
    """Return the JSON object stored at ``path`` or ``None``."""

    payload = read_json(path)
    return payload if isinstance(payload, Mapping) else None


def read_fragment_list(path: Path) -> list[Record]:
    """Return the JSON array of fragment objects stored at ``path``.

    Args:
        path: Location of a ``layouts.json``-style fragment list.

    Returns:
        list[Record]: Object entries of the array. Missing files, non-array
        payloads and non-object entries contribute nothing.
    """

    payload = read_json(path)
    return coerce_fragment_list(payload)


def coerce_fragment_list(payload: JSONValue | None) -> list[Record]:
    """Keep the mapping entries of a JSON array payload."""

    if isinstance(payload, Mapping):
        # Arrays with non-sequential keys may be serialised as objects.
        payload = list(payload.values())
    if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes, bytearray)):
        return []
    return [dict(entry) for entry in payload if isinstance(entry, Mapping)]


def read_bytes_if_exists(path: Path) -> bytes | None:
    """Return the raw contents of ``path`` or ``None`` when it is not a file."""

    if not path.is_file():
        return None
    return path.read_bytes()


def decode_body(raw: bytes | None, *, source: str) -> str | None:
    """Decode a body file as UTF-8 without newline translation.

    Bytes that are not valid UTF-8 (Latin-1 templates of older plugins) are
    replaced with U+FFFD and reported; the run continues.

    Args:
        raw: File contents or ``None`` when the file is absent.
        source: Label used in the warning.

    Returns:
        str | None: Decoded text or ``None`` for absent files.
    """

    if raw is None:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        LOGGER.warning("body %s is not valid UTF-8 (%s); undecodable bytes replaced", source, exc.reason)
        return raw.decode("utf-8", errors="replace")


def dump_json(payload: Any) -> str:
    """Serialise ``payload`` pretty-printed with unescaped unicode."""

    return json.dumps(payload, indent=4, ensure_ascii=False)


def write_json(path: Path, payload: Any) -> None:
    """Write ``payload`` to ``path`` as pretty-printed JSON, replacing any previous file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json(payload), encoding="utf-8", newline="\n")


__all__ = [
    "coerce_fragment_list",
    "decode_body",
    "dump_json",
    "read_bytes_if_exists",
    "read_fragment_list",
    "read_json",
    "read_json_object",
    "write_json",
]
