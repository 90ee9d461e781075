# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Content checksums and version counters for resource bodies."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .models import ResourceKind
from .types import Record


Body = str | bytes


def _as_bytes(content: Body | None) -> bytes:
    if content is None:
        return b""
    return content.encode("utf-8") if isinstance(content, str) else content


def _md5(content: Body) -> str:
    # md5 is a content fingerprint here, not a security control.
    return hashlib.md5(_as_bytes(content), usedforsecurity=False).hexdigest()


@dataclass(frozen=True, slots=True)
class ChecksumTriple:
    """Digests of a resource body: html, css and their concatenation.

    Each digest is an empty string when the corresponding content is absent;
    ``combined`` is empty exactly when both ``html`` and ``css`` are.
    """

    html: str = ""
    css: str = ""
    combined: str = ""

    @classmethod
    def build(cls, html: Body | None, css: Body | None) -> ChecksumTriple:
        """Compute the triple for the given bodies.

        Text is hashed as UTF-8; bytes are hashed as read from disk.

        Args:
            html: HTML body or ``None`` when the file does not exist.
            css: CSS body or ``None`` when the file does not exist.

        Returns:
            ChecksumTriple: Digests of the body.
        """

        html_digest = _md5(html) if html else ""
        css_digest = _md5(css) if css else ""
        if not html_digest and not css_digest:
            return cls()
        return cls(html=html_digest, css=css_digest, combined=_md5(_as_bytes(html) + _as_bytes(css)))

    @classmethod
    def parse(cls, value: Any) -> ChecksumTriple | None:
        """Decode a stored checksum.

        Args:
            value: JSON-encoded string as written to the data files, or an
                already decoded mapping.

        Returns:
            ChecksumTriple | None: Parsed triple, or ``None`` when ``value``
            holds no usable checksum.
        """

        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                return None
        if not isinstance(value, Mapping):
            return None
        return cls(
            html=_digest_field(value.get("html")),
            css=_digest_field(value.get("css")),
            combined=_digest_field(value.get("combined")),
        )

    def as_dict(self) -> dict[str, str]:
        return {"html": self.html, "css": self.css, "combined": self.combined}

    def to_json(self) -> str:
        """Return the triple encoded the way it is stored in the data files."""

        return json.dumps(self.as_dict(), ensure_ascii=False, separators=(",", ":"))


def _digest_field(value: Any) -> str:
    return "" if value is None else str(value)


def build_checksum(html: Body | None, css: Body | None) -> ChecksumTriple:
    """Shortcut for :meth:`ChecksumTriple.build`."""

    return ChecksumTriple.build(html, css)


def _stored_version(record: Mapping[str, Any]) -> int:
    raw = record.get("versao")
    if raw is None:
        return 1
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 1


class VersionCalculator:
    """Decide version counters against the previously written data files.

    ``previous`` maps each kind to the records of the last run keyed by the
    same uniqueness key the aggregator uses for that kind.
    """

    def __init__(self, previous: Mapping[ResourceKind, Mapping[str, Record]] | None = None) -> None:
        self._previous = previous or {}

    def resolve(
        self,
        kind: ResourceKind,
        key: str,
        html: Body | None,
        css: Body | None,
    ) -> tuple[int, ChecksumTriple]:
        """Return the version counter and checksum for a resource.

        Args:
            kind: Resource kind the record belongs to.
            key: Uniqueness key of the record.
            html: Current HTML body.
            css: Current CSS body.

        Returns:
            tuple[int, ChecksumTriple]: ``1`` for unseen resources, the previous
            counter when the checksum is unchanged, otherwise the previous
            counter plus one.
        """

        checksum = ChecksumTriple.build(html, css)
        old = self._previous.get(kind, {}).get(key)
        if old is None:
            return 1, checksum
        old_checksum = ChecksumTriple.parse(old.get("checksum"))
        version = _stored_version(old)
        if old_checksum == checksum:
            return version, checksum
        return version + 1, checksum


__all__ = ["ChecksumTriple", "VersionCalculator", "build_checksum"]
