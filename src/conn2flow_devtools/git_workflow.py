# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Commit and release automation on top of the git and gh CLIs."""

from __future__ import annotations

import subprocess  # nosec B404
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .environment import PluginIdentity
from .process_utils import CommandRunner, is_available, output_lines, run_command


def format_message(identity: PluginIdentity, text: str, version: str) -> str:
    """Return the ``[id][name] text (vX.Y.Z)`` message used for commits and tags."""

    return f"[{identity.id}][{identity.name}] {text} (v{version})"


def release_tag_prefix(identity: PluginIdentity) -> str:
    return f"plugin-{identity.id}-v"


def release_tag(identity: PluginIdentity, version: str) -> str:
    return f"{release_tag_prefix(identity)}{version}"


@dataclass(slots=True)
class GitWorkflow:
    """Run git operations for one plugin repository.

    Attributes:
        repo_dir: Directory the git commands run in.
        runner: Command runner, :func:`run_command` unless injected.
        has_gh: Predicate telling whether the GitHub CLI is installed.
    """

    repo_dir: Path
    runner: CommandRunner = run_command
    has_gh: Callable[[], bool] = field(default=lambda: is_available("gh"))

    def _git(
        self,
        *args: str,
        check: bool = True,
        capture_output: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        return self.runner(["git", *args], cwd=self.repo_dir, check=check, capture_output=capture_output)

    def commit(self, identity: PluginIdentity, message: str, version: str) -> None:
        """Stage everything, commit with the plugin message and push."""

        self._git("add", ".")
        self._git("commit", "-m", format_message(identity, message, version))
        self._git("push")

    def existing_release_tags(self, identity: PluginIdentity) -> list[str]:
        """Return the local tags created by earlier releases of ``identity``."""

        prefix = release_tag_prefix(identity)
        result = self._git("tag", "--list", f"{prefix}*", check=False, capture_output=True)
        return [tag for tag in output_lines(result) if tag.startswith(prefix)]

    def remove_release_tags(self, identity: PluginIdentity) -> list[str]:
        """Delete earlier release tags locally, on ``origin`` and as GitHub releases.

        Failures are ignored; a tag missing on the remote must not stop a release.
        """

        tags = self.existing_release_tags(identity)
        use_gh = bool(tags) and self.has_gh()
        for tag in tags:
            self._git("tag", "-d", tag, check=False)
            self._git("push", "--delete", "origin", tag, check=False)
            if use_gh:
                self.runner(["gh", "release", "delete", tag, "--yes"], cwd=self.repo_dir, check=False)
        return tags

    def release(self, identity: PluginIdentity, summary: str, message: str, version: str) -> str:
        """Replace earlier release tags, commit, tag the new version and push.

        Returns:
            str: Name of the created tag.
        """

        self.remove_release_tags(identity)
        self._git("add", ".")
        self._git("commit", "-m", format_message(identity, message, version))
        tag = release_tag(identity, version)
        self._git("tag", "-a", tag, "-m", format_message(identity, summary, version))
        self._git("push")
        self._git("push", "--tags")
        return tag


__all__ = [
    "GitWorkflow",
    "format_message",
    "release_tag",
    "release_tag_prefix",
]
