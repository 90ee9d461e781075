# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Synchronise the local source tree into the Docker development environment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Final

from .environment import DevEnvironment
from .errors import EnvironmentConfigError
from .process_utils import CommandRunner, run_command

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTAINER: Final[str] = "conn2flow-app"
WEB_OWNER: Final[str] = "www-data:www-data"


class SyncMode(str, Enum):
    """How rsync decides which files to transfer."""

    DEFAULT = "default"
    CHECKSUM = "checksum"
    FORCE = "force"


_RSYNC_FLAGS: Final[MappingProxyType[SyncMode, tuple[str, ...]]] = MappingProxyType(
    {
        SyncMode.DEFAULT: ("-avu",),
        SyncMode.CHECKSUM: ("-av", "--checksum"),
        SyncMode.FORCE: ("-av", "--ignore-times"),
    },
)


@dataclass(frozen=True, slots=True)
class SyncPaths:
    """Validated source, target and in-container paths."""

    source: str
    target: str
    docker_path: str

    @classmethod
    def from_environment(cls, dev_env: DevEnvironment) -> SyncPaths:
        """Extract the paths required for a sync.

        Raises:
            EnvironmentConfigError: When any of the three paths is missing.
        """

        missing = [
            name
            for name, value in (
                ("source", dev_env.source),
                ("target", dev_env.target),
                ("dockerPath", dev_env.docker_path),
            )
            if not value
        ]
        if missing:
            raise EnvironmentConfigError(f"devEnvironment is missing: {', '.join(missing)}")
        return cls(
            source=str(dev_env.source),
            target=str(dev_env.target),
            docker_path=str(dev_env.docker_path),
        )


def rsync_command(paths: SyncPaths, mode: SyncMode) -> list[str]:
    return ["rsync", *_RSYNC_FLAGS[mode], paths.source, paths.target]


def chown_command(paths: SyncPaths, container: str = DEFAULT_CONTAINER) -> list[str]:
    return ["docker", "exec", container, "bash", "-c", f"chown -R {WEB_OWNER} {paths.docker_path}"]


def synchronize(
    paths: SyncPaths,
    mode: SyncMode = SyncMode.DEFAULT,
    *,
    container: str = DEFAULT_CONTAINER,
    runner: CommandRunner = run_command,
    cwd: Path | None = None,
) -> None:
    """Copy ``paths.source`` into ``paths.target`` and fix ownership in the container.

    Args:
        paths: Validated sync paths.
        mode: rsync transfer strategy.
        container: Docker container running the web server.
        runner: Command runner, injectable for tests.
        cwd: Working directory for both commands.

    Raises:
        SubprocessExecutionError: If rsync or docker exit with a non-zero status.
    """

    LOGGER.debug("rsync mode=%s source=%s target=%s", mode.value, paths.source, paths.target)
    runner(rsync_command(paths, mode), cwd=cwd, check=True, capture_output=False)
    runner(chown_command(paths, container), cwd=cwd, check=True, capture_output=False)


__all__ = [
    "DEFAULT_CONTAINER",
    "SyncMode",
    "SyncPaths",
    "chown_command",
    "rsync_command",
    "synchronize",
]
