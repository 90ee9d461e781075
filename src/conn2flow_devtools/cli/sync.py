# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""CLI command synchronising the source tree into the Docker environment."""

from __future__ import annotations

from typing import Annotated

import typer

from ..errors import DevtoolsError
from ..process_utils import SubprocessExecutionError, run_command
from ..sync import DEFAULT_CONTAINER, SyncMode, SyncPaths, synchronize
from .shared import CLIError, get_state

MODE_ARGUMENT = Annotated[
    SyncMode,
    typer.Argument(help="default (-avu), checksum (--checksum) or force (--ignore-times).", case_sensitive=False),
]
CONTAINER_OPTION = Annotated[
    str,
    typer.Option("--container", help="Docker container whose files are re-owned."),
]


def sync_command(
    ctx: typer.Context,
    mode: MODE_ARGUMENT = SyncMode.DEFAULT,
    container: CONTAINER_OPTION = DEFAULT_CONTAINER,
) -> None:
    """Copy devEnvironment.source into devEnvironment.target and fix ownership."""

    state = get_state(ctx)
    logger = state.logger
    try:
        environment = state.environment()
        try:
            paths = SyncPaths.from_environment(environment.require_dev_environment())
        except DevtoolsError as exc:
            logger.fail(str(exc))
            raise CLIError(str(exc)) from exc
        logger.info(f"Synchronizing {paths.source} -> {paths.target} ({mode.value})")
        try:
            synchronize(paths, mode, container=container, runner=run_command)
        except (SubprocessExecutionError, FileNotFoundError) as exc:
            logger.fail(f"Synchronization failed: {exc}")
            raise CLIError(str(exc)) from exc
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    logger.ok("Synchronization completed successfully")
    raise typer.Exit(code=0)


__all__ = ["sync_command"]
