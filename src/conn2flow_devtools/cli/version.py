# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""CLI command bumping the version of a plugin manifest."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..errors import DevtoolsError
from ..versioning import BumpKind, VersionBump, bump_manifest, resolve_manifest_path
from .shared import CLIError, CLIState, get_state

BUMP_ARGUMENT = Annotated[
    BumpKind,
    typer.Argument(help="Version component to increment.", case_sensitive=False),
]
PLUGIN_PATH_ARGUMENT = Annotated[
    str | None,
    typer.Argument(help="Plugin directory; overrides the environment descriptor."),
]
MANIFEST_PATH_ARGUMENT = Annotated[
    str | None,
    typer.Argument(help="manifest.json location; overrides everything else."),
]


def bump_for_cli(
    state: CLIState,
    kind: BumpKind,
    *,
    plugin_path: str | None,
    manifest_path: str | None,
) -> VersionBump:
    """Resolve the manifest and bump it, reporting failures.

    The environment descriptor is only loaded when neither path is given.

    Raises:
        CLIError: When the manifest cannot be located or updated.
    """

    environment = None if plugin_path or manifest_path else state.environment()
    try:
        manifest = resolve_manifest_path(
            manifest_path=Path(manifest_path) if manifest_path else None,
            plugin_path=Path(plugin_path) if plugin_path else None,
            environment=environment,
        )
        bump = bump_manifest(manifest, kind)
    except DevtoolsError as exc:
        state.logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    state.logger.debug(f"manifest={bump.manifest} key={bump.key} previous={bump.previous}")
    return bump


def version_command(
    ctx: typer.Context,
    kind: BUMP_ARGUMENT = BumpKind.PATCH,
    plugin_path: PLUGIN_PATH_ARGUMENT = None,
    manifest_path: MANIFEST_PATH_ARGUMENT = None,
) -> None:
    """Bump the plugin version and print the new value."""

    state = get_state(ctx)
    try:
        bump = bump_for_cli(state, kind, plugin_path=plugin_path, manifest_path=manifest_path)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    state.logger.echo(bump.current)
    raise typer.Exit(code=0)


__all__ = [
    "BUMP_ARGUMENT",
    "MANIFEST_PATH_ARGUMENT",
    "PLUGIN_PATH_ARGUMENT",
    "bump_for_cli",
    "version_command",
]
