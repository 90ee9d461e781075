# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""CLI command rebuilding the plugin data files from resource fragments."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..errors import DevtoolsError
from ..resources import DataLayout, run_resource_update
from .shared import CLIError, CLIState, get_state

PLUGIN_ROOT_OPTION = Annotated[
    Path | None,
    typer.Option("--plugin-root", help="Source plugin directory (ignored when it does not exist)."),
]
DEPLOY_ROOT_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--deploy-plugin-root",
        help="Copy the plugin here and write the data files into the copy.",
    ),
]
TEST_PLUGIN_OPTION = Annotated[
    bool,
    typer.Option("--test-plugin", help="Use the deploy directory of the active plugin."),
]


@dataclass(slots=True)
class ResourceRoots:
    """Plugin source and optional deploy directory chosen for one run."""

    plugin_root: Path
    deploy_root: Path | None


def _existing_dir(path: Path | None) -> Path | None:
    return path if path is not None and path.is_dir() else None


def resolve_resource_roots(
    state: CLIState,
    *,
    plugin_root: Path | None,
    deploy_root: Path | None,
    test_plugin: bool,
) -> ResourceRoots:
    """Combine CLI overrides with the environment descriptor.

    Explicit directories win when they exist. The descriptor is only read
    when a fallback value is required.

    Raises:
        CLIError: When the descriptor is needed but missing or invalid.
    """

    source = _existing_dir(plugin_root)
    deploy = _existing_dir(deploy_root)
    try:
        if source is None:
            source = state.environment().default_plugin_root()
        if test_plugin:
            default_deploy = state.environment().default_deploy_root()
            if default_deploy.is_dir():
                deploy = default_deploy
    except DevtoolsError as exc:
        state.logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    return ResourceRoots(plugin_root=source, deploy_root=deploy)


def resources_command(
    ctx: typer.Context,
    plugin_root: PLUGIN_ROOT_OPTION = None,
    deploy_plugin_root: DEPLOY_ROOT_OPTION = None,
    test_plugin: TEST_PLUGIN_OPTION = False,
) -> None:
    """Aggregate layouts, pages, components and variables into db/data."""

    state = get_state(ctx)
    logger = state.logger
    try:
        roots = resolve_resource_roots(
            state,
            plugin_root=plugin_root,
            deploy_root=deploy_plugin_root,
            test_plugin=test_plugin,
        )
        logger.debug(f"plugin_root={roots.plugin_root} deploy_root={roots.deploy_root}")
        report = run_resource_update(roots.plugin_root, roots.deploy_root)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    except DevtoolsError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    for path in report.written:
        logger.debug(f"written={path}")
    logger.section("Resource update")
    logger.echo(report.summary())
    orphans = report.result.orphan_total
    if orphans:
        logger.warn(f"{orphans} fragment(s) orphaned; see {DataLayout(report.target).orphans_dir}")
    raise typer.Exit(code=0)


__all__ = ["ResourceRoots", "resolve_resource_roots", "resources_command"]
