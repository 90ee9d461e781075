# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""CLI commands creating plugin commits and releases."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer

from ..environment import PluginIdentity
from ..git_workflow import GitWorkflow, release_tag
from ..process_utils import SubprocessExecutionError, run_command
from ..versioning import BumpKind
from .shared import CLIError, CLIState, get_state
from .version import BUMP_ARGUMENT, MANIFEST_PATH_ARGUMENT, PLUGIN_PATH_ARGUMENT, bump_for_cli

MESSAGE_ARGUMENT = Annotated[str, typer.Argument(help="Commit message details.")]
SUMMARY_ARGUMENT = Annotated[str, typer.Argument(help="Summary stored in the annotated tag.")]
RELEASE_KIND_ARGUMENT = Annotated[
    BumpKind,
    typer.Argument(help="Version component to increment.", case_sensitive=False),
]


def _identity_and_repo(
    state: CLIState,
    *,
    plugin_path: str | None,
    manifest_path: str | None,
) -> tuple[PluginIdentity, Path]:
    environment = state.optional_environment()
    if environment is None:
        return PluginIdentity.unknown(), Path.cwd()
    identity = environment.identity_for(plugin_path=plugin_path, manifest_path=manifest_path)
    return identity, environment.project_dir


def _run_git(state: CLIState, action: str, step: Callable[[], object]) -> None:
    try:
        step()
    except (SubprocessExecutionError, FileNotFoundError) as exc:
        state.logger.fail(f"{action} failed: {exc}")
        raise CLIError(str(exc)) from exc


def commit_command(
    ctx: typer.Context,
    message: MESSAGE_ARGUMENT,
    kind: BUMP_ARGUMENT = BumpKind.PATCH,
    plugin_path: PLUGIN_PATH_ARGUMENT = None,
    manifest_path: MANIFEST_PATH_ARGUMENT = None,
) -> None:
    """Bump the version, commit every change and push."""

    state = get_state(ctx)
    logger = state.logger
    try:
        logger.info(f"Updating version ({kind.value})...")
        bump = bump_for_cli(state, kind, plugin_path=plugin_path, manifest_path=manifest_path)
        identity, repo_dir = _identity_and_repo(state, plugin_path=plugin_path, manifest_path=manifest_path)
        logger.info(f"New plugin {identity.name} ({identity.id}) version is: {bump.current}")
        workflow = GitWorkflow(repo_dir, runner=run_command)
        _run_git(state, "Commit", lambda: workflow.commit(identity, message, bump.current))
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    logger.ok(f"Commit {release_tag(identity, bump.current)} created and pushed")
    raise typer.Exit(code=0)


def release_command(
    ctx: typer.Context,
    kind: RELEASE_KIND_ARGUMENT,
    tag_summary: SUMMARY_ARGUMENT,
    commit_message: MESSAGE_ARGUMENT,
    plugin_path: PLUGIN_PATH_ARGUMENT = None,
    manifest_path: MANIFEST_PATH_ARGUMENT = None,
) -> None:
    """Bump the version, replace earlier release tags, then commit, tag and push."""

    state = get_state(ctx)
    logger = state.logger
    try:
        logger.info(f"Updating version ({kind.value})...")
        bump = bump_for_cli(state, kind, plugin_path=plugin_path, manifest_path=manifest_path)
        identity, repo_dir = _identity_and_repo(state, plugin_path=plugin_path, manifest_path=manifest_path)
        logger.info(f"New plugin {identity.name} ({identity.id}) version is: {bump.current}")
        workflow = GitWorkflow(repo_dir, runner=run_command)
        _run_git(state, "Release", lambda: workflow.release(identity, tag_summary, commit_message, bump.current))
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    logger.ok(f"Release {release_tag(identity, bump.current)} created and pushed")
    raise typer.Exit(code=0)


__all__ = ["commit_command", "release_command"]
