# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..environment import ENVIRONMENT_ENV_VAR, ENVIRONMENT_FILENAME, default_environment_path
from .git import commit_command, release_command
from .resources import resources_command
from .shared import CLIState, build_cli_logger, enable_debug_logging
from .sync import sync_command
from .typer_ext import create_typer
from .version import version_command

EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Print diagnostic detail to stderr."),
]
ENV_FILE_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--env-file",
        envvar=ENVIRONMENT_ENV_VAR,
        help=f"Location of {ENVIRONMENT_FILENAME} (defaults to the working directory).",
    ),
]

app = create_typer(
    name="conn2flow-devtools",
    help="Conn2Flow plugin development workflow.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
    env_file: ENV_FILE_OPTION = None,
) -> None:
    """Configure output preferences shared by every sub-command."""

    if debug:
        enable_debug_logging()
    ctx.obj = CLIState(
        logger=build_cli_logger(emoji=emoji, debug=debug),
        env_file=env_file if env_file is not None else default_environment_path(),
    )


app.command("resources")(resources_command)
app.command("version")(version_command)
app.command("commit")(commit_command)
app.command("release")(release_command)
app.command("sync")(sync_command)

__all__ = ["app"]
