# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors

"""Shared utilities for CLI commands (logging, errors, environment access)."""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

import typer
from rich.console import Console
from rich.text import Text

from ..console import detect_tty
from ..environment import EnvironmentContext, load_environment
from ..errors import DevtoolsError
from ..logging import fail as core_fail
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import section as core_section
from ..logging import warn as core_warn

PACKAGE_LOGGER_NAME: Final[str] = "conn2flow_devtools"


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False
    _key_value_re: re.Pattern[str] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")

    def fail(self, message: str) -> None:
        """Log a failure message on standard error.

        Args:
            message: Text describing the failure state.
        """

        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=self.use_emoji)

    def section(self, title: str) -> None:
        core_section(title, use_color=detect_tty())

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper.

        Args:
            message: Text written to standard output.
        """

        typer.echo(message)

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled.

        Args:
            message: Debug payload rendered with simple highlighting.
        """

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            key, raw_value = match.group(1), match.group(2)
            text.append(key, style="bold magenta")
            text.append("=", style="dim")
            text.append(raw_value, style="bold blue" if key in {"command", "cmd"} else "bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger instance bound to a dedicated Rich console.
    """

    console = Console(no_color=no_color, highlight=False, stderr=True)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


def enable_debug_logging() -> None:
    """Stream library diagnostics to stderr."""

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if getattr(logger, "_conn2flow_debug_configured", False):
        return
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    setattr(logger, "_conn2flow_debug_configured", True)


@dataclass(slots=True)
class CLIState:
    """Per-invocation state shared between the root callback and commands."""

    logger: CLILogger
    env_file: Path
    _environment: EnvironmentContext | None = field(default=None, repr=False)

    def environment(self) -> EnvironmentContext:
        """Load ``environment.json`` once and reuse it.

        Raises:
            CLIError: When the descriptor is missing or invalid.
        """

        if self._environment is None:
            try:
                self._environment = load_environment(self.env_file)
            except DevtoolsError as exc:
                self.logger.fail(str(exc))
                raise CLIError(str(exc)) from exc
        return self._environment

    def optional_environment(self) -> EnvironmentContext | None:
        """Return the descriptor when one exists, without reporting its absence."""

        if self._environment is None and not self.env_file.is_file():
            return None
        return self.environment()


def get_state(ctx: typer.Context) -> CLIState:
    """Return the state installed by the root callback."""

    state = ctx.obj
    if not isinstance(state, CLIState):
        raise CLIError("CLI state is not initialised")
    return state


__all__ = [
    "CLIError",
    "CLILogger",
    "CLIState",
    "build_cli_logger",
    "enable_debug_logging",
    "get_state",
]
