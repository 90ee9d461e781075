# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors
"""Wrappers around ``subprocess`` for the git, rsync, gh and docker collaborators."""

from __future__ import annotations

import shutil

# Bandit: commands are built from fixed argument lists, never through a shell.
import subprocess  # nosec B404
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any


class SubprocessExecutionError(RuntimeError):
    """Raised when an external command exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{' '.join(command)}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]


def is_available(executable: str) -> bool:
    """Return ``True`` when ``executable`` resolves on ``PATH``."""

    return shutil.which(executable) is not None


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    if Path(head).is_absolute():
        return [head, *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    check: bool = True,
    capture_output: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Execute ``args`` after resolving the executable on ``PATH``.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command.
        check: Raise :class:`SubprocessExecutionError` on a non-zero exit.
        capture_output: Capture stdout/stderr instead of inheriting them.

    Returns:
        subprocess.CompletedProcess[str]: Completed process information.

    Raises:
        SubprocessExecutionError: When ``check`` is set and the command fails.
        FileNotFoundError: When the executable cannot be located.
    """

    normalized = _normalize_args(args)
    # Bandit: argument lists are passed directly without shell expansion.
    completed: subprocess.CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        check=False,
        capture_output=capture_output,
        text=True,
    )
    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            list(args),
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )
    return completed


def output_lines(result: Any) -> list[str]:
    """Return the non-empty stdout lines of a completed command."""

    stdout = getattr(result, "stdout", None) or ""
    return [line.strip() for line in str(stdout).splitlines() if line.strip()]


__all__ = [
    "CommandRunner",
    "SubprocessExecutionError",
    "is_available",
    "output_lines",
    "run_command",
]
