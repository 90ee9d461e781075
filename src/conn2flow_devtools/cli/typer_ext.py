# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Conn2Flow contributors
"""Typer application factory with alphabetical help listings."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click
import typer
from typer.core import TyperCommand, TyperGroup

HELP_OPTION = "--help"


def option_sort_key(param: click.Parameter) -> tuple[bool, str]:
    """Return the key ordering ``param`` in help output.

    Options sort by their first long flag without dashes; ``--help`` always
    comes last.
    """

    flags = [*param.opts, *param.secondary_opts]
    primary = next((flag for flag in flags if flag.startswith("--")), flags[0] if flags else param.name or "")
    return primary == HELP_OPTION, primary.lstrip("-").lower()


class AlphabeticalCommand(TyperCommand):
    """Command whose help lists arguments in declaration order and options sorted."""

    def format_options(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        arguments: list[tuple[str, str]] = []
        options: list[tuple[tuple[bool, str], tuple[str, str]]] = []
        for param in self.get_params(ctx):
            record = param.get_help_record(ctx)
            if record is None:
                continue
            if isinstance(param, click.Argument):
                arguments.append(record)
            else:
                options.append((option_sort_key(param), record))

        if arguments:
            with formatter.section("Arguments"):
                formatter.write_dl(arguments)
        if options:
            options.sort(key=lambda item: item[0])
            with formatter.section("Options"):
                formatter.write_dl([record for _, record in options])


class AlphabeticalGroup(TyperGroup):
    """Group listing its commands by name."""

    command_class = AlphabeticalCommand

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(super().list_commands(ctx))


CommandCallback = TypeVar("CommandCallback", bound=Callable[..., Any])


class DevtoolsTyper(typer.Typer):
    """Typer application registering every command as :class:`AlphabeticalCommand`."""

    def command(
        self,
        name: str | None = None,
        *,
        cls: type[TyperCommand] | None = None,
        **kwargs: Any,
    ) -> Callable[[CommandCallback], CommandCallback]:
        return super().command(name, cls=cls or AlphabeticalCommand, **kwargs)


def create_typer(**kwargs: Any) -> DevtoolsTyper:
    """Return the application object used by the CLI.

    Help is rendered by click's formatter (``rich_markup_mode=None``) so the
    alphabetical ordering applies to every listing.

    Args:
        **kwargs: Forwarded to :class:`typer.Typer`.

    Returns:
        DevtoolsTyper: Application with sorted command and option listings.
    """

    kwargs.setdefault("cls", AlphabeticalGroup)
    kwargs.setdefault("rich_markup_mode", None)
    return DevtoolsTyper(**kwargs)


__all__ = ["AlphabeticalCommand", "AlphabeticalGroup", "DevtoolsTyper", "create_typer", "option_sort_key"]
