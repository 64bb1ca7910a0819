"""Click building blocks shared by the tagtree commands.

``TagCommand``/``TagGroup`` take an ``examples`` string and expose it as
an eager ``--examples`` flag, so ``--help`` stays short.
``document_argument`` is the DOCUMENT positional every command reads.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

document_argument: Callable[[Callable[..., Any]], Callable[..., Any]] = click.argument(
    "document", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)


def _examples_callback(examples: str) -> Callable[[click.Context, click.Parameter, bool], None]:
    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n")
            click.echo(examples)
            ctx.exit(0)

    return show


def _examples_option(examples: str) -> click.Option:
    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_examples_callback(examples),
        help="Show usage examples.",
    )


class TagCommand(click.Command):
    """A command with an optional ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class TagGroup(click.Group):
    """The root group; subcommands default to :class:`TagCommand`."""

    command_class = TagCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))
