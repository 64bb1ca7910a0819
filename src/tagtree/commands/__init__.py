"""Subcommand modules for tagtree.

Provides register_commands() which uses deferred imports to keep
``tagtree --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from tagtree.commands.layout import inspect, layout

    cli.add_command(layout)
    cli.add_command(inspect)
