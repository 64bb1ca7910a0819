"""Commands: layout (with optional grafts) and inspect."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from tagtree.commands._base import TagCommand, document_argument
from tagtree.domain.types import HierarchyVariant
from tagtree.services.layout import LayoutService

if TYPE_CHECKING:
    from tagtree.commands._context import AppContext

def _parse_graft(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for value in values:
        anchor, sep, incoming = value.partition(":")
        if not sep or not anchor or not incoming:
            msg = f"expected ANCHOR:INCOMING, got {value!r}"
            raise click.BadParameter(msg)
        pairs.append((anchor, incoming))
    return pairs


@click.command(
    cls=TagCommand,
    examples="""\
  tagtree layout doc.json --root w1
  tagtree layout doc.json --root w1 --variant incoming
  tagtree layout doc.json --root w1 --graft w3:l2 --graft w5:l4
  tagtree --json layout doc.json --root w1 --max-depth 4""",
)
@document_argument
@click.option("--root", "root_id", required=True, help="Entity id to root the tree at.")
@click.option(
    "--variant",
    type=click.Choice([v.value for v in HierarchyVariant]),
    default=None,
    help="Hierarchy variant (default from config; 'incoming' when grafting).",
)
@click.option("--max-depth", type=click.IntRange(min=0), default=None, help="Traversal depth bound.")
@click.option(
    "--graft",
    "grafts",
    multiple=True,
    callback=_parse_graft,
    help="Graft an incoming reference, as ANCHOR:INCOMING (repeatable).",
)
@click.pass_obj
def layout(
    app: AppContext,
    document: Path,
    root_id: str,
    variant: str | None,
    max_depth: int | None,
    grafts: list[tuple[str, str]],
) -> None:
    """Lay out the tree rooted at an entity and apply grafts."""
    graph = app.load(document, op="layout")
    settings = app.settings
    if max_depth is not None:
        settings = settings.model_copy(
            update={"layout": settings.layout.model_copy(update={"max_depth": max_depth})}
        )
    service = LayoutService(graph, settings)
    app.emit(
        service.layout(
            root_id,
            variant=HierarchyVariant(variant) if variant else None,
            grafts=grafts,
        )
    )


@click.command(
    cls=TagCommand,
    examples="""\
  tagtree inspect doc.json
  tagtree --json inspect doc.json""",
)
@document_argument
@click.pass_obj
def inspect(app: AppContext, document: Path) -> None:
    """Summarize an entity document: counts, cycles, arrow gaps."""
    graph = app.load(document, op="inspect")
    app.emit(LayoutService(graph, app.settings).inspect())
