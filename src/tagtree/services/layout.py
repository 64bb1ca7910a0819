"""LayoutService — full layout passes, grafts, and document inspection.

Wraps :class:`LayoutEngine` for a parsed entity document and serializes
the live groups into plain dicts.  Core exceptions map to error codes:

* ``NOT_FOUND`` — unknown root, anchor or incoming id
* ``NO_INCOMING`` — no live affordance matches a requested graft
* ``GRAFT_INCONSISTENT`` — :class:`GraftConsistencyError`
* ``MEASUREMENT_UNAVAILABLE`` — :class:`MeasurementUnavailableError`
* ``MALFORMED_ARROWS`` — :class:`MalformedArrowDataError` (strict policy)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import networkx as nx

from tagtree.domain.errors import (
    GraftConsistencyError,
    MalformedArrowDataError,
    MeasurementUnavailableError,
)
from tagtree.domain.hierarchy import Group, HierarchyNode, IncomingRef, LayoutEdge
from tagtree.domain.types import EdgeType, HierarchyVariant
from tagtree.layout.engine import LayoutEngine
from tagtree.services.base import BaseService
from tagtree.services.result import ServiceResult
from tagtree.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def _entity_id(node: HierarchyNode) -> str:
    return node.node.id or node.name


def _serialize_groups(groups: Sequence[Group]) -> list[dict[str, Any]]:
    """Plain-dict view of the live groups with scene-space x coordinates.

    Occurrences are keyed ``"<group position>:<flatten index>"``; a grafted
    group gets an extra ``graft`` edge from its root to its anchor's key.
    """
    flat = [group.root.flatten() for group in groups]
    keys: dict[int, str] = {}
    for position, (nodes, _edges) in enumerate(flat):
        for i, node in enumerate(nodes):
            keys[id(node)] = f"{position}:{i}"
    return [
        _serialize_group(position, group, nodes, edges, keys)
        for position, (group, (nodes, edges)) in enumerate(zip(groups, flat, strict=True))
    ]


def _serialize_group(
    position: int,
    group: Group,
    nodes: list[HierarchyNode],
    edges: list[LayoutEdge],
    keys: dict[int, str],
) -> dict[str, Any]:
    node_items = [
        {
            "key": keys[id(node)],
            "id": _entity_id(node),
            "label": node.name,
            "kind": node.kind.value,
            "depth": node.depth,
            "x": round(node.offset + group.offset, 2),
            "y": round(node.y, 2),
            "width": round(node.width, 2),
            "receives_arrow": node.receives_arrow,
            "incoming": [ref.id or ref.label for ref in node.incoming],
        }
        for node in nodes
    ]
    edge_items = [
        {
            "type": edge.type.value,
            "source": keys[id(edge.source)],
            "target": keys[id(edge.target)],
            "label": edge.label,
        }
        for edge in edges
    ]

    item: dict[str, Any] = {
        "position": position,
        "index": group.index,
        "offset": group.offset,
        "anchor": None,
        "nodes": node_items,
        "edges": edge_items,
    }
    if group.anchor is not None:
        item["anchor"] = _entity_id(group.anchor)
        item["dx"] = round(group.dx, 2)
        item["dy"] = round(group.dy, 2)
        item["edges"].append(
            {
                "type": EdgeType.GRAFT.value,
                "source": keys[id(group.root)],
                "target": keys.get(id(group.anchor)),
                "label": None,
            }
        )
    return item


class LayoutService(BaseService):
    """Lays out entity documents and applies grafts."""

    # ------------------------------------------------------------------
    # layout: full pass plus optional grafts
    # ------------------------------------------------------------------

    @traced
    def layout(
        self,
        root_id: str,
        *,
        variant: HierarchyVariant | None = None,
        grafts: Sequence[tuple[str, str]] = (),
    ) -> ServiceResult:
        """Lay out the tree rooted at *root_id*, then apply *grafts* in order.

        Args:
            root_id: Entity id of the root.
            variant: Hierarchy variant; defaults to ``[layout] variant``.
                Grafting needs incoming affordances, so any graft forces the
                incoming variant unless one was given explicitly.
            grafts: ``(anchor_id, incoming_id)`` pairs.  Each is matched
                against the live affordances, newest group first.
        """
        op = "layout"
        root = self._graph.get(root_id)
        if root is None:
            return self._fail(
                op, "NOT_FOUND", f"Entity '{root_id}' not found in document", entity=root_id
            )

        if variant is None and grafts:
            variant = HierarchyVariant.INCOMING
        variant = variant or self._settings.layout.variant

        engine = LayoutEngine(self._measurer, config=self._settings.layout)
        try:
            with trace_span("layout_pass") as span:
                tree = engine.layout(root, variant=variant)
                if span:
                    span.annotate("nodes", len(tree.nodes))
                    span.annotate("edges", len(tree.links))

            for anchor_id, incoming_id in grafts:
                ref = self._find_ref(engine, anchor_id, incoming_id)
                if ref is None:
                    return self._fail(
                        op,
                        "NO_INCOMING",
                        f"No incoming reference '{incoming_id}' on anchor '{anchor_id}'",
                        anchor=anchor_id,
                        incoming=incoming_id,
                    )
                with trace_span("graft") as span:
                    group = engine.graft(ref)
                    if span:
                        span.annotate("incoming", incoming_id)
                        span.annotate("dx", group.dx)
        except GraftConsistencyError as exc:
            return self._fail(op, "GRAFT_INCONSISTENT", str(exc))
        except MeasurementUnavailableError as exc:
            return self._fail(op, "MEASUREMENT_UNAVAILABLE", str(exc))
        except MalformedArrowDataError as exc:
            return self._fail(op, "MALFORMED_ARROWS", str(exc))

        groups = _serialize_groups(engine.groups)
        origin_x, origin_y = tree.origin
        logger.debug("Layout of %s produced %d group(s)", root_id, len(groups))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": root_id,
                "variant": variant.value,
                "max_width": round(tree.max_width, 2),
                "layer_count": tree.layer_count,
                "origin": [round(origin_x, 2), round(origin_y, 2)],
                "count": sum(len(g["nodes"]) for g in groups),
                "groups": groups,
            },
        )

    @staticmethod
    def _find_ref(engine: LayoutEngine, anchor_id: str, incoming_id: str) -> IncomingRef | None:
        refs = engine.incoming_refs()
        for position in reversed(range(len(engine.groups))):
            for ref in refs:
                if ref.group_index != position:
                    continue
                if ref.anchor.node.id == anchor_id and ref.node.id == incoming_id:
                    return ref
        return None

    # ------------------------------------------------------------------
    # inspect: document statistics
    # ------------------------------------------------------------------

    @traced
    def inspect(self) -> ServiceResult:
        """Summarize the document: counts, cycles, components, arrow gaps."""
        g = self._graph.to_digraph()

        cycle: list[str] = []
        try:
            cycle = [u for u, _v in nx.find_cycle(g)]
        except nx.NetworkXNoCycle:
            pass

        malformed = [
            link.id for link in self._graph.links if len(link.arrow_directions) < len(link.arguments)
        ]
        warnings = [f"Link '{lid}' has fewer arrows than arguments" for lid in malformed]

        return ServiceResult(
            ok=True,
            op="inspect",
            data={
                "words": len(self._graph.words),
                "links": len(self._graph.links),
                "edges": g.number_of_edges(),
                "components": nx.number_weakly_connected_components(g) if len(g) else 0,
                "acyclic": nx.is_directed_acyclic_graph(g),
                "cycle": cycle,
                "malformed_arrows": malformed,
            },
            warnings=warnings,
        )
