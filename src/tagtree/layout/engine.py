"""LayoutEngine — full layout passes, live groups, and interaction entry points.

A full pass (:meth:`LayoutEngine.layout`) is a pure rebuild: new hierarchy,
new offsets, and a group list holding only the primary group.  The only
state carried across calls is the group list, which grafts append to.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from tagtree.config.models import LayoutConfig
from tagtree.domain.hierarchy import Group, IncomingRef, TreeLayout
from tagtree.domain.types import HierarchyVariant
from tagtree.layout.graft import GraftOperator
from tagtree.layout.layers import LayerAssigner, group_layers
from tagtree.layout.walker import GraphWalker

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tagtree.domain.entities import GraphNode
    from tagtree.domain.hierarchy import HierarchyNode
    from tagtree.infrastructure.measure import TextMeasurer

logger = logging.getLogger(__name__)


class RenderSink(Protocol):
    """Receives finished layouts; how they are drawn is up to the sink."""

    def render_layout(self, layout: TreeLayout) -> None: ...

    def render_groups(self, groups: Sequence[Group]) -> None: ...


class CollectingSink:
    """RenderSink that records what it was asked to draw."""

    def __init__(self) -> None:
        self.layouts: list[TreeLayout] = []
        self.group_renders: list[list[Group]] = []

    def render_layout(self, layout: TreeLayout) -> None:
        self.layouts.append(layout)

    def render_groups(self, groups: Sequence[Group]) -> None:
        self.group_renders.append(list(groups))


class LayoutEngine:
    """Orchestrates GraphWalker, LayerAssigner and GraftOperator.

    Attributes:
        groups: The live groups; index 0 is the primary group.
        selected: Root entity of the last full pass.
        current: Result of the last full pass.
    """

    def __init__(
        self,
        measurer: TextMeasurer | None,
        *,
        config: LayoutConfig | None = None,
        sink: RenderSink | None = None,
    ) -> None:
        self.config = config or LayoutConfig()
        self.sink = sink
        self.walker = GraphWalker(self.config.max_depth, arrow_policy=self.config.arrow_policy)
        self.assigner = LayerAssigner(
            measurer,
            child_separation=self.config.child_separation,
            sibling_separation=self.config.sibling_separation,
        )
        self.grafter = GraftOperator(
            self.walker,
            self.assigner,
            row_height=self.config.row_height,
            regraft=self.config.regraft,
        )
        self.groups: list[Group] = []
        self.selected: GraphNode | None = None
        self.current: TreeLayout | None = None

    # ------------------------------------------------------------------
    # Full pass
    # ------------------------------------------------------------------

    def build(self, root: GraphNode, variant: HierarchyVariant) -> HierarchyNode:
        if variant is HierarchyVariant.INCOMING:
            return self.walker.build(root)
        return self.walker.build_siblings(root)

    def layout(
        self,
        selected: GraphNode,
        *,
        variant: HierarchyVariant | None = None,
    ) -> TreeLayout:
        """Build, flatten and lay out the tree rooted at *selected*."""
        variant = variant or self.config.variant
        hierarchy = self.build(selected, variant)
        nodes, links = hierarchy.flatten()
        max_width = self.assigner.assign(nodes)

        row_height = self.config.row_height
        for node in nodes:
            node.y = node.depth * row_height

        result = TreeLayout(
            root=hierarchy,
            nodes=nodes,
            links=links,
            max_width=max_width,
            layer_count=len(group_layers(nodes)),
            row_height=row_height,
        )
        self.groups = [Group(index=0, root=hierarchy)]
        self.selected = selected
        self.current = result
        logger.debug(
            "Laid out %r (%s): %d nodes, %d edges, max_width=%.1f",
            selected.label,
            variant.value,
            len(nodes),
            len(links),
            max_width,
        )
        if self.sink is not None:
            self.sink.render_layout(result)
        return result

    # ------------------------------------------------------------------
    # Incremental
    # ------------------------------------------------------------------

    def incoming_refs(self, group_index: int | None = None) -> list[IncomingRef]:
        """Incoming affordances of the live groups, in group then pre-order."""
        refs: list[IncomingRef] = []
        for i, group in enumerate(self.groups):
            if group_index is not None and i != group_index:
                continue
            for occurrence in group.root.descendants():
                for node in occurrence.incoming:
                    refs.append(IncomingRef(node=node, anchor=occurrence, group_index=i))
        return refs

    def graft(self, ref: IncomingRef) -> Group:
        """Graft *ref* onto the live layout and re-render every group."""
        group = self.grafter.graft(ref, self.groups)
        self.render()
        return group

    def render(self) -> None:
        if self.sink is not None:
            self.sink.render_groups(self.groups)

    # ------------------------------------------------------------------
    # Interaction entry points
    # ------------------------------------------------------------------

    def select(self, node: GraphNode) -> TreeLayout:
        """Node click: re-root the layout on *node*."""
        return self.layout(node)

    def request_incoming(self, ref: IncomingRef) -> Group:
        """Right-click on an incoming affordance: promote it via graft."""
        return self.graft(ref)

    def activate_incoming(self, ref: IncomingRef) -> TreeLayout:
        """Left-click on an incoming affordance: re-root on the incoming entity."""
        return self.select(ref.node)
