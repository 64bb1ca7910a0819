"""Hierarchy and layout data structures.

A :class:`HierarchyNode` is one occurrence of an entity in a rendered
tree.  The same entity reached along two paths yields two occurrences.
Once the layer assigner has filled ``offset``/``width`` (and the engine
``y``), the node doubles as the layout node.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tagtree.domain.types import EdgeType, NodeKind

if TYPE_CHECKING:
    from tagtree.domain.entities import GraphNode


@dataclass(eq=False)
class SiblingGroup:
    """Coreference arguments hanging off a node at the same depth."""

    relation: str | None
    link: GraphNode | None = None
    args: list[HierarchyNode] = field(default_factory=list)


@dataclass(eq=False)
class HierarchyNode:
    """One occurrence of a GraphNode in a tree, plus its layout fields."""

    node: GraphNode
    depth: int
    name: str
    kind: NodeKind
    children: list[HierarchyNode] = field(default_factory=list)
    incoming: list[GraphNode] = field(default_factory=list)
    siblings: list[SiblingGroup] = field(default_factory=list)
    receives_arrow: bool = False
    parent: HierarchyNode | None = field(default=None, repr=False)
    offset: float = 0.0
    width: float = 0.0
    y: float = 0.0

    @classmethod
    def of(cls, node: GraphNode, depth: int) -> HierarchyNode:
        return cls(node=node, depth=depth, name=node.label, kind=node.kind)

    def add_child(self, child: HierarchyNode) -> HierarchyNode:
        child.parent = self
        self.children.append(child)
        return child

    def detach(self) -> None:
        """Remove this occurrence from its parent's children."""
        if self.parent is None:
            return
        siblings = self.parent.children
        for i, child in enumerate(siblings):
            if child is self:
                del siblings[i]
                break
        self.parent = None

    def descendants(self) -> Iterator[HierarchyNode]:
        """Pre-order walk: self, sibling-group args, then children."""
        yield self
        for group in self.siblings:
            for arg in group.args:
                yield from arg.descendants()
        for child in self.children:
            yield from child.descendants()

    def find(self, entity: GraphNode, *, include_self: bool = True) -> HierarchyNode | None:
        """First occurrence of *entity* (by identity) in pre-order."""
        for occurrence in self.descendants():
            if occurrence is self and not include_self:
                continue
            if occurrence.node is entity:
                return occurrence
        return None

    def is_sibling_of(self, other: HierarchyNode) -> bool:
        """True when *other* is an argument of one of this node's sibling groups."""
        return any(any(arg is other for arg in group.args) for group in self.siblings)

    def flatten(self) -> tuple[list[HierarchyNode], list[LayoutEdge]]:
        """Depth-first flatten into a node list and an edge list.

        Sibling-group args are visited before children; an edge is recorded
        after its target subtree has been flattened.
        """
        nodes: list[HierarchyNode] = []
        edges: list[LayoutEdge] = []

        def visit(node: HierarchyNode) -> None:
            nodes.append(node)
            for group in node.siblings:
                for arg in group.args:
                    visit(arg)
                    edges.append(
                        LayoutEdge(
                            type=EdgeType.SIBLING,
                            source=node,
                            target=arg,
                            label=group.relation,
                        )
                    )
            for child in node.children:
                visit(child)
                edges.append(LayoutEdge(type=EdgeType.CHILD, source=node, target=child))

        visit(self)
        return nodes, edges


@dataclass(eq=False)
class LayoutEdge:
    """A rendered edge between two occurrences."""

    type: EdgeType
    source: HierarchyNode
    target: HierarchyNode
    label: str | None = None


@dataclass(eq=False)
class TreeLayout:
    """Result of one full layout pass."""

    root: HierarchyNode
    nodes: list[HierarchyNode]
    links: list[LayoutEdge]
    max_width: float
    layer_count: int
    row_height: float

    @property
    def origin(self) -> tuple[float, float]:
        """Translation that centers the layout around the viewport center."""
        return (-self.max_width / 2, -self.layer_count * self.row_height / 2)


@dataclass(eq=False)
class Group:
    """One independently laid-out tree in the rendered scene.

    ``anchor`` is None for the primary group.  For a grafted group it is
    the live occurrence the group continues from, and ``index`` is the
    position of the group owning that anchor.
    """

    index: int
    root: HierarchyNode
    anchor: HierarchyNode | None = None
    offset: float = 0.0
    dx: float = 0.0
    dy: float = 0.0

    @property
    def is_primary(self) -> bool:
        return self.anchor is None


@dataclass(frozen=True, eq=False)
class IncomingRef:
    """An incoming-edge affordance: *node* points into *anchor*."""

    node: GraphNode
    anchor: HierarchyNode
    group_index: int
