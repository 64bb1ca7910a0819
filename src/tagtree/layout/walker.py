"""GraphWalker — turns the cyclic entity graph into an acyclic hierarchy.

Two builders share the same cycle-breaking rules:

* :meth:`GraphWalker.build` — the incoming-edge variant.  Links pointing
  into a node are recorded in ``incoming`` instead of being recursed into.
  Used by graft and by the ``incoming`` layout variant.
* :meth:`GraphWalker.build_siblings` — the coreference variant.  Only
  ``top`` links are followed; trigger-less links become sibling groups.

Cycles are broken by skipping the immediate source and any entity already
on the current root-to-node path (identity keyed).  The same entity reached
along two different paths is materialized twice.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

from tagtree.domain.entities import INCOMING
from tagtree.domain.errors import MalformedArrowDataError
from tagtree.domain.hierarchy import HierarchyNode, SiblingGroup
from tagtree.domain.types import ArrowPolicy, NodeKind

if TYPE_CHECKING:
    from tagtree.domain.entities import GraphNode, Link

DEFAULT_MAX_DEPTH = 20

_Path: TypeAlias = frozenset[int]


class GraphWalker:
    """Depth-bounded recursive hierarchy builder."""

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        *,
        arrow_policy: ArrowPolicy = ArrowPolicy.PERMISSIVE,
    ) -> None:
        if max_depth < 0:
            msg = f"max_depth must be >= 0, got {max_depth}"
            raise ValueError(msg)
        self.max_depth = max_depth
        self.arrow_policy = arrow_policy

    # ------------------------------------------------------------------
    # Arrow direction lookup
    # ------------------------------------------------------------------

    def _direction(self, link: Link, index: int) -> int | None:
        direction = link.direction_at(index)
        if direction is None and self.arrow_policy is ArrowPolicy.STRICT:
            msg = (
                f"Link {link.id or link.text!r} has {len(link.arrow_directions)} arrow "
                f"directions for {len(link.arguments)} participants"
            )
            raise MalformedArrowDataError(msg)
        return direction

    def is_incoming(self, link: GraphNode, node: GraphNode) -> bool:
        """Whether *link* points into *node* and must stay out of the tree."""
        if link.kind is not NodeKind.LINK:
            return False
        i = link.index_of(node)
        if i < 0:
            return True
        return self._direction(link, i) == INCOMING

    # ------------------------------------------------------------------
    # build: incoming-edge variant
    # ------------------------------------------------------------------

    def build(
        self,
        root: GraphNode,
        source: GraphNode | None = None,
        depth: int = 0,
    ) -> HierarchyNode:
        """Build the incoming-annotated hierarchy rooted at *root*."""
        return self._walk_incoming(root, source, depth, frozenset({id(root)}))

    def _walk_incoming(
        self,
        node: GraphNode,
        source: GraphNode | None,
        depth: int,
        path: _Path,
    ) -> HierarchyNode:
        data = HierarchyNode.of(node, depth)
        if depth >= self.max_depth:
            return data

        for link in node.links:
            if link is source:
                continue
            if self.is_incoming(link, node):
                data.incoming.append(link)
                continue
            if id(link) in path:
                continue
            data.add_child(self._walk_incoming(link, node, depth + 1, path | {id(link)}))

        if node.kind is NodeKind.LINK:
            for i, word in enumerate(node.words):
                if word is source or id(word) in path:
                    continue
                child = self._walk_incoming(word, node, depth + 1, path | {id(word)})
                if self._direction(node, i) == INCOMING:
                    child.receives_arrow = True
                data.add_child(child)

        return data

    # ------------------------------------------------------------------
    # build_siblings: coreference variant
    # ------------------------------------------------------------------

    def build_siblings(
        self,
        root: GraphNode,
        source: GraphNode | None = None,
        depth: int = 0,
    ) -> HierarchyNode:
        """Build the sibling-annotated hierarchy rooted at *root*."""
        return self._walk_siblings(root, source, depth, frozenset({id(root)}))

    def _walk_siblings(
        self,
        node: GraphNode,
        source: GraphNode | None,
        depth: int,
        path: _Path,
    ) -> HierarchyNode:
        data = HierarchyNode.of(node, depth)
        if depth >= self.max_depth:
            return data

        top = [link for link in node.links if link.top]

        for coref in top:
            if coref.trigger is not None:
                continue
            group = SiblingGroup(relation=coref.reltype, link=coref)
            for anchor in coref.words:
                if anchor is node or anchor is source or id(anchor) in path:
                    continue
                arg = self._walk_siblings(anchor, node, depth, path | {id(anchor)})
                arg.parent = data
                group.args.append(arg)
            data.siblings.append(group)

        if node.kind is NodeKind.WORD:
            targets: list[GraphNode] = [link for link in top if link.trigger is node]
        else:
            targets = node.words

        for target in targets:
            if target is source or id(target) in path:
                continue
            data.add_child(self._walk_siblings(target, node, depth + 1, path | {id(target)}))

        return data
