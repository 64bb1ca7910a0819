"""GraftOperator — splice an incoming reference onto a live layout.

A graft promotes an ``incoming`` affordance into a real subtree:

1. build a fresh incoming-variant hierarchy rooted at the referenced entity,
   laid out in its own coordinate system;
2. find the anchor entity's occurrence inside that fresh tree;
3. rigidly translate the fresh tree so that occurrence lands on the live
   anchor's position;
4. detach the occurrence (the live anchor already shows it) and drop the
   reference from the live anchor's ``incoming`` list;
5. register the fresh tree as a new group.

Every check runs before the first mutation: a failed graft leaves the live
groups exactly as they were.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tagtree.domain.errors import GraftConsistencyError
from tagtree.domain.hierarchy import Group
from tagtree.domain.types import RegraftPolicy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tagtree.domain.hierarchy import IncomingRef
    from tagtree.layout.layers import LayerAssigner
    from tagtree.layout.walker import GraphWalker

logger = logging.getLogger(__name__)


def _index_by_identity(items: Sequence[object], target: object) -> int:
    for i, item in enumerate(items):
        if item is target:
            return i
    return -1


class GraftOperator:
    """Builds, positions, and registers grafted groups."""

    def __init__(
        self,
        walker: GraphWalker,
        assigner: LayerAssigner,
        *,
        row_height: float,
        regraft: RegraftPolicy = RegraftPolicy.REUSE,
    ) -> None:
        self._walker = walker
        self._assigner = assigner
        self.row_height = row_height
        self.regraft = regraft

    def existing(self, ref: IncomingRef, groups: Sequence[Group]) -> Group | None:
        """A group already grafted from *ref*, if any."""
        for group in groups:
            if group.anchor is ref.anchor and group.root.node is ref.node:
                return group
        return None

    def graft(self, ref: IncomingRef, groups: list[Group]) -> Group:
        """Graft *ref* and append the resulting group to *groups*.

        Raises:
            GraftConsistencyError: The reference is stale or the anchor is
                missing from its own freshly built subtree.
        """
        if not 0 <= ref.group_index < len(groups):
            msg = f"Group index {ref.group_index} out of range ({len(groups)} groups)"
            raise GraftConsistencyError(msg)

        if self.regraft is RegraftPolicy.REUSE:
            found = self.existing(ref, groups)
            if found is not None:
                logger.debug("Reusing grafted group for %r", ref.node.label)
                return found

        position = _index_by_identity(ref.anchor.incoming, ref.node)
        if position < 0:
            msg = f"{ref.node.label!r} is not an incoming reference of {ref.anchor.name!r}"
            raise GraftConsistencyError(msg)

        root = self._walker.build(ref.node)
        nodes, _edges = root.flatten()
        self._assigner.assign(nodes)
        for node in nodes:
            node.y = node.depth * self.row_height

        match = root.find(ref.anchor.node, include_self=False)
        if match is None:
            msg = f"Anchor {ref.anchor.name!r} not found in subtree of {ref.node.label!r}"
            raise GraftConsistencyError(msg)

        dx = ref.anchor.offset - match.offset
        dy = ref.anchor.y - match.y
        for node in nodes:
            node.offset += dx
            node.y += dy

        match.detach()
        del ref.anchor.incoming[position]

        group = Group(
            index=ref.group_index,
            root=root,
            anchor=ref.anchor,
            offset=groups[ref.group_index].offset,
            dx=dx,
            dy=dy,
        )
        groups.append(group)
        logger.debug(
            "Grafted %r onto %r (dx=%.1f, dy=%.1f, nodes=%d)",
            ref.node.label,
            ref.anchor.name,
            dx,
            dy,
            len(nodes),
        )
        return group
