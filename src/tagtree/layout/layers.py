"""LayerAssigner — horizontal offsets for a flattened hierarchy.

Tidy-tree variant.  The first two passes run one depth layer at a time
from the deepest layer up; the sweep runs from the top layer down:

1. Initial offsets.  A parent sits at the midpoint of its first and last
   child; a childless node collapses onto its left neighbour (the first
   node of a layer starts at 0).
2. Collision resolution.  Each node is pushed right of its left neighbour
   by half of both label widths plus a separation; when a push is needed
   the node's subtree and every subtree to its right in the layer move
   together.
3. Final sweep.  Every layer is re-checked top down in offset order; a
   sibling arg's subtree flattens before its owner's children, so pass 2
   can push it into them, and the sweep moves it clear.

Sibling (coreference) neighbours get a wider separation than ordinary
neighbours.  Overlap-freedom holds only if the measurer matches the font
the labels are eventually drawn with.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from tagtree.domain.errors import MeasurementUnavailableError

if TYPE_CHECKING:
    from tagtree.domain.hierarchy import HierarchyNode
    from tagtree.infrastructure.measure import TextMeasurer

CHILD_SEPARATION = 20.0
SIBLING_SEPARATION = 50.0


def group_layers(nodes: Sequence[HierarchyNode]) -> dict[int, list[HierarchyNode]]:
    """Bucket *nodes* by depth, keeping their order within each bucket."""
    layers: dict[int, list[HierarchyNode]] = {}
    for node in nodes:
        layers.setdefault(node.depth, []).append(node)
    return layers


class LayerAssigner:
    """Assigns ``offset`` and ``width`` to every node, in place."""

    def __init__(
        self,
        measurer: TextMeasurer | None,
        *,
        child_separation: float = CHILD_SEPARATION,
        sibling_separation: float = SIBLING_SEPARATION,
    ) -> None:
        self._measurer = measurer
        self.child_separation = child_separation
        self.sibling_separation = sibling_separation
        self._max_width = 0.0

    def measure(self, label: str) -> float:
        """Measure *label*, surfacing any collaborator failure as a hard error."""
        if self._measurer is None:
            raise MeasurementUnavailableError("No text measurer configured")
        try:
            return float(self._measurer.measure(label))
        except MeasurementUnavailableError:
            raise
        except Exception as exc:
            msg = f"Text measurement failed for {label!r}: {exc}"
            raise MeasurementUnavailableError(msg) from exc

    def separation(self, prev: HierarchyNode, node: HierarchyNode) -> float:
        if prev.is_sibling_of(node) or node.is_sibling_of(prev):
            return self.sibling_separation
        return self.child_separation

    def assign(self, nodes: Sequence[HierarchyNode]) -> float:
        """Lay out *nodes* (in flatten order) and return the max offset seen."""
        self._max_width = 0.0
        layers = group_layers(nodes)

        for depth in sorted(layers, reverse=True):
            layer = layers[depth]

            # 1st pass: initial offset from children
            for j, node in enumerate(layer):
                if node.children:
                    left, right = node.children[0], node.children[-1]
                    node.offset = (left.offset + right.offset) / 2
                elif j > 0:
                    node.offset = layer[j - 1].offset
                else:
                    node.offset = 0.0

            # 2nd pass: push each subtree clear of its left neighbour
            for j, node in enumerate(layer):
                node.width = self.measure(node.name)
                if j > 0:
                    prev = layer[j - 1]
                    dx = (
                        prev.offset
                        + prev.width / 2
                        + node.width / 2
                        - node.offset
                        + self.separation(prev, node)
                    )
                    if dx > 0:
                        for right in layer[j:]:
                            self._shift(right, dx, root=True)
                self._track(node.offset)

        # 3rd pass: re-separate every layer, top down
        for depth in sorted(layers):
            self._sweep(layers[depth])

        return self._max_width

    def _sweep(self, layer: list[HierarchyNode]) -> None:
        """Re-separate *layer* in offset order, pushing whole subtrees right."""
        ordered = sorted(layer, key=lambda n: n.offset)
        for j in range(1, len(ordered)):
            prev, node = ordered[j - 1], ordered[j]
            dx = prev.offset + prev.width / 2 + node.width / 2 - node.offset
            dx += self.separation(prev, node)
            if dx > 0:
                for right in ordered[j:]:
                    self._shift(right, dx, root=True)

    def _track(self, offset: float) -> None:
        if offset > self._max_width:
            self._max_width = offset

    def _shift(self, node: HierarchyNode, dx: float, *, root: bool = False) -> None:
        node.offset += dx
        self._track(node.offset)
        if not root:
            for group in node.siblings:
                for arg in group.args:
                    self._shift(arg, dx)
        for child in node.children:
            self._shift(child, dx)
