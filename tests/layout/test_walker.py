"""Tests for GraphWalker — cycle breaking, incoming classification, variants."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tagtree.domain.entities import INCOMING, OUTGOING, Link, Word
from tagtree.domain.errors import MalformedArrowDataError
from tagtree.domain.hierarchy import HierarchyNode
from tagtree.domain.types import ArrowPolicy, NodeKind
from tagtree.layout.walker import GraphWalker

if TYPE_CHECKING:
    from tests.conftest import EatGraph, MeetGraph


def _names(nodes: list[HierarchyNode]) -> list[str]:
    return [n.name for n in nodes]


def _ring(size: int) -> list[Word]:
    """Words joined in a ring by outgoing links: w0 -> w1 -> ... -> w0."""
    words = [Word(f"w{i}", id=f"w{i}") for i in range(size)]
    for i, word in enumerate(words):
        link = Link(text=f"l{i}", id=f"l{i}")
        link.add_argument(word, direction=OUTGOING)
        link.add_argument(words[(i + 1) % size], direction=OUTGOING)
    return words


class TestConstruction:
    def test_negative_depth_rejected(self) -> None:
        with pytest.raises(ValueError, match="max_depth"):
            GraphWalker(-1)

    def test_defaults(self) -> None:
        walker = GraphWalker()
        assert walker.max_depth == 20
        assert walker.arrow_policy is ArrowPolicy.PERMISSIVE


class TestIsIncoming:
    def test_word_is_never_incoming(self, eat_graph: EatGraph) -> None:
        assert GraphWalker().is_incoming(eat_graph.mary, eat_graph.eats) is False

    def test_arrow_into_node(self, eat_graph: EatGraph) -> None:
        walker = GraphWalker()
        assert walker.is_incoming(eat_graph.agent, eat_graph.eats) is True
        assert walker.is_incoming(eat_graph.theme, eat_graph.eats) is False

    def test_node_absent_from_link_is_incoming(self, eat_graph: EatGraph) -> None:
        assert GraphWalker().is_incoming(eat_graph.agent, eat_graph.pizza) is True

    def test_missing_direction_is_outgoing_when_permissive(self) -> None:
        w = Word("w")
        link = Link(text="l")
        link.add_argument(w)
        assert GraphWalker().is_incoming(link, w) is False

    def test_missing_direction_raises_when_strict(self) -> None:
        w = Word("w")
        link = Link(text="l", id="l9")
        link.add_argument(w)
        walker = GraphWalker(arrow_policy=ArrowPolicy.STRICT)
        with pytest.raises(MalformedArrowDataError, match="l9"):
            walker.is_incoming(link, w)


class TestBuild:
    def test_incoming_link_recorded_not_recursed(self, eat_graph: EatGraph) -> None:
        root = GraphWalker().build(eat_graph.eats)
        assert root.depth == 0
        assert root.kind is NodeKind.WORD
        assert root.incoming == [eat_graph.agent]
        assert _names(root.children) == ["theme"]

    def test_link_participants_become_children(self, eat_graph: EatGraph) -> None:
        root = GraphWalker().build(eat_graph.eats)
        theme = root.children[0]
        assert theme.depth == 1
        assert theme.kind is NodeKind.LINK
        assert _names(theme.children) == ["pizza"]
        assert theme.children[0].depth == 2

    def test_receives_arrow_marks_incoming_participant(self, eat_graph: EatGraph) -> None:
        root = GraphWalker().build(eat_graph.agent)
        by_name = {child.name: child for child in root.children}
        assert by_name["eats"].receives_arrow is True
        assert by_name["Mary"].receives_arrow is False

    def test_children_follow_links_then_participants(self, eat_graph: EatGraph) -> None:
        outer = Link(text="about", id="l3")
        outer.add_argument(eat_graph.theme, direction=OUTGOING)
        root = GraphWalker().build(eat_graph.theme)
        assert _names(root.children) == ["about", "eats", "pizza"]

    def test_source_is_excluded(self, eat_graph: EatGraph) -> None:
        root = GraphWalker().build(eat_graph.theme, source=eat_graph.eats)
        assert all(child.node is not eat_graph.eats for child in root.children)
        assert _names(root.children) == ["pizza"]

    def test_start_depth(self, eat_graph: EatGraph) -> None:
        root = GraphWalker().build(eat_graph.eats, depth=3)
        assert root.depth == 3
        assert root.children[0].depth == 4

    def test_parent_pointers(self, eat_graph: EatGraph) -> None:
        root = GraphWalker().build(eat_graph.eats)
        theme = root.children[0]
        assert theme.parent is root
        assert theme.children[0].parent is theme

    def test_self_participating_link(self) -> None:
        link = Link(text="loop", id="l")
        link.add_argument(link, direction=OUTGOING)
        root = GraphWalker().build(link)
        assert root.children == []
        assert root.incoming == []


class TestCycles:
    def test_ring_terminates(self) -> None:
        words = _ring(3)
        root = GraphWalker().build(words[0])
        nodes, _edges = root.flatten()
        assert len(nodes) == 11
        assert max(n.depth for n in nodes) <= 20

    def test_no_entity_repeats_on_a_path(self) -> None:
        words = _ring(4)
        root = GraphWalker().build(words[0])

        def check(node: HierarchyNode, seen: set[int]) -> None:
            assert id(node.node) not in seen
            for child in node.children:
                check(child, seen | {id(node.node)})

        check(root, set())

    def test_max_depth_truncates(self) -> None:
        words = [Word(f"w{i}", id=f"w{i}") for i in range(6)]
        for i in range(5):
            link = Link(text=f"l{i}", id=f"l{i}")
            link.add_argument(words[i], direction=OUTGOING)
            link.add_argument(words[i + 1], direction=OUTGOING)
        root = GraphWalker(max_depth=2).build(words[0])
        nodes, _edges = root.flatten()
        assert max(n.depth for n in nodes) == 2
        leaf = root.children[0].children[0]
        assert leaf.name == "w1"
        assert leaf.children == []
        assert leaf.incoming == []

    def test_depth_zero_returns_bare_root(self, eat_graph: EatGraph) -> None:
        root = GraphWalker(max_depth=0).build(eat_graph.eats)
        assert root.children == []
        assert root.incoming == []

    def test_shared_entity_materialized_per_path(self) -> None:
        root_word = Word("root")
        shared = Word("shared")
        for name in ("a", "b"):
            link = Link(text=name)
            link.add_argument(root_word, direction=OUTGOING)
            link.add_argument(shared, direction=OUTGOING)
        root = GraphWalker(max_depth=2).build(root_word)
        occurrences = [n for n in root.descendants() if n.node is shared]
        assert len(occurrences) == 2
        assert occurrences[0] is not occurrences[1]


class TestMalformedArrows:
    def _graph(self) -> tuple[Word, Link]:
        w = Word("w")
        x = Word("x")
        link = Link(text="short", id="s")
        link.add_argument(w)
        link.add_argument(x)
        return w, link

    def test_permissive_treats_missing_as_outgoing(self) -> None:
        w, link = self._graph()
        root = GraphWalker().build(w)
        assert root.incoming == []
        assert root.children[0].node is link
        assert root.children[0].children[0].receives_arrow is False

    def test_strict_raises(self) -> None:
        w, _link = self._graph()
        walker = GraphWalker(arrow_policy=ArrowPolicy.STRICT)
        with pytest.raises(MalformedArrowDataError):
            walker.build(w)

    def test_partial_arrows_use_recorded_prefix(self) -> None:
        w = Word("w")
        x = Word("x")
        link = Link(text="partial")
        link.add_argument(w, direction=INCOMING)
        link.add_argument(x)
        root = GraphWalker().build(w)
        assert root.incoming == [link]


class TestBuildSiblings:
    def test_trigger_links_become_children(self, meet_graph: MeetGraph) -> None:
        root = GraphWalker().build_siblings(meet_graph.met)
        assert _names(root.children) == ["meet"]
        event = root.children[0]
        assert _names(event.children) == ["John", "Mary"]

    def test_coreference_becomes_sibling_group(self, meet_graph: MeetGraph) -> None:
        root = GraphWalker().build_siblings(meet_graph.met)
        john = root.children[0].children[0]
        assert len(john.siblings) == 1
        group = john.siblings[0]
        assert group.relation == "coref"
        assert group.link is meet_graph.coref
        assert _names(group.args) == ["he"]

    def test_sibling_args_share_depth_and_parent(self, meet_graph: MeetGraph) -> None:
        root = GraphWalker().build_siblings(meet_graph.met)
        john = root.children[0].children[0]
        he = john.siblings[0].args[0]
        assert he.depth == john.depth == 2
        assert he.parent is john
        assert john.is_sibling_of(he)
        assert he not in john.children

    def test_non_top_links_ignored(self, meet_graph: MeetGraph) -> None:
        meet_graph.coref.top = False
        root = GraphWalker().build_siblings(meet_graph.met)
        john = root.children[0].children[0]
        assert john.siblings == []

    def test_untriggered_word_has_no_children(self, meet_graph: MeetGraph) -> None:
        root = GraphWalker().build_siblings(meet_graph.mary)
        assert root.children == []

    def test_coreference_cycle_terminates(self) -> None:
        a, b, c = Word("a"), Word("b"), Word("c")
        for left, right in ((a, b), (b, c), (c, a)):
            coref = Link(text="coref", reltype="coref")
            coref.add_argument(left)
            coref.add_argument(right)
        root = GraphWalker().build_siblings(a)
        names = [n.name for n in root.descendants()]
        assert names.count("a") == 1
        assert set(names) == {"a", "b", "c"}
