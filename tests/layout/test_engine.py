"""Tests for LayoutEngine — full passes, groups, sink, and interaction entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tagtree.config.models import LayoutConfig
from tagtree.domain.errors import MeasurementUnavailableError
from tagtree.domain.types import EdgeType, HierarchyVariant
from tagtree.layout.engine import CollectingSink, LayoutEngine

if TYPE_CHECKING:
    from tagtree.infrastructure.measure import CellWidthMeasurer
    from tests.conftest import EatGraph, MeetGraph


class TestLayout:
    def test_coreference_is_default(
        self, meet_graph: MeetGraph, measurer: CellWidthMeasurer
    ) -> None:
        tree = LayoutEngine(measurer).layout(meet_graph.met)
        assert [n.name for n in tree.nodes] == ["met", "meet", "John", "he", "Mary"]
        assert tree.max_width == 130.0
        assert tree.layer_count == 3
        assert tree.row_height == 50.0

    def test_origin_centers_layout(
        self, meet_graph: MeetGraph, measurer: CellWidthMeasurer
    ) -> None:
        tree = LayoutEngine(measurer).layout(meet_graph.met)
        assert tree.origin == (-65.0, -75.0)

    def test_rows_follow_depth(self, meet_graph: MeetGraph, measurer: CellWidthMeasurer) -> None:
        engine = LayoutEngine(measurer, config=LayoutConfig(row_height=30.0))
        tree = engine.layout(meet_graph.met)
        assert {n.name: n.y for n in tree.nodes} == {
            "met": 0.0,
            "meet": 30.0,
            "John": 60.0,
            "he": 60.0,
            "Mary": 60.0,
        }

    def test_edges(self, meet_graph: MeetGraph, measurer: CellWidthMeasurer) -> None:
        tree = LayoutEngine(measurer).layout(meet_graph.met)
        summary = [(e.type, e.source.name, e.target.name, e.label) for e in tree.links]
        assert summary == [
            (EdgeType.SIBLING, "John", "he", "coref"),
            (EdgeType.CHILD, "meet", "John", None),
            (EdgeType.CHILD, "meet", "Mary", None),
            (EdgeType.CHILD, "met", "meet", None),
        ]

    def test_variant_override(self, eat_graph: EatGraph, measurer: CellWidthMeasurer) -> None:
        engine = LayoutEngine(measurer)
        tree = engine.layout(eat_graph.eats, variant=HierarchyVariant.INCOMING)
        assert tree.root.incoming == [eat_graph.agent]
        assert [n.name for n in tree.nodes] == ["eats", "theme", "pizza"]

    def test_deterministic(self, meet_graph: MeetGraph, measurer: CellWidthMeasurer) -> None:
        engine = LayoutEngine(measurer)
        first = [(n.name, n.offset, n.y) for n in engine.layout(meet_graph.met).nodes]
        second = [(n.name, n.offset, n.y) for n in engine.layout(meet_graph.met).nodes]
        assert first == second

    def test_resets_groups(self, eat_graph: EatGraph, measurer: CellWidthMeasurer) -> None:
        engine = LayoutEngine(measurer, config=LayoutConfig(variant=HierarchyVariant.INCOMING))
        engine.layout(eat_graph.eats)
        engine.graft(engine.incoming_refs()[0])
        assert len(engine.groups) == 2

        tree = engine.layout(eat_graph.eats)

        assert len(engine.groups) == 1
        assert engine.groups[0].root is tree.root
        assert engine.current is tree
        assert engine.selected is eat_graph.eats

    def test_max_depth_from_config(self, eat_graph: EatGraph, measurer: CellWidthMeasurer) -> None:
        config = LayoutConfig(max_depth=1, variant=HierarchyVariant.INCOMING)
        tree = LayoutEngine(measurer, config=config).layout(eat_graph.eats)
        assert [n.name for n in tree.nodes] == ["eats", "theme"]

    def test_no_measurer(self, eat_graph: EatGraph) -> None:
        engine = LayoutEngine(None)
        with pytest.raises(MeasurementUnavailableError):
            engine.layout(eat_graph.eats)
        assert engine.groups == []
        assert engine.current is None


class TestIncomingRefs:
    def test_none_when_all_outgoing(
        self, eat_graph: EatGraph, measurer: CellWidthMeasurer
    ) -> None:
        engine = LayoutEngine(measurer, config=LayoutConfig(variant=HierarchyVariant.INCOMING))
        engine.layout(eat_graph.agent)
        assert engine.incoming_refs() == []

    def test_refs_for_anchor(self, eat_graph: EatGraph, measurer: CellWidthMeasurer) -> None:
        engine = LayoutEngine(measurer, config=LayoutConfig(variant=HierarchyVariant.INCOMING))
        tree = engine.layout(eat_graph.pizza)
        [ref] = engine.incoming_refs()
        assert ref.node is eat_graph.theme
        assert ref.anchor is tree.root
        assert ref.group_index == 0

    def test_group_filter(self, eat_graph: EatGraph, measurer: CellWidthMeasurer) -> None:
        engine = LayoutEngine(measurer, config=LayoutConfig(variant=HierarchyVariant.INCOMING))
        engine.layout(eat_graph.pizza)
        assert engine.incoming_refs(group_index=1) == []


class TestSink:
    def test_layout_rendered(self, meet_graph: MeetGraph, measurer: CellWidthMeasurer) -> None:
        sink = CollectingSink()
        engine = LayoutEngine(measurer, sink=sink)
        tree = engine.layout(meet_graph.met)
        assert sink.layouts == [tree]
        assert sink.group_renders == []

    def test_graft_renders_all_groups(
        self, eat_graph: EatGraph, measurer: CellWidthMeasurer
    ) -> None:
        sink = CollectingSink()
        config = LayoutConfig(variant=HierarchyVariant.INCOMING)
        engine = LayoutEngine(measurer, config=config, sink=sink)
        engine.layout(eat_graph.eats)
        engine.graft(engine.incoming_refs()[0])
        assert len(sink.group_renders) == 1
        assert sink.group_renders[0] == engine.groups


class TestInteraction:
    def test_select_reroots(self, eat_graph: EatGraph, measurer: CellWidthMeasurer) -> None:
        engine = LayoutEngine(measurer)
        tree = engine.select(eat_graph.pizza)
        assert tree.root.node is eat_graph.pizza
        assert engine.selected is eat_graph.pizza

    def test_request_incoming_grafts(
        self, eat_graph: EatGraph, measurer: CellWidthMeasurer
    ) -> None:
        engine = LayoutEngine(measurer, config=LayoutConfig(variant=HierarchyVariant.INCOMING))
        engine.layout(eat_graph.eats)
        group = engine.request_incoming(engine.incoming_refs()[0])
        assert group.root.node is eat_graph.agent
        assert len(engine.groups) == 2
        assert engine.selected is eat_graph.eats

    def test_activate_incoming_reroots(
        self, eat_graph: EatGraph, measurer: CellWidthMeasurer
    ) -> None:
        engine = LayoutEngine(measurer, config=LayoutConfig(variant=HierarchyVariant.INCOMING))
        engine.layout(eat_graph.eats)
        tree = engine.activate_incoming(engine.incoming_refs()[0])
        assert tree.root.node is eat_graph.agent
        assert engine.selected is eat_graph.agent
        assert len(engine.groups) == 1
