"""Tests for forward translation: text to Graph."""

import pytest

from linegraph.graph.builder import GraphBuilder
from linegraph.graph.factory import build_graph, parse
from linegraph.graph.GraphNode import Position
from linegraph.graph.parsers import ParsedLine, PositionedNodeLine, StandaloneNodeLine
from linegraph.graph.placement import GridPlacement, HashedPlacement
from linegraph.graph.relations import Anchor, EdgeStyle


class TestNodes:
    def test_standalone_nodes_have_no_position_line(self, simple_text):
        graph = parse(simple_text)

        a = graph.find_by_id("A")
        assert a.origin_line == 0
        assert a.position_line is None
        assert a.is_placed

    def test_positioned_node(self, positioned_text):
        graph = parse(positioned_text)

        a = graph.find_by_id("A")
        assert a.position == Position(10, 20)
        assert a.position_line == 0
        assert a.origin_line == 0
        assert not a.is_placed

    def test_node_order_is_first_mention(self, mixed_text):
        graph = parse(mixed_text)
        assert list(graph.nodes) == ["Web Server", "Database", "API", "Cache"]

    def test_edge_only_node_has_no_origin_line(self):
        graph = parse("A -> B")
        assert graph.find_by_id("B").origin_line is None

    def test_later_position_line_overrides_placed_position(self):
        graph = parse("A -> B\n10,20,A")

        a = graph.find_by_id("A")
        assert a.position == Position(10, 20)
        assert a.position_line == 1
        assert a.origin_line == 1

    def test_standalone_before_position_keeps_its_origin_line(self):
        graph = parse("A\n10,20,A")

        a = graph.find_by_id("A")
        assert a.origin_line == 0
        assert a.position_line == 1
        assert a.position == Position(10, 20)

    def test_first_position_line_wins(self):
        graph = parse("1,2,A\n3,4,A")

        a = graph.find_by_id("A")
        assert a.position == Position(1, 2)
        assert a.position_line == 0

    def test_repeated_label_is_one_node(self):
        graph = parse("A\nA\n  A  ")
        assert graph.node_count() == 1

    def test_empty_text(self):
        graph = parse("")
        assert graph.node_count() == 0
        assert graph.edge_count() == 0


class TestEdges:
    def test_edge_origin_line_counts_blank_lines(self):
        graph = parse("A\n\n\nA -> B")
        assert graph.edges[0].origin_line == 3

    def test_edge_fields(self, simple_text):
        edge = parse(simple_text).edges[0]

        assert edge.id == "A->B"
        assert edge.source_id == "A"
        assert edge.target_id == "B"
        assert edge.source_anchor is Anchor.RIGHT
        assert edge.target_anchor is Anchor.LEFT

    def test_bottom_top_anchors(self):
        edge = parse("A -} B").edges[0]
        assert edge.style is EdgeStyle.BOTTOM_TOP
        assert (edge.source_anchor, edge.target_anchor) == (Anchor.BOTTOM, Anchor.TOP)

    def test_edges_keep_declaration_order(self):
        graph = parse("C -> D\nA -> B\nB -> C")
        assert [e.id for e in graph.edges] == ["C->D", "A->B", "B->C"]

    def test_self_loop_is_kept(self):
        graph = parse("A -> A")

        assert graph.node_count() == 1
        assert graph.edges[0].is_self_loop

    def test_duplicate_edges_get_distinct_ids(self, mixed_text):
        graph = parse(mixed_text)

        ids = [e.id for e in graph.edges]
        assert ids == ["Web Server->API", "API->Database", "API->API", "Web Server->API#2"]
        assert graph.find_edge("Web Server->API#2").origin_line == 7

    def test_edges_for_node(self, mixed_text):
        graph = parse(mixed_text)
        assert {e.id for e in graph.edges_for("Database")} == {"API->Database"}


class TestPlacement:
    def test_grid_stacks_vertically(self, simple_text):
        graph = parse(simple_text)

        assert graph.find_by_id("A").position == Position(50, 50)
        assert graph.find_by_id("B").position == Position(50, 130)

    def test_grid_wraps_into_columns(self):
        graph = parse("A\nB\nC", placement=GridPlacement(rows=2))
        assert graph.find_by_id("C").position == Position(250, 50)

    def test_positioned_nodes_do_not_consume_grid_cells(self):
        graph = parse("10,10,X\nA")
        assert graph.find_by_id("A").position == Position(50, 50)

    def test_final_policy_is_returned(self, mixed_text):
        graph = parse(mixed_text)
        # Web Server, API and Cache were placed; Database was positioned
        assert graph.placement == GridPlacement(offset=3)

    def test_passed_policy_is_not_mutated(self):
        policy = GridPlacement()
        parse("A\nB", placement=policy)
        assert policy.offset == 0

    def test_parse_is_deterministic(self, mixed_text):
        first = parse(mixed_text)
        second = parse(mixed_text)
        assert [n.position for n in first.all_nodes()] == [n.position for n in second.all_nodes()]

    def test_hashed_placement_depends_only_on_label(self):
        alone = parse("Cache", placement=HashedPlacement())
        crowded = parse("A\nB\nC\nCache", placement=HashedPlacement())

        position = alone.find_by_id("Cache").position
        assert position == crowded.find_by_id("Cache").position
        assert 0 <= position.x < 800 and 0 <= position.y < 600


class TestStrictMode:
    def test_warns_about_mistyped_edge(self):
        graph = parse("A => B\nC -> D", strict=True)

        assert len(graph.warnings) == 1
        assert graph.warnings[0].line_index == 0
        assert "A => B" in str(graph.warnings[0])

    def test_does_not_change_the_graph(self):
        text = "A => B\nC -> D\nA ->"
        assert parse(text, strict=True).signature() == parse(text).signature()

    def test_off_by_default(self):
        assert parse("A => B").warnings == []


class TestBuildGraphFromConfig:
    def test_hashed_policy_from_config(self):
        graph = build_graph("A", {"placement": {"policy": "hashed"}})
        expected = parse("A", placement=HashedPlacement()).find_by_id("A").position
        assert graph.find_by_id("A").position == expected

    def test_strict_from_config(self):
        graph = build_graph("A => B", {"grammar": {"strict": True}})
        assert len(graph.warnings) == 1

    def test_unknown_policy_is_rejected(self):
        with pytest.raises(ValueError, match="placement policy"):
            build_graph("A", {"placement": {"policy": "spiral"}})


class TestGraphInvariants:
    @pytest.mark.parametrize(
        "text",
        [
            "",
            "A",
            "A -> A",
            "A -> B\nB -} A\n5,5,A",
            "x -> \n -> y\n1,2,\n\n\n,,,\nA -> B -> C",
            "10,20,A -> B\n-1,-1,B\nB -] C",
            "A -> B\nA -> B\nA -> B#2",
            "A -> B#2\nA -> B\nA -> B",
        ],
    )
    def test_ids_unique_and_edge_endpoints_exist(self, text):
        graph = parse(text)

        assert graph.check_invariants() == []
        ids = [n.id for n in graph.all_nodes()]
        assert len(ids) == len(set(ids))
        for edge in graph.iter_edges():
            assert graph.has_node(edge.source_id)
            assert graph.has_node(edge.target_id)

    def test_reparse_yields_same_structure(self, mixed_text):
        assert parse(mixed_text).signature() == parse(mixed_text).signature()

    def test_full_serialization_round_trips(self, mixed_text):
        graph = parse(mixed_text)
        reparsed = parse(graph.to_text())

        assert reparsed.signature() == graph.signature()
        for node in graph.all_nodes():
            assert reparsed.find_by_id(node.id).position == node.position


class TestGraphBuilder:
    def test_labels_ending_in_a_counter_get_distinct_edge_ids(self):
        graph = parse("A -> B\nA -> B\nA -> B#2")

        assert [e.id for e in graph.iter_edges()] == ["A->B", "A->B#2", "A->B#2#2"]
        assert graph.find_edge("A->B#2#2").target_id == "B#2"

    def test_builder_accepts_parsed_lines(self):
        builder = GraphBuilder()
        builder.add_parsed_line(ParsedLine(4, "Solo", StandaloneNodeLine("Solo")))
        graph = builder.build()

        assert graph.find_by_id("Solo").origin_line == 4

    def test_built_graphs_are_independent(self):
        builder = GraphBuilder()
        builder.add_parsed_line(ParsedLine(0, "A", StandaloneNodeLine("A")))
        first = builder.build()
        builder.add_parsed_line(ParsedLine(1, "B", StandaloneNodeLine("B")))

        assert first.node_count() == 1

    def test_later_lines_do_not_change_a_built_graph(self):
        builder = GraphBuilder()
        builder.add_parsed_line(ParsedLine(0, "A", StandaloneNodeLine("A")))
        first = builder.build()
        placed = first.find_by_id("A").position
        builder.add_parsed_line(ParsedLine(1, "9,9,A", PositionedNodeLine(9, 9, "A")))

        assert first.find_by_id("A").position == placed
        assert first.find_by_id("A").position_line is None
        assert builder.build().find_by_id("A").position == Position(9, 9)
