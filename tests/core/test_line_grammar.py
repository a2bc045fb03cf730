"""Tests for the line grammar: classification and parser precedence."""

import pytest

from linegraph.graph.parsers import (
    BlankLine,
    EdgeLine,
    ParserRegistry,
    PositionedNodeLine,
    StandaloneNodeLine,
    classify,
    create_default_registry,
    split_lines,
)
from linegraph.graph.parsers.remainder import RemainderParser
from linegraph.graph.relations import EdgeStyle


class TestBlankLines:
    @pytest.mark.parametrize("line", ["", "   ", "\t", " \t  "])
    def test_whitespace_only_is_blank(self, line):
        assert classify(line) == BlankLine()


class TestEdgeLines:
    def test_right_left_edge(self):
        assert classify("A -> B") == EdgeLine("A", "B", EdgeStyle.RIGHT_LEFT)

    def test_edge_without_spaces(self):
        assert classify("A->B") == EdgeLine("A", "B", EdgeStyle.RIGHT_LEFT)

    def test_labels_are_trimmed(self):
        assert classify("  Web Server  ->  DB  ") == EdgeLine(
            "Web Server", "DB", EdgeStyle.RIGHT_LEFT
        )

    def test_bottom_top_edge(self):
        assert classify("A -} B") == EdgeLine("A", "B", EdgeStyle.BOTTOM_TOP)

    def test_legacy_bottom_top_spelling(self):
        assert classify("A -] B") == EdgeLine("A", "B", EdgeStyle.BOTTOM_TOP)

    def test_split_at_first_arrow(self):
        """Non-greedy before the token, greedy after."""
        assert classify("A -> B -> C") == EdgeLine("A", "B -> C", EdgeStyle.RIGHT_LEFT)

    def test_right_left_takes_precedence_over_bottom_top(self):
        assert classify("A -} B -> C") == EdgeLine("A -} B", "C", EdgeStyle.RIGHT_LEFT)

    def test_edge_takes_precedence_over_position(self):
        assert classify("10,20,A -> B") == EdgeLine("10,20,A", "B", EdgeStyle.RIGHT_LEFT)

    @pytest.mark.parametrize("line", ["A ->", "-> B", "A -}", "A => B", "A - > B"])
    def test_incomplete_connector_is_standalone(self, line):
        assert classify(line) == StandaloneNodeLine(line.strip())


class TestPositionedLines:
    def test_positioned_node(self):
        assert classify("10,20,Node") == PositionedNodeLine(10, 20, "Node")

    def test_negative_coordinates(self):
        assert classify("-5,-7,N") == PositionedNodeLine(-5, -7, "N")

    def test_label_may_contain_commas_and_spaces(self):
        assert classify("10, 20, Name with, comma") == PositionedNodeLine(
            10, 20, "Name with, comma"
        )

    def test_empty_label_is_standalone(self):
        assert classify("10,20,") == StandaloneNodeLine("10,20,")

    def test_non_integer_coordinates_are_standalone(self):
        assert classify("1.5,2,A") == StandaloneNodeLine("1.5,2,A")


class TestStandaloneLines:
    def test_plain_label(self):
        assert classify("Hello world") == StandaloneNodeLine("Hello world")

    def test_label_is_trimmed(self):
        assert classify("   Cache  ") == StandaloneNodeLine("Cache")


class TestSplitLines:
    def test_empty_text_has_no_lines(self):
        assert split_lines("") == []

    def test_trailing_newline_yields_blank_last_line(self):
        assert split_lines("A\n") == [(0, "A"), (1, "")]

    def test_crlf_endings_are_not_content(self):
        assert split_lines("A\r\nB") == [(0, "A"), (1, "B")]


class TestParserRegistry:
    def test_claim_and_parse_keeps_every_index(self):
        registry = create_default_registry()
        parsed = list(registry.claim_and_parse("A\n\nB -> C"))

        assert [p.index for p in parsed] == [0, 1, 2]
        assert parsed[0].kind == StandaloneNodeLine("A")
        assert parsed[1].kind == BlankLine()
        assert parsed[2].kind == EdgeLine("B", "C", EdgeStyle.RIGHT_LEFT)
        assert parsed[2].raw_text == "B -> C"

    def test_parsers_run_in_priority_order(self):
        registry = create_default_registry()
        priorities = [p.priority for p in registry.get_ordered()]
        assert priorities == sorted(priorities)
        assert priorities[-1] == 999

    def test_registration_order_does_not_matter(self):
        from linegraph.graph.parsers.edge import RightLeftEdgeParser

        registry = ParserRegistry()
        registry.register(RemainderParser())
        registry.register(RightLeftEdgeParser())

        assert registry.classify("A -> B") == EdgeLine("A", "B", EdgeStyle.RIGHT_LEFT)

    def test_empty_registry_is_still_total(self):
        registry = ParserRegistry()
        assert registry.classify("A -> B") == StandaloneNodeLine("A -> B")
        assert registry.classify("  ") == BlankLine()


class TestConnectorHeuristic:
    @pytest.mark.parametrize("line", ["A => B", "A ->", "A -", "A <- B", "A --> B)"])
    def test_suspicious_lines(self, line):
        assert RemainderParser.looks_like_connector(line)

    @pytest.mark.parametrize("line", ["Plain name", "Client-Server", "Web (v2)", "a-b-c"])
    def test_ordinary_labels(self, line):
        assert not RemainderParser.looks_like_connector(line)
