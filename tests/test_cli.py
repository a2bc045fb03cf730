"""Tests for the linegraph command-line interface."""

from __future__ import annotations

import json

import pytest

from linegraph.cli import create_parser, main


@pytest.fixture
def diagram(tmp_path, monkeypatch):
    """A diagram file in an isolated working directory (no config file)."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "diagram.txt"
    path.write_text("10,20,A\nB\nA -> B\n", encoding="utf-8")
    return path


class TestParser:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_subcommands_registered(self):
        parser = create_parser()
        args = parser.parse_args(["connect", "f.txt", "A", "B", "--anchors", "bottom,top"])

        assert args.command == "connect"
        assert args.anchors == "bottom,top"


class TestParseCommand:
    def test_lists_nodes_and_edges(self, diagram, capsys):
        assert main(["parse", str(diagram)]) == 0

        out = capsys.readouterr().out
        assert "Nodes (2):" in out
        assert "A @ 10,20 [line 1]" in out
        assert "A->B: right -> left [line 3]" in out

    def test_json_output(self, diagram, capsys):
        assert main(["parse", str(diagram), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert set(data["nodes"]) == {"A", "B"}
        assert data["edges"][0]["line"] == "A -> B"

    def test_strict_mode_reports_suspicious_lines(self, diagram, capsys):
        diagram.write_text("A => B\n", encoding="utf-8")

        assert main(["parse", str(diagram), "--strict"]) == 1
        assert "malformed edge" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        assert main(["parse", str(tmp_path / "nope.txt")]) == 1
        assert "Error" in capsys.readouterr().err


class TestEditCommands:
    def test_move_prints_updated_text(self, diagram, capsys):
        assert main(["move", str(diagram), "A", "30", "40"]) == 0

        assert capsys.readouterr().out == "30,40,A\nB\nA -> B\n"
        assert diagram.read_text(encoding="utf-8") == "10,20,A\nB\nA -> B\n"

    def test_move_write(self, diagram):
        assert main(["move", str(diagram), "A", "30", "40", "--write"]) == 0
        assert diagram.read_text(encoding="utf-8") == "30,40,A\nB\nA -> B\n"

    def test_move_unknown_node(self, diagram, capsys):
        assert main(["move", str(diagram), "Ghost", "1", "1"]) == 1
        assert "Ghost" in capsys.readouterr().err

    def test_connect_write(self, diagram):
        assert main(["connect", str(diagram), "B", "A", "--anchors", "bottom,top", "--write"]) == 0
        assert diagram.read_text(encoding="utf-8") == "10,20,A\nB\nA -> B\nB -} A\n"

    def test_connect_duplicate_reports_no_change(self, diagram, capsys):
        assert main(["connect", str(diagram), "A", "B"]) == 0
        assert "No change." in capsys.readouterr().err

    def test_remove_edge_write(self, diagram):
        assert main(["remove-edge", str(diagram), "A -> B", "--write"]) == 0
        assert diagram.read_text(encoding="utf-8") == "10,20,A\nB\n"

    def test_remove_edge_by_id(self, diagram, capsys):
        assert main(["remove-edge", str(diagram), "A->B", "--id"]) == 0
        assert capsys.readouterr().out == "10,20,A\nB\n"


class TestFormatCommand:
    def test_prints_full_serialization(self, diagram, capsys):
        assert main(["format", str(diagram)]) == 0
        assert capsys.readouterr().out == "10,20,A\n50,50,B\nA -> B\n"
