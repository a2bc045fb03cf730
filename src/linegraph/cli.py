"""
linegraph.cli - Command-line interface.

Main entry point for the linegraph CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from linegraph import __version__
from linegraph.commands import edit_cmd, format_cmd, parse_cmd, serve_cmd
from linegraph.exceptions import LinegraphError


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="linegraph",
        description="Keep a plain-text diagram and its graph in sync",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Line format:
  A -> B          edge A to B, right side to left side
  A -} B          edge A to B, bottom to top
  10,20,A         node A at (10, 20)
  A               node A, placed automatically

Examples:
  linegraph parse diagram.txt                 # List nodes and edges
  linegraph parse diagram.txt --strict        # Warn about mistyped arrows
  linegraph move diagram.txt A 30 40 --write  # Rewrite A's position line
  linegraph connect diagram.txt A B           # Append "A -> B"
  linegraph remove-edge diagram.txt "A -> B"  # Delete that line
  linegraph serve --store ./docs --user me    # REST API for an editor
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"linegraph {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Show the graph a file describes")
    parse_parser.add_argument("file", type=Path, help="Diagram file")
    parse_parser.add_argument("--json", action="store_true", help="Output JSON")
    parse_parser.add_argument(
        "--strict",
        action="store_true",
        help="Warn about lines that look like malformed edges",
    )

    # format command
    format_parser = subparsers.add_parser(
        "format", help="Rewrite the whole file as positioned nodes and edges"
    )
    format_parser.add_argument("file", type=Path, help="Diagram file")
    format_parser.add_argument("--write", action="store_true", help="Write back to the file")

    # move command
    move_parser = subparsers.add_parser("move", help="Move a node with a positioned line")
    move_parser.add_argument("file", type=Path, help="Diagram file")
    move_parser.add_argument("node", help="Node label")
    move_parser.add_argument("x", type=int, help="New x coordinate")
    move_parser.add_argument("y", type=int, help="New y coordinate")
    move_parser.add_argument("--write", action="store_true", help="Write back to the file")

    # connect command
    connect_parser = subparsers.add_parser("connect", help="Add an edge between two nodes")
    connect_parser.add_argument("file", type=Path, help="Diagram file")
    connect_parser.add_argument("source", help="Source node label")
    connect_parser.add_argument("target", help="Target node label")
    connect_parser.add_argument(
        "--anchors",
        default="right,left",
        help="Source and target anchors, e.g. bottom,top (default: right,left)",
        metavar="SRC,TGT",
    )
    connect_parser.add_argument("--write", action="store_true", help="Write back to the file")

    # remove-edge command
    remove_parser = subparsers.add_parser("remove-edge", help="Delete one edge line")
    remove_parser.add_argument("file", type=Path, help="Diagram file")
    remove_parser.add_argument("line", help='Edge line, e.g. "A -> B" (or an edge id with --id)')
    remove_parser.add_argument(
        "--id", action="store_true", help="Treat LINE as an edge id such as A->B#2"
    )
    remove_parser.add_argument("--write", action="store_true", help="Write back to the file")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API server")
    serve_parser.add_argument("--store", type=Path, help="Document directory", metavar="DIR")
    serve_parser.add_argument("--user", help="User id whose document to edit")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port")

    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _configure_logging(args)

    try:
        if args.command == "parse":
            return parse_cmd.run(args)
        elif args.command == "format":
            return format_cmd.run(args)
        elif args.command == "move":
            return edit_cmd.run_move(args)
        elif args.command == "connect":
            return edit_cmd.run_connect(args)
        elif args.command == "remove-edge":
            return edit_cmd.run_remove_edge(args)
        elif args.command == "serve":
            return serve_cmd.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except (LinegraphError, OSError, ValueError) as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
