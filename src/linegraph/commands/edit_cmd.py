"""
linegraph.commands.edit_cmd - Apply one graph edit to a diagram file.

Subcommands share one shape: read the file, rewrite the affected line,
then print the new text or write it back with ``--write``.
"""

from __future__ import annotations

import argparse
import sys

from linegraph.commands._io import read_document, write_document
from linegraph.utilities.text_writer import (
    apply_connect,
    apply_node_move,
    apply_remove_edge,
    remove_edge_by_id,
)


def _emit(args: argparse.Namespace, before: str, after: str) -> int:
    if after == before:
        print("No change.", file=sys.stderr)
    if args.write:
        if after != before:
            write_document(args.file, after)
    else:
        sys.stdout.write(after)
        if after and not after.endswith("\n"):
            sys.stdout.write("\n")
    return 0


def run_move(args: argparse.Namespace) -> int:
    text = read_document(args.file)
    return _emit(args, text, apply_node_move(text, args.node, args.x, args.y))


def run_connect(args: argparse.Namespace) -> int:
    source_anchor, _, target_anchor = args.anchors.partition(",")
    text = read_document(args.file)
    updated = apply_connect(
        text, args.source, args.target, source_anchor or "right", target_anchor or "left"
    )
    return _emit(args, text, updated)


def run_remove_edge(args: argparse.Namespace) -> int:
    text = read_document(args.file)
    if args.id:
        updated = remove_edge_by_id(text, args.line)
    else:
        updated = apply_remove_edge(text, args.line)
    return _emit(args, text, updated)
