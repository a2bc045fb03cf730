"""
linegraph.commands.format_cmd - Print a full re-serialization of a diagram.

Every node becomes a positioned line (placed nodes get their placed
coordinates), followed by every edge. Comments-as-nodes and blank lines
are not preserved; use the edit commands for minimal rewrites.
"""

from __future__ import annotations

import argparse

from linegraph.commands._io import config_for, read_document, write_document
from linegraph.graph.factory import build_graph


def run(args: argparse.Namespace) -> int:
    graph = build_graph(read_document(args.file), config_for(args))
    text = graph.to_text()
    if args.write:
        write_document(args.file, text + "\n" if text else text)
    else:
        print(text)
    return 0
