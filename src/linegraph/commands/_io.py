"""Shared helpers for commands that read and write diagram files."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from linegraph.config import load_config


def read_document(path: Path) -> str:
    """Read a diagram file exactly, line endings included."""
    with Path(path).open(encoding="utf-8", newline="") as fh:
        return fh.read()


def write_document(path: Path, text: str) -> None:
    with Path(path).open("w", encoding="utf-8", newline="") as fh:
        fh.write(text)


def config_for(args: argparse.Namespace) -> dict[str, Any]:
    """Load configuration honouring the global ``--config`` option."""
    return load_config(getattr(args, "config", None))
