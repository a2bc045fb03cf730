"""
linegraph.commands - CLI command implementations
"""

from linegraph.commands import edit_cmd, format_cmd, parse_cmd, serve_cmd

__all__ = ["edit_cmd", "format_cmd", "parse_cmd", "serve_cmd"]
