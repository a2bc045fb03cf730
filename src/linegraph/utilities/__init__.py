"""linegraph.utilities - Text rewriting helpers."""
