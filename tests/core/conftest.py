"""Pytest fixtures for core tests."""

import pytest


@pytest.fixture
def simple_text():
    """Two standalone nodes and one edge."""
    return "A\nB\nA -> B"


@pytest.fixture
def positioned_text():
    """Node A carries its own position line."""
    return "10,20,A\nB\nA -> B"


@pytest.fixture
def mixed_text():
    """Every line kind, blank lines, a duplicate edge and a self loop."""
    return "\n".join(
        [
            "Web Server",
            "",
            "100,40,Database",
            "Web Server -> API",
            "API -} Database",
            "   ",
            "API -> API",
            "Web Server -> API",
            "Cache",
        ]
    )


@pytest.fixture
def controller(positioned_text):
    """SyncController over the positioned text."""
    from linegraph.sync import SyncController

    return SyncController(positioned_text)
