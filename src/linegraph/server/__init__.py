"""linegraph.server - Flask REST API for the diagram editor.

Provides a thin REST wrapper over the sync controller so that a
rendering front end can fetch graph snapshots and post edit events.
"""

from linegraph.server.app import create_app

__all__ = ["create_app"]
