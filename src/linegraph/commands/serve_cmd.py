"""
linegraph.commands.serve_cmd - Run the REST API for a diagram editor front end.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from linegraph.commands._io import config_for


def run(args: argparse.Namespace) -> int:
    from linegraph.server import create_app
    from linegraph.server.persistence import FileDocumentStore

    config = config_for(args)
    store_dir = Path(args.store or config["store"]["directory"])
    user_id = args.user or config["store"]["default_user"]
    host = args.host or config["server"]["host"]
    port = args.port or config["server"]["port"]

    app = create_app(FileDocumentStore(store_dir), user_id, config)
    print(f"Serving {store_dir / (user_id + '.txt')} on http://{host}:{port}", file=sys.stderr)
    app.run(host=host, port=port, debug=False)
    return 0
