"""
linegraph.config.defaults - Default configuration values.
"""

DEFAULT_CONFIG = {
    "grammar": {
        # Report standalone lines that look like mistyped edges
        "strict": False,
    },
    "placement": {
        "policy": "grid",
        "origin_x": 50,
        "origin_y": 50,
        "step_x": 200,
        "step_y": 80,
        "rows": 8,
        # Used by the "hashed" policy
        "width": 800,
        "height": 600,
    },
    "store": {
        "directory": ".linegraph",
        "default_user": "default",
    },
    "server": {
        "host": "127.0.0.1",
        "port": 5151,
        # Save after every change to the text
        "autosave": True,
    },
}
