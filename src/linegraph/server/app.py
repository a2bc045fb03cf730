"""linegraph.server.app - Flask app factory and REST API routes.

This is a THIN REST wrapper around one SyncController: the rendering
layer posts edit events, the controller rewrites the text and reparses,
and every route answers with the fresh text and graph. No translation
logic lives here.

State pattern:
    _state = {"controller": controller, "store": store, "user_id": user_id,
              "config": config, "loaded_at": time.time(), "last_save": {...},
              "lock": threading.Lock()}

Requests may be served on several threads; every route that touches the
controller holds ``_state["lock"]`` so a response always describes the
edit it made.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from flask import Flask, jsonify, request
from flask_cors import CORS

from linegraph.config import DEFAULT_CONFIG, merge_configs
from linegraph.exceptions import UnknownEdgeError, UnknownNodeError
from linegraph.graph.placement import placement_from_config
from linegraph.graph.serialize import serialize_graph, serialize_mutation_entry
from linegraph.server.persistence import (
    DocumentStore,
    check_for_external_changes,
    load_document,
    save_document,
)
from linegraph.sync import SyncController

logger = logging.getLogger(__name__)


def create_app(
    store: DocumentStore,
    user_id: str,
    config: dict[str, Any] | None = None,
) -> Flask:
    """Create the Flask application with REST API routes.

    The user's document is loaded once at startup; a failed load starts
    from empty text. When ``server.autosave`` is on, every cycle that
    changes the text is saved to the store, unless the stored document
    changed externally since it was loaded; that conflict is reported in
    ``last_save`` and left for an explicit ``/api/save``.

    Args:
        store: Document store to load from and save to.
        user_id: Whose document this app edits.
        config: linegraph configuration dict (defaults when omitted).

    Returns:
        Configured Flask application.
    """
    config = merge_configs(DEFAULT_CONFIG, config or {})
    app = Flask(__name__)

    CORS(app)

    loaded = load_document(store, user_id)
    controller = SyncController(
        loaded["text"],
        placement=placement_from_config(config),
        strict=bool(config["grammar"].get("strict", False)),
    )

    _state: dict[str, Any] = {
        "controller": controller,
        "store": store,
        "user_id": user_id,
        "config": config,
        "loaded_at": loaded["loaded_at"],
        "last_save": None,
        "load_error": loaded.get("error"),
        "lock": threading.Lock(),
    }

    def _save(text: str) -> dict[str, Any]:
        result = save_document(_state["store"], _state["user_id"], text)
        if result["success"]:
            # Our own write must not count as an external change
            _state["loaded_at"] = result["saved_at"]
        _state["last_save"] = result
        return result

    def _changed_externally() -> bool:
        return check_for_external_changes(_state["store"], _state["user_id"], _state["loaded_at"])

    def _autosave(text: str) -> None:
        if _changed_externally():
            logger.warning("autosave skipped: %s changed externally", _state["user_id"])
            _state["last_save"] = {
                "success": False,
                "conflict": True,
                "error": "Document changed externally since it was loaded. "
                "Autosave skipped; use /api/save with force to overwrite.",
            }
            return
        _save(text)

    if config["server"].get("autosave", True):
        controller.on_text(_autosave)

    def _snapshot(**extra: Any) -> dict[str, Any]:
        ctl: SyncController = _state["controller"]
        result = {
            "success": True,
            "text": ctl.text,
            "graph": serialize_graph(ctl.graph),
            "last_save": _state["last_save"],
        }
        result.update(extra)
        return result

    def _body() -> dict[str, Any]:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def _missing(data: dict[str, Any], *fields: str):
        absent = [f for f in fields if f not in data]
        if absent:
            return jsonify({"success": False, "error": f"Missing fields: {', '.join(absent)}"}), 400
        return None

    def _run_edit(action) -> Any:
        ctl: SyncController = _state["controller"]
        with _state["lock"]:
            before = len(ctl.mutation_log)
            try:
                action(ctl)
            except (UnknownNodeError, UnknownEdgeError) as e:
                return jsonify({"success": False, "error": str(e)}), 404
            except (ValueError, TypeError, OverflowError) as e:
                return jsonify({"success": False, "error": str(e)}), 400
            entry = ctl.mutation_log.last() if len(ctl.mutation_log) > before else None
            mutation = serialize_mutation_entry(entry) if entry else None
            return jsonify(_snapshot(mutation=mutation))

    # ─────────────────────────────────────────────────────────────────
    # Read-only GET endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/status")
    def api_status():
        """GET /api/status - Session summary."""
        ctl: SyncController = _state["controller"]
        with _state["lock"]:
            return jsonify(
                {
                    "user_id": _state["user_id"],
                    "state": ctl.state.value,
                    "node_count": ctl.graph.node_count(),
                    "edge_count": ctl.graph.edge_count(),
                    "mutation_count": len(ctl.mutation_log),
                    "load_error": _state["load_error"],
                    "last_save": _state["last_save"],
                }
            )

    @app.route("/api/graph")
    def api_graph():
        """GET /api/graph - Current graph snapshot."""
        with _state["lock"]:
            return jsonify(serialize_graph(_state["controller"].graph))

    @app.route("/api/text", methods=["GET"])
    def api_get_text():
        """GET /api/text - Current document text."""
        with _state["lock"]:
            return jsonify({"text": _state["controller"].text})

    @app.route("/api/mutations")
    def api_mutations():
        """GET /api/mutations - Undoable edit history, oldest first."""
        ctl: SyncController = _state["controller"]
        with _state["lock"]:
            return jsonify([serialize_mutation_entry(e) for e in ctl.mutation_log.iter_entries()])

    # ─────────────────────────────────────────────────────────────────
    # Edit endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/text", methods=["PUT"])
    def api_put_text():
        """PUT /api/text {"text": ...} - Replace the document text."""
        data = _body()
        error = _missing(data, "text")
        if error:
            return error
        if not isinstance(data["text"], str):
            return jsonify({"success": False, "error": "text must be a string"}), 400
        return _run_edit(lambda ctl: ctl.set_text(data["text"]))

    @app.route("/api/move", methods=["POST"])
    def api_move():
        """POST /api/move {"node_id", "x", "y"} - A node was dragged."""
        data = _body()
        error = _missing(data, "node_id", "x", "y")
        if error:
            return error
        return _run_edit(
            lambda ctl: ctl.move_node(str(data["node_id"]), float(data["x"]), float(data["y"]))
        )

    @app.route("/api/connect", methods=["POST"])
    def api_connect():
        """POST /api/connect {"source", "target", "source_anchor"?, "target_anchor"?}."""
        data = _body()
        error = _missing(data, "source", "target")
        if error:
            return error
        return _run_edit(
            lambda ctl: ctl.connect(
                str(data["source"]),
                str(data["target"]),
                data.get("source_anchor", "right"),
                data.get("target_anchor", "left"),
            )
        )

    @app.route("/api/remove-edge", methods=["POST"])
    def api_remove_edge():
        """POST /api/remove-edge {"edge_id"} - An edge was deleted."""
        data = _body()
        error = _missing(data, "edge_id")
        if error:
            return error
        return _run_edit(lambda ctl: ctl.remove_edge(str(data["edge_id"])))

    @app.route("/api/undo", methods=["POST"])
    def api_undo():
        """POST /api/undo - Revert the most recent graph edit."""
        with _state["lock"]:
            entry = _state["controller"].undo_last()
            if entry is None:
                return jsonify({"success": False, "error": "No mutations to undo"}), 409
            return jsonify(_snapshot(undone=serialize_mutation_entry(entry)))

    # ─────────────────────────────────────────────────────────────────
    # Persistence
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/save", methods=["POST"])
    def api_save():
        """POST /api/save {"force"?} - Save now.

        Refuses with 409 when the stored document changed since it was
        loaded, unless ``force`` is true.
        """
        data = _body()
        with _state["lock"]:
            if not data.get("force") and _changed_externally():
                return (
                    jsonify(
                        {
                            "success": False,
                            "error": "Document changed externally since it was loaded. "
                            "Save aborted to prevent data loss.",
                        }
                    ),
                    409,
                )
            result = _save(_state["controller"].text)
        return jsonify(result), (200 if result["success"] else 500)

    return app
