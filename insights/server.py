#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
HTTP API for the dashboard.

Routes:
    GET  /health                  entry count and last load time
    POST /refresh                 reload the time log now
    GET  /api/entries             raw entries in range
    GET  /api/projects            minutes per project
    GET  /api/days                minutes per day, zero-filled
    GET  /api/weeks               minutes per Sunday-start week
    GET  /api/planned-vs-actual   not implemented (501)

Every other GET serves the built frontend.
"""

import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from flask import Flask, Response, abort, g, jsonify, make_response, request, send_from_directory

from insights.aggregator import (
    aggregate_by_day,
    aggregate_by_project,
    aggregate_by_week,
    filter_by_range,
)
from insights.config import Config
from insights.debug_logger import get_logger
from insights.errors import LoadError, QueryError
from insights.models import TimeEntry
from insights.query import parse_date_range
from insights.store import SnapshotStore

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def format_instant(store: SnapshotStore) -> Optional[str]:
    """RFC 3339 UTC timestamp of the last load, or None before the first."""
    loaded = store.last_loaded()
    return loaded.strftime("%Y-%m-%dT%H:%M:%SZ") if loaded else None


def create_app(store: SnapshotStore, config: Optional[Config] = None) -> Flask:
    """
    Build the Flask app.

    Args:
        store: Shared snapshot store
        config: Settings; jsonl_path is what /refresh reloads, timezone
            resolves default ranges, frontend_dir is served as static files
    """
    config = config or Config()
    app = Flask(__name__, static_folder=None)
    app.config["INSIGHTS"] = config
    app.extensions["insights_store"] = store

    def ranged(aggregate: Callable[[List[TimeEntry], str, str], List[Any]]) -> Tuple[Response, int]:
        try:
            date_from, date_to = parse_date_range(request.args, config.timezone)
        except QueryError as e:
            return jsonify({"error": str(e)}), 400
        entries = filter_by_range(store.entries(), date_from, date_to)
        rows = aggregate(entries, date_from, date_to)
        return jsonify([row.to_dict() for row in rows]), 200

    @app.before_request
    def _preflight() -> Optional[Response]:
        g.started = time.perf_counter()
        if request.method == "OPTIONS":
            return make_response("", 204)
        return None

    @app.after_request
    def _finish(response: Response) -> Response:
        response.headers.update(CORS_HEADERS)
        started = g.get("started")
        if started is not None:
            get_logger().request(
                request.method,
                request.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        return response

    @app.get("/health")
    def health():
        return jsonify({
            "status": "ok",
            "entries": store.count(),
            "lastLoaded": format_instant(store),
        })

    @app.post("/refresh")
    def refresh():
        try:
            count = store.load(config.jsonl_path)
        except LoadError as e:
            return jsonify({"error": str(e)}), 500
        return jsonify({"ok": True, "entries": count})

    @app.get("/api/entries")
    def entries():
        return ranged(lambda rows, _from, _to: rows)

    @app.get("/api/projects")
    def projects():
        return ranged(lambda rows, _from, _to: aggregate_by_project(rows))

    @app.get("/api/days")
    def days():
        return ranged(aggregate_by_day)

    @app.get("/api/weeks")
    def weeks():
        return ranged(lambda rows, _from, _to: aggregate_by_week(rows))

    @app.route("/api/planned-vs-actual", methods=["GET", "POST"])
    def planned_vs_actual():
        return jsonify({"error": "not implemented"}), 501

    @app.get("/", defaults={"path": ""})
    @app.get("/<path:path>")
    def frontend(path: str):
        root = Path(config.frontend_dir).resolve()
        if path and (root / path).is_file():
            return send_from_directory(root, path)
        if (root / "index.html").is_file():
            return send_from_directory(root, "index.html")
        abort(404)

    return app
