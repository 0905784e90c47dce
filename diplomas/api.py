"""
HTTP API (Flask).

    GET /diplomas              -> JSON array of diplomas
    GET /mentors[?search=...]  -> JSON array of mentor summaries
    GET /stats                 -> mentor / diploma overview numbers
    GET /health                -> {"status": "ok"}

Every request logs in from scratch; nothing is cached between requests.
CORS is open for all origins (the dashboard is served from another host).
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from flask import Flask, jsonify, request
from flask_cors import CORS

from diplomas.config import Settings, load_credentials
from diplomas.errors import AuthenticationError
from diplomas.mentors import aggregate_by_mentor, average_progress, filter_summaries, mentor_stats
from diplomas.model import Diploma
from diplomas.service import fetch_diplomas


logger = logging.getLogger(__name__)

AUTH_FAILED = {"error": "Authentication failed"}
FETCH_FAILED = {"error": "Failed to fetch diplomas"}


def create_app(
    settings: Optional[Settings] = None,
    credentials_loader: Callable[[], Tuple[str, str]] = load_credentials,
) -> Flask:
    app = Flask(__name__)
    app.json.ensure_ascii = False
    CORS(app)

    def _respond(build: Callable[[List[Diploma]], object]):
        """
        Log in, fetch, and turn the records into a response body.
        Failures map to 401 / 500 with a fixed error body.
        """
        try:
            username, password = credentials_loader()
            records = fetch_diplomas(username, password, settings or Settings.from_env())
        except AuthenticationError:
            logger.warning("Authentication against the portal failed")
            return jsonify(AUTH_FAILED), 401
        except Exception:
            logger.exception("Failed to fetch diplomas")
            return jsonify(FETCH_FAILED), 500

        return jsonify(build(records)), 200

    @app.route("/diplomas", methods=["GET"])
    def diplomas():
        return _respond(lambda records: [d.to_dict() for d in records])

    @app.route("/mentors", methods=["GET"])
    def mentors():
        query = request.args.get("search", "")

        def _build(records: List[Diploma]):
            out = []
            for s in filter_summaries(aggregate_by_mentor(records), query):
                data = s.to_dict()
                data["progress"] = round(average_progress(s.shown_diplomas), 3)
                out.append(data)
            return out

        return _respond(_build)

    @app.route("/stats", methods=["GET"])
    def stats():
        return _respond(lambda records: mentor_stats(records).to_dict())

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"}), 200

    return app
