"""Flask application factory for the km-constraints JSON API."""

from __future__ import annotations

import os

from flask import Flask, jsonify


def create_app(config: dict | None = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config["POLICIES_DIR"] = os.environ.get("KMCONSTRAINTS_POLICIES_DIR")
    app.config["MESSAGES"] = os.environ.get("KMCONSTRAINTS_MESSAGES")
    if config:
        app.config.update(config)

    # Register blueprints
    from web.routes.validation import validation_bp

    app.register_blueprint(validation_bp, url_prefix="/validate")

    @app.route("/")
    def index():
        return jsonify({
            "service": "km-constraints",
            "advisory": True,
            "endpoints": [
                "POST /validate/field",
                "POST /validate/hint",
                "POST /validate/policy/<name>",
                "POST /validate/policy/<name>/<field>",
                "GET /validate/policies",
            ],
        })

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    return app
