"""
Integrity Configuration API application.

Run with: python run_api.py
"""

from pathlib import Path
from typing import Optional

from flask import Flask, g, jsonify, request

from .. import __version__
from ..config.settings import IntegritySettings, get_settings
from ..logging import LogContext, api_logger
from ..rules.store import RuleStore, get_rule_store
from .rules_api import create_rules_api_blueprint


def create_app(
    settings: Optional[IntegritySettings] = None,
    store: Optional[RuleStore] = None,
    seed_path: Optional[Path] = None,
) -> Flask:
    """
    Create the Flask application.

    Args:
        settings: Service settings (global settings if not provided)
        store: Rule store (global store if not provided)
        seed_path: Optional YAML file of packages to load into the store
    """
    app = Flask(__name__)
    settings = settings or get_settings()
    store = store if store is not None else get_rule_store()

    if seed_path:
        loaded = store.load_yaml(seed_path)
        api_logger().info("store_seeded", path=str(seed_path), packages=loaded)

    @app.before_request
    def start_log_context():
        g.log_context = LogContext(
            request.headers.get("X-Request-ID"), path=request.path
        ).__enter__()

    @app.after_request
    def add_request_id_header(response):
        log_context = g.get("log_context")
        if log_context is not None:
            response.headers["X-Request-ID"] = log_context.request_id
            api_logger().debug(
                "request_completed",
                method=request.method,
                status=response.status_code,
            )
        return response

    @app.teardown_request
    def end_log_context(exc):
        log_context = g.pop("log_context", None)
        if log_context is not None:
            log_context.__exit__(None, None, None)

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify(
            {
                "status": "healthy",
                "version": __version__,
                "packages": len(store.list_packages()),
            }
        )

    app.register_blueprint(create_rules_api_blueprint(store, settings))
    return app


def run_api(
    host: str = "0.0.0.0",
    port: int = 5060,
    debug: bool = True,
    seed_path: Optional[Path] = None,
) -> None:
    """Run the API with the Flask development server."""
    app = create_app(seed_path=seed_path)
    api_logger().info("api_starting", host=host, port=port)
    app.run(host=host, port=port, debug=debug)
