"""
Metrics HTTP endpoint.

Every GET /metrics renders the registry, which runs exactly one device poll
through the registered collector.
"""

import logging

from flask import Flask, Response, redirect
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

logger = logging.getLogger("experia-v10-exporter")


def create_app(registry: CollectorRegistry) -> Flask:
    """Create the Flask app serving a registry."""
    app = Flask(__name__)

    @app.route("/metrics")
    def metrics():
        """Prometheus metrics endpoint."""
        return Response(generate_latest(registry), content_type=CONTENT_TYPE_LATEST)

    @app.route("/")
    def index():
        return redirect("/metrics", code=302)

    return app


def serve(app: Flask, host: str, port: int) -> None:
    """
    Serve until interrupted.

    The server is single-threaded so scrapes, and therefore device logins,
    never overlap.
    """
    logger.info(f"Listen on {host}:{port}...")
    app.run(host=host, port=port, threaded=False, use_reloader=False)


__all__ = ["create_app", "serve"]
