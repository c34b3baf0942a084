"""Flask application factory."""

from typing import Optional

from flask import Flask

from ..log import get_logger
from ..rpc import Router, app_router
from ..services import Services
from . import health, rpc_routes

LOG = get_logger("web")


def create_app(services: Services, router: Optional[Router] = None) -> Flask:
    """Build the HTTP app around an existing service container.

    Args:
        services: Service container shared by all requests
        router: Procedure router; the application router by default

    Returns:
        Configured Flask app
    """
    app = Flask("quotebook")
    app.extensions["quotebook"] = services
    app.config["QUOTEBOOK_ROUTER"] = router or app_router
    app.json.sort_keys = False

    app.register_blueprint(health.bp)
    app.register_blueprint(rpc_routes.bp)
    LOG.debug("registered %d procedures", len(app.config["QUOTEBOOK_ROUTER"].names))
    return app
