"""Falcon ASGI application."""

import logging

import falcon
import falcon.asgi
from falcon.asgi import App

from slackrag.interfaces.api.resources.health import HealthResource
from slackrag.interfaces.api.resources.slack_events import SlackEventsResource

logger = logging.getLogger(__name__)


async def log_exception(req, resp, ex, params) -> None:
    """Log unhandled errors and answer with a bare 500."""
    logger.exception("Unhandled error on %s %s", req.method, req.path)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def create_app(
    slack_events_resource: SlackEventsResource,
    health_resource: HealthResource,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes."""
    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, log_exception)
    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/slack/events", slack_events_resource)
    return app
