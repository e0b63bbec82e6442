"""Slack Events API endpoint."""

import json
import logging
from collections.abc import Awaitable, Callable

import falcon.asgi
from slack_sdk.signature import SignatureVerifier

from slackrag.application.use_cases.events.dispatch_event import EventDispatcher
from slackrag.infrastructure.slack.events import parse_slack_event

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[None]]
Spawn = Callable[[falcon.asgi.Response, Job], None]


def schedule_after_response(resp: falcon.asgi.Response, job: Job) -> None:
    """Run job once the response has been sent."""
    resp.schedule(job)


class SlackEventsResource:
    """POST /v1/slack/events - acknowledge fast, handle in the background.

    Slack expects a 200 within three seconds, so events are dispatched after
    the response. Redeliveries (X-Slack-Retry-Num) are acknowledged and dropped.
    """

    def __init__(
        self,
        dispatcher: EventDispatcher,
        verifier: SignatureVerifier | None = None,
        spawn: Spawn = schedule_after_response,
    ) -> None:
        self._dispatcher = dispatcher
        self._verifier = verifier
        self._spawn = spawn

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await req.stream.read()
        if self._verifier is not None and not self._verifier.is_valid(
            body=body,
            timestamp=req.get_header("X-Slack-Request-Timestamp"),
            signature=req.get_header("X-Slack-Signature"),
        ):
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Invalid signature"}
            return

        try:
            payload = json.loads(body or b"{}")
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid request body"}
            return
        if not isinstance(payload, dict):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid request body"}
            return

        if payload.get("type") == "url_verification":
            resp.status = falcon.HTTP_200
            resp.media = {"challenge": payload.get("challenge", "")}
            return

        resp.status = falcon.HTTP_200
        resp.media = {"ok": True}

        if req.get_header("X-Slack-Retry-Num"):
            logger.info(
                "Ignoring Slack retry %s (%s)",
                req.get_header("X-Slack-Retry-Num"),
                req.get_header("X-Slack-Retry-Reason"),
            )
            return

        event = parse_slack_event(payload)
        if event is None:
            return

        async def job() -> None:
            await self._dispatcher.dispatch(event)

        self._spawn(resp, job)
