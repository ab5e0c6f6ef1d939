"""LINE webhook endpoint."""

import json
from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Request
from linebot.v3.webhook import SignatureValidator

from yorisoi.config import AppConfig
from yorisoi.dependencies import get_config, get_messenger
from yorisoi.exceptions import MessagingError
from yorisoi.infrastructure.interfaces.messaging_service import MessagingService
from yorisoi.logging import setup_logging
from yorisoi.response_models import OkResponse

logger = setup_logging()

router = APIRouter(prefix="/line", tags=["line"])

ConfigDep = Annotated[AppConfig, Depends(get_config)]
MessengerDep = Annotated[MessagingService, Depends(get_messenger)]


def follow_reply_tokens(payload: Any) -> list[str]:
    """Reply tokens of the ``follow`` events in a webhook payload."""
    events = payload.get("events") if isinstance(payload, dict) else None
    if not isinstance(events, list):
        return []
    return [
        event["replyToken"]
        for event in events
        if isinstance(event, dict)
        and event.get("type") == "follow"
        and event.get("replyToken")
    ]


def greet_followers(messenger: MessagingService, tokens: list[str], greeting: str) -> None:
    for token in tokens:
        try:
            messenger.reply(token, [greeting])
        except MessagingError:
            logger.error("Follow greeting failed")


@router.post("/webhook", response_model=OkResponse)
async def line_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    config: ConfigDep,
    messenger: MessengerDep,
    x_line_signature: Annotated[str | None, Header()] = None,
) -> OkResponse:
    """
    Acknowledges LINE events immediately and greets new followers.

    The signature is checked only when a channel secret is configured.
    """
    body = (await request.body()).decode("utf-8")
    secret = config.line.channel_secret
    if secret and not SignatureValidator(secret).validate(body, x_line_signature or ""):
        raise HTTPException(status_code=400, detail="invalid signature")

    try:
        payload = json.loads(body or "{}")
    except json.JSONDecodeError:
        logger.warning("Webhook body is not JSON")
        return OkResponse()

    tokens = follow_reply_tokens(payload)
    if tokens:
        logger.info("Follow events received", extra={"count": len(tokens)})
        background_tasks.add_task(
            greet_followers, messenger, tokens, config.line.follow_greeting
        )
    return OkResponse()
