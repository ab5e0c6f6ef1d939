"""LINE Messaging API implementation of the MessagingService interface."""

from linebot.v3.messaging import (
    MessagingApi,
    PushMessageRequest,
    ReplyMessageRequest,
    TextMessage,
)

from yorisoi.exceptions import MessagingError
from yorisoi.infrastructure.interfaces.messaging_service import MessagingService
from yorisoi.logging import setup_logging

logger = setup_logging()

# LINE accepts at most five message objects per push or reply request
MAX_MESSAGES_PER_REQUEST = 5


def _batches(messages: list[str]) -> list[list[TextMessage]]:
    texts = [TextMessage(text=m) for m in messages if m]
    return [
        texts[i : i + MAX_MESSAGES_PER_REQUEST]
        for i in range(0, len(texts), MAX_MESSAGES_PER_REQUEST)
    ]


class LineMessagingService(MessagingService):
    """Sends text messages through a LINE official account."""

    def __init__(self, api: MessagingApi):
        self._api = api

    def push(self, recipient_id: str, messages: list[str]) -> None:
        try:
            for batch in _batches(messages):
                self._api.push_message(
                    PushMessageRequest(to=recipient_id, messages=batch)
                )
            logger.info(
                "LINE push sent",
                extra={"recipient_id": recipient_id, "messages": len(messages)},
            )
        except Exception as e:
            logger.exception("LINE push failed", extra={"recipient_id": recipient_id})
            raise MessagingError(recipient_id, e) from e

    def reply(self, reply_token: str, messages: list[str]) -> None:
        """Replies with the first five messages; a reply token is single-use."""
        batches = _batches(messages)
        if not batches:
            return
        try:
            self._api.reply_message(
                ReplyMessageRequest(reply_token=reply_token, messages=batches[0])
            )
        except Exception as e:
            logger.exception("LINE reply failed")
            raise MessagingError("reply", e) from e
