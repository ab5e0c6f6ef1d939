"""Abstract interface for the push-messaging channel."""

from abc import ABC, abstractmethod


class MessagingService(ABC):
    """Abstract base class for push-messaging backends."""

    @abstractmethod
    def push(self, recipient_id: str, messages: list[str]) -> None:
        """
        Pushes text messages to a recipient, in order.

        Args:
            recipient_id: Channel-specific user id.
            messages: Texts already within the per-message size ceiling.

        Raises:
            MessagingError: If any push request fails.
        """

    @abstractmethod
    def reply(self, reply_token: str, messages: list[str]) -> None:
        """
        Replies to an incoming webhook event.

        Raises:
            MessagingError: If the reply fails.
        """
