"""Telegram Bot API notifier adapter."""

import logging
from dataclasses import dataclass, field

import httpx

from macro_budget.services.notifications import Notification, NotificationPermission

logger = logging.getLogger(__name__)


@dataclass
class TelegramNotifier:
    """Delivers notifications as Telegram messages to a single chat.

    Telegram has no notion of tags, so the message sent for a tag is deleted
    before a newer one with the same tag goes out. Icons are not rendered.
    """

    bot_token: str | None
    chat_id: int | None
    http_client: httpx.AsyncClient
    _permission: NotificationPermission = field(init=False)
    _delivered: dict[str, int] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        if self.bot_token and self.chat_id is not None:
            self._permission = NotificationPermission.DEFAULT
        else:
            self._permission = NotificationPermission.UNSUPPORTED

    @classmethod
    def create(cls, bot_token: str | None, chat_id: int | None) -> "TelegramNotifier":
        """Create a notifier with a managed httpx session."""
        return cls(
            bot_token=bot_token, chat_id=chat_id, http_client=httpx.AsyncClient()
        )

    def permission(self) -> NotificationPermission:
        """Return the permission state without contacting Telegram."""
        return self._permission

    async def request_permission(self) -> NotificationPermission:
        """Verify the bot can reach the chat using Telegram's getChat API."""
        if self._permission != NotificationPermission.DEFAULT:
            return self._permission
        response = await self.http_client.post(
            self._url("getChat"), json={"chat_id": self.chat_id}, timeout=10
        )
        if response.is_error:
            logger.warning(
                "Telegram chat %s is not reachable: %s",
                self.chat_id,
                response.status_code,
            )
            self._permission = NotificationPermission.DENIED
        else:
            self._permission = NotificationPermission.GRANTED
        return self._permission

    async def notify(self, notification: Notification) -> None:
        """Send the notification, replacing any earlier one with the same tag."""
        if self._permission != NotificationPermission.GRANTED:
            return
        previous = self._delivered.pop(notification.tag, None)
        if previous is not None:
            await self._delete_message(previous)
        response = await self.http_client.post(
            self._url("sendMessage"),
            json={
                "chat_id": self.chat_id,
                "text": f"{notification.title}\n{notification.body}",
            },
            timeout=10,
        )
        response.raise_for_status()
        message_id = response.json().get("result", {}).get("message_id")
        if isinstance(message_id, int):
            self._delivered[notification.tag] = message_id

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def _delete_message(self, message_id: int) -> None:
        response = await self.http_client.post(
            self._url("deleteMessage"),
            json={"chat_id": self.chat_id, "message_id": message_id},
            timeout=10,
        )
        if response.is_error:
            # Telegram refuses to delete messages older than 48 hours.
            logger.debug("Could not delete message %s: %s", message_id, response.text)

    def _url(self, method: str) -> str:
        return f"https://api.telegram.org/bot{self.bot_token}/{method}"
