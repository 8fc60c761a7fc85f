"""Notification surface abstractions."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class NotificationPermission(StrEnum):
    """Permission states reported by a notification surface."""

    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Notification:
    """A user-facing notification; surfaces replace earlier ones with the same tag."""

    title: str
    body: str
    icon: str
    tag: str


class Notifier(Protocol):
    """Interface for delivering notifications."""

    def permission(self) -> NotificationPermission:
        """Return the current permission state without prompting."""

    async def request_permission(self) -> NotificationPermission:
        """Ask for permission once and return the outcome."""

    async def notify(self, notification: Notification) -> None:
        """Deliver a notification."""


class NullNotifier:
    """Notifier for environments without a notification capability."""

    def permission(self) -> NotificationPermission:
        return NotificationPermission.UNSUPPORTED

    async def request_permission(self) -> NotificationPermission:
        return NotificationPermission.UNSUPPORTED

    async def notify(self, notification: Notification) -> None:
        return None
