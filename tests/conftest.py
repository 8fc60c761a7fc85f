"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from macro_budget.config import Settings
from macro_budget.containers import AppContainer, build_reminder_scheduler
from macro_budget.services.notifications import (
    Notification,
    NotificationPermission,
    Notifier,
)
from macro_budget.services.tracker import KeyValueStore, TrackerService


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key-value store for tests."""

    records: dict[str, object] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def get(self, key: str) -> object | None:
        return self.records.get(key)

    def set(self, key: str, value: object) -> None:
        self.writes.append(key)
        self.records[key] = value

    def remove(self, key: str) -> None:
        self.records.pop(key, None)


@dataclass
class FailingKeyValueStore(KeyValueStore):
    """Store whose every operation fails."""

    attempts: int = 0

    def get(self, key: str) -> object | None:
        self.attempts += 1
        raise OSError("disk unavailable")

    def set(self, key: str, value: object) -> None:
        self.attempts += 1
        raise OSError("disk unavailable")

    def remove(self, key: str) -> None:
        self.attempts += 1
        raise OSError("disk unavailable")


@dataclass
class FakeClock:
    """Clock that only moves when advanced."""

    now: datetime

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        moved = self.now.astimezone(UTC) + timedelta(seconds=seconds)
        self.now = moved.astimezone(self.now.tzinfo)


@dataclass
class FakeNotifier(Notifier):
    """Notifier that records notifications instead of delivering them."""

    initial_permission: NotificationPermission = NotificationPermission.GRANTED
    requested_outcome: NotificationPermission = NotificationPermission.GRANTED
    fail: bool = False
    sent: list[Notification] = field(default_factory=list)
    requests: int = 0
    clock: FakeClock | None = None
    delivery_seconds: float = 0.0
    sent_at: list[datetime] = field(default_factory=list)

    def permission(self) -> NotificationPermission:
        return self.initial_permission

    async def request_permission(self) -> NotificationPermission:
        self.requests += 1
        self.initial_permission = self.requested_outcome
        return self.requested_outcome

    async def notify(self, notification: Notification) -> None:
        if self.fail:
            raise RuntimeError("delivery failed")
        self.sent.append(notification)
        if self.clock is not None:
            self.sent_at.append(self.clock())
            self.clock.advance(self.delivery_seconds)


@dataclass
class FakeSleeper:
    """Records requested delays and blocks forever after ``limit`` calls.

    With a ``clock``, each completed sleep advances it by the delay.
    """

    limit: int = 1
    delays: list[float] = field(default_factory=list)
    clock: FakeClock | None = None

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if len(self.delays) >= self.limit:
            await asyncio.Event().wait()
        if self.clock is not None:
            self.clock.advance(delay)


async def settle() -> None:
    """Let scheduled tasks run until they block."""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_dir=tmp_path / "data", timezone="UTC")


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryKeyValueStore,
    notifier: FakeNotifier,
) -> AppContainer:
    tracker_service = TrackerService(store)
    reminder_scheduler = build_reminder_scheduler(settings, notifier, tracker_service)
    reminder_scheduler.sleep = FakeSleeper(limit=1)
    tracker_service.subscribe(reminder_scheduler.reschedule)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        store=store,
        notifier=notifier,
        tracker_service=tracker_service,
        reminder_scheduler=reminder_scheduler,
        close_resources=close_resources,
    )
