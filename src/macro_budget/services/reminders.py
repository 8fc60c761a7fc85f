"""Daily reminder for days with nothing logged."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, time, timedelta
from enum import StrEnum
from zoneinfo import ZoneInfo

from macro_budget.domain.budget import DAYS, WeeklyEntries
from macro_budget.services.budget import is_day_filled
from macro_budget.services.notifications import (
    Notification,
    NotificationPermission,
    Notifier,
)

DEFAULT_REMINDER_HOUR = 22
REMINDER_INTERVAL = timedelta(hours=24)

logger = logging.getLogger(__name__)


class ReminderState(StrEnum):
    """Lifecycle states of the reminder scheduler."""

    UNARMED = "unarmed"
    WAITING_FOR_WINDOW = "waiting-for-window"
    ARMED_RECURRING = "armed-recurring"


def make_clock(tz: ZoneInfo | None) -> Callable[[], datetime]:
    """Return a clock for the given zone, or for system local time."""
    if tz is None:
        return lambda: datetime.now().astimezone()
    return lambda: datetime.now(tz=tz)


def current_day(now: datetime) -> str:
    """Return the weekday name for a moment in time."""
    return DAYS[now.weekday()]


def next_window(now: datetime, hour: int) -> datetime:
    """Return the next reminder boundary: today at ``hour``, or tomorrow if past."""
    day = now.date()
    if now.hour >= hour:
        day += timedelta(days=1)
    return datetime.combine(day, time(hour=hour), tzinfo=now.tzinfo)


def seconds_between(start: datetime, end: datetime) -> float:
    """Return elapsed seconds between two aware datetimes across DST changes."""
    return (end.astimezone(UTC) - start.astimezone(UTC)).total_seconds()


@dataclass
class ReminderScheduler:
    """Fires a check once a day and notifies when today's entry is empty.

    At most one timer chain exists: ``reschedule`` cancels the running chain
    before starting a new one and ``shutdown`` cancels it for good.
    """

    notifier: Notifier
    entries_provider: Callable[[], WeeklyEntries]
    clock: Callable[[], datetime] = field(default_factory=lambda: make_clock(None))
    reminder_hour: int = DEFAULT_REMINDER_HOUR
    interval: timedelta = REMINDER_INTERVAL
    title: str = "Macros Reminder"
    icon: str = "/icon-block.svg"
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    _state: ReminderState = field(default=ReminderState.UNARMED, init=False)
    _permitted: bool = field(default=False, init=False)
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    @property
    def state(self) -> ReminderState:
        """Return the current scheduler state."""
        return self._state

    async def start(self) -> ReminderState:
        """Confirm notification permission and arm the first window."""
        permission = self.notifier.permission()
        if permission == NotificationPermission.DEFAULT:
            permission = await self.notifier.request_permission()
        if permission != NotificationPermission.GRANTED:
            logger.info(
                "Reminders disabled: notification permission is %s", permission
            )
            return self._state
        self._permitted = True
        self.reschedule()
        return self._state

    def reschedule(self) -> None:
        """Cancel any pending timers and schedule the next window."""
        if not self._permitted:
            return
        self._cancel()
        self._state = ReminderState.WAITING_FOR_WINDOW
        self._task = asyncio.get_running_loop().create_task(self._run())

    def shutdown(self) -> None:
        """Cancel all timers; the scheduler stays unarmed until started again."""
        self._cancel()
        self._permitted = False
        self._state = ReminderState.UNARMED

    async def check_and_notify(self) -> bool:
        """Notify if today's entry has nothing logged; return True when sent."""
        day = current_day(self.clock())
        entry = self.entries_provider().get(day)
        if entry is None or is_day_filled(entry):
            logger.debug("No reminder needed for %s", day)
            return False
        notification = Notification(
            title=self.title,
            body=f"Don't forget to fill in your macros for {day}!",
            icon=self.icon,
            tag=f"macro-reminder-{day}",
        )
        try:
            await self.notifier.notify(notification)
        except Exception:
            logger.exception("Failed to deliver reminder for %s", day)
            return False
        logger.info("Sent macro reminder for %s", day)
        return True

    async def _run(self) -> None:
        now = self.clock()
        deadline = next_window(now, self.reminder_hour)
        if now.hour >= self.reminder_hour:
            await self.check_and_notify()
        await self._sleep_until(deadline)
        self._state = ReminderState.ARMED_RECURRING
        await self.check_and_notify()
        while True:
            deadline += self.interval
            await self._sleep_until(deadline)
            await self.check_and_notify()

    async def _sleep_until(self, deadline: datetime) -> None:
        await self.sleep(max(0.0, seconds_between(self.clock(), deadline)))

    def _cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
