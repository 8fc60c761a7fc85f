"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from macro_budget.adapters.json_file_store import JsonFileStore
from macro_budget.adapters.telegram_notifier import TelegramNotifier
from macro_budget.config import Settings, resolve_timezone
from macro_budget.services.notifications import Notifier
from macro_budget.services.reminders import ReminderScheduler, make_clock
from macro_budget.services.tracker import KeyValueStore, TrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    notifier: Notifier
    tracker_service: TrackerService
    reminder_scheduler: ReminderScheduler
    close_resources: Callable[[], Awaitable[None]]


def build_reminder_scheduler(
    settings: Settings, notifier: Notifier, tracker_service: TrackerService
) -> ReminderScheduler:
    """Create a scheduler that always checks the tracker's current entries."""
    return ReminderScheduler(
        notifier=notifier,
        entries_provider=lambda: tracker_service.weekly_entries,
        clock=make_clock(resolve_timezone(settings.timezone)),
        reminder_hour=settings.reminder_hour,
        title=settings.reminder_title,
        icon=settings.reminder_icon,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = JsonFileStore(resolved_settings.data_dir)
    tracker_service = TrackerService(store)
    notifier = TelegramNotifier.create(
        bot_token=resolved_settings.telegram_bot_token,
        chat_id=resolved_settings.telegram_chat_id,
    )
    reminder_scheduler = build_reminder_scheduler(
        resolved_settings, notifier, tracker_service
    )
    tracker_service.subscribe(reminder_scheduler.reschedule)

    async def close_resources() -> None:
        await notifier.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        notifier=notifier,
        tracker_service=tracker_service,
        reminder_scheduler=reminder_scheduler,
        close_resources=close_resources,
    )
