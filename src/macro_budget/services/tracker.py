"""Budget and weekly log state with save-on-change persistence."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Protocol

from macro_budget.domain.budget import (
    DAYS,
    ENTRY_FIELDS,
    MACRO_FIELDS,
    DailyBudget,
    WeeklyEntries,
    daily_budget_from_record,
    default_weekly_entries,
    weekly_entries_from_record,
    weekly_entries_to_record,
)
from macro_budget.services.budget import BudgetSummary, summarize
from macro_budget.services.validation import accept_input

DAILY_BUDGET_KEY = "macroDailyBudget"
WEEKLY_ENTRIES_KEY = "macroWeeklyEntries"

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Persistence interface for JSON-serializable records."""

    def get(self, key: str) -> object | None:
        """Return the stored record for a key, if present."""

    def set(self, key: str, value: object) -> None:
        """Store a record under a key."""

    def remove(self, key: str) -> None:
        """Remove the record stored under a key."""


@dataclass
class TrackerService:
    """Owns the in-memory budget and week and mirrors them to the store.

    The in-memory state is authoritative: store failures are logged and
    never undo or block an edit.
    """

    store: KeyValueStore
    daily_budget: DailyBudget = field(default_factory=DailyBudget)
    weekly_entries: WeeklyEntries = field(default_factory=default_weekly_entries)
    listeners: list[Callable[[], None]] = field(default_factory=list)
    _loaded: bool = field(default=False, init=False, repr=False)

    @property
    def loaded(self) -> bool:
        """Return True once the initial load has completed."""
        return self._loaded

    def load(self) -> None:
        """Read both records from the store; absent records load as defaults."""
        budget_raw = self._read(DAILY_BUDGET_KEY)
        self.daily_budget = (
            DailyBudget()
            if budget_raw is None
            else daily_budget_from_record(budget_raw)
        )
        entries_raw = self._read(WEEKLY_ENTRIES_KEY)
        self.weekly_entries = (
            default_weekly_entries()
            if entries_raw is None
            else weekly_entries_from_record(entries_raw)
        )
        self._loaded = True

    def subscribe(self, listener: Callable[[], None]) -> None:
        """Register a callback run after each change to the weekly entries."""
        self.listeners.append(listener)

    def set_budget_field(self, field_name: str, raw: str) -> bool:
        """Apply an edit to a daily budget macro; return False if rejected."""
        if field_name not in MACRO_FIELDS:
            raise KeyError(field_name)
        if not accept_input(raw):
            return False
        self.daily_budget = replace(self.daily_budget, **{field_name: raw})
        self._save_daily_budget()
        return True

    def set_entry_field(self, day: str, field_name: str, raw: str) -> bool:
        """Apply an edit to one field of a weekday; return False if rejected."""
        if day not in DAYS:
            raise KeyError(day)
        if field_name not in ENTRY_FIELDS:
            raise KeyError(field_name)
        if not accept_input(raw):
            return False
        entries = dict(self.weekly_entries)
        entries[day] = replace(entries[day], **{field_name: raw})
        self.weekly_entries = entries
        self._save_weekly_entries()
        self._notify_listeners()
        return True

    def clear_all(self) -> None:
        """Reset both records to defaults and remove them from the store."""
        self.daily_budget = DailyBudget()
        self.weekly_entries = default_weekly_entries()
        self._remove(DAILY_BUDGET_KEY)
        self._remove(WEEKLY_ENTRIES_KEY)
        self._notify_listeners()

    def summary(self) -> BudgetSummary:
        """Return derived values for the current state."""
        return summarize(self.daily_budget, self.weekly_entries)

    def _save_daily_budget(self) -> None:
        if self._loaded:
            self._write(DAILY_BUDGET_KEY, self.daily_budget.to_record())

    def _save_weekly_entries(self) -> None:
        if self._loaded:
            self._write(
                WEEKLY_ENTRIES_KEY, weekly_entries_to_record(self.weekly_entries)
            )

    def _notify_listeners(self) -> None:
        for listener in list(self.listeners):
            try:
                listener()
            except Exception:
                logger.exception("Change listener %r failed", listener)

    def _read(self, key: str) -> Mapping[str, object] | None:
        try:
            value = self.store.get(key)
        except Exception:
            logger.exception("Failed to read %s from store", key)
            return None
        if value is not None and not isinstance(value, Mapping):
            logger.warning("Ignoring malformed %s record", key)
            return None
        return value

    def _write(self, key: str, value: object) -> None:
        try:
            self.store.set(key, value)
        except Exception:
            logger.exception("Failed to save %s to store", key)

    def _remove(self, key: str) -> None:
        try:
            self.store.remove(key)
        except Exception:
            logger.exception("Failed to remove %s from store", key)
