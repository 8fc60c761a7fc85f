"""Domain models for the weekly macro budget."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass

DAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
MACRO_FIELDS = ("carbs", "protein", "fat")
ENTRY_FIELDS = ("calories", "carbs", "protein", "fat")

# Version 1 records stored calories next to the macros; version 2 derives them.
BUDGET_SCHEMA_VERSION = 2
LEGACY_BUDGET_KEYS = frozenset({"calories"})


@dataclass(frozen=True)
class DailyBudget:
    """Daily macro targets as entered text; calories are always derived."""

    carbs: str = "270"
    protein: str = "110"
    fat: str = "65"

    def to_record(self) -> dict[str, str]:
        """Return the JSON-serializable record for the store."""
        return asdict(self)


@dataclass(frozen=True)
class DayEntry:
    """Logged intake for a single weekday."""

    calories: str = ""
    carbs: str = ""
    protein: str = ""
    fat: str = ""

    def to_record(self) -> dict[str, str]:
        """Return the JSON-serializable record for the store."""
        return asdict(self)


WeeklyEntries = dict[str, DayEntry]


def default_weekly_entries() -> WeeklyEntries:
    """Return a fresh week with every field empty."""
    return {day: DayEntry() for day in DAYS}


def weekly_entries_to_record(entries: WeeklyEntries) -> dict[str, dict[str, str]]:
    """Serialize weekly entries in weekday order."""
    return {day: entries[day].to_record() for day in DAYS}


def budget_schema_version(raw: Mapping[str, object]) -> int:
    """Return the schema version a stored budget record was written with.

    The version is not persisted; records carrying a legacy key are version 1.
    """
    if LEGACY_BUDGET_KEYS.intersection(raw):
        return 1
    return BUDGET_SCHEMA_VERSION


def migrate_daily_budget(raw: Mapping[str, object]) -> dict[str, object]:
    """Upgrade a stored record to the current schema.

    Version 1 records lose their calories so they are recomputed from the macros.
    """
    if budget_schema_version(raw) >= BUDGET_SCHEMA_VERSION:
        return dict(raw)
    return {key: value for key, value in raw.items() if key not in LEGACY_BUDGET_KEYS}


def daily_budget_from_record(raw: Mapping[str, object]) -> DailyBudget:
    """Build a DailyBudget from a stored record; missing macros load as empty."""
    migrated = migrate_daily_budget(raw)
    return DailyBudget(
        **{field: _as_text(migrated.get(field)) for field in MACRO_FIELDS}
    )


def weekly_entries_from_record(raw: Mapping[str, object]) -> WeeklyEntries:
    """Build WeeklyEntries from a stored record, filling gaps with empty fields."""
    entries = default_weekly_entries()
    for day in DAYS:
        day_raw = raw.get(day)
        if not isinstance(day_raw, Mapping):
            continue
        entries[day] = DayEntry(
            **{field: _as_text(day_raw.get(field)) for field in ENTRY_FIELDS}
        )
    return entries


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)
