"""Budget calculations over the daily budget and the logged week."""

import math
import re
from dataclasses import dataclass

from macro_budget.domain.budget import (
    DAYS,
    ENTRY_FIELDS,
    DailyBudget,
    DayEntry,
    WeeklyEntries,
)

CALORIES_PER_GRAM = {"carbs": 4, "protein": 4, "fat": 9}
DAYS_PER_WEEK = 7

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class MacroTotals:
    """Calories and grams per macro for some period."""

    calories: float
    carbs: float
    protein: float
    fat: float

    def get(self, field: str) -> float:
        """Return the value for a field name."""
        return getattr(self, field)

    def as_dict(self) -> dict[str, float]:
        """Return the totals keyed by field name."""
        return {field: self.get(field) for field in ENTRY_FIELDS}


@dataclass(frozen=True)
class WeekAggregate:
    """Sums of filled values and the days still unfilled, per field."""

    totals: MacroTotals
    empty_days: dict[str, list[str]]


@dataclass(frozen=True)
class BudgetSummary:
    """Everything derived from a budget/week snapshot for display."""

    daily_calories: float
    weekly_budget: MacroTotals
    totals: MacroTotals
    empty_days: dict[str, list[str]]
    remaining: MacroTotals
    placeholders: dict[str, dict[str, str]]
    filled_days: dict[str, bool]


def parse_quantity(text: object) -> float | None:
    """Parse the leading decimal number of a text field.

    Mirrors lenient browser number parsing: surrounding whitespace is ignored
    and trailing garbage after the number is dropped ("12g" -> 12.0). Returns
    None when the text does not start with a finite number.
    """
    if not isinstance(text, str):
        return None
    match = _LEADING_NUMBER.match(text.strip())
    if match is None:
        return None
    value = float(match.group())
    if not math.isfinite(value):
        return None
    return value


def quantity_or_zero(text: object) -> float:
    """Parse a quantity, treating anything unparsable as 0."""
    value = parse_quantity(text)
    return 0.0 if value is None else value


def derive_calories(carbs: object, protein: object, fat: object) -> float:
    """Return calories implied by the macro grams (4/4/9 kcal per gram)."""
    return (
        quantity_or_zero(carbs) * CALORIES_PER_GRAM["carbs"]
        + quantity_or_zero(protein) * CALORIES_PER_GRAM["protein"]
        + quantity_or_zero(fat) * CALORIES_PER_GRAM["fat"]
    )


def weekly_budget(daily_budget: DailyBudget) -> MacroTotals:
    """Extrapolate the daily budget to a full week."""
    return MacroTotals(
        calories=derive_calories(
            daily_budget.carbs, daily_budget.protein, daily_budget.fat
        )
        * DAYS_PER_WEEK,
        carbs=quantity_or_zero(daily_budget.carbs) * DAYS_PER_WEEK,
        protein=quantity_or_zero(daily_budget.protein) * DAYS_PER_WEEK,
        fat=quantity_or_zero(daily_budget.fat) * DAYS_PER_WEEK,
    )


def is_filled_value(text: object) -> bool:
    """Return True when a field holds a number strictly greater than zero."""
    value = parse_quantity(text)
    return value is not None and value > 0


def aggregate(weekly_entries: WeeklyEntries) -> WeekAggregate:
    """Sum filled values per field and list the unfilled days per field.

    Each field is evaluated independently, so a day can count towards the
    carbs total while still being listed as empty for calories.
    """
    totals = dict.fromkeys(ENTRY_FIELDS, 0.0)
    empty_days: dict[str, list[str]] = {field: [] for field in ENTRY_FIELDS}
    for day in DAYS:
        entry = weekly_entries.get(day, DayEntry())
        for field in ENTRY_FIELDS:
            text = getattr(entry, field)
            if is_filled_value(text):
                totals[field] += quantity_or_zero(text)
            else:
                empty_days[field].append(day)
    return WeekAggregate(totals=MacroTotals(**totals), empty_days=empty_days)


def remaining(budget: MacroTotals, totals: MacroTotals) -> MacroTotals:
    """Return budget minus totals per field; negative means over budget."""
    return MacroTotals(
        **{field: budget.get(field) - totals.get(field) for field in ENTRY_FIELDS}
    )


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def placeholder(
    field: str, remaining_totals: MacroTotals, empty_days: dict[str, list[str]]
) -> int:
    """Return the even share of the remaining allowance per unfilled day."""
    empty_count = len(empty_days[field])
    if empty_count == 0:
        return 0
    return round_half_away_from_zero(remaining_totals.get(field) / empty_count)


def is_unfilled(weekly_entries: WeeklyEntries, day: str, field: str) -> bool:
    """Return True when the day's field should show a placeholder.

    Uses the same rule as ``aggregate``: anything other than a number above
    zero (empty, zero, negative or unparsable) is unfilled.
    """
    return not is_filled_value(getattr(weekly_entries[day], field))


def is_day_filled(entry: DayEntry | None) -> bool:
    """Return True when any field of the entry holds a number above zero."""
    if entry is None:
        return False
    return any(is_filled_value(getattr(entry, field)) for field in ENTRY_FIELDS)


def summarize(
    daily_budget: DailyBudget, weekly_entries: WeeklyEntries
) -> BudgetSummary:
    """Compute the full set of derived values for the current state."""
    budget = weekly_budget(daily_budget)
    week = aggregate(weekly_entries)
    left = remaining(budget, week.totals)
    hints = {field: placeholder(field, left, week.empty_days) for field in ENTRY_FIELDS}
    placeholders = {
        day: {
            field: str(hints[field]) if is_unfilled(weekly_entries, day, field) else ""
            for field in ENTRY_FIELDS
        }
        for day in DAYS
    }
    return BudgetSummary(
        daily_calories=derive_calories(
            daily_budget.carbs, daily_budget.protein, daily_budget.fat
        ),
        weekly_budget=budget,
        totals=week.totals,
        empty_days=week.empty_days,
        remaining=left,
        placeholders=placeholders,
        filled_days={day: is_day_filled(weekly_entries.get(day)) for day in DAYS},
    )


def format_summary(summary: BudgetSummary) -> list[str]:
    """Render the weekly budget and remaining lines shown above the week."""
    budget = summary.weekly_budget
    left = summary.remaining
    return [
        (
            f"Weekly Budget: {_format_number(budget.calories)} cal, "
            f"{_format_number(budget.carbs)}g carbs, "
            f"{_format_number(budget.protein)}g protein, "
            f"{_format_number(budget.fat)}g fat"
        ),
        (
            f"Remaining: {round_half_away_from_zero(left.calories)} cal, "
            f"{round_half_away_from_zero(left.carbs)}g carbs, "
            f"{round_half_away_from_zero(left.protein)}g protein, "
            f"{round_half_away_from_zero(left.fat)}g fat"
        ),
    ]


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return f"{value:g}"
