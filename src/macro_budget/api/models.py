"""Pydantic models for the budget HTTP API."""

from pydantic import BaseModel, ConfigDict, Field


class FieldEdit(BaseModel):
    """Raw text typed into a numeric field."""

    value: str


class BudgetTotals(BaseModel):
    """Calories and macro grams."""

    calories: float
    carbs: float
    protein: float
    fat: float


class DailyBudgetView(BaseModel):
    """Daily budget as entered, plus derived calories."""

    calories: float
    carbs: str
    protein: str
    fat: str


class DayEntryView(BaseModel):
    """Logged intake for one weekday."""

    calories: str
    carbs: str
    protein: str
    fat: str


class BudgetState(BaseModel):
    """State document consumed by the rendering surface."""

    model_config = ConfigDict(populate_by_name=True)

    daily_budget: DailyBudgetView = Field(alias="dailyBudget")
    weekly_entries: dict[str, DayEntryView] = Field(alias="weeklyEntries")
    weekly_budget: BudgetTotals = Field(alias="weeklyBudget")
    totals: BudgetTotals
    remaining: BudgetTotals
    empty_days: dict[str, list[str]] = Field(alias="emptyDays")
    placeholders: dict[str, dict[str, str]]
    filled_days: dict[str, bool] = Field(alias="filledDays")
    lines: list[str]
    reminder: str


class EditResult(BaseModel):
    """Outcome of an edit and the resulting state."""

    accepted: bool
    state: BudgetState
