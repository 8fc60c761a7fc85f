"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from macro_budget.api.models import (
    BudgetState,
    BudgetTotals,
    DailyBudgetView,
    DayEntryView,
    EditResult,
    FieldEdit,
)
from macro_budget.app_logging import configure_logging
from macro_budget.containers import AppContainer
from macro_budget.domain.budget import DAYS
from macro_budget.services.budget import MacroTotals, format_summary


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        state_container.tracker_service.load()
        try:
            await state_container.reminder_scheduler.start()
        except Exception:
            logger.exception("Failed to start daily reminders")
        yield
        state_container.reminder_scheduler.shutdown()
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/budget")
    async def get_budget(request: Request) -> BudgetState:
        """Return the budget, the week and everything derived from them."""
        return _build_state(request.app.state.container)

    @app.put("/budget/daily/{field}")
    async def edit_daily_budget(
        field: str, edit: FieldEdit, request: Request
    ) -> EditResult:
        """Apply an edit to a daily budget macro."""
        state_container: AppContainer = request.app.state.container
        try:
            accepted = state_container.tracker_service.set_budget_field(
                field, edit.value
            )
        except KeyError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown budget field: {field}",
            ) from exc
        return EditResult(accepted=accepted, state=_build_state(state_container))

    @app.put("/budget/days/{day}/{field}")
    async def edit_day_entry(
        day: str, field: str, edit: FieldEdit, request: Request
    ) -> EditResult:
        """Apply an edit to one field of a weekday entry."""
        state_container: AppContainer = request.app.state.container
        try:
            accepted = state_container.tracker_service.set_entry_field(
                day, field, edit.value
            )
        except KeyError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown day or field: {day}/{field}",
            ) from exc
        return EditResult(accepted=accepted, state=_build_state(state_container))

    @app.post("/budget/clear")
    async def clear_all(request: Request) -> BudgetState:
        """Reset the budget and the week to defaults."""
        state_container: AppContainer = request.app.state.container
        state_container.tracker_service.clear_all()
        return _build_state(state_container)

    return app


def _build_state(container: AppContainer) -> BudgetState:
    tracker = container.tracker_service
    summary = tracker.summary()
    budget = tracker.daily_budget
    return BudgetState(
        daily_budget=DailyBudgetView(
            calories=summary.daily_calories,
            carbs=budget.carbs,
            protein=budget.protein,
            fat=budget.fat,
        ),
        weekly_entries={
            day: DayEntryView(**tracker.weekly_entries[day].to_record())
            for day in DAYS
        },
        weekly_budget=_totals(summary.weekly_budget),
        totals=_totals(summary.totals),
        remaining=_totals(summary.remaining),
        empty_days=summary.empty_days,
        placeholders=summary.placeholders,
        filled_days=summary.filled_days,
        lines=format_summary(summary),
        reminder=container.reminder_scheduler.state.value,
    )


def _totals(totals: MacroTotals) -> BudgetTotals:
    return BudgetTotals(**totals.as_dict())
