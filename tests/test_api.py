"""Tests for the budget HTTP API."""

from fastapi.testclient import TestClient

from macro_budget.api.app import create_app
from macro_budget.services.tracker import DAILY_BUDGET_KEY, WEEKLY_ENTRIES_KEY
from tests.conftest import InMemoryKeyValueStore


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_get_budget_returns_defaults(container) -> None:
    with TestClient(create_app(container)) as client:
        response = client.get("/budget")

    assert response.status_code == 200
    data = response.json()
    assert data["dailyBudget"] == {
        "calories": 2105,
        "carbs": "270",
        "protein": "110",
        "fat": "65",
    }
    assert data["weeklyBudget"]["calories"] == 14735
    assert data["remaining"] == data["weeklyBudget"]
    assert data["placeholders"]["Monday"]["carbs"] == "270"
    assert data["filledDays"]["Sunday"] is False
    assert data["lines"][0].startswith("Weekly Budget: 14735 cal")
    assert data["reminder"] == "waiting-for-window"


def test_edit_day_entry_updates_placeholders_and_store(
    container, store: InMemoryKeyValueStore
) -> None:
    with TestClient(create_app(container)) as client:
        response = client.put("/budget/days/Monday/carbs", json={"value": "300"})

    assert response.status_code == 200
    data = response.json()
    assert data["accepted"] is True
    state = data["state"]
    assert state["weeklyEntries"]["Monday"]["carbs"] == "300"
    assert state["remaining"]["carbs"] == 1590
    assert state["placeholders"]["Tuesday"]["carbs"] == "265"
    assert state["placeholders"]["Monday"]["carbs"] == ""
    assert len(state["emptyDays"]["carbs"]) == 6
    assert store.records[WEEKLY_ENTRIES_KEY]["Monday"]["carbs"] == "300"


def test_rejected_edit_keeps_value(container) -> None:
    with TestClient(create_app(container)) as client:
        client.put("/budget/daily/fat", json={"value": "10"})
        response = client.put("/budget/daily/fat", json={"value": "12.5"})

    data = response.json()
    assert response.status_code == 200
    assert data["accepted"] is False
    assert data["state"]["dailyBudget"]["fat"] == "10"


def test_unknown_field_returns_404(container) -> None:
    with TestClient(create_app(container)) as client:
        daily = client.put("/budget/daily/calories", json={"value": "2000"})
        day = client.put("/budget/days/Funday/carbs", json={"value": "1"})

    assert daily.status_code == 404
    assert day.status_code == 404


def test_clear_all_resets_and_removes_records(
    container, store: InMemoryKeyValueStore
) -> None:
    with TestClient(create_app(container)) as client:
        client.put("/budget/daily/carbs", json={"value": "500"})
        client.put("/budget/days/Friday/calories", json={"value": "1800"})
        response = client.post("/budget/clear")

    data = response.json()
    assert data["dailyBudget"]["carbs"] == "270"
    assert data["weeklyEntries"]["Friday"]["calories"] == ""
    assert DAILY_BUDGET_KEY not in store.records
    assert WEEKLY_ENTRIES_KEY not in store.records


def test_startup_loads_persisted_state(container, store: InMemoryKeyValueStore) -> None:
    store.records[DAILY_BUDGET_KEY] = {
        "calories": "5000",
        "carbs": "200",
        "protein": "100",
        "fat": "50",
    }

    with TestClient(create_app(container)) as client:
        response = client.get("/budget")

    assert response.json()["dailyBudget"]["calories"] == 1650
    assert store.writes == []


def test_shutdown_disarms_reminders(container) -> None:
    with TestClient(create_app(container)):
        assert container.reminder_scheduler.state == "waiting-for-window"

    assert container.reminder_scheduler.state == "unarmed"
