"""
Shared test fixtures and utilities for the UniMeal test suite.

This module contains document factories, seeding helpers, fake collaborators
and the API test client setup reused across the test files.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import anyio
from fastapi.testclient import TestClient

from adapters.document_store import SERVER_TIMESTAMP
from api.dependencies import get_preferences, get_store
from main import app


class TickingClock:
    """Server clock that moves one minute forward on every read."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 6, 10, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


class FakeClipboard:
    def __init__(self, fail: bool = False):
        self.text = None
        self.fail = fail

    async def write_text(self, text: str) -> None:
        if self.fail:
            raise RuntimeError("clipboard blocked")
        self.text = text


class ManualTimer:
    """Monotonic clock for the export 'copied' flag."""

    def __init__(self):
        self.value = 100.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


def always(answer: bool):
    """Confirm callback answering every prompt the same way"""
    prompts = []

    def confirm(prompt: str) -> bool:
        prompts.append(prompt)
        return answer

    confirm.prompts = prompts
    return confirm


def make_ingredient_doc(
    name: str = "Whole Milk",
    qty: float = 1,
    unit: str = "L",
    price=1.25,
    expiry_date: str = "2024-06-12",
) -> dict:
    """
    Ingredient document as stored (camelCase keys).

    Example:
        >>> make_ingredient_doc("Bread", price=2.0)["expiryDate"]
        '2024-06-12'
    """
    return {
        "name": name,
        "qty": qty,
        "unit": unit,
        "price": price,
        "expiryDate": expiry_date,
        "createdAt": SERVER_TIMESTAMP,
    }


def make_meal_doc(name: str = "Pasta", weekday: str = "monday") -> dict:
    return {"name": name, "weekday": weekday, "createdAt": SERVER_TIMESTAMP}


def make_template_doc(name: str = "Porridge", default_weekday: str = "") -> dict:
    return {"name": name, "defaultWeekday": default_weekday, "createdAt": SERVER_TIMESTAMP}


def user_path(user_id: str, *parts: str) -> str:
    return "/".join(("users", user_id) + parts)


def seed(store, path: str, data: dict) -> str:
    """Add a document from synchronous test code; returns its id"""
    return anyio.run(store.add, path, data)


def seed_doc(store, doc_path: str, data: dict) -> None:
    anyio.run(store.set, doc_path, data)


def seed_budget(store, user_id: str, monthly_limit) -> None:
    seed_doc(store, user_path(user_id, "budget", "current"), {"monthlyLimit": monthly_limit})


def seed_ingredient(store, user_id: str, **kwargs) -> str:
    return seed(store, user_path(user_id, "ingredients"), make_ingredient_doc(**kwargs))


def seed_meal(store, user_id: str, name: str = "Pasta", weekday: str = "monday") -> str:
    return seed(store, user_path(user_id, "meals"), make_meal_doc(name, weekday))


def api_client(store, preferences=None) -> TestClient:
    """
    TestClient whose routes use the given store (and preferences).

    The lifespan is not run, so no real backend is opened.
    """
    app.dependency_overrides[get_store] = lambda: store
    if preferences is not None:
        app.dependency_overrides[get_preferences] = lambda: preferences
    return TestClient(app)


def reset_overrides() -> None:
    app.dependency_overrides.clear()


def headers(user_id: str) -> dict:
    return {"X-User-Id": user_id}


def days_from(reference: date, days: int) -> str:
    return (reference + timedelta(days=days)).isoformat()
