"""
Tests for the dashboard view model.

The dashboard combines budget, ingredients and meals: budget warning,
expiring-soon preview with dish ideas, upcoming meals in weekday order, the
quick budget form and the onboarding checklist.
"""

import pytest

from app.exceptions import WriteFailedError
from domain.enums import LoadState
from services.dashboard_view import DashboardView
from test_fixtures import make_ingredient_doc, make_meal_doc, user_path

pytestmark = pytest.mark.anyio


@pytest.fixture
def view(store, user_id, today):
    return DashboardView(store, today=lambda: today).open(user_id)


async def test_summary_for_empty_account(view):
    summary = view.summary()
    assert summary.state == LoadState.LOADED
    assert summary.monthly_limit is None
    assert summary.remaining_display == "-"
    assert summary.budget_warning is False
    assert summary.onboarding.show_overlay is True
    assert [s.done for s in summary.onboarding.steps] == [False, False, False]


async def test_budget_warning_and_expiring_preview(store, user_id, view):
    await store.set(user_path(user_id, "budget", "current"), {"monthlyLimit": 50})
    names = ["Whole Milk", "Cheddar Cheese", "Bread", "Eggs", "Rice"]
    for name in names:
        await store.add(
            user_path(user_id, "ingredients"),
            make_ingredient_doc(name=name, price=8.5, expiry_date="2024-06-11"),
        )
    await store.add(
        user_path(user_id, "ingredients"),
        make_ingredient_doc(name="Lentils", price=0, expiry_date="2024-08-01"),
    )

    summary = view.summary()
    assert summary.spent == pytest.approx(42.5)
    assert summary.remaining == pytest.approx(7.5)
    assert summary.budget_warning is True
    assert summary.expiring_soon_count == 5
    assert len(summary.expiring_soon) == 4
    assert summary.use_it_up_suggestions == [
        "French toast",
        "Oatmeal",
        "Hot chocolate",
        "Smoothie",
        "Grilled cheese",
    ]


async def test_upcoming_meals_sorted_by_weekday_and_capped(store, user_id, view):
    for name, day in [
        ("Curry", "wednesday"),
        ("Pasta", "monday"),
        ("Tacos", "friday"),
        ("Soup", "tuesday"),
        ("Roast", "sunday"),
        ("Pizza", "saturday"),
    ]:
        await store.add(user_path(user_id, "meals"), make_meal_doc(name, day))
    upcoming = view.summary().upcoming_meals
    assert [m.name for m in upcoming] == ["Pasta", "Soup", "Curry", "Tacos", "Pizza"]
    assert upcoming[0].weekday_label == "Monday"


async def test_quick_budget_save(store, user_id, view):
    assert await view.save_budget("abc") is False
    assert view.budget_error == "Enter a number greater than 0."

    assert await view.save_budget("300") is True
    assert view.monthly_limit == 300
    assert view.budget_error is None

    path = user_path(user_id, "budget", "current")
    store.fail_writes(path, WriteFailedError("nope", path=path))
    assert await view.save_budget("400") is False
    assert view.budget_error == "Could not save. Try again."
    assert view.monthly_limit == 300


async def test_quick_budget_requires_sign_in(store):
    view = DashboardView(store).open(None)
    assert await view.save_budget("100") is False
    assert view.budget_error == "Sign in to set your budget."


async def test_refresh_onboarding_completes_when_all_steps_done(store, user_id, view):
    await store.set(user_path(user_id, "budget", "current"), {"monthlyLimit": 100})
    await store.add(user_path(user_id, "meals"), make_meal_doc())
    assert await view.refresh_onboarding() is False

    await store.add(user_path(user_id, "ingredients"), make_ingredient_doc())
    assert await view.refresh_onboarding() is True
    assert await view.refresh_onboarding() is False
    assert view.summary().onboarding.completed is True
    assert view.summary().onboarding.show_overlay is False


async def test_close_releases_every_subscription(store, user_id, view):
    view.close()
    for path in ("budget/current", "ingredients", "meals", "preferences/onboarding"):
        assert store.listener_count(user_path(user_id, *path.split("/"))) == 0
