"""
Tests for the budget page view model.

Flow:
1. open(identity) subscribes to budget/current and the ingredients collection
2. Every snapshot recomputes spent, remaining and the status message
3. save_limit validates, upserts with merge and only then updates the limit
"""

import pytest

from app.exceptions import (
    PermissionDeniedError,
    ServiceValidationError,
    StoreUnavailableError,
    UnauthorizedError,
    WriteFailedError,
)
from domain.enums import BudgetTone, LoadState
from services.budget_view import BudgetView
from test_fixtures import make_ingredient_doc, user_path

pytestmark = pytest.mark.anyio


async def test_not_signed_in_goes_straight_to_error(store):
    view = BudgetView(store).open(None)
    assert view.state == LoadState.ERROR
    assert view.error == "You must be signed in to view your budget."
    assert isinstance(view.failure, UnauthorizedError)
    assert store.listener_count("users/x/budget/current") == 0


async def test_loaded_without_budget_document(store, user_id):
    view = BudgetView(store).open(user_id)
    assert view.state == LoadState.LOADED
    assert view.monthly_limit is None
    assert view.limit_input == ""
    assert view.remaining is None
    assert view.status is None
    assert view.summary().remaining_display == "-"


async def test_snapshots_recompute_summary(store, user_id):
    """
    Verifies:
    - spent sums ingredient prices
    - remaining and tone follow each new snapshot without a refresh
    """
    await store.set(user_path(user_id, "budget", "current"), {"monthlyLimit": 100})
    view = BudgetView(store).open(user_id)
    await store.add(user_path(user_id, "ingredients"), make_ingredient_doc(price=50))
    assert view.spent == 50
    assert view.remaining == 50
    assert view.status.tone == BudgetTone.OK

    await store.add(user_path(user_id, "ingredients"), make_ingredient_doc(name="Bread", price=35))
    assert view.remaining == 15
    assert view.status.tone == BudgetTone.WARNING

    summary = view.summary()
    assert summary.limit_input == "100"
    assert summary.spent_display == "€85.00"
    assert summary.currency == "EUR"


async def test_non_numeric_limit_reads_as_zero(store, user_id):
    await store.set(user_path(user_id, "budget", "current"), {"monthlyLimit": "lots"})
    view = BudgetView(store).open(user_id)
    assert view.monthly_limit == 0
    assert view.limit_input == "0"


async def test_save_limit_writes_with_merge(store, user_id):
    path = user_path(user_id, "budget", "current")
    await store.set(path, {"note": "keep me"})
    view = BudgetView(store).open(user_id)

    assert await view.save_limit("250") is True
    assert view.monthly_limit == 250
    assert view.is_saving is False

    doc = await store.get(path)
    assert doc.data["monthlyLimit"] == 250
    assert doc.data["note"] == "keep me"
    assert doc.data["updatedAt"] is not None


async def test_invalid_limit_never_writes(store, user_id):
    view = BudgetView(store).open(user_id)
    assert await view.save_limit("-5") is False
    assert view.error == "Monthly limit must be a number greater than 0."
    assert isinstance(view.failure, ServiceValidationError)
    assert not (await store.get(user_path(user_id, "budget", "current"))).exists


async def test_failed_save_keeps_previous_limit(store, user_id):
    path = user_path(user_id, "budget", "current")
    await store.set(path, {"monthlyLimit": 80})
    view = BudgetView(store).open(user_id)
    store.fail_writes(path, WriteFailedError("disk full", path=path))

    assert await view.save_limit("120") is False
    assert view.error == "Could not save your budget. Please try again."
    assert view.monthly_limit == 80
    assert isinstance(view.failure, WriteFailedError)


async def test_listener_errors_keep_last_known_data(store, user_id):
    path = user_path(user_id, "budget", "current")
    await store.set(path, {"monthlyLimit": 60})
    view = BudgetView(store).open(user_id)

    store.emit_error(path, StoreUnavailableError("offline"))
    assert view.state == LoadState.ERROR
    assert view.error == "Failed to load your budget. Please check your connection and try again."
    assert view.monthly_limit == 60

    store.emit_error(user_path(user_id, "ingredients"), PermissionDeniedError("denied"))
    assert view.error == "Failed to load ingredient costs. Your budget summary may be incomplete."


async def test_close_unsubscribes(store, user_id):
    view = BudgetView(store).open(user_id)
    assert store.listener_count(user_path(user_id, "ingredients")) == 1
    view.close()
    assert store.listener_count(user_path(user_id, "ingredients")) == 0
    assert store.listener_count(user_path(user_id, "budget", "current")) == 0
