"""
Tests for the ingredients page view model.

Covers the live sorted list, search and expiring-soon filters, the add form
and the confirmed, per-item delete.
"""

import pytest

from app.exceptions import PermissionDeniedError, StoreUnavailableError, WriteFailedError
from domain.enums import LoadState
from domain.schemas import IngredientForm
from services.ingredients_view import IngredientsView
from test_fixtures import always, make_ingredient_doc, user_path

pytestmark = pytest.mark.anyio


@pytest.fixture
def view(store, user_id, today):
    return IngredientsView(store, today=lambda: today).open(user_id)


async def _seed(store, user_id, **kwargs):
    return await store.add(user_path(user_id, "ingredients"), make_ingredient_doc(**kwargs))


async def test_list_sorted_by_expiry_then_name(store, user_id, view):
    await _seed(store, user_id, name="Rice", expiry_date="")
    await _seed(store, user_id, name="Milk", expiry_date="2024-06-12")
    await _seed(store, user_id, name="Bread", expiry_date="2024-06-12")
    await _seed(store, user_id, name="Eggs", expiry_date="2024-06-11")
    assert [i.name for i in view.ingredients] == ["Eggs", "Bread", "Milk", "Rice"]
    assert view.state == LoadState.LOADED


async def test_search_and_expiring_filters_compose(store, user_id, view):
    await _seed(store, user_id, name="Whole Milk", expiry_date="2024-06-11")
    await _seed(store, user_id, name="Oat Milk", expiry_date="2024-07-01")
    await _seed(store, user_id, name="Bread", expiry_date="2024-06-10")

    view.set_search("  MILK ")
    assert [i.name for i in view.visible_ingredients] == ["Whole Milk", "Oat Milk"]

    view.set_expiring_soon_only(True)
    assert [i.name for i in view.visible_ingredients] == ["Whole Milk"]

    view.set_search("")
    assert [i.name for i in view.visible_ingredients] == ["Bread", "Whole Milk"]
    assert view.expiring_soon_count == 2

    listing = view.listing()
    assert listing.total == 3
    assert all(item.expiring_soon for item in listing.items)
    assert listing.min_expiry_date == "2024-06-10"


async def test_add_then_delete_restores_collection(store, user_id, view):
    """
    Verifies:
    - add_ingredient returns the new id and the listener sees it
    - delete needs confirmation and removes it again
    """
    before = await store.get(user_path(user_id, "ingredients"))
    form = IngredientForm(name="Spinach", quantity=1, unit="pack", price=None, expiry_date="2024-06-11")
    new_id = await view.add_ingredient(form)
    assert new_id is not None
    added = next(i for i in view.ingredients if i.id == new_id)
    assert added.price == 0
    assert added.created_at is not None

    confirm = always(True)
    assert await view.delete_ingredient(new_id, confirm) is True
    assert confirm.prompts == ["Are you sure you want to delete this ingredient?"]
    assert await store.get(user_path(user_id, "ingredients")) == before
    assert view.ingredients == []


async def test_invalid_form_is_rejected_before_write(store, user_id, view):
    result = await view.add_ingredient(IngredientForm(name="Milk", quantity="0", unit="L", expiry_date="2024-06-11"))
    assert result is None
    assert view.error == "Quantity must be greater than 0."
    assert await store.get(user_path(user_id, "ingredients")) == []


async def test_declined_confirm_and_busy_item_do_not_delete(store, user_id, view):
    doc_id = await _seed(store, user_id, name="Milk")
    assert await view.delete_ingredient(doc_id, always(False)) is False

    view.deleting.add(doc_id)
    assert await view.delete_ingredient(doc_id, always(True)) is False
    assert len(view.ingredients) == 1


async def test_write_failures_use_generic_messages(store, user_id, view):
    path = user_path(user_id, "ingredients")
    doc_id = await _seed(store, user_id, name="Milk")
    store.fail_writes(path, WriteFailedError("boom", path=path))

    form = IngredientForm(name="Bread", quantity=1, unit="pieces", expiry_date="2024-06-11")
    assert await view.add_ingredient(form) is None
    assert view.error == "Could not add ingredient. Please try again."

    assert await view.delete_ingredient(doc_id, always(True)) is False
    assert view.error == "Could not delete ingredient. Please try again."
    assert doc_id not in view.deleting


async def test_listener_error_messages(store, user_id, view):
    path = user_path(user_id, "ingredients")
    await _seed(store, user_id, name="Milk")

    store.emit_error(path, PermissionDeniedError("Missing or insufficient permissions", path=path))
    assert view.error == (
        "Permission denied. Make sure the database rules allow access to "
        f"{path} and are published."
    )
    assert len(view.ingredients) == 1

    store.emit_error(path, StoreUnavailableError("offline"))
    assert view.error == "The database is temporarily unavailable. Please try again in a moment."

    store.emit_error(path, RuntimeError("index missing"))
    assert view.error.startswith("Failed to load ingredients. Error: index missing.")
    assert view.state == LoadState.ERROR


async def test_successful_add_keeps_listener_banner(store, user_id, view):
    path = user_path(user_id, "ingredients")
    store.emit_error(path, StoreUnavailableError("offline"))
    banner = view.error

    doc_id = await view.add_ingredient(
        IngredientForm(name="Rice", quantity=1, unit="kg", price=2, expiry_date="2024-07-01")
    )
    assert doc_id is not None
    assert view.error == banner
    assert view.state == LoadState.ERROR

    store.fail_writes(path, WriteFailedError("boom", path=path))
    await view.add_ingredient(
        IngredientForm(name="Beans", quantity=1, unit="kg", expiry_date="2024-07-01")
    )
    assert view.error == "Could not add ingredient. Please try again."

    view.open(user_id)
    assert view.error is None
    assert view.load_error is None
