"""Ingredient routes"""

from fastapi import APIRouter, Depends, Query, status
import logging

from api.dependencies import get_ingredients_view, raise_for_failure
from api.responses import USER_ERRORS, WRITE_ERRORS
from domain.schemas import IngredientCreatedResponse, IngredientForm, IngredientListResponse
from services import IngredientsView

router = APIRouter(prefix="/ingredients", tags=["Ingredients"])
logger = logging.getLogger("unimeal.api.ingredients")


@router.get("", response_model=IngredientListResponse, responses=USER_ERRORS)
def list_ingredients(
    search: str = Query("", description="Case-insensitive name filter"),
    expiring_soon_only: bool = Query(False, description="Only items expiring soon"),
    view: IngredientsView = Depends(get_ingredients_view),
):
    """Ingredients sorted by expiry date then name"""
    view.set_search(search)
    view.set_expiring_soon_only(expiring_soon_only)
    return view.listing()


@router.post(
    "",
    response_model=IngredientCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_ERRORS,
)
async def add_ingredient(form: IngredientForm, view: IngredientsView = Depends(get_ingredients_view)):
    """Add an ingredient. Price may be left out (stored as 0)."""
    doc_id = await view.add_ingredient(form)
    if doc_id is None:
        raise_for_failure(view)
    return IngredientCreatedResponse(id=doc_id)


@router.delete("/{ingredient_id}", responses=WRITE_ERRORS)
async def delete_ingredient(
    ingredient_id: str,
    confirm: bool = Query(False, description="Must be true to delete"),
    view: IngredientsView = Depends(get_ingredients_view),
):
    """Delete an ingredient; requires confirm=true"""
    deleted = await view.delete_ingredient(ingredient_id, lambda prompt: confirm)
    if not deleted:
        raise_for_failure(view)
        return {"status": "cancelled", "id": ingredient_id}
    return {"status": "ok", "removed": ingredient_id}
