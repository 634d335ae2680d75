"""Meal planning routes: meals, week view, layout preference and export"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse
import logging

from api.dependencies import get_meals_view, raise_for_failure
from api.responses import USER_ERRORS, WRITE_ERRORS
from domain.schemas import MealCreatedResponse, MealForm, MealListResponse, ViewModeUpdate
from services import MealsView

router = APIRouter(prefix="/meals", tags=["Meals"])
logger = logging.getLogger("unimeal.api.meals")


@router.get("", response_model=MealListResponse, responses=USER_ERRORS)
def list_meals(
    weekday: Optional[str] = Query(None, description="Only meals planned for this weekday"),
    view: MealsView = Depends(get_meals_view),
):
    """Meals newest first, plus the Monday-to-Sunday week grid"""
    view.set_weekday_filter(weekday)
    return view.listing()


@router.post(
    "", response_model=MealCreatedResponse, status_code=status.HTTP_201_CREATED, responses=WRITE_ERRORS
)
async def add_meal(form: MealForm, view: MealsView = Depends(get_meals_view)):
    """Plan a meal for a weekday"""
    doc_id = await view.add_meal(form.name, form.weekday)
    if doc_id is None:
        raise_for_failure(view)
    return MealCreatedResponse(id=doc_id)


@router.get("/export", response_class=PlainTextResponse, responses=USER_ERRORS)
def export_meals(
    weekday: Optional[str] = Query(None, description="Export a single weekday"),
    view: MealsView = Depends(get_meals_view),
):
    """Download the meal plan as a plain-text file"""
    view.set_weekday_filter(weekday)
    filename, text = view.download_export(date.today())
    logger.info("Exporting %d meals as %s", len(view.visible_meals), filename)
    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/view-mode", response_model=ViewModeUpdate, responses=USER_ERRORS)
def get_view_mode(view: MealsView = Depends(get_meals_view)):
    """Stored layout of the meals page (list or week)"""
    return ViewModeUpdate(view_mode=view.view_mode)


@router.put("/view-mode", response_model=ViewModeUpdate, responses=USER_ERRORS)
def update_view_mode(payload: ViewModeUpdate, view: MealsView = Depends(get_meals_view)):
    """Persist the layout of the meals page"""
    view.set_view_mode(payload.view_mode)
    return ViewModeUpdate(view_mode=view.view_mode)


@router.delete("/{meal_id}", responses=WRITE_ERRORS)
async def delete_meal(
    meal_id: str,
    confirm: bool = Query(False, description="Must be true to delete"),
    view: MealsView = Depends(get_meals_view),
):
    """Delete a meal; requires confirm=true"""
    deleted = await view.delete_meal(meal_id, lambda prompt: confirm)
    if not deleted:
        raise_for_failure(view)
        return {"status": "cancelled", "id": meal_id}
    return {"status": "ok", "removed": meal_id}
