"""Meal template routes"""

from fastapi import APIRouter, Depends, status
import logging

from api.dependencies import get_meals_view, raise_for_failure
from api.responses import USER_ERRORS, WRITE_ERRORS
from domain.schemas import MealCreatedResponse, MealTemplateForm, MealTemplateListResponse
from services import MealsView

router = APIRouter(prefix="/meal-templates", tags=["Meal Templates"])
logger = logging.getLogger("unimeal.api.templates")


@router.get("", response_model=MealTemplateListResponse, responses=USER_ERRORS)
def list_templates(view: MealsView = Depends(get_meals_view)):
    """Saved templates, newest first"""
    return view.template_listing()


@router.post(
    "", response_model=MealCreatedResponse, status_code=status.HTTP_201_CREATED, responses=WRITE_ERRORS
)
async def save_template(form: MealTemplateForm, view: MealsView = Depends(get_meals_view)):
    """Save a meal form as a template; the weekday is optional"""
    doc_id = await view.save_as_template(form.name, form.weekday)
    if doc_id is None:
        raise_for_failure(view)
    return MealCreatedResponse(id=doc_id)


@router.post(
    "/{template_id}/meals",
    response_model=MealCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_ERRORS,
)
async def add_meal_from_template(template_id: str, view: MealsView = Depends(get_meals_view)):
    """Plan a meal from a template (template weekday, else the fallback day)"""
    doc_id = await view.add_from_template(template_id)
    if doc_id is None:
        raise_for_failure(view)
    return MealCreatedResponse(id=doc_id)


@router.delete("/{template_id}", responses=WRITE_ERRORS)
async def delete_template(template_id: str, view: MealsView = Depends(get_meals_view)):
    if not await view.delete_template(template_id):
        raise_for_failure(view)
    return {"status": "ok", "removed": template_id}
