"""Dashboard and use-it-up suggestion routes"""

from typing import List

from fastapi import APIRouter, Depends, Query
import logging

from api.dependencies import get_dashboard_view
from api.responses import USER_ERRORS
from domain.schemas import DashboardSummary, SuggestionResponse
from services import DashboardView, get_use_it_up_suggestions

router = APIRouter(tags=["Dashboard"])
logger = logging.getLogger("unimeal.api.dashboard")


@router.get("/dashboard", response_model=DashboardSummary, responses=USER_ERRORS)
async def get_dashboard(view: DashboardView = Depends(get_dashboard_view)):
    """
    Dashboard overview.

    Includes budget figures, the first expiring items with dish ideas,
    upcoming meals in weekday order and the onboarding checklist.
    """
    await view.refresh_onboarding()
    return view.summary()


@router.get("/suggestions", response_model=SuggestionResponse)
def get_suggestions(names: List[str] = Query([])):
    """
    Use-it-up dishes for ingredient names.

    Example: /suggestions?names=Whole%20Milk&names=Cheddar%20Cheese
    """
    suggestions = get_use_it_up_suggestions(names)
    logger.debug("Suggestions for %s: %s", names, suggestions)
    return SuggestionResponse(names=names, suggestions=suggestions)
