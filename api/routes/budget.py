"""Monthly budget routes"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_budget_view, raise_for_failure
from api.responses import USER_ERRORS, WRITE_ERRORS
from domain.schemas import BudgetSummary, BudgetUpdate
from services import BudgetView

router = APIRouter(prefix="/budget", tags=["Budget"])
logger = logging.getLogger("unimeal.api.budget")


@router.get("", response_model=BudgetSummary, responses=USER_ERRORS)
def get_budget(view: BudgetView = Depends(get_budget_view)):
    """Monthly limit, spent, remaining and the status message"""
    return view.summary()


@router.put("", response_model=BudgetSummary, responses=WRITE_ERRORS)
async def update_budget(payload: BudgetUpdate, view: BudgetView = Depends(get_budget_view)):
    """
    Set the monthly limit.

    The value must be a number greater than 0; it is stored with merge so
    other fields of the budget document are kept.
    """
    if not await view.save_limit(payload.monthly_limit):
        raise_for_failure(view)
    return view.summary()
