"""Onboarding checklist routes"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_dashboard_view, get_onboarding_tracker, raise_for_failure
from api.responses import USER_ERRORS, WRITE_ERRORS
from domain.schemas import OnboardingStatus
from services import DashboardView, OnboardingTracker

router = APIRouter(prefix="/onboarding", tags=["Onboarding"])
logger = logging.getLogger("unimeal.api.onboarding")


@router.get("", response_model=OnboardingStatus, responses=USER_ERRORS)
async def get_onboarding(view: DashboardView = Depends(get_dashboard_view)):
    """Checklist state; completes onboarding once every step is done"""
    await view.refresh_onboarding()
    return view.onboarding.status(*view.onboarding_flags())


@router.post("/skip", response_model=OnboardingStatus, responses=WRITE_ERRORS)
async def skip_onboarding(tracker: OnboardingTracker = Depends(get_onboarding_tracker)):
    """Mark onboarding as done without finishing the steps"""
    if not await tracker.skip():
        raise_for_failure(tracker)
    return OnboardingStatus(
        completed=tracker.completed, skipped=tracker.skipped, show_overlay=tracker.show_overlay
    )
