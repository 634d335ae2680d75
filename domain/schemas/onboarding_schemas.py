"""Schemas for the first-run onboarding checklist"""

from pydantic import BaseModel, Field
from typing import List, Optional


class OnboardingState(BaseModel):
    completed: bool = False


class OnboardingStep(BaseModel):
    key: str
    label: str
    done: bool
    href: str = Field(..., description="Page where the step is completed")


class OnboardingStatus(BaseModel):
    completed: Optional[bool] = None
    skipped: bool = False
    show_overlay: bool = False
    steps: List[OnboardingStep] = Field(default_factory=list)
