"""Schemas for the dashboard overview"""

from pydantic import BaseModel, Field
from typing import List, Optional

from domain.enums import LoadState
from domain.schemas.budget_schemas import BudgetStatus
from domain.schemas.ingredient_schemas import Ingredient
from domain.schemas.meal_schemas import MealItemResponse
from domain.schemas.onboarding_schemas import OnboardingStatus


class DashboardSummary(BaseModel):
    """Everything the dashboard renders for one user"""

    state: LoadState
    monthly_limit: Optional[float] = None
    spent: float = 0
    remaining: Optional[float] = None
    remaining_display: str = "-"
    budget_warning: bool = False
    budget_status: Optional[BudgetStatus] = None
    expiring_soon_count: int = 0
    expiring_soon: List[Ingredient] = Field(
        default_factory=list, description="First few expiring ingredients"
    )
    use_it_up_suggestions: List[str] = Field(default_factory=list)
    upcoming_meals: List[MealItemResponse] = Field(default_factory=list)
    onboarding: Optional[OnboardingStatus] = None
    budget_error: Optional[str] = None
    error: Optional[str] = None


class SuggestionResponse(BaseModel):
    names: List[str]
    suggestions: List[str]
