"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.ingredient_schemas import (
    Ingredient,
    IngredientForm,
    IngredientItemResponse,
    IngredientListResponse,
    IngredientCreatedResponse,
)
from domain.schemas.meal_schemas import (
    Meal,
    MealTemplate,
    MealForm,
    MealTemplateForm,
    MealItemResponse,
    MealListResponse,
    MealTemplateListResponse,
    MealCreatedResponse,
    ViewModeUpdate,
)
from domain.schemas.budget_schemas import (
    Budget,
    BudgetUpdate,
    BudgetStatus,
    BudgetSummary,
)
from domain.schemas.onboarding_schemas import (
    OnboardingState,
    OnboardingStep,
    OnboardingStatus,
)
from domain.schemas.dashboard_schemas import DashboardSummary, SuggestionResponse
from domain.schemas.preference_schemas import ThemeUpdate

__all__ = [
    # Ingredient schemas
    "Ingredient",
    "IngredientForm",
    "IngredientItemResponse",
    "IngredientListResponse",
    "IngredientCreatedResponse",
    # Meal schemas
    "Meal",
    "MealTemplate",
    "MealForm",
    "MealTemplateForm",
    "MealItemResponse",
    "MealListResponse",
    "MealTemplateListResponse",
    "MealCreatedResponse",
    "ViewModeUpdate",
    # Budget schemas
    "Budget",
    "BudgetUpdate",
    "BudgetStatus",
    "BudgetSummary",
    # Onboarding schemas
    "OnboardingState",
    "OnboardingStep",
    "OnboardingStatus",
    # Dashboard schemas
    "DashboardSummary",
    "SuggestionResponse",
    # Preference schemas
    "ThemeUpdate",
]
