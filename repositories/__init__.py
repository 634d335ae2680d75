"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.ingredient_repository import IngredientRepository
from repositories.meal_repository import MealRepository
from repositories.meal_template_repository import MealTemplateRepository
from repositories.budget_repository import BudgetRepository
from repositories.onboarding_repository import OnboardingRepository

__all__ = [
    "BaseRepository",
    "IngredientRepository",
    "MealRepository",
    "MealTemplateRepository",
    "BudgetRepository",
    "OnboardingRepository",
]
