"""Services package - Business logic layer"""

from services.budget_view import BudgetView
from services.dashboard_view import DashboardView
from services.ingredients_view import IngredientsView
from services.meals_view import MealsView
from services.onboarding_tracker import OnboardingTracker
from services.suggestion_service import UseItUpService, get_use_it_up_suggestions
from services.export_service import export_filename, render_week_export

__all__ = [
    "BudgetView",
    "DashboardView",
    "IngredientsView",
    "MealsView",
    "OnboardingTracker",
    "UseItUpService",
    "get_use_it_up_suggestions",
    "export_filename",
    "render_week_export",
]
