"""
Dashboard view model: budget overview, expiring-soon items with use-it-up
ideas, upcoming meals, quick budget entry and the onboarding checklist.
"""

from datetime import date
from typing import Callable, List, Optional, Tuple

from adapters.document_store import DocumentStore
from app.config import settings
from app.exceptions import ServiceValidationError
from domain.calculators import (
    budget_status,
    format_currency,
    is_budget_low,
    remaining_budget,
    sort_by_weekday,
    total_spent,
)
from domain.schemas import Budget, DashboardSummary, Ingredient, Meal
from repositories import BudgetRepository, IngredientRepository, MealRepository
from services.base_view import BaseView
from services.budget_view import limit_input_text
from services.meals_view import to_item
from services.onboarding_tracker import OnboardingTracker
from services.suggestion_service import UseItUpService
from services.validators import validate_monthly_limit


class DashboardView(BaseView):
    not_signed_in_message = "You must be signed in to view your dashboard."

    def __init__(
        self,
        store: DocumentStore,
        today: Optional[Callable[[], date]] = None,
        low_ratio: Optional[float] = None,
    ):
        super().__init__(store, "unimeal.dashboard")
        self.low_ratio = low_ratio
        self.monthly_limit: Optional[float] = None
        self.limit_input = ""
        self.budget_exists = False
        self.ingredients: List[Ingredient] = []
        self.meals: List[Meal] = []
        self.is_saving_budget = False
        self.budget_error: Optional[str] = None
        self.onboarding = OnboardingTracker(store)
        self._today = today or date.today
        self._budget_repo: Optional[BudgetRepository] = None

    def sources(self) -> Tuple[str, ...]:
        return ("budget", "ingredients", "meals")

    def open(self, identity: Optional[str]) -> "DashboardView":
        super().open(identity)
        self.onboarding.open(identity)
        return self

    def close(self) -> None:
        super().close()
        self.onboarding.close()

    def _subscribe(self, identity: str) -> None:
        self._budget_repo = BudgetRepository(self.store, identity)
        self._track(self._budget_repo.subscribe(self._on_budget, self._source_error("your budget")))
        self._track(
            IngredientRepository(self.store, identity).subscribe(
                self._on_ingredients, self._source_error("ingredients")
            )
        )
        self._track(
            MealRepository(self.store, identity).subscribe(self._on_meals, self._source_error("meals"))
        )

    def _on_budget(self, budget: Optional[Budget]) -> None:
        self.budget_exists = budget is not None
        self.monthly_limit = budget.monthly_limit if budget is not None else None
        self.limit_input = limit_input_text(self.monthly_limit) if self.monthly_limit else ""
        self._delivered("budget")

    def _on_ingredients(self, ingredients: List[Ingredient]) -> None:
        self.ingredients = ingredients
        self._delivered("ingredients")

    def _on_meals(self, meals: List[Meal]) -> None:
        self.meals = meals
        self._delivered("meals")

    # ------------------ Derived values ------------------
    @property
    def spent(self) -> float:
        return total_spent(self.ingredients)

    @property
    def remaining(self) -> Optional[float]:
        return remaining_budget(self.monthly_limit, self.spent)

    @property
    def budget_warning(self) -> bool:
        return is_budget_low(self.remaining, self.monthly_limit, self.low_ratio)

    @property
    def expiring_soon(self) -> List[Ingredient]:
        return UseItUpService.expiring_items(self.ingredients, self._today())

    @property
    def use_it_up_suggestions(self) -> List[str]:
        return UseItUpService.suggest_for(self.ingredients, self._today())

    @property
    def upcoming_meals(self) -> List[Meal]:
        return sort_by_weekday(self.meals)[: settings.upcoming_meals_limit]

    def onboarding_flags(self) -> Tuple[bool, bool, bool]:
        return self.budget_exists, len(self.meals) > 0, len(self.ingredients) > 0

    async def refresh_onboarding(self) -> bool:
        """Feed the current snapshots to the onboarding tracker."""
        return await self.onboarding.evaluate(*self.onboarding_flags())

    def summary(self) -> DashboardSummary:
        remaining = self.remaining
        expiring = self.expiring_soon
        return DashboardSummary(
            state=self.state,
            monthly_limit=self.monthly_limit,
            spent=self.spent,
            remaining=remaining,
            remaining_display=format_currency(remaining),
            budget_warning=self.budget_warning,
            budget_status=budget_status(remaining, self.monthly_limit, self.low_ratio),
            expiring_soon_count=len(expiring),
            expiring_soon=expiring[: settings.dashboard_expiring_preview],
            use_it_up_suggestions=self.use_it_up_suggestions,
            upcoming_meals=[to_item(m) for m in self.upcoming_meals],
            onboarding=self.onboarding.status(*self.onboarding_flags()),
            budget_error=self.budget_error,
            error=self.error,
        )

    # ------------------ Quick budget ------------------
    async def save_budget(self, raw_input) -> bool:
        self.budget_error = None
        if not self.identity:
            self.budget_error = "Sign in to set your budget."
            self._changed()
            return False
        try:
            value = validate_monthly_limit(raw_input, message="Enter a number greater than 0.")
        except ServiceValidationError as e:
            self.budget_error = e.message
            self.failure = e
            self._changed()
            return False

        self.is_saving_budget = True
        try:
            ok, _ = await self._write(
                self._budget_repo.set_limit(value), "Could not save. Try again.", user_id=self.identity
            )
        finally:
            self.is_saving_budget = False
        if not ok:
            self.budget_error = self.error
            return False
        self.monthly_limit = value
        self.limit_input = limit_input_text(value)
        self.log_info("Quick budget saved", user_id=self.identity, monthly_limit=value)
        self._changed()
        return True
