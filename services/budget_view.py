"""
Budget page view model.

Combines the budget document with the ingredients collection: spent is the
sum of ingredient prices, remaining is limit - spent.
"""

import math
from typing import List, Optional, Tuple

from adapters.document_store import DocumentStore
from app.config import settings
from app.exceptions import ServiceValidationError
from domain.calculators import budget_status, format_currency, remaining_budget, total_spent
from domain.schemas import Budget, BudgetStatus, BudgetSummary, Ingredient
from repositories import BudgetRepository, IngredientRepository
from services.base_view import BaseView
from services.validators import validate_monthly_limit

BUDGET_LOAD_ERROR = "Failed to load your budget. Please check your connection and try again."
COSTS_LOAD_ERROR = "Failed to load ingredient costs. Your budget summary may be incomplete."
SAVE_FAILED = "Could not save your budget. Please try again."


def limit_input_text(limit: Optional[float]) -> str:
    """Text shown in the limit input for a stored limit"""
    if limit is None:
        return ""
    if math.isfinite(limit) and limit == int(limit):
        return str(int(limit))
    return str(limit)


class BudgetView(BaseView):
    not_signed_in_message = "You must be signed in to view your budget."

    def __init__(self, store: DocumentStore, low_ratio: Optional[float] = None):
        super().__init__(store, "unimeal.budget")
        self.low_ratio = low_ratio
        self.monthly_limit: Optional[float] = None
        self.limit_input = ""
        self.ingredients: List[Ingredient] = []
        self.is_saving = False
        self._budget_repo: Optional[BudgetRepository] = None

    def sources(self) -> Tuple[str, ...]:
        return ("budget", "ingredients")

    def _subscribe(self, identity: str) -> None:
        self._budget_repo = BudgetRepository(self.store, identity)
        ingredient_repo = IngredientRepository(self.store, identity)
        self._track(
            self._budget_repo.subscribe(
                self._on_budget, self._source_error("your budget", message=BUDGET_LOAD_ERROR)
            )
        )
        self._track(
            ingredient_repo.subscribe(
                self._on_ingredients,
                self._source_error("ingredient costs", message=COSTS_LOAD_ERROR),
            )
        )

    def _on_budget(self, budget: Optional[Budget]) -> None:
        self.monthly_limit = budget.monthly_limit if budget is not None else None
        self.limit_input = limit_input_text(self.monthly_limit)
        self._delivered("budget")

    def _on_ingredients(self, ingredients: List[Ingredient]) -> None:
        self.ingredients = ingredients
        self._delivered("ingredients")

    # ------------------ Derived values ------------------
    @property
    def spent(self) -> float:
        return total_spent(self.ingredients)

    @property
    def remaining(self) -> Optional[float]:
        return remaining_budget(self.monthly_limit, self.spent)

    @property
    def status(self) -> Optional[BudgetStatus]:
        return budget_status(self.remaining, self.monthly_limit, self.low_ratio)

    def summary(self) -> BudgetSummary:
        remaining = self.remaining
        return BudgetSummary(
            state=self.state,
            monthly_limit=self.monthly_limit,
            limit_input=self.limit_input,
            spent=self.spent,
            remaining=remaining,
            spent_display=format_currency(self.spent),
            remaining_display=format_currency(remaining),
            limit_display=format_currency(self.monthly_limit),
            status=self.status,
            currency=settings.currency_code,
            error=self.error,
        )

    # ------------------ Actions ------------------
    async def save_limit(self, raw_input) -> bool:
        """
        Validate and upsert the monthly limit.

        The local limit only changes once the write has resolved; a failed
        write leaves the previous value in place.
        """
        if not self._require_identity("You must be signed in to update your budget."):
            return False
        try:
            value = validate_monthly_limit(raw_input)
        except ServiceValidationError as e:
            self._reject(e)
            return False

        self.is_saving = True
        self._changed()
        try:
            ok, _ = await self._write(
                self._budget_repo.set_limit(value), SAVE_FAILED, user_id=self.identity
            )
        finally:
            self.is_saving = False
        if ok:
            self.monthly_limit = value
            self.limit_input = limit_input_text(value)
            self.log_info("Monthly limit saved", user_id=self.identity, monthly_limit=value)
            self._changed()
        return ok
