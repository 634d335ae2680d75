"""
Ingredients page view model: live list, search and expiry filters, add and
confirmed delete.
"""

from datetime import date
from typing import Callable, List, Optional, Set, Tuple

from adapters.document_store import DocumentStore
from app.exceptions import ServiceValidationError
from domain.calculators import is_expiring_soon, sort_by_expiry_then_name
from domain.schemas import (
    Ingredient,
    IngredientForm,
    IngredientItemResponse,
    IngredientListResponse,
)
from repositories import IngredientRepository
from services.base_view import BaseView, ConfirmCallback
from services.validators import validate_ingredient_form

ADD_FAILED = "Could not add ingredient. Please try again."
DELETE_FAILED = "Could not delete ingredient. Please try again."
DELETE_PROMPT = "Are you sure you want to delete this ingredient?"


class IngredientsView(BaseView):
    not_signed_in_message = "You must be signed in to view ingredients."

    def __init__(
        self,
        store: DocumentStore,
        today: Optional[Callable[[], date]] = None,
        window_days: Optional[int] = None,
    ):
        super().__init__(store, "unimeal.ingredients")
        self.ingredients: List[Ingredient] = []
        self.search_query = ""
        self.expiring_soon_only = False
        self.is_adding = False
        self.deleting: Set[str] = set()
        self.window_days = window_days
        self._today = today or date.today
        self._repo: Optional[IngredientRepository] = None

    def sources(self) -> Tuple[str, ...]:
        return ("ingredients",)

    def _subscribe(self, identity: str) -> None:
        self._repo = IngredientRepository(self.store, identity)
        self._track(self._repo.subscribe(self._on_ingredients, self._source_error("ingredients")))

    def _on_ingredients(self, ingredients: List[Ingredient]) -> None:
        self.ingredients = sort_by_expiry_then_name(ingredients)
        self._delivered("ingredients")

    # ------------------ Filters ------------------
    def is_expiring(self, ingredient: Ingredient) -> bool:
        return is_expiring_soon(ingredient.expiry_date, self._today(), self.window_days)

    def set_search(self, query: str) -> None:
        self.search_query = query or ""
        self._changed()

    def set_expiring_soon_only(self, enabled: bool) -> None:
        self.expiring_soon_only = bool(enabled)
        self._changed()

    @property
    def visible_ingredients(self) -> List[Ingredient]:
        """Search (case-insensitive, trimmed) AND expiring-soon filter"""
        query = self.search_query.strip().lower()
        visible = []
        for ingredient in self.ingredients:
            if query and query not in ingredient.name.lower():
                continue
            if self.expiring_soon_only and not self.is_expiring(ingredient):
                continue
            visible.append(ingredient)
        return visible

    @property
    def expiring_soon_count(self) -> int:
        return sum(1 for i in self.ingredients if self.is_expiring(i))

    def min_expiry_date(self) -> str:
        """Suggested earliest expiry for the form; past dates are still accepted."""
        return self._today().isoformat()

    def listing(self) -> IngredientListResponse:
        items = [
            IngredientItemResponse(**i.model_dump(), expiring_soon=self.is_expiring(i))
            for i in self.visible_ingredients
        ]
        return IngredientListResponse(
            items=items,
            total=len(self.ingredients),
            expiring_soon_count=self.expiring_soon_count,
            search_query=self.search_query,
            expiring_soon_only=self.expiring_soon_only,
            min_expiry_date=self.min_expiry_date(),
            error=self.error,
        )

    # ------------------ Actions ------------------
    async def add_ingredient(self, form: IngredientForm) -> Optional[str]:
        """Validate the form and create the ingredient; returns the new id."""
        if not self._require_identity("You must be signed in to add ingredients."):
            return None
        try:
            fields = validate_ingredient_form(form)
        except ServiceValidationError as e:
            self._reject(e)
            return None

        self.is_adding = True
        self._changed()
        try:
            ok, doc_id = await self._write(self._repo.add(**fields), ADD_FAILED, user_id=self.identity)
        finally:
            self.is_adding = False
        if ok:
            self.log_info("Ingredient added", user_id=self.identity, ingredient_id=doc_id)
        return doc_id

    async def delete_ingredient(self, ingredient_id: str, confirm: ConfirmCallback) -> bool:
        if not self._require_identity("You must be signed in to delete ingredients."):
            return False
        return await self._confirmed_delete(
            self.deleting, ingredient_id, confirm, DELETE_PROMPT, self._repo.delete, DELETE_FAILED
        )
