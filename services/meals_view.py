"""
Meals page view model.

Live meals and templates, weekday filter, list/week layout (persisted as a
local preference), template instantiation and plain-text export.
"""

import time
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from adapters.document_store import DocumentStore
from adapters.preference_store import (
    InMemoryPreferenceStore,
    PreferenceStore,
    get_view_mode,
    set_view_mode,
)
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from domain.calculators import sort_by_created_desc, weekday_label
from domain.enums import ViewMode, Weekday
from domain.schemas import (
    Meal,
    MealItemResponse,
    MealListResponse,
    MealTemplate,
    MealTemplateListResponse,
)
from repositories import MealRepository, MealTemplateRepository
from services.base_view import BaseView, ConfirmCallback
from services.export_service import export_filename, render_week_export
from services.validators import validate_meal_form, validate_template_form, validate_weekday

ADD_FAILED = "Could not add meal. Please try again."
DELETE_FAILED = "Could not delete meal. Please try again."
DELETE_PROMPT = "Are you sure you want to delete this meal?"
TEMPLATE_SAVE_FAILED = "Could not save template. Please try again."
TEMPLATE_DELETE_FAILED = "Could not delete template. Please try again."
COPY_FAILED = "Could not copy to clipboard."


def to_item(meal: Meal) -> MealItemResponse:
    return MealItemResponse(**meal.model_dump(), weekday_label=weekday_label(meal.weekday))


class MealsView(BaseView):
    not_signed_in_message = "You must be signed in to view meals."

    def __init__(
        self,
        store: DocumentStore,
        preferences: Optional[PreferenceStore] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        super().__init__(store, "unimeal.meals")
        self.preferences = preferences or InMemoryPreferenceStore()
        self.meals: List[Meal] = []
        self.templates: List[MealTemplate] = []
        self.weekday_filter: Optional[str] = None
        self.is_adding = False
        self.deleting = set()
        self.copied_until = 0.0
        self._clock = clock or time.monotonic
        self._meals_repo: Optional[MealRepository] = None
        self._templates_repo: Optional[MealTemplateRepository] = None

    def sources(self) -> Tuple[str, ...]:
        return ("meals", "templates")

    def _subscribe(self, identity: str) -> None:
        self._meals_repo = MealRepository(self.store, identity)
        self._templates_repo = MealTemplateRepository(self.store, identity)
        self._track(self._meals_repo.subscribe(self._on_meals, self._source_error("meals")))
        self._track(
            self._templates_repo.subscribe(self._on_templates, self._source_error("meal templates"))
        )

    def _on_meals(self, meals: List[Meal]) -> None:
        self.meals = sort_by_created_desc(meals)
        self._delivered("meals")

    def _on_templates(self, templates: List[MealTemplate]) -> None:
        self.templates = sort_by_created_desc(templates)
        self._delivered("templates")

    # ------------------ Filters and layout ------------------
    def set_weekday_filter(self, weekday: Optional[str]) -> None:
        """None or "" shows every day; anything else must be a weekday."""
        self.weekday_filter = validate_weekday(weekday, required=False) or None
        self._changed()

    @property
    def visible_meals(self) -> List[Meal]:
        if not self.weekday_filter:
            return list(self.meals)
        return [m for m in self.meals if m.weekday == self.weekday_filter]

    def meals_by_weekday(self) -> Dict[str, List[Meal]]:
        """Seven ordered columns, Monday first; meals keep list order."""
        week: Dict[str, List[Meal]] = {day.value: [] for day in Weekday}
        for meal in self.visible_meals:
            if meal.weekday in week:
                week[meal.weekday].append(meal)
        return week

    @property
    def view_mode(self) -> ViewMode:
        return get_view_mode(self.preferences)

    def set_view_mode(self, mode: ViewMode) -> None:
        set_view_mode(self.preferences, mode)
        self._changed()

    def listing(self) -> MealListResponse:
        week = {
            Weekday(day).label: [to_item(m) for m in meals]
            for day, meals in self.meals_by_weekday().items()
        }
        return MealListResponse(
            items=[to_item(m) for m in self.visible_meals],
            total=len(self.meals),
            weekday_filter=self.weekday_filter,
            view_mode=self.view_mode,
            week=week,
            error=self.error,
        )

    def template_listing(self) -> MealTemplateListResponse:
        return MealTemplateListResponse(items=list(self.templates), total=len(self.templates))

    # ------------------ Meal actions ------------------
    async def add_meal(self, name, weekday) -> Optional[str]:
        if not self._require_identity("You must be signed in to add meals."):
            return None
        try:
            meal_name, meal_weekday = validate_meal_form(name, weekday)
        except ServiceValidationError as e:
            self._reject(e)
            return None
        return await self._create_meal(meal_name, meal_weekday)

    async def _create_meal(self, name: str, weekday: str) -> Optional[str]:
        self.is_adding = True
        self._changed()
        try:
            ok, doc_id = await self._write(
                self._meals_repo.add(name, weekday), ADD_FAILED, user_id=self.identity
            )
        finally:
            self.is_adding = False
        if ok:
            self.log_info("Meal added", user_id=self.identity, meal_id=doc_id, weekday=weekday)
        return doc_id

    async def delete_meal(self, meal_id: str, confirm: ConfirmCallback) -> bool:
        if not self._require_identity("You must be signed in to delete meals."):
            return False
        return await self._confirmed_delete(
            self.deleting, meal_id, confirm, DELETE_PROMPT, self._meals_repo.delete, DELETE_FAILED
        )

    # ------------------ Templates ------------------
    async def save_as_template(self, name, weekday) -> Optional[str]:
        """Capture the current form (name, optional weekday) as a template."""
        if not self._require_identity("You must be signed in to save templates."):
            return None
        try:
            template_name, default_weekday = validate_template_form(name, weekday)
        except ServiceValidationError as e:
            self._reject(e)
            return None
        ok, doc_id = await self._write(
            self._templates_repo.add(template_name, default_weekday),
            TEMPLATE_SAVE_FAILED,
            user_id=self.identity,
        )
        if ok:
            self.log_info("Template saved", user_id=self.identity, template_id=doc_id)
        return doc_id

    def find_template(self, template_id: str) -> Optional[MealTemplate]:
        return next((t for t in self.templates if t.id == template_id), None)

    async def add_from_template(self, template_id: str) -> Optional[str]:
        """Create a meal from a template; no default weekday means the fallback day."""
        if not self._require_identity("You must be signed in to add meals."):
            return None
        template = self.find_template(template_id)
        if template is None:
            self.error = "Template not found."
            self.failure = NotFoundError(f"Template {template_id} not found")
            self._changed()
            return None
        weekday = template.default_weekday
        if weekday not in {day.value for day in Weekday}:
            weekday = settings.fallback_weekday
        return await self._create_meal(template.name, weekday)

    async def delete_template(self, template_id: str) -> bool:
        if not self._require_identity("You must be signed in to delete templates."):
            return False
        ok, _ = await self._write(
            self._templates_repo.delete(template_id),
            TEMPLATE_DELETE_FAILED,
            template_id=template_id,
        )
        return ok

    # ------------------ Export ------------------
    def export_text(self) -> str:
        return render_week_export(self.meals, self.weekday_filter)

    @property
    def copied(self) -> bool:
        return self._clock() < self.copied_until

    async def copy_export(self, clipboard) -> bool:
        """Write the export to clipboard (async write_text) and flag it as copied."""
        try:
            await clipboard.write_text(self.export_text())
        except Exception:
            self.logger.exception("Clipboard write failed")
            self.error = COPY_FAILED
            self._changed()
            return False
        self.copied_until = self._clock() + settings.copied_flag_seconds
        self._changed()
        return True

    def download_export(self, today: Optional[date] = None) -> Tuple[str, str]:
        """(filename, text) for the export download."""
        return export_filename(today), self.export_text()
