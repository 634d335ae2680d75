"""
First-run onboarding checklist.

The completed flag lives at users/{uid}/preferences/onboarding. It is written
once, either when all three steps are done or when the user skips.
"""

from typing import List, Optional, Tuple

from adapters.document_store import DocumentStore
from app.exceptions import StoreError
from domain.schemas import OnboardingState, OnboardingStatus, OnboardingStep
from repositories import OnboardingRepository
from services.base_view import BaseView

STEPS = (
    ("budget", "Set your monthly budget", "/budget"),
    ("meal", "Add your first meal", "/meals"),
    ("ingredient", "Add an ingredient", "/ingredients"),
)


class OnboardingTracker(BaseView):
    not_signed_in_message = "You must be signed in."

    def __init__(self, store: DocumentStore):
        super().__init__(store, "unimeal.onboarding")
        # None until the first snapshot arrives
        self.completed: Optional[bool] = None
        self.skipped = False
        self.saving = False
        self._in_flight = False
        self._repo: Optional[OnboardingRepository] = None

    def sources(self) -> Tuple[str, ...]:
        return ("onboarding",)

    def open(self, identity: Optional[str]) -> "OnboardingTracker":
        self.completed = None
        self.skipped = False
        self._in_flight = False
        self._repo = None
        super().open(identity)
        return self

    def _subscribe(self, identity: str) -> None:
        self._repo = OnboardingRepository(self.store, identity)
        self._track(self._repo.subscribe(self._on_state, self._on_error))

    def _on_state(self, state: OnboardingState) -> None:
        self.completed = state.completed
        self._delivered("onboarding")

    def _on_error(self, exc: Exception) -> None:
        self.logger.error("Onboarding listener error: %s", exc)
        self.completed = False
        self._delivered("onboarding")

    @property
    def show_overlay(self) -> bool:
        return self.completed is False and not self.skipped

    @staticmethod
    def steps(has_budget: bool, has_meals: bool, has_ingredients: bool) -> List[OnboardingStep]:
        done = (has_budget, has_meals, has_ingredients)
        return [
            OnboardingStep(key=key, label=label, done=bool(flag), href=href)
            for (key, label, href), flag in zip(STEPS, done)
        ]

    def status(self, has_budget: bool, has_meals: bool, has_ingredients: bool) -> OnboardingStatus:
        return OnboardingStatus(
            completed=self.completed,
            skipped=self.skipped,
            show_overlay=self.show_overlay,
            steps=self.steps(has_budget, has_meals, has_ingredients),
        )

    async def _mark_completed(self) -> None:
        self._in_flight = True
        try:
            await self._repo.mark_completed()
        finally:
            self._in_flight = False

    async def evaluate(self, has_budget: bool, has_meals: bool, has_ingredients: bool) -> bool:
        """
        Auto-complete once every step is done.

        Returns True when this call wrote the flag. Repeated calls while a
        write is in flight or after completion do nothing.
        """
        if not (has_budget and has_meals and has_ingredients):
            return False
        if self.completed is True or self.skipped or self._in_flight or self._repo is None:
            return False
        try:
            await self._mark_completed()
        except StoreError:
            self.logger.exception("Onboarding auto-complete failed")
            return False
        self.completed = True
        self.log_info("Onboarding completed", user_id=self.identity)
        self._changed()
        return True

    async def skip(self) -> bool:
        """Mark onboarding done without finishing the steps."""
        if self._repo is None:
            return False
        self.saving = True
        try:
            await self._mark_completed()
        except StoreError as e:
            self.logger.exception("Onboarding skip failed")
            self.failure = e
            return False
        finally:
            self.saving = False
        self.skipped = True
        self.log_info("Onboarding skipped", user_id=self.identity)
        self._changed()
        return True
