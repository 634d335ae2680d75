"""
API dependencies for dependency injection
"""

from typing import Generator, Optional
import logging

from fastapi import Depends, Header

from adapters.document_store import DocumentStore, InMemoryDocumentStore
from adapters.mongo_store import MongoDocumentStore
from adapters.preference_store import (
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
    PreferenceStore,
)
from app.config import StoreBackend, settings
from app.exceptions import UnauthorizedError
from domain.enums import LoadState
from services import BudgetView, DashboardView, IngredientsView, MealsView, OnboardingTracker
from services.base_view import BaseView

logger = logging.getLogger("unimeal.dependencies")

_store: Optional[DocumentStore] = None
_preferences: Optional[PreferenceStore] = None


def init_store() -> DocumentStore:
    """Create the configured document store once per process."""
    global _store
    if _store is not None:
        return _store
    if settings.store_backend == StoreBackend.MONGO:
        _store = MongoDocumentStore.connect(
            settings.mongo_uri, settings.mongo_db_name, settings.mongo_collection
        )
    else:
        _store = InMemoryDocumentStore()
    logger.info("Document store ready (backend: %s)", settings.store_backend.value)
    return _store


def close_store() -> None:
    global _store
    close = getattr(_store, "close", None)
    if close is not None:
        close()
    _store = None


def get_store() -> DocumentStore:
    """
    Document store dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(store: DocumentStore = Depends(get_store)):
            ...
    """
    return init_store()


def get_preferences() -> PreferenceStore:
    global _preferences
    if _preferences is None:
        if settings.preferences_path:
            _preferences = JsonFilePreferenceStore(settings.preferences_path)
        else:
            _preferences = InMemoryPreferenceStore()
    return _preferences


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Signed-in identity from the X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedError()
    return x_user_id.strip()


def get_user_preferences(
    preferences: PreferenceStore = Depends(get_preferences),
    user_id: str = Depends(get_current_user),
) -> PreferenceStore:
    """Preferences of the signed-in user."""
    return preferences.scoped(user_id)


def raise_for_failure(view: BaseView) -> None:
    """Surface a failed load or action as the matching HTTP error."""
    if view.failure is not None:
        raise view.failure


def _session(view: BaseView, user_id: str) -> Generator:
    view.open(user_id)
    try:
        if view.state == LoadState.ERROR:
            raise_for_failure(view)
        yield view
    finally:
        view.close()


def get_budget_view(
    store: DocumentStore = Depends(get_store), user_id: str = Depends(get_current_user)
) -> Generator[BudgetView, None, None]:
    yield from _session(BudgetView(store), user_id)


def get_ingredients_view(
    store: DocumentStore = Depends(get_store), user_id: str = Depends(get_current_user)
) -> Generator[IngredientsView, None, None]:
    yield from _session(IngredientsView(store), user_id)


def get_meals_view(
    store: DocumentStore = Depends(get_store),
    preferences: PreferenceStore = Depends(get_user_preferences),
    user_id: str = Depends(get_current_user),
) -> Generator[MealsView, None, None]:
    yield from _session(MealsView(store, preferences), user_id)


def get_onboarding_tracker(
    store: DocumentStore = Depends(get_store), user_id: str = Depends(get_current_user)
) -> Generator[OnboardingTracker, None, None]:
    yield from _session(OnboardingTracker(store), user_id)


def get_dashboard_view(
    store: DocumentStore = Depends(get_store), user_id: str = Depends(get_current_user)
) -> Generator[DashboardView, None, None]:
    yield from _session(DashboardView(store), user_id)
