"""
Meal Template Repository - users/{uid}/mealTemplates
"""

from typing import Callable, List, Optional

from adapters.document_store import SERVER_TIMESTAMP, DocumentStore, ErrorCallback, Unsubscribe
from domain.mappers import DocumentMapper
from domain.schemas import MealTemplate
from repositories.base import BaseRepository


class MealTemplateRepository(BaseRepository[MealTemplate]):
    """Repository for reusable meal templates"""

    def __init__(self, store: DocumentStore, user_id: str):
        super().__init__(store, user_id, "mealTemplates")

    def subscribe(
        self,
        on_next: Callable[[List[MealTemplate]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        return self._subscribe_collection(DocumentMapper.to_template, on_next, on_error)

    async def add(self, name: str, default_weekday: str = "") -> str:
        return await self._create(
            {"name": name, "defaultWeekday": default_weekday, "createdAt": SERVER_TIMESTAMP}
        )
