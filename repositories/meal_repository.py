"""
Meal Repository - users/{uid}/meals
"""

from typing import Callable, List, Optional

from adapters.document_store import SERVER_TIMESTAMP, DocumentStore, ErrorCallback, Unsubscribe
from domain.mappers import DocumentMapper
from domain.schemas import Meal
from repositories.base import BaseRepository


class MealRepository(BaseRepository[Meal]):
    """Repository for planned meals"""

    def __init__(self, store: DocumentStore, user_id: str):
        super().__init__(store, user_id, "meals")

    def subscribe(
        self,
        on_next: Callable[[List[Meal]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        return self._subscribe_collection(DocumentMapper.to_meal, on_next, on_error)

    async def add(self, name: str, weekday: str) -> str:
        return await self._create({"name": name, "weekday": weekday, "createdAt": SERVER_TIMESTAMP})
