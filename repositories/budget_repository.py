"""
Budget Repository - the single users/{uid}/budget/current document
"""

from typing import Callable, Optional

from adapters.document_store import SERVER_TIMESTAMP, DocumentStore, ErrorCallback, Unsubscribe
from domain.mappers import DocumentMapper
from domain.schemas import Budget
from repositories.base import BaseRepository


class BudgetRepository(BaseRepository[Budget]):
    def __init__(self, store: DocumentStore, user_id: str):
        super().__init__(store, user_id, "budget/current")

    def subscribe(
        self,
        on_next: Callable[[Optional[Budget]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        """on_next receives None while no budget has been saved"""
        return self._subscribe_document(DocumentMapper.to_budget, on_next, on_error)

    async def set_limit(self, monthly_limit: float) -> None:
        """Upsert the monthly limit; never deleted"""
        await self._merge({"monthlyLimit": monthly_limit, "updatedAt": SERVER_TIMESTAMP})
