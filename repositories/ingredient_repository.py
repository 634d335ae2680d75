"""
Ingredient Repository - users/{uid}/ingredients
"""

from typing import Callable, List, Optional

from adapters.document_store import SERVER_TIMESTAMP, DocumentStore, ErrorCallback, Unsubscribe
from domain.mappers import DocumentMapper
from domain.schemas import Ingredient
from repositories.base import BaseRepository


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for a user's ingredient records"""

    def __init__(self, store: DocumentStore, user_id: str):
        super().__init__(store, user_id, "ingredients")

    def subscribe(
        self,
        on_next: Callable[[List[Ingredient]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        return self._subscribe_collection(DocumentMapper.to_ingredient, on_next, on_error)

    async def add(self, name: str, qty: float, unit: str, price: float, expiry_date: str) -> str:
        """Create an ingredient; records are never updated in place"""
        return await self._create(
            {
                "name": name,
                "qty": qty,
                "unit": unit,
                "price": price,
                "expiryDate": expiry_date,
                "createdAt": SERVER_TIMESTAMP,
            }
        )
