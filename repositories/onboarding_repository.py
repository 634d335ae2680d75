"""
Onboarding Repository - users/{uid}/preferences/onboarding
"""

from typing import Callable, Optional

from adapters.document_store import DocumentStore, ErrorCallback, Unsubscribe
from domain.mappers import DocumentMapper
from domain.schemas import OnboardingState
from repositories.base import BaseRepository


class OnboardingRepository(BaseRepository[OnboardingState]):
    def __init__(self, store: DocumentStore, user_id: str):
        super().__init__(store, user_id, "preferences/onboarding")

    def subscribe(
        self,
        on_next: Callable[[OnboardingState], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        return self._subscribe_document(DocumentMapper.to_onboarding, on_next, on_error)

    async def mark_completed(self) -> None:
        await self._merge({"completed": True})
