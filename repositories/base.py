"""
Base repository for user-scoped data access.
This follows the Repository pattern to separate business logic from the store:
every path is rooted at users/{user_id}.
"""

from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar
from abc import ABC

from adapters.document_store import (
    DocumentSnapshot,
    DocumentStore,
    ErrorCallback,
    Snapshot,
    Unsubscribe,
    join_path,
)
from app.exceptions import UnauthorizedError

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing subscribe / create / delete / upsert helpers.
    All repositories should inherit from this class.
    """

    def __init__(self, store: DocumentStore, user_id: str, path: str):
        if not user_id:
            raise UnauthorizedError("A signed-in user is required to access data")
        self.store = store
        self.user_id = user_id
        self.path = join_path("users", user_id, path)

    def doc_path(self, doc_id: str) -> str:
        return join_path(self.path, doc_id)

    def _subscribe_collection(
        self,
        mapper: Callable[[Snapshot], ModelType],
        on_next: Callable[[List[ModelType]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        """Map every collection snapshot to models before handing it on"""
        return self.store.subscribe(
            self.path, lambda snaps: on_next([mapper(s) for s in snaps]), on_error
        )

    def _subscribe_document(
        self,
        mapper: Callable[[DocumentSnapshot], Any],
        on_next: Callable[[Any], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        return self.store.subscribe(self.path, lambda snap: on_next(mapper(snap)), on_error)

    async def _create(self, data: Dict[str, Any]) -> str:
        """Create a document, returns its server-assigned id"""
        return await self.store.add(self.path, data)

    async def delete(self, doc_id: str) -> None:
        """Delete document by ID"""
        await self.store.delete(self.doc_path(doc_id))

    async def _merge(self, data: Dict[str, Any]) -> None:
        """Upsert-with-merge on this repository's document path"""
        await self.store.set(self.path, data, merge=True)
