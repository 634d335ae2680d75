"""MongoDB-backed document store.

Every document lives in one collection keyed by its full path:

    {"_id": "users/u1/ingredients/ab12", "parent": "users/u1/ingredients", "data": {...}}

pymongo is blocking, so each write and the snapshot re-reads that follow it run
in a worker thread; the listeners themselves are called on the event loop.
Only subscribers in this process are notified; writes made elsewhere show up
on the next subscription.
"""

from typing import Any, Dict, List, Optional
import logging
import uuid
from datetime import datetime, timezone

import anyio.to_thread
from pymongo import MongoClient
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    NetworkTimeout,
    OperationFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
)

from adapters.document_store import (
    DocumentSnapshot,
    Payloads,
    ObservableStore,
    Snapshot,
    SnapshotPayload,
    is_document_path,
    parent_path,
    resolve_server_values,
    split_path,
)
from app.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    StoreUnavailableError,
    WriteFailedError,
)

logger = logging.getLogger("unimeal.mongo")

# MongoDB "Unauthorized" error code
_UNAUTHORIZED = 13


def translate_error(exc: PyMongoError, path: str, writing: bool = False) -> StoreError:
    """Map a pymongo failure onto the store error taxonomy."""
    if isinstance(exc, OperationFailure) and exc.code == _UNAUTHORIZED:
        return PermissionDeniedError(str(exc), path=path)
    if isinstance(exc, (ServerSelectionTimeoutError, AutoReconnect, NetworkTimeout, ConnectionFailure)):
        return StoreUnavailableError(str(exc), path=path)
    if writing:
        return WriteFailedError(str(exc), path=path)
    return StoreError(str(exc), path=path)


class MongoDocumentStore(ObservableStore):
    def __init__(self, client: Optional[MongoClient] = None, db_name: str = "unimeal", collection: str = "documents"):
        super().__init__()
        self._client = client
        self._db_name = db_name
        self._collection_name = collection

    # ------------------ Connection ------------------
    @classmethod
    def connect(cls, uri: str, db_name: str = "unimeal", collection: str = "documents") -> "MongoDocumentStore":
        """Create a client and verify the server answers a ping."""
        client = MongoClient(uri)
        try:
            client.admin.command("ping")
        except PyMongoError as exc:
            client.close()
            raise translate_error(exc, uri)
        logger.info("Connected to MongoDB %s (database: %s)", uri, db_name)
        return cls(client=client, db_name=db_name, collection=collection)

    def close(self) -> None:
        """Close MongoDB connection."""
        try:
            if self._client is not None:
                self._client.close()
                logger.info("MongoDB client closed")
        except PyMongoError:
            logger.exception("Error closing MongoDB client")
        finally:
            self._client = None

    @property
    def _docs(self):
        if self._client is None:
            raise StoreUnavailableError("MongoDB client is not connected")
        return self._client[self._db_name][self._collection_name]

    # ------------------ Reads ------------------
    def _read_collection(self, path: str) -> List[Snapshot]:
        try:
            docs = list(self._docs.find({"parent": path}))
        except PyMongoError as exc:
            logger.exception("Error reading collection %s", path)
            raise translate_error(exc, path)
        logger.debug("Read %d documents from %s", len(docs), path)
        return [Snapshot(id=split_path(d["_id"])[-1], data=d.get("data") or {}) for d in docs]

    def _read_document(self, path: str) -> DocumentSnapshot:
        try:
            doc = self._docs.find_one({"_id": path})
        except PyMongoError as exc:
            logger.exception("Error reading document %s", path)
            raise translate_error(exc, path)
        doc_id = split_path(path)[-1]
        if not doc:
            return DocumentSnapshot(id=doc_id, data=None)
        return DocumentSnapshot(id=doc_id, data=doc.get("data") or {})

    async def get(self, path: str) -> SnapshotPayload:
        path = "/".join(split_path(path))
        return await anyio.to_thread.run_sync(self._read, path)

    # ------------------ Writes ------------------
    # Each sync helper runs in a worker thread and re-reads the watched paths
    # there too; only the dispatch to listeners happens on the event loop.
    def _insert(self, collection_path: str, doc_id: str, data: Dict[str, Any], watched: List[str]) -> Payloads:
        self._docs.insert_one(
            {
                "_id": f"{collection_path}/{doc_id}",
                "parent": collection_path,
                "data": resolve_server_values(data, datetime.now(timezone.utc)),
            }
        )
        return self._read_payloads(watched)

    def _remove(self, doc_path: str, watched: List[str]) -> Optional[Payloads]:
        if not self._docs.delete_one({"_id": doc_path}).deleted_count:
            return None
        return self._read_payloads(watched)

    def _upsert(self, doc_path: str, data: Dict[str, Any], merge: bool, watched: List[str]) -> Payloads:
        values = resolve_server_values(data, datetime.now(timezone.utc))
        if merge:
            update = {f"data.{k}": v for k, v in values.items()}
            self._docs.update_one(
                {"_id": doc_path},
                {"$set": update, "$setOnInsert": {"parent": parent_path(doc_path)}},
                upsert=True,
            )
        else:
            self._docs.replace_one(
                {"_id": doc_path},
                {"_id": doc_path, "parent": parent_path(doc_path), "data": values},
                upsert=True,
            )
        return self._read_payloads(watched)

    async def add(self, collection_path: str, data: Dict[str, Any]) -> str:
        collection_path = "/".join(split_path(collection_path))
        if is_document_path(collection_path):
            raise ValueError(f"{collection_path} is not a collection path")
        doc_id = uuid.uuid4().hex
        doc_path = f"{collection_path}/{doc_id}"
        try:
            payloads = await anyio.to_thread.run_sync(
                self._insert, collection_path, doc_id, dict(data), self._watched_paths(doc_path)
            )
        except PyMongoError as exc:
            logger.exception("Error creating document in %s", collection_path)
            raise translate_error(exc, collection_path, writing=True)
        logger.info("Created document %s", doc_path)
        self._dispatch(payloads)
        return doc_id

    async def delete(self, doc_path: str) -> None:
        doc_path = "/".join(split_path(doc_path))
        try:
            payloads = await anyio.to_thread.run_sync(
                self._remove, doc_path, self._watched_paths(doc_path)
            )
        except PyMongoError as exc:
            logger.exception("Error deleting document %s", doc_path)
            raise translate_error(exc, doc_path, writing=True)
        if payloads is None:
            raise NotFoundError(f"Document {doc_path} not found")
        logger.info("Deleted document %s", doc_path)
        self._dispatch(payloads)

    async def set(self, doc_path: str, data: Dict[str, Any], merge: bool = True) -> None:
        doc_path = "/".join(split_path(doc_path))
        if not is_document_path(doc_path):
            raise ValueError(f"{doc_path} is not a document path")
        try:
            payloads = await anyio.to_thread.run_sync(
                self._upsert, doc_path, dict(data), merge, self._watched_paths(doc_path)
            )
        except PyMongoError as exc:
            logger.exception("Error upserting document %s", doc_path)
            raise translate_error(exc, doc_path, writing=True)
        logger.info("Upserted document %s (merge=%s)", doc_path, merge)
        self._dispatch(payloads)
