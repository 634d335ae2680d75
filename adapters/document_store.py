"""Document store interface and the in-memory implementation.

Paths follow the users/{uid}/<collection>/<doc> convention: an odd number of
segments names a collection, an even number names a single document.

Subscribers receive a full, authoritative snapshot on subscribe and after
every write that touches the path. Collection listeners get a list of
Snapshot, document listeners a single DocumentSnapshot (data None when the
document does not exist).
"""

from __future__ import annotations

import copy
import logging
import uuid
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from app.exceptions import NotFoundError, StoreError

logger = logging.getLogger("unimeal.store")


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


# Replaced by the store's clock when written
SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Snapshot:
    """One document inside a collection snapshot"""

    id: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DocumentSnapshot:
    """A single document; data is None when it does not exist"""

    id: str
    data: Optional[Dict[str, Any]] = None

    @property
    def exists(self) -> bool:
        return self.data is not None


SnapshotPayload = Union[List[Snapshot], DocumentSnapshot]
NextCallback = Callable[[SnapshotPayload], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]
# Snapshots read after a write, keyed by path; a failed read keeps its error
Payloads = Dict[str, Union[SnapshotPayload, StoreError]]


def split_path(path: str) -> List[str]:
    parts = [p for p in path.strip("/").split("/") if p]
    if not parts:
        raise ValueError("Empty store path")
    return parts


def is_document_path(path: str) -> bool:
    return len(split_path(path)) % 2 == 0


def parent_path(doc_path: str) -> str:
    return "/".join(split_path(doc_path)[:-1])


def join_path(*parts: str) -> str:
    return "/".join(p.strip("/") for p in parts if p)


class DocumentStore(ABC):
    """Contract every store backend implements."""

    @abstractmethod
    def subscribe(
        self, path: str, on_next: NextCallback, on_error: Optional[ErrorCallback] = None
    ) -> Unsubscribe:
        """Deliver the current snapshot now and on every change; returns unsubscribe."""

    @abstractmethod
    async def get(self, path: str) -> SnapshotPayload:
        """Read a collection or document once."""

    @abstractmethod
    async def add(self, collection_path: str, data: Dict[str, Any]) -> str:
        """Create a document with a server-assigned id and return the id."""

    @abstractmethod
    async def delete(self, doc_path: str) -> None:
        """Delete a document by path."""

    @abstractmethod
    async def set(self, doc_path: str, data: Dict[str, Any], merge: bool = True) -> None:
        """Upsert a document; with merge only the given fields are touched."""


class ObservableStore(DocumentStore):
    """
    Listener bookkeeping shared by the concrete stores.

    Subclasses implement the raw reads; after a write they call _notify with
    the document path and every listener on that document and on its parent
    collection receives a fresh snapshot. Stores with blocking reads can run
    _read_payloads off the event loop and hand the result to _dispatch.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Tuple[NextCallback, Optional[ErrorCallback]]]] = defaultdict(list)

    @abstractmethod
    def _read_collection(self, path: str) -> List[Snapshot]:
        ...

    @abstractmethod
    def _read_document(self, path: str) -> DocumentSnapshot:
        ...

    def _read(self, path: str) -> SnapshotPayload:
        if is_document_path(path):
            return self._read_document(path)
        return self._read_collection(path)

    def subscribe(
        self, path: str, on_next: NextCallback, on_error: Optional[ErrorCallback] = None
    ) -> Unsubscribe:
        path = "/".join(split_path(path))
        entry = (on_next, on_error)
        self._listeners[path].append(entry)
        logger.debug("Listener added on %s (%d total)", path, len(self._listeners[path]))
        self._deliver(path, entry)

        def unsubscribe() -> None:
            try:
                self._listeners[path].remove(entry)
                logger.debug("Listener removed from %s", path)
            except ValueError:
                pass

        return unsubscribe

    def listener_count(self, path: str) -> int:
        return len(self._listeners.get("/".join(split_path(path)), []))

    def _deliver(self, path: str, entry: Tuple[NextCallback, Optional[ErrorCallback]]) -> None:
        on_next, on_error = entry
        try:
            payload = self._read(path)
        except StoreError as exc:
            logger.error("Snapshot read failed for %s: %s", path, exc)
            self._deliver_error(path, entry, exc)
            return
        try:
            on_next(payload)
        except Exception:
            logger.exception("Listener on %s raised while handling a snapshot", path)

    def _deliver_error(
        self, path: str, entry: Tuple[NextCallback, Optional[ErrorCallback]], exc: Exception
    ) -> None:
        _, on_error = entry
        if on_error is None:
            return
        try:
            on_error(exc)
        except Exception:
            logger.exception("Listener on %s raised while handling an error", path)

    def _watched_paths(self, doc_path: str) -> List[str]:
        """The document and its parent collection, when someone listens there."""
        return [p for p in (doc_path, parent_path(doc_path)) if self._listeners.get(p)]

    def _read_payloads(self, paths: List[str]) -> Payloads:
        """Read each path once; a failed read is kept as its error."""
        payloads: Payloads = {}
        for path in paths:
            try:
                payloads[path] = self._read(path)
            except StoreError as exc:
                logger.error("Snapshot read failed for %s: %s", path, exc)
                payloads[path] = exc
        return payloads

    def _dispatch(self, payloads: Payloads) -> None:
        for path, payload in payloads.items():
            for entry in list(self._listeners.get(path, [])):
                if isinstance(payload, StoreError):
                    self._deliver_error(path, entry, payload)
                    continue
                try:
                    entry[0](payload)
                except Exception:
                    logger.exception("Listener on %s raised while handling a snapshot", path)

    def _notify(self, doc_path: str) -> None:
        self._dispatch(self._read_payloads(self._watched_paths(doc_path)))

    def emit_error(self, path: str, exc: Exception) -> None:
        """Push an error to every listener on path."""
        path = "/".join(split_path(path))
        for entry in list(self._listeners.get(path, [])):
            self._deliver_error(path, entry, exc)


def resolve_server_values(data: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    return {k: (now if v is SERVER_TIMESTAMP else v) for k, v in data.items()}


class InMemoryDocumentStore(ObservableStore):
    """
    Process-local store used for development and tests.

    Failures can be injected per path with fail_reads / fail_writes to exercise
    the error paths of the views.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        super().__init__()
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)
        self._read_failures: Dict[str, Exception] = {}
        self._write_failures: Dict[str, Exception] = {}
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------ Failure injection ------------------
    def fail_reads(self, path: str, exc: Exception) -> None:
        self._read_failures["/".join(split_path(path))] = exc

    def fail_writes(self, path: str, exc: Exception) -> None:
        self._write_failures["/".join(split_path(path))] = exc

    def clear_failures(self) -> None:
        self._read_failures.clear()
        self._write_failures.clear()

    def _check_write(self, *paths: str) -> None:
        for path in paths:
            exc = self._write_failures.get(path)
            if exc is not None:
                raise exc

    # ------------------ Reads ------------------
    def _read_collection(self, path: str) -> List[Snapshot]:
        if path in self._read_failures:
            raise self._read_failures[path]
        docs = self._collections.get(path, {})
        return [Snapshot(id=doc_id, data=copy.deepcopy(data)) for doc_id, data in docs.items()]

    def _read_document(self, path: str) -> DocumentSnapshot:
        if path in self._read_failures:
            raise self._read_failures[path]
        parts = split_path(path)
        docs = self._collections.get("/".join(parts[:-1]), {})
        data = docs.get(parts[-1])
        return DocumentSnapshot(id=parts[-1], data=copy.deepcopy(data) if data is not None else None)

    async def get(self, path: str) -> SnapshotPayload:
        return self._read("/".join(split_path(path)))

    # ------------------ Writes ------------------
    async def add(self, collection_path: str, data: Dict[str, Any]) -> str:
        collection_path = "/".join(split_path(collection_path))
        if is_document_path(collection_path):
            raise ValueError(f"{collection_path} is not a collection path")
        self._check_write(collection_path)
        doc_id = uuid.uuid4().hex
        self._collections[collection_path][doc_id] = resolve_server_values(dict(data), self._clock())
        logger.info("Created document %s/%s", collection_path, doc_id)
        self._notify(f"{collection_path}/{doc_id}")
        return doc_id

    async def delete(self, doc_path: str) -> None:
        doc_path = "/".join(split_path(doc_path))
        if not is_document_path(doc_path):
            raise ValueError(f"{doc_path} is not a document path")
        self._check_write(doc_path, parent_path(doc_path))
        parent = parent_path(doc_path)
        doc_id = split_path(doc_path)[-1]
        if self._collections.get(parent, {}).pop(doc_id, None) is None:
            raise NotFoundError(f"Document {doc_path} not found")
        logger.info("Deleted document %s", doc_path)
        self._notify(doc_path)

    async def set(self, doc_path: str, data: Dict[str, Any], merge: bool = True) -> None:
        doc_path = "/".join(split_path(doc_path))
        if not is_document_path(doc_path):
            raise ValueError(f"{doc_path} is not a document path")
        self._check_write(doc_path, parent_path(doc_path))
        parent = parent_path(doc_path)
        doc_id = split_path(doc_path)[-1]
        values = resolve_server_values(dict(data), self._clock())
        existing = self._collections[parent].get(doc_id)
        if merge and existing is not None:
            existing.update(values)
        else:
            self._collections[parent][doc_id] = values
        logger.info("Upserted document %s (merge=%s)", doc_path, merge)
        self._notify(doc_path)

