"""
Base view model for the live pages.
A view model owns the subscriptions of one signed-in session, caches the
latest snapshots and runs the page's write actions.
"""

from typing import Any, Awaitable, Callable, List, Optional, Set, Tuple
from abc import ABC, abstractmethod
import logging

from adapters.document_store import DocumentStore, Unsubscribe
from app.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    ServiceValidationError,
    StoreError,
    StoreUnavailableError,
    UnauthorizedError,
    WriteFailedError,
    describe_store_error,
)
from domain.enums import LoadState

ChangeListener = Callable[[], None]
ConfirmCallback = Callable[[str], bool]


class BaseView(ABC):
    """
    Base view model providing the load state machine and write bookkeeping.

    State goes UNINITIALIZED -> LOADING -> LOADED once every source has
    delivered a snapshot, or ERROR when a source fails. Cached data is never
    cleared by an error.
    """

    not_signed_in_message = "You must be signed in."

    def __init__(self, store: DocumentStore, logger_name: str):
        self.store = store
        self.logger = logging.getLogger(logger_name)
        self.identity: Optional[str] = None
        self.state = LoadState.UNINITIALIZED
        self.error: Optional[str] = None
        # Banner from a failed subscription; outlives action errors
        self.load_error: Optional[str] = None
        self.failure: Optional[Exception] = None
        self._pending: Set[str] = set()
        self._unsubscribers: List[Unsubscribe] = []
        self._listeners: List[ChangeListener] = []

    # ------------------ Logging ------------------
    def log_info(self, message: str, **kwargs):
        """Log info message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.info(f"{message} {extra_data}".strip())

    def log_warning(self, message: str, **kwargs):
        """Log warning message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.warning(f"{message} {extra_data}".strip())

    def log_error(self, message: str, **kwargs):
        """Log error message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.error(f"{message} {extra_data}".strip())

    # ------------------ Lifecycle ------------------
    @property
    def loading(self) -> bool:
        return self.state == LoadState.LOADING

    def add_listener(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a callback run after every state change."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    def open(self, identity: Optional[str]) -> "BaseView":
        """Start (or restart) the session for identity."""
        self.close()
        self.identity = identity
        self.error = None
        self.load_error = None
        self.failure = None
        if not identity:
            self.state = LoadState.ERROR
            self.error = self.not_signed_in_message
            self.failure = UnauthorizedError(self.not_signed_in_message)
            self._changed()
            return self
        self.state = LoadState.LOADING
        self._pending = set(self.sources())
        self._subscribe(identity)
        if not self._pending and self.state == LoadState.LOADING:
            self.state = LoadState.LOADED
        self._changed()
        return self

    def close(self) -> None:
        """Unsubscribe every listener; cached data stays readable."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._pending = set()
        self.state = LoadState.UNINITIALIZED

    def set_identity(self, identity: Optional[str]) -> None:
        """Re-open when the signed-in identity changes."""
        if identity != self.identity or self.state == LoadState.UNINITIALIZED:
            self.open(identity)

    def bind(self, auth) -> Callable[[], None]:
        """Follow an AuthProvider's identity; returns the detach callable."""
        return auth.add_listener(self.set_identity)

    @abstractmethod
    def sources(self) -> Tuple[str, ...]:
        """Names of the subscriptions that must deliver before LOADED."""

    @abstractmethod
    def _subscribe(self, identity: str) -> None:
        ...

    def _track(self, unsubscribe: Unsubscribe) -> None:
        self._unsubscribers.append(unsubscribe)

    def _delivered(self, source: str) -> None:
        self._pending.discard(source)
        if not self._pending and self.state == LoadState.LOADING:
            self.state = LoadState.LOADED
        self._changed()

    def _source_error(
        self, resource: str, path: Optional[str] = None, message: Optional[str] = None
    ) -> Callable[[Exception], None]:
        """Listener error callback for one source."""

        def on_error(exc: Exception) -> None:
            self.logger.error("Listener error on %s: %s", resource, exc)
            self.load_error = message or describe_store_error(exc, resource, path)
            self.error = self.load_error
            self.failure = exc
            self.state = LoadState.ERROR
            self._changed()

        return on_error

    # ------------------ Writes ------------------
    def _require_identity(self, message: str) -> bool:
        if self.identity:
            return True
        self.error = message
        self.failure = UnauthorizedError(message)
        self._changed()
        return False

    def _reject(self, exc: ServiceValidationError) -> None:
        self.error = exc.message
        self.failure = exc
        self._changed()

    async def _write(
        self, operation: Awaitable[Any], failure_message: str, **log_context
    ) -> Tuple[bool, Any]:
        """
        Await a store write.

        Returns (True, result) on success. On failure the generic message
        becomes the page error and (False, None) is returned; nothing is
        retried. A listener banner set before the write is kept.
        """
        self.error = self.load_error
        self.failure = None
        try:
            result = await operation
        except NotFoundError as e:
            self.log_warning(f"Write target missing: {e}", **log_context)
            self.error = failure_message
            self.failure = e
        except (PermissionDeniedError, StoreUnavailableError) as e:
            self.logger.exception("Store write failed")
            self.error = failure_message
            self.failure = e
        except StoreError as e:
            self.logger.exception("Store write failed")
            self.error = failure_message
            self.failure = WriteFailedError(failure_message, path=e.path)
        else:
            self._changed()
            return True, result
        self._changed()
        return False, None

    async def _confirmed_delete(
        self,
        busy: Set[str],
        item_id: str,
        confirm: ConfirmCallback,
        prompt: str,
        operation: Callable[[str], Awaitable[None]],
        failure_message: str,
    ) -> bool:
        """Confirm, mark item busy, delete, clear busy."""
        if item_id in busy:
            self.log_warning("Delete already in progress", item_id=item_id)
            return False
        if not confirm(prompt):
            return False
        busy.add(item_id)
        self._changed()
        try:
            ok, _ = await self._write(operation(item_id), failure_message, item_id=item_id)
        finally:
            busy.discard(item_id)
        if ok:
            self.log_info("Deleted item", item_id=item_id)
        return ok
