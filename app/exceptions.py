from typing import Any, Mapping, Optional


class ServiceValidationError(Exception):
    """Raised when input data is invalid or a precondition for a service call is not met.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers (400)
    """

    http_status = 400

    def __init__(self, message: str = "Invalid input", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    @property
    def field(self) -> Optional[str]:
        if self.details:
            return self.details.get("field")
        return None

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class NotFoundError(Exception):
    """Raised when a requested resource was not found.

    Attributes are similar to ServiceValidationError. http_status is 404.
    """

    http_status = 404

    def __init__(self, message: str = "Not found", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class UnauthorizedError(Exception):
    """Raised when no signed-in identity is available.

    The message is shown as a persistent page-level notice; nothing is retried.
    http_status is 401.
    """

    http_status = 401

    def __init__(self, message: str = "You must be signed in.", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = "not-signed-in"):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class StoreError(Exception):
    """Base class for failures reported by the document store.

    Attributes:
        message: low-level message from the store
        code: store error code ("permission-denied", "unavailable", ...)
        path: document or collection path the operation targeted
    """

    http_status = 500
    default_code = "unknown"

    def __init__(self, message: str = "Document store error", code: Optional[str] = None, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.path = path

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.path:
            payload["details"] = {"path": self.path}
        return payload

    def __str__(self) -> str:
        return self.message


class PermissionDeniedError(StoreError):
    """The store rejected the caller's access to a path. http_status is 403."""

    http_status = 403
    default_code = "permission-denied"


class StoreUnavailableError(StoreError):
    """The store could not be reached. http_status is 503."""

    http_status = 503
    default_code = "unavailable"


class WriteFailedError(StoreError):
    """A create, delete or upsert did not complete. Never retried automatically.

    http_status is 502.
    """

    http_status = 502
    default_code = "write-failed"


def classify_store_error(exc: BaseException) -> str:
    """Return "permission-denied", "unavailable" or "other" for a listener error."""
    if isinstance(exc, PermissionDeniedError):
        return "permission-denied"
    if isinstance(exc, StoreUnavailableError):
        return "unavailable"
    code = getattr(exc, "code", "") or ""
    message = str(exc)
    if (
        code == "permission-denied"
        or "permission" in message
        or "Missing or insufficient permissions" in message
    ):
        return "permission-denied"
    if code == "unavailable" or "unavailable" in message:
        return "unavailable"
    return "other"


def describe_store_error(exc: BaseException, resource: str, path: Optional[str] = None) -> str:
    """Convert a listener error into the banner text shown on a page."""
    kind = classify_store_error(exc)
    if kind == "permission-denied":
        target = path or getattr(exc, "path", None) or f"users/{{uid}}/{resource}"
        return (
            "Permission denied. Make sure the database rules allow access to "
            f"{target} and are published."
        )
    if kind == "unavailable":
        return "The database is temporarily unavailable. Please try again in a moment."
    return f"Failed to load {resource}. Error: {exc}. Check the server logs for details."
