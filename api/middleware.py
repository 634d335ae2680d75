"""
Consolidated middleware for the UniMeal API
"""

import time
import logging
from datetime import datetime
from uuid import uuid4

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import (
    NotFoundError,
    ServiceValidationError,
    StoreError,
    UnauthorizedError,
    WriteFailedError,
    describe_store_error,
)

logger = logging.getLogger("unimeal.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def error_body(code: str, message: str, **extra) -> dict:
    """Error envelope shared by every handler"""
    error = {"code": code, "message": message}
    error.update({k: v for k, v in extra.items() if v is not None})
    return {
        "success": False,
        "error": error,
        "timestamp": datetime.utcnow().isoformat(),
    }


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id

        logger.info(
            "Request started %s %s",
            request.method,
            request.url.path,
            extra={
                "request_id": request_id,
                "user_id": request.headers.get("x-user-id"),
                "client": request.client.host if request.client else None,
            },
        )

        start_time = time.time()

        try:
            response: Response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(
                "Request completed %s %s -> %d",
                request.method,
                request.url.path,
                response.status_code,
                extra={"request_id": request_id, "process_time": f"{process_time:.4f}s"},
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            return response

        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                "Request failed %s %s",
                request.method,
                request.url.path,
                extra={
                    "request_id": request_id,
                    "error": str(exc),
                    "process_time": f"{process_time:.4f}s",
                },
                exc_info=True,
            )
            raise


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    logger.warning(f"Validation error on {request.url}: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=error_body(
            "VALIDATION_ERROR",
            "Request validation failed",
            details=[
                {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
                for e in exc.errors()
            ],
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(f"HTTP_{exc.status_code}", str(exc.detail)),
    )


async def service_validation_exception_handler(
    request: Request, exc: ServiceValidationError
):
    """Handle form validation errors; the offending field is echoed back"""
    logger.warning(f"Service validation error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("SERVICE_VALIDATION_ERROR", exc.message, field=exc.field),
    )


async def not_found_exception_handler(request: Request, exc: NotFoundError):
    """Handle not found errors"""
    logger.warning(f"Resource not found on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_body("NOT_FOUND", str(exc)),
    )


async def unauthorized_exception_handler(request: Request, exc: UnauthorizedError):
    """Handle requests without a signed-in identity"""
    logger.warning(f"Unauthorized request on {request.url}")

    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=error_body("NOT_SIGNED_IN", exc.message),
    )


async def store_exception_handler(request: Request, exc: StoreError):
    """Handle document store failures (permission, availability, writes)"""
    logger.error(f"Store error on {request.url}: [{exc.code}] {exc.message}")

    if isinstance(exc, WriteFailedError):
        message = exc.message
    else:
        resource = request.url.path.strip("/").split("/")[0] or "data"
        message = describe_store_error(exc, resource, exc.path)
    return JSONResponse(
        status_code=exc.http_status,
        content=error_body(exc.code.upper().replace("-", "_"), message),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
    )
