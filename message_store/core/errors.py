"""
Error taxonomy and the HTTP handlers that translate it.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from message_store.core.logging import get_logger

logger = get_logger(__name__)


class MessageStoreError(Exception):
    """Base class for errors raised by the message store."""

    status_code = 500

    @property
    def public_message(self) -> str:
        """Description that is safe to return to API clients."""
        return str(self)


class StorageError(MessageStoreError):
    """A query against the database failed."""

    status_code = 500

    def __init__(self, operation: str, original: BaseException):
        self.operation = operation
        self.original = original
        super().__init__(f"{operation} failed: {original}")

    @property
    def public_message(self) -> str:
        # Driver messages can leak SQL and connection details
        return f"{self.operation} failed"


class BatchValidationError(MessageStoreError):
    """Input was well-formed JSON but cannot be stored."""

    status_code = 422


async def message_store_error_handler(request: Request, exc: MessageStoreError) -> JSONResponse:
    """Map store errors to `{"error": ...}` responses."""
    extra = {
        "extra_data": {
            "method": request.method,
            "path": request.url.path,
            "status": exc.status_code,
        }
    }
    if isinstance(exc, StorageError):
        logger.error(
            f"Storage failure during {exc.operation}: {exc.original!r}",
            exc_info=(type(exc.original), exc.original, exc.original.__traceback__),
            extra=extra,
        )
    else:
        logger.warning(f"Rejected request: {exc}", extra=extra)

    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


def register_error_handlers(app: FastAPI) -> None:
    """Install the error handlers on the application."""
    app.add_exception_handler(MessageStoreError, message_store_error_handler)
