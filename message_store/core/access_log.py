"""
Per-request access logging.
"""
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from message_store.core.logging import get_logger

logger = get_logger("message_store.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log one line per request in the spirit of the combined log format."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client = request.client.host if request.client else "-"
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"

        logger.info(
            f'{client} "{request.method} {path}" {response.status_code}',
            extra={
                "extra_data": {
                    "client": client,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 3),
                    "referer": request.headers.get("referer", "-"),
                    "user_agent": request.headers.get("user-agent", "-"),
                }
            }
        )

        return response
