"""
Middleware for request logging and tracking
"""
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from stockroom.core.logging_config import get_logger, request_id_context

logger = get_logger(__name__)

QUIET_PATHS = {"/", "/health", "/health/detailed", "/docs", "/openapi.json", "/redoc"}


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns a request ID (or reuses X-Request-ID) and logs each request"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_context.set(request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"{request.method} {request.url.path} - Exception - "
                f"{time.perf_counter() - start_time:.3f}s",
                exc_info=True,
            )
            raise
        else:
            duration = time.perf_counter() - start_time
            response.headers["X-Request-ID"] = request_id

            if request.url.path not in QUIET_PATHS:
                status_code = response.status_code
                if status_code >= 500:
                    log = logger.error
                elif status_code >= 400:
                    log = logger.warning
                else:
                    log = logger.info
                log(f"{request.method} {request.url.path} - {status_code} - {duration:.3f}s")

            return response
        finally:
            request_id_context.reset(token)
