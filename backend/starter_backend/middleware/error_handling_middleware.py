"""Turns unhandled exceptions into a fixed 500 response.

Installed innermost so the error response passes back through the rest
of the stack.
"""

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {"detail": "Internal server error"}


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path}: {exc}",
                exc_info=exc,
            )
            return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)
