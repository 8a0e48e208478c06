"""
Request ID middleware for tracking requests across the application.

Every request gets an id (client-provided X-Request-ID or a fresh UUID).
The id lives in a ContextVar for the duration of the request so that
RequestIDLogFilter can stamp it onto every log record, including records
emitted from threadpool workers running sync handlers.
"""

import uuid
import logging
from contextvars import ContextVar
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

NO_REQUEST_ID = "no-request-id"

request_id_var: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            response: Response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_var.reset(token)


class RequestIDLogFilter(logging.Filter):
    """Attach the current request id to every record passing through a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def get_request_id(request: Request) -> str:
    """
    Get the request ID from request state.

    Returns:
        Request ID string, or "no-request-id" if the middleware did not run
    """
    return getattr(request.state, "request_id", NO_REQUEST_ID)
