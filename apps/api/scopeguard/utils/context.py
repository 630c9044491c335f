"""
Request Context Utilities.

Provides correlation IDs and request context for log correlation.

Usage:
    # In middleware (automatic)
    app.add_middleware(RequestContextMiddleware)

    # Access anywhere in request lifecycle
    from scopeguard.utils.context import get_correlation_id, get_request_context

    correlation_id = get_correlation_id()
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


# ============================================================
# CONTEXT VARIABLES
# ============================================================

# Request-scoped context using contextvars (async-safe)
_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_request_context: ContextVar[Optional["RequestContext"]] = ContextVar("request_context", default=None)


# ============================================================
# REQUEST CONTEXT
# ============================================================

@dataclass
class RequestContext:
    """
    Context for the current request.

    Holds request-scoped metadata that every log line should carry.
    """
    request_id: str  # Unique per request
    correlation_id: str  # Shared across service calls

    method: str = ""
    path: str = ""

    # Populated by the principal dependency
    user_id: Optional[str] = None
    role: Optional[str] = None


# ============================================================
# CONTEXT ACCESSORS
# ============================================================

def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID (None outside a request)."""
    return _correlation_id.get()


def get_request_id() -> Optional[str]:
    """Get the current request ID."""
    return _request_id.get()


def get_request_context() -> Optional[RequestContext]:
    """Get the full request context."""
    return _request_context.get()


def set_context_user(user_id: Optional[str], role: Optional[str] = None) -> None:
    """
    Set principal info in request context.

    Called by the principal dependency after the token is decoded.
    """
    ctx = _request_context.get()
    if ctx:
        ctx.user_id = user_id
        ctx.role = role


# ============================================================
# MIDDLEWARE
# ============================================================

class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that creates request context for each request.

    Sets up:
    - request_id: From X-Request-ID header or generated
    - correlation_id: From X-Correlation-ID header, else the request id
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        correlation_id = request.headers.get("X-Correlation-ID") or request_id

        ctx = RequestContext(
            request_id=request_id,
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )

        tokens = (
            _correlation_id.set(correlation_id),
            _request_id.set(request_id),
            _request_context.set(ctx),
        )

        request.state.request_id = request_id
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
        finally:
            _correlation_id.reset(tokens[0])
            _request_id.reset(tokens[1])
            _request_context.reset(tokens[2])

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Correlation-ID"] = correlation_id

        return response


# ============================================================
# STRUCTLOG PROCESSOR
# ============================================================

def add_request_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that adds request context to all logs."""
    correlation_id = get_correlation_id()
    request_id = get_request_id()

    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    if request_id:
        event_dict.setdefault("request_id", request_id)

    ctx = get_request_context()
    if ctx and ctx.user_id:
        event_dict.setdefault("user_id", ctx.user_id)
        event_dict.setdefault("role", ctx.role)

    return event_dict
