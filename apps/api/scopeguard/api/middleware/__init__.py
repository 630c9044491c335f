"""Middleware package."""

from scopeguard.api.middleware.logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
]
