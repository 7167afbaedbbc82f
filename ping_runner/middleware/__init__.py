"""Middleware components for the ping runner server."""

from ping_runner.middleware.base import PingMiddleware
from ping_runner.middleware.errors import ErrorHandlingMiddleware
from ping_runner.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
    "PingMiddleware",
]
