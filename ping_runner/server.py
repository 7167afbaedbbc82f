"""Ping runner FastMCP server.

Thin wiring of the ping tools, middleware and a health route. All process
handling lives in ``ping_runner.services``.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from ping_runner.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from ping_runner.services import get_runner, get_settings, reset_state
from ping_runner.tools import ping, ping_hosts
from ping_runner.utils.console import MCPRequestFormatter


def _configure_logging() -> None:
    """Configure colorful logging for the ping_runner package.

    Called at module load time so loggers are configured however the
    server is started.
    """
    settings = get_settings()
    use_colors = settings.log_colors and sys.stderr.isatty()

    package_logger = logging.getLogger("ping_runner")
    package_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    # Only add handler if not already configured
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(MCPRequestFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    for noisy_logger in ["uvicorn", "uvicorn.access", "httpx", "httpcore", "fastmcp", "starlette"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


_configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Create the shared runner at startup and release it on shutdown."""
    settings = get_settings()
    runner = get_runner()
    logger.info(
        "Ping runner server starting (command=%s, count=%d, timeout=%ds)",
        runner.command,
        settings.count,
        settings.command_timeout,
    )
    try:
        yield {"command": runner.command}
    finally:
        logger.info("Ping runner server shutting down")
        reset_state()


def configure_middleware(server: FastMCP) -> None:
    """Add error handling and logging middleware.

    Args:
        server: The FastMCP server to configure.
    """
    settings = get_settings()
    server.add_middleware(ErrorHandlingMiddleware(include_traceback=settings.include_traceback))
    server.add_middleware(
        LoggingMiddleware(
            include_payloads=settings.log_payloads,
            slow_threshold_ms=float(settings.slow_threshold_ms),
        )
    )


def create_server() -> FastMCP:
    """Create and configure the MCP server.

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP("ping_runner", lifespan=app_lifespan)

    configure_middleware(server)

    server.tool(ping)
    server.tool(ping_hosts)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    return server


# Default server instance
mcp = create_server()
