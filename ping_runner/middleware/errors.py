"""Error handling middleware for consistent error logging."""

import logging
import traceback
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from ping_runner.errors import ProcessRunnerError
from ping_runner.middleware.base import PingMiddleware

ErrorCallback = Callable[[Exception, MiddlewareContext], None]


def _is_runner_fault(error: BaseException) -> bool:
    """Whether ``error`` or anything it was raised from is a runner fault.

    FastMCP wraps tool exceptions in ``ToolError``, keeping the original
    as ``__cause__``.
    """
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        if isinstance(current, ProcessRunnerError):
            return True
        seen.add(id(current))
        current = current.__cause__
    return False


class ErrorHandlingMiddleware(PingMiddleware):
    """Logs and counts failed requests, then re-raises them.

    Runner faults (launch/capture) are logged at ERROR; anything else,
    such as invalid tool input, at WARNING.

    Example:
        >>> def on_error(exc, ctx):
        ...     print(f"Error in {ctx.method}: {exc}")
        >>> mcp.add_middleware(ErrorHandlingMiddleware(error_callback=on_error))
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_traceback: bool = False,
        error_callback: ErrorCallback | None = None,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            logger: Optional custom logger.
            include_traceback: Whether to include full traceback in logs.
            error_callback: Optional callback called on each error.
                Receives (exception, context) as arguments.
        """
        super().__init__(logger=logger)
        self.include_traceback = include_traceback
        self.error_callback = error_callback
        self._error_counts: dict[str, int] = defaultdict(int)

    def get_error_stats(self) -> dict[str, int]:
        """Get error counts keyed by exception type name."""
        return dict(self._error_counts)

    def reset_stats(self) -> None:
        self._error_counts.clear()

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Pass the request on; log, count and re-raise any failure."""
        try:
            return await call_next(context)

        except Exception as e:
            error_type = type(e).__name__
            self._error_counts[error_type] += 1

            level = logging.ERROR if _is_runner_fault(e) else logging.WARNING
            if self.include_traceback:
                self.logger.log(
                    level,
                    "Error in %s: %s: %s\n%s",
                    context.method,
                    error_type,
                    str(e),
                    traceback.format_exc(),
                )
            else:
                self.logger.log(
                    level,
                    "Error in %s: %s: %s",
                    context.method,
                    error_type,
                    str(e),
                )

            if self.error_callback:
                try:
                    self.error_callback(e, context)
                except Exception as callback_error:
                    self.logger.warning("Error callback failed: %s", str(callback_error))

            raise
