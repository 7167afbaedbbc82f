"""Services for the ping runner."""

from ping_runner.services.cancellation import CancellationToken
from ping_runner.services.runner import LineHandler, ProcessRunner, count_flag
from ping_runner.services.state import (
    get_runner,
    get_settings,
    reset_state,
    set_runner,
    set_settings,
)

__all__ = [
    "CancellationToken",
    "LineHandler",
    "ProcessRunner",
    "count_flag",
    "get_runner",
    "get_settings",
    "reset_state",
    "set_runner",
    "set_settings",
]
