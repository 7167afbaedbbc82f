"""Run the host's ping tool with blocking, async and cancellable shapes."""

from ping_runner.errors import (
    PingCancelledError,
    PingCaptureError,
    PingLaunchError,
    ProcessRunnerError,
)
from ping_runner.models import OutcomeKind, PingOutcome, PingResult, ProcessStartInfo
from ping_runner.services import CancellationToken, ProcessRunner

__all__ = [
    "CancellationToken",
    "OutcomeKind",
    "PingCancelledError",
    "PingCaptureError",
    "PingLaunchError",
    "PingOutcome",
    "PingResult",
    "ProcessRunner",
    "ProcessRunnerError",
    "ProcessStartInfo",
]
