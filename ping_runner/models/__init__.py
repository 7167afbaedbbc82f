"""Data models for the ping runner."""

from ping_runner.models.outcome import OutcomeKind, PingOutcome
from ping_runner.models.ping import FAILURE_INDICATORS, SUCCESS_INDICATORS, PingResult
from ping_runner.models.process import ProcessStartInfo, split_arguments

__all__ = [
    "FAILURE_INDICATORS",
    "OutcomeKind",
    "PingOutcome",
    "PingResult",
    "ProcessStartInfo",
    "SUCCESS_INDICATORS",
    "split_arguments",
]
