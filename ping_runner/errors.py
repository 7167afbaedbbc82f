"""Exceptions raised by the process runner."""


class ProcessRunnerError(Exception):
    """Base class for process runner faults."""

    pass


class PingLaunchError(ProcessRunnerError):
    """The diagnostic tool could not be started.

    Raised for a missing binary, denied permission or any other OS-level
    launch failure. Never retried.
    """

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Failed to launch {command!r}: {reason}")


class PingCaptureError(ProcessRunnerError):
    """The child's output stream could not be read."""

    pass


class PingCancelledError(ProcessRunnerError):
    """Unwrapped a cancelled outcome."""

    def __init__(self, message: str = "Ping invocation was cancelled") -> None:
        super().__init__(message)
