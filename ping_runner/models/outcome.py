"""Tagged outcome of a cancellable ping invocation."""

from dataclasses import dataclass, field
from enum import Enum

from ping_runner.errors import PingCancelledError
from ping_runner.models.ping import PingResult


class OutcomeKind(str, Enum):
    """How an invocation ended."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAULTED = "faulted"


@dataclass(frozen=True)
class PingOutcome:
    """Outcome of ``run_async`` / ``run_many_async``.

    Callers branch on ``kind`` instead of unwrapping exceptions. A
    cancellation is never reported as FAULTED, even when other concurrent
    faults occurred; those are still listed in ``errors``.
    """

    kind: OutcomeKind
    result: PingResult | None = None
    error: BaseException | None = None
    errors: tuple[BaseException, ...] = field(default_factory=tuple)

    @classmethod
    def from_result(cls, result: PingResult) -> "PingOutcome":
        return cls(kind=OutcomeKind.COMPLETED, result=result)

    @classmethod
    def from_cancellation(
        cls, errors: tuple[BaseException, ...] = ()
    ) -> "PingOutcome":
        return cls(kind=OutcomeKind.CANCELLED, errors=tuple(errors))

    @classmethod
    def from_error(
        cls,
        error: BaseException,
        errors: tuple[BaseException, ...] = (),
    ) -> "PingOutcome":
        return cls(kind=OutcomeKind.FAULTED, error=error, errors=tuple(errors) or (error,))

    @property
    def completed(self) -> bool:
        return self.kind is OutcomeKind.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.kind is OutcomeKind.CANCELLED

    @property
    def faulted(self) -> bool:
        return self.kind is OutcomeKind.FAULTED

    def unwrap(self) -> PingResult:
        """Return the result, or raise what prevented one.

        Raises:
            PingCancelledError: If the invocation was cancelled.
            Exception: The fault cause if the invocation faulted.
        """
        if self.kind is OutcomeKind.CANCELLED:
            raise PingCancelledError()
        if self.kind is OutcomeKind.FAULTED:
            assert self.error is not None
            raise self.error
        assert self.result is not None
        return self.result
