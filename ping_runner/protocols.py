"""Protocol interfaces for dependency inversion.

Tools depend on these rather than on ``ProcessRunner`` so tests can pass
a fake runner.

Usage Example:

    from ping_runner.protocols import AsyncPinger

    async def my_tool(runner: AsyncPinger) -> str:
        outcome = await runner.run_async("-c 1 localhost")
        return outcome.unwrap().std_output or ""
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ping_runner.models import PingOutcome
from ping_runner.services.cancellation import CancellationToken


@runtime_checkable
class AsyncPinger(Protocol):
    """Protocol for cancellable ping execution."""

    async def run_async(
        self,
        arguments: str | Sequence[str],
        cancel_token: CancellationToken | None = None,
    ) -> PingOutcome:
        """Ping with the given arguments.

        Args:
            arguments: Argument string or sequence passed to the tool
            cancel_token: Optional cooperative cancellation signal

        Returns:
            Tagged outcome of the invocation
        """
        ...

    async def run_many_async(
        self,
        host_names: Sequence[str],
        cancel_token: CancellationToken | None = None,
        count: int | None = None,
    ) -> PingOutcome:
        """Ping several hosts and aggregate the output.

        Args:
            host_names: Hosts to ping, one invocation each
            cancel_token: Optional cooperative cancellation signal
            count: Echo requests per host

        Returns:
            Tagged outcome with the combined output
        """
        ...
