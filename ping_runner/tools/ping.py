"""Ping tools exposed over MCP."""

import logging

from ping_runner.models import PingResult
from ping_runner.protocols import AsyncPinger
from ping_runner.services import CancellationToken, count_flag, get_runner, get_settings
from ping_runner.utils.validation import validate_count, validate_host

logger = logging.getLogger(__name__)


def _format_result(result: PingResult) -> str:
    output = (result.std_output or "").rstrip("\n")
    footer = f"─── exit code {result.exit_code} ───"
    return f"{output}\n{footer}" if output else footer


def _format_timeout(what: str, timeout: int) -> str:
    return f"Error: {what} timed out after {timeout}s"


async def ping(host: str, count: int | None = None) -> str:
    """Ping a host and return the tool's output.

    Args:
        host: Host name or address to ping.
        count: Number of echo requests (default from PING_RUNNER_COUNT).

    Examples:
        ping("localhost")
        ping("192.168.1.1", count=2)

    Returns:
        Captured output followed by the exit code. A non-zero exit code
        (unknown or unreachable host) is reported, not raised.

    Raises:
        ProcessRunnerError: If ping cannot be launched or its output read.
    """
    settings = get_settings()
    try:
        host = validate_host(host)
        count = validate_count(settings.count if count is None else count)
    except ValueError as e:
        return f"Error: {e}"

    token = CancellationToken()
    token.cancel_after(settings.command_timeout)
    try:
        runner: AsyncPinger = get_runner()
        outcome = await runner.run_async([count_flag(), str(count), host], token)
    finally:
        token.cancel()

    if outcome.cancelled:
        logger.warning("ping %s timed out after %ds", host, settings.command_timeout)
        return _format_timeout(f"ping {host}", settings.command_timeout)

    # Launch and capture faults propagate to the error middleware
    return _format_result(outcome.unwrap())


async def ping_hosts(hosts: list[str], count: int | None = None) -> str:
    """Ping several hosts concurrently and return the combined output.

    Args:
        hosts: Host names or addresses, one ping process each.
        count: Number of echo requests per host.

    Examples:
        ping_hosts(["localhost", "gateway.lan"])

    Returns:
        Combined output followed by a reply summary and the exit code.

    Raises:
        ProcessRunnerError: If any ping cannot be launched or its output read.
    """
    settings = get_settings()
    if not hosts:
        return "Error: At least one host is required"
    try:
        validated = [validate_host(h) for h in hosts]
        count = validate_count(settings.count if count is None else count)
    except ValueError as e:
        return f"Error: {e}"

    token = CancellationToken()
    token.cancel_after(settings.command_timeout)
    try:
        runner: AsyncPinger = get_runner()
        outcome = await runner.run_many_async(validated, token, count=count)
    finally:
        token.cancel()

    if outcome.cancelled:
        logger.warning("ping_hosts over %d host(s) timed out after %ds", len(validated), settings.command_timeout)
        return _format_timeout(f"ping of {len(validated)} host(s)", settings.command_timeout)

    result = outcome.unwrap()
    replies = len(result.success_lines())
    summary = f"─── {replies} replies from {len(validated)} host(s) ───"
    return f"{_format_result(result)}\n{summary}"
