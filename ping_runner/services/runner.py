"""Runner for the host's ping tool.

Offers one launch-and-capture sequence in several shapes:

- ``run``: blocking on the caller's thread
- ``run_task_async``: offloaded to a worker pool, returns a Future
- ``run_async``: asyncio coroutine honoring a CancellationToken
- ``run_many_async``: one concurrent invocation per host, outputs aggregated
- ``run_long_running_async``: streams stdout/stderr lines to callbacks

Each call owns its process and output buffer, so one runner can serve
concurrent calls without locking.
"""

import asyncio
import logging
import shlex
import subprocess
import sys
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from ping_runner.config import Settings
from ping_runner.errors import (
    PingCancelledError,
    PingCaptureError,
    PingLaunchError,
)
from ping_runner.models import (
    PingOutcome,
    PingResult,
    ProcessStartInfo,
    split_arguments,
)
from ping_runner.services.cancellation import CancellationToken

logger = logging.getLogger(__name__)

LineHandler = Callable[[str], None]


def count_flag() -> str:
    """Flag selecting the echo request count on this platform."""
    return "-n" if sys.platform.startswith("win") else "-c"


def _decode(data: bytes | None) -> str | None:
    if data is None:
        return None
    return data.decode("utf-8", errors="replace")


async def _read_line(stream: asyncio.StreamReader) -> bytes:
    """Read one line of any length, including its newline.

    Returns the trailing partial line at EOF, or ``b""`` once exhausted.
    """
    chunks: list[bytes] = []
    while True:
        try:
            chunks.append(await stream.readuntil(b"\n"))
            return b"".join(chunks)
        except asyncio.IncompleteReadError as e:
            chunks.append(e.partial)
            return b"".join(chunks)
        except asyncio.LimitOverrunError as e:
            # Line is longer than the reader's buffer limit
            chunks.append(await stream.readexactly(e.consumed))


async def _pump(
    stream: asyncio.StreamReader | None,
    handler: LineHandler | None,
    command: str,
) -> None:
    """Forward each line of ``stream`` to ``handler`` as it arrives."""
    if stream is None:
        return

    while True:
        try:
            raw = await _read_line(stream)
        except OSError as e:
            raise PingCaptureError(f"Failed to read output of {command!r}: {e}") from e
        if not raw:
            return
        if handler is not None:
            handler(raw.decode("utf-8", errors="replace").rstrip("\r\n"))


class ProcessRunner:
    """Launches the diagnostic tool and captures what it prints.

    Non-zero exit codes are normal results; only launch and capture
    failures are faults.

    Example:
        >>> with ProcessRunner() as runner:
        ...     exit_code, output = runner.run("-c 4 localhost")
    """

    def __init__(
        self,
        command: str | None = None,
        settings: Settings | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """Initialize runner.

        Args:
            command: Executable to launch. Defaults to ``settings.command``.
            settings: Runner settings. Defaults to built-in defaults.
            executor: Worker pool for ``run_task_async``. A private pool
                is created (and owned) when omitted.
        """
        self.settings = settings or Settings()
        self.command = command or self.settings.command
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="ping-runner",
        )

    def __enter__(self) -> "ProcessRunner":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the worker pool if this runner created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def _argv(self, arguments: str | Sequence[str]) -> list[str]:
        return [self.command, *split_arguments(arguments)]

    def run(self, arguments: str | Sequence[str]) -> PingResult:
        """Run the tool and block until it exits.

        Standard error is merged into the captured output, since the tool
        reports unknown hosts there.

        Raises:
            PingLaunchError: If the process cannot be started.
            PingCaptureError: If its output cannot be read.
        """
        argv = self._argv(arguments)
        logger.debug("Launching: %s", shlex.join(argv))

        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as e:
            logger.error("Failed to launch %s: %s", self.command, e)
            raise PingLaunchError(self.command, e.strerror or str(e)) from e

        with proc:
            try:
                stdout, _ = proc.communicate()
            except OSError as e:
                proc.kill()
                proc.wait()
                raise PingCaptureError(
                    f"Failed to read output of {self.command!r}: {e}"
                ) from e

        result = PingResult(exit_code=proc.returncode, std_output=_decode(stdout))
        logger.info("%s exited with code %d", shlex.join(argv), result.exit_code)
        return result

    def run_task_async(self, arguments: str | Sequence[str]) -> "Future[PingResult]":
        """Run the tool on the worker pool.

        Block with ``future.result()`` or await ``asyncio.wrap_future(future)``.
        Faults are raised from ``result()``, as with ``run``.
        """
        return self._executor.submit(self.run, arguments)

    async def run_async(
        self,
        arguments: str | Sequence[str],
        cancel_token: CancellationToken | None = None,
    ) -> PingOutcome:
        """Run the tool without blocking the event loop.

        A token cancelled before launch skips the launch entirely; one
        cancelled while waiting terminates and reaps the child. Either way
        the outcome is CANCELLED. Launch and capture faults come back as
        FAULTED outcomes.

        Cancelling the awaiting task also terminates the child, and then
        re-raises ``asyncio.CancelledError``.
        """
        if cancel_token is not None and cancel_token.cancelled:
            logger.info("Cancelled before launch: %s", self.command)
            return PingOutcome.from_cancellation()

        argv = self._argv(arguments)
        try:
            proc = await self._spawn(argv, stderr=asyncio.subprocess.STDOUT)
        except PingLaunchError as e:
            return PingOutcome.from_error(e)

        reader = asyncio.ensure_future(proc.communicate())
        try:
            finished = await self._wait_or_cancel(reader, cancel_token)
        except asyncio.CancelledError:
            await self._terminate(proc, reader)
            raise

        if not finished:
            logger.info("Cancelled while running: %s", shlex.join(argv))
            await self._terminate(proc, reader)
            return PingOutcome.from_cancellation()

        try:
            stdout, _ = reader.result()
        except OSError as e:
            await self._terminate(proc)
            return PingOutcome.from_error(
                PingCaptureError(f"Failed to read output of {self.command!r}: {e}")
            )

        result = PingResult(exit_code=proc.returncode, std_output=_decode(stdout))
        logger.info("%s exited with code %d", shlex.join(argv), result.exit_code)
        return PingOutcome.from_result(result)

    async def run_many_async(
        self,
        host_names: Sequence[str],
        cancel_token: CancellationToken | None = None,
        count: int | None = None,
    ) -> PingOutcome:
        """Ping every host concurrently and aggregate the outputs.

        One process per host, each sending ``count`` echo requests
        (``settings.count`` by default). Outputs are joined in request order
        once all have finished. The aggregate exit code is the first
        non-zero one, or 0.

        Raises:
            TypeError: If ``host_names`` is a single string.
            ValueError: If no host names are given.
        """
        if isinstance(host_names, str):
            raise TypeError("host_names must be a sequence of host names, not a string")
        hosts = list(host_names)
        if not hosts:
            raise ValueError("At least one host name is required")

        if cancel_token is not None and cancel_token.cancelled:
            logger.info("Cancelled before launch: %d host(s)", len(hosts))
            return PingOutcome.from_cancellation()

        flag = count_flag()
        per_host = str(self.settings.count if count is None else count)
        outcomes = await asyncio.gather(
            *(self.run_async([flag, per_host, host], cancel_token) for host in hosts)
        )

        errors = tuple(o.error for o in outcomes if o.error is not None)
        if any(o.cancelled for o in outcomes):
            return PingOutcome.from_cancellation(errors)
        if errors:
            return PingOutcome.from_error(errors[0], errors)

        results = [o.unwrap() for o in outcomes]
        exit_code = next((r.exit_code for r in results if r.exit_code != 0), 0)
        output = "".join(
            (r.std_output or "").rstrip("\r\n") + "\n" for r in results
        )

        succeeded = sum(1 for r in results if r.succeeded)
        logger.info(
            "Pinged %d host(s): %d succeeded, exit_code=%d",
            len(hosts),
            succeeded,
            exit_code,
        )
        return PingOutcome.from_result(PingResult(exit_code=exit_code, std_output=output))

    async def run_long_running_async(
        self,
        start_info: ProcessStartInfo,
        output_handler: LineHandler | None = None,
        error_handler: LineHandler | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> int:
        """Run a process, streaming each output line to a handler.

        Lines are delivered without their line ending, one handler call per
        line, as soon as they are read. Nothing is buffered for the caller.

        Returns:
            The exit code. On cancellation the process is terminated and the
            exit code of the terminated process is returned.

        Raises:
            PingCancelledError: If the token was cancelled before launch.
            PingLaunchError: If the process cannot be started.
            PingCaptureError: If an output stream cannot be read.
        """
        if cancel_token is not None and cancel_token.cancelled:
            raise PingCancelledError(f"Cancelled before launching {start_info.command!r}")

        proc = await self._spawn(
            start_info.argv(),
            stderr=asyncio.subprocess.PIPE,
            cwd=start_info.cwd,
            env=start_info.env,
        )

        streaming = asyncio.ensure_future(
            self._stream_until_exit(proc, start_info.command, output_handler, error_handler)
        )
        try:
            finished = await self._wait_or_cancel(streaming, cancel_token)
        except asyncio.CancelledError:
            await self._terminate(proc, streaming)
            raise

        if not finished:
            logger.warning("Terminating long-running %s on cancellation", start_info.command)
            await self._terminate(proc, streaming)
            return proc.returncode

        try:
            return streaming.result()
        except Exception:
            await self._terminate(proc)
            raise

    async def _stream_until_exit(
        self,
        proc: asyncio.subprocess.Process,
        command: str,
        output_handler: LineHandler | None,
        error_handler: LineHandler | None,
    ) -> int:
        pumps = [
            asyncio.ensure_future(_pump(proc.stdout, output_handler, command)),
            asyncio.ensure_future(_pump(proc.stderr, error_handler, command)),
        ]
        try:
            await asyncio.gather(*pumps)
        finally:
            for pump in pumps:
                pump.cancel()

        exit_code = await proc.wait()
        logger.info("%s exited with code %d", command, exit_code)
        return exit_code

    async def _spawn(
        self,
        argv: list[str],
        stderr: int,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
    ) -> asyncio.subprocess.Process:
        """Start a child process with piped stdout.

        Raises:
            PingLaunchError: If the OS refuses to start the process.
        """
        logger.debug("Launching: %s", shlex.join(argv))
        try:
            return await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=stderr,
                cwd=cwd,
                env=env,
            )
        except OSError as e:
            logger.error("Failed to launch %s: %s", argv[0], e)
            raise PingLaunchError(argv[0], e.strerror or str(e)) from e

    @staticmethod
    async def _wait_or_cancel(
        task: "asyncio.Future[object]",
        cancel_token: CancellationToken | None,
    ) -> bool:
        """Wait for ``task`` or cancellation, whichever comes first.

        Returns:
            True if ``task`` finished, False if cancellation won.
        """
        if cancel_token is None:
            await asyncio.wait({task})
            return True

        waiter = asyncio.ensure_future(cancel_token.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if not waiter.done():
                waiter.cancel()
        return task.done()

    async def _terminate(
        self,
        proc: asyncio.subprocess.Process,
        reader: "asyncio.Future[object] | None" = None,
    ) -> None:
        """Terminate and reap ``proc``; SIGKILL after the grace period."""
        if proc.returncode is None:
            try:
                proc.terminate()
            except ProcessLookupError:
                pass

            try:
                await asyncio.wait_for(proc.wait(), timeout=self.settings.terminate_grace)
            except TimeoutError:
                logger.warning(
                    "Process %d ignored SIGTERM for %.1fs, killing",
                    proc.pid,
                    self.settings.terminate_grace,
                )
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
                await proc.wait()

            logger.info("Terminated process %d (exit_code=%s)", proc.pid, proc.returncode)

        if reader is not None:
            if not reader.done():
                reader.cancel()
            await asyncio.gather(reader, return_exceptions=True)
