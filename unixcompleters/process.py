"""Bounded, cancellable subprocess execution.

InterpreterProcess:
    Runs one external interpreter invocation in its own process group and
    collects its stdout. Stopping it signals the whole group
    (SIGTERM -> wait -> SIGKILL) so that children of the interpreter go too.

run_interpreter:
    One-shot helper: start, collect stdout within a deadline, decode.
"""

from __future__ import annotations

__all__ = ["InterpreterProcess", "run_interpreter"]

import asyncio
import contextlib
import os
import signal

from .constants import DEFAULT_GRACEFUL_TIMEOUT, DEFAULT_TIMEOUT
from .logging_setup import get_logger
from .models import InterpreterCancelled, InterpreterError, InterpreterTimeout


class InterpreterProcess:
    """A single interpreter invocation with stdout captured.

    Usage:
        proc = InterpreterProcess()
        await proc.start("bash", "-c", "echo hello")
        output = await proc.communicate(timeout=2.0)
    """

    def __init__(self, graceful_timeout: float = DEFAULT_GRACEFUL_TIMEOUT) -> None:
        """Initialize.

        Args:
            graceful_timeout: Seconds to wait after SIGTERM before SIGKILL
        """
        self._proc: asyncio.subprocess.Process | None = None
        self._graceful_timeout = graceful_timeout

    @property
    def pid(self) -> int | None:
        """Return PID if process exists, else None."""
        return self._proc.pid if self._proc else None

    @property
    def returncode(self) -> int | None:
        """Return exit code if process exited, else None."""
        return self._proc.returncode if self._proc else None

    @property
    def is_alive(self) -> bool:
        """Check if process is currently running."""
        return self._proc is not None and self._proc.returncode is None

    async def start(self, program: str, *args: str) -> None:
        """Start `program` with `args` in a new session, stdout piped.

        Raises:
            InterpreterError: If the program cannot be started
        """
        if self.is_alive:
            await self.stop()
        try:
            self._proc = await asyncio.create_subprocess_exec(
                program,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
                start_new_session=True,
            )
        except (OSError, ValueError) as e:
            # ValueError: NUL character in an argument
            msg = f"Cannot run {program}: {e}"
            raise InterpreterError(msg) from e

    def _signal_group(self, sig: signal.Signals) -> None:
        assert self._proc is not None
        with contextlib.suppress(ProcessLookupError, PermissionError):
            os.killpg(self._proc.pid, sig)

    async def stop(self) -> int | None:
        """Stop the process group.

        Returns:
            The process return code, or None if not running
        """
        if self._proc is None:
            return None

        if self._proc.returncode is not None:
            # Reaped already, children may still hold the group
            self._signal_group(signal.SIGKILL)
            return self._proc.returncode

        self._signal_group(signal.SIGTERM)
        try:
            await asyncio.wait_for(self._proc.wait(), timeout=self._graceful_timeout)
        except TimeoutError:
            self._signal_group(signal.SIGKILL)
            await self._proc.wait()
        self._signal_group(signal.SIGKILL)
        return self._proc.returncode

    async def communicate(self, timeout: float = DEFAULT_TIMEOUT, cancel: asyncio.Event | None = None) -> bytes:
        """Read stdout until the process exits.

        The read races against `timeout` and the optional `cancel` event; the
        process group is stopped when either wins. Cancelling the calling task
        stops the process group too, then propagates.

        Returns:
            The raw stdout

        Raises:
            RuntimeError: If the process was not started
            InterpreterTimeout: When `timeout` expires first
            InterpreterCancelled: When `cancel` is set first
            InterpreterError: When the process exits with a non-zero code
        """
        if self._proc is None:
            msg = "No process running"
            raise RuntimeError(msg)

        reader = asyncio.ensure_future(self._proc.communicate())
        waiters: set[asyncio.Future] = {reader}
        cancel_waiter = None
        if cancel is not None:
            cancel_waiter = asyncio.ensure_future(cancel.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            await self.stop()
            raise
        finally:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()

        if reader not in done:
            await self.stop()
            if cancel_waiter is not None and cancel_waiter in done:
                raise InterpreterCancelled("Cancelled")
            msg = f"No answer after {timeout}s"
            raise InterpreterTimeout(msg)

        stdout, _ = reader.result()
        if self._proc.returncode:
            msg = f"Exited with code {self._proc.returncode}"
            raise InterpreterError(msg)
        return stdout or b""


async def run_interpreter(
    program: str,
    *args: str,
    timeout: float = DEFAULT_TIMEOUT,
    graceful_timeout: float = DEFAULT_GRACEFUL_TIMEOUT,
    cancel: asyncio.Event | None = None,
) -> str:
    """Run `program` once and return its decoded stdout.

    Raises:
        InterpreterError: (or a subclass) on any failure, see InterpreterProcess.communicate
    """
    log = get_logger("process")
    proc = InterpreterProcess(graceful_timeout)
    await proc.start(program, *args)
    log.debug("Started %s (pid %s)", program, proc.pid)
    try:
        output = await proc.communicate(timeout, cancel)
    finally:
        # Lingering children of the interpreter
        await proc.stop()
    return output.decode("utf-8", errors="replace")
