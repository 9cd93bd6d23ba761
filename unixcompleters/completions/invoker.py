"""Runs completion scripts with bash."""

from __future__ import annotations

import asyncio

from ..config import Configuration
from ..logging_setup import get_logger
from ..process import run_interpreter

__all__ = ["BashInvoker"]


class BashInvoker:
    """Run a script with the configured bash, non-interactively, within the configured timeout."""

    def __init__(self, config: Configuration) -> None:
        self.config = config
        self.log = get_logger("completions.invoker")

    async def __call__(self, script: str, cancel: asyncio.Event | None = None) -> str:
        """Run `script` and return its stdout.

        Raises:
            InterpreterError: If bash fails, times out or is cancelled
        """
        self.log.debug("%s %s %s", self.config.bash_path, self.config.bash_flags, script)
        return await run_interpreter(
            self.config.bash_path,
            self.config.bash_flags,
            script,
            timeout=self.config.timeout,
            graceful_timeout=self.config.graceful_timeout,
            cancel=cancel,
        )
