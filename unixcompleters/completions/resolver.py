"""Completion function lookup, memoized per command."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator

from ..constants import BASH_COMPLETION_SCRIPT
from ..logging_setup import get_logger
from ..models import CompletionError, InterpreterCancelled, InterpreterError
from .script import build_resolver_script, extract_completer_function

__all__ = ["CompleterFunctionCache", "CompleterFunctionResolver", "ScriptRunner"]

ScriptRunner = Callable[..., Awaitable[str]]
" Runs a bash script, returns its stdout: `await runner(script, cancel=event)` "


class CompleterFunctionCache:
    """Command name -> completion function name ("" when none is known).

    Entries are never evicted. A lock per command lets concurrent lookups of
    the same command share a single resolution.
    """

    def __init__(self) -> None:
        self._functions: dict[str, str] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __contains__(self, command: str) -> bool:
        return command in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def get(self, command: str) -> str | None:
        """Return the cached function name, None if `command` was never resolved."""
        return self._functions.get(command)

    def set(self, command: str, function: str) -> None:
        self._functions[command] = function

    def lock_for(self, command: str) -> asyncio.Lock:
        """Return the lock guarding the resolution of `command`."""
        lock = self._locks.get(command)
        if lock is None:
            lock = self._locks[command] = asyncio.Lock()
        return lock


class CompleterFunctionResolver:
    """Finds which bash function completes a given command."""

    def __init__(
        self,
        run_script: ScriptRunner,
        cache: CompleterFunctionCache | None = None,
        completion_script: str = BASH_COMPLETION_SCRIPT,
    ) -> None:
        """Initialize.

        Args:
            run_script: Coroutine running a bash script and returning its stdout
            cache: The cache to fill, a new one if not set
            completion_script: The bash-completion definitions to source
        """
        self.run_script = run_script
        self.cache = cache if cache is not None else CompleterFunctionCache()
        self.completion_script = completion_script
        self.log = get_logger("completions.resolver")

    async def resolve(self, command: str, cancel: asyncio.Event | None = None) -> str:
        """Return the completion function registered for `command`.

        Bash runs at most once per command; failures are cached as "",
        cancelled lookups are not cached.

        Args:
            command: The command name
            cancel: Set to abort the bash invocation

        Raises:
            CompletionError: If `command` is empty
        """
        if not command:
            msg = "command name must not be empty"
            raise CompletionError(msg)

        cached = self.cache.get(command)
        if cached is not None:
            return cached

        async with self.cache.lock_for(command):
            cached = self.cache.get(command)
            if cached is not None:
                return cached

            script = build_resolver_script(command, self.completion_script)
            try:
                output = await self.run_script(script, cancel=cancel)
            except InterpreterCancelled:
                # Not cached: the next request resolves again
                return ""
            except InterpreterError as e:
                self.log.debug("Resolving the completer of %s failed: %s", command, e)
                output = ""
            function = extract_completer_function(output.strip())
            if function:
                self.log.debug("%s is completed by %s", command, function)
            else:
                self.log.debug("No completion function for %s", command)
            self.cache.set(command, function)
            return function
