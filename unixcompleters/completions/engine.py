"""Completion engine: resolve the function, run it, normalize its output."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from aiofiles import os as aios

from ..config import Configuration
from ..logging_setup import get_logger
from ..models import InterpreterCancelled, InterpreterError
from .invoker import BashInvoker
from .resolver import CompleterFunctionCache, CompleterFunctionResolver, ScriptRunner
from .script import CompletionContext, cursor_word_index

if TYPE_CHECKING:
    from ..models import CommandAst

__all__ = ["CompletionEngine", "parse_candidates"]


def parse_candidates(output: str) -> list[str]:
    """Turn the completion script output into a sorted list of unique candidates.

    Empty lines are dropped; the order is by code point, not locale.
    """
    return sorted({line for line in output.split("\n") if line})


class CompletionEngine:
    """Completes the arguments of a command using its bash completion function.

    Owns the completer function cache: one engine, one cache.
    """

    def __init__(
        self,
        config: Configuration | None = None,
        run_script: ScriptRunner | None = None,
    ) -> None:
        """Initialize.

        Args:
            config: Bash settings, defaults if not set
            run_script: Replaces the bash invocation (used for testing)
        """
        self.config = config or Configuration()
        self.log = get_logger("completions.engine")
        self.run_script: ScriptRunner = run_script or BashInvoker(self.config)
        self.cache = CompleterFunctionCache()
        self.resolver = CompleterFunctionResolver(self.run_script, self.cache, self.config.completion_script)

    async def check_environment(self) -> bool:
        """Check bash and bash-completion are installed, logging what is missing."""
        ok = True
        if not await aios.path.exists(self.config.completion_script):
            self.log.warning("bash-completion not found at %s, no command will be completed", self.config.completion_script)
            ok = False
        if not await aios.path.exists(self.config.bash_path):
            self.log.warning("bash not found at %s", self.config.bash_path)
            ok = False
        return ok

    async def complete_command(
        self,
        command: str,
        word_to_complete: str,
        command_ast: CommandAst,
        cursor_offset: int,
        cancel: asyncio.Event | None = None,
    ) -> list[str]:
        """Return the candidates for the word under the cursor.

        Args:
            command: The command name
            word_to_complete: The word under the cursor (maybe empty)
            command_ast: The parsed command
            cursor_offset: Absolute cursor position
            cancel: Set to abort the bash invocations

        Returns:
            Sorted, unique candidates; empty when anything fails
        """
        completer_function = await self.resolver.resolve(command, cancel=cancel)
        if not completer_function:
            return []

        cursor_at_end = cursor_offset == command_ast.extent.end_offset
        if cursor_word_index(len(command_ast.elements), cursor_at_end) == 0:
            self.log.debug("Cursor on the command name, nothing to complete")
            return []

        context = CompletionContext.from_ast(command, command_ast, cursor_offset, word_to_complete)
        script = context.to_script(
            completer_function,
            completion_script=self.config.completion_script,
            ignore_case=self.config.ignore_case,
        )
        try:
            output = await self.run_script(script, cancel=cancel)
        except InterpreterCancelled:
            self.log.debug("Completion of %s cancelled", command)
            return []
        except InterpreterError as e:
            self.log.warning("Completion of %s failed: %s", command, e)
            return []
        return parse_candidates(output)
