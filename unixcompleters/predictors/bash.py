"""Predictor completing native utilities with their bash completion functions."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Sequence

from ..completions import CompletionEngine
from ..constants import PREDICTOR_DESCRIPTION, PREDICTOR_ID, PREDICTOR_NAME
from ..logging_setup import get_logger
from ..models import PredictionContext
from ..utils import NATIVE_UTIL_NAMES

__all__ = ["BashUtilPredictor"]


class BashUtilPredictor:
    """Suggests arguments for the native utilities in `known_commands`."""

    support_early_processing = False
    accept_feedback = False

    def __init__(self, engine: CompletionEngine, known_commands: frozenset[str] = NATIVE_UTIL_NAMES) -> None:
        self.id = uuid.UUID(PREDICTOR_ID)
        self.name = PREDICTOR_NAME
        self.description = PREDICTOR_DESCRIPTION
        self.engine = engine
        self.known_commands = known_commands
        self.log = get_logger("predictor.bash")

    async def get_suggestion(self, context: PredictionContext, cancel: asyncio.Event | None = None) -> list[str] | None:
        """Return the candidates for the argument under the cursor.

        Returns None when the cursor is not on an argument of a known utility,
        and no candidates when `cancel` is already set.
        """
        command_ast = context.command_ast
        if command_ast is None or context.related_element is None:
            return None

        command = command_ast.command_name
        if command is None or command not in self.known_commands:
            return None

        if cancel is not None and cancel.is_set():
            return []

        cursor_offset = context.cursor_offset
        word_at_cursor = context.token_at_cursor or ""
        if len(command_ast.elements) == 1 and cursor_offset == command_ast.extent.end_offset:
            # Right after the command name: complete the first argument, not the name
            cursor_offset += 1
            word_at_cursor = ""

        self.log.debug("Completing %r at %d", word_at_cursor, cursor_offset)
        return await self.engine.complete_command(command, word_at_cursor, command_ast, cursor_offset, cancel=cancel)

    def early_process_with_history(self, history: Sequence[str]) -> None:
        pass

    def last_suggestion_accepted(self, accepted_suggestion: str) -> None:
        pass

    def last_suggestion_denied(self) -> None:
        pass
