"""Errors, exit codes and the host shell's command-line representation.

The host shell owns its parser; the types below only describe the shape
the completion engine consumes: a command made of elements, each with a
text span inside the whole input line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum

__all__ = [
    "CommandAst",
    "CommandElement",
    "CompletionError",
    "ConfigError",
    "ExitCode",
    "Extent",
    "InterpreterCancelled",
    "InterpreterError",
    "InterpreterTimeout",
    "PredictionContext",
]


class CompletionError(ValueError):
    """Invalid input passed to the completion engine."""


class ConfigError(CompletionError):
    """Invalid configuration value or file."""


class InterpreterError(Exception):
    """The external interpreter could not be run or exited with an error."""


class InterpreterTimeout(InterpreterError):
    """The external interpreter did not finish in time."""


class InterpreterCancelled(InterpreterError):
    """The request was cancelled while the external interpreter was running."""


class ExitCode(IntEnum):
    """Exit codes for the unixcomplete client."""

    SUCCESS = 0
    USAGE_ERROR = 1
    NOT_APPLICABLE = 2  # Not a known utility, or not an argument position
    CONFIG_ERROR = 3


# Characters which make a word something other than a plain constant
_NON_CONSTANT = re.compile(r"""[$`'"(){}\\]""")

# Statement / pipeline separators
_SEPARATORS = re.compile(r"[;|&]")

_WORD = re.compile(r"\S+")


@dataclass(frozen=True)
class Extent:
    """A span of source text with absolute offsets."""

    text: str
    start_offset: int
    end_offset: int


@dataclass(frozen=True)
class CommandElement:
    """One word of a command.

    `value` holds the constant string value, or None when the word is an expression
    (variable, sub-expression, quoted string...).
    """

    extent: Extent
    value: str | None = None

    @classmethod
    def from_word(cls, text: str, start_offset: int) -> CommandElement:
        """Create an element for `text` starting at `start_offset`."""
        value = None if _NON_CONSTANT.search(text) else text
        return cls(Extent(text, start_offset, start_offset + len(text)), value)


@dataclass(frozen=True)
class CommandAst:
    """A single command: its elements and the extent covering all of them."""

    elements: tuple[CommandElement, ...]
    extent: Extent

    @classmethod
    def parse(cls, text: str, offset: int = 0) -> CommandAst | None:
        """Split `text` on whitespace into a command.

        No quoting rules are applied; this is enough for plain utility invocations.

        Args:
            text: The command text
            offset: Absolute offset of `text` inside the whole input line

        Returns:
            The command, or None if `text` holds no word
        """
        elements = tuple(CommandElement.from_word(match.group(), offset + match.start()) for match in _WORD.finditer(text))
        if not elements:
            return None
        start = elements[0].extent.start_offset
        end = elements[-1].extent.end_offset
        return cls(elements, Extent(text[start - offset : end - offset], start, end))

    @property
    def command_name(self) -> str | None:
        """Constant value of the first element."""
        return self.elements[0].value


@dataclass(frozen=True)
class PredictionContext:
    """What the host shell knows about the line being edited."""

    line: str
    cursor_offset: int
    command_ast: CommandAst | None = None
    token_at_cursor: str | None = None
    related_element: CommandElement | None = field(default=None, compare=False)

    @classmethod
    def from_line(cls, line: str, cursor_offset: int | None = None) -> PredictionContext:
        """Build the context for `line` with the cursor at `cursor_offset` (end of line by default).

        Only the command containing the cursor is parsed: text after the last
        `;`, `|` or `&` before the cursor starts a new command.
        """
        if cursor_offset is None:
            cursor_offset = len(line)
        if not 0 <= cursor_offset <= len(line):
            msg = f"cursor offset {cursor_offset} outside of line (length {len(line)})"
            raise CompletionError(msg)

        start = 0
        for match in _SEPARATORS.finditer(line, 0, cursor_offset):
            start = match.end()
        separator = _SEPARATORS.search(line, cursor_offset)
        end = separator.start() if separator else len(line)

        command_ast = CommandAst.parse(line[start:end], start)
        if command_ast is None:
            return cls(line, cursor_offset)

        token = None
        related = None
        for element in command_ast.elements:
            if element.extent.start_offset > cursor_offset:
                break
            related = element
            if cursor_offset <= element.extent.end_offset:
                token = element.extent.text
        return cls(line, cursor_offset, command_ast, token, related)
