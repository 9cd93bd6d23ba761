"""Bash scripts reproducing the programmable-completion environment.

Bash calls a completion function with three arguments (command, word being
completed, previous word) and four variables describing the line:

- COMP_LINE: the current command line
- COMP_WORDS: the line split into words
- COMP_CWORD: index in COMP_WORDS of the word holding the cursor
- COMP_POINT: cursor position inside COMP_LINE

The function leaves its candidates in COMPREPLY. The scripts built here set
those variables from the host shell's command, call the function, then print
COMPREPLY one candidate per line.
"""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..constants import BASH_COMPLETION_SCRIPT
from ..models import CompletionError

if TYPE_CHECKING:
    from ..models import CommandAst

__all__ = [
    "CompletionContext",
    "build_comp_words_array",
    "build_completion_script",
    "build_resolver_script",
    "cursor_word_index",
    "extract_completer_function",
    "quote_word",
]

# `complete -p <cmd>` prints lines such as:
#   complete -F _longopt ls
#   complete -o bashdefault -o default -F _comp_complete_longopt ls
_COMPLETE_SPEC = re.compile(r"""^complete\b.*?\s-F\s+(?P<function>[^\s;|&<>()$`'"\\]+)""")


def quote_word(word: str) -> str:
    """Quote `word` for bash.

    Plain words are single-quoted. Words holding a quote or a backslash use
    ANSI-C quoting ($'...') where both are escaped with a backslash.
    """
    if "'" in word or "\\" in word:
        escaped = word.replace("\\", "\\\\").replace("'", "\\'")
        return f"$'{escaped}'"
    return f"'{word}'"


def build_comp_words_array(line: str, cursor_at_end: bool) -> str:
    """Build the COMP_WORDS array literal for `line`, eg: "('ls' '-a')".

    When the cursor is not right at the end of the last word, an empty word
    is appended for the argument being typed.
    """
    words = [quote_word(word) for word in line.split()]
    if not cursor_at_end:
        words.append("''")
    return "(" + " ".join(words) + ")"


def cursor_word_index(element_count: int, cursor_at_end: bool) -> int:
    """Return COMP_CWORD: the last element when the cursor ends it, else the next (new) one."""
    return element_count - 1 if cursor_at_end else element_count


def build_completion_script(  # noqa: PLR0913
    command: str,
    comp_line: str,
    comp_words: str,
    comp_cword: int,
    comp_point: int,
    completer_function: str,
    word_to_complete: str,
    previous_word: str,
    completion_script: str = BASH_COMPLETION_SCRIPT,
    ignore_case: bool = True,
) -> str:
    """Build the script running `completer_function` and printing its candidates.

    Args:
        command: The command being completed
        comp_line: COMP_LINE value, already quoted
        comp_words: COMP_WORDS array literal
        comp_cword: COMP_CWORD value
        comp_point: COMP_POINT value
        completer_function: The completion function registered for `command`
        word_to_complete: The word under the cursor (maybe empty)
        previous_word: The word before the one under the cursor
        completion_script: The bash-completion definitions to source
        ignore_case: Whether to match candidates regardless of case

    Returns:
        The script text, to be run by `bash -c`
    """
    command_word = shlex.quote(command)
    statements = [
        f". {shlex.quote(completion_script)} 2>/dev/null",
        f"_completion_loader {command_word} 2>/dev/null",
        f"COMP_LINE={comp_line}",
        f"COMP_WORDS={comp_words}",
        f"COMP_CWORD={comp_cword}",
        f"COMP_POINT={comp_point}",
    ]
    if ignore_case:
        statements.append("bind 'set completion-ignore-case on' 2>/dev/null")
    statements.extend(
        [
            f"{completer_function} {quote_word(command)} {quote_word(word_to_complete)} {quote_word(previous_word)} 2>/dev/null",
            # newline separated, an empty COMPREPLY prints an empty line
            "IFS=$'\\n'",
            "printf '%s\\n' \"${COMPREPLY[*]}\"",
        ]
    )
    return "; ".join(statements)


def build_resolver_script(command: str, completion_script: str = BASH_COMPLETION_SCRIPT) -> str:
    """Build the script printing the completion spec registered for `command`.

    Loads bash-completion and the deferred definition for `command` first.
    """
    command_word = shlex.quote(command)
    return "; ".join(
        [
            f". {shlex.quote(completion_script)} 2>/dev/null",
            f"_completion_loader {command_word} 2>/dev/null",
            f"complete -p {command_word} 2>/dev/null",
        ]
    )


def extract_completer_function(output: str) -> str:
    """Extract the function name from `complete -p` output.

    Expects lines like "complete -o default -F _longopt ls".

    Returns:
        The function name given to -F, or "" if no line has one
    """
    for line in output.splitlines():
        match = _COMPLETE_SPEC.match(line.strip())
        if match:
            return match.group("function")
    return ""


@dataclass(frozen=True)
class CompletionContext:
    """The command line as the completion function must see it.

    `cursor_offset` (COMP_POINT) is relative to the start of the command so
    that it indexes COMP_LINE; it equals the absolute offset when the command
    starts the line.
    """

    command: str
    line: str
    elements: tuple[str, ...]
    cursor_offset: int
    word_to_complete: str
    previous_word: str
    cursor_at_end: bool

    @classmethod
    def from_ast(cls, command: str, command_ast: CommandAst, cursor_offset: int, word_to_complete: str) -> CompletionContext:
        """Derive the context from the host's command.

        Args:
            command: The command name
            command_ast: The parsed command
            cursor_offset: Absolute cursor position
            word_to_complete: The word under the cursor (maybe empty)

        Raises:
            CompletionError: If the cursor is on the command name, which has no previous word
        """
        elements = tuple(element.extent.text for element in command_ast.elements)
        cursor_at_end = cursor_offset == command_ast.extent.end_offset
        index = cursor_word_index(len(elements), cursor_at_end)
        if index <= 0:
            msg = f"No previous word: the cursor is on the command name {command!r}"
            raise CompletionError(msg)
        return cls(
            command=command,
            line=command_ast.extent.text,
            elements=elements,
            cursor_offset=cursor_offset - command_ast.extent.start_offset,
            word_to_complete=word_to_complete,
            previous_word=elements[index - 1],
            cursor_at_end=cursor_at_end,
        )

    @property
    def cursor_word_index(self) -> int:
        return cursor_word_index(len(self.elements), self.cursor_at_end)

    @property
    def comp_line(self) -> str:
        return quote_word(self.line if self.cursor_at_end else self.line + " ")

    @property
    def comp_words(self) -> str:
        return build_comp_words_array(self.line, self.cursor_at_end)

    def to_script(self, completer_function: str, completion_script: str = BASH_COMPLETION_SCRIPT, ignore_case: bool = True) -> str:
        """Build the completion script calling `completer_function` in this context."""
        return build_completion_script(
            self.command,
            comp_line=self.comp_line,
            comp_words=self.comp_words,
            comp_cword=self.cursor_word_index,
            comp_point=self.cursor_offset,
            completer_function=completer_function,
            word_to_complete=self.word_to_complete,
            previous_word=self.previous_word,
            completion_script=completion_script,
            ignore_case=ignore_case,
        )
