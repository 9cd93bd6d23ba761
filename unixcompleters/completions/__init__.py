"""Bash completion bridge.

Reuses the completion functions bash defines (through the bash-completion
package) to complete the arguments of native utilities:

- resolver: which function completes a command, memoized per command
- script: the bash scripts reproducing the completion environment
- engine: runs them and normalizes the candidates
"""

from __future__ import annotations

from .engine import CompletionEngine, parse_candidates
from .invoker import BashInvoker
from .resolver import CompleterFunctionCache, CompleterFunctionResolver
from .script import (
    CompletionContext,
    build_comp_words_array,
    build_completion_script,
    build_resolver_script,
    cursor_word_index,
    extract_completer_function,
    quote_word,
)

__all__ = [
    "BashInvoker",
    "CompleterFunctionCache",
    "CompleterFunctionResolver",
    "CompletionContext",
    "CompletionEngine",
    "build_comp_words_array",
    "build_completion_script",
    "build_resolver_script",
    "cursor_word_index",
    "extract_completer_function",
    "parse_candidates",
    "quote_word",
]
