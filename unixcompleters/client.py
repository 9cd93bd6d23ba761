"""The unixcomplete command: print bash completions for a command line."""

from __future__ import annotations

import argparse
import asyncio
import sys

import questionary
import shtab

from .completions import CompletionEngine
from .config import load_configuration
from .logging_setup import get_logger, init_logger
from .models import CompletionError, ConfigError, ExitCode, PredictionContext
from .predictors import BashUtilPredictor
from .version import VERSION

__all__ = ["complete_line", "get_parser", "main", "run_client"]

TOML_FILE = {
    "bash": "_shtab_greeter_compgen_TOMLFiles",
    "zsh": "_files -g '(*.toml|*.TOML)'",
    "tcsh": "f:*.toml",
}

PREAMBLE = {
    "bash": """
# $1=COMP_WORDS[1]
_shtab_greeter_compgen_TOMLFiles() {
  compgen -d -- $1  # recurse into subdirs
  compgen -f -X '!*?.toml' -- $1
  compgen -f -X '!*?.TOML' -- $1
}
""",
    "zsh": "",
    "tcsh": "",
}


def get_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="unixcomplete",
        description="Complete a command line using bash completion functions",
        allow_abbrev=False,
    )
    parser.add_argument("line", help="The command line to complete")
    parser.add_argument("--cursor", type=int, help="Cursor position in LINE (default: end of line)")
    parser.add_argument(
        "--debug",
        help="Enable debug mode and log to a file",
        metavar="filename",
    ).complete = shtab.FILE
    parser.add_argument(
        "--config",
        help="Use a different configuration file",
        metavar="filename",
    ).complete = TOML_FILE
    parser.add_argument("--bash", dest="bash_path", help="The bash executable", metavar="path").complete = shtab.FILE
    parser.add_argument("--timeout", type=float, help="Seconds allowed per bash invocation")
    parser.add_argument("--pick", action="store_true", help="Choose a candidate and print the completed line")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    shtab.add_argument_to(parser, preamble=PREAMBLE)
    return parser


def complete_line(context: PredictionContext, candidate: str) -> str:
    """Return the line of `context` with the word under the cursor replaced by `candidate`."""
    line = context.line
    element = context.related_element
    command_ast = context.command_ast
    if command_ast is not None and len(command_ast.elements) == 1 and context.cursor_offset == command_ast.extent.end_offset:
        # The candidate is the first argument, not a replacement for the command name
        element = None
    if element is None or context.token_at_cursor is None:
        prefix = line[: context.cursor_offset]
        if prefix and not prefix[-1].isspace():
            prefix += " "
        return prefix + candidate + line[context.cursor_offset :]
    return line[: element.extent.start_offset] + candidate + line[element.extent.end_offset :]


async def run_client(argv: list[str] | None = None) -> int:
    """Run the client, return the exit code."""
    args = get_parser().parse_args(argv)
    init_logger(args.debug, force_debug=bool(args.debug))
    log = get_logger()

    try:
        config = await load_configuration(args.config, bash_path=args.bash_path, timeout=args.timeout)
    except ConfigError as e:
        log.critical("%s", e)
        return ExitCode.CONFIG_ERROR
    try:
        context = PredictionContext.from_line(args.line, args.cursor)
    except CompletionError as e:
        log.critical("%s", e)
        return ExitCode.USAGE_ERROR

    engine = CompletionEngine(config)
    await engine.check_environment()
    predictor = BashUtilPredictor(engine)
    candidates = await predictor.get_suggestion(context)
    if candidates is None:
        log.warning("Nothing to complete here")
        return ExitCode.NOT_APPLICABLE

    if args.pick:
        if not candidates:
            return ExitCode.SUCCESS
        choice = await questionary.select("Completion:", choices=candidates).ask_async()
        if choice is None:
            return ExitCode.USAGE_ERROR
        print(complete_line(context, choice))
        return ExitCode.SUCCESS

    for candidate in candidates:
        print(candidate)
    return ExitCode.SUCCESS


def main() -> None:
    """Entry point."""
    try:
        sys.exit(asyncio.run(run_client()))
    except KeyboardInterrupt:
        sys.exit(ExitCode.USAGE_ERROR)
