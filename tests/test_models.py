"""Tests for the command line representation."""

import pytest

from unixcompleters.models import CommandAst, CompletionError, PredictionContext


def test_parse():
    ast = CommandAst.parse("  ls  -a ")
    assert [e.extent.text for e in ast.elements] == ["ls", "-a"]
    assert ast.extent.text == "ls  -a"
    assert (ast.extent.start_offset, ast.extent.end_offset) == (2, 8)
    assert ast.command_name == "ls"


def test_parse_with_offset():
    ast = CommandAst.parse("grep x", offset=7)
    assert ast.elements[1].extent.start_offset == 12
    assert ast.extent.end_offset == 13


def test_parse_empty():
    assert CommandAst.parse("   ") is None


def test_expression_values():
    ast = CommandAst.parse("$ls 'a b' plain")
    assert [e.value for e in ast.elements] == [None, None, None, "plain"]


def test_context_cursor_in_word():
    context = PredictionContext.from_line("ls --col", 6)
    assert context.token_at_cursor == "--col"
    assert context.related_element.extent.text == "--col"


def test_context_cursor_in_whitespace():
    context = PredictionContext.from_line("ls -a ")
    assert context.token_at_cursor is None
    assert context.related_element.extent.text == "-a"
    assert context.command_ast.extent.end_offset == 5


def test_context_picks_command_at_cursor():
    context = PredictionContext.from_line("ls -a | grep foo", 13)
    assert context.command_ast.command_name == "grep"
    assert context.command_ast.extent.start_offset == 8
    assert context.token_at_cursor == "foo"


def test_context_before_first_word():
    context = PredictionContext.from_line("  ls", 0)
    assert context.command_ast is not None
    assert context.related_element is None


def test_context_cursor_out_of_line():
    with pytest.raises(CompletionError):
        PredictionContext.from_line("ls", 5)
