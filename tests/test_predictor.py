"""Tests for the bash predictor and the registry."""

import asyncio
import uuid

import pytest

from unixcompleters.completions.engine import CompletionEngine
from unixcompleters.config import Configuration
from unixcompleters.constants import PREDICTOR_ID
from unixcompleters.models import CompletionError, PredictionContext
from unixcompleters.predictors import BashUtilPredictor, Predictor, PredictorRegistry


@pytest.fixture
def predictor(fake_bash):
    fake_bash.on("_longopt", "--all\n--almost-all\n--all\n")
    return BashUtilPredictor(CompletionEngine(Configuration(), run_script=fake_bash))


def test_is_a_predictor(predictor):
    assert isinstance(predictor, Predictor)
    assert predictor.id == uuid.UUID(PREDICTOR_ID)
    assert not predictor.support_early_processing
    assert not predictor.accept_feedback


def test_feedback_is_ignored(predictor):
    predictor.early_process_with_history(["ls -la"])
    predictor.last_suggestion_accepted("--all")
    predictor.last_suggestion_denied()


@pytest.mark.asyncio
async def test_suggestions(predictor, fake_bash):
    result = await predictor.get_suggestion(PredictionContext.from_line("ls --al"))
    assert result == ["--all", "--almost-all"]
    assert "_longopt 'ls' '--al' 'ls'" in fake_bash.scripts[-1]


@pytest.mark.asyncio
async def test_unknown_command_is_not_applicable(predictor, fake_bash):
    assert await predictor.get_suggestion(PredictionContext.from_line("frobnicate --x")) is None
    assert fake_bash.call_count == 0


@pytest.mark.asyncio
async def test_empty_line_is_not_applicable(predictor):
    assert await predictor.get_suggestion(PredictionContext.from_line("")) is None
    assert await predictor.get_suggestion(PredictionContext.from_line("ls -a; ")) is None


@pytest.mark.asyncio
async def test_expression_command_is_not_applicable(predictor):
    assert await predictor.get_suggestion(PredictionContext.from_line("$cmd -a")) is None


@pytest.mark.asyncio
async def test_right_after_command_name(predictor, fake_bash):
    result = await predictor.get_suggestion(PredictionContext.from_line("ls"))
    assert result == ["--all", "--almost-all"]
    script = fake_bash.scripts[-1]
    assert "COMP_LINE='ls '" in script
    assert "COMP_WORDS=('ls' '')" in script
    assert "COMP_CWORD=1" in script
    assert "COMP_POINT=3" in script
    assert "_longopt 'ls' '' 'ls'" in script


@pytest.mark.asyncio
async def test_after_trailing_space(predictor, fake_bash):
    await predictor.get_suggestion(PredictionContext.from_line("ls -a "))
    script = fake_bash.scripts[-1]
    assert "COMP_WORDS=('ls' '-a' '')" in script
    assert "COMP_CWORD=2" in script
    assert "_longopt 'ls' '' '-a'" in script


@pytest.mark.asyncio
async def test_second_command_of_a_line(predictor, fake_bash):
    await predictor.get_suggestion(PredictionContext.from_line("cd /tmp && ls -"))
    script = fake_bash.scripts[-1]
    assert "COMP_LINE='ls -'" in script
    assert "COMP_POINT=4" in script


@pytest.mark.asyncio
async def test_cancelled_before_call(predictor, fake_bash):
    cancel = asyncio.Event()
    cancel.set()
    assert await predictor.get_suggestion(PredictionContext.from_line("ls -"), cancel) == []
    assert fake_bash.call_count == 0


@pytest.mark.asyncio
async def test_registry(predictor):
    registry = PredictorRegistry()
    registry.register(predictor)
    assert len(registry) == 1
    assert registry.get(predictor.id) is predictor
    assert list(registry) == [predictor]

    with pytest.raises(CompletionError, match="already registered"):
        registry.register(predictor)

    answers = await registry.get_suggestions(PredictionContext.from_line("ls --al"))
    assert answers == {predictor.id: ["--all", "--almost-all"]}
    assert await registry.get_suggestions(PredictionContext.from_line("nope ")) == {}

    assert registry.unregister(predictor.id) is predictor
    assert len(registry) == 0


class BrokenPredictor:
    "Fails every request"

    id = uuid.UUID("00000000-0000-0000-0000-000000000001")
    name = "broken"
    description = "always raises"
    support_early_processing = False
    accept_feedback = False

    async def get_suggestion(self, context, cancel=None):
        raise RuntimeError("boom")

    def early_process_with_history(self, history):
        pass

    def last_suggestion_accepted(self, accepted_suggestion):
        pass

    def last_suggestion_denied(self):
        pass


@pytest.mark.asyncio
async def test_registry_skips_failing_predictor(predictor):
    registry = PredictorRegistry()
    registry.register(BrokenPredictor())
    registry.register(predictor)

    answers = await registry.get_suggestions(PredictionContext.from_line("ls --al"))
    assert answers == {predictor.id: ["--all", "--almost-all"]}


def test_registry_rejects_non_predictors():
    with pytest.raises(CompletionError, match="not a predictor"):
        PredictorRegistry().register(object())
