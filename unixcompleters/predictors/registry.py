"""Explicit registration of prediction providers."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Iterator

from ..logging_setup import get_logger
from ..models import CompletionError, PredictionContext
from .interface import Predictor

__all__ = ["PredictorRegistry"]


class PredictorRegistry:
    """Predictors by id, queried in registration order."""

    def __init__(self) -> None:
        self._predictors: dict[uuid.UUID, Predictor] = {}
        self.log = get_logger("predictors")

    def register(self, predictor: Predictor) -> None:
        """Add `predictor`.

        Raises:
            CompletionError: If it does not implement `Predictor` or its id is taken
        """
        if not isinstance(predictor, Predictor):
            msg = f"{predictor!r} is not a predictor"
            raise CompletionError(msg)
        if predictor.id in self._predictors:
            msg = f"A predictor is already registered with id {predictor.id}"
            raise CompletionError(msg)
        self._predictors[predictor.id] = predictor
        self.log.debug("Registered %s (%s)", predictor.name, predictor.id)

    def unregister(self, predictor_id: uuid.UUID) -> Predictor | None:
        """Remove and return the predictor registered as `predictor_id`."""
        return self._predictors.pop(predictor_id, None)

    def get(self, predictor_id: uuid.UUID) -> Predictor | None:
        return self._predictors.get(predictor_id)

    def __iter__(self) -> Iterator[Predictor]:
        return iter(list(self._predictors.values()))

    def __len__(self) -> int:
        return len(self._predictors)

    async def get_suggestions(self, context: PredictionContext, cancel: asyncio.Event | None = None) -> dict[uuid.UUID, list[str]]:
        """Ask every predictor, keeping the answers of those which apply to `context`.

        A predictor raising an exception is logged and left out.
        """
        predictors = list(self._predictors.values())
        answers = await asyncio.gather(*(predictor.get_suggestion(context, cancel) for predictor in predictors), return_exceptions=True)
        suggestions: dict[uuid.UUID, list[str]] = {}
        for predictor, answer in zip(predictors, answers, strict=True):
            if isinstance(answer, BaseException):
                self.log.error("%s failed: %r", predictor.name, answer)
            elif answer is not None:
                suggestions[predictor.id] = answer
        return suggestions
