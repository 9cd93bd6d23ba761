"""Prediction provider contract.

Providers don't inherit anything: any object matching `Predictor` can be
registered in a `PredictorRegistry`.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ..models import PredictionContext

__all__ = ["Predictor"]


@runtime_checkable
class Predictor(Protocol):
    """What the host shell expects from a prediction provider."""

    id: uuid.UUID
    name: str
    description: str
    support_early_processing: bool
    accept_feedback: bool

    async def get_suggestion(self, context: PredictionContext, cancel: asyncio.Event | None = None) -> list[str] | None:
        """Return the suggestions for `context`.

        Args:
            context: The line being edited
            cancel: Set by the host when the answer is no longer needed

        Returns:
            The suggestions, or None when the provider does not apply to `context`
        """
        ...

    def early_process_with_history(self, history: Sequence[str]) -> None:
        """Receive the command history before the first request."""
        ...

    def last_suggestion_accepted(self, accepted_suggestion: str) -> None:
        """The user accepted `accepted_suggestion`."""
        ...

    def last_suggestion_denied(self) -> None:
        """The user ignored the last suggestion."""
        ...
