"""Adapter for plugging arbitrary prediction callables into the gate and intent layers."""

from __future__ import annotations

from collections.abc import Callable

from gamebot.core.errors import ClassifierUnavailable
from gamebot.core.models import ClassifierPrediction

type RawPrediction = tuple[str, float] | None


class CallableClassifier:
    """Wrap a ``text -> (label, confidence)`` function as a ``TextClassifier``.

    Any failure inside the function, or a malformed return value, surfaces as
    :class:`ClassifierUnavailable` so callers can degrade uniformly.
    """

    def __init__(self, fn: Callable[[str], RawPrediction], *, name: str = "callable"):
        self._fn = fn
        self.name = name

    def predict(self, text: str) -> ClassifierPrediction | None:
        try:
            result = self._fn(text)
        except Exception as e:
            raise ClassifierUnavailable(f"{self.name}: {e}") from e
        if result is None:
            return None
        try:
            label, confidence = result
            return ClassifierPrediction(label=str(label), confidence=float(confidence))
        except (TypeError, ValueError) as e:
            raise ClassifierUnavailable(f"{self.name}: malformed prediction {result!r}") from e
