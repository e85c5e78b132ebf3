"""Response-style intent resolution for admitted messages."""

from __future__ import annotations

from loguru import logger

from gamebot.core.models import ClassifierPrediction, IntentLabel
from gamebot.core.ports import TextClassifier

DEFAULT_INTENT_THRESHOLD = 0.55


def resolve_intent(prediction: ClassifierPrediction | None, threshold: float = DEFAULT_INTENT_THRESHOLD) -> IntentLabel:
    """Fold a raw prediction into a payload-safe intent.

    Anything that is not a confidently predicted in-domain intent becomes
    ``INFO``. A negative confidence means the backend is uncalibrated, so the
    label alone decides.
    """
    if prediction is None or not prediction.label.strip():
        return IntentLabel.INFO

    label = IntentLabel.from_model_label(prediction.label)
    if not label.is_in_domain:
        return IntentLabel.INFO
    if not prediction.is_calibrated:
        return label
    if prediction.confidence >= threshold:
        return label
    return IntentLabel.INFO


class IntentClassifier:
    """Wraps a text classifier; failures degrade to ``None`` and never raise."""

    def __init__(self, classifier: TextClassifier | None, threshold: float = DEFAULT_INTENT_THRESHOLD):
        self._classifier = classifier
        self._threshold = threshold

    def predict(self, text: str) -> ClassifierPrediction | None:
        if self._classifier is None:
            return None
        try:
            prediction = self._classifier.predict(text)
        except Exception as e:
            logger.debug("intent_classifier_unavailable error={}", e)
            return None
        if prediction is None or not prediction.label.strip():
            return None
        return prediction

    def resolve(self, text: str) -> IntentLabel:
        prediction = self.predict(text)
        intent = resolve_intent(prediction, self._threshold)
        if prediction is not None:
            logger.debug(
                "intent label={} confidence={:.2f} resolved={}",
                prediction.label,
                prediction.confidence,
                intent.value,
            )
        return intent
