"""Text classifier adapters."""

from gamebot.classifiers.adapter import CallableClassifier
from gamebot.classifiers.intent import IntentClassifier, resolve_intent
from gamebot.classifiers.keyword import KeywordDomainClassifier, KeywordIntentClassifier

__all__ = [
    "CallableClassifier",
    "IntentClassifier",
    "KeywordDomainClassifier",
    "KeywordIntentClassifier",
    "resolve_intent",
]
