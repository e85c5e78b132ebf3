"""In-process keyword classifiers.

Reference backends for the CLI and tests. They are vocabulary heuristics, not
trained models: the domain classifier reports full confidence, the intent
classifier reports the uncalibrated sentinel so only its label is trusted.
"""

from __future__ import annotations

import re

from gamebot.core.models import ClassifierPrediction, IntentLabel
from gamebot.gate.rules import MatchText, looks_in_domain

_RECOMMEND = re.compile(
    r"\b(recommend\w*|suggest\w*|similar to|games? like|what should i play|best \w+ games?)\b"
    r"|추천|비슷한|할만한|할 만한|おすすめ|似てる"
)
_GUIDE = re.compile(
    r"\b(how (do|to|can)|guide|walkthrough|build|beat|defeat|clear|farm(ing)?|rotation|tips?)\b"
    r"|공략|육성|빌드|세팅|깨는|잡는|하는 법|방법|攻略|育成|ビルド|倒し方"
)


class KeywordDomainClassifier:
    """Labels a message ``game`` when it uses game vocabulary, else ``non_game``."""

    def __init__(self, domain_label: str = "game", other_label: str = "non_game"):
        self._domain_label = domain_label
        self._other_label = other_label

    def predict(self, text: str) -> ClassifierPrediction | None:
        norm = MatchText.of(text)
        if not norm.lowered:
            return None
        label = self._domain_label if looks_in_domain(norm) else self._other_label
        return ClassifierPrediction(label=label, confidence=1.0)


class KeywordIntentClassifier:
    """Guesses guide / recommend / info from phrasing."""

    def predict(self, text: str) -> ClassifierPrediction | None:
        lowered = MatchText.of(text).lowered
        if not lowered:
            return None
        if _RECOMMEND.search(lowered):
            label = IntentLabel.RECOMMEND
        elif _GUIDE.search(lowered):
            label = IntentLabel.GUIDE
        else:
            label = IntentLabel.INFO
        return ClassifierPrediction(label=label.value, confidence=-1.0)
