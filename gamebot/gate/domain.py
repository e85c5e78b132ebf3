"""Domain admission gate."""

from __future__ import annotations

import random

from loguru import logger

from gamebot.config.schema import GateConfig
from gamebot.core.models import Allow, Block, BlockReason, GateDecision
from gamebot.core.ports import TextClassifier
from gamebot.gate.rules import MatchText, check_safety, looks_in_domain

NON_DOMAIN_REPLY = (
    "죄송하지만, 저는 **비디오 게임 관련 질문(공략/추천/설정 등)**에만 답변할 수 있어요. "
    "게임 질문으로 다시 부탁드릴게요!"
)
INJECTION_REPLY = "요청하신 내용은 안전/보안상 응답할 수 없어요. 대신 **게임 관련 질문**이라면 바로 도와드릴게요!"
SECRET_REPLY = (
    "보안상 **키/토큰/비밀번호 등 민감정보**는 제공하거나 처리할 수 없어요. 게임 관련 질문으로 부탁드릴게요!"
)
PROFANITY_REPLY = "거친 표현은 제외하고 다시 말해주시면, **게임 관련 내용**은 최대한 도와드릴게요."

BLOCK_REPLIES: dict[BlockReason, str] = {
    BlockReason.NON_DOMAIN: NON_DOMAIN_REPLY,
    BlockReason.PROMPT_INJECTION: INJECTION_REPLY,
    BlockReason.SECRET_REQUEST: SECRET_REPLY,
    BlockReason.PROFANITY: PROFANITY_REPLY,
}


class DomainGate:
    """Binary admission filter in front of the remote assistant.

    Order: empty check, safety rules (block only), optional keyword
    admission, then the classifier. Only an in-domain label at or above the
    confidence threshold admits; a missing or failing classifier blocks.
    """

    def __init__(
        self,
        classifier: TextClassifier | None,
        config: GateConfig | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._classifier = classifier
        self._config = config or GateConfig()
        self._rng = rng or random.Random()

    def evaluate(self, text: str) -> GateDecision:
        stripped = (text or "").strip()
        if not stripped:
            return self._block(BlockReason.NON_DOMAIN)

        norm = MatchText.of(stripped)
        if self._config.safety_rules:
            reason = check_safety(norm)
            if reason is not None:
                return self._block(reason)

        if self._config.keyword_admission and looks_in_domain(norm):
            logger.debug("gate_allow source=keyword")
            return Allow()

        if self._classifier_admits(stripped):
            return Allow()
        return self._block(BlockReason.NON_DOMAIN)

    def _classifier_admits(self, text: str) -> bool:
        if self._classifier is None:
            return False
        try:
            prediction = self._classifier.predict(text)
        except Exception as e:
            logger.debug("gate_classifier_error error={}", e)
            return False
        if prediction is None:
            return False

        admitted = (
            prediction.label.strip().lower() == self._config.domain_label.strip().lower()
            and prediction.confidence >= self._config.confidence_threshold
        )
        logger.debug(
            "gate_classifier label={} confidence={:.2f} admitted={}",
            prediction.label,
            prediction.confidence,
            admitted,
        )
        return admitted

    def _block(self, reason: BlockReason) -> Block:
        delay = self._rng.uniform(self._config.reply_delay_min, self._config.reply_delay_max)
        logger.debug("gate_block reason={} delay={:.2f}", reason.value, delay)
        return Block(reason=reason, reply_text=BLOCK_REPLIES[reason], delay_seconds=delay)
