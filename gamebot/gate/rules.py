"""Curated rule sets for the domain gate.

Safety rules only ever block; they run before the classifier so that
injection attempts, credential fishing and abuse never reach the remote
backend regardless of how the classifier scores them. The game vocabulary
feeds optional keyword admission and the reference keyword classifiers.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

from gamebot.core.models import BlockReason

# Invisible characters that split a word without showing on screen.
_INVISIBLE = dict.fromkeys(map(ord, "\u200b\u200c\u200d\u2060\ufeff\u00ad"))
_SEPARATORS = re.compile(r"[\s\-+_`'\".,:;|/\\]+")


@dataclass(frozen=True, slots=True)
class MatchText:
    """Lowercased message plus a separator-free copy for phrase lookups."""

    lowered: str
    compact: str

    @classmethod
    def of(cls, text: str) -> "MatchText":
        folded = unicodedata.normalize("NFKC", text or "").translate(_INVISIBLE)
        lowered = " ".join(folded.split()).lower()
        return cls(lowered=lowered, compact=_SEPARATORS.sub("", lowered))


_INJECTION = [
    re.compile(r"\b(ignore|forget|disregard)\b.{0,30}\b(previous|prior|above|instruction|system|rule)s?\b"),
    re.compile(r"\b(system|developer|hidden|internal)\s+(prompt|instruction|setting)s?\b"),
    re.compile(r"\b(reveal|print|show|dump|repeat)\b.{0,20}\b(prompt|instructions)\b"),
    re.compile(r"\b(jailbreak|prompt injection|dan mode|developer mode)\b"),
]

# CJK phrases are matched against the separator-free view, so spacing
# variants ("지침 무시" / "지침무시") hit the same entry.
_INJECTION_CJK = (
    "이전 지침 무시",
    "지침 무시",
    "규칙 무시",
    "시스템 프롬프트",
    "개발자 지침",
    "내부 지침",
    "숨겨진 지침",
    "프롬프트 출력",
    "설정 보여",
    "내부 설정",
    "前の指示を無視",
    "システムプロンプト",
    "開発者の指示",
    "内部の指示",
    "隠された指示",
    "プロンプトを表示",
)

_SECRET = [
    re.compile(r"\b(api|secret|client|access|auth)[\s_-]?(key|token)s?\b"),
    re.compile(r"\bapikeys?\b"),
    re.compile(r"\bpasswords?\b"),
]

_SECRET_CJK = (
    "키를 알려",
    "api키",
    "토큰",
    "비밀번호",
    "클라이언트 키",
    "apiキー",
    "トークン",
    "パスワード",
    "秘密鍵",
)

_PROFANITY = [
    re.compile(r"\b(fuck\w*|shit|bitch|asshole)\b"),
]

_PROFANITY_CJK = (
    "씨발",
    "ㅅㅂ",
    "시발",
    "좆",
    "병신",
    "미친놈",
    "존나",
    "死ね",
    "くそ",
    "クソ",
)

_GAME_WORDS = [
    re.compile(
        r"\b(games?|gaming|video ?games?|guide|walkthrough|build|skill ?tree|artifact|weapon|party|boss|"
        r"pattern|rotation|stats?|level ?up|upgrade|drop|farm(ing)?|dungeon|raid|quest|gacha|pity|"
        r"patch ?notes?|nerf|buff|dps|rpg|jrpg|mmo(rpg)?|fps|tps|roguelike|roguelite|souls-?like|"
        r"role-playing|steam|nintendo|playstation|xbox|switch 2)\b"
    ),
    # "<name> 성유물", "<name> build" style short queries
    re.compile(r"[\w\-]{2,}\s*(성유물|스킬\s*트리|빌드|공략|육성)"),
]

_GAME_CJK = (
    "게임",
    "공략",
    "육성",
    "빌드",
    "세팅",
    "스킬트리",
    "스킬",
    "성유물",
    "무기",
    "파티",
    "조합",
    "보스",
    "패턴",
    "딜사이클",
    "스탯",
    "레벨업",
    "강화",
    "드랍",
    "파밍",
    "던전",
    "레이드",
    "퀘스트",
    "가챠",
    "천장",
    "패치노트",
    "너프",
    "버프",
    "롤플레잉",
    "ゲーム",
    "攻略",
    "育成",
    "ビルド",
    "装備",
    "スキルツリー",
    "聖遺物",
    "武器",
    "パーティ",
    "ボス",
    "レイド",
    "ダンジョン",
    "ドロップ",
    "周回",
    "パッチ",
    "ナーフ",
    "バフ",
)


def _match_any(patterns: list[re.Pattern[str]], text: str) -> bool:
    return any(p.search(text) for p in patterns)


def _contains_any(phrases: tuple[str, ...], norm: MatchText) -> bool:
    return any(phrase.replace(" ", "") in norm.compact for phrase in phrases)


def check_safety(norm: MatchText) -> BlockReason | None:
    """Return the first safety rule the message trips, in priority order."""
    if _match_any(_INJECTION, norm.lowered) or _contains_any(_INJECTION_CJK, norm):
        return BlockReason.PROMPT_INJECTION
    if _match_any(_SECRET, norm.lowered) or _contains_any(_SECRET_CJK, norm):
        return BlockReason.SECRET_REQUEST
    if _match_any(_PROFANITY, norm.lowered) or _contains_any(_PROFANITY_CJK, norm):
        return BlockReason.PROFANITY
    return None


def looks_in_domain(norm: MatchText) -> bool:
    """Short-text heuristic: does the message use game vocabulary?"""
    return _match_any(_GAME_WORDS, norm.lowered) or _contains_any(_GAME_CJK, norm)
