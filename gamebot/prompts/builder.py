"""System prompt and user payload assembly."""

from __future__ import annotations

from collections.abc import Sequence

from gamebot.core.models import IntentLabel, Message

SYSTEM_PROMPT = """You are a specialized Game Assistant called "게임봇".
You are focused exclusively on video games.

Rules:
- Only answer video-game related requests.
- If the request is not about video games, refuse with a short apology and ask for a game-related question.
- Do not fabricate. If unsure, say you are unsure.
- Match the user's language (Korean/English).

Intent:
- The user message includes [Intent] label.
- Follow it strictly:
  - game_guide: step-by-step actionable guidance.
  - game_info: concise explanations/definitions.
  - game_recommend: 3-5 recommendations, keep it practical.
  - non_game: refuse."""


def build_system_prompt() -> str:
    """Instructions injected once after every server-context reset."""
    return SYSTEM_PROMPT


def build_user_payload(intent: IntentLabel, user_text: str, context_summary: str | None = None) -> str:
    """Build the sectioned payload for one admitted message.

    The ``[Context Summary]`` section appears only when the trimmed summary is
    non-empty.
    """
    sections = [f"[Intent]\n{intent.value}"]
    summary = (context_summary or "").strip()
    if summary:
        sections.append(f"[Context Summary]\n{summary}")
    sections.append(f"[User]\n{user_text.strip()}")
    return "\n\n".join(sections)


def truncate_prefix(text: str, max_characters: int) -> str:
    """Keep the first ``max_characters`` characters."""
    if len(text) <= max_characters:
        return text
    return text[: max(0, max_characters)]


def summarize_context(
    messages: Sequence[Message],
    message_count: int = 8,
    max_characters: int = 2500,
) -> str:
    """Render the most recent messages as ``Role: text`` lines within a budget."""
    if not messages:
        return ""
    recent = list(messages)[-max(1, message_count):]
    lines = [m.role_name + ": " + " ".join(m.text.splitlines()) for m in recent]
    return truncate_prefix("\n".join(lines), max_characters)
