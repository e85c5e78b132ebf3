"""Prompt templates."""

from gamebot.prompts.builder import (
    SYSTEM_PROMPT,
    build_system_prompt,
    build_user_payload,
    summarize_context,
)

__all__ = ["SYSTEM_PROMPT", "build_system_prompt", "build_user_payload", "summarize_context"]
