"""AI Prompts Module"""

from app.ai.prompts.summary_prompts import (
    build_summary_system_prompt,
    build_summary_user_prompt,
    build_gemini_summary_prompt,
    truncate_for_prompt,
    OPENAI_MAX_INPUT_CHARS,
    GEMINI_MAX_INPUT_CHARS,
)

__all__ = [
    "build_summary_system_prompt",
    "build_summary_user_prompt",
    "build_gemini_summary_prompt",
    "truncate_for_prompt",
    "OPENAI_MAX_INPUT_CHARS",
    "GEMINI_MAX_INPUT_CHARS",
]
