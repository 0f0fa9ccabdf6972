"""
Summary Prompts

Prompts sent to the LLM backends when summarizing extracted text.
"""

OPENAI_MAX_INPUT_CHARS = 4000
GEMINI_MAX_INPUT_CHARS = 30000


def truncate_for_prompt(text: str, max_chars: int) -> str:
    """Cut text to max_chars, marking the cut with '...'."""
    if len(text) > max_chars:
        return text[:max_chars] + "..."
    return text


def build_summary_system_prompt() -> str:
    return (
        "You are a helpful assistant that creates concise summaries of documents. "
        "Provide a clear, well-structured summary in 2-3 sentences."
    )


def build_summary_user_prompt(text: str) -> str:
    return f"Please summarize the following document text:\n\n{text}"


def build_gemini_summary_prompt(text: str) -> str:
    # Gemini gets a single prompt, no system role
    return (
        "Please provide a concise summary of the following document "
        f"in 2-3 sentences:\n\n{text}"
    )
