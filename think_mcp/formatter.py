#!/usr/bin/env python3
"""
Prompt formatting for the "think" tool.

Pure functions only: the same prompt always produces the same text. Escaping
is applied exactly once, so feeding an already escaped prompt escapes its
entities a second time ("&lt;" becomes "&amp;lt;").
"""

from typing import List, Tuple

# Order matters: "&" first, otherwise the entities produced by the
# later substitutions would be escaped again.
HTML_ESCAPES: List[Tuple[str, str]] = [
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
]

OPEN_MARKER = "<thinking>"
CLOSE_MARKER = "</thinking>"

THINKING_DIRECTIVES = (
    "Think extraordinarily deeply about this problem.\n"
    "Break this down step-by-step, showing all your reasoning.\n"
    "Consider multiple alternative approaches before deciding.\n"
    "Explicitly identify and examine your assumptions.\n"
    "Look for edge cases and potential failure modes.\n"
    "Evaluate trade-offs between different solutions.\n"
    "Challenge your initial intuitions with counterarguments.\n"
    "Synthesize your insights before delivering a conclusion."
)

FINAL_ANSWER_LINE = "[After careful analysis, provide your final answer here]"

PROMPT_PREVIEW_LENGTH = 50


def escape_html(text: str) -> str:
    """Escape the five HTML-significant characters."""
    for char, entity in HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def format_thinking_prompt(prompt: str) -> str:
    """Wrap the escaped prompt in thinking markers followed by the answer line."""
    escaped_prompt = escape_html(prompt)
    return (
        f"{OPEN_MARKER}\n"
        f"{THINKING_DIRECTIVES}\n"
        f"\n"
        f"{escaped_prompt}\n"
        f"\n"
        f"{CLOSE_MARKER}\n"
        f"\n"
        f"{FINAL_ANSWER_LINE}"
    )


def preview(prompt: str, length: int = PROMPT_PREVIEW_LENGTH) -> str:
    """Shortened prompt for log lines."""
    if len(prompt) > length:
        return f"{prompt[:length]}..."
    return prompt
