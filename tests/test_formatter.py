"""Tests for the thinking prompt formatter."""

import pytest

from think_mcp.formatter import (
    CLOSE_MARKER,
    FINAL_ANSWER_LINE,
    OPEN_MARKER,
    escape_html,
    format_thinking_prompt,
    preview,
)


class TestEscapeHtml:
    def test_escapes_all_five_characters(self):
        assert escape_html("& < > \" '") == "&amp; &lt; &gt; &quot; &#039;"

    def test_ampersand_is_escaped_before_other_entities(self):
        assert escape_html("<&>") == "&lt;&amp;&gt;"

    def test_plain_text_is_unchanged(self):
        assert escape_html("How does quicksort work?") == "How does quicksort work?"

    def test_escaping_is_not_idempotent(self):
        # Already escaped input is escaped again
        assert escape_html("&lt;div&gt;") == "&amp;lt;div&amp;gt;"


class TestFormatThinkingPrompt:
    def test_formats_a_prompt_with_thinking_tags(self):
        prompt = "What is the time complexity of quicksort?"
        formatted = format_thinking_prompt(prompt)

        assert formatted.startswith(OPEN_MARKER + "\n")
        assert formatted.count(prompt) == 1
        assert formatted.index(OPEN_MARKER) < formatted.index(prompt) < formatted.index(CLOSE_MARKER)

    def test_prompt_is_surrounded_by_blank_lines(self):
        formatted = format_thinking_prompt("Why?")
        assert "conclusion.\n\nWhy?\n\n</thinking>" in formatted

    def test_ends_with_final_answer_line(self):
        formatted = format_thinking_prompt("Why?")
        assert formatted.endswith(f"{CLOSE_MARKER}\n\n{FINAL_ANSWER_LINE}")

    def test_directives_in_order(self):
        formatted = format_thinking_prompt("x")
        directives = [
            "Break this down step-by-step",
            "Consider multiple alternative approaches",
            "Explicitly identify and examine your assumptions",
            "Look for edge cases",
            "Evaluate trade-offs",
            "Challenge your initial intuitions",
            "Synthesize your insights",
        ]
        positions = [formatted.index(d) for d in directives]
        assert positions == sorted(positions)

    def test_handles_empty_prompts_gracefully(self):
        formatted = format_thinking_prompt("")
        assert OPEN_MARKER in formatted
        assert CLOSE_MARKER in formatted

    def test_escapes_any_html_like_tags_in_the_prompt(self):
        formatted = format_thinking_prompt("Is <div> an HTML tag?")
        assert "Is &lt;div&gt; an HTML tag?" in formatted
        assert "<div>" not in formatted

    @pytest.mark.parametrize("prompt", ["a & b", "say \"hi\"", "it's", "1 > 0"])
    def test_no_raw_special_characters_from_prompt(self, prompt):
        formatted = format_thinking_prompt(prompt)
        body = formatted.split("\n\n")[1]
        assert body == escape_html(prompt)
        assert not any(c in body for c in "<>\"'") and body.count("&") == body.count(";")

    def test_is_deterministic(self):
        assert format_thinking_prompt("same") == format_thinking_prompt("same")


class TestPreview:
    def test_short_prompt_unchanged(self):
        assert preview("short") == "short"

    def test_long_prompt_truncated(self):
        assert preview("x" * 60) == "x" * 50 + "..."
