"""Tests for the audit prompt builder."""

from linkedool.constants import MAX_PROMPT_PROFILE_CHARS, TRUNCATION_MARKER
from linkedool.prompts import AUDIT_TEMPLATE_HEADER, build_prompt, truncate_for_prompt


def test_short_profile_is_embedded_verbatim_without_marker():
    text = "Senior engineer with 10 years of platform experience."
    prompt = build_prompt(text, "llama3")

    assert text in prompt
    assert "[truncated]" not in prompt
    assert prompt.endswith("Model hint: llama3")


def test_profile_at_exact_limit_is_not_truncated():
    text = "x" * MAX_PROMPT_PROFILE_CHARS
    assert truncate_for_prompt(text) == text


def test_long_profile_is_cut_to_limit_with_marker():
    text = "a" * MAX_PROMPT_PROFILE_CHARS + "b" * 500
    prompt = build_prompt(text, "gpt-4")

    expected_block = "a" * MAX_PROMPT_PROFILE_CHARS + TRUNCATION_MARKER
    assert expected_block in prompt
    assert "b" * 10 not in prompt


def test_prompt_length_is_bounded_regardless_of_input_size():
    small = build_prompt("a" * (MAX_PROMPT_PROFILE_CHARS + 1), "m")
    huge = build_prompt("a" * (MAX_PROMPT_PROFILE_CHARS * 50), "m")
    assert len(small) == len(huge)


def test_custom_limit():
    assert truncate_for_prompt("abcdef", max_chars=3) == "abc" + TRUNCATION_MARKER


def test_template_sections_and_scoring_instruction_present():
    prompt = build_prompt("profile", "llama3")

    for heading in (
        "## Scores",
        "## Strengths",
        "## Gaps & Risks",
        "## Recommendations",
        "## Optional: ATS Keywords",
    ):
        assert heading in prompt
    assert "do NOT round to multiples of 5 or 10" in prompt
    assert prompt.startswith(AUDIT_TEMPLATE_HEADER[0])
    assert "PROFILE TEXT:\nprofile\n\nModel hint: llama3" in prompt


def test_build_prompt_is_deterministic():
    assert build_prompt("same", "m") == build_prompt("same", "m")
