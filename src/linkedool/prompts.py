"""Audit prompt template and builder."""

from __future__ import annotations

from .constants import MAX_PROMPT_PROFILE_CHARS, TRUNCATION_MARKER


AUDIT_TEMPLATE_HEADER = [
    "You are a LinkedIn profile auditor. Score and critique the profile like Google Lighthouse.",
    "Return concise markdown with REQUIRED format:",
    "",
    "## Scores",
    "- Overall Score: [X]/100",
    "- Headline Score: [X]/100",
    "- About Score: [X]/100",
    "- Experience Score: [X]/100",
    "- Skills Score: [X]/100",
    "- Education Score: [X]/100",
    "",
    "## Strengths",
    "[List as bullets]",
    "",
    "## Gaps & Risks",
    "[List as bullets]",
    "",
    "## Recommendations",
    "[Actionable, short bullets with examples]",
    "",
    "## Optional: ATS Keywords",
    "[For target roles if evident]",
    "",
    "IMPORTANT: Use precise scores (e.g., 73, 84, 67) - do NOT round to multiples of 5 or 10.",
    "Differentiate scores based on actual quality differences.",
    "Rules: be direct, avoid fluff, keep outputs compact.",
    "",
    "PROFILE TEXT:",
]


def truncate_for_prompt(text: str, max_chars: int = MAX_PROMPT_PROFILE_CHARS) -> str:
    """Cap profile text at ``max_chars``, appending a marker when cut."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def build_prompt(
    profile_text: str,
    model_hint: str,
    max_chars: int = MAX_PROMPT_PROFILE_CHARS,
) -> str:
    """Render the audit prompt around a length-capped profile excerpt.

    Args:
        profile_text: Normalized plain-text profile
        model_hint: Model name echoed at the end of the prompt
        max_chars: Profile excerpt cap

    Returns:
        Complete prompt string
    """
    profile_block = truncate_for_prompt(profile_text, max_chars)
    return "\n".join(
        [*AUDIT_TEMPLATE_HEADER, profile_block, "", f"Model hint: {model_hint}"]
    )
