"""Prompt editor handlers."""

from ..validation import prompt_counter, validate_prompt

COUNTER_COLOURS = {"ok": "#a3a3a3", "warn": "#facc15", "error": "#f87171"}


def prompt_feedback(prompt: str | None) -> tuple[str, str, bool]:
    """Live feedback for the prompt editor.

    Args:
        prompt: Current prompt text

    Returns:
        Tuple of (counter markdown, error markdown, whether submit is allowed)
    """
    label, level = prompt_counter(prompt)
    counter = f"<span style='color:{COUNTER_COLOURS[level]}'>{label}</span>"
    error = validate_prompt(prompt)
    error_md = f"<span style='color:{COUNTER_COLOURS['error']}'>{error}</span>" if error else ""
    return counter, error_md, not error
