"""Validation utilities for GenStudio UI inputs."""

import logging

from genstudio.core.errors import EmptyPrompt, PromptTooLong, ValidationError

logger = logging.getLogger(__name__)

PROMPT_MAX_LENGTH = 500
PROMPT_WARN_LENGTH = 450

__all__ = [
    "PROMPT_MAX_LENGTH",
    "PROMPT_WARN_LENGTH",
    "ValidationError",
    "check_prompt",
    "prompt_counter",
    "validate_prompt",
]


def validate_prompt(prompt: str | None) -> str:
    """Validate prompt text and return a user-facing message.

    The length limit applies to the raw text; emptiness is judged on the
    trimmed text.

    Args:
        prompt: Prompt text (None counts as empty)

    Returns:
        Empty string if the prompt is valid, otherwise the error message
    """
    if not prompt or not prompt.strip():
        return EmptyPrompt.default_message
    if len(prompt) > PROMPT_MAX_LENGTH:
        return PromptTooLong.default_message
    return ""


def check_prompt(prompt: str | None) -> None:
    """Validate prompt text.

    Raises:
        EmptyPrompt: If the trimmed prompt is empty
        PromptTooLong: If the prompt exceeds PROMPT_MAX_LENGTH characters
    """
    if not prompt or not prompt.strip():
        raise EmptyPrompt()
    if len(prompt) > PROMPT_MAX_LENGTH:
        logger.debug(f"Rejected prompt of {len(prompt)} characters")
        raise PromptTooLong()


def prompt_counter(prompt: str | None) -> tuple[str, str]:
    """Character counter shown under the prompt editor.

    Returns:
        Tuple of (label such as ``"42/500"``, level) where level is
        ``"ok"``, ``"warn"`` (over 450) or ``"error"`` (over 500)
    """
    length = len(prompt or "")
    if length > PROMPT_MAX_LENGTH:
        level = "error"
    elif length > PROMPT_WARN_LENGTH:
        level = "warn"
    else:
        level = "ok"
    return f"{length}/{PROMPT_MAX_LENGTH}", level
