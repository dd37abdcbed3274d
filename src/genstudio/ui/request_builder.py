"""Build the relay payload from form state.

The builder only sanitises: it enforces the prompt rule, composes the model
path and drops empty values. Everything else (required fields, value ranges)
is left to the provider, which is the final arbiter of payload correctness.
"""

from typing import Any

from genstudio.api.models import GenerationRequest
from genstudio.core.registry import ModelDescriptor

from .form import FormState, widget_kind
from .validation import check_prompt

EMPTY_VALUES: tuple[Any, ...] = ("", None)


def sanitize_input(values: dict[str, Any]) -> dict[str, Any]:
    """Copy ``values`` without empty strings and None."""
    return {name: value for name, value in values.items() if value not in EMPTY_VALUES}


def build_request(descriptor: ModelDescriptor, form_state: FormState) -> GenerationRequest:
    """Turn the current form into a :class:`GenerationRequest`.

    Order of work:

    1. If the model has a prompt field, its trimmed value must be non-empty
       and at most 500 characters long.
    2. The model path is composed from the descriptor.
    3. Every field except empty strings and None is copied into ``input``.
       Fields edited through the reference-image upload are left out.

    Raises:
        EmptyPrompt: The prompt is empty or whitespace only.
        PromptTooLong: The prompt exceeds 500 characters.
    """
    if form_state.prompt_field is not None:
        check_prompt(form_state.prompt)

    values = {
        name: value
        for name, value in form_state.values.items()
        if widget_kind(descriptor, name) != "image_upload"
    }
    return GenerationRequest(
        model=descriptor.model_path,
        input=sanitize_input(values),
    )
