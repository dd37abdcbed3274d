"""Generation handlers: form submission and output rendering."""

import logging
from collections.abc import Callable
from typing import Any

from genstudio.core.config import config
from genstudio.core.errors import ValidationError
from genstudio.core.results import GenerationResult

from ..client import RelayClient
from ..models import UIState
from ..render import OutputView, render
from ..request_builder import build_request
from ..state import SessionBusy, begin_submission, finish_submission, initialize_ui_state

logger = logging.getLogger(__name__)


def default_client() -> RelayClient:
    """Relay client built from the global configuration."""
    return RelayClient(config.relay_url, timeout=config.relay_timeout)


def submit_generation(
    state: UIState,
    prompt: str | None,
    field_values: dict[str, Any],
    client: RelayClient,
) -> tuple[UIState, OutputView]:
    """Apply the form values, build the request and send it to the relay.

    Validation failures (empty or overlong prompt) never reach the relay;
    they come back as an error view like any relay error. The busy flag is
    released whatever happens, so the form stays usable for a manual retry.

    Args:
        state: Session state of the model tab
        prompt: Text of the prompt editor (ignored if the model has none)
        field_values: Raw widget values keyed by field name
        client: Relay client

    Returns:
        Tuple of (updated_state, view to display)
    """
    descriptor = state.descriptor

    try:
        begin_submission(state)
    except SessionBusy:
        logger.info(f"Ignoring submission for {descriptor.id}: request already in flight")
        return state, render(None, descriptor.output_kind, loading=True)

    result: GenerationResult | None = None
    prompt_text = prompt or ""
    try:
        form = state.form_state
        if form.prompt_field is not None:
            form.set(form.prompt_field, prompt_text)
        form.update(field_values)

        try:
            request = build_request(descriptor, form)
        except ValidationError as e:
            logger.warning(f"Validation error: {e}")
            result = GenerationResult.from_error(e.message)
        else:
            logger.info(f"Submitting generation for {descriptor.id} ({request.model})")
            result = client.generate(request)
    finally:
        if result is None:
            # Unexpected failure before a result existed; unlock the session
            state.busy = False

    finish_submission(state, result, prompt_text)
    view = render(result, descriptor.output_kind, prompt=prompt_text)
    return state, view


def make_generate_handler(
    model_id: str,
    field_names: list[str],
    client_factory: Callable[[], RelayClient] = default_client,
) -> Callable[..., tuple[UIState, OutputView]]:
    """Build the Gradio callback for one model tab.

    The callback receives ``(state, prompt, *field_values)`` with field
    values in the order of ``field_names``.
    """

    def handler(state: UIState | None, prompt: str | None, *values: Any):
        state = initialize_ui_state(state, model_id)
        field_values = dict(zip(field_names, values))
        return submit_generation(state, prompt, field_values, client_factory())

    return handler


def current_view(state: UIState) -> OutputView:
    """View for the latest result of a session (placeholder if none)."""
    return render(state.last_result, state.descriptor.output_kind, prompt=state.last_prompt)
