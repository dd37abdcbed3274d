"""State management utilities for GenStudio UI.

This module handles the lifecycle of a :class:`UIState` around one
submission: taking the busy flag, recording the result and releasing the
flag again whatever happened.
"""

import logging

from genstudio.core.registry import model_registry
from genstudio.core.results import GenerationResult

from .models import UIState

logger = logging.getLogger(__name__)


class SessionBusy(Exception):
    """A generation is already in flight for this session."""


def initialize_ui_state(state: UIState | None, model_id: str) -> UIState:
    """Return ``state``, or a fresh state for ``model_id`` if None.

    Raises:
        KeyError: If ``model_id`` is not registered.
    """
    if state is not None:
        return state
    logger.info(f"Creating new UIState for {model_id}")
    return UIState.for_model(model_registry.get(model_id))


def begin_submission(state: UIState) -> UIState:
    """Mark the session busy and drop the previous result.

    Raises:
        SessionBusy: If a submission is already in flight.
    """
    if state.busy:
        raise SessionBusy("A generation is already running for this session")
    state.busy = True
    state.last_result = None
    return state


def finish_submission(state: UIState, result: GenerationResult, prompt: str) -> UIState:
    """Record the outcome and clear the busy flag."""
    state.last_result = result
    state.last_prompt = prompt
    state.busy = False
    if result.failed:
        logger.info(f"Generation on {state.descriptor.id} failed: {result.error}")
    return state
