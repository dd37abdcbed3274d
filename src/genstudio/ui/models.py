"""Data models for GenStudio UI session state."""

import logging
from dataclasses import dataclass

from genstudio.core.registry import ModelDescriptor
from genstudio.core.results import GenerationResult

from .form import FormState, initial_form_state

logger = logging.getLogger(__name__)


@dataclass
class UIState:
    """Session state for one model tab of the Gradio UI.

    Each user gets their own UIState per model tab (through ``gr.State``),
    so sessions never share form values or results.

    Attributes
    ----------
    form_state : FormState
        Current form values for the tab's model
    busy : bool
        True while a generation request is in flight; a second submission
        is refused until it clears
    last_result : GenerationResult | None
        Outcome of the latest submission (replaced on every submission)
    last_prompt : str
        Prompt of the latest submission, shown beside the output
    """

    form_state: FormState
    busy: bool = False
    last_result: GenerationResult | None = None
    last_prompt: str = ""

    @classmethod
    def for_model(cls, descriptor: ModelDescriptor) -> "UIState":
        return cls(form_state=initial_form_state(descriptor))

    @property
    def descriptor(self) -> ModelDescriptor:
        return self.form_state.descriptor

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"UIState(model={self.descriptor.id}, busy={self.busy})"


# Overview table columns
OVERVIEW_HEADERS = ["Model", "Description", "Owner", "Output"]
