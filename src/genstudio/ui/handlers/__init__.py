"""UI event handlers organized by feature area.

- generation: Form submission, relay call and output rendering
- prompt: Prompt editor feedback (counter, validation)
"""

from .generation import (
    current_view,
    default_client,
    make_generate_handler,
    submit_generation,
)
from .prompt import prompt_feedback

__all__ = [
    # Generation handlers
    "current_view",
    "default_client",
    "make_generate_handler",
    "submit_generation",
    # Prompt handlers
    "prompt_feedback",
]
