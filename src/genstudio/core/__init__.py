"""Core building blocks shared by the relay and the UI.

- **config**: Pydantic Settings configuration (``GENSTUDIO_*`` and
  ``REPLICATE_API_TOKEN``)
- **registry**: Model descriptors, field specs and the global
  ``model_registry``
- **fields**: Field role classification (prompt / image / output count)
- **errors**: User-facing error taxonomy
- **results**: The ``GenerationResult`` passed to the renderer
"""

from .config import GenStudioConfig, config
from .errors import (
    ConfigurationError,
    GenStudioError,
    ProviderError,
    ValidationError,
)
from .fields import classify_field, find_prompt_field, has_reference_image
from .registry import FieldRole, FieldSpec, ModelDescriptor, ModelRegistry, model_registry
from .results import GenerationResult

__all__ = [
    "ConfigurationError",
    "FieldRole",
    "FieldSpec",
    "GenStudioConfig",
    "GenStudioError",
    "GenerationResult",
    "ModelDescriptor",
    "ModelRegistry",
    "ProviderError",
    "ValidationError",
    "classify_field",
    "config",
    "find_prompt_field",
    "has_reference_image",
    "model_registry",
]
