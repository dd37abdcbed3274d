"""GenStudio - schema-driven front end for hosted generative models."""

__version__ = "0.1.0"

from genstudio.core.config import GenStudioConfig, config
from genstudio.core.registry import FieldSpec, ModelDescriptor, model_registry

__all__ = [
    "FieldSpec",
    "GenStudioConfig",
    "ModelDescriptor",
    "config",
    "model_registry",
]
