"""Model descriptors and the registry of selectable models.

This module holds the static catalogue of generation backends the UI offers.
Each model is described by a :class:`ModelDescriptor`, whose ``input_schema``
maps parameter names to :class:`FieldSpec` entries in display order.

Descriptors are plain immutable data. They are defined once at import time,
registered in the global :data:`model_registry` and never mutated.

Usage Example
-------------
    >>> from genstudio.core.registry import model_registry
    >>> model_registry.list_available()
    ['sdxl', 'anything-v3', 'dreamshaper', 'lcm-sdxl']
    >>> sdxl = model_registry.lookup("sdxl")
    >>> sdxl.model_path.split(":")[0]
    'stability-ai/sdxl'
    >>> model_registry.lookup("missing") is None
    True
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal

logger = logging.getLogger(__name__)

ValueType = Literal["string", "integer", "number"]
OutputKind = Literal["image", "text", "json"]

VALUE_TYPES: tuple[str, ...] = ("string", "integer", "number")
OUTPUT_KINDS: tuple[str, ...] = ("image", "text", "json")


class FieldRole(str, Enum):
    """UI role of a schema field."""

    PROMPT = "prompt"
    OUTPUT_COUNT = "output_count"
    IMAGE = "image"
    PLAIN = "plain"


def _matches_type(value: Any, value_type: str) -> bool:
    # bool is an int subclass but never a valid parameter value
    if isinstance(value, bool):
        return False
    if value_type == "string":
        return isinstance(value, str)
    if value_type == "integer":
        return isinstance(value, int)
    return isinstance(value, (int, float))


@dataclass(frozen=True)
class FieldSpec:
    """Declarative description of one tunable model parameter.

    Construction enforces the schema invariants, so a descriptor that made it
    into the registry never needs re-checking:

    - ``value_type`` is one of ``string``, ``integer`` or ``number``.
    - ``default`` (when given) matches ``value_type``.
    - ``minimum``/``maximum`` only appear on numeric fields, in order.
    - ``enum`` only appears on string fields and contains ``default``.
    - ``default`` lies within ``[minimum, maximum]``.

    Raises:
        ValueError: If any invariant is violated.
    """

    value_type: ValueType
    default: str | int | float | None = None
    description: str | None = None
    required: bool = False
    minimum: int | float | None = None
    maximum: int | float | None = None
    enum: tuple[str, ...] | None = None
    role: FieldRole | None = None

    def __post_init__(self) -> None:
        if self.value_type not in VALUE_TYPES:
            raise ValueError(f"Unknown value type: {self.value_type!r}")

        if self.enum is not None:
            # Accept lists from callers but store an immutable tuple
            object.__setattr__(self, "enum", tuple(self.enum))
            if self.value_type != "string":
                raise ValueError("enum is only allowed on string fields")
            if not self.enum:
                raise ValueError("enum must not be empty")

        if self.value_type == "string" and (
            self.minimum is not None or self.maximum is not None
        ):
            raise ValueError("minimum/maximum are only allowed on numeric fields")

        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise ValueError(f"minimum {self.minimum} is greater than maximum {self.maximum}")

        if self.default is None:
            return

        if not _matches_type(self.default, self.value_type):
            raise ValueError(
                f"Default {self.default!r} does not match value type {self.value_type}"
            )
        if self.enum is not None and self.default not in self.enum:
            raise ValueError(f"Default {self.default!r} is not one of {list(self.enum)}")
        if self.minimum is not None and self.default < self.minimum:
            raise ValueError(f"Default {self.default} is below minimum {self.minimum}")
        if self.maximum is not None and self.default > self.maximum:
            raise ValueError(f"Default {self.default} is above maximum {self.maximum}")

    @property
    def is_numeric(self) -> bool:
        return self.value_type in ("integer", "number")

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON shape served by ``GET /api/models``."""
        data: dict[str, Any] = {"type": self.value_type, "required": self.required}
        for key in ("default", "description", "minimum", "maximum"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.enum is not None:
            data["enum"] = list(self.enum)
        if self.role is not None:
            data["role"] = self.role.value
        return data


@dataclass(frozen=True)
class ModelDescriptor:
    """One selectable generation backend.

    Attributes:
        id: Unique, stable key (used in URLs and tab ids).
        name: Human-readable label.
        description: One-line blurb for the model overview.
        owner: Upstream owner on the provider (e.g. ``stability-ai``).
        model_name: Upstream model name (e.g. ``sdxl``).
        input_schema: Parameter name → :class:`FieldSpec`, in display order.
        output_kind: ``image``, ``text`` or ``json``; picks the renderer.
        version: Optional version pin appended as ``:version``.
        image_url: Thumbnail shown on the overview.
    """

    id: str
    name: str
    description: str
    owner: str
    model_name: str
    input_schema: Mapping[str, FieldSpec]
    output_kind: OutputKind = "image"
    version: str | None = None
    image_url: str = "/model.svg"

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Model id must not be empty")
        if not self.owner or not self.model_name:
            raise ValueError(f"Model {self.id!r} needs both owner and model_name")
        if self.output_kind not in OUTPUT_KINDS:
            raise ValueError(f"Unknown output kind: {self.output_kind!r}")
        # Freeze the schema while preserving insertion (display) order
        object.__setattr__(self, "input_schema", MappingProxyType(dict(self.input_schema)))

    @property
    def model_path(self) -> str:
        """Upstream reference: ``owner/model_name[:version]``."""
        path = f"{self.owner}/{self.model_name}"
        if self.version:
            path = f"{path}:{self.version}"
        return path

    def __deepcopy__(self, memo: dict) -> "ModelDescriptor":
        # Immutable; copied session state shares the same descriptor
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "owner": self.owner,
            "model": self.model_name,
            "version": self.version,
            "model_path": self.model_path,
            "image_url": self.image_url,
            "output_type": self.output_kind,
            "inputs": {name: spec.to_dict() for name, spec in self.input_schema.items()},
        }


class ModelRegistry:
    """Registry for the selectable model descriptors.

    Lookup is pure and deterministic. "Not found" is reported as ``None`` by
    :meth:`lookup`; callers treat it as a user-facing 404, not a fault.
    """

    def __init__(self) -> None:
        self._models: dict[str, ModelDescriptor] = {}

    def register(self, descriptor: ModelDescriptor) -> None:
        """Register a model descriptor.

        Raises:
            ValueError: If a descriptor with the same id is already registered.
        """
        if descriptor.id in self._models:
            raise ValueError(f"Model '{descriptor.id}' is already registered")
        self._models[descriptor.id] = descriptor
        logger.debug(f"Registered model: {descriptor.id} ({descriptor.model_path})")

    def lookup(self, model_id: str) -> ModelDescriptor | None:
        return self._models.get(model_id)

    def get(self, model_id: str) -> ModelDescriptor:
        """Return the descriptor for ``model_id``.

        Raises:
            KeyError: If the id is not registered.
        """
        descriptor = self.lookup(model_id)
        if descriptor is None:
            available = ", ".join(self.list_available())
            raise KeyError(f"Model '{model_id}' not found. Available models: {available}")
        return descriptor

    def list_available(self) -> list[str]:
        return list(self._models.keys())

    def all(self) -> list[ModelDescriptor]:
        return list(self._models.values())

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._models

    def __len__(self) -> int:
        return len(self._models)


# ---------------------------------------------------------------------------
# Built-in catalogue.
# ---------------------------------------------------------------------------

SDXL = ModelDescriptor(
    id="sdxl",
    name="Stable Diffusion XL",
    description="High-resolution text-to-image generation with Stable Diffusion (SDXL)",
    owner="stability-ai",
    model_name="sdxl",
    version="7762fd07cf82c948538e41f63f77d685e02b063e37e496e96eefd46c929f9bdc",
    input_schema={
        "prompt": FieldSpec("string", required=True),
        "width": FieldSpec("integer", default=768, minimum=512, maximum=1024),
        "height": FieldSpec("integer", default=768, minimum=512, maximum=1024),
        "num_outputs": FieldSpec("integer", default=1, minimum=1, maximum=4),
        "guidance_scale": FieldSpec("number", default=7.5),
        "num_inference_steps": FieldSpec("integer", default=25, role=FieldRole.PLAIN),
        "refine": FieldSpec(
            "string",
            default="expert_ensemble_refiner",
            enum=("no_refiner", "expert_ensemble_refiner", "base_image_refiner"),
        ),
        "scheduler": FieldSpec("string", default="K_EULER"),
        "lora_scale": FieldSpec("number", default=0.6, minimum=0, maximum=1),
        "apply_watermark": FieldSpec("string", default="false", enum=("true", "false")),
        "high_noise_frac": FieldSpec("number", default=0.8, minimum=0, maximum=1),
        "negative_prompt": FieldSpec("string", default=""),
        "prompt_strength": FieldSpec("number", default=0.8, minimum=0, maximum=1),
    },
    output_kind="image",
)

ANYTHING_V3 = ModelDescriptor(
    id="anything-v3",
    name="Anything V3 (Anime)",
    description="Anime-style image generator fine-tuned from Stable Diffusion",
    owner="cjwbw",
    model_name="anything-v3.0",
    version="f410ed4c6a0c3bf8b76747860b3a3c9e4c8b5a827a16eac9dd5ad9642edce9a2",
    input_schema={
        "prompt": FieldSpec("string", required=True),
        "width": FieldSpec("integer", default=512),
        "height": FieldSpec("integer", default=512),
        "num_outputs": FieldSpec("integer", default=1, minimum=1, maximum=4),
        "guidance_scale": FieldSpec("number", default=12),
        "num_inference_steps": FieldSpec("integer", default=50, role=FieldRole.PLAIN),
    },
    output_kind="image",
)

DREAMSHAPER = ModelDescriptor(
    id="dreamshaper",
    name="DreamShaper",
    description="General-purpose image generator supporting stylized output",
    owner="cjwbw",
    model_name="dreamshaper",
    version="ed6d8bee9a278b0d7125872bddfb9dd3fc4c401426ad634d8246a660e387475b",
    input_schema={
        "prompt": FieldSpec("string", required=True),
        "negative_prompt": FieldSpec("string", default=""),
        "width": FieldSpec("integer", default=512),
        "height": FieldSpec("integer", default=768),
        "scheduler": FieldSpec("string", default="K_EULER_ANCESTRAL"),
        "num_outputs": FieldSpec("integer", default=1, minimum=1, maximum=4),
        "guidance_scale": FieldSpec("number", default=7.5),
        "num_inference_steps": FieldSpec("integer", default=50, role=FieldRole.PLAIN),
    },
    output_kind="image",
)

LCM_SDXL = ModelDescriptor(
    id="lcm-sdxl",
    name="LCM SDXL (Fast)",
    description="Fast SDXL generation with LCM (Latent Consistency Model)",
    owner="dhanushreddy291",
    model_name="lcm-sdxl",
    version="5998ad9525e76b3cbb51798800d6f31353d8b726cb2af928a062cc8ade79465f",
    input_schema={
        "prompt": FieldSpec("string", required=True),
        "negative_prompt": FieldSpec(
            "string", default="3d, cgi, render, bad quality, normal quality"
        ),
        "num_outputs": FieldSpec("integer", default=1, minimum=1, maximum=4),
        "num_inference_steps": FieldSpec(
            "integer", default=7, minimum=1, maximum=50, role=FieldRole.PLAIN
        ),
    },
    output_kind="image",
)

# Global model registry instance
model_registry = ModelRegistry()
for _descriptor in (SDXL, ANYTHING_V3, DREAMSHAPER, LCM_SDXL):
    model_registry.register(_descriptor)
