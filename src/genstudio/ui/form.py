"""Schema-to-form mapping.

Turns a :class:`~genstudio.core.registry.ModelDescriptor` into editable form
state: initial values, widget kinds, numeric bounds and value coercion for
whatever the widgets hand back.

Initial values
--------------
For each field, in schema order:

1. the field's ``default`` if it has one;
2. otherwise ``""`` for strings;
3. otherwise ``minimum`` if defined, else ``0`` (``0.0`` for numbers).

Every field receives exactly one initial value.

Widgets
-------
========================  ==================================================
Widget kind               Used for
========================  ==================================================
``prompt``                The model's prompt field (inline editor, counter)
``image_upload``          Image-role fields (reference images, preview only)
``dropdown``              String fields with an ``enum``
``number``                Integer and number fields
``textarea``              Remaining string fields
========================  ==================================================

Reference images uploaded through ``image_upload`` widgets are not part of
the request payload; the field keeps its initial value.
"""

import logging
import math
from typing import Any

from genstudio.core.fields import (
    OUTPUT_COUNT_MAX,
    OUTPUT_COUNT_MIN,
    classify_field,
    find_prompt_field,
    is_output_count,
)
from genstudio.core.registry import FieldRole, FieldSpec, ModelDescriptor

logger = logging.getLogger(__name__)

MAX_REFERENCE_IMAGES = 4

FormValue = str | int | float | None


def initial_value(spec: FieldSpec) -> str | int | float:
    """Initial form value for one field."""
    if spec.default is not None:
        return spec.default
    if spec.value_type == "string":
        return ""
    if spec.minimum is not None:
        return spec.minimum
    return 0.0 if spec.value_type == "number" else 0


def field_label(name: str) -> str:
    """``"num_inference_steps"`` → ``"Num Inference Steps"``."""
    return " ".join(word[:1].upper() + word[1:] for word in name.split("_") if word)


def numeric_bounds(name: str, spec: FieldSpec) -> tuple[float | None, float | None]:
    """Allowed ``(minimum, maximum)`` for a numeric widget.

    Output-count fields are clamped into ``[1, 4]`` whatever the schema says;
    other fields use the schema bounds (either may be None).
    """
    if is_output_count(name, spec):
        low = OUTPUT_COUNT_MIN if spec.minimum is None else max(OUTPUT_COUNT_MIN, spec.minimum)
        high = OUTPUT_COUNT_MAX if spec.maximum is None else min(OUTPUT_COUNT_MAX, spec.maximum)
        return low, high
    return spec.minimum, spec.maximum


def step_for(spec: FieldSpec) -> float:
    return 1 if spec.value_type == "integer" else 0.01


def coerce_value(name: str, spec: FieldSpec, raw: Any) -> FormValue:
    """Convert a raw widget value into a typed form value.

    Numeric fields:
        - ``None``, ``""`` and unparseable text become ``None`` (the field is
          then left out of the request).
        - Integers are truncated, numbers parsed as float.
        - Output-count fields are clamped into ``[1, 4]``.

    String fields:
        - ``None`` becomes ``""``; anything else is converted with ``str``.
    """
    if spec.value_type == "string":
        return "" if raw is None else str(raw)

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        number = float(raw)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric value for {name}: {raw!r}")
        return None
    if math.isnan(number) or math.isinf(number):
        return None

    value: int | float = int(number) if spec.value_type == "integer" else number

    if is_output_count(name, spec):
        low, high = numeric_bounds(name, spec)
        value = min(max(value, low), high)
        if spec.value_type == "integer":
            value = int(value)
    return value


def widget_kind(descriptor: ModelDescriptor, name: str) -> str:
    """Widget used to edit ``name`` on the model's form."""
    spec = descriptor.input_schema[name]
    role = classify_field(name, spec)

    if role is FieldRole.PROMPT and name == find_prompt_field(descriptor):
        return "prompt"
    if role is FieldRole.IMAGE:
        return "image_upload"
    if spec.value_type == "string":
        return "dropdown" if spec.enum else "textarea"
    return "number"


def dropdown_value(spec: FieldSpec, current: FormValue) -> str | None:
    """Selected option for an enum field; the first option when unset."""
    if current not in (None, ""):
        return str(current)
    if spec.default is not None:
        return str(spec.default)
    return spec.enum[0] if spec.enum else None


class FormState:
    """Current form values for one model, one per UI session.

    Keys always equal the descriptor's schema keys; values are typed per the
    field spec or None.

    Args:
        descriptor: The model whose form this is
        values: Optional starting values (defaults to initial values)

    Raises:
        KeyError: If ``values`` names a field the schema doesn't have.
    """

    def __init__(self, descriptor: ModelDescriptor, values: dict[str, FormValue] | None = None):
        self.descriptor = descriptor
        self.values: dict[str, FormValue] = {
            name: initial_value(spec) for name, spec in descriptor.input_schema.items()
        }
        if values:
            for name, value in values.items():
                self.set(name, value)

    @property
    def prompt_field(self) -> str | None:
        return find_prompt_field(self.descriptor)

    @property
    def prompt(self) -> str:
        """Current prompt text ("" when the model has no prompt field)."""
        key = self.prompt_field
        if key is None:
            return ""
        value = self.values.get(key)
        return value if isinstance(value, str) else ""

    def set(self, name: str, raw: Any) -> FormValue:
        """Coerce and store a widget value.

        Raises:
            KeyError: If ``name`` is not in the model's schema.
        """
        if name not in self.descriptor.input_schema:
            raise KeyError(f"Unknown field '{name}' for model '{self.descriptor.id}'")
        value = coerce_value(name, self.descriptor.input_schema[name], raw)
        self.values[name] = value
        return value

    def update(self, raw_values: dict[str, Any]) -> None:
        for name, raw in raw_values.items():
            self.set(name, raw)

    def get(self, name: str) -> FormValue:
        return self.values[name]

    def editable_fields(self) -> list[str]:
        """Fields that get a regular input widget, in display order.

        Excludes the prompt (edited inline) and image-role fields (upload
        widget instead).
        """
        return [
            name
            for name in self.descriptor.input_schema
            if widget_kind(self.descriptor, name) not in ("prompt", "image_upload")
        ]

    def copy(self) -> "FormState":
        clone = FormState.__new__(FormState)
        clone.descriptor = self.descriptor
        clone.values = dict(self.values)
        return clone

    def __repr__(self) -> str:
        return f"FormState(model={self.descriptor.id}, fields={len(self.values)})"


def initial_form_state(descriptor: ModelDescriptor) -> FormState:
    """Fresh form state with one initial value per schema field."""
    return FormState(descriptor)
