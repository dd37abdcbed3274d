"""Field role classification.

A schema field can play a special part in the UI:

- **prompt**: the free-text prompt (inline editor, character counter,
  non-empty validation).
- **image**: reference-image input; rendered as an upload widget.
- **output_count**: numeric field whose range is clamped to ``[1, 4]``.
- **plain**: everything else.

Models can state the role explicitly with ``FieldSpec.role``. When they don't,
the role is inferred from the field name. All name-based guessing lives in
:func:`classify_field`; nothing else in the code base inspects field names.
"""

from .registry import FieldRole, FieldSpec, ModelDescriptor

PROMPT_MARKERS = ("prompt",)
IMAGE_MARKERS = ("image",)
OUTPUT_COUNT_MARKERS = ("num", "count", "output")

OUTPUT_COUNT_MIN = 1
OUTPUT_COUNT_MAX = 4


def classify_field(name: str, spec: FieldSpec) -> FieldRole:
    """Return the UI role of a schema field.

    Args:
        name: Parameter name as it appears in the input schema
        spec: The field's specification

    Returns:
        ``spec.role`` when set, otherwise the role inferred from the
        (case-insensitive) field name. "prompt" wins over "image", which
        wins over the output-count markers.
    """
    if spec.role is not None:
        return spec.role

    lowered = name.lower()
    if any(marker in lowered for marker in PROMPT_MARKERS):
        return FieldRole.PROMPT
    if any(marker in lowered for marker in IMAGE_MARKERS):
        return FieldRole.IMAGE
    if any(marker in lowered for marker in OUTPUT_COUNT_MARKERS):
        return FieldRole.OUTPUT_COUNT
    return FieldRole.PLAIN


def is_output_count(name: str, spec: FieldSpec) -> bool:
    """Whether a numeric field gets the ``[1, 4]`` output-count clamp.

    Image fields count too: a numeric ``image``-named field such as
    ``num_images`` is an output count.
    """
    return classify_field(name, spec) in (FieldRole.OUTPUT_COUNT, FieldRole.IMAGE)


def find_prompt_field(descriptor: ModelDescriptor) -> str | None:
    """Return the name of the model's prompt field, or None.

    Only the first prompt-role field is treated as *the* prompt; others
    (e.g. ``negative_prompt``) are ordinary text inputs.
    """
    for name, spec in descriptor.input_schema.items():
        if classify_field(name, spec) is FieldRole.PROMPT:
            return name
    return None


def has_reference_image(descriptor: ModelDescriptor) -> bool:
    return any(
        classify_field(name, spec) is FieldRole.IMAGE
        for name, spec in descriptor.input_schema.items()
    )
