"""Reusable UI components for the GenStudio Gradio interface."""

from typing import Any

import gradio as gr

from genstudio.core.registry import ModelDescriptor

from .form import (
    MAX_REFERENCE_IMAGES,
    FormState,
    dropdown_value,
    field_label,
    numeric_bounds,
    step_for,
    widget_kind,
)
from .render import OutputView
from .validation import prompt_counter


def build_field_input(
    descriptor: ModelDescriptor, name: str, value: Any
) -> gr.components.Component:
    """Create the input widget for one non-prompt schema field.

    Args:
        descriptor: Model owning the field
        name: Field name
        value: Initial form value

    Returns:
        A Gradio component whose value is the raw widget value for ``name``
    """
    spec = descriptor.input_schema[name]
    kind = widget_kind(descriptor, name)
    label = field_label(name)

    if kind == "dropdown":
        return gr.Dropdown(
            label=label,
            choices=list(spec.enum or ()),
            value=dropdown_value(spec, value),
            info=spec.description,
        )

    if kind == "number":
        low, high = numeric_bounds(name, spec)
        return gr.Number(
            label=label,
            value=value,
            minimum=low,
            maximum=high,
            step=step_for(spec),
            precision=0 if spec.value_type == "integer" else None,
            info=spec.description,
        )

    return gr.Textbox(
        label=label,
        value=value,
        lines=2,
        placeholder=spec.description or "",
    )


class ModelFormUI:
    """Form for one model: prompt editor, reference images, field inputs.

    Attributes:
        prompt: Prompt textbox (None when the model has no prompt field)
        counter: Character counter markdown under the prompt
        prompt_error: Prompt validation message
        reference_images: Upload widget (None unless the model has an
            image-role field). Preview only; uploads are not sent.
        fields: Field name → input component, in display order
        submit: The Generate button
    """

    def __init__(self, form_state: FormState):
        descriptor = form_state.descriptor
        self.prompt = None
        self.counter = None
        self.prompt_error = None
        self.reference_images = None
        self.fields: dict[str, gr.components.Component] = {}

        with gr.Group():
            gr.Markdown(f"**Model:** {descriptor.name}  \n`{descriptor.model_path}`")

            if any(widget_kind(descriptor, n) == "image_upload" for n in descriptor.input_schema):
                self.reference_images = gr.Gallery(
                    label=f"Reference Images (up to {MAX_REFERENCE_IMAGES}, preview only)",
                    type="filepath",
                    interactive=True,
                    columns=MAX_REFERENCE_IMAGES,
                    height=120,
                )

            for name in form_state.editable_fields():
                self.fields[name] = build_field_input(descriptor, name, form_state.get(name))

        if form_state.prompt_field is not None:
            self.prompt = gr.Textbox(
                label="Prompt",
                placeholder="Describe Your Scene",
                value=form_state.prompt,
                lines=2,
                max_lines=6,
            )
            with gr.Row():
                self.prompt_error = gr.Markdown(value="")
                self.counter = gr.Markdown(value=prompt_counter(form_state.prompt)[0])

        self.submit = gr.Button("Generate", variant="primary")

    @property
    def field_names(self) -> list[str]:
        return list(self.fields.keys())

    @property
    def field_components(self) -> list[gr.components.Component]:
        return list(self.fields.values())


class OutputPanel:
    """Output area; shows whatever :class:`OutputView` it is given."""

    def __init__(self, view: OutputView | None = None):
        self.status = gr.Markdown(value=_status_markdown(view) if view else "")
        self.gallery = gr.Gallery(
            label="Output",
            visible=False,
            object_fit="contain",
            height=480,
            columns=2,
        )
        self.text = gr.Textbox(label="Generated Text", visible=False, interactive=False, lines=12)
        self.json = gr.Code(label="Generated Output (JSON)", language="json", visible=False)
        self.prompt_info = gr.Markdown(value="", visible=False)

    @property
    def components(self) -> list[gr.components.Component]:
        return [self.status, self.gallery, self.text, self.json, self.prompt_info]

    @staticmethod
    def updates(view: OutputView) -> tuple:
        """Component updates for ``view``, in :attr:`components` order."""
        status = _status_markdown(view)
        show_images = view.kind == "images"
        show_text = view.kind == "text"
        show_json = view.kind == "json"
        has_prompt_section = view.kind in ("images", "text", "json", "unsupported")

        prompt_md = ""
        if has_prompt_section:
            prompt_md = f"### Your Prompt\n\n{view.prompt}"
            if view.inference_info:
                prompt_md += f"\n\n*{view.inference_info}*"

        return (
            gr.update(value=status),
            gr.update(
                value=view.image_urls if show_images else None,
                visible=show_images,
                columns=view.columns,
                label=view.title or "Output",
            ),
            gr.update(value=view.text if show_text else "", visible=show_text),
            gr.update(value=view.text if show_json else "", visible=show_json),
            gr.update(value=prompt_md, visible=has_prompt_section),
        )


def _status_markdown(view: OutputView) -> str:
    if view.kind == "loading":
        return "⏳ *Generating...*"
    if view.kind == "error":
        return f"❌ **{view.title}**\n\n{view.message}"
    if view.kind == "placeholder":
        return f"## {view.message}"
    if view.kind == "unsupported":
        return f"⚠️ {view.message}"
    if view.kind == "images":
        links = " · ".join(
            f"[{'Download' if len(view.cells) == 1 else index + 1}]({cell.url})"
            for index, cell in enumerate(view.cells)
        )
        return f"**{view.title}** {links}"
    return f"**{view.title}**"
