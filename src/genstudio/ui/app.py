"""Gradio UI for GenStudio.

One tab per registered model plus an overview tab. Each model tab renders its
form from the model's input schema and talks to the relay over HTTP, so the
UI process never holds the provider token.
"""

import logging
from collections.abc import Callable

import gradio as gr

from genstudio.core.config import config
from genstudio.core.registry import ModelDescriptor, model_registry

from .client import RelayClient
from .components import ModelFormUI, OutputPanel
from .handlers import current_view, default_client, make_generate_handler, prompt_feedback
from .models import OVERVIEW_HEADERS, UIState
from .render import render

logger = logging.getLogger(__name__)


def create_ui(client_factory: Callable[[], RelayClient] = default_client) -> gr.Blocks:
    """Create the Gradio UI.

    Args:
        client_factory: Builds the relay client used by each submission

    Returns:
        Gradio Blocks app
    """
    app = gr.Blocks(title="GenStudio")

    with app:
        gr.Markdown(
            """
            # GenStudio
            ### Generate images with multiple hosted AI models
            """
        )

        with gr.Tabs():
            with gr.Tab("Models", id="overview_tab"):
                create_overview_tab()

            for descriptor in model_registry.all():
                with gr.Tab(descriptor.name, id=f"model_{descriptor.id}"):
                    create_model_tab(descriptor, client_factory)

    return app


def create_overview_tab() -> None:
    """Catalogue of the registered models."""
    gr.Markdown("Pick a model tab to start generating.")
    gr.Dataframe(
        headers=OVERVIEW_HEADERS,
        value=[[d.name, d.description, d.owner, d.output_kind] for d in model_registry.all()],
        interactive=False,
        wrap=True,
    )


def create_model_tab(
    descriptor: ModelDescriptor,
    client_factory: Callable[[], RelayClient],
) -> None:
    """Output panel and form for one model, wired to the relay.

    Submitting disables the Generate button, shows the loading view, runs
    the request and re-enables the button, so a session never has two
    requests in flight.

    Args:
        descriptor: Model rendered by this tab
        client_factory: Builds the relay client used by each submission
    """
    initial_state = UIState.for_model(descriptor)
    # Session state - one instance per user
    ui_state = gr.State(initial_state)

    with gr.Row():
        with gr.Column(scale=4):
            panel = OutputPanel(current_view(initial_state))
        with gr.Column(scale=1, min_width=320):
            form = ModelFormUI(initial_state.form_state)

    generate = make_generate_handler(descriptor.id, form.field_names, client_factory)
    prompt_inputs = [form.prompt] if form.prompt is not None else []

    def on_prompt_change(prompt: str):
        counter, error, allowed = prompt_feedback(prompt)
        return counter, error, gr.update(interactive=allowed)

    def on_submit_start():
        view = render(None, descriptor.output_kind, loading=True)
        return (gr.update(interactive=False), *OutputPanel.updates(view))

    def on_submit(state: UIState, *values):
        if form.prompt is not None:
            prompt, field_values = values[0], values[1:]
        else:
            prompt, field_values = None, values
        state, view = generate(state, prompt, *field_values)
        return (state, *OutputPanel.updates(view))

    def on_submit_end(*values):
        allowed = prompt_feedback(values[0])[2] if values else True
        return gr.update(interactive=allowed)

    if form.prompt is not None:
        form.prompt.change(
            fn=on_prompt_change,
            inputs=[form.prompt],
            outputs=[form.counter, form.prompt_error, form.submit],
            show_progress="hidden",
        )

    form.submit.click(
        fn=on_submit_start,
        inputs=None,
        outputs=[form.submit, *panel.components],
    ).then(
        fn=on_submit,
        inputs=[ui_state, *prompt_inputs, *form.field_components],
        outputs=[ui_state, *panel.components],
    ).then(
        fn=on_submit_end,
        inputs=prompt_inputs,
        outputs=[form.submit],
    )


def main() -> None:
    """Launch the Gradio UI using the global configuration."""
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting GenStudio UI (relay: {config.relay_url})")
    app = create_ui()
    app.launch(
        server_name=config.gradio_server_name,
        server_port=config.gradio_server_port,
        share=config.gradio_share,
    )


if __name__ == "__main__":
    main()
