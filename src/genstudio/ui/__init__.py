"""GenStudio browser UI.

The schema-driven pieces (form mapping, request building, rendering, relay
client) are plain Python and importable without Gradio; only ``app`` and
``components`` build Gradio widgets.

Modules
-------
form
    Schema-to-form mapping and ``FormState``.
validation
    Prompt rules and the character counter.
request_builder
    ``FormState`` → ``GenerationRequest``.
client
    HTTP client for the relay.
render
    ``GenerationResult`` → ``OutputView``.
app
    Gradio Blocks and the ``genstudio-ui`` entry point.
"""
