"""Tests for genstudio.ui.handlers and genstudio.ui.state.

Tests cover:
- Submission lifecycle (busy flag taken and released).
- Prompt validation short-circuits before the relay.
- Relay results and errors flow into the rendered view.
- Prompt editor feedback.
"""

from __future__ import annotations

import pytest

from genstudio.core.results import GenerationResult
from genstudio.ui.handlers import (
    current_view,
    make_generate_handler,
    prompt_feedback,
    submit_generation,
)
from genstudio.ui.models import UIState
from genstudio.ui.state import (
    SessionBusy,
    begin_submission,
    finish_submission,
    initialize_ui_state,
)


class RecordingClient:
    """Relay client stand-in that records requests."""

    def __init__(self, result: GenerationResult | None = None, error: Exception | None = None):
        self.result = result or GenerationResult(
            output=["https://x/img.png"], duration_seconds="1.00"
        )
        self.error = error
        self.requests = []

    def generate(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.result


class TestStateLifecycle:
    def test_initialize_creates_state(self):
        state = initialize_ui_state(None, "sdxl")
        assert state.descriptor.id == "sdxl"
        assert state.busy is False

    def test_initialize_keeps_existing(self, ui_state):
        assert initialize_ui_state(ui_state, "sdxl") is ui_state

    def test_initialize_unknown_model(self):
        with pytest.raises(KeyError):
            initialize_ui_state(None, "missing")

    def test_begin_sets_busy_and_clears_result(self, ui_state):
        ui_state.last_result = GenerationResult(output="old")
        begin_submission(ui_state)
        assert ui_state.busy is True
        assert ui_state.last_result is None

    def test_begin_twice_raises(self, ui_state):
        begin_submission(ui_state)
        with pytest.raises(SessionBusy):
            begin_submission(ui_state)

    def test_finish_releases(self, ui_state):
        begin_submission(ui_state)
        result = GenerationResult(output="u")
        finish_submission(ui_state, result, "a cat")
        assert ui_state.busy is False
        assert ui_state.last_result is result
        assert ui_state.last_prompt == "a cat"

    def test_repr(self, ui_state):
        assert repr(ui_state) == "UIState(model=sdxl, busy=False)"


class TestSubmitGeneration:
    def test_success(self, ui_state):
        client = RecordingClient()
        state, view = submit_generation(ui_state, "a red fox", {"width": 1024}, client)

        assert view.kind == "images"
        assert view.prompt == "a red fox"
        assert state.busy is False
        assert state.last_prompt == "a red fox"
        request = client.requests[0]
        assert request.model == ui_state.descriptor.model_path
        assert request.input["prompt"] == "a red fox"
        assert request.input["width"] == 1024

    def test_empty_prompt_never_calls_client(self, ui_state):
        client = RecordingClient()
        state, view = submit_generation(ui_state, "   ", {}, client)

        assert client.requests == []
        assert view.kind == "error"
        assert view.message == "Prompt cannot be empty"
        assert state.busy is False

    def test_long_prompt_never_calls_client(self, ui_state):
        client = RecordingClient()
        _, view = submit_generation(ui_state, "a" * 501, {}, client)
        assert client.requests == []
        assert view.message == "Prompt cannot exceed 500 characters"

    def test_relay_error_rendered(self, ui_state):
        client = RecordingClient(result=GenerationResult.from_error("Invalid version"))
        state, view = submit_generation(ui_state, "cat", {}, client)
        assert view.kind == "error"
        assert view.message == "Invalid version"
        assert state.last_result.failed

    def test_busy_session_ignored(self, ui_state):
        ui_state.busy = True
        client = RecordingClient()
        state, view = submit_generation(ui_state, "cat", {}, client)
        assert client.requests == []
        assert view.kind == "loading"
        assert state.busy is True

    def test_unexpected_failure_releases_busy(self, ui_state):
        client = RecordingClient(error=RuntimeError("boom"))
        with pytest.raises(RuntimeError):
            submit_generation(ui_state, "cat", {}, client)
        assert ui_state.busy is False

    def test_retry_after_error(self, ui_state):
        """The form stays usable after a failure."""
        client = RecordingClient(result=GenerationResult.from_error("boom"))
        submit_generation(ui_state, "cat", {}, client)
        client.result = GenerationResult(output="u")
        _, view = submit_generation(ui_state, "cat", {}, client)
        assert view.kind == "images"
        assert len(client.requests) == 2

    def test_output_count_clamped_in_request(self, ui_state):
        client = RecordingClient()
        submit_generation(ui_state, "cat", {"num_outputs": 10}, client)
        assert client.requests[0].input["num_outputs"] == 4


class TestMakeGenerateHandler:
    def test_values_follow_field_order(self):
        client = RecordingClient()
        handler = make_generate_handler("sdxl", ["width", "height"], lambda: client)

        state, view = handler(None, "a cat", 1024, 512)

        assert state.descriptor.id == "sdxl"
        assert view.kind == "images"
        assert client.requests[0].input["width"] == 1024
        assert client.requests[0].input["height"] == 512


class TestCurrentView:
    def test_placeholder_for_new_session(self, ui_state):
        assert current_view(ui_state).kind == "placeholder"

    def test_latest_result(self, ui_state):
        finish_submission(ui_state, GenerationResult(output="u"), "fox")
        view = current_view(ui_state)
        assert view.kind == "images"
        assert view.prompt == "fox"


class TestPromptFeedback:
    def test_valid(self):
        counter, error, allowed = prompt_feedback("hello")
        assert "5/500" in counter
        assert error == ""
        assert allowed is True

    def test_empty(self):
        _, error, allowed = prompt_feedback("")
        assert "Prompt cannot be empty" in error
        assert allowed is False

    def test_too_long(self):
        counter, error, allowed = prompt_feedback("a" * 501)
        assert "501/500" in counter
        assert "#f87171" in counter
        assert "exceed 500" in error
        assert allowed is False


class TestUIState:
    def test_for_model(self, sdxl):
        state = UIState.for_model(sdxl)
        assert state.form_state.descriptor is sdxl
        assert state.last_result is None
