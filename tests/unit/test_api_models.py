"""Tests for genstudio.api.models: request and response envelopes."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from genstudio.api.models import (
    ErrorResponse,
    GenerateResponse,
    GenerationRequest,
    HealthResponse,
    ModelLookupResponse,
    RunRequest,
    RunResponse,
)
from genstudio.core.results import GenerationResult

RESULT = GenerationResult(
    output=["https://x/img.png"],
    status="succeeded",
    started_at="2024-01-01T00:00:00.000Z",
    ended_at="2024-01-01T00:00:01.250Z",
    duration_seconds="1.25",
)


class TestRequests:
    def test_generation_request(self):
        request = GenerationRequest(model="a/b", input={"prompt": "x"})
        assert request.model_dump() == {"model": "a/b", "input": {"prompt": "x"}}

    def test_input_defaults_to_empty(self):
        assert GenerationRequest(model="a/b").input == {}

    def test_model_required(self):
        with pytest.raises(ValidationError):
            GenerationRequest(input={})

    def test_run_request(self):
        request = RunRequest(owner="cjwbw", model="dreamshaper", input={"prompt": "x"})
        assert request.owner == "cjwbw"


class TestResponses:
    def test_generate_response_aliases(self):
        data = GenerateResponse.from_result(RESULT).model_dump(by_alias=True)
        assert data == {
            "status": "succeeded",
            "startedAt": "2024-01-01T00:00:00.000Z",
            "endedAt": "2024-01-01T00:00:01.250Z",
            "durationInSeconds": "1.25",
            "prediction": ["https://x/img.png"],
        }

    def test_run_response_uses_output_key(self):
        data = RunResponse.from_result(RESULT).model_dump(by_alias=True)
        assert data["output"] == ["https://x/img.png"]
        assert "prediction" not in data

    def test_health(self):
        assert HealthResponse().model_dump(by_alias=True) == {"status": "ok", "hasToken": True}

    def test_lookup(self):
        data = ModelLookupResponse(valid=True, model="sdxl", latest_version="abc").model_dump(
            by_alias=True
        )
        assert data == {"valid": True, "model": "sdxl", "latestVersion": "abc"}

    def test_error(self):
        assert ErrorResponse(error="boom").model_dump() == {"error": "boom"}
