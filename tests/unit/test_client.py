"""Tests for genstudio.ui.client: the relay HTTP client.

The relay is simulated with ``httpx.MockTransport``; no network is used.
"""

from __future__ import annotations

import json

import httpx

from genstudio.api.models import GenerationRequest
from genstudio.ui.client import NETWORK_ERROR_PREFIX, RelayClient

REQUEST = GenerationRequest(model="stability-ai/sdxl", input={"prompt": "cat"})


def _client(handler) -> RelayClient:
    return RelayClient("http://relay.test/", transport=httpx.MockTransport(handler))


class TestGenerate:
    def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "prediction": ["https://x/img.png"],
                    "status": "succeeded",
                    "startedAt": "2024-01-01T00:00:00.000Z",
                    "endedAt": "2024-01-01T00:00:02.000Z",
                    "durationInSeconds": "2.00",
                },
            )

        result = _client(handler).generate(REQUEST)

        assert seen["url"] == "http://relay.test/generate"
        assert seen["body"] == {"model": "stability-ai/sdxl", "input": {"prompt": "cat"}}
        assert result.output == ["https://x/img.png"]
        assert result.status == "succeeded"
        assert result.duration_seconds == "2.00"
        assert result.error is None

    def test_output_key(self):
        def handler(request):
            return httpx.Response(200, json={"output": "text", "status": "completed"})

        assert _client(handler).generate(REQUEST).output == "text"

    def test_relay_error_message(self):
        def handler(request):
            return httpx.Response(400, json={"error": "Invalid input format."})

        result = _client(handler).generate(REQUEST)
        assert result.failed
        assert result.error == "Invalid input format."

    def test_http_status_without_error_body(self):
        def handler(request):
            return httpx.Response(503, json={})

        result = _client(handler).generate(REQUEST)
        assert result.error == "HTTP 503: Service Unavailable"

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        result = _client(handler).generate(REQUEST)
        assert result.error == f"{NETWORK_ERROR_PREFIX}connection refused"
        assert result.status == "failed"

    def test_non_json_body(self):
        def handler(request):
            return httpx.Response(502, text="<html>bad gateway</html>")

        result = _client(handler).generate(REQUEST)
        assert result.error.startswith(NETWORK_ERROR_PREFIX)

    def test_unexpected_body_shape(self):
        def handler(request):
            return httpx.Response(200, json=["not", "an", "object"])

        assert _client(handler).generate(REQUEST).error.startswith(NETWORK_ERROR_PREFIX)

    def test_output_passed_through_unchanged(self):
        """Interpreting the output is the renderer's job."""

        def handler(request):
            return httpx.Response(200, json={"prediction": {"weird": True}, "status": "ok"})

        assert _client(handler).generate(REQUEST).output == {"weird": True}


class TestHealth:
    def test_healthy(self):
        def handler(request):
            assert request.url.params["action"] == "health"
            return httpx.Response(200, json={"status": "ok", "hasToken": True})

        assert _client(handler).health() is True

    def test_missing_token(self):
        def handler(request):
            body = {"error": "Missing REPLICATE_API_TOKEN in environment."}
            return httpx.Response(500, json=body)

        assert _client(handler).health() is False

    def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("down")

        assert _client(handler).health() is False
