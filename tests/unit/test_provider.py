"""Tests for genstudio.api.provider: the Replicate-backed provider.

The Replicate SDK and httpx are patched; no network is used.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from genstudio.api.provider import ReplicateProvider
from genstudio.core.errors import ProviderLookupError


class TestRun:
    def test_run_uses_token_and_plain_urls(self):
        with patch("genstudio.api.provider.replicate.Client") as client_cls:
            client_cls.return_value.run.return_value = ["https://x/img.png"]
            provider = ReplicateProvider("r8_token")

            output = provider.run("stability-ai/sdxl:abc", {"prompt": "cat"})

        assert output == ["https://x/img.png"]
        client_cls.assert_called_once_with(api_token="r8_token")
        client_cls.return_value.run.assert_called_once_with(
            "stability-ai/sdxl:abc",
            input={"prompt": "cat"},
            use_file_output=False,
        )

    def test_run_propagates_errors(self):
        with patch("genstudio.api.provider.replicate.Client") as client_cls:
            client_cls.return_value.run.side_effect = RuntimeError("boom")
            with pytest.raises(RuntimeError, match="boom"):
                ReplicateProvider("r8_token").run("a/b", {"x": 1})


def _patched_httpx(response: httpx.Response):
    http_client = MagicMock()
    http_client.__enter__.return_value = http_client
    http_client.get.return_value = response
    return patch("genstudio.api.provider.httpx.Client", return_value=http_client), http_client


class TestGetModel:
    def test_success(self):
        response = httpx.Response(200, json={"name": "sdxl", "latest_version": {"id": "v1"}})
        patcher, http_client = _patched_httpx(response)

        with patcher:
            data = ReplicateProvider("r8_token", api_base="https://api.test/v1/").get_model(
                "stability-ai", "sdxl"
            )

        assert data["latest_version"]["id"] == "v1"
        http_client.get.assert_called_once_with(
            "https://api.test/v1/models/stability-ai/sdxl",
            headers={"Authorization": "Token r8_token"},
        )

    def test_non_success_status(self):
        response = httpx.Response(404, text='{"detail":"Not found."}')
        patcher, _ = _patched_httpx(response)

        with patcher, pytest.raises(ProviderLookupError) as exc_info:
            ReplicateProvider("r8_token").get_model("nobody", "nothing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == '{"detail":"Not found."}'
