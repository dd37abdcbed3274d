"""Inference provider clients.

The relay talks to the provider through the small :class:`ProviderClient`
protocol so tests can swap in a fake. The production implementation,
:class:`ReplicateProvider`, uses the Replicate SDK for predictions and a
plain httpx request for model metadata (so failures keep the provider's raw
status and body).

A provider instance is short-lived: the relay builds one per incoming request
and drops it afterwards. Nothing is shared between requests.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
import replicate

from genstudio.core.errors import ProviderLookupError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.replicate.com/v1"


class ProviderClient(Protocol):
    """What the relay needs from an inference provider."""

    def run(self, model_path: str, input: dict[str, Any]) -> Any:
        """Run a prediction synchronously and return its output."""
        ...

    def get_model(self, owner: str, model: str) -> dict[str, Any]:
        """Return the provider's metadata record for ``owner/model``."""
        ...


class ReplicateProvider:
    """Replicate-backed :class:`ProviderClient`.

    Args:
        api_token: Replicate API token
        api_base: Base URL of the Replicate HTTP API
        lookup_timeout: Timeout in seconds for metadata lookups. Predictions
            are awaited without a timeout.
    """

    def __init__(
        self,
        api_token: str,
        api_base: str = DEFAULT_API_BASE,
        lookup_timeout: float = 30.0,
    ) -> None:
        self.api_token = api_token
        self.api_base = api_base.rstrip("/")
        self.lookup_timeout = lookup_timeout

    def run(self, model_path: str, input: dict[str, Any]) -> Any:
        client = replicate.Client(api_token=self.api_token)
        logger.info(f"Running prediction on {model_path}")
        # Plain URLs instead of FileOutput objects keep the result JSON-serialisable
        return client.run(model_path, input=input, use_file_output=False)

    def get_model(self, owner: str, model: str) -> dict[str, Any]:
        """Fetch model metadata.

        Raises:
            ProviderLookupError: If the provider answers with a non-2xx
                status; carries that status and the raw response text.
            httpx.HTTPError: On transport failures.
        """
        url = f"{self.api_base}/models/{owner}/{model}"
        with httpx.Client(timeout=self.lookup_timeout) as client:
            resp = client.get(url, headers={"Authorization": f"Token {self.api_token}"})

        if not resp.is_success:
            logger.warning(f"Model lookup for {owner}/{model} failed: HTTP {resp.status_code}")
            raise ProviderLookupError(resp.status_code, resp.text)
        return resp.json()
