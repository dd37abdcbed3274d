"""HTTP client the UI uses to reach the relay.

:class:`RelayClient` never raises for relay or network problems. Every outcome
comes back as a :class:`GenerationResult`:

- relay success: ``output`` from the ``prediction`` (or ``output``) key;
- relay error: ``error`` from the body, or ``"HTTP <code>: <reason>"``;
- unreachable relay or non-JSON answer: ``"Network error: <detail>"``, kept
  distinct from server-reported errors.
"""

import logging
from typing import Any

import httpx

from genstudio.api.models import GenerationRequest
from genstudio.core.results import DEFAULT_STATUS, GenerationResult

logger = logging.getLogger(__name__)

NETWORK_ERROR_PREFIX = "Network error: "


class RelayClient:
    """Synchronous relay client.

    Args:
        base_url: Relay base URL (e.g. ``http://127.0.0.1:8000``)
        timeout: Request timeout in seconds; None waits for the provider
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Submit a generation request and wait for the outcome."""
        try:
            with self._client() as client:
                resp = client.post("/generate", json=request.model_dump())
            data = resp.json()
        except httpx.HTTPError as e:
            logger.error(f"Relay unreachable: {e}")
            detail = str(e) or type(e).__name__
            return GenerationResult.from_error(f"{NETWORK_ERROR_PREFIX}{detail}")
        except ValueError as e:
            logger.error(f"Relay answered with non-JSON body: {e}")
            return GenerationResult.from_error(f"{NETWORK_ERROR_PREFIX}{e}")

        if not resp.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            return GenerationResult.from_error(
                message or f"HTTP {resp.status_code}: {resp.reason_phrase}"
            )

        if not isinstance(data, dict):
            return GenerationResult.from_error(f"{NETWORK_ERROR_PREFIX}unexpected response body")

        return GenerationResult(
            output=_pick_output(data),
            status=str(data.get("status") or DEFAULT_STATUS),
            started_at=data.get("startedAt"),
            ended_at=data.get("endedAt"),
            duration_seconds=data.get("durationInSeconds"),
        )

    def health(self) -> bool:
        """True when the relay is up and has a provider token."""
        try:
            with self._client() as client:
                resp = client.get("/generate", params={"action": "health"})
            return resp.is_success and bool(resp.json().get("hasToken"))
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.warning(f"Relay health check failed: {e}")
            return False


def _pick_output(data: dict[str, Any]) -> Any:
    if "prediction" in data:
        return data["prediction"]
    return data.get("output")
