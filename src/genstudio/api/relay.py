"""Inference relay: the only component that talks to the provider.

The relay is a thin, stateless passthrough. For each request it:

1. Checks that a provider credential is configured.
2. Validates the body shape, the model path and the input mapping.
3. Forwards ``(model_path, input)`` to the provider's synchronous ``run``.
4. Reshapes the provider's answer into a :class:`GenerationResult`.

Per-request lifecycle::

    received → validated → in-flight → completed | failed

There is exactly one provider call per request: no retry, no backoff, no
circuit breaking, and no timeout on ``run``. A failed call is reported, not
retried. Every failure surfaces as a :class:`GenStudioError` subclass with a
user-facing message; raw provider exceptions never leave this module.

The credential is threaded in at construction so the relay can be tested with
a fake token and a fake provider factory::

    relay = InferenceRelay("test-token", provider_factory=lambda token: FakeProvider())
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Iterator, Mapping
from datetime import datetime, timezone
from typing import Any

import httpx

from genstudio.core.config import GenStudioConfig
from genstudio.core.errors import (
    InvalidInput,
    InvalidModelPath,
    MalformedRequestBody,
    MissingCredential,
    ProviderError,
    ProviderLookupError,
    ValidationError,
)
from genstudio.core.results import (
    DEFAULT_STATUS,
    GenerationResult,
    format_duration,
    format_timestamp,
)

from .provider import ProviderClient, ReplicateProvider

logger = logging.getLogger(__name__)

# owner segment, model segment, optional ":version" suffix; all non-empty
MODEL_PATH_PATTERN = re.compile(r".+/.+(:.+)?")

FALLBACK_ERROR_MESSAGE = "An unexpected error occurred."

ProviderFactory = Callable[[str], ProviderClient]


def validate_model_path(model_path: Any) -> str:
    """Return ``model_path`` if it looks like ``owner/model[:version]``.

    Raises:
        InvalidModelPath: For anything else, including non-strings.
    """
    if not isinstance(model_path, str) or not MODEL_PATH_PATTERN.fullmatch(model_path):
        raise InvalidModelPath()
    return model_path


def validate_input(input: Any) -> dict[str, Any]:
    """Return ``input`` as a dict if it is a mapping with at least one key.

    Raises:
        InvalidInput: If ``input`` is missing, not an object, or empty.
    """
    if not isinstance(input, Mapping) or len(input) == 0:
        raise InvalidInput()
    return dict(input)


def parse_generate_body(body: Any) -> tuple[str, Any]:
    """Extract ``(model_path, input)`` from a ``{model, input}`` body.

    Raises:
        MalformedRequestBody: If the body is not an object or ``model`` is
            not a string.
    """
    if not isinstance(body, Mapping) or not isinstance(body.get("model"), str):
        raise MalformedRequestBody()
    return body["model"], body.get("input")


def parse_run_body(body: Any) -> tuple[str, Any]:
    """Extract ``(model_path, input)`` from an ``{owner, model, input}`` body.

    Raises:
        MalformedRequestBody: If the body is not an object or ``owner`` /
            ``model`` are not strings.
    """
    if (
        not isinstance(body, Mapping)
        or not isinstance(body.get("owner"), str)
        or not isinstance(body.get("model"), str)
    ):
        raise MalformedRequestBody()
    return f"{body['owner']}/{body['model']}", body.get("input")


def extract_status(output: Any) -> str:
    """Status reported by the provider result, defaulting to ``"completed"``.

    Only object-like results (mappings, or objects exposing a ``status``
    attribute) can carry a status; strings and lists never do.
    """
    if isinstance(output, Mapping):
        if "status" in output and output["status"] is not None:
            return str(output["status"])
        return DEFAULT_STATUS
    if isinstance(output, (str, bytes, list, tuple)) or output is None:
        return DEFAULT_STATUS
    status = getattr(output, "status", None)
    return str(status) if status is not None else DEFAULT_STATUS


def provider_error_message(exc: BaseException) -> str:
    """Pick the most specific human-readable message from a provider failure.

    Preference order:

    1. A ``detail`` attribute (Replicate API errors carry the provider's
       detail text there).
    2. A ``detail`` field in the JSON body of an attached ``response``.
    3. The ``error`` of an attached failed ``prediction``.
    4. The exception's own message.
    5. :data:`FALLBACK_ERROR_MESSAGE`.
    """
    detail = getattr(exc, "detail", None)
    if isinstance(detail, str) and detail.strip():
        return detail

    response = getattr(exc, "response", None)
    if response is not None:
        try:
            data = response.json()
        except (AttributeError, TypeError, ValueError):
            data = None
        if isinstance(data, Mapping):
            nested = data.get("detail")
            if isinstance(nested, str) and nested.strip():
                return nested

    prediction = getattr(exc, "prediction", None)
    prediction_error = getattr(prediction, "error", None)
    if isinstance(prediction_error, str) and prediction_error.strip():
        return prediction_error

    message = str(exc)
    if message.strip():
        return message
    return FALLBACK_ERROR_MESSAGE


class InferenceRelay:
    """Forward validated generation requests to the inference provider.

    Args:
        api_token: Provider credential, or None when not configured. A
            missing token is not an error until a call needs the provider.
        provider_factory: Builds a fresh provider client for one request.
            Defaults to :class:`ReplicateProvider`.
    """

    def __init__(
        self,
        api_token: str | None,
        provider_factory: ProviderFactory | None = None,
    ) -> None:
        self._api_token = api_token or None
        self._provider_factory: ProviderFactory = provider_factory or ReplicateProvider

    @classmethod
    def from_config(cls, config: GenStudioConfig) -> InferenceRelay:
        def factory(token: str) -> ProviderClient:
            return ReplicateProvider(
                token,
                api_base=config.replicate_api_base,
                lookup_timeout=config.lookup_timeout,
            )

        return cls(config.api_token, provider_factory=factory)

    @property
    def has_token(self) -> bool:
        return self._api_token is not None

    def check_credential(self) -> str:
        """Return the configured token.

        Raises:
            MissingCredential: If no token is configured.
        """
        if self._api_token is None:
            raise MissingCredential()
        return self._api_token

    def health(self) -> dict[str, Any]:
        self.check_credential()
        return {"status": "ok", "has_token": True}

    def invoke(self, model_path: Any, input: Any) -> GenerationResult:
        """Validate and run one prediction.

        Args:
            model_path: ``owner/model[:version]``
            input: Non-empty parameter mapping for the model

        Returns:
            A :class:`GenerationResult` without ``error``.

        Raises:
            MissingCredential: No token configured (checked first).
            InvalidModelPath: Malformed model path.
            InvalidInput: Input missing, not an object, or empty.
            ProviderError: The provider call failed.
        """
        token = self.check_credential()
        model_path = validate_model_path(model_path)
        input = validate_input(input)

        provider = self._provider_factory(token)

        started = datetime.now(timezone.utc)
        clock_start = time.perf_counter()
        try:
            output = provider.run(model_path, input)
            # Streamed output (text tokens) arrives as an iterator
            if isinstance(output, Iterator):
                output = list(output)
        except Exception as e:
            message = provider_error_message(e)
            logger.error(f"Provider call for {model_path} failed: {message}", exc_info=True)
            raise ProviderError(message) from e
        elapsed = time.perf_counter() - clock_start
        ended = datetime.now(timezone.utc)

        status = extract_status(output)
        logger.info(f"Prediction on {model_path} finished in {elapsed:.2f}s (status={status})")

        return GenerationResult(
            output=output,
            status=status,
            started_at=format_timestamp(started),
            ended_at=format_timestamp(ended),
            duration_seconds=format_duration(elapsed),
        )

    def invoke_body(self, body: Any, *, shape: str = "generate") -> GenerationResult:
        """Parse a raw JSON body and :meth:`invoke`.

        The credential is checked before the body is looked at, so a server
        without a token never reports body problems.

        Args:
            body: Decoded JSON body
            shape: ``"generate"`` for ``{model, input}`` or ``"run"`` for
                ``{owner, model, input}``
        """
        self.check_credential()
        if shape == "run":
            model_path, input = parse_run_body(body)
        else:
            model_path, input = parse_generate_body(body)
        return self.invoke(model_path, input)

    def lookup_model(self, owner: str | None, model: str | None) -> dict[str, Any]:
        """Check a model on the provider and report its latest version.

        Returns:
            ``{"valid": True, "model": <name>, "latest_version": <id or None>}``

        Raises:
            MissingCredential: No token configured.
            ValidationError: ``owner`` or ``model`` missing.
            ProviderLookupError: Provider answered with a non-2xx status.
            ProviderError: Transport failure talking to the provider, or a
                metadata answer that is not a JSON object.
        """
        token = self.check_credential()
        if not owner or not model:
            raise ValidationError("Missing owner or model parameter")

        provider = self._provider_factory(token)
        try:
            data = provider.get_model(owner, model)
        except ProviderLookupError:
            raise
        except httpx.HTTPError as e:
            logger.error(f"Model lookup for {owner}/{model} failed: {e}")
            raise ProviderError(str(e) or "Unknown error") from e
        except ValueError as e:
            logger.error(f"Model lookup for {owner}/{model} returned invalid JSON: {e}")
            raise ProviderError("Invalid response from provider") from e

        if not isinstance(data, Mapping):
            logger.error(f"Model lookup for {owner}/{model} returned {type(data).__name__}")
            raise ProviderError("Invalid response from provider")

        name = data.get("name")
        latest = data.get("latest_version")
        version = latest.get("id") if isinstance(latest, Mapping) else None
        return {
            "valid": True,
            "model": name if isinstance(name, str) else None,
            "latest_version": version if isinstance(version, str) else None,
        }
