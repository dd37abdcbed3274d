"""Shared pytest fixtures for GenStudio tests."""

from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from genstudio.api.main import app, get_relay
from genstudio.api.relay import InferenceRelay
from genstudio.core.config import GenStudioConfig
from genstudio.core.registry import FieldSpec, ModelDescriptor, model_registry
from genstudio.ui.form import FormState, initial_form_state
from genstudio.ui.models import UIState


class FakeProvider:
    """In-memory stand-in for the inference provider.

    Records every ``run`` call so tests can assert whether the provider was
    contacted at all.
    """

    def __init__(
        self,
        output: Any = None,
        error: Exception | None = None,
        model_data: dict | None = None,
        lookup_error: Exception | None = None,
    ):
        self.output = output
        self.error = error
        self.model_data = model_data or {}
        self.lookup_error = lookup_error
        self.calls: list[tuple[str, dict]] = []
        self.lookups: list[tuple[str, str]] = []

    def run(self, model_path: str, input: dict) -> Any:
        self.calls.append((model_path, input))
        if self.error is not None:
            raise self.error
        return self.output

    def get_model(self, owner: str, model: str) -> dict:
        self.lookups.append((owner, model))
        if self.lookup_error is not None:
            raise self.lookup_error
        return self.model_data


class ProviderFactory:
    """Provider factory that hands out one FakeProvider and records tokens."""

    def __init__(self, provider: FakeProvider):
        self.provider = provider
        self.tokens: list[str] = []

    def __call__(self, token: str) -> FakeProvider:
        self.tokens.append(token)
        return self.provider


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Provider returning a single image URL with a succeeded status."""
    return FakeProvider(output=["https://x/img.png"])


@pytest.fixture
def provider_factory(fake_provider: FakeProvider) -> ProviderFactory:
    return ProviderFactory(fake_provider)


@pytest.fixture
def relay(provider_factory: ProviderFactory) -> InferenceRelay:
    """Relay with a fake token and the fake provider."""
    return InferenceRelay("test-token", provider_factory=provider_factory)


@pytest.fixture
def relay_without_token(provider_factory: ProviderFactory) -> InferenceRelay:
    return InferenceRelay(None, provider_factory=provider_factory)


@pytest.fixture
def test_config(monkeypatch) -> GenStudioConfig:
    """Configuration with a fake token, isolated from the environment."""
    monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)
    monkeypatch.delenv("GENSTUDIO_REPLICATE_API_TOKEN", raising=False)
    return GenStudioConfig(
        replicate_api_token="test-token",
        relay_url="http://relay.test",
        _env_file=None,
    )


@pytest.fixture
def sdxl() -> ModelDescriptor:
    return model_registry.get("sdxl")


@pytest.fixture
def sdxl_form(sdxl: ModelDescriptor) -> FormState:
    return initial_form_state(sdxl)


@pytest.fixture
def mixed_descriptor() -> ModelDescriptor:
    """Small model touching every field type and role."""
    return ModelDescriptor(
        id="mixed",
        name="Mixed",
        description="Every kind of field",
        owner="acme",
        model_name="mixed",
        input_schema={
            "prompt": FieldSpec("string", required=True),
            "style": FieldSpec("string", enum=("photo", "anime")),
            "strength": FieldSpec("number", minimum=0.2, maximum=1),
            "seed": FieldSpec("integer"),
            "temperature": FieldSpec("number"),
            "num_outputs": FieldSpec("integer", default=2, minimum=1, maximum=8),
            "init_image": FieldSpec("string"),
            "caption": FieldSpec("string", default="hello"),
        },
        output_kind="image",
    )


@pytest.fixture
def text_descriptor() -> ModelDescriptor:
    """Text model without any prompt-like field."""
    return ModelDescriptor(
        id="echo",
        name="Echo",
        description="Returns text",
        owner="acme",
        model_name="echo",
        version="v1",
        input_schema={
            "text": FieldSpec("string", default="hi"),
            "max_tokens": FieldSpec("integer", default=64, minimum=1, maximum=512),
        },
        output_kind="text",
    )


@pytest.fixture
def ui_state(sdxl: ModelDescriptor) -> UIState:
    return UIState.for_model(sdxl)


@pytest.fixture
def test_client(relay: InferenceRelay) -> Generator[TestClient, None, None]:
    """FastAPI TestClient whose relay uses the fake provider.

    Yields:
        TestClient bound to the relay app
    """
    app.dependency_overrides[get_relay] = lambda: relay
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client_without_token(
    relay_without_token: InferenceRelay,
) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_relay] = lambda: relay_without_token
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
