"""Pydantic request and response models for the relay API.

These models define the JSON shapes exchanged between the UI and the relay.
Request bodies are parsed by hand in :mod:`genstudio.api.main` (so malformed
bodies get the relay's own 400 messages instead of FastAPI's 422), but the
response envelopes are serialised through these models, and the UI uses
:class:`GenerationRequest` to build its payloads.

Models
------
GenerationRequest
    Sanitised payload for ``POST /generate``: ``{model, input}``.
RunRequest
    Alternate payload for ``POST /generate``: ``{owner, model, input}``.
GenerateResponse / RunResponse
    Success envelopes (``prediction`` vs ``output`` key).
HealthResponse, ModelLookupResponse, ErrorResponse
    The remaining relay answers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from genstudio.core.results import GenerationResult


class GenerationRequest(BaseModel):
    """Request body for ``POST /generate``.

    Attributes:
        model: Model path, ``owner/model`` or ``owner/model:version``.
        input: Parameter name → value. Empty strings and nulls are already
            dropped by the request builder.
    """

    model: str = Field(
        ...,
        description="Model path: 'owner/model' or 'owner/model:version'.",
    )
    input: dict[str, Any] = Field(
        default_factory=dict,
        description="Model parameters; empty values are omitted.",
    )


class RunRequest(BaseModel):
    """Alternate request body with owner and model sent separately."""

    owner: str = Field(..., description="Model owner on the provider.")
    model: str = Field(..., description="Model name, optionally with ':version'.")
    input: dict[str, Any] = Field(default_factory=dict)


class _TimedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    started_at: str | None = Field(default=None, alias="startedAt")
    ended_at: str | None = Field(default=None, alias="endedAt")
    duration_in_seconds: str | None = Field(default=None, alias="durationInSeconds")


class GenerateResponse(_TimedResponse):
    """Success body for ``{model, input}`` requests."""

    prediction: Any = None

    @classmethod
    def from_result(cls, result: GenerationResult) -> GenerateResponse:
        return cls(
            prediction=result.output,
            status=result.status,
            started_at=result.started_at,
            ended_at=result.ended_at,
            duration_in_seconds=result.duration_seconds,
        )


class RunResponse(_TimedResponse):
    """Success body for ``{owner, model, input}`` requests."""

    output: Any = None

    @classmethod
    def from_result(cls, result: GenerationResult) -> RunResponse:
        return cls(
            output=result.output,
            status=result.status,
            started_at=result.started_at,
            ended_at=result.ended_at,
            duration_in_seconds=result.duration_seconds,
        )


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "ok"
    has_token: bool = Field(default=True, alias="hasToken")


class ModelLookupResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    valid: bool = True
    model: str | None = None
    latest_version: str | None = Field(default=None, alias="latestVersion")


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx relay answer."""

    error: str
