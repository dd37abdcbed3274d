"""GenStudio FastAPI relay application.

This module defines the FastAPI ``app`` instance, the relay routes and the
``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application follows a stateless REST pattern:

- **Configuration** is read once from :data:`~genstudio.core.config.config`;
  the provider token is threaded into an
  :class:`~genstudio.api.relay.InferenceRelay` at startup.
- **Generation** is a single synchronous provider call per request, run in
  FastAPI's threadpool so the event loop stays free.
- **Errors** are raised as :class:`~genstudio.core.errors.GenStudioError`
  subclasses and turned into ``{"error": ...}`` bodies by one exception
  handler. Nothing propagates as a stack trace.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
POST      ``/generate``                 Run a prediction (two body shapes)
GET       ``/generate?action=health``   Credential health check
GET       ``/generate?owner=&model=``   Provider model lookup
GET       ``/api/models``               Model catalogue
GET       ``/api/models/{id}``          Single model descriptor
========  ============================  ====================================

The ``/generate`` routes are also served under ``/api/generate``.

Usage
-----
CLI (installed entry point)::

    genstudio

Direct invocation::

    python -m genstudio.api.main
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from genstudio import __version__
from genstudio.api.models import (
    ErrorResponse,
    GenerateResponse,
    HealthResponse,
    ModelLookupResponse,
    RunResponse,
)
from genstudio.api.relay import InferenceRelay
from genstudio.core.config import config
from genstudio.core.errors import GenStudioError, MalformedRequestBody, ProviderError
from genstudio.core.registry import model_registry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application lifecycle: relay construction.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the relay from configuration and store it on ``app.state``.

    A missing token is logged but does not stop the server: every call that
    needs the provider answers 500 until a token is configured.
    """
    app.state.relay = InferenceRelay.from_config(config)
    if not config.has_token:
        logger.warning("REPLICATE_API_TOKEN is not set; generation requests will fail.")
    else:
        logger.info("Inference relay initialised.")

    yield


app = FastAPI(
    title="GenStudio Relay",
    description="Relay between the GenStudio UI and the inference provider.",
    version=__version__,
    lifespan=lifespan,
)

# Allow cross-origin requests so the Gradio UI can be served from a different
# port during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_relay(request: Request) -> InferenceRelay:
    """Dependency returning the relay built at startup.

    Tests replace it through ``app.dependency_overrides``.
    """
    relay = getattr(request.app.state, "relay", None)
    if relay is None:
        relay = InferenceRelay.from_config(config)
        request.app.state.relay = relay
    return relay


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(GenStudioError)
async def genstudio_error_handler(request: Request, exc: GenStudioError) -> JSONResponse:
    """Turn every relay error into ``{"error": message}`` with its status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return _error_response(exc.status_code, exc.message)


# ---------------------------------------------------------------------------
# Relay routes.
# ---------------------------------------------------------------------------

router = APIRouter()


@router.post("/generate")
async def generate(request: Request, relay: InferenceRelay = Depends(get_relay)) -> JSONResponse:
    """Run a prediction on the provider.

    Accepts either ``{model, input}`` (answered with a ``prediction`` key) or
    ``{owner, model, input}`` (answered with an ``output`` key).

    Validation order: credential, body shape, model path, input. The
    provider is only contacted once all of them pass.

    Returns:
        200 with ``prediction``/``output``, ``status``, ``startedAt``,
        ``endedAt`` and ``durationInSeconds``.

    Raises:
        MissingCredential: 500, no provider token.
        MalformedRequestBody / InvalidModelPath / InvalidInput: 400.
        ProviderError: 500 with the provider's best message.
    """
    relay.check_credential()

    try:
        body = json.loads(await request.body())
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedRequestBody() from e

    shape = "run" if isinstance(body, dict) and "owner" in body else "generate"

    try:
        result = await run_in_threadpool(relay.invoke_body, body, shape=shape)
    except GenStudioError:
        raise
    except Exception as e:
        # Anything the relay did not classify still leaves as a clean 500
        logger.error(f"Unexpected relay failure: {e}", exc_info=True)
        raise ProviderError() from e

    if shape == "run":
        payload = RunResponse.from_result(result)
    else:
        payload = GenerateResponse.from_result(result)
    return JSONResponse(content=jsonable_encoder(payload.model_dump(by_alias=True)))


@router.get("/generate")
async def generate_info(
    action: str | None = None,
    owner: str | None = None,
    model: str | None = None,
    relay: InferenceRelay = Depends(get_relay),
) -> JSONResponse:
    """Health check (``?action=health``) or provider model lookup.

    Returns:
        ``{status: "ok", hasToken: true}`` for the health check, otherwise
        ``{valid: true, model, latestVersion}``.

    Raises:
        MissingCredential: 500, no provider token.
        ValidationError: 400, ``owner`` or ``model`` missing.
        ProviderLookupError: Provider's own status and raw body.
    """
    if action == "health":
        relay.health()
        return JSONResponse(content=HealthResponse().model_dump(by_alias=True))

    try:
        info = await run_in_threadpool(relay.lookup_model, owner, model)
    except GenStudioError:
        raise
    except Exception as e:
        logger.error(f"Unexpected lookup failure: {e}", exc_info=True)
        raise ProviderError() from e

    return JSONResponse(content=ModelLookupResponse(**info).model_dump(by_alias=True))


app.include_router(router)
app.include_router(router, prefix="/api")


# ---------------------------------------------------------------------------
# Catalogue routes.
# ---------------------------------------------------------------------------


@app.get("/api/models")
async def list_models() -> dict:
    """Return the model catalogue in display order."""
    return {
        "version": __version__,
        "models": [descriptor.to_dict() for descriptor in model_registry.all()],
    }


@app.get("/api/models/{model_id}")
async def get_model(model_id: str) -> JSONResponse:
    """Return one model descriptor, or 404 when the id is unknown."""
    descriptor = model_registry.lookup(model_id)
    if descriptor is None:
        return _error_response(404, "Model not found")
    return JSONResponse(content=descriptor.to_dict())


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~genstudio.core.config.config`
    (``GENSTUDIO_SERVER_HOST`` / ``GENSTUDIO_SERVER_PORT``). Defaults to
    ``0.0.0.0:8000``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(
        "genstudio.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
