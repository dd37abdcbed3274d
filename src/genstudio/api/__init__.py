"""GenStudio FastAPI relay layer.

This package contains the FastAPI application, the Pydantic request/response
models, the inference relay and the provider clients.

Modules
-------
main
    FastAPI application with all route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for relay request and response bodies.
relay
    Validation, provider call and response reshaping.
provider
    Provider client protocol and the Replicate implementation.
"""
