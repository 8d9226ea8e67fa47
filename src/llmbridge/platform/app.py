"""FastAPI service exposing the transformation engine over HTTP.

Every endpoint answers with the façade envelope
``{"success": bool, "result"?: str, "error"?: str}``; failed operations use
status 400. No upstream provider is ever contacted.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..config import Settings, configure_logging, load_settings
from ..core.exceptions import LLMBridgeError
from ..utils.provider_registry import ProviderRegistry, TransformKind, create_default_registry
from . import facade
from .facade import detect_provider

logger = logging.getLogger(__name__)


class TransformBody(BaseModel):
    """A payload plus its source and target providers."""

    source: str | None = Field(default=None, description="Detected from the payload shape when omitted")
    target: str
    payload: Any

    model_config = ConfigDict(extra="forbid")


class StreamBody(BaseModel):
    source: str
    target: str
    chunks: list[Any]

    model_config = ConfigDict(extra="forbid")


class ValidateBody(BaseModel):
    provider: str | None = None
    payload: Any


def _respond(envelope: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=200 if envelope["success"] else 400, content=envelope)


def create_app(settings: Settings | None = None, registry: ProviderRegistry | None = None) -> FastAPI:
    """Build the HTTP application around one registry."""
    settings = settings or load_settings()
    configure_logging(settings)
    registry = registry or create_default_registry(settings)

    app = FastAPI(title="llmbridge")
    app.state.registry = registry

    @app.get("/v1/providers")
    async def providers() -> JSONResponse:
        return _respond(facade.get_supported_providers(registry))

    @app.get("/v1/transformations")
    async def transformations() -> JSONResponse:
        return _respond(facade.get_available_transformations(registry))

    @app.get("/v1/examples/{provider}")
    async def example(provider: str) -> JSONResponse:
        return _respond(facade.get_example_request(provider, registry))

    @app.post("/v1/validate")
    async def validate(body: ValidateBody) -> JSONResponse:
        provider = body.provider or detect_provider(body.payload)
        if provider is None:
            return _respond(facade.failure("Unable to detect provider; pass provider explicitly"))
        return _respond(facade.validate_request(provider, body.payload, registry))

    @app.post("/v1/transform/stream")
    async def transform_stream(body: StreamBody) -> JSONResponse:
        logger.info("stream %s -> %s (%d chunks)", body.source, body.target, len(body.chunks))
        return _respond(facade.transform_stream(body.source, body.target, body.chunks, registry))

    @app.post("/v1/transform/{kind}")
    async def transform(kind: str, body: TransformBody) -> JSONResponse:
        try:
            transform_kind = TransformKind.parse(kind)
        except LLMBridgeError as exc:
            return _respond(facade.failure(str(exc)))

        source = body.source or detect_provider(body.payload)
        if source is None:
            return _respond(facade.failure("Unable to detect provider; pass source explicitly"))
        logger.info("%s %s -> %s", transform_kind.value, source, body.target)

        if transform_kind == TransformKind.REQUEST:
            return _respond(facade.transform_request(source, body.target, body.payload, registry))
        if transform_kind == TransformKind.RESPONSE:
            return _respond(facade.transform_response(source, body.target, body.payload, registry))
        return _respond(facade.transform_chunk(source, body.target, body.payload, registry))

    return app


app = create_app()
