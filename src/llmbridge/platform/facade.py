"""JSON-string entry points over the transformation engine

Every function takes provider names and JSON text and returns an envelope
``{"success": bool, "result": str}`` or ``{"success": False, "error": str}``.
Engine errors never escape; unexpected exceptions are logged and reported
as a generic failure.
"""

from __future__ import annotations

import copy
import json
import logging
from functools import lru_cache
from typing import Any, Callable

from ..config import Settings, load_settings
from ..core.exceptions import LLMBridgeError, MalformedPayloadError
from ..fixtures.claude import CLAUDE_CHAT_REQUEST
from ..fixtures.gemini import GEMINI_CHAT_REQUEST
from ..fixtures.openai import OPENAI_CHAT_REQUEST
from ..streaming.session import StreamSession
from ..types.provider import Provider, normalize_provider
from ..utils.provider_registry import ProviderRegistry, create_default_registry

logger = logging.getLogger(__name__)

Envelope = dict[str, Any]

EXAMPLE_REQUESTS: dict[str, dict[str, Any]] = {
    Provider.OPENAI.value: OPENAI_CHAT_REQUEST,
    Provider.CLAUDE.value: CLAUDE_CHAT_REQUEST,
    Provider.GEMINI.value: GEMINI_CHAT_REQUEST,
}

_OPENAI_KNOBS = frozenset(
    {
        "frequency_penalty",
        "presence_penalty",
        "logit_bias",
        "response_format",
        "stream_options",
        "seed",
        "n",
        "logprobs",
        "top_logprobs",
    }
)


@lru_cache(maxsize=1)
def default_registry() -> ProviderRegistry:
    """Registry built from the settings named by LLMBRIDGE_CONFIG"""
    return create_default_registry(load_settings())


def _success(result: Any, settings: Settings) -> Envelope:
    return {"success": True, "result": json.dumps(result, indent=settings.json_indent, ensure_ascii=False)}


def failure(message: str) -> Envelope:
    return {"success": False, "error": message}


def _decode(payload_json: str | bytes | Any) -> Any:
    if not isinstance(payload_json, (str, bytes)):
        return payload_json
    try:
        return json.loads(payload_json)
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(f"Invalid JSON payload: {exc}") from exc


def _guarded(operation: str, call: Callable[[], Any], registry: ProviderRegistry) -> Envelope:
    try:
        return _success(call(), registry.settings)
    except LLMBridgeError as exc:
        logger.error("%s failed: %s", operation, exc)
        return failure(str(exc))
    except Exception as exc:
        logger.exception("%s failed unexpectedly", operation)
        return failure(f"Internal error during {operation}: {exc}")


def transform_request(
    source: str, target: str, request_json: str, registry: ProviderRegistry | None = None
) -> Envelope:
    """Convert a request between provider formats"""
    registry = registry or default_registry()
    return _guarded(
        "transform_request",
        lambda: registry.transform(source, target, "request", _decode(request_json)),
        registry,
    )


def transform_response(
    source: str, target: str, response_json: str, registry: ProviderRegistry | None = None
) -> Envelope:
    """Convert a response between provider formats"""
    registry = registry or default_registry()
    return _guarded(
        "transform_response",
        lambda: registry.transform(source, target, "response", _decode(response_json)),
        registry,
    )


def transform_chunk(
    source: str,
    target: str,
    chunk_json: str,
    registry: ProviderRegistry | None = None,
    session: StreamSession | None = None,
) -> Envelope:
    """Convert one stream chunk; the result is a JSON list of target chunks

    Pass the same session for every chunk of a stream so tool calls and
    framing carry over between calls.
    """
    registry = registry or default_registry()

    def call() -> Any:
        chunk = chunk_json if chunk_json == "[DONE]" else _decode(chunk_json)
        return registry.transform(source, target, "stream-chunk", chunk, session=session)

    return _guarded("transform_chunk", call, registry)


def transform_stream(
    source: str, target: str, stream_json: str, registry: ProviderRegistry | None = None
) -> Envelope:
    """Convert a whole stream given as a JSON list of chunks"""
    registry = registry or default_registry()

    def call() -> Any:
        chunks = _decode(stream_json)
        if not isinstance(chunks, list):
            raise MalformedPayloadError("A stream must be a JSON list of chunks")
        return registry.transform_stream(source, target, chunks)

    return _guarded("transform_stream", call, registry)


def validate_request(provider: str, request_json: str, registry: ProviderRegistry | None = None) -> Envelope:
    """Validate a request; success reports whether the request is valid"""
    registry = registry or default_registry()

    def call() -> Any:
        try:
            payload = _decode(request_json)
        except MalformedPayloadError as exc:
            return {"valid": False, "error": exc.to_dict()}
        return registry.validate(provider, payload).to_dict()

    return _guarded("validate_request", call, registry)


def get_supported_providers(registry: ProviderRegistry | None = None) -> Envelope:
    registry = registry or default_registry()
    return _guarded("get_supported_providers", registry.list_providers, registry)


def get_available_transformations(registry: ProviderRegistry | None = None) -> Envelope:
    registry = registry or default_registry()
    return _guarded(
        "get_available_transformations",
        lambda: [pair.to_dict() for pair in registry.list_pairs()],
        registry,
    )


def get_example_request(provider: str, registry: ProviderRegistry | None = None) -> Envelope:
    """A ready-to-convert sample request for a provider"""
    registry = registry or default_registry()
    key = normalize_provider(provider)
    if key not in EXAMPLE_REQUESTS:
        return failure(f"No example request for provider: {provider}")
    return _success(copy.deepcopy(EXAMPLE_REQUESTS[key]), registry.settings)


def detect_provider(request_body: Any) -> str | None:
    """Guess the provider format of a request from its shape"""
    if not isinstance(request_body, dict):
        return None

    keys = set(request_body.keys())
    model = str(request_body.get("model", "") or "").strip().lower()

    # gemini
    if keys & {"contents", "systemInstruction", "system_instruction", "generationConfig", "safetySettings"}:
        return Provider.GEMINI.value
    if "gemini" in model:
        return Provider.GEMINI.value

    # claude
    if keys & {"anthropic_version", "stop_sequences", "thinking", "max_tokens_to_sample"}:
        return Provider.CLAUDE.value
    if "claude" in model or "anthropic" in model:
        return Provider.CLAUDE.value
    if "system" in keys and "messages" in keys and not keys & _OPENAI_KNOBS:
        return Provider.CLAUDE.value

    # openai
    if "messages" in keys:
        return Provider.OPENAI.value
    if "gpt" in model or model.startswith(("o1", "o3", "o4")):
        return Provider.OPENAI.value
    return None
