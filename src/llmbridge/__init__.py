"""llmbridge - LLM chat format transformation engine

Converts chat requests, responses and stream chunks between the OpenAI,
Gemini and Claude wire formats through a provider-neutral intermediate
representation (IR).
"""

from .adapters import ClaudeAdapter, GeminiAdapter, OpenAIAdapter
from .config import Settings, load_settings
from .core.exceptions import (
    AdapterNotFound,
    ConversionError,
    LLMBridgeError,
    MalformedPayloadError,
    StreamClosedError,
    UnsupportedCapabilityError,
    UnsupportedProviderError,
    ValidationError,
)
from .streaming import StreamSession
from .types.provider import Provider
from .utils.provider_registry import ProviderRegistry, create_default_registry

__version__ = "0.1.0"
__all__ = [
    "AdapterNotFound",
    "ClaudeAdapter",
    "ConversionError",
    "GeminiAdapter",
    "LLMBridgeError",
    "MalformedPayloadError",
    "OpenAIAdapter",
    "Provider",
    "ProviderRegistry",
    "Settings",
    "StreamClosedError",
    "StreamSession",
    "UnsupportedCapabilityError",
    "UnsupportedProviderError",
    "ValidationError",
    "create_default_registry",
    "load_settings",
]
