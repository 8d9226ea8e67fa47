"""Core components for llmbridge"""

from .base_adapter import BaseAdapter
from .exceptions import (
    AdapterNotFound,
    ConversionError,
    LLMBridgeError,
    MalformedPayloadError,
    StreamClosedError,
    UnsupportedCapabilityError,
    UnsupportedProviderError,
    ValidationError,
)

__all__ = [
    "AdapterNotFound",
    "BaseAdapter",
    "ConversionError",
    "LLMBridgeError",
    "MalformedPayloadError",
    "StreamClosedError",
    "UnsupportedCapabilityError",
    "UnsupportedProviderError",
    "ValidationError",
]
