"""JSON façade and HTTP surface for llmbridge"""

from .facade import (
    detect_provider,
    get_available_transformations,
    get_example_request,
    get_supported_providers,
    transform_chunk,
    transform_request,
    transform_response,
    transform_stream,
    validate_request,
)

__all__ = [
    "detect_provider",
    "get_available_transformations",
    "get_example_request",
    "get_supported_providers",
    "transform_chunk",
    "transform_request",
    "transform_response",
    "transform_stream",
    "validate_request",
]
