"""Utility components for llmbridge"""

from .provider_registry import (
    ProviderRegistry,
    TransformationPair,
    ValidationResult,
    create_default_registry,
)

__all__ = [
    "ProviderRegistry",
    "TransformationPair",
    "ValidationResult",
    "create_default_registry",
]
