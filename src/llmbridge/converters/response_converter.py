"""Response format converter"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

from ..core.exceptions import ConversionError, LLMBridgeError

if TYPE_CHECKING:
    from ..utils.provider_registry import ProviderRegistry

logger = logging.getLogger(__name__)


class ResponseConverter:
    """Converts responses between different provider formats"""

    def __init__(self, registry: "ProviderRegistry") -> None:
        self.registry = registry

    def convert(
        self,
        data: Dict[str, Any],
        from_provider: str,
        to_provider: str,
    ) -> Dict[str, Any]:
        """Convert a response from one provider format to another

        Raises:
            UnsupportedProviderError: If provider is not supported
            LLMBridgeError: If the payload is invalid or cannot be represented
            ConversionError: If conversion fails unexpectedly
        """
        from_adapter = self.registry.get_adapter(from_provider)
        to_adapter = self.registry.get_adapter(to_provider)

        try:
            unified_response = from_adapter.response_to_ir(data)
            converted = to_adapter.response_from_ir(unified_response)
        except LLMBridgeError:
            raise
        except Exception as e:
            raise ConversionError(
                f"Failed to convert response from {from_provider} to {to_provider}",
                str(from_provider),
                str(to_provider),
                {"original_error": str(e)},
            ) from e

        logger.debug("Converted response %s -> %s", from_provider, to_provider)
        return converted

    def check_idempotency(self, data: Dict[str, Any], provider: str) -> bool:
        """Check if conversion is idempotent (A -> IR -> A)"""
        converted = self.convert(data, provider, provider)
        return self.registry.get_adapter(provider).check_idempotency(data, converted)
