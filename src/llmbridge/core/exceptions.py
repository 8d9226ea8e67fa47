"""llmbridge exception classes for conversion errors"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class LLMBridgeError(Exception):
    """Base exception for all llmbridge errors"""

    code = "llmbridge_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for envelopes and logs"""
        data: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


class ValidationError(LLMBridgeError):
    """Raised when a payload fails a provider's structural preconditions"""

    code = "validation_error"

    def __init__(
        self,
        message: str,
        validation_errors: Optional[List[str]] = None,
        provider: Optional[str] = None,
    ) -> None:
        self.validation_errors = validation_errors or [message]
        self.provider = provider
        details: Dict[str, Any] = {"errors": self.validation_errors}
        if provider:
            details["provider"] = provider
        super().__init__(message, details)


class MalformedPayloadError(LLMBridgeError):
    """Raised when a payload cannot be decoded into the provider's schema"""

    code = "malformed_payload"

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.provider = provider
        details = dict(details or {})
        if provider:
            details.setdefault("provider", provider)
        super().__init__(message, details)


class UnsupportedProviderError(LLMBridgeError):
    """Raised when an unregistered provider is requested"""

    code = "unsupported_provider"

    def __init__(self, provider: str, supported_providers: List[str]) -> None:
        self.provider = provider
        self.supported_providers = supported_providers
        message = (
            f"Unsupported provider: '{provider}'. "
            f"Supported providers: {', '.join(supported_providers) or '(none)'}"
        )
        super().__init__(message, {"provider": provider, "supported": supported_providers})


AdapterNotFound = UnsupportedProviderError


class UnsupportedCapabilityError(LLMBridgeError):
    """Raised when the target provider cannot represent part of the payload"""

    code = "unsupported_capability"

    def __init__(
        self,
        feature: str,
        provider: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.feature = feature
        self.provider = provider
        message = f"Provider '{provider}' cannot represent: {feature}"
        merged = {"feature": feature, "provider": provider}
        merged.update(details or {})
        super().__init__(message, merged)


class ConversionError(LLMBridgeError):
    """Raised when conversion between formats fails unexpectedly"""

    code = "conversion_error"

    def __init__(
        self,
        message: str,
        from_provider: str,
        to_provider: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.from_provider = from_provider
        self.to_provider = to_provider
        merged = {"from_provider": from_provider, "to_provider": to_provider}
        merged.update(details or {})
        super().__init__(message, merged)


class StreamClosedError(LLMBridgeError):
    """Raised when a chunk is applied to a closed stream session"""

    code = "stream_closed"

    def __init__(self, message: str = "Stream session is closed") -> None:
        super().__init__(message)
