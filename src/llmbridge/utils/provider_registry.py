"""Provider registry composing adapters into source -> target transformations"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from ..config import Settings
from ..converters import RequestConverter, ResponseConverter, StreamConverter
from ..core.base_adapter import BaseAdapter
from ..core.exceptions import LLMBridgeError, UnsupportedProviderError, ValidationError
from ..streaming.session import StreamSession
from ..types.provider import Provider, normalize_provider

logger = logging.getLogger(__name__)


class TransformKind(str, Enum):
    REQUEST = "request"
    RESPONSE = "response"
    STREAM_CHUNK = "stream-chunk"

    @classmethod
    def parse(cls, kind: Union[str, "TransformKind"]) -> "TransformKind":
        if isinstance(kind, TransformKind):
            return kind
        key = kind.strip().lower().replace("_", "-")
        if key in ("chunk", "stream"):
            return cls.STREAM_CHUNK
        try:
            return cls(key)
        except ValueError:
            expected = ", ".join(k.value for k in cls)
            raise ValidationError(
                f"Unknown transformation kind {kind!r}; expected one of {expected}",
                [f"kind must be one of {expected}"],
            ) from None


@dataclass(frozen=True)
class TransformationPair:
    source: str
    target: str

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "target": self.target}


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[LLMBridgeError] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"valid": self.is_valid}
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


class ProviderRegistry:
    """Adapters by provider name

    Instances are explicit values: build one with create_default_registry()
    or register adapters yourself. Registration is expected to finish before
    the registry is shared between threads.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self._adapters: Dict[str, BaseAdapter] = {}

    def register(self, adapter: BaseAdapter, name: Optional[Union[str, Provider]] = None) -> None:
        """Register an adapter; a later registration under the same name wins

        Args:
            adapter: Adapter instance
            name: Provider name, defaults to ``adapter.provider_name``
        """
        if not isinstance(adapter, BaseAdapter):
            raise TypeError(f"Adapter must be a BaseAdapter instance, got {type(adapter).__name__}")
        key = normalize_provider(name or adapter.provider_name)
        if not key:
            raise ValueError("Provider name must not be empty")
        if key in self._adapters:
            logger.info("Replacing adapter for provider %r with %s", key, type(adapter).__name__)
        self._adapters[key] = adapter

    def unregister(self, name: Union[str, Provider]) -> None:
        self._adapters.pop(normalize_provider(name), None)

    def clear(self) -> None:
        self._adapters.clear()

    def get_adapter(self, name: Union[str, Provider]) -> BaseAdapter:
        """Look up a registered adapter

        Raises:
            UnsupportedProviderError: If no adapter is registered under ``name``
        """
        adapter = self._adapters.get(normalize_provider(name))
        if adapter is None:
            raise UnsupportedProviderError(str(getattr(name, "value", name)), self.list_providers())
        return adapter

    def is_supported(self, name: Union[str, Provider]) -> bool:
        return normalize_provider(name) in self._adapters

    def list_providers(self) -> List[str]:
        return sorted(self._adapters)

    def list_pairs(self) -> List[TransformationPair]:
        """Every ordered pair of distinct registered providers"""
        providers = self.list_providers()
        return [
            TransformationPair(source, target)
            for source in providers
            for target in providers
            if source != target
        ]

    def transform(
        self,
        source: Union[str, Provider],
        target: Union[str, Provider],
        kind: Union[str, TransformKind],
        payload: Any,
        session: Optional[StreamSession] = None,
    ) -> Any:
        """Convert a payload from the source format to the target format

        Args:
            source: Provider the payload is written for
            target: Provider to convert to
            kind: request, response or stream-chunk
            payload: Decoded JSON payload
            session: Stream session; stream-chunk only, ephemeral if omitted

        Returns:
            The target payload; a list of target chunks for stream-chunk

        Raises:
            UnsupportedProviderError: If either provider is not registered
            LLMBridgeError: Any conversion failure
        """
        transform_kind = TransformKind.parse(kind)
        source, target = normalize_provider(source), normalize_provider(target)
        if transform_kind == TransformKind.REQUEST:
            return RequestConverter(self).convert(payload, source, target)
        if transform_kind == TransformKind.RESPONSE:
            return ResponseConverter(self).convert(payload, source, target)
        return StreamConverter(self).convert_chunk(payload, source, target, session or StreamSession())

    def transform_stream(
        self,
        source: Union[str, Provider],
        target: Union[str, Provider],
        chunks: Iterable[Any],
        session: Optional[StreamSession] = None,
    ) -> List[Any]:
        """Convert a whole stream through one session"""
        source, target = normalize_provider(source), normalize_provider(target)
        return StreamConverter(self).convert_stream(chunks, source, target, session)

    def validate(self, provider: Union[str, Provider], payload: Any) -> ValidationResult:
        """Validate a request payload without raising

        Raises:
            UnsupportedProviderError: If the provider is not registered
        """
        adapter = self.get_adapter(provider)
        try:
            adapter.validate(payload)
        except LLMBridgeError as exc:
            return ValidationResult(False, exc)
        return ValidationResult(True)


def create_default_registry(settings: Optional[Settings] = None) -> ProviderRegistry:
    """Registry with the OpenAI, Gemini and Claude adapters"""
    from ..adapters import ClaudeAdapter, GeminiAdapter, OpenAIAdapter

    settings = settings or Settings()
    registry = ProviderRegistry(settings)
    for adapter_class in (OpenAIAdapter, GeminiAdapter, ClaudeAdapter):
        registry.register(adapter_class(settings))
    return registry
