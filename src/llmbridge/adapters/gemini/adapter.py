"""Main Gemini adapter implementation"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ...config import Settings
from ...core.base_adapter import BaseAdapter
from ...core.exceptions import ValidationError
from ...ir.schema import FinishReason, UnifiedRequest, UnifiedResponse, UnifiedStreamChunk
from ...schemas import decode_payload
from ...schemas import gemini as wire
from ...streaming.session import StreamSession
from .response_handler import GeminiResponseHandler
from .transformation import GeminiRequestTransformer


class GeminiAdapter(BaseAdapter):
    """Adapter for Google Gemini generateContent format

    Gemini is the content-parts style format: ``contents`` of role-tagged
    parts, function calls without ids, a separate ``systemInstruction`` and
    streams of complete parts. Requests and responses are delegated to
    GeminiRequestTransformer and GeminiResponseHandler.
    """

    provider_name = "gemini"

    FINISH_REASONS = {
        "STOP": FinishReason.STOP,
        "MAX_TOKENS": FinishReason.LENGTH,
        "SAFETY": FinishReason.CONTENT_FILTER,
        "RECITATION": FinishReason.CONTENT_FILTER,
        "BLOCKLIST": FinishReason.CONTENT_FILTER,
        "PROHIBITED_CONTENT": FinishReason.CONTENT_FILTER,
        "SPII": FinishReason.CONTENT_FILTER,
        "IMAGE_SAFETY": FinishReason.CONTENT_FILTER,
    }
    REVERSE_FINISH_REASONS = {
        FinishReason.STOP: "STOP",
        FinishReason.LENGTH: "MAX_TOKENS",
        FinishReason.TOOL_CALLS: "STOP",
        FinishReason.CONTENT_FILTER: "SAFETY",
    }

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__(settings)
        self.request_transformer = GeminiRequestTransformer(self)
        self.response_handler = GeminiResponseHandler(self)

    def validate(self, payload: Dict[str, Any]) -> wire.GenerateContentRequest:
        request = decode_payload(wire.GenerateContentRequest, payload, self.provider_name)
        if not request.contents:
            raise ValidationError(
                "Invalid Gemini request: contents must not be empty",
                ["contents must not be empty"],
                provider=self.provider_name,
            )
        return request

    def request_to_ir(self, payload: Dict[str, Any]) -> UnifiedRequest:
        """Convert Gemini request to unified IR format"""
        request = self.validate(payload)
        return self.request_transformer.to_ir(request)

    def request_from_ir(self, ir: UnifiedRequest) -> Dict[str, Any]:
        """Convert unified IR request to Gemini format"""
        return self.request_transformer.from_ir(ir)

    def response_to_ir(self, payload: Dict[str, Any]) -> UnifiedResponse:
        response = decode_payload(wire.GenerateContentResponse, payload, self.provider_name)
        return self.response_handler.to_ir(response)

    def response_from_ir(self, ir: UnifiedResponse) -> Dict[str, Any]:
        return self.response_handler.from_ir(ir)

    def chunk_to_ir(self, payload: Any, session: StreamSession) -> UnifiedStreamChunk:
        chunk = decode_payload(wire.GenerateContentResponse, payload, self.provider_name)
        return self.response_handler.chunk_to_ir(chunk, session)

    def chunk_from_ir(self, chunk: UnifiedStreamChunk, session: StreamSession) -> List[Any]:
        return self.response_handler.chunk_from_ir(chunk, session)
