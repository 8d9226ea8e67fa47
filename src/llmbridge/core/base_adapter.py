"""Base adapter class for all provider adapters"""

from __future__ import annotations

import json
import logging
import uuid
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..config import Settings
from ..ir.aliases import resolve_builtin
from ..ir.schema import (
    BuiltinTool,
    FinishReason,
    UnifiedRequest,
    UnifiedResponse,
    UnifiedStreamChunk,
    UnifiedTool,
)
from .exceptions import MalformedPayloadError

if TYPE_CHECKING:
    from ..streaming.session import StreamSession

logger = logging.getLogger(__name__)


class BaseAdapter(ABC):
    """Base class for all provider adapters

    An adapter converts one provider's wire format to and from the unified
    IR. Adapters hold no per-call state: everything a stream needs between
    chunks lives on the StreamSession passed in.
    """

    provider_name: str = ""

    # Provider finish reason -> IR; anything missing maps to content_filter
    FINISH_REASONS: Dict[str, FinishReason] = {}
    # IR -> provider finish reason
    REVERSE_FINISH_REASONS: Dict[FinishReason, str] = {}

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()

    @abstractmethod
    def validate(self, payload: Dict[str, Any]) -> Any:
        """Check a request payload's structural preconditions

        Returns:
            The payload decoded into the provider's wire model

        Raises:
            MalformedPayloadError: If the payload does not decode
            ValidationError: If a required field is missing or empty
        """

    @abstractmethod
    def request_to_ir(self, payload: Dict[str, Any]) -> UnifiedRequest:
        """Convert provider-specific request to unified IR format"""

    @abstractmethod
    def request_from_ir(self, ir: UnifiedRequest) -> Dict[str, Any]:
        """Convert unified IR request to provider-specific format"""

    @abstractmethod
    def response_to_ir(self, payload: Dict[str, Any]) -> UnifiedResponse:
        """Convert provider-specific response to unified IR format"""

    @abstractmethod
    def response_from_ir(self, ir: UnifiedResponse) -> Dict[str, Any]:
        """Convert unified IR response to provider-specific format"""

    @abstractmethod
    def chunk_to_ir(self, payload: Any, session: "StreamSession") -> UnifiedStreamChunk:
        """Convert one provider stream chunk to a unified chunk"""

    @abstractmethod
    def chunk_from_ir(self, chunk: UnifiedStreamChunk, session: "StreamSession") -> List[Any]:
        """Convert one unified chunk to zero or more provider stream chunks"""

    # Finish reasons

    def finish_reason_to_ir(self, raw: Optional[str]) -> Optional[FinishReason]:
        if raw is None or raw == "":
            return None
        reason = self.FINISH_REASONS.get(raw)
        if reason is None:
            logger.debug("%s: unknown finish reason %r, treating as content_filter", self.provider_name, raw)
            return FinishReason.CONTENT_FILTER
        return reason

    def finish_reason_from_ir(self, reason: Optional[FinishReason]) -> Optional[str]:
        if reason is None:
            return None
        return self.REVERSE_FINISH_REASONS[FinishReason(reason)]

    # Tool call helpers

    @staticmethod
    def builtin_for(tool: UnifiedTool) -> Optional[BuiltinTool]:
        """The tool's built-in identity, falling back to an alias match on its name"""
        return tool.builtin or resolve_builtin(tool.name)

    def new_tool_call_id(self) -> str:
        return f"{self.settings.tool_call_id_prefix}{uuid.uuid4().hex[:24]}"

    def parse_arguments(self, raw: Any) -> Dict[str, Any]:
        """Decode tool call arguments into a dict

        Raises:
            MalformedPayloadError: If the text is not a JSON object
        """
        if raw is None or raw == "":
            return {}
        if isinstance(raw, dict):
            return raw
        if not isinstance(raw, str):
            raise MalformedPayloadError(
                f"Tool call arguments must be a JSON object, got {type(raw).__name__}",
                provider=self.provider_name,
            )
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedPayloadError(
                "Tool call arguments are not valid JSON",
                provider=self.provider_name,
                details={"arguments": raw, "error": str(exc)},
            ) from exc
        if not isinstance(value, dict):
            raise MalformedPayloadError(
                "Tool call arguments must decode to a JSON object",
                provider=self.provider_name,
                details={"arguments": raw},
            )
        return value

    @staticmethod
    def dump_arguments(arguments: Dict[str, Any]) -> str:
        return json.dumps(arguments, ensure_ascii=False, separators=(",", ":"))

    # Round-trip checks

    def check_idempotency(self, original: Any, converted: Any) -> bool:
        """True when a payload survives A -> IR -> A without changes"""
        differences = self.diff(original, converted)
        if differences:
            logger.debug("%s round-trip differences: %s", self.provider_name, differences)
        return not differences

    @classmethod
    def diff(cls, left: Any, right: Any, path: str = "$") -> List[str]:
        """Ordered deep comparison; returns the paths that differ"""
        if isinstance(left, dict) and isinstance(right, dict):
            differences: List[str] = []
            for key in sorted(set(left) | set(right), key=str):
                if key not in left:
                    differences.append(f"{path}.{key}: added")
                elif key not in right:
                    differences.append(f"{path}.{key}: removed")
                else:
                    differences.extend(cls.diff(left[key], right[key], f"{path}.{key}"))
            return differences
        if isinstance(left, list) and isinstance(right, list):
            if len(left) != len(right):
                return [f"{path}: length {len(left)} != {len(right)}"]
            differences = []
            for index, (a, b) in enumerate(zip(left, right)):
                differences.extend(cls.diff(a, b, f"{path}[{index}]"))
            return differences
        if left != right or type(left) is not type(right) and not (
            isinstance(left, (int, float)) and isinstance(right, (int, float))
        ):
            return [f"{path}: {left!r} != {right!r}"]
        return []
