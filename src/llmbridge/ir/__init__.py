"""Unified intermediate representation"""

from .schema import (
    BuiltinTool,
    FinishReason,
    MediaSource,
    OpaqueSchema,
    PartType,
    ReasoningEffort,
    ResponseFormat,
    Role,
    SchemaMapping,
    ToolCallDelta,
    ToolChoice,
    UnifiedChoice,
    UnifiedDelta,
    UnifiedError,
    UnifiedMessage,
    UnifiedMessagePart,
    UnifiedRequest,
    UnifiedResponse,
    UnifiedStreamChoice,
    UnifiedStreamChunk,
    UnifiedTool,
    UnifiedToolCall,
    UnifiedUsage,
    unwrap_schema,
    wrap_schema,
)

__all__ = [
    "BuiltinTool",
    "FinishReason",
    "MediaSource",
    "OpaqueSchema",
    "PartType",
    "ReasoningEffort",
    "ResponseFormat",
    "Role",
    "SchemaMapping",
    "ToolCallDelta",
    "ToolChoice",
    "UnifiedChoice",
    "UnifiedDelta",
    "UnifiedError",
    "UnifiedMessage",
    "UnifiedMessagePart",
    "UnifiedRequest",
    "UnifiedResponse",
    "UnifiedStreamChoice",
    "UnifiedStreamChunk",
    "UnifiedTool",
    "UnifiedToolCall",
    "UnifiedUsage",
    "unwrap_schema",
    "wrap_schema",
]
