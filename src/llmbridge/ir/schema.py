"""Unified intermediate representation shared by every provider adapter

All provider formats convert to and from these models. Text always lives in
``UnifiedMessage.content``; ``parts`` only carries non-text media.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class FinishReason(str, Enum):
    """Closed set of normalized finish reasons"""

    STOP = "stop"
    LENGTH = "length"
    TOOL_CALLS = "tool_calls"
    CONTENT_FILTER = "content_filter"


class PartType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    DOCUMENT = "document"


class BuiltinTool(str, Enum):
    """Provider-executed tools that have a native form on each provider"""

    WEB_SEARCH = "web_search"
    CODE_EXECUTION = "code_execution"


class ReasoningEffort(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class _IRModel(BaseModel):
    model_config = ConfigDict(use_enum_values=False, validate_assignment=False)


class MediaSource(_IRModel):
    """Either inline base64 data or a URL reference, never both"""

    data: Optional[str] = None
    media_type: Optional[str] = None
    url: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "MediaSource":
        if (self.data is None) == (self.url is None):
            raise ValueError("MediaSource needs exactly one of 'data' or 'url'")
        return self

    @property
    def is_inline(self) -> bool:
        return self.data is not None

    def as_data_url(self) -> str:
        """Render as a data: URL (inline) or return the plain URL"""
        if self.data is not None:
            return f"data:{self.media_type or 'application/octet-stream'};base64,{self.data}"
        return self.url or ""


class UnifiedMessagePart(_IRModel):
    """One non-text piece of message content"""

    type: PartType
    text: Optional[str] = None
    source: Optional[MediaSource] = None
    filename: Optional[str] = None

    @model_validator(mode="after")
    def _check_payload(self) -> "UnifiedMessagePart":
        if self.type == PartType.TEXT:
            if self.text is None:
                raise ValueError("text part requires 'text'")
        elif self.source is None:
            raise ValueError(f"{self.type.value} part requires 'source'")
        return self


class SchemaMapping(_IRModel):
    """A JSON-object tool schema whose structure adapters may inspect"""

    kind: Literal["mapping"] = "mapping"
    value: Dict[str, Any] = Field(default_factory=dict)


class OpaqueSchema(_IRModel):
    """Any other JSON value, carried through untouched"""

    kind: Literal["opaque"] = "opaque"
    value: Any = None


ToolSchema = Union[SchemaMapping, OpaqueSchema]


def wrap_schema(value: Any) -> Optional[ToolSchema]:
    """Tag a raw schema value; ``None`` stays ``None``"""
    if value is None:
        return None
    if isinstance(value, (SchemaMapping, OpaqueSchema)):
        return value
    if isinstance(value, dict):
        return SchemaMapping(value=value)
    return OpaqueSchema(value=value)


def unwrap_schema(schema: Optional[ToolSchema]) -> Any:
    return None if schema is None else schema.value


class UnifiedTool(_IRModel):
    """A tool offered to the model: a user function or a built-in"""

    name: str
    description: Optional[str] = None
    parameters: Optional[ToolSchema] = None
    builtin: Optional[BuiltinTool] = None
    # Built-in options are provider specific; config_source names the provider they came from
    config: Dict[str, Any] = Field(default_factory=dict)
    config_source: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _tag_parameters(cls, data: Any) -> Any:
        if isinstance(data, dict) and "parameters" in data:
            params = data["parameters"]
            tagged = isinstance(params, dict) and set(params) == {"kind", "value"}
            if not tagged:
                data = dict(data)
                data["parameters"] = wrap_schema(params)
        return data

    @property
    def is_builtin(self) -> bool:
        return self.builtin is not None

    def config_for(self, provider: str) -> Dict[str, Any]:
        """Built-in options, only when they were written for ``provider``"""
        if self.config and self.config_source == provider:
            return dict(self.config)
        return {}

    @property
    def parameters_json(self) -> Any:
        return unwrap_schema(self.parameters)


class UnifiedToolCall(_IRModel):
    id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ToolChoice(_IRModel):
    mode: Literal["auto", "none", "required", "tool"] = "auto"
    name: Optional[str] = None

    @model_validator(mode="after")
    def _name_for_tool(self) -> "ToolChoice":
        if self.mode == "tool" and not self.name:
            raise ValueError("tool_choice mode 'tool' requires a name")
        return self


class ResponseFormat(_IRModel):
    type: Literal["text", "json_object", "json_schema"] = "text"
    name: Optional[str] = None
    json_schema: Optional[Dict[str, Any]] = None
    strict: Optional[bool] = None


class UnifiedMessage(_IRModel):
    role: Role
    content: str = ""
    parts: List[UnifiedMessagePart] = Field(default_factory=list)
    name: Optional[str] = None
    tool_calls: List[UnifiedToolCall] = Field(default_factory=list)
    tool_call_id: Optional[str] = None
    reasoning_content: Optional[str] = None

    @model_validator(mode="after")
    def _normalize(self) -> "UnifiedMessage":
        text_parts = [p for p in self.parts if p.type == PartType.TEXT]
        if text_parts:
            self.content = self.content + "".join(p.text or "" for p in text_parts)
            self.parts = [p for p in self.parts if p.type != PartType.TEXT]
        if self.tool_calls and self.role != Role.ASSISTANT:
            raise ValueError("only assistant messages may carry tool_calls")
        if self.tool_call_id is not None and self.role != Role.TOOL:
            raise ValueError("only tool messages may carry tool_call_id")
        if self.role == Role.TOOL and not self.tool_call_id:
            raise ValueError("tool messages require tool_call_id")
        return self


class UnifiedRequest(_IRModel):
    model: str = ""
    messages: List[UnifiedMessage] = Field(default_factory=list)
    system: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    seed: Optional[int] = None
    stop: Optional[List[str]] = None
    stream: bool = False
    tools: List[UnifiedTool] = Field(default_factory=list)
    tool_choice: Optional[ToolChoice] = None
    response_format: Optional[ResponseFormat] = None
    reasoning_effort: Optional[ReasoningEffort] = None
    parallel_tool_calls: Optional[bool] = None

    def system_texts(self) -> List[str]:
        """The explicit system prompt followed by system-role message content"""
        texts = [self.system] if self.system else []
        texts.extend(m.content for m in self.messages if m.role == Role.SYSTEM and m.content)
        return texts

    def non_system_messages(self) -> List[UnifiedMessage]:
        return [m for m in self.messages if m.role != Role.SYSTEM]


class UnifiedUsage(_IRModel):
    """Token accounting; cache figures nest in prompt, reasoning in completion"""

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)
    cache_read_tokens: Optional[int] = Field(default=None, ge=0)
    cache_write_tokens: Optional[int] = Field(default=None, ge=0)
    reasoning_tokens: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_totals(self) -> "UnifiedUsage":
        if self.total_tokens != self.prompt_tokens + self.completion_tokens:
            raise ValueError(
                f"total_tokens ({self.total_tokens}) must equal prompt_tokens "
                f"({self.prompt_tokens}) + completion_tokens ({self.completion_tokens})"
            )
        cached = (self.cache_read_tokens or 0) + (self.cache_write_tokens or 0)
        if cached > self.prompt_tokens:
            raise ValueError("cache tokens exceed prompt_tokens")
        if (self.reasoning_tokens or 0) > self.completion_tokens:
            raise ValueError("reasoning_tokens exceed completion_tokens")
        return self

    @classmethod
    def build(
        cls,
        prompt_tokens: int,
        completion_tokens: int,
        reported_total: Optional[int] = None,
        **breakdown: Optional[int],
    ) -> "UnifiedUsage":
        """Create usage from provider figures, reconciling a mismatched total

        Tokens the provider counts in its total but in neither side are
        attributed to the prompt.
        """
        prompt_tokens = max(prompt_tokens, 0)
        completion_tokens = max(completion_tokens, 0)
        if reported_total is not None and reported_total > prompt_tokens + completion_tokens:
            prompt_tokens = reported_total - completion_tokens
        return cls(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
            **breakdown,
        )


class UnifiedError(_IRModel):
    type: str = "api_error"
    message: str = ""
    code: Optional[Union[str, int]] = None


class UnifiedChoice(_IRModel):
    index: int = 0
    message: UnifiedMessage
    finish_reason: Optional[FinishReason] = None
    logprobs: Optional[Any] = None


class UnifiedResponse(_IRModel):
    id: str = ""
    provider: Optional[str] = None
    model: str = ""
    created: int = Field(default_factory=lambda: int(time.time()))
    choices: List[UnifiedChoice] = Field(default_factory=list)
    usage: Optional[UnifiedUsage] = None
    error: Optional[UnifiedError] = None

    @model_validator(mode="after")
    def _error_excludes_choices(self) -> "UnifiedResponse":
        if self.error is not None and self.choices:
            raise ValueError("an error response cannot carry choices")
        return self


class ToolCallDelta(_IRModel):
    """A fragment of one tool call inside a stream"""

    index: int = 0
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: str = ""


class UnifiedDelta(_IRModel):
    role: Optional[Role] = None
    content: Optional[str] = None
    reasoning_content: Optional[str] = None
    tool_calls: List[ToolCallDelta] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return (
            self.role is None
            and not self.content
            and not self.reasoning_content
            and not self.tool_calls
        )


class UnifiedStreamChoice(_IRModel):
    index: int = 0
    delta: UnifiedDelta = Field(default_factory=UnifiedDelta)
    finish_reason: Optional[FinishReason] = None


class UnifiedStreamChunk(_IRModel):
    id: str = ""
    model: str = ""
    created: Optional[int] = None
    provider: Optional[str] = None
    choices: List[UnifiedStreamChoice] = Field(default_factory=list)
    usage: Optional[UnifiedUsage] = None
    error: Optional[UnifiedError] = None
    done: bool = False
