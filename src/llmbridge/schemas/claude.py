"""Claude Messages API wire models"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(extra="allow")


class ContentBlock(_Wire):
    """Any content block; which fields are set depends on ``type``"""

    type: str
    text: Optional[str] = None
    source: Optional[Dict[str, Any]] = None
    id: Optional[str] = None
    name: Optional[str] = None
    input: Optional[Any] = None
    tool_use_id: Optional[str] = None
    content: Optional[Union[str, List[Dict[str, Any]]]] = None
    is_error: Optional[bool] = None
    thinking: Optional[str] = None
    signature: Optional[str] = None
    title: Optional[str] = None


class Message(_Wire):
    role: str
    content: Union[str, List[ContentBlock]] = ""


class Tool(_Wire):
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    input_schema: Optional[Any] = None


class MessagesRequest(_Wire):
    model: str = ""
    messages: List[Message] = Field(default_factory=list)
    system: Optional[Union[str, List[ContentBlock]]] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    stop_sequences: Optional[List[str]] = None
    stream: Optional[bool] = None
    tools: Optional[List[Tool]] = None
    tool_choice: Optional[Dict[str, Any]] = None
    thinking: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None
    # Legacy text completions
    prompt: Optional[str] = None
    max_tokens_to_sample: Optional[int] = None


class Usage(_Wire):
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None


class ErrorBody(_Wire):
    type: str = "api_error"
    message: str = ""


class MessagesResponse(_Wire):
    id: str = ""
    type: str = "message"
    role: Optional[str] = "assistant"
    model: str = ""
    content: List[ContentBlock] = Field(default_factory=list)
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Optional[Usage] = None
    error: Optional[ErrorBody] = None
    # Legacy text completions
    completion: Optional[str] = None


class StreamEvent(_Wire):
    type: str
    message: Optional[Dict[str, Any]] = None
    index: Optional[int] = None
    content_block: Optional[ContentBlock] = None
    delta: Optional[Dict[str, Any]] = None
    usage: Optional[Dict[str, Any]] = None
    error: Optional[ErrorBody] = None
