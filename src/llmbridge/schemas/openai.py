"""OpenAI Chat Completions wire models"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(extra="allow")


class FunctionCall(_Wire):
    name: Optional[str] = None
    arguments: Optional[str] = None


class ToolCall(_Wire):
    index: Optional[int] = None
    id: Optional[str] = None
    type: Optional[str] = "function"
    function: FunctionCall = Field(default_factory=FunctionCall)


class ImageURL(_Wire):
    url: str
    detail: Optional[str] = None


class ContentPart(_Wire):
    type: str
    text: Optional[str] = None
    image_url: Optional[ImageURL] = None
    file: Optional[Dict[str, Any]] = None
    input_audio: Optional[Dict[str, Any]] = None


class ChatMessage(_Wire):
    role: str
    content: Optional[Union[str, List[ContentPart]]] = None
    name: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    tool_call_id: Optional[str] = None
    function_call: Optional[FunctionCall] = None
    reasoning_content: Optional[str] = None
    refusal: Optional[str] = None


class FunctionDefinition(_Wire):
    name: str
    description: Optional[str] = None
    parameters: Optional[Any] = None
    strict: Optional[bool] = None


class Tool(_Wire):
    type: str = "function"
    function: Optional[FunctionDefinition] = None
    name: Optional[str] = None


class ChatRequest(_Wire):
    model: str = ""
    messages: List[ChatMessage] = Field(default_factory=list)
    max_tokens: Optional[int] = None
    max_completion_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    seed: Optional[int] = None
    stop: Optional[Union[str, List[str]]] = None
    stream: Optional[bool] = None
    tools: Optional[List[Tool]] = None
    tool_choice: Optional[Union[str, Dict[str, Any]]] = None
    parallel_tool_calls: Optional[bool] = None
    response_format: Optional[Dict[str, Any]] = None
    reasoning_effort: Optional[str] = None
    web_search_options: Optional[Dict[str, Any]] = None


class PromptTokensDetails(_Wire):
    cached_tokens: Optional[int] = None


class CompletionTokensDetails(_Wire):
    reasoning_tokens: Optional[int] = None


class Usage(_Wire):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: Optional[int] = None
    prompt_tokens_details: Optional[PromptTokensDetails] = None
    completion_tokens_details: Optional[CompletionTokensDetails] = None


class Choice(_Wire):
    index: int = 0
    message: ChatMessage = Field(default_factory=lambda: ChatMessage(role="assistant"))
    finish_reason: Optional[str] = None
    logprobs: Optional[Any] = None


class ErrorBody(_Wire):
    message: str = ""
    type: Optional[str] = None
    code: Optional[Union[str, int]] = None


class ChatResponse(_Wire):
    id: str = ""
    object: Optional[str] = None
    created: Optional[int] = None
    model: str = ""
    choices: List[Choice] = Field(default_factory=list)
    usage: Optional[Usage] = None
    error: Optional[ErrorBody] = None


class ChunkDelta(_Wire):
    role: Optional[str] = None
    content: Optional[str] = None
    reasoning_content: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None


class ChunkChoice(_Wire):
    index: int = 0
    delta: ChunkDelta = Field(default_factory=ChunkDelta)
    finish_reason: Optional[str] = None


class ChatChunk(_Wire):
    id: str = ""
    object: Optional[str] = None
    created: Optional[int] = None
    model: str = ""
    choices: List[ChunkChoice] = Field(default_factory=list)
    usage: Optional[Usage] = None
    error: Optional[ErrorBody] = None
