"""Gemini generateContent wire models

Gemini accepts both camelCase (REST) and snake_case (SDK) field names; both
decode into the same models and output is always camelCase.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Wire(BaseModel):
    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)


class Blob(_Wire):
    mime_type: Optional[str] = None
    data: str = ""


class FileData(_Wire):
    mime_type: Optional[str] = None
    file_uri: str = ""


class FunctionCall(_Wire):
    name: str
    args: Optional[Dict[str, Any]] = None
    id: Optional[str] = None


class FunctionResponse(_Wire):
    name: str
    response: Optional[Dict[str, Any]] = None
    id: Optional[str] = None


class ExecutableCode(_Wire):
    language: Optional[str] = None
    code: str = ""


class CodeExecutionResult(_Wire):
    outcome: Optional[str] = None
    output: Optional[str] = None


class Part(_Wire):
    text: Optional[str] = None
    thought: Optional[bool] = None
    thought_signature: Optional[str] = None
    inline_data: Optional[Blob] = None
    file_data: Optional[FileData] = None
    function_call: Optional[FunctionCall] = None
    function_response: Optional[FunctionResponse] = None
    executable_code: Optional[ExecutableCode] = None
    code_execution_result: Optional[CodeExecutionResult] = None


class Content(_Wire):
    role: Optional[str] = None
    parts: List[Part] = Field(default_factory=list)


class FunctionDeclaration(_Wire):
    name: str
    description: Optional[str] = None
    parameters: Optional[Any] = None
    parameters_json_schema: Optional[Any] = None


class Tool(_Wire):
    function_declarations: Optional[List[FunctionDeclaration]] = None


class FunctionCallingConfig(_Wire):
    mode: Optional[str] = None
    allowed_function_names: Optional[List[str]] = None


class ToolConfig(_Wire):
    function_calling_config: Optional[FunctionCallingConfig] = None


class ThinkingConfig(_Wire):
    thinking_budget: Optional[int] = None
    include_thoughts: Optional[bool] = None


class GenerationConfig(_Wire):
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    max_output_tokens: Optional[int] = None
    stop_sequences: Optional[List[str]] = None
    candidate_count: Optional[int] = None
    seed: Optional[int] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    response_mime_type: Optional[str] = None
    response_schema: Optional[Dict[str, Any]] = None
    response_json_schema: Optional[Dict[str, Any]] = None
    thinking_config: Optional[ThinkingConfig] = None


class GenerateContentRequest(_Wire):
    model: Optional[str] = None
    contents: List[Content] = Field(default_factory=list)
    system_instruction: Optional[Content] = None
    generation_config: Optional[GenerationConfig] = None
    tools: Optional[List[Tool]] = None
    tool_config: Optional[ToolConfig] = None
    safety_settings: Optional[List[Dict[str, Any]]] = None


class UsageMetadata(_Wire):
    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: Optional[int] = None
    cached_content_token_count: Optional[int] = None
    thoughts_token_count: Optional[int] = None
    tool_use_prompt_token_count: Optional[int] = None


class Candidate(_Wire):
    content: Optional[Content] = None
    finish_reason: Optional[str] = None
    index: int = 0
    safety_ratings: Optional[List[Dict[str, Any]]] = None


class PromptFeedback(_Wire):
    block_reason: Optional[str] = None


class ErrorBody(_Wire):
    code: Optional[Union[int, str]] = None
    message: str = ""
    status: Optional[str] = None


class GenerateContentResponse(_Wire):
    candidates: List[Candidate] = Field(default_factory=list)
    usage_metadata: Optional[UsageMetadata] = None
    model_version: Optional[str] = None
    response_id: Optional[str] = None
    create_time: Optional[str] = None
    prompt_feedback: Optional[PromptFeedback] = None
    error: Optional[ErrorBody] = None
