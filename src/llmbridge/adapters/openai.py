"""OpenAI adapter for format conversion"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from ..core.base_adapter import BaseAdapter
from ..core.exceptions import UnsupportedCapabilityError, ValidationError
from ..ir.aliases import resolve_builtin
from ..ir.schema import (
    BuiltinTool,
    FinishReason,
    PartType,
    ReasoningEffort,
    ResponseFormat,
    Role,
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
    wrap_schema,
)
from ..schemas import decode_payload
from ..schemas import openai as wire
from ..streaming.session import StreamSession
from ..utils.media import source_from_url

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"

_ROLES = {
    "system": Role.SYSTEM,
    "developer": Role.SYSTEM,
    "user": Role.USER,
    "assistant": Role.ASSISTANT,
    "tool": Role.TOOL,
    "function": Role.TOOL,
}

# Efforts outside the IR levels; None means reasoning is off
_EFFORT_ALIASES = {"minimal": ReasoningEffort.LOW, "none": None}


class OpenAIAdapter(BaseAdapter):
    """Adapter for OpenAI Chat Completions format

    OpenAI is the text-completion style format: flat messages with string or
    part-list content, JSON-string tool arguments and ``data: [DONE]``
    terminated streams.
    """

    provider_name = "openai"

    FINISH_REASONS = {
        "stop": FinishReason.STOP,
        "length": FinishReason.LENGTH,
        "tool_calls": FinishReason.TOOL_CALLS,
        "function_call": FinishReason.TOOL_CALLS,
        "content_filter": FinishReason.CONTENT_FILTER,
    }
    REVERSE_FINISH_REASONS = {
        FinishReason.STOP: "stop",
        FinishReason.LENGTH: "length",
        FinishReason.TOOL_CALLS: "tool_calls",
        FinishReason.CONTENT_FILTER: "content_filter",
    }

    def validate(self, payload: Dict[str, Any]) -> wire.ChatRequest:
        request = decode_payload(wire.ChatRequest, payload, self.provider_name)
        errors = []
        if not request.model:
            errors.append("model is required")
        if not request.messages:
            errors.append("messages must not be empty")
        if errors:
            raise ValidationError(
                f"Invalid OpenAI request: {'; '.join(errors)}",
                errors,
                provider=self.provider_name,
            )
        return request

    # Requests

    def request_to_ir(self, payload: Dict[str, Any]) -> UnifiedRequest:
        """Convert OpenAI chat completion request to unified IR"""
        request = self.validate(payload)

        messages = self._messages_to_ir(request.messages)

        tools: List[UnifiedTool] = []
        for tool in request.tools or []:
            tools.append(self._tool_to_ir(tool))
        if request.web_search_options is not None:
            tools.append(
                UnifiedTool(
                    name=BuiltinTool.WEB_SEARCH.value,
                    builtin=BuiltinTool.WEB_SEARCH,
                    config=dict(request.web_search_options),
                    config_source=self.provider_name,
                )
            )

        stop = request.stop
        if isinstance(stop, str):
            stop = [stop]

        return UnifiedRequest(
            model=request.model,
            messages=messages,
            max_tokens=request.max_completion_tokens or request.max_tokens,
            temperature=request.temperature,
            top_p=request.top_p,
            top_k=request.top_k,
            frequency_penalty=request.frequency_penalty,
            presence_penalty=request.presence_penalty,
            seed=request.seed,
            stop=stop,
            stream=bool(request.stream),
            tools=tools,
            tool_choice=self._tool_choice_to_ir(request.tool_choice),
            response_format=self._response_format_to_ir(request.response_format),
            reasoning_effort=self._effort_to_ir(request.reasoning_effort),
            parallel_tool_calls=request.parallel_tool_calls,
        )

    def request_from_ir(self, ir: UnifiedRequest) -> Dict[str, Any]:
        """Convert unified IR request to OpenAI format"""
        messages: List[Dict[str, Any]] = []
        if ir.system:
            messages.append({"role": "system", "content": ir.system})
        messages.extend(self._message_from_ir(message) for message in ir.messages)

        result: Dict[str, Any] = {"model": ir.model, "messages": messages}

        tools = []
        for tool in ir.tools:
            builtin = self.builtin_for(tool)
            if builtin == BuiltinTool.WEB_SEARCH:
                result["web_search_options"] = tool.config_for(self.provider_name)
            elif builtin == BuiltinTool.CODE_EXECUTION:
                logger.warning("OpenAI chat completions has no code execution tool; dropping %r", tool.name)
            else:
                function: Dict[str, Any] = {"name": tool.name}
                if tool.description is not None:
                    function["description"] = tool.description
                if tool.parameters is not None:
                    function["parameters"] = tool.parameters_json
                tools.append({"type": "function", "function": function})
        if tools:
            result["tools"] = tools

        if ir.tool_choice is not None:
            result["tool_choice"] = self._tool_choice_from_ir(ir.tool_choice)
        if ir.parallel_tool_calls is not None:
            result["parallel_tool_calls"] = ir.parallel_tool_calls
        if ir.response_format is not None:
            result["response_format"] = self._response_format_from_ir(ir.response_format)
        if ir.reasoning_effort is not None:
            result["reasoning_effort"] = ir.reasoning_effort.value

        for field in (
            "max_tokens",
            "temperature",
            "top_p",
            "frequency_penalty",
            "presence_penalty",
            "seed",
            "stop",
        ):
            value = getattr(ir, field)
            if value is not None:
                result[field] = value
        if ir.top_k is not None:
            logger.debug("OpenAI has no top_k; dropping top_k=%s", ir.top_k)
        if ir.stream:
            result["stream"] = True

        return result

    # Responses

    def response_to_ir(self, payload: Dict[str, Any]) -> UnifiedResponse:
        """Convert OpenAI chat completion response to unified IR"""
        response = decode_payload(wire.ChatResponse, payload, self.provider_name)
        if response.error is not None:
            return UnifiedResponse(
                id=response.id,
                provider=self.provider_name,
                model=response.model,
                error=UnifiedError(
                    type=response.error.type or "api_error",
                    message=response.error.message,
                    code=response.error.code,
                ),
            )

        choices = []
        for choice in response.choices:
            message = self._message_to_ir(choice.message, {})
            choices.append(
                UnifiedChoice(
                    index=choice.index,
                    message=message,
                    finish_reason=self.finish_reason_to_ir(choice.finish_reason),
                    logprobs=choice.logprobs,
                )
            )

        result = UnifiedResponse(
            id=response.id,
            provider=self.provider_name,
            model=response.model,
            choices=choices,
            usage=self._usage_to_ir(response.usage),
        )
        if response.created is not None:
            result.created = response.created
        return result

    def response_from_ir(self, ir: UnifiedResponse) -> Dict[str, Any]:
        """Convert unified IR response to OpenAI format"""
        if ir.error is not None:
            error: Dict[str, Any] = {"message": ir.error.message, "type": ir.error.type}
            if ir.error.code is not None:
                error["code"] = ir.error.code
            return {"error": error}

        choices = []
        for choice in ir.choices:
            data: Dict[str, Any] = {
                "index": choice.index,
                "message": self._message_from_ir(choice.message),
                "finish_reason": self.finish_reason_from_ir(choice.finish_reason),
            }
            if choice.logprobs is not None:
                data["logprobs"] = choice.logprobs
            choices.append(data)

        result: Dict[str, Any] = {
            "id": ir.id,
            "object": "chat.completion",
            "created": ir.created,
            "model": ir.model,
            "choices": choices,
        }
        if ir.usage is not None:
            result["usage"] = self._usage_from_ir(ir.usage)
        return result

    # Streaming

    def chunk_to_ir(self, payload: Any, session: StreamSession) -> UnifiedStreamChunk:
        """Convert one chat.completion.chunk (or the [DONE] sentinel) to IR"""
        if isinstance(payload, str) and payload.strip() == DONE_SENTINEL:
            return UnifiedStreamChunk(id=session.id, model=session.model, provider=self.provider_name, done=True)

        chunk = decode_payload(wire.ChatChunk, payload, self.provider_name)
        if chunk.error is not None:
            return UnifiedStreamChunk(
                id=chunk.id,
                provider=self.provider_name,
                error=UnifiedError(type=chunk.error.type or "api_error", message=chunk.error.message, code=chunk.error.code),
            )

        choices = []
        for choice in chunk.choices:
            delta = choice.delta
            fragments = [
                ToolCallDelta(
                    index=call.index if call.index is not None else position,
                    id=call.id,
                    name=call.function.name,
                    arguments=call.function.arguments or "",
                )
                for position, call in enumerate(delta.tool_calls or [])
            ]
            choices.append(
                UnifiedStreamChoice(
                    index=choice.index,
                    delta=UnifiedDelta(
                        role=_ROLES.get(delta.role) if delta.role else None,
                        content=delta.content,
                        reasoning_content=delta.reasoning_content,
                        tool_calls=fragments,
                    ),
                    finish_reason=self.finish_reason_to_ir(choice.finish_reason),
                )
            )

        return UnifiedStreamChunk(
            id=chunk.id,
            model=chunk.model,
            created=chunk.created,
            provider=self.provider_name,
            choices=choices,
            usage=self._usage_to_ir(chunk.usage),
        )

    def chunk_from_ir(self, chunk: UnifiedStreamChunk, session: StreamSession) -> List[Any]:
        """Convert a unified chunk to OpenAI chunks, ending with [DONE]"""
        state = session.encoder_state
        started = state.setdefault("openai_started", set())
        output: List[Any] = []

        if chunk.error is not None:
            output.append({"error": {"message": chunk.error.message, "type": chunk.error.type}})

        choices = []
        for choice in chunk.choices:
            delta: Dict[str, Any] = {}
            if choice.index not in started:
                delta["role"] = "assistant"
                started.add(choice.index)
            if choice.delta.content is not None:
                delta["content"] = choice.delta.content
            if choice.delta.reasoning_content:
                delta["reasoning_content"] = choice.delta.reasoning_content
            if choice.delta.tool_calls:
                delta["tool_calls"] = [self._tool_delta_from_ir(fragment) for fragment in choice.delta.tool_calls]
            if not delta and choice.finish_reason is None:
                continue
            choices.append(
                {
                    "index": choice.index,
                    "delta": delta,
                    "finish_reason": self.finish_reason_from_ir(choice.finish_reason),
                }
            )

        if choices or chunk.usage is not None:
            data: Dict[str, Any] = {
                "id": chunk.id or session.id,
                "object": "chat.completion.chunk",
                "created": chunk.created or session.created or int(time.time()),
                "model": chunk.model or session.model,
                "choices": choices,
            }
            if chunk.usage is not None:
                data["usage"] = self._usage_from_ir(chunk.usage)
            output.append(data)

        if chunk.done:
            output.append(DONE_SENTINEL)
        return output

    # Helpers

    def _messages_to_ir(self, messages: List[wire.ChatMessage]) -> List[UnifiedMessage]:
        # Legacy function messages carry only a name; link them to the call id
        pending_ids: Dict[str, str] = {}
        return [self._message_to_ir(message, pending_ids) for message in messages]

    def _message_to_ir(self, message: wire.ChatMessage, pending_ids: Dict[str, str]) -> UnifiedMessage:
        role = _ROLES.get(message.role)
        if role is None:
            raise ValidationError(f"Unknown OpenAI message role: {message.role!r}", provider=self.provider_name)

        content, parts = self._content_to_ir(message.content)

        tool_calls = []
        for call in message.tool_calls or []:
            tool_calls.append(
                UnifiedToolCall(
                    id=call.id or self.new_tool_call_id(),
                    name=call.function.name or "",
                    arguments=self.parse_arguments(call.function.arguments),
                )
            )
        if message.function_call is not None and message.function_call.name:
            call_id = self.new_tool_call_id()
            pending_ids[message.function_call.name] = call_id
            tool_calls.append(
                UnifiedToolCall(
                    id=call_id,
                    name=message.function_call.name,
                    arguments=self.parse_arguments(message.function_call.arguments),
                )
            )

        tool_call_id = message.tool_call_id
        if message.role == "function":
            tool_call_id = pending_ids.pop(message.name or "", None) or self.new_tool_call_id()

        return UnifiedMessage(
            role=role,
            content=content,
            parts=parts,
            name=message.name,
            tool_calls=tool_calls,
            tool_call_id=tool_call_id if role == Role.TOOL else None,
            reasoning_content=message.reasoning_content if role == Role.ASSISTANT else None,
        )

    def _content_to_ir(self, content: Any) -> tuple:
        if content is None:
            return "", []
        if isinstance(content, str):
            return content, []

        texts: List[str] = []
        parts: List[UnifiedMessagePart] = []
        for part in content:
            if part.type in ("text", "input_text"):
                texts.append(part.text or "")
            elif part.type == "image_url" and part.image_url is not None:
                parts.append(UnifiedMessagePart(type=PartType.IMAGE, source=source_from_url(part.image_url.url)))
            elif part.type == "file" and part.file:
                file_data = part.file.get("file_data")
                if not file_data:
                    raise UnsupportedCapabilityError(
                        "file reference by file_id", self.provider_name, {"file": part.file}
                    )
                source = source_from_url(file_data)
                part_type = PartType.DOCUMENT if source.media_type == "application/pdf" else PartType.FILE
                parts.append(UnifiedMessagePart(type=part_type, source=source, filename=part.file.get("filename")))
            elif part.type == "input_audio" and part.input_audio:
                audio_format = part.input_audio.get("format", "wav")
                parts.append(
                    UnifiedMessagePart(
                        type=PartType.FILE,
                        source=source_from_url(
                            f"data:audio/{audio_format};base64,{part.input_audio.get('data', '')}"
                        ),
                    )
                )
            else:
                logger.warning("Ignoring unsupported OpenAI content part type %r", part.type)
        return "".join(texts), parts

    def _message_from_ir(self, message: UnifiedMessage) -> Dict[str, Any]:
        if message.role == Role.TOOL:
            if message.parts:
                logger.warning(
                    "OpenAI tool messages carry text only; dropping %d part(s) from result %s",
                    len(message.parts),
                    message.tool_call_id,
                )
            data: Dict[str, Any] = {
                "role": "tool",
                "tool_call_id": message.tool_call_id,
                "content": message.content,
            }
            return data

        data = {"role": message.role.value}
        if message.parts:
            content: List[Dict[str, Any]] = []
            if message.content:
                content.append({"type": "text", "text": message.content})
            content.extend(self._part_from_ir(part) for part in message.parts)
            data["content"] = content
        elif message.role == Role.ASSISTANT and message.tool_calls and not message.content:
            data["content"] = None
        else:
            data["content"] = message.content

        if message.name:
            data["name"] = message.name
        if message.reasoning_content:
            data["reasoning_content"] = message.reasoning_content
        if message.tool_calls:
            data["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": self.dump_arguments(call.arguments)},
                }
                for call in message.tool_calls
            ]
        return data

    def _part_from_ir(self, part: UnifiedMessagePart) -> Dict[str, Any]:
        source = part.source
        if part.type == PartType.IMAGE:
            return {"type": "image_url", "image_url": {"url": source.as_data_url()}}
        if not source.is_inline:
            raise UnsupportedCapabilityError(
                f"{part.type.value} referenced by URL",
                self.provider_name,
                {"url": source.url},
            )
        if source.media_type and source.media_type.startswith("audio/"):
            return {
                "type": "input_audio",
                "input_audio": {"data": source.data, "format": source.media_type.split("/", 1)[1]},
            }
        file: Dict[str, Any] = {"file_data": source.as_data_url()}
        if part.filename:
            file["filename"] = part.filename
        return {"type": "file", "file": file}

    def _tool_to_ir(self, tool: wire.Tool) -> UnifiedTool:
        if tool.type == "function" and tool.function is not None:
            builtin = resolve_builtin(tool.function.name)
            if builtin is not None:
                return UnifiedTool(name=tool.function.name, builtin=builtin)
            return UnifiedTool(
                name=tool.function.name,
                description=tool.function.description,
                parameters=wrap_schema(tool.function.parameters),
            )

        builtin = resolve_builtin(tool.name, tool.type)
        if builtin is None:
            raise UnsupportedCapabilityError(f"tool type {tool.type!r}", self.provider_name)
        config = {k: v for k, v in (tool.model_extra or {}).items()}
        return UnifiedTool(name=tool.name or builtin.value, builtin=builtin, config=config, config_source=self.provider_name)

    @staticmethod
    def _tool_choice_to_ir(choice: Any) -> Optional[ToolChoice]:
        if choice is None:
            return None
        if isinstance(choice, str):
            return ToolChoice(mode=choice if choice in ("auto", "none", "required") else "auto")
        function = choice.get("function") or {}
        name = function.get("name") or choice.get("name")
        if name:
            return ToolChoice(mode="tool", name=name)
        return ToolChoice(mode="auto")

    @staticmethod
    def _tool_choice_from_ir(choice: ToolChoice) -> Any:
        if choice.mode == "tool":
            return {"type": "function", "function": {"name": choice.name}}
        return choice.mode

    @staticmethod
    def _effort_to_ir(effort: Optional[str]) -> Optional[ReasoningEffort]:
        if not effort:
            return None
        if effort in _EFFORT_ALIASES:
            return _EFFORT_ALIASES[effort]
        try:
            return ReasoningEffort(effort)
        except ValueError:
            logger.warning("Dropping unrecognised reasoning_effort %r", effort)
            return None

    @staticmethod
    def _response_format_to_ir(data: Optional[Dict[str, Any]]) -> Optional[ResponseFormat]:
        if not data:
            return None
        kind = data.get("type", "text")
        if kind == "json_schema":
            spec = data.get("json_schema") or {}
            return ResponseFormat(
                type="json_schema",
                name=spec.get("name"),
                json_schema=spec.get("schema"),
                strict=spec.get("strict"),
            )
        return ResponseFormat(type=kind if kind in ("text", "json_object") else "text")

    @staticmethod
    def _response_format_from_ir(fmt: ResponseFormat) -> Dict[str, Any]:
        if fmt.type != "json_schema":
            return {"type": fmt.type}
        spec: Dict[str, Any] = {"name": fmt.name or "response"}
        if fmt.json_schema is not None:
            spec["schema"] = fmt.json_schema
        if fmt.strict is not None:
            spec["strict"] = fmt.strict
        return {"type": "json_schema", "json_schema": spec}

    @staticmethod
    def _usage_to_ir(usage: Optional[wire.Usage]) -> Optional[UnifiedUsage]:
        if usage is None:
            return None
        cached = usage.prompt_tokens_details.cached_tokens if usage.prompt_tokens_details else None
        reasoning = usage.completion_tokens_details.reasoning_tokens if usage.completion_tokens_details else None
        return UnifiedUsage.build(
            usage.prompt_tokens,
            usage.completion_tokens,
            usage.total_tokens,
            cache_read_tokens=cached,
            reasoning_tokens=reasoning,
        )

    @staticmethod
    def _usage_from_ir(usage: UnifiedUsage) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "prompt_tokens": usage.prompt_tokens,
            "completion_tokens": usage.completion_tokens,
            "total_tokens": usage.total_tokens,
        }
        if usage.cache_read_tokens is not None:
            data["prompt_tokens_details"] = {"cached_tokens": usage.cache_read_tokens}
        if usage.reasoning_tokens is not None:
            data["completion_tokens_details"] = {"reasoning_tokens": usage.reasoning_tokens}
        return data

    @staticmethod
    def _tool_delta_from_ir(fragment: ToolCallDelta) -> Dict[str, Any]:
        data: Dict[str, Any] = {"index": fragment.index}
        function: Dict[str, Any] = {}
        if fragment.id:
            data["id"] = fragment.id
            data["type"] = "function"
        if fragment.name:
            function["name"] = fragment.name
        function["arguments"] = fragment.arguments
        data["function"] = function
        return data
