"""Claude adapter for format conversion"""

from __future__ import annotations

import base64
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from ..core.base_adapter import BaseAdapter
from ..core.exceptions import UnsupportedCapabilityError, ValidationError
from ..ir.aliases import resolve_builtin
from ..ir.schema import (
    BuiltinTool,
    FinishReason,
    MediaSource,
    PartType,
    ReasoningEffort,
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
from ..schemas import claude as wire
from ..schemas import decode_payload
from ..streaming.session import StreamSession

logger = logging.getLogger(__name__)

_LEGACY_TURN = re.compile(r"\n\n(Human|Assistant):")

BUILTIN_DECLARATIONS = {
    BuiltinTool.WEB_SEARCH: {"type": "web_search_20250305", "name": "web_search"},
    BuiltinTool.CODE_EXECUTION: {"type": "code_execution_20250522", "name": "code_execution"},
}

# Blocks produced by provider-executed tools; they have no IR counterpart
_SERVER_BLOCKS = (
    "server_tool_use",
    "web_search_tool_result",
    "code_execution_tool_result",
    "redacted_thinking",
)


class ClaudeAdapter(BaseAdapter):
    """Adapter for the Claude Messages API

    Claude is the tool-use style format: a top-level ``system`` field, typed
    content blocks, ``tool_use``/``tool_result`` pairs and an event-typed
    stream (message_start, content_block_*, message_delta, message_stop).
    """

    provider_name = "claude"

    FINISH_REASONS = {
        "end_turn": FinishReason.STOP,
        "stop_sequence": FinishReason.STOP,
        "pause_turn": FinishReason.STOP,
        "max_tokens": FinishReason.LENGTH,
        "tool_use": FinishReason.TOOL_CALLS,
        "refusal": FinishReason.CONTENT_FILTER,
    }
    REVERSE_FINISH_REASONS = {
        FinishReason.STOP: "end_turn",
        FinishReason.LENGTH: "max_tokens",
        FinishReason.TOOL_CALLS: "tool_use",
        FinishReason.CONTENT_FILTER: "refusal",
    }

    def validate(self, payload: Dict[str, Any]) -> wire.MessagesRequest:
        request = decode_payload(wire.MessagesRequest, payload, self.provider_name)
        errors = []
        if not request.model:
            errors.append("model is required")
        if not request.messages and not request.prompt:
            errors.append("messages must not be empty")
        max_tokens = request.max_tokens if request.max_tokens is not None else request.max_tokens_to_sample
        if max_tokens is None:
            errors.append("max_tokens is required")
        elif max_tokens <= 0:
            errors.append("max_tokens must be positive")
        if errors:
            raise ValidationError(
                f"Invalid Claude request: {'; '.join(errors)}",
                errors,
                provider=self.provider_name,
            )
        return request

    # Requests

    def request_to_ir(self, payload: Dict[str, Any]) -> UnifiedRequest:
        """Convert a Claude Messages request to unified IR"""
        request = self.validate(payload)

        messages: List[UnifiedMessage] = []
        system = self._system_text(request.system)
        if system:
            messages.append(UnifiedMessage(role=Role.SYSTEM, content=system))

        if request.messages:
            for message in request.messages:
                messages.extend(self._message_to_ir(message))
        else:
            messages.extend(self._legacy_prompt_to_ir(request.prompt or ""))

        tool_choice = None
        parallel = None
        if request.tool_choice:
            tool_choice, parallel = self._tool_choice_to_ir(request.tool_choice)

        reasoning_effort = None
        if request.thinking and request.thinking.get("type") == "enabled":
            budget = int(request.thinking.get("budget_tokens") or 0)
            reasoning_effort = ReasoningEffort(self.settings.effort_for_budget(budget))

        return UnifiedRequest(
            model=request.model,
            messages=messages,
            max_tokens=request.max_tokens if request.max_tokens is not None else request.max_tokens_to_sample,
            temperature=request.temperature,
            top_p=request.top_p,
            top_k=request.top_k,
            stop=request.stop_sequences,
            stream=bool(request.stream),
            tools=[self._tool_to_ir(tool) for tool in request.tools or []],
            tool_choice=tool_choice,
            reasoning_effort=reasoning_effort,
            parallel_tool_calls=parallel,
        )

    def request_from_ir(self, ir: UnifiedRequest) -> Dict[str, Any]:
        """Convert unified IR request to Claude Messages format"""
        max_tokens = ir.max_tokens
        if max_tokens is None:
            max_tokens = self.settings.default_max_tokens
            logger.debug("No max_tokens in request; using default %d for Claude", max_tokens)

        result: Dict[str, Any] = {"model": ir.model, "max_tokens": max_tokens}
        system_texts = ir.system_texts()
        if system_texts:
            result["system"] = "\n".join(system_texts)
        result["messages"] = self._messages_from_ir(ir.non_system_messages(), for_request=True)

        if ir.tools:
            result["tools"] = [self._tool_from_ir(tool) for tool in ir.tools]

        tool_choice = self._tool_choice_from_ir(ir.tool_choice)
        if ir.parallel_tool_calls is False:
            tool_choice = tool_choice or {"type": "auto"}
            tool_choice["disable_parallel_tool_use"] = True
        if tool_choice is not None:
            result["tool_choice"] = tool_choice

        if ir.reasoning_effort is not None:
            result["thinking"] = {
                "type": "enabled",
                "budget_tokens": self.settings.budget_for_effort(ir.reasoning_effort.value),
            }

        if ir.temperature is not None:
            result["temperature"] = ir.temperature
        if ir.top_p is not None:
            result["top_p"] = ir.top_p
        if ir.top_k is not None:
            result["top_k"] = ir.top_k
        if ir.stop:
            result["stop_sequences"] = list(ir.stop)
        if ir.stream:
            result["stream"] = True

        if ir.response_format is not None and ir.response_format.type != "text":
            logger.warning("Claude has no response_format; dropping %s", ir.response_format.type)
        for field in ("frequency_penalty", "presence_penalty", "seed"):
            if getattr(ir, field) is not None:
                logger.debug("Claude has no %s; dropping it", field)

        return result

    # Responses

    def response_to_ir(self, payload: Dict[str, Any]) -> UnifiedResponse:
        """Convert a Claude Messages response to unified IR"""
        response = decode_payload(wire.MessagesResponse, payload, self.provider_name)
        if response.type == "error" or response.error is not None:
            error = response.error or wire.ErrorBody()
            return UnifiedResponse(
                id=response.id,
                provider=self.provider_name,
                model=response.model,
                error=UnifiedError(type=error.type, message=error.message),
            )

        texts: List[str] = []
        reasoning: List[str] = []
        tool_calls: List[UnifiedToolCall] = []
        for block in response.content:
            if block.type == "text":
                texts.append(block.text or "")
            elif block.type == "thinking":
                reasoning.append(block.thinking or "")
            elif block.type == "tool_use":
                tool_calls.append(
                    UnifiedToolCall(
                        id=block.id or self.new_tool_call_id(),
                        name=block.name or "",
                        arguments=self.parse_arguments(block.input),
                    )
                )
            else:
                logger.debug("Skipping Claude response block %r", block.type)
        if not response.content and response.completion is not None:
            texts.append(response.completion)

        message = UnifiedMessage(
            role=Role.ASSISTANT,
            content="".join(texts),
            tool_calls=tool_calls,
            reasoning_content="".join(reasoning) or None,
        )
        return UnifiedResponse(
            id=response.id,
            provider=self.provider_name,
            model=response.model,
            choices=[
                UnifiedChoice(
                    index=0,
                    message=message,
                    finish_reason=self.finish_reason_to_ir(response.stop_reason),
                )
            ],
            usage=self._usage_to_ir(response.usage),
        )

    def response_from_ir(self, ir: UnifiedResponse) -> Dict[str, Any]:
        """Convert unified IR response to Claude Messages format"""
        if ir.error is not None:
            return {"type": "error", "error": {"type": ir.error.type, "message": ir.error.message}}

        if len(ir.choices) > 1:
            logger.warning("Claude responses carry one message; dropping %d extra choices", len(ir.choices) - 1)

        content: List[Dict[str, Any]] = []
        stop_reason = None
        if ir.choices:
            choice = ir.choices[0]
            message = choice.message
            if message.reasoning_content:
                content.append({"type": "thinking", "thinking": message.reasoning_content, "signature": ""})
            if message.content:
                content.append({"type": "text", "text": message.content})
            content.extend(self._parts_from_ir(message.parts))
            content.extend(self._tool_use_block(call) for call in message.tool_calls)
            stop_reason = self.finish_reason_from_ir(choice.finish_reason)

        result: Dict[str, Any] = {
            "id": ir.id,
            "type": "message",
            "role": "assistant",
            "model": ir.model,
            "content": content,
            "stop_reason": stop_reason,
            "stop_sequence": None,
        }
        if ir.usage is not None:
            result["usage"] = self._usage_from_ir(ir.usage)
        return result

    # Streaming

    def chunk_to_ir(self, payload: Any, session: StreamSession) -> UnifiedStreamChunk:
        """Convert one Claude stream event to a unified chunk"""
        event = decode_payload(wire.StreamEvent, payload, self.provider_name)
        state = session.decoder_state
        tool_blocks: Dict[int, int] = state.setdefault("claude_tool_blocks", {})

        def chunk(**kwargs: Any) -> UnifiedStreamChunk:
            return UnifiedStreamChunk(
                id=state.get("claude_message_id", ""),
                model=state.get("claude_model", ""),
                provider=self.provider_name,
                **kwargs,
            )

        def single(delta: UnifiedDelta, finish_reason: Optional[FinishReason] = None) -> List[UnifiedStreamChoice]:
            return [UnifiedStreamChoice(index=0, delta=delta, finish_reason=finish_reason)]

        if event.type == "message_start":
            message = event.message or {}
            state["claude_message_id"] = message.get("id", "")
            state["claude_model"] = message.get("model", "")
            state["claude_start_usage"] = message.get("usage") or {}
            return chunk(choices=single(UnifiedDelta(role=Role.ASSISTANT)))

        if event.type == "content_block_start" and event.content_block is not None:
            block = event.content_block
            index = event.index or 0
            if block.type == "tool_use":
                tool_index = len(tool_blocks)
                tool_blocks[index] = tool_index
                initial = block.input if isinstance(block.input, dict) and block.input else None
                fragment = ToolCallDelta(
                    index=tool_index,
                    id=block.id,
                    name=block.name,
                    arguments=self.dump_arguments(initial) if initial else "",
                )
                return chunk(choices=single(UnifiedDelta(tool_calls=[fragment])))
            if block.type == "text" and block.text:
                return chunk(choices=single(UnifiedDelta(content=block.text)))
            if block.type == "thinking" and block.thinking:
                return chunk(choices=single(UnifiedDelta(reasoning_content=block.thinking)))
            return chunk()

        if event.type == "content_block_delta":
            delta = event.delta or {}
            delta_type = delta.get("type")
            if delta_type == "text_delta":
                return chunk(choices=single(UnifiedDelta(content=delta.get("text", ""))))
            if delta_type == "thinking_delta":
                return chunk(choices=single(UnifiedDelta(reasoning_content=delta.get("thinking", ""))))
            if delta_type == "input_json_delta":
                tool_index = tool_blocks.get(event.index or 0)
                if tool_index is None:
                    return chunk()
                fragment = ToolCallDelta(index=tool_index, arguments=delta.get("partial_json", ""))
                return chunk(choices=single(UnifiedDelta(tool_calls=[fragment])))
            return chunk()

        if event.type == "message_delta":
            delta = event.delta or {}
            usage = dict(state.get("claude_start_usage") or {})
            usage.update({k: v for k, v in (event.usage or {}).items() if v is not None})
            finish_reason = self.finish_reason_to_ir(delta.get("stop_reason"))
            return chunk(
                choices=single(UnifiedDelta(), finish_reason) if finish_reason else [],
                usage=self._usage_to_ir(wire.Usage.model_validate(usage)) if usage else None,
            )

        if event.type == "message_stop":
            return chunk(done=True)

        if event.type == "error":
            error = event.error or wire.ErrorBody()
            return chunk(error=UnifiedError(type=error.type, message=error.message))

        # ping, content_block_stop
        return chunk()

    def chunk_from_ir(self, chunk: UnifiedStreamChunk, session: StreamSession) -> List[Any]:
        """Convert a unified chunk to Claude stream events

        Content blocks are opened lazily and closed when a different block
        starts or the message finishes. message_delta and message_stop are
        emitted once the finish reason and usage are known, or at the end of
        the stream.
        """
        state = session.encoder_state
        events: List[Dict[str, Any]] = []

        if chunk.error is not None:
            events.append({"type": "error", "error": {"type": chunk.error.type, "message": chunk.error.message}})
            return events
        if state.get("claude_stopped"):
            return events

        if not state.get("claude_started") and (chunk.choices or chunk.done or chunk.usage):
            state["claude_started"] = True
            state["claude_next_block"] = 0
            state["claude_tool_blocks"] = {}
            state["claude_tool_pending"] = {}
            events.append(
                {
                    "type": "message_start",
                    "message": {
                        "id": chunk.id or session.id,
                        "type": "message",
                        "role": "assistant",
                        "model": chunk.model or session.model,
                        "content": [],
                        "stop_reason": None,
                        "stop_sequence": None,
                        "usage": {"input_tokens": 0, "output_tokens": 0},
                    },
                }
            )

        for choice in chunk.choices:
            if choice.index != 0:
                continue
            delta = choice.delta
            if delta.reasoning_content:
                index = self._open_block(state, events, "thinking", {"type": "thinking", "thinking": ""})
                events.append(
                    {
                        "type": "content_block_delta",
                        "index": index,
                        "delta": {"type": "thinking_delta", "thinking": delta.reasoning_content},
                    }
                )
            if delta.content:
                index = self._open_block(state, events, "text", {"type": "text", "text": ""})
                events.append(
                    {"type": "content_block_delta", "index": index, "delta": {"type": "text_delta", "text": delta.content}}
                )
            for fragment in delta.tool_calls:
                self._tool_fragment_from_ir(state, events, fragment)
            if choice.finish_reason is not None:
                state["claude_finish"] = choice.finish_reason

        if chunk.usage is not None:
            state["claude_usage"] = chunk.usage

        finished = state.get("claude_finish") is not None and state.get("claude_usage") is not None
        if state.get("claude_started") and (finished or chunk.done):
            self._close_block(state, events)
            usage: Optional[UnifiedUsage] = state.get("claude_usage")
            usage_data = self._usage_from_ir(usage) if usage else {"output_tokens": 0}
            events.append(
                {
                    "type": "message_delta",
                    "delta": {
                        "stop_reason": self.finish_reason_from_ir(state.get("claude_finish") or FinishReason.STOP),
                        "stop_sequence": None,
                    },
                    "usage": usage_data,
                }
            )
            events.append({"type": "message_stop"})
            state["claude_stopped"] = True
        return events

    def _tool_fragment_from_ir(
        self, state: Dict[str, Any], events: List[Dict[str, Any]], fragment: ToolCallDelta
    ) -> None:
        """Route one tool-call fragment to its content block

        Only one block can be open, so fragments for any other call are held
        and that call is written as a complete block once the open one closes.
        """
        tool_blocks: Dict[int, int] = state["claude_tool_blocks"]
        pending: Dict[int, Dict[str, Any]] = state["claude_tool_pending"]
        kind = f"tool:{fragment.index}"
        current = state.get("claude_open")

        if current is not None and current[0] == kind:
            index = current[1]
        elif fragment.index in tool_blocks:
            logger.warning("Dropping arguments for tool call %d after its block closed", fragment.index)
            return
        elif fragment.index in pending or (current is not None and current[0].startswith("tool:")):
            held = pending.setdefault(
                fragment.index, {"id": fragment.id or self.new_tool_call_id(), "name": "", "arguments": []}
            )
            held["name"] = held["name"] or fragment.name or ""
            if fragment.arguments:
                held["arguments"].append(fragment.arguments)
            return
        else:
            block = {
                "type": "tool_use",
                "id": fragment.id or self.new_tool_call_id(),
                "name": fragment.name or "",
                "input": {},
            }
            index = self._open_block(state, events, kind, block)
            tool_blocks[fragment.index] = index

        if fragment.arguments:
            events.append(
                {
                    "type": "content_block_delta",
                    "index": index,
                    "delta": {"type": "input_json_delta", "partial_json": fragment.arguments},
                }
            )

    @staticmethod
    def _open_block(state: Dict[str, Any], events: List[Dict[str, Any]], kind: str, block: Dict[str, Any]) -> int:
        """Return the index of an open block of ``kind``, starting one if needed"""
        current = state.get("claude_open")
        if current is not None and current[0] == kind:
            return current[1]
        ClaudeAdapter._close_block(state, events)
        index = state["claude_next_block"]
        state["claude_next_block"] = index + 1
        state["claude_open"] = (kind, index)
        events.append({"type": "content_block_start", "index": index, "content_block": block})
        return index

    @staticmethod
    def _close_block(state: Dict[str, Any], events: List[Dict[str, Any]]) -> None:
        current = state.get("claude_open")
        if current is not None:
            events.append({"type": "content_block_stop", "index": current[1]})
            state["claude_open"] = None

        # Held tool calls are written whole once nothing else is open
        pending: Dict[int, Dict[str, Any]] = state.get("claude_tool_pending") or {}
        for tool_index in sorted(pending):
            held = pending[tool_index]
            index = state["claude_next_block"]
            state["claude_next_block"] = index + 1
            state["claude_tool_blocks"][tool_index] = index
            events.append(
                {
                    "type": "content_block_start",
                    "index": index,
                    "content_block": {"type": "tool_use", "id": held["id"], "name": held["name"], "input": {}},
                }
            )
            if held["arguments"]:
                events.append(
                    {
                        "type": "content_block_delta",
                        "index": index,
                        "delta": {"type": "input_json_delta", "partial_json": "".join(held["arguments"])},
                    }
                )
            events.append({"type": "content_block_stop", "index": index})
        pending.clear()

    # Helpers

    @staticmethod
    def _system_text(system: Any) -> str:
        if system is None:
            return ""
        if isinstance(system, str):
            return system
        return "".join(block.text or "" for block in system if block.type == "text")

    def _legacy_prompt_to_ir(self, prompt: str) -> List[UnifiedMessage]:
        """Split a "\\n\\nHuman: ... \\n\\nAssistant:" prompt into turns"""
        pieces = _LEGACY_TURN.split(prompt)
        messages = []
        leading = pieces[0].strip()
        if leading:
            messages.append(UnifiedMessage(role=Role.SYSTEM, content=leading))
        for speaker, text in zip(pieces[1::2], pieces[2::2]):
            text = text.strip()
            if not text:
                continue
            role = Role.USER if speaker == "Human" else Role.ASSISTANT
            messages.append(UnifiedMessage(role=role, content=text))
        return messages

    def _message_to_ir(self, message: wire.Message) -> List[UnifiedMessage]:
        """One Claude turn becomes one IR message plus one per tool_result"""
        if message.role not in ("user", "assistant"):
            raise ValidationError(f"Unknown Claude message role: {message.role!r}", provider=self.provider_name)
        role = Role.USER if message.role == "user" else Role.ASSISTANT
        if isinstance(message.content, str):
            return [UnifiedMessage(role=role, content=message.content)]

        results: List[UnifiedMessage] = []
        texts: List[str] = []
        reasoning: List[str] = []
        parts: List[UnifiedMessagePart] = []
        tool_calls: List[UnifiedToolCall] = []
        for block in message.content:
            if block.type == "text":
                texts.append(block.text or "")
            elif block.type in ("image", "document"):
                parts.append(self._media_block_to_ir(block))
            elif block.type == "tool_use":
                tool_calls.append(
                    UnifiedToolCall(
                        id=block.id or self.new_tool_call_id(),
                        name=block.name or "",
                        arguments=self.parse_arguments(block.input),
                    )
                )
            elif block.type == "tool_result":
                results.append(self._tool_result_to_ir(block))
            elif block.type == "thinking":
                reasoning.append(block.thinking or "")
            elif block.type in _SERVER_BLOCKS:
                logger.debug("Skipping Claude %s block", block.type)
            else:
                logger.warning("Ignoring unsupported Claude content block %r", block.type)

        if texts or parts or tool_calls or reasoning or not results:
            results.append(
                UnifiedMessage(
                    role=role,
                    content="".join(texts),
                    parts=parts,
                    tool_calls=tool_calls,
                    reasoning_content="".join(reasoning) or None if role == Role.ASSISTANT else None,
                )
            )
        return results

    def _tool_result_to_ir(self, block: wire.ContentBlock) -> UnifiedMessage:
        content = block.content
        texts: List[str] = []
        parts: List[UnifiedMessagePart] = []
        if isinstance(content, str):
            texts.append(content)
        elif content:
            for item in content:
                inner = wire.ContentBlock.model_validate(item)
                if inner.type == "text":
                    texts.append(inner.text or "")
                elif inner.type in ("image", "document"):
                    parts.append(self._media_block_to_ir(inner))
        if block.is_error:
            logger.debug("Claude tool_result %s flagged is_error", block.tool_use_id)
        return UnifiedMessage(
            role=Role.TOOL,
            content="".join(texts),
            parts=parts,
            tool_call_id=block.tool_use_id or self.new_tool_call_id(),
        )

    def _media_block_to_ir(self, block: wire.ContentBlock) -> UnifiedMessagePart:
        source = block.source or {}
        source_type = source.get("type")
        if source_type == "base64":
            media = MediaSource(data=source.get("data", ""), media_type=source.get("media_type"))
        elif source_type == "url":
            media = MediaSource(url=source.get("url", ""))
        elif source_type == "text":
            encoded = base64.b64encode(source.get("data", "").encode("utf-8")).decode("ascii")
            media = MediaSource(data=encoded, media_type=source.get("media_type", "text/plain"))
        else:
            raise UnsupportedCapabilityError(
                f"{block.type} source type {source_type!r}", self.provider_name, {"source": source}
            )
        part_type = PartType.IMAGE if block.type == "image" else PartType.DOCUMENT
        return UnifiedMessagePart(type=part_type, source=media, filename=block.title)

    def _messages_from_ir(self, messages: List[UnifiedMessage], for_request: bool) -> List[Dict[str, Any]]:
        """Convert IR messages to Claude turns

        Consecutive tool results share one user turn, and a user message that
        directly follows them is appended to that same turn.
        """
        turns: List[Dict[str, Any]] = []
        tool_turn: Optional[Dict[str, Any]] = None
        for message in messages:
            if message.role == Role.TOOL:
                block = self._tool_result_block(message)
                if tool_turn is None:
                    tool_turn = {"role": "user", "content": []}
                    turns.append(tool_turn)
                tool_turn["content"].append(block)
                continue

            blocks = self._content_blocks(message, for_request)
            if message.role == Role.USER and tool_turn is not None:
                tool_turn["content"].extend(blocks)
                tool_turn = None
                continue
            tool_turn = None

            if all(block["type"] == "text" for block in blocks) and len(blocks) <= 1:
                turns.append({"role": message.role.value, "content": message.content})
            else:
                turns.append({"role": message.role.value, "content": blocks})
        return turns

    def _content_blocks(self, message: UnifiedMessage, for_request: bool) -> List[Dict[str, Any]]:
        blocks: List[Dict[str, Any]] = []
        if message.reasoning_content and not for_request:
            blocks.append({"type": "thinking", "thinking": message.reasoning_content, "signature": ""})
        if message.content:
            blocks.append({"type": "text", "text": message.content})
        blocks.extend(self._parts_from_ir(message.parts))
        blocks.extend(self._tool_use_block(call) for call in message.tool_calls)
        return blocks

    def _tool_result_block(self, message: UnifiedMessage) -> Dict[str, Any]:
        block: Dict[str, Any] = {"type": "tool_result", "tool_use_id": message.tool_call_id}
        if message.parts:
            content: List[Dict[str, Any]] = []
            if message.content:
                content.append({"type": "text", "text": message.content})
            content.extend(self._parts_from_ir(message.parts))
            block["content"] = content
        else:
            block["content"] = message.content
        return block

    def _tool_use_block(self, call: UnifiedToolCall) -> Dict[str, Any]:
        return {"type": "tool_use", "id": call.id, "name": call.name, "input": call.arguments}

    def _parts_from_ir(self, parts: List[UnifiedMessagePart]) -> List[Dict[str, Any]]:
        blocks = []
        for part in parts:
            block = self._part_from_ir(part)
            if block is None:
                logger.warning(
                    "Claude accepts images, PDF and plain text only; dropping %s file %s",
                    part.source.media_type or "untyped",
                    part.filename or "(unnamed)",
                )
                continue
            blocks.append(block)
        return blocks

    @staticmethod
    def _part_from_ir(part: UnifiedMessagePart) -> Optional[Dict[str, Any]]:
        source = part.source
        if part.type == PartType.IMAGE:
            block_type = "image"
        elif part.type == PartType.DOCUMENT or (source.media_type or "") in ("application/pdf", "text/plain"):
            block_type = "document"
        else:
            return None
        if source.is_inline:
            data: Dict[str, Any] = {
                "type": "base64",
                "media_type": source.media_type or "application/octet-stream",
                "data": source.data,
            }
        else:
            data = {"type": "url", "url": source.url}
        block: Dict[str, Any] = {"type": block_type, "source": data}
        if block_type == "document" and part.filename:
            block["title"] = part.filename
        return block

    def _tool_to_ir(self, tool: wire.Tool) -> UnifiedTool:
        custom = tool.type in (None, "custom")
        builtin = resolve_builtin(tool.name) if custom else resolve_builtin(tool.name, tool.type)
        if builtin is not None:
            return UnifiedTool(
                name=tool.name,
                builtin=builtin,
                config=dict(tool.model_extra or {}),
                config_source=self.provider_name,
            )
        if not custom:
            raise UnsupportedCapabilityError(f"tool type {tool.type!r}", self.provider_name)
        return UnifiedTool(
            name=tool.name,
            description=tool.description,
            parameters=wrap_schema(tool.input_schema),
        )

    def _tool_from_ir(self, tool: UnifiedTool) -> Dict[str, Any]:
        builtin = self.builtin_for(tool)
        if builtin is not None:
            declaration = dict(BUILTIN_DECLARATIONS[builtin])
            declaration.update(tool.config_for(self.provider_name))
            return declaration
        data: Dict[str, Any] = {"name": tool.name}
        if tool.description is not None:
            data["description"] = tool.description
        schema = tool.parameters_json
        data["input_schema"] = schema if schema is not None else {"type": "object", "properties": {}}
        return data

    @staticmethod
    def _tool_choice_to_ir(data: Dict[str, Any]) -> Tuple[Optional[ToolChoice], Optional[bool]]:
        parallel = None
        if "disable_parallel_tool_use" in data:
            parallel = not data["disable_parallel_tool_use"]
        kind = data.get("type")
        if kind == "tool" and data.get("name"):
            return ToolChoice(mode="tool", name=data["name"]), parallel
        if kind == "any":
            return ToolChoice(mode="required"), parallel
        if kind == "none":
            return ToolChoice(mode="none"), parallel
        return ToolChoice(mode="auto"), parallel

    @staticmethod
    def _tool_choice_from_ir(choice: Optional[ToolChoice]) -> Optional[Dict[str, Any]]:
        if choice is None:
            return None
        if choice.mode == "tool":
            return {"type": "tool", "name": choice.name}
        if choice.mode == "required":
            return {"type": "any"}
        return {"type": choice.mode}

    @staticmethod
    def _usage_to_ir(usage: Optional[wire.Usage]) -> Optional[UnifiedUsage]:
        """Claude input_tokens excludes cache reads and writes"""
        if usage is None:
            return None
        cache_read = usage.cache_read_input_tokens
        cache_write = usage.cache_creation_input_tokens
        prompt = usage.input_tokens + (cache_read or 0) + (cache_write or 0)
        return UnifiedUsage.build(
            prompt,
            usage.output_tokens,
            cache_read_tokens=cache_read,
            cache_write_tokens=cache_write,
        )

    @staticmethod
    def _usage_from_ir(usage: UnifiedUsage) -> Dict[str, Any]:
        cached = (usage.cache_read_tokens or 0) + (usage.cache_write_tokens or 0)
        data: Dict[str, Any] = {
            "input_tokens": usage.prompt_tokens - cached,
            "output_tokens": usage.completion_tokens,
        }
        if usage.cache_write_tokens is not None:
            data["cache_creation_input_tokens"] = usage.cache_write_tokens
        if usage.cache_read_tokens is not None:
            data["cache_read_input_tokens"] = usage.cache_read_tokens
        return data
