"""Response and stream handling for Gemini generateContent"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ...ir.schema import (
    FinishReason,
    Role,
    ToolCallDelta,
    UnifiedChoice,
    UnifiedDelta,
    UnifiedError,
    UnifiedMessage,
    UnifiedMessagePart,
    UnifiedResponse,
    UnifiedStreamChoice,
    UnifiedStreamChunk,
    UnifiedToolCall,
    UnifiedUsage,
)
from ...schemas import gemini as wire
from ...streaming.session import StreamSession
from .utils import (
    is_candidate_token_count_inclusive,
    media_part_from_ir,
    media_part_to_ir,
    render_code_execution_result,
    render_executable_code,
)

if TYPE_CHECKING:
    from .adapter import GeminiAdapter

logger = logging.getLogger(__name__)


class GeminiResponseHandler:
    """Convert generateContent responses and stream chunks"""

    def __init__(self, adapter: "GeminiAdapter") -> None:
        self.adapter = adapter

    # Responses

    def to_ir(self, response: wire.GenerateContentResponse) -> UnifiedResponse:
        if response.error is not None:
            return UnifiedResponse(
                id=response.response_id or "",
                provider=self.adapter.provider_name,
                model=response.model_version or "",
                error=UnifiedError(
                    type=response.error.status or "api_error",
                    message=response.error.message,
                    code=response.error.code,
                ),
            )

        choices = []
        for candidate in response.candidates:
            message = self._candidate_message(candidate)
            choices.append(
                UnifiedChoice(
                    index=candidate.index,
                    message=message,
                    finish_reason=self._finish_reason(candidate.finish_reason, bool(message.tool_calls)),
                )
            )

        if not choices and response.prompt_feedback is not None and response.prompt_feedback.block_reason:
            logger.info("Gemini blocked the prompt: %s", response.prompt_feedback.block_reason)
            choices.append(
                UnifiedChoice(
                    index=0,
                    message=UnifiedMessage(role=Role.ASSISTANT),
                    finish_reason=FinishReason.CONTENT_FILTER,
                )
            )

        return UnifiedResponse(
            id=response.response_id or "",
            provider=self.adapter.provider_name,
            model=response.model_version or "",
            choices=choices,
            usage=self.usage_to_ir(response.usage_metadata),
        )

    def from_ir(self, ir: UnifiedResponse) -> Dict[str, Any]:
        if ir.error is not None:
            error: Dict[str, Any] = {"message": ir.error.message, "status": ir.error.type}
            if ir.error.code is not None:
                error["code"] = ir.error.code
            return {"error": error}

        candidates = []
        for choice in ir.choices:
            parts = self._message_parts(choice.message)
            candidate: Dict[str, Any] = {"content": {"role": "model", "parts": parts}, "index": choice.index}
            finish = self.adapter.finish_reason_from_ir(choice.finish_reason)
            if finish is not None:
                candidate["finishReason"] = finish
            candidates.append(candidate)

        result: Dict[str, Any] = {"candidates": candidates}
        if ir.usage is not None:
            result["usageMetadata"] = self.usage_from_ir(ir.usage)
        if ir.model:
            result["modelVersion"] = ir.model
        if ir.id:
            result["responseId"] = ir.id
        return result

    # Streaming

    def chunk_to_ir(self, chunk: wire.GenerateContentResponse, session: StreamSession) -> UnifiedStreamChunk:
        """Gemini streams carry whole parts; a finishReason ends the stream"""
        state = session.decoder_state
        tool_counts: Dict[int, int] = state.setdefault("gemini_tool_counts", {})

        if chunk.error is not None:
            return UnifiedStreamChunk(
                id=chunk.response_id or session.id,
                provider=self.adapter.provider_name,
                error=UnifiedError(type=chunk.error.status or "api_error", message=chunk.error.message, code=chunk.error.code),
            )

        choices = []
        finished = False
        for candidate in chunk.candidates:
            texts: List[str] = []
            reasoning: List[str] = []
            fragments: List[ToolCallDelta] = []
            for part in candidate.content.parts if candidate.content else []:
                if part.function_call is not None:
                    index = tool_counts.get(candidate.index, 0)
                    tool_counts[candidate.index] = index + 1
                    fragments.append(
                        ToolCallDelta(
                            index=index,
                            id=part.function_call.id or self.adapter.new_tool_call_id(),
                            name=part.function_call.name,
                            arguments=self.adapter.dump_arguments(part.function_call.args or {}),
                        )
                    )
                elif part.text is not None:
                    (reasoning if part.thought else texts).append(part.text)
                elif part.executable_code is not None:
                    texts.append(render_executable_code(part.executable_code))
                elif part.code_execution_result is not None:
                    texts.append(render_code_execution_result(part.code_execution_result))

            finish_reason = None
            if candidate.finish_reason:
                finished = True
                finish_reason = self._finish_reason(candidate.finish_reason, tool_counts.get(candidate.index, 0) > 0)
            choices.append(
                UnifiedStreamChoice(
                    index=candidate.index,
                    delta=UnifiedDelta(
                        role=Role.ASSISTANT if session.chunk_count == 0 else None,
                        content="".join(texts) or None,
                        reasoning_content="".join(reasoning) or None,
                        tool_calls=fragments,
                    ),
                    finish_reason=finish_reason,
                )
            )

        return UnifiedStreamChunk(
            id=chunk.response_id or session.id,
            model=chunk.model_version or session.model,
            provider=self.adapter.provider_name,
            choices=choices,
            usage=self.usage_to_ir(chunk.usage_metadata) if finished else None,
            done=finished,
        )

    def chunk_from_ir(self, chunk: UnifiedStreamChunk, session: StreamSession) -> List[Any]:
        """Text streams through; tool calls are held until their arguments are complete"""
        if chunk.error is not None:
            return [{"error": {"message": chunk.error.message, "status": chunk.error.type}}]

        state = session.encoder_state
        buffers: Dict[int, Dict[int, Dict[str, Any]]] = state.setdefault("gemini_tool_buffers", {})
        finished: set = state.setdefault("gemini_finished", set())

        candidates = []
        for choice in chunk.choices:
            buffer = buffers.setdefault(choice.index, {})
            for fragment in choice.delta.tool_calls:
                entry = buffer.setdefault(fragment.index, {"name": None, "arguments": []})
                if fragment.name:
                    entry["name"] = fragment.name
                entry["arguments"].append(fragment.arguments)

            parts: List[Dict[str, Any]] = []
            if choice.delta.reasoning_content:
                parts.append({"text": choice.delta.reasoning_content, "thought": True})
            if choice.delta.content:
                parts.append({"text": choice.delta.content})
            if choice.finish_reason is not None or chunk.done:
                parts.extend(self._flush_calls(buffer))

            candidate: Dict[str, Any] = {}
            if parts:
                candidate["content"] = {"role": "model", "parts": parts}
            if choice.finish_reason is not None and choice.index not in finished:
                finished.add(choice.index)
                candidate["finishReason"] = self.adapter.finish_reason_from_ir(choice.finish_reason)
            if candidate:
                candidate["index"] = choice.index
                candidates.append(candidate)

        if chunk.done:
            for index, buffer in buffers.items():
                if buffer and index not in {c["index"] for c in candidates}:
                    candidates.append(
                        {"content": {"role": "model", "parts": self._flush_calls(buffer)}, "index": index}
                    )

        if not candidates and chunk.usage is None:
            return []
        result: Dict[str, Any] = {"candidates": candidates}
        if chunk.usage is not None:
            result["usageMetadata"] = self.usage_from_ir(chunk.usage)
        model = chunk.model or session.model
        if model:
            result["modelVersion"] = model
        response_id = chunk.id or session.id
        if response_id:
            result["responseId"] = response_id
        return [result]

    def _flush_calls(self, buffer: Dict[int, Dict[str, Any]]) -> List[Dict[str, Any]]:
        parts = []
        for index in sorted(buffer):
            entry = buffer[index]
            arguments = self.adapter.parse_arguments("".join(entry["arguments"]))
            parts.append({"functionCall": {"name": entry["name"] or "", "args": arguments}})
        buffer.clear()
        return parts

    # Helpers

    def _candidate_message(self, candidate: wire.Candidate) -> UnifiedMessage:
        texts: List[str] = []
        reasoning: List[str] = []
        parts: List[UnifiedMessagePart] = []
        tool_calls: List[UnifiedToolCall] = []
        for part in candidate.content.parts if candidate.content else []:
            if part.function_call is not None:
                tool_calls.append(
                    UnifiedToolCall(
                        id=part.function_call.id or self.adapter.new_tool_call_id(),
                        name=part.function_call.name,
                        arguments=part.function_call.args or {},
                    )
                )
            elif part.text is not None:
                (reasoning if part.thought else texts).append(part.text)
            elif part.executable_code is not None:
                texts.append(render_executable_code(part.executable_code))
            elif part.code_execution_result is not None:
                texts.append(render_code_execution_result(part.code_execution_result))
            else:
                media = media_part_to_ir(part)
                if media is not None:
                    parts.append(media)
        return UnifiedMessage(
            role=Role.ASSISTANT,
            content="".join(texts),
            parts=parts,
            tool_calls=tool_calls,
            reasoning_content="".join(reasoning) or None,
        )

    def _message_parts(self, message: UnifiedMessage) -> List[Dict[str, Any]]:
        parts: List[Dict[str, Any]] = []
        if message.reasoning_content:
            parts.append({"text": message.reasoning_content, "thought": True})
        if message.content:
            parts.append({"text": message.content})
        parts.extend(media_part_from_ir(part) for part in message.parts)
        parts.extend({"functionCall": {"name": call.name, "args": call.arguments}} for call in message.tool_calls)
        return parts

    def _finish_reason(self, raw: Optional[str], has_calls: bool) -> Optional[FinishReason]:
        reason = self.adapter.finish_reason_to_ir(raw)
        if reason == FinishReason.STOP and has_calls:
            return FinishReason.TOOL_CALLS
        return reason

    @staticmethod
    def usage_to_ir(usage: Optional[wire.UsageMetadata]) -> Optional[UnifiedUsage]:
        """promptTokenCount includes cached tokens; thoughts sit outside candidates"""
        if usage is None:
            return None
        thoughts = usage.thoughts_token_count or 0
        completion = usage.candidates_token_count
        if not is_candidate_token_count_inclusive(
            usage.prompt_token_count, usage.candidates_token_count, thoughts, usage.total_token_count
        ):
            completion += thoughts
        return UnifiedUsage.build(
            usage.prompt_token_count,
            completion,
            usage.total_token_count,
            cache_read_tokens=usage.cached_content_token_count,
            reasoning_tokens=usage.thoughts_token_count,
        )

    @staticmethod
    def usage_from_ir(usage: UnifiedUsage) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "promptTokenCount": usage.prompt_tokens,
            "candidatesTokenCount": usage.completion_tokens - (usage.reasoning_tokens or 0),
            "totalTokenCount": usage.total_tokens,
        }
        if usage.cache_read_tokens is not None:
            data["cachedContentTokenCount"] = usage.cache_read_tokens
        if usage.reasoning_tokens is not None:
            data["thoughtsTokenCount"] = usage.reasoning_tokens
        return data
