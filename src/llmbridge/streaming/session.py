"""Per-stream accumulation state

A StreamSession is owned by one producer. It folds unified chunks into
per-choice buffers so that tool-call argument fragments can be assembled
and adapters can keep their framing bookkeeping between chunks.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.exceptions import StreamClosedError
from ..ir.schema import (
    FinishReason,
    Role,
    UnifiedChoice,
    UnifiedMessage,
    UnifiedResponse,
    UnifiedStreamChunk,
    UnifiedToolCall,
    UnifiedUsage,
)

logger = logging.getLogger(__name__)


@dataclass
class ToolCallAccumulator:
    """Fragments of one streamed tool call"""

    index: int
    id: Optional[str] = None
    name: Optional[str] = None
    fragments: List[str] = field(default_factory=list)
    completed: bool = False

    @property
    def arguments_text(self) -> str:
        return "".join(self.fragments)

    def parsed_arguments(self) -> Optional[Dict[str, Any]]:
        """Arguments decoded so far, or None while the JSON is incomplete"""
        text = self.arguments_text
        if not text.strip():
            return {}
        try:
            value = json.loads(text)
        except json.JSONDecodeError:
            return None
        return value if isinstance(value, dict) else None

    def to_tool_call(self) -> Optional[UnifiedToolCall]:
        arguments = self.parsed_arguments()
        if arguments is None or not self.name:
            return None
        return UnifiedToolCall(id=self.id or "", name=self.name, arguments=arguments)


@dataclass
class ChoiceState:
    index: int
    content: List[str] = field(default_factory=list)
    reasoning: List[str] = field(default_factory=list)
    tool_calls: Dict[int, ToolCallAccumulator] = field(default_factory=dict)
    finish_reason: Optional[FinishReason] = None

    def tool(self, index: int) -> ToolCallAccumulator:
        if index not in self.tool_calls:
            self.tool_calls[index] = ToolCallAccumulator(index=index)
        return self.tool_calls[index]


class StreamSession:
    """Accumulated state of one logical stream"""

    def __init__(self, session_id: Optional[str] = None) -> None:
        self.session_id = session_id
        self.id = ""
        self.model = ""
        self.created: Optional[int] = None
        self.usage: Optional[UnifiedUsage] = None
        self.choices: Dict[int, ChoiceState] = {}
        self.closed = False
        self.chunk_count = 0
        # Adapter framing bookkeeping, keyed by whatever each adapter needs
        self.decoder_state: Dict[str, Any] = {}
        self.encoder_state: Dict[str, Any] = {}

    def choice(self, index: int = 0) -> ChoiceState:
        if index not in self.choices:
            self.choices[index] = ChoiceState(index=index)
        return self.choices[index]

    def apply(self, chunk: UnifiedStreamChunk) -> None:
        """Fold one unified chunk into the session

        Raises:
            StreamClosedError: If the session was already closed
        """
        if self.closed:
            raise StreamClosedError()
        self.chunk_count += 1

        if chunk.id and not self.id:
            self.id = chunk.id
        if chunk.model and not self.model:
            self.model = chunk.model
        if chunk.created is not None and self.created is None:
            self.created = chunk.created
        if chunk.usage is not None:
            self.usage = chunk.usage

        for stream_choice in chunk.choices:
            state = self.choice(stream_choice.index)
            delta = stream_choice.delta
            if delta.content:
                state.content.append(delta.content)
            if delta.reasoning_content:
                state.reasoning.append(delta.reasoning_content)
            for fragment in delta.tool_calls:
                accumulator = state.tool(fragment.index)
                if fragment.id:
                    accumulator.id = fragment.id
                if fragment.name:
                    accumulator.name = fragment.name
                if fragment.arguments:
                    accumulator.fragments.append(fragment.arguments)
            if stream_choice.finish_reason is not None:
                state.finish_reason = stream_choice.finish_reason
                for accumulator in state.tool_calls.values():
                    accumulator.completed = True

        if chunk.done:
            self.close()

    def close(self) -> None:
        """Mark the stream finished; later chunks are rejected"""
        for state in self.choices.values():
            for accumulator in state.tool_calls.values():
                accumulator.completed = True
        self.closed = True
        logger.debug("stream session %s closed after %d chunks", self.session_id or self.id, self.chunk_count)

    def tool_calls(self, choice_index: int = 0) -> List[UnifiedToolCall]:
        """Tool calls whose buffered arguments currently parse"""
        state = self.choices.get(choice_index)
        if state is None:
            return []
        calls = []
        for index in sorted(state.tool_calls):
            call = state.tool_calls[index].to_tool_call()
            if call is not None:
                calls.append(call)
        return calls

    def completed_tool_calls(self, choice_index: int = 0) -> List[UnifiedToolCall]:
        state = self.choices.get(choice_index)
        if state is None:
            return []
        calls = []
        for index in sorted(state.tool_calls):
            accumulator = state.tool_calls[index]
            if accumulator.completed:
                call = accumulator.to_tool_call()
                if call is not None:
                    calls.append(call)
        return calls

    def content(self, choice_index: int = 0) -> str:
        state = self.choices.get(choice_index)
        return "".join(state.content) if state else ""

    def to_response(self, provider: Optional[str] = None) -> UnifiedResponse:
        """Everything accumulated so far as a complete response"""
        choices = []
        for index in sorted(self.choices):
            state = self.choices[index]
            reasoning = "".join(state.reasoning)
            message = UnifiedMessage(
                role=Role.ASSISTANT,
                content="".join(state.content),
                tool_calls=self.tool_calls(index),
                reasoning_content=reasoning or None,
            )
            choices.append(UnifiedChoice(index=index, message=message, finish_reason=state.finish_reason))
        response = UnifiedResponse(id=self.id, provider=provider, model=self.model, choices=choices, usage=self.usage)
        if self.created is not None:
            response.created = self.created
        return response
