"""Streaming state shared across chunk conversions"""

from .session import ChoiceState, StreamSession, ToolCallAccumulator

__all__ = ["ChoiceState", "StreamSession", "ToolCallAccumulator"]
