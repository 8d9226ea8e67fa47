"""Adapters for the supported LLM providers"""

from .claude import ClaudeAdapter
from .gemini import GeminiAdapter
from .openai import OpenAIAdapter

__all__ = ["ClaudeAdapter", "GeminiAdapter", "OpenAIAdapter"]
