"""Test idempotency of IR <-> Claude conversions"""

from llmbridge.converters import RequestConverter, ResponseConverter
from llmbridge.fixtures.claude import (
    CLAUDE_CACHE_RESPONSE,
    CLAUDE_CHAT_REQUEST,
    CLAUDE_CHAT_RESPONSE,
    CLAUDE_ERROR_RESPONSE,
    CLAUDE_MULTIMODAL_REQUEST,
    CLAUDE_THINKING_REQUEST,
    CLAUDE_THINKING_RESPONSE,
    CLAUDE_TOOL_REQUEST,
    CLAUDE_TOOL_RESPONSE,
    CLAUDE_TOOL_RESULT_REQUEST,
    CLAUDE_WEB_SEARCH_REQUEST,
)
from llmbridge.utils.provider_registry import create_default_registry


class TestClaudeRequestIdempotency:
    """Test Claude request format conversion idempotency"""

    def test_claude_request_idempotency(self):
        converter = RequestConverter(create_default_registry())
        test_cases = [
            ("Simple Chat Request", CLAUDE_CHAT_REQUEST),
            ("Tool Request", CLAUDE_TOOL_REQUEST),
            ("Tool Result Request", CLAUDE_TOOL_RESULT_REQUEST),
            ("Multimodal Request", CLAUDE_MULTIMODAL_REQUEST),
            ("Web Search Request", CLAUDE_WEB_SEARCH_REQUEST),
            ("Thinking Request", CLAUDE_THINKING_REQUEST),
        ]

        for name, data in test_cases:
            is_idempotent = converter.check_idempotency(data, "claude")
            assert is_idempotent, f"Failed idempotency test: {name}"


class TestClaudeResponseIdempotency:
    """Test Claude response format conversion idempotency"""

    def test_claude_response_idempotency(self):
        converter = ResponseConverter(create_default_registry())
        test_cases = [
            ("Simple Chat Response", CLAUDE_CHAT_RESPONSE),
            ("Tool Response", CLAUDE_TOOL_RESPONSE),
            ("Thinking Response", CLAUDE_THINKING_RESPONSE),
            ("Cache Response", CLAUDE_CACHE_RESPONSE),
            ("Error Response", CLAUDE_ERROR_RESPONSE),
        ]

        for name, data in test_cases:
            is_idempotent = converter.check_idempotency(data, "claude")
            assert is_idempotent, f"Failed idempotency test: {name}"
