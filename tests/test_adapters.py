"""Provider specific conversion behavior for each adapter"""

import logging

import pytest

from llmbridge.config import Settings
from llmbridge.core.exceptions import (
    MalformedPayloadError,
    UnsupportedCapabilityError,
    ValidationError,
)
from llmbridge.fixtures.gemini import GEMINI_BLOCKED_RESPONSE
from llmbridge.ir.schema import (
    FinishReason,
    MediaSource,
    PartType,
    ReasoningEffort,
    Role,
    UnifiedMessage,
    UnifiedMessagePart,
    UnifiedRequest,
    UnifiedToolCall,
)
from llmbridge.utils.provider_registry import create_default_registry


CLAUDE_TOOL_RESULT_WITH_IMAGE = {
    "model": "claude-sonnet-4-20250514",
    "max_tokens": 256,
    "messages": [
        {"role": "user", "content": "What does the camera see?"},
        {
            "role": "assistant",
            "content": [{"type": "tool_use", "id": "toolu_snap", "name": "snapshot", "input": {}}],
        },
        {
            "role": "user",
            "content": [
                {
                    "type": "tool_result",
                    "tool_use_id": "toolu_snap",
                    "content": [
                        {"type": "text", "text": "here"},
                        {"type": "image", "source": {"type": "base64", "media_type": "image/png", "data": "iVBORw0KGgo="}},
                    ],
                }
            ],
        },
    ],
}


class TestOpenAIAdapter:
    def setup_method(self):
        self.registry = create_default_registry()
        self.adapter = self.registry.get_adapter("openai")

    def _request(self, messages, **extra):
        return dict({"model": "gpt-4o", "messages": messages}, **extra)

    def test_developer_role_is_system(self):
        ir = self.adapter.request_to_ir(
            self._request([{"role": "developer", "content": "Be terse."}, {"role": "user", "content": "Hi"}])
        )
        assert ir.messages[0].role == Role.SYSTEM
        assert self.adapter.request_from_ir(ir)["messages"][0] == {"role": "system", "content": "Be terse."}

    def test_legacy_function_messages_become_tool_messages(self):
        ir = self.adapter.request_to_ir(
            self._request(
                [
                    {"role": "user", "content": "Weather in Paris?"},
                    {
                        "role": "assistant",
                        "content": None,
                        "function_call": {"name": "get_weather", "arguments": '{"location":"Paris"}'},
                    },
                    {"role": "function", "name": "get_weather", "content": "sunny"},
                ]
            )
        )
        call = ir.messages[1].tool_calls[0]
        assert call.name == "get_weather"
        assert call.arguments == {"location": "Paris"}
        assert ir.messages[2].role == Role.TOOL
        assert ir.messages[2].tool_call_id == call.id

        result = self.adapter.request_from_ir(ir)
        assert result["messages"][2]["role"] == "tool"
        assert result["messages"][2]["tool_call_id"] == result["messages"][1]["tool_calls"][0]["id"]

    def test_stop_string_becomes_list(self):
        ir = self.adapter.request_to_ir(self._request([{"role": "user", "content": "Hi"}], stop="END"))
        assert ir.stop == ["END"]

    def test_file_id_is_unsupported(self):
        request = self._request(
            [{"role": "user", "content": [{"type": "file", "file": {"file_id": "file-abc"}}]}]
        )
        with pytest.raises(UnsupportedCapabilityError):
            self.adapter.request_to_ir(request)

    def test_inline_pdf_becomes_document(self):
        request = self._request(
            [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": "Summarize"},
                        {"type": "file", "file": {"file_data": "data:application/pdf;base64,JVBERi0=", "filename": "a.pdf"}},
                    ],
                }
            ]
        )
        result = self.registry.transform("openai", "claude", "request", request)
        document = result["messages"][0]["content"][1]
        assert document == {
            "type": "document",
            "source": {"type": "base64", "media_type": "application/pdf", "data": "JVBERi0="},
            "title": "a.pdf",
        }

    def test_malformed_tool_arguments(self):
        request = self._request(
            [
                {"role": "user", "content": "Hi"},
                {
                    "role": "assistant",
                    "tool_calls": [{"id": "call_1", "type": "function", "function": {"name": "f", "arguments": "{oops"}}],
                },
            ]
        )
        with pytest.raises(MalformedPayloadError):
            self.adapter.request_to_ir(request)

    def test_non_object_payload(self):
        with pytest.raises(MalformedPayloadError):
            self.adapter.request_to_ir("not json")

    def test_missing_model(self):
        with pytest.raises(ValidationError) as exc_info:
            self.adapter.validate({"messages": [{"role": "user", "content": "Hi"}]})
        assert "model is required" in exc_info.value.validation_errors

    def test_validate_returns_decoded_request(self):
        request = self.adapter.validate(self._request([{"role": "user", "content": "Hi"}]))
        assert request.model == "gpt-4o"
        assert [message.role for message in request.messages] == ["user"]

    def test_unknown_role(self):
        with pytest.raises(ValidationError):
            self.adapter.request_to_ir(self._request([{"role": "narrator", "content": "Once"}]))

    def test_stream_flag_only_when_set(self):
        assert "stream" not in self.adapter.request_from_ir(UnifiedRequest(model="m"))
        assert self.adapter.request_from_ir(UnifiedRequest(model="m", stream=True))["stream"] is True

    @pytest.mark.parametrize(
        "effort,expected",
        [
            ("minimal", ReasoningEffort.LOW),
            ("low", ReasoningEffort.LOW),
            ("high", ReasoningEffort.HIGH),
            ("none", None),
        ],
    )
    def test_reasoning_effort_levels(self, effort, expected):
        ir = self.adapter.request_to_ir(
            self._request([{"role": "user", "content": "Hi"}], reasoning_effort=effort)
        )
        assert ir.reasoning_effort == expected

    def test_minimal_effort_converts_to_claude(self):
        request = self._request([{"role": "user", "content": "Hi"}], reasoning_effort="minimal", max_tokens=4096)
        result = self.registry.transform("openai", "claude", "request", request)
        assert result["thinking"] == {"type": "enabled", "budget_tokens": 1024}

    def test_unknown_effort_is_dropped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="llmbridge"):
            ir = self.adapter.request_to_ir(
                self._request([{"role": "user", "content": "Hi"}], reasoning_effort="extreme")
            )
        assert ir.reasoning_effort is None
        assert "extreme" in caplog.text

    def test_tool_result_media_dropped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="llmbridge"):
            result = self.registry.transform("claude", "openai", "request", CLAUDE_TOOL_RESULT_WITH_IMAGE)
        assert result["messages"][-1] == {"role": "tool", "tool_call_id": "toolu_snap", "content": "here"}
        assert "dropping 1 part(s) from result toolu_snap" in caplog.text


class TestClaudeAdapter:
    def setup_method(self):
        self.registry = create_default_registry()
        self.adapter = self.registry.get_adapter("claude")

    def test_legacy_prompt(self):
        ir = self.adapter.request_to_ir(
            {
                "model": "claude-2.1",
                "max_tokens_to_sample": 100,
                "prompt": "You are a poet.\n\nHuman: Write a haiku\n\nAssistant:",
            }
        )
        assert [(m.role, m.content) for m in ir.messages] == [
            (Role.SYSTEM, "You are a poet."),
            (Role.USER, "Write a haiku"),
        ]
        assert ir.max_tokens == 100

    def test_missing_max_tokens(self):
        with pytest.raises(ValidationError) as exc_info:
            self.adapter.request_to_ir({"model": "claude-sonnet-4-20250514", "messages": [{"role": "user", "content": "Hi"}]})
        assert "max_tokens is required" in exc_info.value.validation_errors

    def test_default_max_tokens(self):
        ir = UnifiedRequest(model="m", messages=[UnifiedMessage(role=Role.USER, content="Hi")])
        assert self.adapter.request_from_ir(ir)["max_tokens"] == 1024

        custom = create_default_registry(Settings(default_max_tokens=2048)).get_adapter("claude")
        assert custom.request_from_ir(ir)["max_tokens"] == 2048

    def test_system_blocks(self):
        ir = self.adapter.request_to_ir(
            {
                "model": "claude-sonnet-4-20250514",
                "max_tokens": 10,
                "system": [{"type": "text", "text": "Be kind. "}, {"type": "text", "text": "Be brief."}],
                "messages": [{"role": "user", "content": "Hi"}],
            }
        )
        assert ir.messages[0].role == Role.SYSTEM
        assert ir.messages[0].content == "Be kind. Be brief."

    def test_thinking_budget_to_effort(self):
        request = {
            "model": "claude-sonnet-4-20250514",
            "max_tokens": 20000,
            "thinking": {"type": "enabled", "budget_tokens": 16384},
            "messages": [{"role": "user", "content": "Prove it"}],
        }
        assert self.adapter.request_to_ir(request).reasoning_effort == ReasoningEffort.HIGH
        assert self.registry.transform("claude", "openai", "request", request)["reasoning_effort"] == "high"

    def test_parallel_tool_use_disabled(self):
        request = {
            "model": "gpt-4o",
            "messages": [{"role": "user", "content": "Hi"}],
            "tools": [{"type": "function", "function": {"name": "f", "parameters": {"type": "object"}}}],
            "tool_choice": "auto",
            "parallel_tool_calls": False,
        }
        result = self.registry.transform("openai", "claude", "request", request)
        assert result["tool_choice"] == {"type": "auto", "disable_parallel_tool_use": True}
        assert self.adapter.request_to_ir(result).parallel_tool_calls is False

    def test_tool_choice_any(self):
        ir = UnifiedRequest(model="m", max_tokens=5, tool_choice={"mode": "required"})
        assert self.adapter.request_from_ir(ir)["tool_choice"] == {"type": "any"}

    def test_unknown_server_tool(self):
        request = {
            "model": "claude-sonnet-4-20250514",
            "max_tokens": 10,
            "messages": [{"role": "user", "content": "ls"}],
            "tools": [{"type": "bash_20250124", "name": "bash"}],
        }
        with pytest.raises(UnsupportedCapabilityError):
            self.adapter.request_to_ir(request)

    def test_thinking_not_sent_in_requests(self):
        ir = UnifiedRequest(
            model="m",
            max_tokens=5,
            messages=[
                UnifiedMessage(role=Role.USER, content="Hi"),
                UnifiedMessage(role=Role.ASSISTANT, content="Hello", reasoning_content="greet back"),
            ],
        )
        assert self.adapter.request_from_ir(ir)["messages"][1] == {"role": "assistant", "content": "Hello"}

    def test_error_response(self):
        result = self.registry.transform(
            "openai",
            "claude",
            "response",
            {"error": {"message": "Rate limit reached", "type": "rate_limit_error", "code": "rate_limit_exceeded"}},
        )
        assert result == {"type": "error", "error": {"type": "rate_limit_error", "message": "Rate limit reached"}}

    def test_unsupported_file_dropped_with_warning(self, caplog):
        audio = UnifiedMessagePart(
            type=PartType.FILE,
            source=MediaSource(data="UklGRg==", media_type="audio/wav"),
            filename="clip.wav",
        )
        ir = UnifiedRequest(
            model="m",
            max_tokens=5,
            messages=[UnifiedMessage(role=Role.USER, content="Transcribe", parts=[audio])],
        )
        with caplog.at_level(logging.WARNING, logger="llmbridge"):
            result = self.adapter.request_from_ir(ir)
        assert result["messages"] == [{"role": "user", "content": "Transcribe"}]
        assert "dropping audio/wav file clip.wav" in caplog.text


class TestGeminiAdapter:
    def setup_method(self):
        self.registry = create_default_registry()
        self.adapter = self.registry.get_adapter("gemini")

    def test_tool_result_without_call_name(self):
        ir = UnifiedRequest(
            model="m",
            messages=[
                UnifiedMessage(role=Role.USER, content="Hi"),
                UnifiedMessage(role=Role.TOOL, tool_call_id="call_orphan", content="42"),
            ],
        )
        with pytest.raises(UnsupportedCapabilityError):
            self.adapter.request_from_ir(ir)

    def test_tool_result_named_directly(self):
        ir = UnifiedRequest(
            model="m",
            messages=[UnifiedMessage(role=Role.TOOL, tool_call_id="call_1", name="lookup", content="42")],
        )
        part = self.adapter.request_from_ir(ir)["contents"][0]["parts"][0]
        assert part == {"functionResponse": {"name": "lookup", "response": {"content": "42"}}}

    def test_function_responses_link_in_call_order(self):
        request = {
            "contents": [
                {"role": "user", "parts": [{"text": "Paris and Rome?"}]},
                {
                    "role": "model",
                    "parts": [
                        {"functionCall": {"name": "get_weather", "args": {"location": "Paris"}}},
                        {"functionCall": {"name": "get_weather", "args": {"location": "Rome"}}},
                    ],
                },
                {
                    "role": "user",
                    "parts": [
                        {"functionResponse": {"name": "get_weather", "response": {"temp": 20}}},
                        {"functionResponse": {"name": "get_weather", "response": {"temp": 25}}},
                    ],
                },
            ]
        }
        ir = self.adapter.request_to_ir(request)
        calls = ir.messages[1].tool_calls
        results = [m for m in ir.messages if m.role == Role.TOOL]
        assert [r.tool_call_id for r in results] == [c.id for c in calls]
        assert [r.content for r in results] == ['{"temp": 20}', '{"temp": 25}']

    def test_safety_settings_when_enabled(self):
        ir = UnifiedRequest(model="m", messages=[UnifiedMessage(role=Role.USER, content="Hi")])
        assert "safetySettings" not in self.adapter.request_from_ir(ir)

        adapter = create_default_registry(Settings(gemini_disable_safety=True)).get_adapter("gemini")
        safety = adapter.request_from_ir(ir)["safetySettings"]
        assert len(safety) == 5
        assert {entry["threshold"] for entry in safety} == {"BLOCK_NONE"}

    def test_dynamic_thinking_budget(self):
        request = {
            "contents": [{"role": "user", "parts": [{"text": "Think"}]}],
            "generationConfig": {"thinkingConfig": {"thinkingBudget": -1}},
        }
        assert self.adapter.request_to_ir(request).reasoning_effort == ReasoningEffort.MEDIUM

    def test_zero_thinking_budget(self):
        request = {
            "contents": [{"role": "user", "parts": [{"text": "Quick"}]}],
            "generationConfig": {"thinkingConfig": {"thinkingBudget": 0}},
        }
        assert self.adapter.request_to_ir(request).reasoning_effort is None

    def test_blocked_prompt(self):
        ir = self.adapter.response_to_ir(GEMINI_BLOCKED_RESPONSE)
        assert ir.choices[0].finish_reason == FinishReason.CONTENT_FILTER
        assert ir.usage.prompt_tokens == 8

        result = self.registry.transform("gemini", "openai", "response", GEMINI_BLOCKED_RESPONSE)
        assert result["choices"][0]["finish_reason"] == "content_filter"

    def test_executable_code_rendered_as_fences(self):
        response = {
            "candidates": [
                {
                    "content": {
                        "role": "model",
                        "parts": [
                            {"executableCode": {"language": "PYTHON", "code": "print(1)"}},
                            {"codeExecutionResult": {"outcome": "OUTCOME_OK", "output": "1"}},
                        ],
                    },
                    "finishReason": "STOP",
                }
            ]
        }
        ir = self.adapter.response_to_ir(response)
        assert ir.choices[0].message.content == "\n```python\nprint(1)\n```\n\n```output\n1\n```\n"

    def test_any_with_single_name(self):
        request = {
            "contents": [{"role": "user", "parts": [{"text": "Weather?"}]}],
            "tools": [{"functionDeclarations": [{"name": "get_weather", "parameters": {"type": "object"}}]}],
            "toolConfig": {"functionCallingConfig": {"mode": "ANY", "allowedFunctionNames": ["get_weather"]}},
            "model": "gemini-2.5-flash",
        }
        result = self.registry.transform("gemini", "openai", "request", request)
        assert result["tool_choice"] == {"type": "function", "function": {"name": "get_weather"}}

    def test_response_schema_is_converted(self):
        ir = UnifiedRequest(
            model="m",
            messages=[UnifiedMessage(role=Role.USER, content="Hi")],
            response_format={"type": "json_schema", "json_schema": {"type": "object", "properties": {"a": {"type": ["string", "null"]}}}},
        )
        config = self.adapter.request_from_ir(ir)["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert config["responseSchema"] == {
            "type": "object",
            "properties": {"a": {"type": "string", "nullable": True}},
            "propertyOrdering": ["a"],
        }

    def test_tool_call_ids_not_emitted(self):
        ir = UnifiedRequest(
            model="m",
            messages=[
                UnifiedMessage(role=Role.USER, content="Hi"),
                UnifiedMessage(
                    role=Role.ASSISTANT,
                    tool_calls=[UnifiedToolCall(id="call_1", name="f", arguments={"x": 1})],
                ),
            ],
        )
        part = self.adapter.request_from_ir(ir)["contents"][1]["parts"][0]
        assert part == {"functionCall": {"name": "f", "args": {"x": 1}}}

    def test_empty_contents(self):
        with pytest.raises(ValidationError):
            self.adapter.request_to_ir({"contents": []})

    def test_tool_result_media_dropped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="llmbridge"):
            result = self.registry.transform("claude", "gemini", "request", CLAUDE_TOOL_RESULT_WITH_IMAGE)
        assert result["contents"][-1] == {
            "role": "user",
            "parts": [{"functionResponse": {"name": "snapshot", "response": {"content": "here"}}}],
        }
        assert "dropping 1 part(s) from result toolu_snap" in caplog.text
