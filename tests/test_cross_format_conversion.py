"""Cross-format conversion tests

Payloads are converted between every pair of providers and the parts every
provider can represent (roles, text, tool calls and their arguments,
built-in tools) are checked on the other side.
"""

import json

import pytest

from llmbridge.core.exceptions import UnsupportedCapabilityError
from llmbridge.fixtures.claude import (
    CLAUDE_CHAT_REQUEST,
    CLAUDE_TOOL_RESULT_REQUEST,
    CLAUDE_WEB_SEARCH_REQUEST,
)
from llmbridge.fixtures.gemini import GEMINI_CHAT_REQUEST, GEMINI_SEARCH_REQUEST
from llmbridge.fixtures.openai import (
    OPENAI_CHAT_REQUEST,
    OPENAI_MULTIMODAL_REQUEST,
    OPENAI_TOOL_REQUEST,
    OPENAI_TOOL_RESPONSE,
    OPENAI_TOOL_RESULT_REQUEST,
)
from llmbridge.ir.schema import (
    BuiltinTool,
    Role,
    UnifiedMessage,
    UnifiedRequest,
    UnifiedTool,
    UnifiedToolCall,
)
from llmbridge.utils.provider_registry import create_default_registry

PROVIDERS = ["openai", "claude", "gemini"]
PAIRS = [(source, target) for source in PROVIDERS for target in PROVIDERS if source != target]

GEMINI_CHAT_REQUEST_WITH_MODEL = dict(GEMINI_CHAT_REQUEST, model="gemini-2.5-flash")

CHAT_REQUESTS = {
    "openai": OPENAI_CHAT_REQUEST,
    "claude": CLAUDE_CHAT_REQUEST,
    "gemini": GEMINI_CHAT_REQUEST_WITH_MODEL,
}


def _turns(ir: UnifiedRequest):
    return [(message.role, message.content) for message in ir.messages]


class TestSimpleChatScenario:
    """System + user request converted to each provider and back"""

    def setup_method(self):
        self.registry = create_default_registry()
        self.ir = UnifiedRequest(
            model="m",
            messages=[
                UnifiedMessage(role=Role.SYSTEM, content="You are helpful."),
                UnifiedMessage(role=Role.USER, content="Hi"),
            ],
            max_tokens=50,
        )

    @pytest.mark.parametrize("provider", PROVIDERS)
    def test_messages_survive_native_round_trip(self, provider):
        adapter = self.registry.get_adapter(provider)
        native = adapter.request_from_ir(self.ir)
        back = adapter.request_to_ir(native)

        assert _turns(back) == [(Role.SYSTEM, "You are helpful."), (Role.USER, "Hi")]
        assert back.model == "m"
        assert back.max_tokens == 50

    @pytest.mark.parametrize("provider", PROVIDERS)
    def test_from_ir_is_stable(self, provider):
        adapter = self.registry.get_adapter(provider)
        first = adapter.request_from_ir(self.ir)
        second = adapter.request_from_ir(adapter.request_to_ir(first))
        assert first == second


class TestPairwiseRoundTrip:
    """A -> B -> A keeps message count, role sequence and text"""

    def setup_method(self):
        self.registry = create_default_registry()

    @pytest.mark.parametrize("source,target", PAIRS)
    def test_chat_round_trip(self, source, target):
        original = CHAT_REQUESTS[source]
        converted = self.registry.transform(source, target, "request", original)
        back = self.registry.transform(target, source, "request", converted)

        adapter = self.registry.get_adapter(source)
        assert _turns(adapter.request_to_ir(back)) == _turns(adapter.request_to_ir(original))

    def test_claude_through_openai_is_exact(self):
        converted = self.registry.transform("claude", "openai", "request", CLAUDE_CHAT_REQUEST)
        back = self.registry.transform("openai", "claude", "request", converted)
        assert back == CLAUDE_CHAT_REQUEST

    def test_openai_to_claude_system_prompt(self):
        result = self.registry.transform("openai", "claude", "request", OPENAI_CHAT_REQUEST)
        assert result["system"] == "You are a helpful assistant."
        assert result["messages"] == [{"role": "user", "content": "Hello, how are you?"}]
        assert result["max_tokens"] == 100
        assert result["temperature"] == 0.7

    def test_openai_to_gemini_system_instruction(self):
        result = self.registry.transform("openai", "gemini", "request", OPENAI_CHAT_REQUEST)
        assert result["systemInstruction"] == {"parts": [{"text": "You are a helpful assistant."}]}
        assert result["contents"] == [{"role": "user", "parts": [{"text": "Hello, how are you?"}]}]
        assert result["generationConfig"] == {"maxOutputTokens": 100, "temperature": 0.7}


class TestToolConversion:
    """Tool declarations, calls and results across providers"""

    def setup_method(self):
        self.registry = create_default_registry()

    def test_tool_declaration_to_claude(self):
        result = self.registry.transform("openai", "claude", "request", OPENAI_TOOL_REQUEST)
        tool = result["tools"][0]
        assert tool["name"] == "get_weather"
        assert tool["input_schema"] == OPENAI_TOOL_REQUEST["tools"][0]["function"]["parameters"]
        assert result["tool_choice"] == {"type": "auto"}

    def test_tool_declaration_to_gemini(self):
        result = self.registry.transform("openai", "gemini", "request", OPENAI_TOOL_REQUEST)
        declaration = result["tools"][0]["functionDeclarations"][0]
        assert declaration["name"] == "get_weather"
        assert declaration["parameters"] == OPENAI_TOOL_REQUEST["tools"][0]["function"]["parameters"]
        assert result["toolConfig"] == {"functionCallingConfig": {"mode": "AUTO"}}

    def test_tool_results_to_claude(self):
        result = self.registry.transform("openai", "claude", "request", OPENAI_TOOL_RESULT_REQUEST)
        messages = result["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant", "user"]
        assert messages[1]["content"] == [
            {"type": "tool_use", "id": "call_abc123", "name": "get_weather", "input": {"location": "Beijing"}}
        ]
        assert messages[2]["content"] == [
            {
                "type": "tool_result",
                "tool_use_id": "call_abc123",
                "content": '{"temperature":22,"condition":"sunny"}',
            }
        ]

    def test_tool_results_to_gemini(self):
        result = self.registry.transform("openai", "gemini", "request", OPENAI_TOOL_RESULT_REQUEST)
        contents = result["contents"]
        assert [c["role"] for c in contents] == ["user", "model", "user"]
        assert contents[1]["parts"] == [{"functionCall": {"name": "get_weather", "args": {"location": "Beijing"}}}]
        assert contents[2]["parts"] == [
            {"functionResponse": {"name": "get_weather", "response": {"temperature": 22, "condition": "sunny"}}}
        ]

    def test_claude_tool_result_to_openai(self):
        result = self.registry.transform("claude", "openai", "request", CLAUDE_TOOL_RESULT_REQUEST)
        messages = result["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant", "tool"]
        assert messages[2] == {"role": "tool", "tool_call_id": "toolu_01A", "content": "22 degrees and sunny"}

    def test_tool_result_and_text_share_one_claude_turn(self):
        request = dict(OPENAI_TOOL_RESULT_REQUEST)
        request["messages"] = request["messages"] + [{"role": "user", "content": "And tomorrow?"}]
        result = self.registry.transform("openai", "claude", "request", request)
        last = result["messages"][-1]
        assert last["role"] == "user"
        assert [block["type"] for block in last["content"]] == ["tool_result", "text"]


class TestToolArgumentFidelity:
    """Arguments survive every provider's encoding unchanged"""

    ARGUMENTS = {
        "city": "Zürich",
        "days": [1, 2, 3],
        "options": {"metric": True, "note": None, "ratio": 0.5},
    }

    def setup_method(self):
        self.registry = create_default_registry()
        self.ir = UnifiedRequest(
            model="m",
            max_tokens=100,
            messages=[
                UnifiedMessage(role=Role.USER, content="Forecast please"),
                UnifiedMessage(
                    role=Role.ASSISTANT,
                    tool_calls=[UnifiedToolCall(id="call_1", name="get_forecast", arguments=self.ARGUMENTS)],
                ),
                UnifiedMessage(role=Role.TOOL, tool_call_id="call_1", content="snow"),
            ],
        )

    @pytest.mark.parametrize("source,target", PAIRS)
    def test_request_arguments(self, source, target):
        payload = self.registry.get_adapter(source).request_from_ir(self.ir)
        converted = self.registry.transform(source, target, "request", payload)
        back = self.registry.get_adapter(target).request_to_ir(converted)

        assistant = [m for m in back.messages if m.role == Role.ASSISTANT][0]
        assert assistant.tool_calls[0].name == "get_forecast"
        assert assistant.tool_calls[0].arguments == self.ARGUMENTS

        tool = [m for m in back.messages if m.role == Role.TOOL][0]
        assert tool.content == "snow"
        assert tool.tool_call_id == assistant.tool_calls[0].id

    @pytest.mark.parametrize("target", ["claude", "gemini"])
    def test_response_arguments(self, target):
        converted = self.registry.transform("openai", target, "response", OPENAI_TOOL_RESPONSE)
        back = self.registry.transform(target, "openai", "response", converted)

        original = OPENAI_TOOL_RESPONSE["choices"][0]["message"]["tool_calls"][0]["function"]
        call = back["choices"][0]["message"]["tool_calls"][0]["function"]
        assert call["name"] == original["name"]
        assert json.loads(call["arguments"]) == json.loads(original["arguments"])
        assert back["choices"][0]["finish_reason"] == "tool_calls"


class TestBuiltinToolAliasing:
    """Search tools become each provider's native search declaration"""

    def setup_method(self):
        self.registry = create_default_registry()

    def _request(self, tool_name):
        return UnifiedRequest(
            model="m",
            messages=[UnifiedMessage(role=Role.USER, content="news?")],
            tools=[UnifiedTool(name=tool_name)],
        )

    @pytest.mark.parametrize("alias", ["google_search", "web_search", "search"])
    def test_aliases_become_native_search(self, alias):
        ir = self._request(alias)
        openai = self.registry.get_adapter("openai").request_from_ir(ir)
        claude = self.registry.get_adapter("claude").request_from_ir(ir)
        gemini = self.registry.get_adapter("gemini").request_from_ir(ir)

        assert openai["web_search_options"] == {}
        assert "tools" not in openai
        assert claude["tools"] == [{"type": "web_search_20250305", "name": "web_search"}]
        assert gemini["tools"] == [{"googleSearch": {}}]

    def test_claude_web_search_to_gemini(self):
        result = self.registry.transform("claude", "gemini", "request", CLAUDE_WEB_SEARCH_REQUEST)
        # max_uses is a Claude option and is not carried to Gemini
        assert result["tools"] == [{"googleSearch": {}}]

    def test_gemini_search_to_claude(self):
        result = self.registry.transform("gemini", "claude", "request", GEMINI_SEARCH_REQUEST)
        assert result["tools"] == [{"type": "web_search_20250305", "name": "web_search"}]

    def test_openai_function_named_like_builtin(self):
        request = {
            "model": "gpt-4o",
            "messages": [{"role": "user", "content": "news?"}],
            "tools": [{"type": "function", "function": {"name": "google_search", "parameters": {}}}],
        }
        ir = self.registry.get_adapter("openai").request_to_ir(request)
        assert ir.tools[0].builtin == BuiltinTool.WEB_SEARCH

    def test_code_execution_to_gemini_and_claude(self):
        ir = self._request("code_execution")
        assert self.registry.get_adapter("gemini").request_from_ir(ir)["tools"] == [{"codeExecution": {}}]
        assert self.registry.get_adapter("claude").request_from_ir(ir)["tools"] == [
            {"type": "code_execution_20250522", "name": "code_execution"}
        ]

    def test_code_execution_dropped_for_openai(self):
        result = self.registry.get_adapter("openai").request_from_ir(self._request("code_interpreter"))
        assert "tools" not in result
        assert "web_search_options" not in result

    def test_unknown_claude_server_tool_is_unsupported(self):
        request = dict(CLAUDE_CHAT_REQUEST, tools=[{"type": "computer_20250124", "name": "computer"}])
        with pytest.raises(UnsupportedCapabilityError):
            self.registry.transform("claude", "openai", "request", request)


class TestMultimodalConversion:
    def setup_method(self):
        self.registry = create_default_registry()

    def test_image_url_to_claude(self):
        result = self.registry.transform("openai", "claude", "request", OPENAI_MULTIMODAL_REQUEST)
        content = result["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "What is in this image?"}
        assert content[1] == {"type": "image", "source": {"type": "url", "url": "https://example.com/cat.png"}}

    def test_image_url_to_gemini(self):
        result = self.registry.transform("openai", "gemini", "request", OPENAI_MULTIMODAL_REQUEST)
        parts = result["contents"][0]["parts"]
        assert parts[0] == {"text": "What is in this image?"}
        assert parts[1] == {"fileData": {"mimeType": "image/png", "fileUri": "https://example.com/cat.png"}}

    def test_inline_image_to_openai(self):
        request = {
            "model": "claude-sonnet-4-20250514",
            "max_tokens": 100,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "image", "source": {"type": "base64", "media_type": "image/png", "data": "AAAA"}},
                        {"type": "text", "text": "Describe"},
                    ],
                }
            ],
        }
        result = self.registry.transform("claude", "openai", "request", request)
        content = result["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "Describe"}
        assert content[1] == {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}}

    def test_document_url_is_unsupported_for_openai(self):
        request = {
            "model": "claude-sonnet-4-20250514",
            "max_tokens": 100,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "document", "source": {"type": "url", "url": "https://example.com/a.pdf"}}],
                }
            ],
        }
        with pytest.raises(UnsupportedCapabilityError):
            self.registry.transform("claude", "openai", "request", request)
