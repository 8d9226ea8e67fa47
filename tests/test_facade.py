"""Test the JSON envelope façade"""

import json

from llmbridge.fixtures.claude import CLAUDE_CHAT_REQUEST, CLAUDE_STREAM_EVENTS
from llmbridge.fixtures.gemini import GEMINI_CHAT_REQUEST
from llmbridge.fixtures.openai import OPENAI_CHAT_REQUEST, OPENAI_CHAT_RESPONSE, OPENAI_STREAM_CHUNKS
from llmbridge.platform import facade
from llmbridge.streaming.session import StreamSession
from llmbridge.utils.provider_registry import create_default_registry


class TestTransformEnvelopes:
    def setup_method(self):
        self.registry = create_default_registry()

    def test_request_success(self):
        envelope = facade.transform_request("openai", "claude", json.dumps(OPENAI_CHAT_REQUEST), self.registry)
        assert envelope["success"] is True
        result = json.loads(envelope["result"])
        assert result["system"] == "You are a helpful assistant."

    def test_result_is_indented_json(self):
        envelope = facade.transform_request("openai", "gemini", json.dumps(OPENAI_CHAT_REQUEST), self.registry)
        assert envelope["result"].startswith("{\n  ")

    def test_response_success(self):
        envelope = facade.transform_response("openai", "claude", json.dumps(OPENAI_CHAT_RESPONSE), self.registry)
        assert envelope["success"] is True
        assert json.loads(envelope["result"])["stop_reason"] == "end_turn"

    def test_already_decoded_payload(self):
        envelope = facade.transform_request("claude", "openai", CLAUDE_CHAT_REQUEST, self.registry)
        assert envelope["success"] is True

    def test_unknown_provider(self):
        envelope = facade.transform_request("openai", "cohere", json.dumps(OPENAI_CHAT_REQUEST), self.registry)
        assert envelope["success"] is False
        assert "Unsupported provider: 'cohere'" in envelope["error"]

    def test_bad_json(self):
        envelope = facade.transform_request("openai", "claude", "{not json", self.registry)
        assert envelope["success"] is False
        assert envelope["error"].startswith("Invalid JSON payload")

    def test_invalid_request(self):
        envelope = facade.transform_request(
            "openai", "claude", json.dumps({"model": "gpt-4o", "messages": []}), self.registry
        )
        assert envelope["success"] is False
        assert "messages must not be empty" in envelope["error"]

    def test_chunk_with_session(self):
        session = StreamSession()
        results = [
            facade.transform_chunk(
                "openai",
                "claude",
                chunk if chunk == "[DONE]" else json.dumps(chunk),
                self.registry,
                session,
            )
            for chunk in OPENAI_STREAM_CHUNKS
        ]
        assert all(envelope["success"] for envelope in results)
        events = [event for envelope in results for event in json.loads(envelope["result"])]
        assert events[0]["type"] == "message_start"
        assert events[-1] == {"type": "message_stop"}
        assert session.closed

    def test_whole_stream(self):
        envelope = facade.transform_stream("claude", "openai", json.dumps(CLAUDE_STREAM_EVENTS), self.registry)
        assert envelope["success"] is True
        assert json.loads(envelope["result"])[-1] == "[DONE]"

    def test_stream_must_be_list(self):
        envelope = facade.transform_stream("claude", "openai", json.dumps({"type": "ping"}), self.registry)
        assert envelope["success"] is False


class TestValidation:
    def setup_method(self):
        self.registry = create_default_registry()

    def test_valid(self):
        envelope = facade.validate_request("gemini", json.dumps(GEMINI_CHAT_REQUEST), self.registry)
        assert envelope["success"] is True
        assert json.loads(envelope["result"]) == {"valid": True}

    def test_invalid(self):
        envelope = facade.validate_request("claude", json.dumps({"model": "claude-sonnet-4-20250514"}), self.registry)
        assert envelope["success"] is True
        result = json.loads(envelope["result"])
        assert result["valid"] is False
        assert result["error"]["code"] == "validation_error"

    def test_bad_json_is_invalid(self):
        envelope = facade.validate_request("openai", "{", self.registry)
        assert envelope["success"] is True
        assert json.loads(envelope["result"])["error"]["code"] == "malformed_payload"

    def test_unknown_provider(self):
        envelope = facade.validate_request("mistral", "{}", self.registry)
        assert envelope["success"] is False


class TestDiscovery:
    def setup_method(self):
        self.registry = create_default_registry()

    def test_supported_providers(self):
        envelope = facade.get_supported_providers(self.registry)
        assert json.loads(envelope["result"]) == ["claude", "gemini", "openai"]

    def test_available_transformations(self):
        pairs = json.loads(facade.get_available_transformations(self.registry)["result"])
        assert len(pairs) == 6
        assert {"source": "gemini", "target": "openai"} in pairs

    def test_example_requests_validate(self):
        for provider in ("openai", "claude", "gemini"):
            envelope = facade.get_example_request(provider, self.registry)
            assert envelope["success"] is True
            example = envelope["result"]
            validation = facade.validate_request(provider, example, self.registry)
            assert json.loads(validation["result"]) == {"valid": True}

    def test_example_alias(self):
        assert facade.get_example_request("anthropic", self.registry)["success"] is True

    def test_example_unknown(self):
        envelope = facade.get_example_request("mistral", self.registry)
        assert envelope == {"success": False, "error": "No example request for provider: mistral"}


class TestDetectProvider:
    def test_fixtures(self):
        assert facade.detect_provider(OPENAI_CHAT_REQUEST) == "openai"
        assert facade.detect_provider(CLAUDE_CHAT_REQUEST) == "claude"
        assert facade.detect_provider(GEMINI_CHAT_REQUEST) == "gemini"

    def test_claude_shape_without_model_hint(self):
        body = {"model": "my-model", "system": "Be kind.", "messages": [{"role": "user", "content": "Hi"}]}
        assert facade.detect_provider(body) == "claude"

    def test_openai_knobs_win_over_system(self):
        body = {"model": "my-model", "system": "x", "messages": [], "seed": 1}
        assert facade.detect_provider(body) == "openai"

    def test_model_names(self):
        assert facade.detect_provider({"model": "o3-mini"}) == "openai"
        assert facade.detect_provider({"model": "gemini-2.5-pro"}) == "gemini"

    def test_unknown(self):
        assert facade.detect_provider({}) is None
        assert facade.detect_provider(["messages"]) is None
