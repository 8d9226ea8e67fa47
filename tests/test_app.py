"""Test the HTTP endpoints"""

from fastapi.testclient import TestClient

from llmbridge.config import Settings
from llmbridge.fixtures.claude import CLAUDE_STREAM_EVENTS
from llmbridge.fixtures.gemini import GEMINI_CHAT_REQUEST
from llmbridge.fixtures.openai import OPENAI_CHAT_REQUEST, OPENAI_CHAT_RESPONSE
from llmbridge.platform.app import create_app
from llmbridge.utils.provider_registry import create_default_registry


class TestApp:
    def setup_method(self):
        settings = Settings()
        self.client = TestClient(create_app(settings, create_default_registry(settings)))

    def test_providers(self):
        response = self.client.get("/v1/providers")
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_transformations(self):
        response = self.client.get("/v1/transformations")
        assert response.status_code == 200

    def test_example(self):
        assert self.client.get("/v1/examples/gemini").status_code == 200
        assert self.client.get("/v1/examples/mistral").status_code == 400

    def test_transform_request(self):
        response = self.client.post(
            "/v1/transform/request",
            json={"source": "openai", "target": "gemini", "payload": OPENAI_CHAT_REQUEST},
        )
        assert response.status_code == 200
        assert '"systemInstruction"' in response.json()["result"]

    def test_transform_detects_source(self):
        response = self.client.post("/v1/transform/request", json={"target": "claude", "payload": GEMINI_CHAT_REQUEST})
        assert response.status_code == 200
        assert '"system"' in response.json()["result"]

    def test_transform_response(self):
        response = self.client.post(
            "/v1/transform/response",
            json={"source": "openai", "target": "claude", "payload": OPENAI_CHAT_RESPONSE},
        )
        assert response.status_code == 200

    def test_transform_chunk(self):
        response = self.client.post(
            "/v1/transform/chunk",
            json={"source": "claude", "target": "openai", "payload": CLAUDE_STREAM_EVENTS[0]},
        )
        assert response.status_code == 200

    def test_transform_stream(self):
        response = self.client.post(
            "/v1/transform/stream",
            json={"source": "claude", "target": "gemini", "chunks": CLAUDE_STREAM_EVENTS},
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_unknown_kind(self):
        response = self.client.post(
            "/v1/transform/embedding",
            json={"source": "openai", "target": "claude", "payload": OPENAI_CHAT_REQUEST},
        )
        assert response.status_code == 400
        assert "Unknown transformation kind" in response.json()["error"]
        assert response.json()["success"] is False

    def test_undetectable_source(self):
        response = self.client.post("/v1/transform/request", json={"target": "claude", "payload": {"foo": 1}})
        assert response.status_code == 400

    def test_validate_detects_provider(self):
        response = self.client.post("/v1/validate", json={"payload": OPENAI_CHAT_REQUEST})
        assert response.status_code == 200
        assert response.json()["result"].replace(" ", "").replace("\n", "") == '{"valid":true}'

    def test_unknown_target(self):
        response = self.client.post(
            "/v1/transform/request",
            json={"source": "openai", "target": "cohere", "payload": OPENAI_CHAT_REQUEST},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_body_validation(self):
        response = self.client.post("/v1/transform/request", json={"source": "openai"})
        assert response.status_code == 422
