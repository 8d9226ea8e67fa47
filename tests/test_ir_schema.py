"""Test the unified IR models and their invariants"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from llmbridge.ir.schema import (
    MediaSource,
    OpaqueSchema,
    PartType,
    Role,
    SchemaMapping,
    ToolChoice,
    UnifiedChoice,
    UnifiedError,
    UnifiedMessage,
    UnifiedMessagePart,
    UnifiedRequest,
    UnifiedResponse,
    UnifiedTool,
    UnifiedToolCall,
    UnifiedUsage,
    unwrap_schema,
    wrap_schema,
)


class TestUnifiedMessage:
    def test_text_parts_fold_into_content(self):
        message = UnifiedMessage(
            role=Role.USER,
            content="Look: ",
            parts=[
                UnifiedMessagePart(type=PartType.TEXT, text="a cat"),
                UnifiedMessagePart(type=PartType.IMAGE, source=MediaSource(url="https://example.com/cat.png")),
                UnifiedMessagePart(type=PartType.TEXT, text="!"),
            ],
        )
        assert message.content == "Look: a cat!"
        assert [part.type for part in message.parts] == [PartType.IMAGE]

    def test_tool_calls_only_on_assistant(self):
        call = UnifiedToolCall(id="call_1", name="f")
        UnifiedMessage(role=Role.ASSISTANT, tool_calls=[call])
        with pytest.raises(PydanticValidationError):
            UnifiedMessage(role=Role.USER, tool_calls=[call])

    def test_tool_message_requires_call_id(self):
        with pytest.raises(PydanticValidationError):
            UnifiedMessage(role=Role.TOOL, content="result")

    def test_call_id_only_on_tool_messages(self):
        with pytest.raises(PydanticValidationError):
            UnifiedMessage(role=Role.USER, content="hi", tool_call_id="call_1")

    def test_media_part_requires_source(self):
        with pytest.raises(PydanticValidationError):
            UnifiedMessagePart(type=PartType.IMAGE)

    def test_text_part_requires_text(self):
        with pytest.raises(PydanticValidationError):
            UnifiedMessagePart(type=PartType.TEXT)


class TestMediaSource:
    def test_inline(self):
        source = MediaSource(data="AAAA", media_type="image/png")
        assert source.is_inline
        assert source.as_data_url() == "data:image/png;base64,AAAA"

    def test_url(self):
        source = MediaSource(url="https://example.com/a.pdf")
        assert not source.is_inline
        assert source.as_data_url() == "https://example.com/a.pdf"

    @pytest.mark.parametrize("kwargs", [{}, {"data": "AAAA", "url": "https://example.com/a.png"}])
    def test_exactly_one_source(self, kwargs):
        with pytest.raises(PydanticValidationError):
            MediaSource(**kwargs)


class TestToolSchemas:
    def test_mapping_schema(self):
        tool = UnifiedTool(name="f", parameters={"type": "object"})
        assert isinstance(tool.parameters, SchemaMapping)
        assert tool.parameters_json == {"type": "object"}

    def test_opaque_schema(self):
        tool = UnifiedTool(name="f", parameters=True)
        assert isinstance(tool.parameters, OpaqueSchema)
        assert tool.parameters_json is True

    def test_wrap_none(self):
        assert wrap_schema(None) is None
        assert unwrap_schema(None) is None

    def test_tagged_value_is_kept(self):
        tool = UnifiedTool(name="f", parameters={"kind": "opaque", "value": [1, 2]})
        assert isinstance(tool.parameters, OpaqueSchema)
        assert tool.parameters_json == [1, 2]

    def test_config_is_scoped_to_its_provider(self):
        tool = UnifiedTool(name="web_search", config={"max_uses": 5}, config_source="claude")
        assert tool.config_for("claude") == {"max_uses": 5}
        assert tool.config_for("gemini") == {}


class TestToolChoice:
    def test_named_tool_requires_name(self):
        with pytest.raises(PydanticValidationError):
            ToolChoice(mode="tool")

    def test_named_tool(self):
        assert ToolChoice(mode="tool", name="f").name == "f"

    def test_unknown_mode(self):
        with pytest.raises(PydanticValidationError):
            ToolChoice(mode="sometimes")


class TestUnifiedRequest:
    def test_system_texts(self):
        request = UnifiedRequest(
            system="Be brief.",
            messages=[
                UnifiedMessage(role=Role.SYSTEM, content="Be kind."),
                UnifiedMessage(role=Role.USER, content="Hi"),
            ],
        )
        assert request.system_texts() == ["Be brief.", "Be kind."]
        assert [m.role for m in request.non_system_messages()] == [Role.USER]


class TestUnifiedUsage:
    def test_total_must_match(self):
        with pytest.raises(PydanticValidationError):
            UnifiedUsage(prompt_tokens=10, completion_tokens=5, total_tokens=20)

    def test_cache_within_prompt(self):
        with pytest.raises(PydanticValidationError):
            UnifiedUsage(prompt_tokens=10, completion_tokens=0, total_tokens=10, cache_read_tokens=11)

    def test_reasoning_within_completion(self):
        with pytest.raises(PydanticValidationError):
            UnifiedUsage(prompt_tokens=0, completion_tokens=5, total_tokens=5, reasoning_tokens=6)

    def test_negative_counts_rejected(self):
        with pytest.raises(PydanticValidationError):
            UnifiedUsage(prompt_tokens=-1, completion_tokens=1, total_tokens=0)

    def test_build_attributes_surplus_to_prompt(self):
        usage = UnifiedUsage.build(10, 5, 20)
        assert (usage.prompt_tokens, usage.completion_tokens, usage.total_tokens) == (15, 5, 20)

    def test_build_ignores_short_total(self):
        usage = UnifiedUsage.build(10, 5, 12)
        assert usage.total_tokens == 15

    def test_build_without_total(self):
        usage = UnifiedUsage.build(3, 4, cache_read_tokens=2)
        assert usage.total_tokens == 7
        assert usage.cache_read_tokens == 2


class TestUnifiedResponse:
    def test_error_excludes_choices(self):
        with pytest.raises(PydanticValidationError):
            UnifiedResponse(
                error=UnifiedError(message="boom"),
                choices=[UnifiedChoice(message=UnifiedMessage(role=Role.ASSISTANT))],
            )

    def test_error_only(self):
        response = UnifiedResponse(error=UnifiedError(type="rate_limit_error", message="slow down", code=429))
        assert response.choices == []
        assert response.error.code == 429
