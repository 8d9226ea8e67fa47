"""Request transformation between Gemini generateContent and the unified IR"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ...core.exceptions import UnsupportedCapabilityError
from ...ir.aliases import builtin_from_gemini_tool, resolve_builtin
from ...ir.schema import (
    BuiltinTool,
    ReasoningEffort,
    ResponseFormat,
    Role,
    ToolChoice,
    UnifiedMessage,
    UnifiedMessagePart,
    UnifiedRequest,
    UnifiedTool,
    UnifiedToolCall,
    wrap_schema,
)
from ...schemas import gemini as wire
from .schema_converter import convert_json_schema_to_gemini
from .utils import (
    disabled_safety_settings,
    media_part_from_ir,
    media_part_to_ir,
    render_code_execution_result,
    render_executable_code,
    unwrap_function_response,
    wrap_function_response,
)

if TYPE_CHECKING:
    from .adapter import GeminiAdapter

logger = logging.getLogger(__name__)

BUILTIN_KEYS = {
    BuiltinTool.WEB_SEARCH: "googleSearch",
    BuiltinTool.CODE_EXECUTION: "codeExecution",
}

_CHOICE_MODES = {"AUTO": "auto", "NONE": "none", "ANY": "required", "VALIDATED": "auto"}


class GeminiRequestTransformer:
    """Convert generateContent requests to and from the unified IR"""

    def __init__(self, adapter: "GeminiAdapter") -> None:
        self.adapter = adapter

    @property
    def settings(self):
        return self.adapter.settings

    # Gemini -> IR

    def to_ir(self, request: wire.GenerateContentRequest) -> UnifiedRequest:
        messages: List[UnifiedMessage] = []
        if request.system_instruction is not None:
            system = "".join(p.text or "" for p in request.system_instruction.parts)
            if system:
                messages.append(UnifiedMessage(role=Role.SYSTEM, content=system))

        # Gemini links function responses to calls by name, in call order
        pending: Dict[str, List[str]] = defaultdict(list)
        for content in request.contents:
            messages.extend(self._content_to_ir(content, pending))

        config = request.generation_config or wire.GenerationConfig()
        return UnifiedRequest(
            model=request.model or "",
            messages=messages,
            max_tokens=config.max_output_tokens,
            temperature=config.temperature,
            top_p=config.top_p,
            top_k=config.top_k,
            frequency_penalty=config.frequency_penalty,
            presence_penalty=config.presence_penalty,
            seed=config.seed,
            stop=config.stop_sequences,
            tools=self._tools_to_ir(request.tools or []),
            tool_choice=self._tool_choice_to_ir(request.tool_config),
            response_format=self._response_format_to_ir(config),
            reasoning_effort=self._effort_to_ir(config.thinking_config),
        )

    def _content_to_ir(self, content: wire.Content, pending: Dict[str, List[str]]) -> List[UnifiedMessage]:
        role = Role.ASSISTANT if content.role == "model" else Role.USER
        results: List[UnifiedMessage] = []
        texts: List[str] = []
        reasoning: List[str] = []
        parts: List[UnifiedMessagePart] = []
        tool_calls: List[UnifiedToolCall] = []

        for part in content.parts:
            if part.function_call is not None:
                call_id = part.function_call.id or self.adapter.new_tool_call_id()
                pending[part.function_call.name].append(call_id)
                tool_calls.append(
                    UnifiedToolCall(
                        id=call_id,
                        name=part.function_call.name,
                        arguments=part.function_call.args or {},
                    )
                )
            elif part.function_response is not None:
                response = part.function_response
                queue = pending.get(response.name)
                call_id = response.id or (queue.pop(0) if queue else self.adapter.new_tool_call_id())
                results.append(
                    UnifiedMessage(
                        role=Role.TOOL,
                        content=unwrap_function_response(response.response),
                        name=response.name,
                        tool_call_id=call_id,
                    )
                )
            elif part.text is not None:
                if part.thought and role == Role.ASSISTANT:
                    reasoning.append(part.text)
                else:
                    texts.append(part.text)
            elif part.executable_code is not None:
                texts.append(render_executable_code(part.executable_code))
            elif part.code_execution_result is not None:
                texts.append(render_code_execution_result(part.code_execution_result))
            else:
                media = media_part_to_ir(part)
                if media is not None:
                    parts.append(media)

        if texts or parts or tool_calls or reasoning or not results:
            results.append(
                UnifiedMessage(
                    role=role,
                    content="".join(texts),
                    parts=parts,
                    tool_calls=tool_calls,
                    reasoning_content="".join(reasoning) or None,
                )
            )
        return results

    def _tools_to_ir(self, tools: List[wire.Tool]) -> List[UnifiedTool]:
        result: List[UnifiedTool] = []
        for tool in tools:
            for declaration in tool.function_declarations or []:
                builtin = resolve_builtin(declaration.name)
                if builtin is not None:
                    result.append(UnifiedTool(name=declaration.name, builtin=builtin))
                    continue
                parameters = declaration.parameters
                if parameters is None:
                    parameters = declaration.parameters_json_schema
                result.append(
                    UnifiedTool(
                        name=declaration.name,
                        description=declaration.description,
                        parameters=wrap_schema(parameters),
                    )
                )
            extras = tool.model_extra or {}
            builtin = builtin_from_gemini_tool(extras)
            if builtin is not None:
                options = next(iter(extras.values()), None)
                result.append(
                    UnifiedTool(
                        name=builtin.value,
                        builtin=builtin,
                        config=dict(options) if isinstance(options, dict) else {},
                        config_source=self.adapter.provider_name,
                    )
                )
            elif extras:
                raise UnsupportedCapabilityError(
                    f"Gemini tool {sorted(extras)}", self.adapter.provider_name
                )
        return result

    @staticmethod
    def _tool_choice_to_ir(config: Optional[wire.ToolConfig]) -> Optional[ToolChoice]:
        if config is None or config.function_calling_config is None:
            return None
        calling = config.function_calling_config
        allowed = calling.allowed_function_names or []
        if calling.mode == "ANY" and len(allowed) == 1:
            return ToolChoice(mode="tool", name=allowed[0])
        return ToolChoice(mode=_CHOICE_MODES.get(calling.mode or "AUTO", "auto"))

    @staticmethod
    def _response_format_to_ir(config: wire.GenerationConfig) -> Optional[ResponseFormat]:
        if config.response_mime_type != "application/json":
            return None
        schema = config.response_json_schema or config.response_schema
        if schema:
            return ResponseFormat(type="json_schema", json_schema=schema)
        return ResponseFormat(type="json_object")

    def _effort_to_ir(self, thinking: Optional[wire.ThinkingConfig]) -> Optional[ReasoningEffort]:
        if thinking is None or thinking.thinking_budget is None or thinking.thinking_budget == 0:
            return None
        if thinking.thinking_budget < 0:
            # -1 asks Gemini for a dynamic budget
            return ReasoningEffort.MEDIUM
        return ReasoningEffort(self.settings.effort_for_budget(thinking.thinking_budget))

    # IR -> Gemini

    def from_ir(self, ir: UnifiedRequest) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if ir.model:
            result["model"] = ir.model
        result["contents"] = self._contents_from_ir(ir.non_system_messages())

        system_texts = ir.system_texts()
        if system_texts:
            result["systemInstruction"] = {"parts": [{"text": "\n".join(system_texts)}]}

        generation_config = self._generation_config_from_ir(ir)
        if generation_config:
            result["generationConfig"] = generation_config

        tools = self._tools_from_ir(ir.tools)
        if tools:
            result["tools"] = tools
        if ir.tool_choice is not None:
            result["toolConfig"] = {"functionCallingConfig": self._tool_choice_from_ir(ir.tool_choice)}
        if self.settings.gemini_disable_safety:
            result["safetySettings"] = disabled_safety_settings()
        return result

    def _contents_from_ir(self, messages: List[UnifiedMessage]) -> List[Dict[str, Any]]:
        contents: List[Dict[str, Any]] = []
        call_names: Dict[str, str] = {}
        tool_turn: Optional[Dict[str, Any]] = None

        for message in messages:
            if message.role == Role.TOOL:
                name = call_names.get(message.tool_call_id or "") or message.name
                if not name:
                    raise UnsupportedCapabilityError(
                        "tool result without a matching function call",
                        self.adapter.provider_name,
                        {"tool_call_id": message.tool_call_id},
                    )
                if message.parts:
                    logger.warning(
                        "Gemini function responses carry JSON only; dropping %d part(s) from result %s",
                        len(message.parts),
                        message.tool_call_id,
                    )
                part = {"functionResponse": {"name": name, "response": wrap_function_response(message.content)}}
                if tool_turn is None:
                    tool_turn = {"role": "user", "parts": []}
                    contents.append(tool_turn)
                tool_turn["parts"].append(part)
                continue

            parts: List[Dict[str, Any]] = []
            if message.content:
                parts.append({"text": message.content})
            parts.extend(media_part_from_ir(part) for part in message.parts)
            for call in message.tool_calls:
                call_names[call.id] = call.name
                parts.append({"functionCall": {"name": call.name, "args": call.arguments}})

            if message.role == Role.USER and tool_turn is not None:
                tool_turn["parts"].extend(parts)
                tool_turn = None
                continue
            tool_turn = None
            contents.append({"role": "model" if message.role == Role.ASSISTANT else "user", "parts": parts})
        return contents

    def _generation_config_from_ir(self, ir: UnifiedRequest) -> Dict[str, Any]:
        config: Dict[str, Any] = {}
        if ir.max_tokens is not None:
            config["maxOutputTokens"] = ir.max_tokens
        if ir.temperature is not None:
            config["temperature"] = ir.temperature
        if ir.top_p is not None:
            config["topP"] = ir.top_p
        if ir.top_k is not None:
            config["topK"] = ir.top_k
        if ir.stop:
            config["stopSequences"] = list(ir.stop)
        if ir.seed is not None:
            config["seed"] = ir.seed
        if ir.presence_penalty is not None:
            config["presencePenalty"] = ir.presence_penalty
        if ir.frequency_penalty is not None:
            config["frequencyPenalty"] = ir.frequency_penalty

        fmt = ir.response_format
        if fmt is not None and fmt.type != "text":
            config["responseMimeType"] = "application/json"
            if fmt.json_schema:
                config["responseSchema"] = convert_json_schema_to_gemini(fmt.json_schema)

        if ir.reasoning_effort is not None:
            config["thinkingConfig"] = {
                "thinkingBudget": self.settings.budget_for_effort(ir.reasoning_effort.value)
            }
        return config

    def _tools_from_ir(self, tools: List[UnifiedTool]) -> List[Dict[str, Any]]:
        declarations = []
        builtins = []
        for tool in tools:
            builtin = self.adapter.builtin_for(tool)
            if builtin is not None:
                builtins.append({BUILTIN_KEYS[builtin]: tool.config_for(self.adapter.provider_name)})
                continue
            declaration: Dict[str, Any] = {"name": tool.name}
            if tool.description is not None:
                declaration["description"] = tool.description
            if tool.parameters is not None:
                declaration["parameters"] = tool.parameters_json
            declarations.append(declaration)

        result: List[Dict[str, Any]] = []
        if declarations:
            result.append({"functionDeclarations": declarations})
        result.extend(builtins)
        return result

    @staticmethod
    def _tool_choice_from_ir(choice: ToolChoice) -> Dict[str, Any]:
        if choice.mode == "tool":
            return {"mode": "ANY", "allowedFunctionNames": [choice.name]}
        return {"mode": {"auto": "AUTO", "none": "NONE", "required": "ANY"}[choice.mode]}
