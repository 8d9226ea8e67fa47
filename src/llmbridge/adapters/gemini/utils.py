"""Utility functions for Gemini adapter"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from ...ir.schema import MediaSource, PartType, UnifiedMessagePart
from ...schemas import gemini as wire
from ...utils.media import guess_media_type, part_type_for_media

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_CIVIC_INTEGRITY",
)


def disabled_safety_settings() -> List[Dict[str, str]]:
    """safetySettings with every category set to BLOCK_NONE"""
    return [{"category": category, "threshold": "BLOCK_NONE"} for category in SAFETY_CATEGORIES]


def is_gcs_uri(url: str) -> bool:
    return url.startswith("gs://")


def is_http_url(url: str) -> bool:
    return urlparse(url).scheme in ("http", "https")


def media_part_to_ir(part: wire.Part) -> Optional[UnifiedMessagePart]:
    """Convert an inlineData or fileData part to an IR part"""
    if part.inline_data is not None:
        media_type = part.inline_data.mime_type
        return UnifiedMessagePart(
            type=part_type_for_media(media_type),
            source=MediaSource(data=part.inline_data.data, media_type=media_type),
        )
    if part.file_data is not None:
        uri = part.file_data.file_uri
        media_type = part.file_data.mime_type or guess_media_type(uri)
        return UnifiedMessagePart(
            type=part_type_for_media(media_type),
            source=MediaSource(url=uri, media_type=media_type),
        )
    return None


def media_part_from_ir(part: UnifiedMessagePart) -> Dict[str, Any]:
    """Convert an IR media part to inlineData (base64) or fileData (URI)"""
    source = part.source
    if source.is_inline:
        return {"inlineData": {"mimeType": source.media_type or "application/octet-stream", "data": source.data}}
    media_type = source.media_type or guess_media_type(source.url or "")
    if media_type is None:
        media_type = "image/jpeg" if part.type == PartType.IMAGE else "application/octet-stream"
    return {"fileData": {"mimeType": media_type, "fileUri": source.url}}


def wrap_function_response(content: str) -> Dict[str, Any]:
    """Gemini function responses must be JSON objects

    JSON object output is passed as is, a JSON array is wrapped under
    ``result`` and anything else under ``content``.
    """
    try:
        value = json.loads(content)
    except (json.JSONDecodeError, TypeError):
        return {"content": content}
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        return {"result": value}
    return {"content": content}


def unwrap_function_response(response: Optional[Dict[str, Any]]) -> str:
    """Inverse of wrap_function_response"""
    if not response:
        return ""
    if set(response) == {"content"} and isinstance(response["content"], str):
        return response["content"]
    if set(response) == {"result"} and isinstance(response["result"], list):
        return json.dumps(response["result"], ensure_ascii=False)
    return json.dumps(response, ensure_ascii=False)


def render_executable_code(code: wire.ExecutableCode) -> str:
    language = (code.language or "python").lower()
    if language == "language_unspecified":
        language = ""
    return f"\n```{language}\n{code.code}\n```\n"


def render_code_execution_result(result: wire.CodeExecutionResult) -> str:
    return f"\n```output\n{result.output or ''}\n```\n"


def is_candidate_token_count_inclusive(
    prompt_tokens: int,
    candidates_tokens: int,
    thoughts_tokens: int,
    total_tokens: Optional[int],
) -> bool:
    """Check whether candidatesTokenCount already includes thinking tokens

    Most Gemini models report thoughts separately, so the total is prompt +
    candidates + thoughts. Some report thoughts inside the candidates
    count, which shows up as prompt + candidates == total.
    """
    if not thoughts_tokens or total_tokens is None:
        return False
    return prompt_tokens + candidates_tokens == total_tokens
