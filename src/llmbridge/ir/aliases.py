# Built-in tool aliases shared by every adapter.
# Providers spell the same provider-executed tool differently; each spelling
# resolves to one BuiltinTool so that a built-in survives any conversion pair.

from __future__ import annotations

from typing import Any, Dict, Optional

from .schema import BuiltinTool


class BuiltinToolAliases:
    """Name and type aliases for provider built-in tools"""

    NAMES = {
        "google_search": BuiltinTool.WEB_SEARCH,
        "googlesearch": BuiltinTool.WEB_SEARCH,
        "google_search_retrieval": BuiltinTool.WEB_SEARCH,
        "web_search": BuiltinTool.WEB_SEARCH,
        "web_search_preview": BuiltinTool.WEB_SEARCH,
        "search": BuiltinTool.WEB_SEARCH,
        "code_execution": BuiltinTool.CODE_EXECUTION,
        "codeexecution": BuiltinTool.CODE_EXECUTION,
        "code_interpreter": BuiltinTool.CODE_EXECUTION,
    }

    # Versioned type tags such as web_search_20250305 match by prefix
    TYPE_PREFIXES = {
        "web_search": BuiltinTool.WEB_SEARCH,
        "google_search": BuiltinTool.WEB_SEARCH,
        "code_execution": BuiltinTool.CODE_EXECUTION,
        "code_interpreter": BuiltinTool.CODE_EXECUTION,
    }

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional[BuiltinTool]:
        if not name:
            return None
        return cls.NAMES.get(name.strip().lower())

    @classmethod
    def from_type(cls, tool_type: Optional[str]) -> Optional[BuiltinTool]:
        if not tool_type or tool_type in ("function", "custom"):
            return None
        normalized = tool_type.strip().lower()
        for prefix, builtin in cls.TYPE_PREFIXES.items():
            if normalized == prefix or normalized.startswith(prefix + "_"):
                return builtin
        return None

    @classmethod
    def resolve(cls, name: Optional[str], tool_type: Optional[str] = None) -> Optional[BuiltinTool]:
        """Identify a built-in by name first, then by type tag"""
        return cls.from_name(name) or cls.from_type(tool_type)


def resolve_builtin(name: Optional[str], tool_type: Optional[str] = None) -> Optional[BuiltinTool]:
    """Convenience wrapper around BuiltinToolAliases.resolve"""
    return BuiltinToolAliases.resolve(name, tool_type)


def builtin_from_gemini_tool(tool: Dict[str, Any]) -> Optional[BuiltinTool]:
    """Identify a Gemini tool entry keyed by its built-in name"""
    for key in tool:
        builtin = BuiltinToolAliases.from_name(key)
        if builtin is not None:
            return builtin
    return None
