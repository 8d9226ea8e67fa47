"""Provider enumeration with IDE autocomplete support"""

from __future__ import annotations

from enum import Enum
from typing import Union


class Provider(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"


# Alternate spellings accepted wherever a provider name is parsed
PROVIDER_ALIASES = {
    "anthropic": Provider.CLAUDE.value,
    "google": Provider.GEMINI.value,
    "google_ai": Provider.GEMINI.value,
}


def normalize_provider(name: Union[str, Provider]) -> str:
    """Lower-case a provider name and resolve aliases"""
    if isinstance(name, Provider):
        return name.value
    key = name.strip().lower()
    return PROVIDER_ALIASES.get(key, key)
