"""Shared enumerations"""

from .provider import PROVIDER_ALIASES, Provider, normalize_provider

__all__ = ["PROVIDER_ALIASES", "Provider", "normalize_provider"]
