"""Runtime settings for llmbridge, loadable from YAML"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_ENV_VAR = "LLMBRIDGE_CONFIG"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

logger = logging.getLogger(__name__)


def _default_budgets() -> Dict[str, int]:
    return {"low": 1024, "medium": 4096, "high": 16384}


class Settings(BaseModel):
    """Conversion knobs shared by all adapters."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    default_max_tokens: int = Field(
        default=1024,
        gt=0,
        description="max_tokens used when a Claude request is built from IR without one",
    )
    tool_call_id_prefix: str = "call_"
    reasoning_budgets: Dict[str, int] = Field(default_factory=_default_budgets)
    gemini_disable_safety: bool = Field(
        default=False,
        description="Emit BLOCK_NONE safetySettings on every Gemini request",
    )
    log_level: str = "INFO"
    json_indent: Optional[int] = 2

    @field_validator("reasoning_budgets")
    @classmethod
    def _check_budgets(cls, value: Dict[str, int]) -> Dict[str, int]:
        missing = {"low", "medium", "high"} - set(value)
        if missing:
            raise ValueError(f"reasoning_budgets missing levels: {sorted(missing)}")
        if not value["low"] < value["medium"] < value["high"]:
            raise ValueError("reasoning_budgets must increase from low to high")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return level

    def budget_for_effort(self, effort: str) -> int:
        """Token budget for a reasoning effort level"""
        return self.reasoning_budgets.get(effort, self.reasoning_budgets["medium"])

    def effort_for_budget(self, budget: int) -> str:
        """Reasoning effort level that best describes a token budget

        A budget is classified by the midpoint between adjacent levels, so
        each configured budget maps back to its own level.
        """
        low, medium, high = (
            self.reasoning_budgets["low"],
            self.reasoning_budgets["medium"],
            self.reasoning_budgets["high"],
        )
        if budget < (low + medium) // 2:
            return "low"
        if budget < (medium + high) // 2:
            return "medium"
        return "high"


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from a YAML file

    Args:
        path: YAML file path. Falls back to the LLMBRIDGE_CONFIG environment
            variable, then to built-in defaults.

    Returns:
        Parsed Settings
    """
    source = path or os.environ.get(CONFIG_ENV_VAR)
    if not source:
        return Settings()

    config_path = Path(source)
    with config_path.open("r", encoding="utf-8") as handle:
        data: Any = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    logger.debug("Loaded settings from %s", config_path)
    return Settings(**data)


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Install a basic root handler unless the host application already did"""
    settings = settings or Settings()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger("llmbridge").setLevel(settings.log_level)
