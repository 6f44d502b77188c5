from __future__ import annotations

import os
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_CHARS_PER_INPUT_TOKEN,
    DEFAULT_CHARS_PER_OUTPUT_TOKEN,
    DEFAULT_CONTEXT_WINDOW,
    DEFAULT_GENERATION_MODEL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MIN_PROMPT_CHARS,
    DEFAULT_OVERHEAD_TOKENS,
    DEFAULT_TEMPERATURE,
    TRUNCATION_NOTE,
)


class TokenBudgetConfig(BaseModel):
    """Heuristics bounding prompt size against a model context window."""

    context_window: int = DEFAULT_CONTEXT_WINDOW
    chars_per_input_token: int = DEFAULT_CHARS_PER_INPUT_TOKEN
    chars_per_output_token: int = DEFAULT_CHARS_PER_OUTPUT_TOKEN
    overhead_tokens: int = DEFAULT_OVERHEAD_TOKENS
    min_prompt_chars: int = DEFAULT_MIN_PROMPT_CHARS
    truncation_note: str = TRUNCATION_NOTE


class GenerationConfig(BaseModel):
    """Defaults for generation steps and the model they resolve to."""

    default_model: str = DEFAULT_GENERATION_MODEL
    aliases: Dict[str, str] = Field(default_factory=dict)
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS


class HostConfig(BaseModel):
    """Host capability settings."""

    backend: Literal["local", "inmemory"] = "local"
    page_url: Optional[str] = None
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    http_timeout: Optional[float] = 30.0


class BrowseflowConfig(BaseModel):
    """Top-level configuration model."""

    log_level: str = "WARNING"
    budget: TokenBudgetConfig = Field(default_factory=TokenBudgetConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    library_url: Optional[str] = None


def load_config(path: Optional[str] = None) -> BrowseflowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to BROWSEFLOW_CONFIG env
            variable or 'browseflow.yaml' in the current directory.
    """

    config_path = path or os.getenv("BROWSEFLOW_CONFIG", "browseflow.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = BrowseflowConfig(**data)
    else:
        config = BrowseflowConfig()

    env_library_url = os.getenv("BROWSEFLOW_LIBRARY_URL")
    if env_library_url:
        config.library_url = env_library_url
    env_model = os.getenv("BROWSEFLOW_MODEL")
    if env_model:
        config.generation.default_model = env_model
    env_log_level = os.getenv("BROWSEFLOW_LOG_LEVEL")
    if env_log_level:
        config.log_level = env_log_level
    return config
