"""Host factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import BrowseflowConfig, load_config
from .base import AUDIO_CAPTURE, SPEECH_SYNTHESIS, TRANSCRIPTION, BaseHost
from .inmemory import InMemoryHost


def get_host(
    backend: Optional[str] = None, config: Optional[BrowseflowConfig] = None
) -> BaseHost:
    """Factory function to get the configured host."""

    config = config or load_config()
    backend = (backend or os.getenv("BROWSEFLOW_HOST") or config.host.backend).lower()

    if backend == "inmemory":
        return InMemoryHost(page_url=config.host.page_url or "https://example.com/")
    elif backend == "local":
        from .local import LocalHost

        return LocalHost(config=config.host, generation=config.generation)
    else:
        raise ValueError(f"Unsupported host backend: {backend}")


__all__ = [
    "AUDIO_CAPTURE",
    "SPEECH_SYNTHESIS",
    "TRANSCRIPTION",
    "BaseHost",
    "InMemoryHost",
    "get_host",
]
