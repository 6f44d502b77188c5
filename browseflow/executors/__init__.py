"""Step executors and the default registry."""

from __future__ import annotations

from .audio import audio_input, speech_synthesis, transcription
from .conditional import conditional
from .context import ExecutionContext
from .generation import generation_agent
from .output_format import output_format
from .page import open_page, read_page
from .registry import Executor, ExecutorRegistry
from .string_ops import string_op
from .text import iterator, pass_through_store, system_prompt, text_input, text_output
from .webhook import webhook

DEFAULT_EXECUTORS = {
    "read-page": read_page,
    "system-prompt": system_prompt,
    "generation-agent": generation_agent,
    "pass-through-store": pass_through_store,
    "text-input": text_input,
    "text-output": text_output,
    "audio-input": audio_input,
    "transcription": transcription,
    "speech-synthesis": speech_synthesis,
    "string-op": string_op,
    "conditional": conditional,
    "webhook": webhook,
    "open-page": open_page,
    "output-format": output_format,
    "iterator": iterator,
}


def create_default_registry() -> ExecutorRegistry:
    """Build a registry covering every built-in step kind."""
    return ExecutorRegistry(handlers=DEFAULT_EXECUTORS)


__all__ = [
    "DEFAULT_EXECUTORS",
    "ExecutionContext",
    "Executor",
    "ExecutorRegistry",
    "create_default_registry",
]
