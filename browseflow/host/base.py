"""Base host interface for browseflow executors."""

from __future__ import annotations

import abc
from typing import AsyncIterator, Callable, Dict, FrozenSet, Mapping, Optional, Union

import httpx

from ..contracts import AudioClip, GenerationRequest, PageInfo
from ..errors import UnsupportedCapabilityError

ProgressCallback = Callable[[float, float], None]
GenerationOutput = Union[str, AsyncIterator[str]]

TRANSCRIPTION = "transcription"
SPEECH_SYNTHESIS = "speech-synthesis"
AUDIO_CAPTURE = "audio-capture"


class BaseHost(metaclass=abc.ABCMeta):
    """Abstract host providing the side effects executors depend on.

    Optional capabilities (transcription, speech synthesis, audio capture) are
    listed in ``capabilities``; the default implementations raise
    :class:`UnsupportedCapabilityError`.
    """

    name: str = "host"
    capabilities: FrozenSet[str] = frozenset()

    def supports(self, capability: str) -> bool:
        return capability in self.capabilities

    async def close(self) -> None:
        """Release host resources (no-op by default)."""
        pass

    @abc.abstractmethod
    async def active_page(self) -> PageInfo:
        """Return the page currently shown to the user."""
        raise NotImplementedError

    @abc.abstractmethod
    async def request_origin_permission(self, origin: str) -> bool:
        """Ask for access to ``origin`` (``scheme://host/*``)."""
        raise NotImplementedError

    @abc.abstractmethod
    async def read_page(self, page: PageInfo) -> str:
        """Return the cleaned text content of ``page``."""
        raise NotImplementedError

    @abc.abstractmethod
    async def fetch(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        content: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Issue an HTTP request."""
        raise NotImplementedError

    @abc.abstractmethod
    async def open_tab(self, url: str) -> None:
        """Open ``url`` in a new tab or window."""
        raise NotImplementedError

    async def load_model(
        self, model: str, on_progress: Optional[ProgressCallback] = None
    ) -> None:
        """Prepare ``model`` for generation, reporting (percent, eta) progress."""
        if on_progress is not None:
            on_progress(100.0, 0.0)

    @abc.abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationOutput:
        """Generate text; streaming requests return an async iterator of deltas."""
        raise NotImplementedError

    async def start_audio_capture(self) -> None:
        raise UnsupportedCapabilityError("Audio capture")

    async def stop_audio_capture(self) -> AudioClip:
        raise UnsupportedCapabilityError("Audio capture")

    async def transcribe(self, audio: AudioClip, model: str) -> str:
        raise UnsupportedCapabilityError("Speech transcription")

    async def synthesize(self, text: str, model: str, voice: str) -> bytes:
        raise UnsupportedCapabilityError("Text-to-speech")
