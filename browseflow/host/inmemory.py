"""In-memory host for testing and dry runs."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Callable, Dict, List, Mapping, Optional, Sequence

import httpx

from ..contracts import AudioClip, GenerationRequest, PageInfo
from ..errors import UnsupportedCapabilityError
from .base import (
    AUDIO_CAPTURE,
    SPEECH_SYNTHESIS,
    TRANSCRIPTION,
    BaseHost,
    GenerationOutput,
    ProgressCallback,
)

HttpHandler = Callable[[httpx.Request], httpx.Response]


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError(f"No route to {request.url}", request=request)


class InMemoryHost(BaseHost):
    """Scripted host: canned page, HTTP answers and generation chunks.

    Every side effect is recorded so tests can inspect what executors asked
    for. HTTP requests go through ``httpx.MockTransport`` with ``http_handler``;
    without a handler every request fails with a connection error.
    """

    name = "inmemory"

    def __init__(
        self,
        page_url: str = "https://example.com/",
        page_content: str = "",
        granted_origins: Optional[Sequence[str]] = None,
        http_handler: Optional[HttpHandler] = None,
        chunks: Optional[Sequence[str]] = None,
        transcriber: Optional[Callable[[AudioClip, str], str]] = None,
        synthesizer: Optional[Callable[[str, str, str], bytes]] = None,
        captured_audio: Optional[AudioClip] = None,
    ) -> None:
        self.page = PageInfo(url=page_url, tab_id=1)
        self.page_content = page_content
        self.granted_origins = None if granted_origins is None else set(granted_origins)
        self.chunks: List[str] = list(chunks or [])
        self._transcriber = transcriber
        self._synthesizer = synthesizer
        self._captured_audio = captured_audio
        self._client = httpx.AsyncClient(
            transport=httpx.MockTransport(http_handler or _unreachable)
        )

        capabilities = set()
        if transcriber is not None:
            capabilities.add(TRANSCRIPTION)
        if synthesizer is not None:
            capabilities.add(SPEECH_SYNTHESIS)
        if captured_audio is not None:
            capabilities.add(AUDIO_CAPTURE)
        self.capabilities = frozenset(capabilities)

        self.permission_requests: List[str] = []
        self.opened_tabs: List[str] = []
        self.requests: List[httpx.Request] = []
        self.generation_requests: List[GenerationRequest] = []
        self.loaded_models: List[str] = []
        self.capturing = False

    async def close(self) -> None:
        await self._client.aclose()

    async def active_page(self) -> PageInfo:
        return self.page

    async def request_origin_permission(self, origin: str) -> bool:
        self.permission_requests.append(origin)
        return self.granted_origins is None or origin in self.granted_origins

    async def read_page(self, page: PageInfo) -> str:
        return self.page_content

    async def fetch(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        content: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        request = self._client.build_request(
            method.upper(), url, params=params, content=content, headers=headers
        )
        self.requests.append(request)
        return await self._client.send(request)

    async def open_tab(self, url: str) -> None:
        self.opened_tabs.append(url)

    async def load_model(
        self, model: str, on_progress: Optional[ProgressCallback] = None
    ) -> None:
        self.loaded_models.append(model)
        await super().load_model(model, on_progress)

    async def generate(self, request: GenerationRequest) -> GenerationOutput:
        self.generation_requests.append(request)
        if not request.stream:
            return "".join(self.chunks)
        return self._stream()

    async def _stream(self) -> AsyncIterator[str]:
        for chunk in self.chunks:
            await asyncio.sleep(0)
            yield chunk

    async def start_audio_capture(self) -> None:
        if self._captured_audio is None:
            raise UnsupportedCapabilityError("Audio capture")
        self.capturing = True

    async def stop_audio_capture(self) -> AudioClip:
        if self._captured_audio is None:
            raise UnsupportedCapabilityError("Audio capture")
        self.capturing = False
        return self._captured_audio

    async def transcribe(self, audio: AudioClip, model: str) -> str:
        if self._transcriber is None:
            return await super().transcribe(audio, model)
        return self._transcriber(audio, model)

    async def synthesize(self, text: str, model: str, voice: str) -> bytes:
        if self._synthesizer is None:
            return await super().synthesize(text, model, voice)
        return self._synthesizer(text, model, voice)
