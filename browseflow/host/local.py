"""Desktop host backed by httpx and pydantic-ai."""

from __future__ import annotations

import asyncio
import fnmatch
import logging
import webbrowser
from typing import Any, AsyncIterator, Callable, Dict, Mapping, Optional

import httpx
from pydantic_ai import Agent

from ..config import GenerationConfig, HostConfig
from ..contracts import GenerationRequest, PageInfo
from ..errors import CapabilityError
from .base import BaseHost, GenerationOutput, ProgressCallback
from .html import clean_html

logger = logging.getLogger(__name__)

# pydantic-ai model names look like "provider:model"; "test" is its offline model.
_OFFLINE_MODELS = {"test"}


class LocalHost(BaseHost):
    """Host running outside a browser.

    The "active page" is the configured ``page_url``; it is fetched over HTTP
    and reduced to text. Origin permission is granted when the origin matches
    one of ``allowed_origins``. Generation goes through a pydantic-ai agent, so
    browser model names must be mapped to provider models in
    ``generation.aliases``. Transcription and speech synthesis are not
    available.
    """

    name = "local"

    def __init__(
        self,
        config: Optional[HostConfig] = None,
        generation: Optional[GenerationConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        opener: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.config = config or HostConfig()
        self.generation = generation or GenerationConfig()
        self._client = httpx.AsyncClient(
            timeout=self.config.http_timeout,
            transport=transport,
            follow_redirects=True,
        )
        self._opener = opener or webbrowser.open_new_tab

    async def close(self) -> None:
        await self._client.aclose()

    async def active_page(self) -> PageInfo:
        if not self.config.page_url:
            raise CapabilityError("No active page found; set host.page_url")
        return PageInfo(url=self.config.page_url)

    async def request_origin_permission(self, origin: str) -> bool:
        granted = any(
            fnmatch.fnmatch(origin, pattern) for pattern in self.config.allowed_origins
        )
        logger.debug(f"Permission for {origin}: {'granted' if granted else 'denied'}")
        return granted

    async def read_page(self, page: PageInfo) -> str:
        response = await self._client.get(page.url)
        response.raise_for_status()
        return clean_html(response.text)

    async def fetch(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        content: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        return await self._client.request(
            method.upper(), url, params=params, content=content, headers=headers
        )

    async def open_tab(self, url: str) -> None:
        await asyncio.to_thread(self._opener, url)

    def resolve_model(self, model: str) -> str:
        resolved = self.generation.aliases.get(model, model)
        if ":" not in resolved and resolved not in _OFFLINE_MODELS:
            raise CapabilityError(
                f"Model {model} is not available in this host; "
                "map it to a provider model in generation.aliases"
            )
        return resolved

    async def load_model(
        self, model: str, on_progress: Optional[ProgressCallback] = None
    ) -> None:
        self.resolve_model(model)
        await super().load_model(model, on_progress)

    async def generate(self, request: GenerationRequest) -> GenerationOutput:
        agent = Agent(
            self.resolve_model(request.model),
            system_prompt=request.system_prompt or (),
        )
        settings = {"temperature": request.temperature, "max_tokens": request.max_tokens}
        if not request.stream:
            result = await agent.run(request.prompt, model_settings=settings)
            return str(result.output)
        return self._stream(agent, request.prompt, settings)

    async def _stream(
        self, agent: Agent, prompt: str, settings: Dict[str, Any]
    ) -> AsyncIterator[str]:
        async with agent.run_stream(prompt, model_settings=settings) as result:
            async for delta in result.stream_text(delta=True):
                yield delta
