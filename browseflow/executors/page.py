"""Executors that touch the page the user is looking at."""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import urlsplit

from ..contracts import BaseStep, StepResult
from ..errors import CapabilityError, PermissionDeniedError, StepConfigurationError
from .context import ExecutionContext

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"^https?://")


def origin_pattern(url: str) -> str:
    """Return the permission pattern covering ``url``'s origin."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.hostname}/*"


def matches_filter(url: str, filter_path: str) -> bool:
    """Match ``url`` (scheme stripped) against a ``*``-only glob, anchored at the start.

    An empty filter or a bare ``*`` matches everything.
    """
    if filter_path in ("", "*"):
        return True
    pattern = re.escape(filter_path).replace(r"\*", ".*")
    return re.match(pattern, _SCHEME.sub("", url)) is not None


async def read_page(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    page = await ctx.host.active_page()
    if not page.url:
        raise CapabilityError("No active page found")

    origin = origin_pattern(page.url)
    if not await ctx.host.request_origin_permission(origin):
        raise PermissionDeniedError(origin)

    clean_url = _SCHEME.sub("", page.url)
    filter_path = step.config.filter_path
    if not matches_filter(page.url, filter_path):
        return StepResult(
            output="",
            log=f"Skipped: URL {clean_url} does not match pattern {filter_path}",
        )

    content = await ctx.host.read_page(page)
    if not content:
        raise CapabilityError("No page content found")
    logger.debug(f"Read {len(content)} characters from {page.url}")
    return StepResult(
        output=content, log="Current page content read and cleaned successfully"
    )


async def open_page(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    url = step.config.url
    if not url:
        raise StepConfigurationError("URL is required to open a webpage")
    await ctx.host.open_tab(url)
    return StepResult(output=upstream, log=f"Opened webpage: {url}")
